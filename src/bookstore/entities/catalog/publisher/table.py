"""Publisher database table model."""

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class PublisherTable(EntityTable, table=True):
    __tablename__ = "publishers"

    name: str = Field(unique=True, index=True)
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    website: str | None = None
