"""Category database table model."""

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class CategoryTable(EntityTable, table=True):
    __tablename__ = "categories"

    name: str = Field(unique=True, index=True)
    slug: str = Field(unique=True, index=True)
    description: str | None = None
    image: str | None = None
    is_active: bool = Field(default=True, index=True)
