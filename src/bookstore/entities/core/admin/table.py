"""Admin database table model."""

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class AdminTable(EntityTable, table=True):
    __tablename__ = "admins"

    email: str = Field(unique=True, index=True)
    password_hash: str
    full_name: str
    phone: str | None = None
    avatar: str
