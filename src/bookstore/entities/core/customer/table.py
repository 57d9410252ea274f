"""Customer database table model."""

from datetime import date

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class CustomerTable(EntityTable, table=True):
    __tablename__ = "customers"

    email: str = Field(unique=True, index=True)
    password_hash: str
    full_name: str = Field(index=True)
    phone: str | None = None
    avatar: str
    date_of_birth: date | None = None
    gender: str | None = None
    is_active: bool = Field(default=True, index=True)
