"""Combo database table models."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.bookstore.entities.core._base import EntityTable


class ComboTable(EntityTable, table=True):
    __tablename__ = "combos"

    name: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    description: str | None = None
    image: str | None = None
    combo_price: int
    sold_count: int = 0
    is_active: bool = Field(default=True, index=True)
    start_date: datetime | None = None
    end_date: datetime | None = None


class ComboItemTable(SQLModel, table=True):
    """Book lines of a combo; replaced wholesale when the combo changes."""

    __tablename__ = "combo_items"

    combo_id: str = Field(foreign_key="combos.id", primary_key=True)
    book_id: str = Field(foreign_key="books.id", primary_key=True, index=True)
    position: int = 0
    quantity: int = 1
