"""Cart database table models."""

from datetime import datetime

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class CartTable(EntityTable, table=True):
    __tablename__ = "carts"

    customer_id: str = Field(foreign_key="customers.id", unique=True, index=True)


class CartItemTable(EntityTable, table=True):
    __tablename__ = "cart_items"

    cart_id: str = Field(foreign_key="carts.id", index=True)
    type: str
    book_id: str | None = Field(default=None, foreign_key="books.id", index=True)
    combo_id: str | None = Field(default=None, foreign_key="combos.id", index=True)
    quantity: int
    price: int
    added_at: datetime
    reserved_until: datetime | None = Field(default=None, index=True)
