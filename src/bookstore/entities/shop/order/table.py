"""Order database table models."""

from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from src.bookstore.entities.core._base import EntityTable


class OrderTable(EntityTable, table=True):
    __tablename__ = "orders"

    order_number: str = Field(unique=True, index=True)
    customer_id: str = Field(foreign_key="customers.id", index=True)
    subtotal: int
    shipping_fee: int = 0
    discount: int = 0
    total_price: int
    shipping_address: dict = Field(sa_column=Column(JSON, nullable=False))
    status: str = Field(index=True)
    payment_method: str
    notes: str | None = None
    cancel_reason: str | None = None
    return_reason: str | None = None
    return_requested_at: datetime | None = None
    confirmed_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    returned_at: datetime | None = None


class OrderItemTable(SQLModel, table=True):
    __tablename__ = "order_items"

    order_id: str = Field(foreign_key="orders.id", primary_key=True)
    position: int = Field(primary_key=True)
    type: str
    book_id: str | None = Field(default=None, foreign_key="books.id", index=True)
    combo_id: str | None = Field(default=None, foreign_key="combos.id", index=True)
    title: str
    author: str | None = None
    image: str | None = None
    quantity: int
    price: int
    sold_copy_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
