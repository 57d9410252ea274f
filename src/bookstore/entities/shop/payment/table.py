"""Payment database table model."""

from datetime import datetime

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class PaymentTable(EntityTable, table=True):
    __tablename__ = "payments"

    order_id: str = Field(foreign_key="orders.id", unique=True, index=True)
    method: str
    amount: int
    status: str = Field(index=True)
    transaction_id: str | None = Field(default=None, unique=True, index=True)
    bank_code: str | None = None
    card_number: str | None = None
    paid_at: datetime | None = Field(default=None, index=True)
    refunded_at: datetime | None = None
    notes: str | None = None
