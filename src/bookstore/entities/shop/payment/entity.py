"""Entity: Payment."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from src.bookstore.entities.core._base import Entity


class PaymentMethod(StrEnum):
    COD = "COD"
    BANK_TRANSFER = "bank_transfer"
    MOMO = "momo"
    ZALOPAY = "zalopay"
    CREDIT_CARD = "credit_card"


class PaymentStatus(StrEnum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(Entity):
    """Settlement record of an order; one per order."""

    order_id: str
    method: PaymentMethod = PaymentMethod.COD
    amount: int = Field(ge=0)
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = None
    bank_code: str | None = None
    card_number: str | None = Field(default=None, description="Masked, last four digits only")
    paid_at: datetime | None = None
    refunded_at: datetime | None = None
    notes: str | None = None


class PaymentProcess(BaseModel):
    method: PaymentMethod | None = None
    bank_code: str | None = None
    card_number: str | None = None


class PaymentWebhook(BaseModel):
    """Gateway callback; the payment is found by transaction id, else by order."""

    transaction_id: str | None = None
    order_id: str | None = None
    status: PaymentStatus

    @model_validator(mode="after")
    def _identifies_payment(self) -> "PaymentWebhook":
        if not self.transaction_id and not self.order_id:
            raise ValueError("transaction_id or order_id is required")
        return self


class PaymentRefund(BaseModel):
    reason: str | None = None


class RevenuePoint(BaseModel):
    period: str
    revenue: int
    transactions: int
