"""Entity package: Payment."""

from .entity import (
    Payment,
    PaymentMethod,
    PaymentProcess,
    PaymentRefund,
    PaymentStatus,
    PaymentWebhook,
    RevenuePoint,
)
from .repository import PaymentRepository
from .table import PaymentTable

__all__ = [
    "Payment",
    "PaymentMethod",
    "PaymentProcess",
    "PaymentRefund",
    "PaymentRepository",
    "PaymentStatus",
    "PaymentTable",
    "PaymentWebhook",
    "RevenuePoint",
]
