"""Entity package: Order."""

from .entity import (
    ALLOWED_TRANSITIONS,
    COUNTED_STATUSES,
    Order,
    OrderCancel,
    OrderCreate,
    OrderCustomer,
    OrderDetail,
    OrderItem,
    OrderQuery,
    OrderStatus,
    OrderStatusUpdate,
    ReturnRequest,
    ReviewableItem,
    ShippingAddress,
)
from .repository import OrderRepository
from .table import OrderItemTable, OrderTable

__all__ = [
    "ALLOWED_TRANSITIONS",
    "COUNTED_STATUSES",
    "Order",
    "OrderCancel",
    "OrderCreate",
    "OrderCustomer",
    "OrderDetail",
    "OrderItem",
    "OrderItemTable",
    "OrderQuery",
    "OrderRepository",
    "OrderStatus",
    "OrderStatusUpdate",
    "OrderTable",
    "ReturnRequest",
    "ReviewableItem",
    "ShippingAddress",
]
