"""Entity: Order."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from src.bookstore.entities.core._base import Entity
from src.bookstore.entities.shop.cart.entity import ItemType
from src.bookstore.entities.shop.payment.entity import PaymentMethod


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    SHIPPING = "shipping"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    RETURNED = "returned"


# Moves an admin may make through the status endpoint; returns go through
# the dedicated confirm-return flow.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.SHIPPING, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPING: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.RETURNED: frozenset(),
}

# Statuses in which purchase counters have already been applied.
COUNTED_STATUSES = frozenset(
    {OrderStatus.CONFIRMED, OrderStatus.PREPARING, OrderStatus.SHIPPING, OrderStatus.DELIVERED}
)


class OrderItem(BaseModel):
    """A purchased line with a snapshot of what was bought."""

    type: ItemType
    book_id: str | None = None
    combo_id: str | None = None
    title: str = Field(description="Book title or combo name at purchase time")
    author: str | None = None
    image: str | None = None
    quantity: int = Field(ge=1)
    price: int = Field(ge=0)
    sold_copy_ids: list[str] = Field(default_factory=list)

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


class ShippingAddress(BaseModel):
    recipient_name: str = Field(min_length=1)
    phone: str = Field(pattern=r"^\d{10,11}$")
    province: str = Field(min_length=1)
    district: str = Field(min_length=1)
    ward: str = Field(min_length=1)
    detail_address: str = Field(min_length=1)

    @property
    def full_address(self) -> str:
        return f"{self.detail_address}, {self.ward}, {self.district}, {self.province}"


class Order(Entity):
    order_number: str
    customer_id: str
    items: list[OrderItem] = Field(default_factory=list)
    subtotal: int = Field(ge=0)
    shipping_fee: int = Field(default=0, ge=0)
    discount: int = Field(default=0, ge=0)
    total_price: int = Field(ge=0)
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.COD
    notes: str | None = None
    cancel_reason: str | None = None
    return_reason: str | None = None
    return_requested_at: datetime | None = None
    confirmed_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    returned_at: datetime | None = None

    def can_move_to(self, status: OrderStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    @property
    def copy_ids(self) -> list[str]:
        return [copy_id for item in self.items for copy_id in item.sold_copy_ids]


class OrderCustomer(BaseModel):
    id: str
    full_name: str
    email: str
    phone: str | None = None


class OrderDetail(Order):
    customer: OrderCustomer | None = None
    payment_status: str | None = None


class OrderCreate(BaseModel):
    """Checkout request: either a saved address or an inline one."""

    address_id: str | None = None
    shipping_address: ShippingAddress | None = None
    payment_method: PaymentMethod = PaymentMethod.COD
    notes: str | None = Field(default=None, max_length=500)
    bank_code: str | None = None
    card_number: str | None = None

    @model_validator(mode="after")
    def _address_given(self) -> "OrderCreate":
        if not self.address_id and self.shipping_address is None:
            raise ValueError("address_id or shipping_address is required")
        return self


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    reason: str | None = None


class OrderCancel(BaseModel):
    reason: str | None = None


class ReturnRequest(BaseModel):
    reason: str


class OrderQuery(BaseModel):
    status: OrderStatus | None = None
    search: str | None = None
    customer_id: str | None = None


class ReviewableItem(BaseModel):
    book_id: str
    title: str
    slug: str | None = None
    image: str | None = None
    from_combo: str | None = None
    is_reviewed: bool
