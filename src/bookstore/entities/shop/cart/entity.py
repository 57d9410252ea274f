"""Entity: Cart."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field, model_validator

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.catalog.book.entity import BookSummary
from src.bookstore.entities.catalog.combo.entity import ComboSummary
from src.bookstore.entities.core._base import Entity


class ItemType(StrEnum):
    BOOK = "book"
    COMBO = "combo"


class _TargetedItem(BaseModel):
    """Line referencing exactly one of a book or a combo, matching its type."""

    type: ItemType = ItemType.BOOK
    book_id: str | None = None
    combo_id: str | None = None

    @model_validator(mode="after")
    def _one_target(self):
        if self.type == ItemType.BOOK and (not self.book_id or self.combo_id):
            raise ValueError("A book item needs book_id and no combo_id")
        if self.type == ItemType.COMBO and (not self.combo_id or self.book_id):
            raise ValueError("A combo item needs combo_id and no book_id")
        return self

    @property
    def target_id(self) -> str:
        target = self.book_id if self.type == ItemType.BOOK else self.combo_id
        return target  # type: ignore[return-value]


class CartItem(Entity, _TargetedItem):
    cart_id: str
    quantity: int = Field(ge=1)
    price: int = Field(ge=0, description="Unit price captured when the item was added")
    added_at: datetime = Field(default_factory=utcnow)
    reserved_until: datetime | None = None


class Cart(Entity):
    customer_id: str
    items: list[CartItem] = Field(default_factory=list)

    @computed_field
    @property
    def total_price(self) -> int:
        return sum(item.price * item.quantity for item in self.items)

    def find_item(self, item_id: str) -> CartItem | None:
        return next((item for item in self.items if item.id == item_id), None)

    def find_target(self, item_type: ItemType, target_id: str) -> CartItem | None:
        return next(
            (
                item
                for item in self.items
                if item.type == item_type and item.target_id == target_id
            ),
            None,
        )


class CartItemAdd(_TargetedItem):
    quantity: int = Field(default=1, ge=1)


class CartItemUpdate(BaseModel):
    quantity: int


class CartLine(BaseModel):
    """A cart item as shown to the customer, with its book or combo card."""

    id: str
    type: ItemType
    quantity: int
    price: int
    subtotal: int
    added_at: datetime
    reserved_until: datetime | None = None
    book: BookSummary | None = None
    combo: ComboSummary | None = None


class CartView(BaseModel):
    id: str
    customer_id: str
    items: list[CartLine]
    total_items: int
    total_price: int
    updated_at: datetime
