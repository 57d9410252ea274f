"""Entity: Wishlist."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.catalog.book.entity import BookSummary
from src.bookstore.entities.core._base import Entity


class WishlistItem(BaseModel):
    book_id: str
    added_at: datetime = Field(default_factory=utcnow)


class Wishlist(Entity):
    customer_id: str
    items: list[WishlistItem] = Field(default_factory=list)

    def has_book(self, book_id: str) -> bool:
        return any(item.book_id == book_id for item in self.items)


class WishlistAdd(BaseModel):
    book_id: str


class WishlistLine(BaseModel):
    book_id: str
    added_at: datetime
    book: BookSummary | None = None


class WishlistView(BaseModel):
    id: str
    customer_id: str
    items: list[WishlistLine]
    total_items: int


class WishlistCheck(BaseModel):
    in_wishlist: bool


class MoveToCartResult(BaseModel):
    added_count: int
    remaining_count: int
