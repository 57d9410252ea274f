"""Entity: Book."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from src.bookstore.core.helpers import discount_percent
from src.bookstore.entities.core._base import Entity, RefSummary


class BookLanguage(StrEnum):
    VIETNAMESE = "Vietnamese"
    ENGLISH = "English"
    OTHER = "Other"


class BookFormat(StrEnum):
    HARDCOVER = "hardcover"
    PAPERBACK = "paperback"
    EBOOK = "ebook"


class BookStatus(StrEnum):
    AVAILABLE = "available"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


def _check_publish_year(value: int | None) -> int | None:
    if value is not None and not 1900 <= value <= date.today().year + 1:
        raise ValueError(f"publish_year must be between 1900 and {date.today().year + 1}")
    return value


class Book(Entity):
    """A catalog title.

    Stock counters mirror the status of the title's copies and are kept in
    sync by the inventory service; they are never edited directly.
    """

    title: str = Field(min_length=1, max_length=255)
    slug: str = ""
    author_id: str
    publisher_id: str
    category_id: str
    isbn: str = Field(min_length=1, max_length=20)
    publish_year: int | None = None
    pages: int | None = Field(default=None, ge=1)
    language: BookLanguage = BookLanguage.VIETNAMESE
    format: BookFormat = BookFormat.PAPERBACK
    description: str = Field(default="", max_length=500)
    full_description: str = ""
    images: list[str] = Field(default_factory=list)
    original_price: int = Field(ge=0)
    sale_price: int = Field(ge=0)

    total_copies: int = Field(default=0, ge=0)
    available_copies: int = Field(default=0, ge=0)
    sold_copies: int = Field(default=0, ge=0)
    view_count: int = Field(default=0, ge=0)
    purchase_count: int = Field(default=0, ge=0)
    average_rating: float = Field(default=0, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)

    status: BookStatus = BookStatus.AVAILABLE
    is_active: bool = True

    @computed_field
    @property
    def discount_percent(self) -> int:
        return discount_percent(self.original_price, self.sale_price)

    @property
    def cover_image(self) -> str | None:
        return self.images[0] if self.images else None

    def apply_stock_status(self) -> None:
        """Flip between available and out_of_stock; discontinued is sticky."""
        if self.available_copies == 0 and self.status == BookStatus.AVAILABLE:
            self.status = BookStatus.OUT_OF_STOCK
        elif self.available_copies > 0 and self.status == BookStatus.OUT_OF_STOCK:
            self.status = BookStatus.AVAILABLE


class BookDetail(Book):
    author: RefSummary | None = None
    publisher: RefSummary | None = None
    category: RefSummary | None = None


class BookSummary(BaseModel):
    """Compact book card used inside carts, wishlists and recommendations."""

    id: str
    title: str
    slug: str
    image: str | None = None
    original_price: int
    sale_price: int
    discount_percent: int
    available_copies: int
    average_rating: float
    review_count: int
    status: BookStatus
    is_active: bool

    @classmethod
    def from_book(cls, book: Book) -> "BookSummary":
        return cls(
            id=book.id,
            title=book.title,
            slug=book.slug,
            image=book.cover_image,
            original_price=book.original_price,
            sale_price=book.sale_price,
            discount_percent=book.discount_percent,
            available_copies=book.available_copies,
            average_rating=book.average_rating,
            review_count=book.review_count,
            status=book.status,
            is_active=book.is_active,
        )


class BookCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    author_id: str
    publisher_id: str
    category_id: str
    isbn: str = Field(min_length=1, max_length=20)
    publish_year: int | None = None
    pages: int | None = Field(default=None, ge=1)
    language: BookLanguage = BookLanguage.VIETNAMESE
    format: BookFormat = BookFormat.PAPERBACK
    description: str = Field(default="", max_length=500)
    full_description: str = ""
    images: list[str] = Field(min_length=1)
    original_price: int = Field(ge=0)
    sale_price: int = Field(ge=0)
    initial_copies: int = Field(default=0, ge=0, le=1000)
    import_price: int | None = Field(default=None, ge=0)
    warehouse_location: str | None = None

    @field_validator("publish_year")
    @classmethod
    def _valid_year(cls, value: int | None) -> int | None:
        return _check_publish_year(value)

    @model_validator(mode="after")
    def _sale_not_above_original(self) -> "BookCreate":
        if self.sale_price > self.original_price:
            raise ValueError("sale_price cannot exceed original_price")
        return self


class BookUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    author_id: str | None = None
    publisher_id: str | None = None
    category_id: str | None = None
    isbn: str | None = Field(default=None, min_length=1, max_length=20)
    publish_year: int | None = None
    pages: int | None = Field(default=None, ge=1)
    language: BookLanguage | None = None
    format: BookFormat | None = None
    description: str | None = Field(default=None, max_length=500)
    full_description: str | None = None
    images: list[str] | None = Field(default=None, min_length=1)
    original_price: int | None = Field(default=None, ge=0)
    sale_price: int | None = Field(default=None, ge=0)
    discount_percent: int | None = Field(default=None, ge=0, le=100)
    status: BookStatus | None = None
    is_active: bool | None = None

    @field_validator("publish_year")
    @classmethod
    def _valid_year(cls, value: int | None) -> int | None:
        return _check_publish_year(value)


class BookQuery(BaseModel):
    """Catalog filters; prices apply to the sale price."""

    category_id: str | None = None
    author_id: str | None = None
    publisher_id: str | None = None
    min_price: int | None = None
    max_price: int | None = None
    search: str | None = None
    include_inactive: bool = False
