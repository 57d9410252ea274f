"""Entity: Combo."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from src.bookstore.entities.core._base import Entity


class ComboItem(BaseModel):
    book_id: str
    quantity: int = Field(default=1, ge=1)


def _check_items(items: list[ComboItem]) -> list[ComboItem]:
    if len(items) < 2:
        raise ValueError("A combo must contain at least 2 books")
    book_ids = [item.book_id for item in items]
    if len(set(book_ids)) != len(book_ids):
        raise ValueError("A combo cannot list the same book twice")
    return items


class Combo(Entity):
    """A bundle of books sold together at one price."""

    name: str = Field(min_length=1, max_length=200)
    slug: str = ""
    description: str | None = None
    image: str | None = None
    items: list[ComboItem] = Field(default_factory=list)
    combo_price: int = Field(ge=0)
    sold_count: int = Field(default=0, ge=0)
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None

    def in_sale_window(self, now: datetime) -> bool:
        if self.start_date and now < self.start_date:
            return False
        if self.end_date and now > self.end_date:
            return False
        return True


class ComboBookLine(BaseModel):
    book_id: str
    title: str
    slug: str
    image: str | None = None
    original_price: int
    sale_price: int
    quantity: int
    available_copies: int


class ComboDetail(Combo):
    """A combo with its books and the prices derived from them."""

    books: list[ComboBookLine] = Field(default_factory=list)
    total_original_price: int = 0
    saved_amount: int = 0
    discount_percent: int = 0
    is_available: bool = False
    available_quantity: int = 0


class ComboSummary(BaseModel):
    id: str
    name: str
    slug: str
    image: str | None = None
    combo_price: int
    is_active: bool


class ComboAvailability(BaseModel):
    is_available: bool
    available_quantity: int


class ComboCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str | None = None
    image: str | None = None
    items: list[ComboItem]
    combo_price: int = Field(ge=0)
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("items")
    @classmethod
    def _valid_items(cls, value: list[ComboItem]) -> list[ComboItem]:
        return _check_items(value)

    @model_validator(mode="after")
    def _window_order(self) -> "ComboCreate":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class ComboUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    image: str | None = None
    items: list[ComboItem] | None = None
    combo_price: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("items")
    @classmethod
    def _valid_items(cls, value: list[ComboItem] | None) -> list[ComboItem] | None:
        return None if value is None else _check_items(value)
