"""Entity: Publisher."""

from pydantic import BaseModel, Field

from src.bookstore.entities.core._base import Entity
from src.bookstore.entities.core.customer.entity import EMAIL_PATTERN


class Publisher(Entity):
    name: str = Field(min_length=1, max_length=200)
    address: str | None = None
    phone: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    website: str | None = None


class PublisherWithCount(Publisher):
    book_count: int = 0


class PublisherCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    address: str | None = None
    phone: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    website: str | None = None


class PublisherUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    address: str | None = None
    phone: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    website: str | None = None
