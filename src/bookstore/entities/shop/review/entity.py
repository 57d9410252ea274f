"""Entity: Review."""

from pydantic import BaseModel, Field

from src.bookstore.entities.core._base import Entity, RefSummary


class Review(Entity):
    """A verified-purchase rating of a book, tied to the order it came from."""

    customer_id: str
    book_id: str
    order_id: str
    rating: int = Field(ge=1, le=5)
    title: str = Field(default="", max_length=200)
    comment: str = Field(default="", max_length=2000)
    images: list[str] = Field(default_factory=list, max_length=5)
    likes: int = Field(default=0, ge=0)
    is_verified: bool = False
    is_hidden: bool = False


class ReviewAuthor(BaseModel):
    id: str
    full_name: str
    avatar: str | None = None


class ReviewDetail(Review):
    customer: ReviewAuthor | None = None
    book: RefSummary | None = None


class ReviewCreate(BaseModel):
    book_id: str
    order_id: str
    rating: int = Field(ge=1, le=5)
    title: str = Field(default="", max_length=200)
    comment: str = Field(default="", max_length=2000)
    images: list[str] = Field(default_factory=list, max_length=5)


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = Field(default=None, max_length=2000)
    images: list[str] | None = Field(default=None, max_length=5)


class ReviewQuery(BaseModel):
    book_id: str | None = None
    customer_id: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    is_hidden: bool | None = None


class RatingStats(BaseModel):
    distribution: dict[str, int]
    total: int
    average: float
