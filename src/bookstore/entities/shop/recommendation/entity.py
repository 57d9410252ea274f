"""Entity: Recommendation."""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.catalog.book.entity import BookSummary
from src.bookstore.entities.core._base import Entity


class RecommendationType(StrEnum):
    PERSONALIZED = "personalized"
    SIMILAR = "similar"
    TRENDING = "trending"


class RecommendationAlgorithm(StrEnum):
    CONTENT_BASED = "content_based"
    POPULARITY = "popularity"


class RecommendedBook(BaseModel):
    book_id: str
    score: float = Field(ge=0, le=1)
    reason: str


class Recommendation(Entity):
    """A cached, expiring list of scored suggestions."""

    customer_id: str | None = None
    type: RecommendationType
    source_book_id: str | None = None
    recommended_books: list[RecommendedBook] = Field(default_factory=list)
    algorithm: RecommendationAlgorithm = RecommendationAlgorithm.CONTENT_BASED
    generated_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime


class RecommendationLine(BaseModel):
    book: BookSummary
    score: float
    reason: str


class RecommendationResult(BaseModel):
    type: RecommendationType
    algorithm: RecommendationAlgorithm
    source_book_id: str | None = None
    cached: bool = False
    items: list[RecommendationLine]
