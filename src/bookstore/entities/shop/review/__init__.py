"""Entity package: Review."""

from .entity import (
    RatingStats,
    Review,
    ReviewAuthor,
    ReviewCreate,
    ReviewDetail,
    ReviewQuery,
    ReviewUpdate,
)
from .repository import ReviewRepository
from .table import ReviewTable

__all__ = [
    "RatingStats",
    "Review",
    "ReviewAuthor",
    "ReviewCreate",
    "ReviewDetail",
    "ReviewQuery",
    "ReviewRepository",
    "ReviewTable",
    "ReviewUpdate",
]
