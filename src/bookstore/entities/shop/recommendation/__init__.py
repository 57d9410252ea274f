"""Entity package: Recommendation."""

from .entity import (
    RecommendationAlgorithm,
    Recommendation,
    RecommendationLine,
    RecommendationResult,
    RecommendationType,
    RecommendedBook,
)
from .repository import RecommendationRepository
from .table import RecommendationTable

__all__ = [
    "Recommendation",
    "RecommendationAlgorithm",
    "RecommendationLine",
    "RecommendationRepository",
    "RecommendationResult",
    "RecommendationTable",
    "RecommendationType",
    "RecommendedBook",
]
