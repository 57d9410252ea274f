"""Entity package: Book."""

from .entity import (
    Book,
    BookCreate,
    BookDetail,
    BookFormat,
    BookLanguage,
    BookQuery,
    BookStatus,
    BookSummary,
    BookUpdate,
)
from .repository import BookRepository
from .table import BookTable

__all__ = [
    "Book",
    "BookCreate",
    "BookDetail",
    "BookFormat",
    "BookLanguage",
    "BookQuery",
    "BookRepository",
    "BookStatus",
    "BookSummary",
    "BookTable",
    "BookUpdate",
]
