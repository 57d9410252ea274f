"""Entity package: BookCopy."""

from .entity import (
    BookCopiesCreate,
    BookCopy,
    BookCopyDetail,
    BookCopyQuery,
    BookCopyStats,
    BookCopyStatusUpdate,
    BookCopyUpdate,
    CopyCondition,
    CopyStatus,
    CopyStatusCounts,
)
from .repository import BookCopyRepository
from .table import BookCopyTable

__all__ = [
    "BookCopiesCreate",
    "BookCopy",
    "BookCopyDetail",
    "BookCopyQuery",
    "BookCopyRepository",
    "BookCopyStats",
    "BookCopyStatusUpdate",
    "BookCopyTable",
    "BookCopyUpdate",
    "CopyCondition",
    "CopyStatus",
    "CopyStatusCounts",
]
