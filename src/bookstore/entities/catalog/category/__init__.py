"""Entity package: Category."""

from .entity import Category, CategoryCreate, CategoryUpdate, CategoryWithCount
from .repository import CategoryRepository
from .table import CategoryTable

__all__ = [
    "Category",
    "CategoryCreate",
    "CategoryRepository",
    "CategoryTable",
    "CategoryUpdate",
    "CategoryWithCount",
]
