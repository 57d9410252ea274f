"""Entity package: Author."""

from .entity import Author, AuthorCreate, AuthorUpdate, AuthorWithCount
from .repository import AuthorRepository
from .table import AuthorTable

__all__ = [
    "Author",
    "AuthorCreate",
    "AuthorRepository",
    "AuthorTable",
    "AuthorUpdate",
    "AuthorWithCount",
]
