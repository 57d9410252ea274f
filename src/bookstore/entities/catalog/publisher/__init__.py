"""Entity package: Publisher."""

from .entity import Publisher, PublisherCreate, PublisherUpdate, PublisherWithCount
from .repository import PublisherRepository
from .table import PublisherTable

__all__ = [
    "Publisher",
    "PublisherCreate",
    "PublisherRepository",
    "PublisherTable",
    "PublisherUpdate",
    "PublisherWithCount",
]
