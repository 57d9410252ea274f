"""Entity package: Wishlist."""

from .entity import (
    MoveToCartResult,
    Wishlist,
    WishlistAdd,
    WishlistCheck,
    WishlistItem,
    WishlistLine,
    WishlistView,
)
from .repository import WishlistRepository
from .table import WishlistItemTable, WishlistTable

__all__ = [
    "MoveToCartResult",
    "Wishlist",
    "WishlistAdd",
    "WishlistCheck",
    "WishlistItem",
    "WishlistItemTable",
    "WishlistLine",
    "WishlistRepository",
    "WishlistTable",
    "WishlistView",
]
