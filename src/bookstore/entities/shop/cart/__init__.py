"""Entity package: Cart."""

from .entity import Cart, CartItem, CartItemAdd, CartItemUpdate, CartLine, CartView, ItemType
from .repository import CartItemRepository, CartRepository
from .table import CartItemTable, CartTable

__all__ = [
    "Cart",
    "CartItem",
    "CartItemAdd",
    "CartItemRepository",
    "CartItemTable",
    "CartItemUpdate",
    "CartLine",
    "CartRepository",
    "CartTable",
    "CartView",
    "ItemType",
]
