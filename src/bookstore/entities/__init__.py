"""Entities organised by business concept.

Each entity package holds:
- entity.py: domain model and request/response shapes
- table.py: database persistence model
- repository.py: data access returning domain models

Importing this package registers every table with SQLModel's metadata.
"""

from .catalog.author import Author, AuthorRepository, AuthorTable
from .catalog.book import Book, BookRepository, BookTable
from .catalog.book_copy import BookCopy, BookCopyRepository, BookCopyTable
from .catalog.category import Category, CategoryRepository, CategoryTable
from .catalog.combo import Combo, ComboItemTable, ComboRepository, ComboTable
from .catalog.publisher import Publisher, PublisherRepository, PublisherTable
from .core.admin import Admin, AdminRepository, AdminTable
from .core.customer import Customer, CustomerRepository, CustomerTable
from .shop.address import Address, AddressRepository, AddressTable
from .shop.cart import Cart, CartItemTable, CartRepository, CartTable
from .shop.order import Order, OrderItemTable, OrderRepository, OrderTable
from .shop.payment import Payment, PaymentRepository, PaymentTable
from .shop.recommendation import Recommendation, RecommendationRepository, RecommendationTable
from .shop.review import Review, ReviewRepository, ReviewTable
from .shop.wishlist import Wishlist, WishlistItemTable, WishlistRepository, WishlistTable

__all__ = [
    "Address",
    "AddressRepository",
    "AddressTable",
    "Admin",
    "AdminRepository",
    "AdminTable",
    "Author",
    "AuthorRepository",
    "AuthorTable",
    "Book",
    "BookCopy",
    "BookCopyRepository",
    "BookCopyTable",
    "BookRepository",
    "BookTable",
    "Cart",
    "CartItemTable",
    "CartRepository",
    "CartTable",
    "Category",
    "CategoryRepository",
    "CategoryTable",
    "Combo",
    "ComboItemTable",
    "ComboRepository",
    "ComboTable",
    "Customer",
    "CustomerRepository",
    "CustomerTable",
    "Order",
    "OrderItemTable",
    "OrderRepository",
    "OrderTable",
    "Payment",
    "PaymentRepository",
    "PaymentTable",
    "Publisher",
    "PublisherRepository",
    "PublisherTable",
    "Recommendation",
    "RecommendationRepository",
    "RecommendationTable",
    "Review",
    "ReviewRepository",
    "ReviewTable",
    "Wishlist",
    "WishlistItemTable",
    "WishlistRepository",
    "WishlistTable",
]
