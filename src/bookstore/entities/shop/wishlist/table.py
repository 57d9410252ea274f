"""Wishlist database table models."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from src.bookstore.entities.core._base import EntityTable


class WishlistTable(EntityTable, table=True):
    __tablename__ = "wishlists"

    customer_id: str = Field(foreign_key="customers.id", unique=True, index=True)


class WishlistItemTable(SQLModel, table=True):
    __tablename__ = "wishlist_items"

    wishlist_id: str = Field(foreign_key="wishlists.id", primary_key=True)
    book_id: str = Field(foreign_key="books.id", primary_key=True, index=True)
    added_at: datetime
