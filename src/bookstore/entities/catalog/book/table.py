"""Book database table model."""

from sqlalchemy import JSON, Column
from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class BookTable(EntityTable, table=True):
    __tablename__ = "books"

    title: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    author_id: str = Field(foreign_key="authors.id", index=True)
    publisher_id: str = Field(foreign_key="publishers.id", index=True)
    category_id: str = Field(foreign_key="categories.id", index=True)
    isbn: str = Field(unique=True, index=True)
    publish_year: int | None = None
    pages: int | None = None
    language: str
    format: str
    description: str = ""
    full_description: str = ""
    images: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    original_price: int
    sale_price: int = Field(index=True)

    total_copies: int = 0
    available_copies: int = 0
    sold_copies: int = 0
    view_count: int = 0
    purchase_count: int = Field(default=0, index=True)
    average_rating: float = Field(default=0, index=True)
    review_count: int = 0

    status: str = Field(index=True)
    is_active: bool = Field(default=True, index=True)
