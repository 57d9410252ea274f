"""Review database table model."""

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class ReviewTable(EntityTable, table=True):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint(
            "customer_id", "book_id", "order_id", name="uq_review_customer_book_order"
        ),
    )

    customer_id: str = Field(foreign_key="customers.id", index=True)
    book_id: str = Field(foreign_key="books.id", index=True)
    order_id: str = Field(foreign_key="orders.id", index=True)
    rating: int = Field(index=True)
    title: str = ""
    comment: str = ""
    images: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    likes: int = 0
    is_verified: bool = False
    is_hidden: bool = Field(default=False, index=True)
