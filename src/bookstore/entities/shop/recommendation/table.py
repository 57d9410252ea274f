"""Recommendation database table model."""

from datetime import datetime

from sqlalchemy import JSON, Column
from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class RecommendationTable(EntityTable, table=True):
    __tablename__ = "recommendations"

    customer_id: str | None = Field(default=None, foreign_key="customers.id", index=True)
    type: str = Field(index=True)
    source_book_id: str | None = Field(default=None, foreign_key="books.id", index=True)
    recommended_books: list[dict] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    algorithm: str
    generated_at: datetime
    expires_at: datetime = Field(index=True)
