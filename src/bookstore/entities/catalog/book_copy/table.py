"""Book copy database table model."""

from datetime import datetime

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class BookCopyTable(EntityTable, table=True):
    __tablename__ = "book_copies"

    copy_code: str = Field(unique=True, index=True)
    barcode: str | None = Field(default=None, unique=True)
    book_id: str = Field(foreign_key="books.id", index=True)
    status: str = Field(index=True)
    import_date: datetime
    import_price: int
    sold_date: datetime | None = None
    order_id: str | None = Field(default=None, index=True)
    warehouse_location: str | None = None
    condition: str
    notes: str | None = None
