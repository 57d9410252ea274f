"""Entity: BookCopy."""

from datetime import datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.core._base import Entity, RefSummary


class CopyStatus(StrEnum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SOLD = "sold"
    DAMAGED = "damaged"
    RETURNED = "returned"


class CopyCondition(StrEnum):
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"


class BookCopy(Entity):
    """One physical unit of a book in the warehouse."""

    copy_code: str = ""
    barcode: str | None = None
    book_id: str
    status: CopyStatus = CopyStatus.AVAILABLE
    import_date: datetime = Field(default_factory=utcnow)
    import_price: int = Field(ge=0)
    sold_date: datetime | None = None
    order_id: str | None = None
    warehouse_location: str | None = None
    condition: CopyCondition = CopyCondition.NEW
    notes: str | None = None

    def change_status(self, status: CopyStatus) -> None:
        """Set the status, stamping or clearing the sale date as needed."""
        if status == CopyStatus.SOLD and self.status != CopyStatus.SOLD:
            self.sold_date = utcnow()
        elif status == CopyStatus.AVAILABLE and self.status == CopyStatus.SOLD:
            self.sold_date = None
        self.status = status


class BookCopyDetail(BookCopy):
    book: RefSummary | None = None
    order_number: str | None = None


class BookCopiesCreate(BaseModel):
    quantity: int = Field(ge=1, le=1000)
    import_price: int = Field(ge=0)
    warehouse_location: str | None = None
    condition: CopyCondition = CopyCondition.NEW
    notes: str | None = None


class BookCopyUpdate(BaseModel):
    status: CopyStatus | None = None
    condition: CopyCondition | None = None
    warehouse_location: str | None = None
    notes: str | None = None


class BookCopyStatusUpdate(BaseModel):
    status: CopyStatus


class BookCopyQuery(BaseModel):
    status: CopyStatus | None = None
    condition: CopyCondition | None = None
    book_id: str | None = None
    search: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    date_type: Literal["import", "sold"] = "import"


class CopyStatusCounts(BaseModel):
    total: int = 0
    available: int = 0
    reserved: int = 0
    sold: int = 0
    damaged: int = 0
    returned: int = 0


class BookCopyStats(BaseModel):
    book_id: str
    book_title: str
    book_slug: str
    total: int
    available: int
    reserved: int
    sold: int
