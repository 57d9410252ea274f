"""Inventory: physical copies and the stock counters derived from them."""

from collections.abc import Iterable

from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, NotFoundError
from src.bookstore.entities.catalog.book import Book, BookRepository
from src.bookstore.entities.catalog.book_copy import (
    BookCopiesCreate,
    BookCopy,
    BookCopyDetail,
    BookCopyQuery,
    BookCopyRepository,
    BookCopyStats,
    BookCopyUpdate,
    CopyCondition,
    CopyStatus,
    CopyStatusCounts,
)
from src.bookstore.entities.core._base import Page, Pagination, RefSummary
from src.bookstore.entities.shop.order import OrderRepository


class BookCopyPage(Page[BookCopyDetail]):
    summary: CopyStatusCounts


class InventoryService:
    """Owns every copy status change so the book counters never drift."""

    def __init__(self, db_session: Session):
        self._books = BookRepository(db_session)
        self._copies = BookCopyRepository(db_session)
        self._orders = OrderRepository(db_session)

    def resync_book(self, book_id: str) -> Book | None:
        """Recount a book's copies and flip its stock status accordingly."""
        book = self._books.get(book_id)
        if book is None:
            return None
        counts = self._copies.status_counts(book_id)
        book.total_copies = counts.total
        book.available_copies = counts.available
        book.sold_copies = counts.sold
        book.apply_stock_status()
        return self._books.update(book)

    def resync_books(self, book_ids: Iterable[str]) -> None:
        for book_id in sorted(set(book_ids)):
            self.resync_book(book_id)

    def add_copies(self, book_id: str, data: BookCopiesCreate) -> list[BookCopy]:
        if self._books.get(book_id) is None:
            raise NotFoundError("Book not found")
        copies = [
            self._copies.create(
                BookCopy(
                    copy_code=code,
                    book_id=book_id,
                    import_price=data.import_price,
                    warehouse_location=data.warehouse_location,
                    condition=data.condition,
                    notes=data.notes,
                )
            )
            for code in self._copies.next_copy_codes(data.quantity)
        ]
        self.resync_book(book_id)
        logger.info("Added {} copies to book {}", len(copies), book_id)
        return copies

    def _detail(self, copy: BookCopy, books: dict[str, Book] | None = None) -> BookCopyDetail:
        book = (books or {}).get(copy.book_id) or self._books.get(copy.book_id)
        order = self._orders.get(copy.order_id) if copy.order_id else None
        return BookCopyDetail(
            **copy.model_dump(),
            book=RefSummary(id=book.id, name=book.title, slug=book.slug) if book else None,
            order_number=order.order_number if order else None,
        )

    def list_copies(self, query: BookCopyQuery, page: int, limit: int) -> BookCopyPage:
        copies, total = self._copies.search(query, page, limit)
        books = self._books.get_many(copy.book_id for copy in copies)
        return BookCopyPage(
            items=[self._detail(copy, books) for copy in copies],
            pagination=Pagination.build(page, limit, total),
            summary=self._copies.status_counts(query.book_id),
        )

    def list_for_book(
        self, book_id: str, status: CopyStatus | None, page: int, limit: int
    ) -> Page[BookCopy]:
        if self._books.get(book_id) is None:
            raise NotFoundError("Book not found")
        copies, total = self._copies.list_for_book(book_id, status, page, limit)
        return Page(items=copies, pagination=Pagination.build(page, limit, total))

    def _require(self, copy_id: str) -> BookCopy:
        copy = self._copies.get(copy_id)
        if copy is None:
            raise NotFoundError("Book copy not found")
        return copy

    def _ensure_unlinked(self, copy: BookCopy) -> None:
        # copies held by an order change only through the order itself
        if copy.order_id is None:
            return
        order = self._orders.get(copy.order_id)
        number = order.order_number if order else copy.order_id
        raise BadRequestError(f"Book copy is linked to order {number}")

    def get_copy(self, copy_id: str) -> BookCopyDetail:
        return self._detail(self._require(copy_id))

    def update_copy(self, copy_id: str, data: BookCopyUpdate) -> BookCopyDetail:
        copy = self._require(copy_id)
        changes = data.model_dump(exclude_unset=True)
        status = changes.pop("status", None)
        if status is not None:
            self._ensure_unlinked(copy)
        copy = copy.with_changes(changes)
        if status is not None:
            copy.change_status(status)
        copy = self._copies.update(copy)
        self.resync_book(copy.book_id)
        return self._detail(copy)

    def set_status(self, copy_id: str, status: CopyStatus) -> BookCopyDetail:
        copy = self._require(copy_id)
        self._ensure_unlinked(copy)
        previous = copy.status
        copy.change_status(status)
        copy = self._copies.update(copy)
        self.resync_book(copy.book_id)
        logger.info("Copy {} status {} -> {}", copy.copy_code, previous, status)
        return self._detail(copy)

    def delete_copy(self, copy_id: str) -> None:
        copy = self._require(copy_id)
        if copy.status in (CopyStatus.SOLD, CopyStatus.RESERVED):
            raise BadRequestError(f"Cannot delete book copy with status: {copy.status}")
        self._ensure_unlinked(copy)
        self._copies.delete(copy_id)
        self.resync_book(copy.book_id)

    def stats_by_book(self) -> list[BookCopyStats]:
        return self._copies.stats_by_book()

    # -- order fulfilment ------------------------------------------------
    def pick_for_order(
        self, book_id: str, quantity: int, exclude: set[str]
    ) -> list[BookCopy] | None:
        """Oldest free copies of a book, or ``None`` when there are not enough."""
        copies = self._copies.pick_available(book_id, quantity, exclude)
        return copies if len(copies) == quantity else None

    def link_to_order(self, copy_ids: list[str], order_id: str) -> None:
        for copy in self._copies.list_by_ids(copy_ids):
            copy.order_id = order_id
            self._copies.update(copy)

    def move_copies(
        self,
        copy_ids: list[str],
        status: CopyStatus,
        *,
        release: bool = False,
        condition: CopyCondition | None = None,
    ) -> None:
        """Change the status of an order's copies and resync their books.

        ``release`` detaches the copies from their order so they can be sold
        again.
        """
        copies = self._copies.list_by_ids(copy_ids)
        for copy in copies:
            copy.change_status(status)
            if release:
                copy.order_id = None
            if condition is not None:
                copy.condition = condition
            self._copies.update(copy)
        self.resync_books(copy.book_id for copy in copies)

