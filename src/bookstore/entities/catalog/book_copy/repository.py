from datetime import datetime, time

from sqlalchemy import case, func
from sqlmodel import col, or_, select

from src.bookstore.entities.catalog.book.table import BookTable
from src.bookstore.entities.catalog.book_copy.entity import (
    BookCopy,
    BookCopyQuery,
    BookCopyStats,
    CopyStatus,
    CopyStatusCounts,
)
from src.bookstore.entities.catalog.book_copy.table import BookCopyTable
from src.bookstore.entities.core._repository import EntityRepository

COPY_CODE_PREFIX = "COPY-"


class BookCopyRepository(EntityRepository[BookCopy, BookCopyTable]):
    """Data-access layer for inventory copies."""

    entity_type = BookCopy
    table_type = BookCopyTable
    sortable = frozenset({"created_at", "copy_code", "import_date", "sold_date"})

    def next_copy_codes(self, quantity: int) -> list[str]:
        """Reserve ``quantity`` sequential codes after the highest existing one."""
        # zero-padded codes only outgrow their width, so longer means larger
        last = self._session.exec(
            select(BookCopyTable.copy_code)
            .order_by(
                func.length(BookCopyTable.copy_code).desc(),
                col(BookCopyTable.copy_code).desc(),
            )
            .limit(1)
        ).first()
        start = int(last.removeprefix(COPY_CODE_PREFIX)) + 1 if last else 1
        return [f"{COPY_CODE_PREFIX}{number:05d}" for number in range(start, start + quantity)]

    def list_for_book(
        self, book_id: str, status: CopyStatus | None, page: int, limit: int
    ) -> tuple[list[BookCopy], int]:
        statement = select(BookCopyTable).where(BookCopyTable.book_id == book_id)
        if status:
            statement = statement.where(BookCopyTable.status == status)
        return self._page(statement, page, limit, "-created_at")

    def search(
        self, query: BookCopyQuery, page: int, limit: int
    ) -> tuple[list[BookCopy], int]:
        statement = select(BookCopyTable)
        if query.status:
            statement = statement.where(BookCopyTable.status == query.status)
        if query.condition:
            statement = statement.where(BookCopyTable.condition == query.condition)
        if query.book_id:
            statement = statement.where(BookCopyTable.book_id == query.book_id)
        if query.search:
            pattern = f"%{query.search}%"
            matching_books = select(BookTable.id).where(BookTable.title.ilike(pattern))
            statement = statement.where(
                or_(
                    BookCopyTable.copy_code.ilike(pattern),
                    col(BookCopyTable.book_id).in_(matching_books),
                )
            )
        date_column = (
            BookCopyTable.sold_date if query.date_type == "sold" else BookCopyTable.import_date
        )
        if query.start_date:
            statement = statement.where(date_column >= query.start_date)
        if query.end_date:
            end = query.end_date
            if end.time() == time.min:
                end = datetime.combine(end.date(), time.max)
            statement = statement.where(date_column <= end)
        return self._page(statement, page, limit, "-created_at")

    def status_counts(self, book_id: str | None = None) -> CopyStatusCounts:
        statement = select(BookCopyTable.status, func.count()).group_by(BookCopyTable.status)
        if book_id:
            statement = statement.where(BookCopyTable.book_id == book_id)
        counts = CopyStatusCounts()
        for status, count in self._session.exec(statement).all():
            setattr(counts, status, count)
            counts.total += count
        return counts

    def stats_by_book(self, limit: int = 50) -> list[BookCopyStats]:
        def count_of(status: CopyStatus):
            return func.sum(case((BookCopyTable.status == status, 1), else_=0))

        total = func.count(BookCopyTable.id)
        statement = (
            select(
                BookCopyTable.book_id,
                BookTable.title,
                BookTable.slug,
                total,
                count_of(CopyStatus.AVAILABLE),
                count_of(CopyStatus.RESERVED),
                count_of(CopyStatus.SOLD),
            )
            .join(BookTable, BookTable.id == BookCopyTable.book_id)
            .group_by(BookCopyTable.book_id, BookTable.title, BookTable.slug)
            .order_by(total.desc(), BookCopyTable.book_id)
            .limit(limit)
        )
        return [
            BookCopyStats(
                book_id=book_id,
                book_title=title,
                book_slug=slug,
                total=total_count,
                available=available or 0,
                reserved=reserved or 0,
                sold=sold or 0,
            )
            for book_id, title, slug, total_count, available, reserved, sold in self._session.exec(
                statement
            ).all()
        ]

    def pick_available(self, book_id: str, quantity: int, exclude: set[str]) -> list[BookCopy]:
        """Oldest available copies of a book that are not already linked to an order."""
        statement = (
            select(BookCopyTable)
            .where(
                BookCopyTable.book_id == book_id,
                BookCopyTable.status == CopyStatus.AVAILABLE,
                col(BookCopyTable.order_id).is_(None),
            )
            .order_by(BookCopyTable.import_date, BookCopyTable.copy_code)
        )
        if exclude:
            statement = statement.where(col(BookCopyTable.id).not_in(exclude))
        return self._all(statement.limit(quantity))

    def list_by_ids(self, ids: list[str]) -> list[BookCopy]:
        if not ids:
            return []
        return self._all(select(BookCopyTable).where(col(BookCopyTable.id).in_(ids)))
