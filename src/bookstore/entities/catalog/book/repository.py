from sqlmodel import col, or_, select

from src.bookstore.entities.catalog.book.entity import Book, BookQuery
from src.bookstore.entities.catalog.book.table import BookTable
from src.bookstore.entities.core._repository import EntityRepository


class BookRepository(EntityRepository[Book, BookTable]):
    """Data-access layer for books."""

    entity_type = Book
    table_type = BookTable
    sortable = frozenset(
        {
            "created_at",
            "updated_at",
            "title",
            "sale_price",
            "original_price",
            "publish_year",
            "view_count",
            "purchase_count",
            "average_rating",
            "review_count",
        }
    )

    def get_by_slug(self, slug: str) -> Book | None:
        return self._first(select(BookTable).where(BookTable.slug == slug))

    def get_by_isbn(self, isbn: str) -> Book | None:
        return self._first(select(BookTable).where(BookTable.isbn == isbn))

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        statement = select(BookTable.id).where(BookTable.slug == slug)
        if exclude_id:
            statement = statement.where(BookTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def search(
        self, query: BookQuery, page: int, limit: int, sort_by: str | None
    ) -> tuple[list[Book], int]:
        statement = select(BookTable)
        if not query.include_inactive:
            statement = statement.where(BookTable.is_active == True)  # noqa: E712
        if query.category_id:
            statement = statement.where(BookTable.category_id == query.category_id)
        if query.author_id:
            statement = statement.where(BookTable.author_id == query.author_id)
        if query.publisher_id:
            statement = statement.where(BookTable.publisher_id == query.publisher_id)
        if query.min_price is not None:
            statement = statement.where(BookTable.sale_price >= query.min_price)
        if query.max_price is not None:
            statement = statement.where(BookTable.sale_price <= query.max_price)
        if query.search:
            pattern = f"%{query.search.strip()}%"
            statement = statement.where(
                or_(BookTable.title.ilike(pattern), BookTable.isbn.ilike(pattern))
            )
        return self._page(statement, page, limit, sort_by)

    def count_active(self, **filters: str) -> int:
        conditions = [BookTable.is_active == True]  # noqa: E712
        conditions += [getattr(BookTable, name) == value for name, value in filters.items()]
        return self.count(*conditions)

    def count_referencing(self, **filters: str) -> int:
        return self.count(*[getattr(BookTable, name) == value for name, value in filters.items()])

    def increment_view_count(self, book_id: str) -> None:
        row = self._session.get(BookTable, book_id)
        if row is not None:
            row.view_count += 1
            self._session.add(row)
            self._session.flush()

    def top_by_purchases(self, limit: int) -> list[Book]:
        statement = (
            select(BookTable)
            .where(BookTable.is_active == True)  # noqa: E712
            .order_by(col(BookTable.purchase_count).desc(), BookTable.id)
            .limit(limit)
        )
        return self._all(statement)

    def active_candidates(
        self,
        exclude_ids: list[str],
        limit: int,
        category_id: str | None = None,
        author_id: str | None = None,
    ) -> list[Book]:
        """Active books for scoring, optionally sharing a category or author."""
        statement = select(BookTable).where(BookTable.is_active == True)  # noqa: E712
        if exclude_ids:
            statement = statement.where(col(BookTable.id).not_in(exclude_ids))
        related = []
        if category_id:
            related.append(BookTable.category_id == category_id)
        if author_id:
            related.append(BookTable.author_id == author_id)
        if related:
            statement = statement.where(or_(*related))
        statement = statement.order_by(
            col(BookTable.purchase_count).desc(),
            col(BookTable.average_rating).desc(),
            BookTable.id,
        )
        return self._all(statement.limit(limit))
