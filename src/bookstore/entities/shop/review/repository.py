from sqlalchemy import func
from sqlmodel import select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.shop.review.entity import RatingStats, Review, ReviewQuery
from src.bookstore.entities.shop.review.table import ReviewTable


class ReviewRepository(EntityRepository[Review, ReviewTable]):
    entity_type = Review
    table_type = ReviewTable
    sortable = frozenset({"created_at", "updated_at", "rating", "likes"})

    def find(self, customer_id: str, book_id: str, order_id: str) -> Review | None:
        return self._first(
            select(ReviewTable).where(
                ReviewTable.customer_id == customer_id,
                ReviewTable.book_id == book_id,
                ReviewTable.order_id == order_id,
            )
        )

    def reviewed_book_ids(self, customer_id: str, order_id: str) -> set[str]:
        statement = select(ReviewTable.book_id).where(
            ReviewTable.customer_id == customer_id, ReviewTable.order_id == order_id
        )
        return set(self._session.exec(statement).all())

    def search(
        self, query: ReviewQuery, page: int, limit: int, sort_by: str | None
    ) -> tuple[list[Review], int]:
        statement = select(ReviewTable)
        if query.book_id:
            statement = statement.where(ReviewTable.book_id == query.book_id)
        if query.customer_id:
            statement = statement.where(ReviewTable.customer_id == query.customer_id)
        if query.rating:
            statement = statement.where(ReviewTable.rating == query.rating)
        if query.is_hidden is not None:
            statement = statement.where(ReviewTable.is_hidden == query.is_hidden)
        return self._page(statement, page, limit, sort_by)

    def visible_summary(self, book_id: str) -> tuple[float, int]:
        """Average rating (one decimal) and count over visible reviews of a book."""
        average, count = self._session.exec(
            select(func.avg(ReviewTable.rating), func.count()).where(
                ReviewTable.book_id == book_id,
                ReviewTable.is_hidden == False,  # noqa: E712
            )
        ).one()
        if not count:
            return 0.0, 0
        return round(float(average), 1), count

    def rating_stats(self, book_id: str) -> RatingStats:
        statement = (
            select(ReviewTable.rating, func.count())
            .where(ReviewTable.book_id == book_id, ReviewTable.is_hidden == False)  # noqa: E712
            .group_by(ReviewTable.rating)
        )
        distribution = {str(star): 0 for star in range(5, 0, -1)}
        total = weighted = 0
        for rating, count in self._session.exec(statement).all():
            distribution[str(rating)] = count
            total += count
            weighted += rating * count
        average = round(weighted / total, 1) if total else 0.0
        return RatingStats(distribution=distribution, total=total, average=average)

