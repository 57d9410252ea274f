from datetime import datetime

from sqlmodel import col, select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.shop.recommendation.entity import (
    Recommendation,
    RecommendationType,
)
from src.bookstore.entities.shop.recommendation.table import RecommendationTable


def _scope(statement, customer_id: str | None, source_book_id: str | None):
    if customer_id is None:
        statement = statement.where(col(RecommendationTable.customer_id).is_(None))
    else:
        statement = statement.where(RecommendationTable.customer_id == customer_id)
    if source_book_id is None:
        return statement.where(col(RecommendationTable.source_book_id).is_(None))
    return statement.where(RecommendationTable.source_book_id == source_book_id)


class RecommendationRepository(EntityRepository[Recommendation, RecommendationTable]):
    entity_type = Recommendation
    table_type = RecommendationTable

    def find_valid(
        self,
        customer_id: str | None,
        type: RecommendationType,
        source_book_id: str | None,
        now: datetime,
    ) -> Recommendation | None:
        statement = select(RecommendationTable).where(
            RecommendationTable.type == type, RecommendationTable.expires_at > now
        )
        statement = _scope(statement, customer_id, source_book_id)
        return self._first(statement.order_by(col(RecommendationTable.generated_at).desc()))

    def _delete_rows(self, statement) -> int:
        rows = self._session.exec(statement).all()
        for row in rows:
            self._session.delete(row)
        self._session.flush()
        return len(rows)

    def replace(self, entry: Recommendation) -> Recommendation:
        """Store ``entry`` in place of any cached list for the same scope."""
        statement = select(RecommendationTable).where(RecommendationTable.type == entry.type)
        self._delete_rows(_scope(statement, entry.customer_id, entry.source_book_id))
        return self.create(entry)

    def delete_for_customer(self, customer_id: str) -> int:
        return self._delete_rows(
            select(RecommendationTable).where(RecommendationTable.customer_id == customer_id)
        )

    def delete_expired(self, now: datetime) -> int:
        return self._delete_rows(
            select(RecommendationTable).where(RecommendationTable.expires_at < now)
        )
