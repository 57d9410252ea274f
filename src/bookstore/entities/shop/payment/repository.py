from datetime import datetime

from sqlalchemy import func
from sqlmodel import select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.shop.payment.entity import Payment, PaymentStatus
from src.bookstore.entities.shop.payment.table import PaymentTable


class PaymentRepository(EntityRepository[Payment, PaymentTable]):
    entity_type = Payment
    table_type = PaymentTable

    def get_by_order(self, order_id: str) -> Payment | None:
        return self._first(select(PaymentTable).where(PaymentTable.order_id == order_id))

    def get_by_transaction(self, transaction_id: str) -> Payment | None:
        return self._first(
            select(PaymentTable).where(PaymentTable.transaction_id == transaction_id)
        )

    def revenue_between(self, start: datetime, end: datetime) -> int:
        total = self._session.exec(
            select(func.sum(PaymentTable.amount)).where(
                PaymentTable.status == PaymentStatus.PAID,
                PaymentTable.paid_at >= start,
                PaymentTable.paid_at <= end,
            )
        ).one()
        return int(total or 0)

    def paid_between(self, start: datetime, end: datetime) -> list[tuple[datetime, int]]:
        """``(paid_at, amount)`` of paid payments, for grouping by period."""
        statement = (
            select(PaymentTable.paid_at, PaymentTable.amount)
            .where(
                PaymentTable.status == PaymentStatus.PAID,
                PaymentTable.paid_at >= start,
                PaymentTable.paid_at <= end,
            )
            .order_by(PaymentTable.paid_at)
        )
        return list(self._session.exec(statement).all())
