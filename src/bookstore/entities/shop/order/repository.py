from datetime import datetime

from sqlalchemy import func
from sqlmodel import col, or_, select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.core.customer.table import CustomerTable
from src.bookstore.entities.shop.order.entity import Order, OrderQuery, OrderStatus
from src.bookstore.entities.shop.order.table import OrderItemTable, OrderTable

ORDER_NUMBER_PREFIX = "ORD-"


class OrderRepository(EntityRepository[Order, OrderTable]):
    """Orders with their item lines."""

    entity_type = Order
    table_type = OrderTable
    sortable = frozenset({"created_at", "updated_at", "total_price", "order_number", "status"})

    def _to_entity(self, row: OrderTable) -> Order:
        lines = self._session.exec(
            select(OrderItemTable)
            .where(OrderItemTable.order_id == row.id)
            .order_by(OrderItemTable.position)
        ).all()
        data = row.model_dump()
        data["items"] = [line.model_dump(exclude={"order_id", "position"}) for line in lines]
        return Order.model_validate(data)

    def _write_items(self, order: Order) -> None:
        existing = {
            line.position: line
            for line in self._session.exec(
                select(OrderItemTable).where(OrderItemTable.order_id == order.id)
            ).all()
        }
        for position, item in enumerate(order.items):
            line = existing.get(position) or OrderItemTable(order_id=order.id, position=position)
            for name, value in item.model_dump().items():
                setattr(line, name, value)
            self._session.add(line)
        self._session.flush()

    def create(self, entity: Order) -> Order:
        self._session.add(OrderTable(**self._columns(entity)))
        self._session.flush()
        self._write_items(entity)
        return self.get(entity.id)  # type: ignore[return-value]

    def update(self, entity: Order) -> Order:
        super().update(entity)
        self._write_items(entity)
        return self.get(entity.id)  # type: ignore[return-value]

    def next_order_number(self, now: datetime) -> str:
        """``ORD-YYYYMMDD-NNNN``, numbered from 1 each day."""
        prefix = f"{ORDER_NUMBER_PREFIX}{now:%Y%m%d}-"
        last = self._session.exec(
            select(func.max(OrderTable.order_number)).where(
                col(OrderTable.order_number).startswith(prefix)
            )
        ).one()
        number = int(last.removeprefix(prefix)) + 1 if last else 1
        return f"{prefix}{number:04d}"

    def search(
        self, query: OrderQuery, page: int, limit: int, sort_by: str | None
    ) -> tuple[list[Order], int]:
        statement = select(OrderTable)
        if query.customer_id:
            statement = statement.where(OrderTable.customer_id == query.customer_id)
        if query.status:
            statement = statement.where(OrderTable.status == query.status)
        if query.search:
            pattern = f"%{query.search.strip()}%"
            matching_customers = select(CustomerTable.id).where(
                or_(CustomerTable.full_name.ilike(pattern), CustomerTable.email.ilike(pattern))
            )
            statement = statement.where(
                or_(
                    OrderTable.order_number.ilike(pattern),
                    col(OrderTable.customer_id).in_(matching_customers),
                )
            )
        return self._page(statement, page, limit, sort_by)

    def count_for_customer(self, customer_id: str) -> int:
        return self.count(OrderTable.customer_id == customer_id)

    def spent_by_customer(self, customer_id: str) -> int:
        total = self._session.exec(
            select(func.sum(OrderTable.total_price)).where(
                OrderTable.customer_id == customer_id,
                OrderTable.status == OrderStatus.DELIVERED,
            )
        ).one()
        return int(total or 0)

    def delivered_book_ids(self, customer_id: str) -> list[str]:
        """Books a customer received directly, newest orders first."""
        statement = (
            select(OrderItemTable.book_id)
            .join(OrderTable, OrderTable.id == OrderItemTable.order_id)
            .where(
                OrderTable.customer_id == customer_id,
                OrderTable.status == OrderStatus.DELIVERED,
                col(OrderItemTable.book_id).is_not(None),
            )
            .order_by(col(OrderTable.created_at).desc())
        )
        return list(dict.fromkeys(self._session.exec(statement).all()))

    def delivered_combo_ids(self, customer_id: str) -> list[str]:
        statement = (
            select(OrderItemTable.combo_id)
            .join(OrderTable, OrderTable.id == OrderItemTable.order_id)
            .where(
                OrderTable.customer_id == customer_id,
                OrderTable.status == OrderStatus.DELIVERED,
                col(OrderItemTable.combo_id).is_not(None),
            )
        )
        return list(dict.fromkeys(self._session.exec(statement).all()))

    def status_totals(self) -> list[tuple[str, int, int]]:
        statement = select(
            OrderTable.status, func.count(), func.coalesce(func.sum(OrderTable.total_price), 0)
        ).group_by(OrderTable.status)
        rows = self._session.exec(statement)
        return [(status, count, int(total)) for status, count, total in rows]
