from datetime import datetime

from sqlmodel import or_, select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.core.customer.entity import Customer, CustomerQuery
from src.bookstore.entities.core.customer.table import CustomerTable


class CustomerRepository(EntityRepository[Customer, CustomerTable]):
    """Data-access layer for customers."""

    entity_type = Customer
    table_type = CustomerTable
    sortable = frozenset({"created_at", "updated_at", "full_name", "email"})

    def get_by_email(self, email: str) -> Customer | None:
        statement = select(CustomerTable).where(
            CustomerTable.email == email.strip().lower()
        )
        return self._first(statement)

    def search(
        self, query: CustomerQuery, page: int, limit: int, sort_by: str | None
    ) -> tuple[list[Customer], int]:
        statement = select(CustomerTable)
        if query.search:
            pattern = f"%{query.search}%"
            statement = statement.where(
                or_(
                    CustomerTable.full_name.ilike(pattern),
                    CustomerTable.email.ilike(pattern),
                    CustomerTable.phone.ilike(pattern),
                )
            )
        if query.is_active is not None:
            statement = statement.where(CustomerTable.is_active == query.is_active)
        return self._page(statement, page, limit, sort_by)

    def count_registered_since(self, since: datetime) -> int:
        return self.count(CustomerTable.created_at >= since)
