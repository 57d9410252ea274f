from sqlmodel import col, select

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.shop.address.entity import Address
from src.bookstore.entities.shop.address.table import AddressTable


class AddressRepository(EntityRepository[Address, AddressTable]):
    entity_type = Address
    table_type = AddressTable

    def list_for_customer(self, customer_id: str) -> list[Address]:
        """Default address first, then newest."""
        statement = (
            select(AddressTable)
            .where(AddressTable.customer_id == customer_id)
            .order_by(
                col(AddressTable.is_default).desc(),
                col(AddressTable.created_at).desc(),
                AddressTable.id,
            )
        )
        return self._all(statement)

    def get_owned(self, address_id: str, customer_id: str) -> Address | None:
        return self._first(
            select(AddressTable).where(
                AddressTable.id == address_id, AddressTable.customer_id == customer_id
            )
        )

    def get_default(self, customer_id: str) -> Address | None:
        return self._first(
            select(AddressTable).where(
                AddressTable.customer_id == customer_id,
                AddressTable.is_default == True,  # noqa: E712
            )
        )

    def clear_default(self, customer_id: str, keep_id: str | None = None) -> None:
        statement = select(AddressTable).where(
            AddressTable.customer_id == customer_id,
            AddressTable.is_default == True,  # noqa: E712
        )
        if keep_id:
            statement = statement.where(AddressTable.id != keep_id)
        for row in self._session.exec(statement).all():
            row.is_default = False
            row.updated_at = utcnow()
            self._session.add(row)
        self._session.flush()

    def count_for_customer(self, customer_id: str) -> int:
        return self.count(AddressTable.customer_id == customer_id)
