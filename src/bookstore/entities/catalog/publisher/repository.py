from sqlmodel import select

from src.bookstore.entities.catalog.publisher.entity import Publisher
from src.bookstore.entities.catalog.publisher.table import PublisherTable
from src.bookstore.entities.core._repository import EntityRepository


class PublisherRepository(EntityRepository[Publisher, PublisherTable]):
    """Data-access layer for publishers."""

    entity_type = Publisher
    table_type = PublisherTable
    sortable = frozenset({"created_at", "name"})

    def get_by_name(self, name: str) -> Publisher | None:
        return self._first(select(PublisherTable).where(PublisherTable.name == name))

    def search(
        self, search: str | None, page: int, limit: int, sort_by: str | None = "name"
    ) -> tuple[list[Publisher], int]:
        statement = select(PublisherTable)
        if search:
            statement = statement.where(PublisherTable.name.ilike(f"%{search}%"))
        return self._page(statement, page, limit, sort_by)
