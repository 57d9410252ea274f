from sqlmodel import select

from src.bookstore.entities.catalog.category.entity import Category
from src.bookstore.entities.catalog.category.table import CategoryTable
from src.bookstore.entities.core._repository import EntityRepository


class CategoryRepository(EntityRepository[Category, CategoryTable]):
    """Data-access layer for categories."""

    entity_type = Category
    table_type = CategoryTable
    sortable = frozenset({"created_at", "name"})

    def get_by_name(self, name: str) -> Category | None:
        return self._first(select(CategoryTable).where(CategoryTable.name == name))

    def get_by_slug(self, slug: str) -> Category | None:
        return self._first(select(CategoryTable).where(CategoryTable.slug == slug))

    def list_sorted(self, include_inactive: bool = False) -> list[Category]:
        statement = select(CategoryTable)
        if not include_inactive:
            statement = statement.where(CategoryTable.is_active == True)  # noqa: E712
        return self._all(statement.order_by(CategoryTable.name))
