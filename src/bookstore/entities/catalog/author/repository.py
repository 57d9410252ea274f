from sqlmodel import select

from src.bookstore.entities.catalog.author.entity import Author
from src.bookstore.entities.catalog.author.table import AuthorTable
from src.bookstore.entities.core._repository import EntityRepository


class AuthorRepository(EntityRepository[Author, AuthorTable]):
    """Data-access layer for authors."""

    entity_type = Author
    table_type = AuthorTable
    sortable = frozenset({"created_at", "name"})

    def get_by_name(self, name: str) -> Author | None:
        return self._first(select(AuthorTable).where(AuthorTable.name == name))

    def search(
        self, search: str | None, page: int, limit: int, sort_by: str | None = "name"
    ) -> tuple[list[Author], int]:
        statement = select(AuthorTable)
        if search:
            statement = statement.where(AuthorTable.name.ilike(f"%{search}%"))
        return self._page(statement, page, limit, sort_by)
