from sqlmodel import select

from src.bookstore.entities.core._repository import EntityRepository
from src.bookstore.entities.core.admin.entity import Admin
from src.bookstore.entities.core.admin.table import AdminTable


class AdminRepository(EntityRepository[Admin, AdminTable]):
    """Data-access layer for back-office accounts."""

    entity_type = Admin
    table_type = AdminTable

    def get_by_email(self, email: str) -> Admin | None:
        statement = select(AdminTable).where(AdminTable.email == email.strip().lower())
        return self._first(statement)
