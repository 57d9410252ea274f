from sqlmodel import col, select

from src.bookstore.entities.catalog.combo.entity import Combo
from src.bookstore.entities.catalog.combo.table import ComboItemTable, ComboTable
from src.bookstore.entities.core._repository import EntityRepository


class ComboRepository(EntityRepository[Combo, ComboTable]):
    """Data-access layer for combos and their book lines."""

    entity_type = Combo
    table_type = ComboTable
    sortable = frozenset({"created_at", "name", "combo_price", "sold_count"})

    def _to_entity(self, row: ComboTable) -> Combo:
        lines = self._session.exec(
            select(ComboItemTable)
            .where(ComboItemTable.combo_id == row.id)
            .order_by(ComboItemTable.position)
        ).all()
        data = row.model_dump()
        data["items"] = [{"book_id": line.book_id, "quantity": line.quantity} for line in lines]
        return Combo.model_validate(data)

    def _write_items(self, combo: Combo) -> None:
        for line in self._session.exec(
            select(ComboItemTable).where(ComboItemTable.combo_id == combo.id)
        ).all():
            self._session.delete(line)
        self._session.flush()
        for position, item in enumerate(combo.items):
            self._session.add(
                ComboItemTable(
                    combo_id=combo.id,
                    book_id=item.book_id,
                    position=position,
                    quantity=item.quantity,
                )
            )
        self._session.flush()

    def create(self, entity: Combo) -> Combo:
        self._session.add(ComboTable(**self._columns(entity)))
        self._session.flush()
        self._write_items(entity)
        return self.get(entity.id)  # type: ignore[return-value]

    def update(self, entity: Combo) -> Combo:
        super().update(entity)
        self._write_items(entity)
        return self.get(entity.id)  # type: ignore[return-value]

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        statement = select(ComboTable.id).where(ComboTable.slug == slug)
        if exclude_id:
            statement = statement.where(ComboTable.id != exclude_id)
        return self._session.exec(statement).first() is not None

    def list_active(self, page: int, limit: int, sort_by: str | None) -> tuple[list[Combo], int]:
        statement = select(ComboTable).where(ComboTable.is_active == True)  # noqa: E712
        return self._page(statement, page, limit, sort_by)

    def list_any(self, page: int, limit: int, sort_by: str | None) -> tuple[list[Combo], int]:
        return self._page(select(ComboTable), page, limit, sort_by)

    def ids_containing_book(self, book_id: str) -> list[str]:
        return list(
            self._session.exec(
                select(ComboItemTable.combo_id).where(ComboItemTable.book_id == book_id)
            ).all()
        )

    def count_containing(self, book_ids: list[str]) -> int:
        if not book_ids:
            return 0
        return len(
            set(
                self._session.exec(
                    select(ComboItemTable.combo_id).where(col(ComboItemTable.book_id).in_(book_ids))
                ).all()
            )
        )
