"""Shared data-access behaviour for entity repositories."""

import re
from collections.abc import Iterable
from typing import Any, ClassVar, Generic, TypeVar

from sqlalchemy import func
from sqlmodel import Session, select

from src.bookstore.core.errors import BadRequestError
from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.core._base import Entity, EntityTable

EntityT = TypeVar("EntityT", bound=Entity)
TableT = TypeVar("TableT", bound=EntityTable)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class EntityRepository(Generic[EntityT, TableT]):
    """Data-access layer mapping one table to one domain entity.

    Subclasses set ``entity_type``/``table_type`` and list the columns clients
    may sort on in ``sortable``. Rows never leave the repository; callers get
    validated domain entities back.
    """

    entity_type: ClassVar[type[Entity]]
    table_type: ClassVar[type[EntityTable]]
    sortable: ClassVar[frozenset[str]] = frozenset({"created_at", "updated_at"})

    def __init__(self, session: Session) -> None:
        self._session = session

    # -- mapping ---------------------------------------------------------
    def _to_entity(self, row: Any) -> EntityT:
        entity = self.entity_type.model_validate(row, from_attributes=True)
        return entity  # type: ignore[return-value]

    def _columns(self, entity: EntityT) -> dict[str, Any]:
        dumped = entity.model_dump()
        columns = {}
        for name in self.table_type.model_fields:
            if name in dumped:
                columns[name] = dumped[name]
            elif name in type(entity).model_fields:
                # fields excluded from serialisation, e.g. password hashes
                columns[name] = getattr(entity, name)
        return columns

    # -- CRUD ------------------------------------------------------------
    def get(self, item_id: str) -> EntityT | None:
        row = self._session.get(self.table_type, item_id)
        if row is None:
            return None
        return self._to_entity(row)

    def get_many(self, ids: Iterable[str]) -> dict[str, EntityT]:
        ids = list(set(ids))
        if not ids:
            return {}
        id_column = self.table_type.id  # type: ignore[attr-defined]
        statement = select(self.table_type).where(id_column.in_(ids))
        return {row.id: self._to_entity(row) for row in self._session.exec(statement)}

    def create(self, entity: EntityT) -> EntityT:
        row = self.table_type(**self._columns(entity))
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)

    def update(self, entity: EntityT) -> EntityT:
        row = self._session.get(self.table_type, entity.id)
        if row is None:
            raise ValueError(f"{self.entity_type.__name__} {entity.id} not found")
        for name, value in self._columns(entity).items():
            if name in ("id", "created_at"):
                continue
            setattr(row, name, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)

    def delete(self, item_id: str) -> bool:
        row = self._session.get(self.table_type, item_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_all(self) -> list[EntityT]:
        return self._all(select(self.table_type).order_by(self.table_type.created_at))

    def count(self, *conditions: Any) -> int:
        statement = select(func.count()).select_from(self.table_type)
        if conditions:
            statement = statement.where(*conditions)
        return self._session.exec(statement).one()

    # -- query helpers ---------------------------------------------------
    def _first(self, statement: Any) -> EntityT | None:
        row = self._session.exec(statement).first()
        return None if row is None else self._to_entity(row)

    def _all(self, statement: Any) -> list[EntityT]:
        return [self._to_entity(row) for row in self._session.exec(statement).all()]

    def _count_of(self, statement: Any) -> int:
        return self._session.exec(
            select(func.count()).select_from(statement.order_by(None).subquery())
        ).one()

    def _sorted(self, statement: Any, sort_by: str | None) -> Any:
        """Apply a ``-field,other`` style sort, always tie-breaking on id."""
        orderings = []
        for part in re.split(r"[,\s]+", sort_by or ""):
            if not part:
                continue
            descending = part.startswith("-")
            name = _snake(part.lstrip("-+"))
            if name not in self.sortable:
                raise BadRequestError(f"Cannot sort by '{part.lstrip('-+')}'")
            column = getattr(self.table_type, name)
            orderings.append(column.desc() if descending else column.asc())
        orderings.append(self.table_type.id)
        return statement.order_by(*orderings)

    def _page(
        self, statement: Any, page: int, limit: int, sort_by: str | None = None
    ) -> tuple[list[EntityT], int]:
        total = self._count_of(statement)
        statement = self._sorted(statement, sort_by).offset((page - 1) * limit).limit(limit)
        return self._all(statement), total
