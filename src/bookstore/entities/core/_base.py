import uuid
from datetime import datetime
from typing import Any, Generic, Self, TypeVar

import sqlalchemy as sa
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel

from src.bookstore.core.helpers import page_count, utcnow


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)

    def with_changes(self, changes: dict[str, Any]) -> Self:
        """Copy with ``changes`` applied and every field validated again.

        A value the entity rejects, such as null for a required field, is
        reported to the client as a 422.
        """
        try:
            current = {name: getattr(self, name) for name in type(self).model_fields}
            return type(self).model_validate({**current, **changes})
        except ValidationError as e:
            raise RequestValidationError(e.errors(include_url=False)) from e


class EntityTable(SQLModel, table=False):
    """Base table with a UUID primary key and audit timestamps."""

    id: str = Field(
        primary_key=True,
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier for the entity",
    )

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={
            "server_default": sa.func.now(),
            "onupdate": utcnow,
        },
    )


class RefSummary(BaseModel):
    """Compact reference to a related record, e.g. a book's author."""

    id: str
    name: str
    slug: str | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=page_count(total, limit))


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of results plus the pagination envelope."""

    items: list[T]
    pagination: Pagination
