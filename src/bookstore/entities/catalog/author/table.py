"""Author database table model."""

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class AuthorTable(EntityTable, table=True):
    __tablename__ = "authors"

    name: str = Field(unique=True, index=True)
    bio: str | None = None
    image: str | None = None
    nationality: str | None = None
