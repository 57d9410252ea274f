"""Entity: Author."""

from pydantic import BaseModel, Field

from src.bookstore.entities.core._base import Entity


class Author(Entity):
    name: str = Field(min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=2000)
    image: str | None = None
    nationality: str | None = None


class AuthorWithCount(Author):
    book_count: int = 0


class AuthorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=2000)
    image: str | None = None
    nationality: str | None = None


class AuthorUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=2000)
    image: str | None = None
    nationality: str | None = None
