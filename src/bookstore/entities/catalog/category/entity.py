"""Entity: Category."""

from pydantic import BaseModel, Field

from src.bookstore.entities.core._base import Entity


class Category(Entity):
    """A catalog section, e.g. "Văn học" or "Kinh tế"."""

    name: str = Field(min_length=1, max_length=100)
    slug: str = ""
    description: str | None = Field(default=None, max_length=500)
    image: str | None = None
    is_active: bool = True


class CategoryWithCount(Category):
    book_count: int = 0


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    image: str | None = None


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    image: str | None = None
    is_active: bool | None = None
