"""Categories, authors and publishers: the lookup tables books point at."""

from typing import Any, ClassVar, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ConflictError, NotFoundError
from src.bookstore.core.helpers import slugify
from src.bookstore.entities.catalog.author import (
    Author,
    AuthorCreate,
    AuthorRepository,
    AuthorUpdate,
    AuthorWithCount,
)
from src.bookstore.entities.catalog.book import Book, BookQuery, BookRepository
from src.bookstore.entities.catalog.category import (
    Category,
    CategoryCreate,
    CategoryRepository,
    CategoryUpdate,
    CategoryWithCount,
)
from src.bookstore.entities.catalog.publisher import (
    Publisher,
    PublisherCreate,
    PublisherRepository,
    PublisherUpdate,
    PublisherWithCount,
)
from src.bookstore.entities.core._base import Entity, Page, Pagination

EntityT = TypeVar("EntityT", bound=Entity)


class _TaxonomyService(Generic[EntityT]):
    """Shared create/update/delete rules; subclasses name the entity and its book column."""

    label: ClassVar[str]
    book_column: ClassVar[str]
    with_count: ClassVar[type[BaseModel]]

    def __init__(self, db_session: Session, repository: Any):
        self._repo = repository
        self._books = BookRepository(db_session)

    def _require(self, item_id: str) -> EntityT:
        item = self._repo.get(item_id)
        if item is None:
            raise NotFoundError(f"{self.label} not found")
        return item

    def _counted(self, item: EntityT) -> Any:
        count = self._books.count_active(**{self.book_column: item.id})
        return self.with_count(**item.model_dump(), book_count=count)

    def _ensure_unique_name(self, name: str, exclude_id: str | None = None) -> None:
        existing = self._repo.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"{self.label} already exists")

    def _prepare(self, item: EntityT) -> EntityT:
        return item

    def get(self, item_id: str) -> Any:
        return self._counted(self._require(item_id))

    def create(self, data: BaseModel) -> EntityT:
        self._ensure_unique_name(data.name)
        item = self._repo.create(self._prepare(self._repo.entity_type(**data.model_dump())))
        logger.info("{} created: {}", self.label, item.name)
        return item

    def update(self, item_id: str, data: BaseModel) -> EntityT:
        item = self._require(item_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != item.name:
            self._ensure_unique_name(changes["name"], exclude_id=item.id)
        updated = item.with_changes(changes)
        return self._repo.update(self._prepare(updated))

    def delete(self, item_id: str) -> None:
        item = self._require(item_id)
        book_count = self._books.count_referencing(**{self.book_column: item.id})
        if book_count:
            raise BadRequestError(
                f"Cannot delete {self.label.lower()} with {book_count} books. "
                "Move or delete the books first."
            )
        self._repo.delete(item.id)
        logger.info("{} deleted: {}", self.label, item.name)

    def books(self, item_id: str, page: int, limit: int, sort_by: str | None) -> Page[Book]:
        self._require(item_id)
        query = BookQuery(**{self.book_column: item_id})
        books, total = self._books.search(query, page, limit, sort_by)
        return Page(items=books, pagination=Pagination.build(page, limit, total))


class CategoryService(_TaxonomyService[Category]):
    label = "Category"
    book_column = "category_id"
    with_count = CategoryWithCount

    def __init__(self, db_session: Session):
        super().__init__(db_session, CategoryRepository(db_session))

    def _prepare(self, item: Category) -> Category:
        item.slug = slugify(item.name)
        return item

    def list_items(self, include_inactive: bool = False) -> list[CategoryWithCount]:
        return [self._counted(item) for item in self._repo.list_sorted(include_inactive)]

    def get_by_slug(self, slug: str) -> CategoryWithCount:
        item = self._repo.get_by_slug(slug)
        if item is None:
            raise NotFoundError("Category not found")
        return self._counted(item)

    def create(self, data: CategoryCreate) -> Category:
        return super().create(data)

    def update(self, item_id: str, data: CategoryUpdate) -> Category:
        return super().update(item_id, data)

    def toggle_status(self, item_id: str) -> Category:
        item = self._require(item_id)
        item.is_active = not item.is_active
        logger.info("Category {} {}", item.name, "activated" if item.is_active else "deactivated")
        return self._repo.update(item)

    def stats(self) -> list[CategoryWithCount]:
        """Active categories, most books first."""
        return sorted(self.list_items(), key=lambda item: (-item.book_count, item.name))


class AuthorService(_TaxonomyService[Author]):
    label = "Author"
    book_column = "author_id"
    with_count = AuthorWithCount

    def __init__(self, db_session: Session):
        super().__init__(db_session, AuthorRepository(db_session))

    def list_items(
        self, search: str | None, page: int, limit: int, sort_by: str | None
    ) -> Page[AuthorWithCount]:
        items, total = self._repo.search(search, page, limit, sort_by or "name")
        return Page(
            items=[self._counted(item) for item in items],
            pagination=Pagination.build(page, limit, total),
        )

    def create(self, data: AuthorCreate) -> Author:
        return super().create(data)

    def update(self, item_id: str, data: AuthorUpdate) -> Author:
        return super().update(item_id, data)


class PublisherService(_TaxonomyService[Publisher]):
    label = "Publisher"
    book_column = "publisher_id"
    with_count = PublisherWithCount

    def __init__(self, db_session: Session):
        super().__init__(db_session, PublisherRepository(db_session))

    def list_items(
        self, search: str | None, page: int, limit: int, sort_by: str | None
    ) -> Page[PublisherWithCount]:
        items, total = self._repo.search(search, page, limit, sort_by or "name")
        return Page(
            items=[self._counted(item) for item in items],
            pagination=Pagination.build(page, limit, total),
        )

    def create(self, data: PublisherCreate) -> Publisher:
        return super().create(data)

    def update(self, item_id: str, data: PublisherUpdate) -> Publisher:
        return super().update(item_id, data)
