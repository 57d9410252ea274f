from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ConflictError, NotFoundError
from src.bookstore.core.helpers import price_after_discount, slugify
from src.bookstore.core.services.catalog.inventory_service import InventoryService
from src.bookstore.entities.catalog.author import AuthorRepository
from src.bookstore.entities.catalog.book import (
    Book,
    BookCreate,
    BookDetail,
    BookQuery,
    BookRepository,
    BookUpdate,
)
from src.bookstore.entities.catalog.book_copy import BookCopiesCreate
from src.bookstore.entities.catalog.category import CategoryRepository
from src.bookstore.entities.catalog.publisher import PublisherRepository
from src.bookstore.entities.core._base import Page, Pagination, RefSummary


class BookService:
    """Catalog browsing and back-office book management."""

    def __init__(self, db_session: Session):
        self._books = BookRepository(db_session)
        self._authors = AuthorRepository(db_session)
        self._publishers = PublisherRepository(db_session)
        self._categories = CategoryRepository(db_session)
        self._inventory = InventoryService(db_session)

    def _require(self, book_id: str) -> Book:
        book = self._books.get(book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def _unique_slug(self, title: str, exclude_id: str | None = None) -> str:
        base = slugify(title) or "book"
        slug, suffix = base, 1
        while self._books.slug_taken(slug, exclude_id):
            suffix += 1
            slug = f"{base}-{suffix}"
        return slug

    def _check_references(
        self, author_id: str | None, publisher_id: str | None, category_id: str | None
    ) -> None:
        if author_id and self._authors.get(author_id) is None:
            raise NotFoundError("Author not found")
        if publisher_id and self._publishers.get(publisher_id) is None:
            raise NotFoundError("Publisher not found")
        if category_id and self._categories.get(category_id) is None:
            raise NotFoundError("Category not found")

    def detail(self, book: Book) -> BookDetail:
        author = self._authors.get(book.author_id)
        publisher = self._publishers.get(book.publisher_id)
        category = self._categories.get(book.category_id)
        return BookDetail(
            **book.model_dump(exclude={"discount_percent"}),
            author=RefSummary(id=author.id, name=author.name) if author else None,
            publisher=RefSummary(id=publisher.id, name=publisher.name) if publisher else None,
            category=(
                RefSummary(id=category.id, name=category.name, slug=category.slug)
                if category
                else None
            ),
        )

    # -- storefront ------------------------------------------------------
    def search(
        self, query: BookQuery, page: int, limit: int, sort_by: str | None
    ) -> Page[Book]:
        books, total = self._books.search(query, page, limit, sort_by or "-created_at")
        return Page(items=books, pagination=Pagination.build(page, limit, total))

    def view(self, book_id: str) -> BookDetail:
        """Book detail; every read counts as a view."""
        book = self._require(book_id)
        self._books.increment_view_count(book.id)
        return self.detail(self._require(book_id))

    def view_by_slug(self, slug: str) -> BookDetail:
        book = self._books.get_by_slug(slug)
        if book is None or not book.is_active:
            raise NotFoundError("Book not found")
        self._books.increment_view_count(book.id)
        return self.detail(self._require(book.id))

    # -- back office -----------------------------------------------------
    def create(self, data: BookCreate) -> BookDetail:
        if self._books.get_by_isbn(data.isbn):
            raise ConflictError("ISBN already exists")
        self._check_references(data.author_id, data.publisher_id, data.category_id)
        fields = data.model_dump(exclude={"initial_copies", "import_price", "warehouse_location"})
        book = self._books.create(Book(**fields, slug=self._unique_slug(data.title)))
        logger.info("Book created: {} ({})", book.title, book.id)

        if data.initial_copies:
            self._inventory.add_copies(
                book.id,
                BookCopiesCreate(
                    quantity=data.initial_copies,
                    import_price=(
                        data.import_price if data.import_price is not None else data.original_price
                    ),
                    warehouse_location=data.warehouse_location,
                ),
            )
        else:
            self._inventory.resync_book(book.id)
        return self.detail(self._require(book.id))

    def update(self, book_id: str, data: BookUpdate) -> BookDetail:
        book = self._require(book_id)
        changes = data.model_dump(exclude_unset=True)
        percent = changes.pop("discount_percent", None)

        if changes.get("isbn") and changes["isbn"] != book.isbn:
            existing = self._books.get_by_isbn(changes["isbn"])
            if existing is not None and existing.id != book.id:
                raise ConflictError("ISBN already exists")
        self._check_references(
            changes.get("author_id"), changes.get("publisher_id"), changes.get("category_id")
        )
        if changes.get("title") and changes["title"] != book.title:
            changes["slug"] = self._unique_slug(changes["title"], exclude_id=book.id)

        updated = book.with_changes(changes)
        if percent is not None:
            updated.sale_price = price_after_discount(updated.original_price, percent)
        if updated.sale_price > updated.original_price:
            raise BadRequestError("sale_price cannot exceed original_price")
        return self.detail(self._books.update(updated))

    def soft_delete(self, book_id: str) -> None:
        book = self._require(book_id)
        book.is_active = False
        self._books.update(book)
        logger.info("Book deactivated: {}", book.id)

    def toggle_status(self, book_id: str) -> Book:
        book = self._require(book_id)
        book.is_active = not book.is_active
        return self._books.update(book)
