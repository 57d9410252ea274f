from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, NotFoundError
from src.bookstore.core.helpers import discount_percent, slugify, utcnow
from src.bookstore.entities.catalog.book import Book, BookRepository
from src.bookstore.entities.catalog.combo import (
    Combo,
    ComboAvailability,
    ComboBookLine,
    ComboCreate,
    ComboDetail,
    ComboRepository,
    ComboUpdate,
)
from src.bookstore.entities.core._base import Page, Pagination


def availability(combo: Combo, books: dict[str, Book]) -> ComboAvailability:
    """A combo can be sold ``min(available // qty)`` times across its books."""
    if not combo.is_active or not combo.in_sale_window(utcnow()) or not combo.items:
        return ComboAvailability(is_available=False, available_quantity=0)
    quantities = []
    for item in combo.items:
        book = books.get(item.book_id)
        if book is None or not book.is_active:
            return ComboAvailability(is_available=False, available_quantity=0)
        quantities.append(book.available_copies // item.quantity)
    quantity = min(quantities)
    return ComboAvailability(is_available=quantity > 0, available_quantity=quantity)


class ComboService:
    def __init__(self, db_session: Session):
        self._combos = ComboRepository(db_session)
        self._books = BookRepository(db_session)

    def _require(self, combo_id: str) -> Combo:
        combo = self._combos.get(combo_id)
        if combo is None:
            raise NotFoundError("Combo not found")
        return combo

    def _unique_slug(self, name: str, exclude_id: str | None = None) -> str:
        base = slugify(name) or "combo"
        slug, suffix = base, 1
        while self._combos.slug_taken(slug, exclude_id):
            suffix += 1
            slug = f"{base}-{suffix}"
        return slug

    def _check_books(self, combo: Combo) -> None:
        books = self._books.get_many(item.book_id for item in combo.items)
        missing = [item.book_id for item in combo.items if item.book_id not in books]
        if missing:
            raise NotFoundError(f"Book not found: {', '.join(missing)}")

    def detail(self, combo: Combo) -> ComboDetail:
        books = self._books.get_many(item.book_id for item in combo.items)
        lines = [
            ComboBookLine(
                book_id=book.id,
                title=book.title,
                slug=book.slug,
                image=book.cover_image,
                original_price=book.original_price,
                sale_price=book.sale_price,
                quantity=item.quantity,
                available_copies=book.available_copies,
            )
            for item in combo.items
            if (book := books.get(item.book_id)) is not None
        ]
        total_original = sum(line.original_price * line.quantity for line in lines)
        stock = availability(combo, books)
        return ComboDetail(
            **combo.model_dump(),
            books=lines,
            total_original_price=total_original,
            saved_amount=total_original - combo.combo_price,
            discount_percent=discount_percent(total_original, combo.combo_price),
            is_available=stock.is_available,
            available_quantity=stock.available_quantity,
        )

    def list_active(self, page: int, limit: int, sort_by: str | None) -> Page[ComboDetail]:
        combos, total = self._combos.list_active(page, limit, sort_by or "-created_at")
        return Page(
            items=[self.detail(combo) for combo in combos],
            pagination=Pagination.build(page, limit, total),
        )

    def list_all(self, page: int, limit: int, sort_by: str | None) -> Page[ComboDetail]:
        combos, total = self._combos.list_any(page, limit, sort_by or "-created_at")
        return Page(
            items=[self.detail(combo) for combo in combos],
            pagination=Pagination.build(page, limit, total),
        )

    def get(self, combo_id: str) -> ComboDetail:
        return self.detail(self._require(combo_id))

    def get_active(self, combo_id: str) -> ComboDetail:
        combo = self._require(combo_id)
        if not combo.is_active:
            raise NotFoundError("Combo not found")
        return self.detail(combo)

    def availability(self, combo_id: str) -> ComboAvailability:
        combo = self._require(combo_id)
        return availability(combo, self._books.get_many(item.book_id for item in combo.items))

    def create(self, data: ComboCreate) -> ComboDetail:
        combo = Combo(**data.model_dump(), slug=self._unique_slug(data.name))
        self._check_books(combo)
        combo = self._combos.create(combo)
        logger.info("Combo created: {} ({})", combo.name, combo.id)
        return self.detail(combo)

    def update(self, combo_id: str, data: ComboUpdate) -> ComboDetail:
        combo = self._require(combo_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != combo.name:
            changes["slug"] = self._unique_slug(changes["name"], exclude_id=combo.id)
        updated = combo.with_changes(changes)
        if updated.start_date and updated.end_date and updated.end_date < updated.start_date:
            raise BadRequestError("end_date must be after start_date")
        self._check_books(updated)
        return self.detail(self._combos.update(updated))

    def soft_delete(self, combo_id: str) -> None:
        combo = self._require(combo_id)
        combo.is_active = False
        self._combos.update(combo)
        logger.info("Combo deactivated: {}", combo.id)

    def adjust_sold_count(self, combo_id: str, delta: int) -> None:
        combo = self._combos.get(combo_id)
        if combo is None:
            return
        combo.sold_count = max(0, combo.sold_count + delta)
        self._combos.update(combo)
