"""Catalog rules: slugs, stock counters, copies, combos and lookup tables."""

from datetime import timedelta

import pytest

from src.bookstore.core.errors import BadRequestError, ConflictError, NotFoundError
from src.bookstore.core.helpers import utcnow
from src.bookstore.core.services.catalog.book_service import BookService
from src.bookstore.core.services.catalog.combo_service import ComboService, availability
from src.bookstore.core.services.catalog.inventory_service import InventoryService
from src.bookstore.core.services.catalog.taxonomy_service import CategoryService
from src.bookstore.entities.catalog.book import Book, BookCreate, BookStatus, BookUpdate
from src.bookstore.entities.catalog.book_copy import (
    BookCopiesCreate,
    BookCopy,
    BookCopyQuery,
    BookCopyRepository,
    CopyStatus,
)
from src.bookstore.entities.catalog.category import CategoryCreate, CategoryUpdate
from src.bookstore.entities.catalog.combo import Combo, ComboItem, ComboUpdate


def _copies(session, book_id: str):
    return InventoryService(session).list_for_book(book_id, None, 1, 100).items


def _stock_book(book_id: str, available: int, *, is_active: bool = True) -> Book:
    return Book(
        id=book_id,
        title=book_id,
        author_id="a",
        publisher_id="p",
        category_id="c",
        isbn=book_id,
        original_price=100,
        sale_price=100,
        available_copies=available,
        is_active=is_active,
    )


class TestBookService:
    def test_create_derives_slug_and_copies(self, book):
        assert book.slug == "dac-nhan-tam"
        assert book.total_copies == 5
        assert book.available_copies == 5
        assert book.status == BookStatus.AVAILABLE
        assert book.discount_percent == 20
        assert book.author.name == "Dale Carnegie"

    def test_slug_collisions_get_numeric_suffix(self, make_book):
        make_book("Nhà Giả Kim")
        assert make_book("Nhà Giả Kim").slug == "nha-gia-kim-2"
        assert make_book("Nhà giả kim").slug == "nha-gia-kim-3"

    def test_duplicate_isbn_rejected(self, session, book):
        data = BookCreate(
            title="Another",
            author_id=book.author_id,
            publisher_id=book.publisher_id,
            category_id=book.category_id,
            isbn=book.isbn,
            images=["https://img.test/x.jpg"],
            original_price=1000,
            sale_price=1000,
        )
        with pytest.raises(ConflictError, match="ISBN already exists"):
            BookService(session).create(data)

    def test_unknown_reference_rejected(self, session, book):
        data = BookCreate(
            title="Orphan",
            author_id="missing",
            publisher_id=book.publisher_id,
            category_id=book.category_id,
            isbn="0000000000",
            images=["https://img.test/x.jpg"],
            original_price=1000,
            sale_price=1000,
        )
        with pytest.raises(NotFoundError, match="Author not found"):
            BookService(session).create(data)

    def test_book_without_copies_is_out_of_stock(self, make_book):
        assert make_book("Empty Shelf", copies=0).status == BookStatus.OUT_OF_STOCK

    def test_discount_percent_sets_sale_price(self, session, book):
        updated = BookService(session).update(book.id, BookUpdate(discount_percent=35))
        assert updated.sale_price == 97500
        assert updated.discount_percent == 35

    def test_sale_price_cannot_exceed_original(self, session, book):
        with pytest.raises(BadRequestError):
            BookService(session).update(book.id, BookUpdate(original_price=1000))

    def test_retitling_regenerates_slug(self, session, book):
        updated = BookService(session).update(book.id, BookUpdate(title="How to Win Friends"))
        assert updated.slug == "how-to-win-friends"

    def test_view_counts_reads(self, session, book):
        service = BookService(session)
        service.view(book.id)
        assert service.view(book.id).view_count == 2

    def test_inactive_book_hidden_by_slug(self, session, book):
        BookService(session).soft_delete(book.id)
        with pytest.raises(NotFoundError):
            BookService(session).view_by_slug(book.slug)


class TestInventory:
    def test_copy_codes_continue_from_highest(self, session, book, second_book):
        codes = sorted(copy.copy_code for copy in _copies(session, second_book.id))
        assert codes == ["COPY-00006", "COPY-00007", "COPY-00008"]

    def test_copy_codes_past_five_digits(self, session, book):
        copies = BookCopyRepository(session)
        for code in ("COPY-99999", "COPY-100000"):
            copies.create(BookCopy(copy_code=code, book_id=book.id, import_price=1000))
        assert copies.next_copy_codes(2) == ["COPY-100001", "COPY-100002"]


    def test_counters_follow_copy_status(self, session, book):
        inventory = InventoryService(session)
        first, second = _copies(session, book.id)[:2]
        inventory.set_status(first.id, CopyStatus.SOLD)
        inventory.set_status(second.id, CopyStatus.DAMAGED)

        refreshed = BookService(session).detail(BookService(session)._require(book.id))
        assert refreshed.total_copies == 5
        assert refreshed.available_copies == 3
        assert refreshed.sold_copies == 1

    def test_sold_date_stamped_and_cleared(self, session, book):
        inventory = InventoryService(session)
        copy = _copies(session, book.id)[0]
        assert inventory.set_status(copy.id, CopyStatus.SOLD).sold_date is not None
        assert inventory.set_status(copy.id, CopyStatus.AVAILABLE).sold_date is None

    def test_status_flips_with_availability(self, session, make_book):
        book = make_book("Last Copy", copies=1)
        inventory = InventoryService(session)
        copy = _copies(session, book.id)[0]

        inventory.set_status(copy.id, CopyStatus.DAMAGED)
        assert BookService(session)._require(book.id).status == BookStatus.OUT_OF_STOCK

        inventory.set_status(copy.id, CopyStatus.AVAILABLE)
        assert BookService(session)._require(book.id).status == BookStatus.AVAILABLE

    def test_sold_copies_cannot_be_deleted(self, session, book):
        inventory = InventoryService(session)
        copy = _copies(session, book.id)[0]
        inventory.set_status(copy.id, CopyStatus.SOLD)
        with pytest.raises(BadRequestError, match="sold"):
            inventory.delete_copy(copy.id)

    def test_delete_resyncs_counters(self, session, book):
        inventory = InventoryService(session)
        inventory.delete_copy(_copies(session, book.id)[0].id)
        assert BookService(session)._require(book.id).total_copies == 4

    def test_add_copies_to_existing_book(self, session, book):
        added = InventoryService(session).add_copies(
            book.id, BookCopiesCreate(quantity=2, import_price=50000, warehouse_location="A-1")
        )
        assert [copy.warehouse_location for copy in added] == ["A-1", "A-1"]
        assert BookService(session)._require(book.id).available_copies == 7

    def test_list_copies_with_summary(self, session, book, second_book):
        inventory = InventoryService(session)
        inventory.set_status(_copies(session, book.id)[0].id, CopyStatus.SOLD)

        page = inventory.list_copies(BookCopyQuery(book_id=book.id), page=1, limit=2)
        assert page.pagination.total == 5
        assert len(page.items) == 2
        assert page.summary.sold == 1
        assert page.summary.available == 4

    def test_stats_by_book(self, session, book, second_book):
        stats = {item.book_id: item for item in InventoryService(session).stats_by_book()}
        assert stats[book.id].total == 5
        assert stats[second_book.id].available == 3


class TestComboAvailability:
    def _combo(self, **fields) -> Combo:
        items = [ComboItem(book_id="a", quantity=2), ComboItem(book_id="b", quantity=1)]
        return Combo(name="Bundle", combo_price=100, items=items, **fields)

    def test_available_quantity_is_minimum_of_floors(self):
        books = {"a": _stock_book("a", 5), "b": _stock_book("b", 7)}
        result = availability(self._combo(), books)
        assert result.is_available
        assert result.available_quantity == 2

    def test_short_book_makes_combo_unavailable(self):
        books = {"a": _stock_book("a", 1), "b": _stock_book("b", 7)}
        result = availability(self._combo(), books)
        assert not result.is_available
        assert result.available_quantity == 0

    def test_inactive_book_makes_combo_unavailable(self):
        books = {"a": _stock_book("a", 5), "b": _stock_book("b", 7, is_active=False)}
        assert not availability(self._combo(), books).is_available

    def test_outside_sale_window(self):
        books = {"a": _stock_book("a", 5), "b": _stock_book("b", 7)}
        combo = self._combo(start_date=utcnow() + timedelta(days=1))
        assert not availability(combo, books).is_available

    def test_inactive_combo(self):
        books = {"a": _stock_book("a", 5), "b": _stock_book("b", 7)}
        assert not availability(self._combo(is_active=False), books).is_available


class TestComboService:
    def test_detail_prices(self, combo):
        assert combo.total_original_price == 250000
        assert combo.saved_amount == 70000
        assert combo.discount_percent == 28
        assert combo.available_quantity == 3
        assert combo.slug == "combo-dale-carnegie"

    def test_items_replaced_on_update(self, session, combo, book, make_book):
        third = make_book("Third", copies=2)
        items = [ComboItem(book_id=book.id, quantity=1), ComboItem(book_id=third.id, quantity=2)]
        updated = ComboService(session).update(combo.id, ComboUpdate(items=items))
        assert [item.book_id for item in updated.items] == [book.id, third.id]
        assert updated.available_quantity == 1

    def test_soft_deleted_combo_hidden_from_storefront(self, session, combo):
        service = ComboService(session)
        service.soft_delete(combo.id)
        with pytest.raises(NotFoundError):
            service.get_active(combo.id)
        assert service.get(combo.id).is_active is False

    def test_sold_count_never_negative(self, session, combo):
        service = ComboService(session)
        service.adjust_sold_count(combo.id, -3)
        assert service.get(combo.id).sold_count == 0


class TestTaxonomy:
    def test_duplicate_name_rejected(self, session, category):
        with pytest.raises(ConflictError, match="Category already exists"):
            CategoryService(session).create(CategoryCreate(name=category.name))

    def test_rename_updates_slug(self, session, category):
        data = CategoryUpdate(name="Tâm lý học")
        updated = CategoryService(session).update(category.id, data)
        assert updated.slug == "tam-ly-hoc"

    def test_delete_blocked_while_books_reference_it(self, session, category, book):
        with pytest.raises(BadRequestError, match="Cannot delete category with 1 books"):
            CategoryService(session).delete(category.id)

    def test_book_count_only_counts_active_books(self, session, category, book, second_book):
        BookService(session).soft_delete(second_book.id)
        assert CategoryService(session).get(category.id).book_count == 1
