from datetime import timedelta

from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, NotFoundError
from src.bookstore.core.helpers import utcnow
from src.bookstore.core.services.catalog.combo_service import availability
from src.bookstore.entities.catalog.book import Book, BookRepository, BookSummary
from src.bookstore.entities.catalog.combo import Combo, ComboRepository, ComboSummary
from src.bookstore.entities.shop.cart import (
    Cart,
    CartItem,
    CartItemAdd,
    CartLine,
    CartRepository,
    CartView,
    ItemType,
)
from src.bookstore.runtime.context import get_config


class CartService:
    """A customer's cart; prices are captured when items are added."""

    def __init__(self, db_session: Session):
        self._carts = CartRepository(db_session)
        self._books = BookRepository(db_session)
        self._combos = ComboRepository(db_session)

    def get_cart(self, customer_id: str) -> Cart:
        return self._carts.get_or_create(customer_id)

    def view(self, customer_id: str) -> CartView:
        return self.render(self.get_cart(customer_id))

    def render(self, cart: Cart) -> CartView:
        books = self._books.get_many(item.book_id for item in cart.items if item.book_id)
        combos = self._combos.get_many(item.combo_id for item in cart.items if item.combo_id)
        lines = []
        for item in cart.items:
            book = books.get(item.book_id) if item.book_id else None
            combo = combos.get(item.combo_id) if item.combo_id else None
            lines.append(
                CartLine(
                    id=item.id,
                    type=item.type,
                    quantity=item.quantity,
                    price=item.price,
                    subtotal=item.price * item.quantity,
                    added_at=item.added_at,
                    reserved_until=item.reserved_until,
                    book=BookSummary.from_book(book) if book else None,
                    combo=ComboSummary(**combo.model_dump()) if combo else None,
                )
            )
        return CartView(
            id=cart.id,
            customer_id=cart.customer_id,
            items=lines,
            total_items=sum(item.quantity for item in cart.items),
            total_price=cart.total_price,
            updated_at=cart.updated_at,
        )

    def _active_book(self, book_id: str) -> Book:
        book = self._books.get(book_id)
        if book is None or not book.is_active:
            raise NotFoundError("Book not found or inactive")
        return book

    def _check_book_stock(self, book: Book, quantity: int) -> None:
        if book.available_copies < quantity:
            raise BadRequestError(f"Only {book.available_copies} copies available")

    def _active_combo(self, combo_id: str) -> Combo:
        combo = self._combos.get(combo_id)
        if combo is None or not combo.is_active:
            raise NotFoundError("Combo not found")
        return combo

    def _check_combo_stock(self, combo: Combo, quantity: int) -> None:
        stock = availability(combo, self._books.get_many(item.book_id for item in combo.items))
        if not stock.is_available:
            raise BadRequestError("Combo is not available")
        if stock.available_quantity < quantity:
            raise BadRequestError(f"Only {stock.available_quantity} combos available")

    def add_item(self, customer_id: str, data: CartItemAdd) -> CartView:
        cart = self.get_cart(customer_id)
        existing = cart.find_target(data.type, data.target_id)
        wanted = data.quantity + (existing.quantity if existing else 0)

        if data.type == ItemType.BOOK:
            book = self._active_book(data.book_id)
            self._check_book_stock(book, wanted)
            price = book.sale_price
        else:
            combo = self._active_combo(data.combo_id)
            self._check_combo_stock(combo, wanted)
            price = combo.combo_price

        now = utcnow()
        reserved_until = now + timedelta(hours=get_config().shop.cart_item_ttl_hours)
        if existing:
            existing.quantity = wanted
            existing.reserved_until = reserved_until
            self._carts.items.update(existing)
        else:
            self._carts.items.create(
                CartItem(
                    cart_id=cart.id,
                    type=data.type,
                    book_id=data.book_id,
                    combo_id=data.combo_id,
                    quantity=data.quantity,
                    price=price,
                    added_at=now,
                    reserved_until=reserved_until,
                )
            )
        return self.render(self._carts.touch(cart.id))

    def _require_item(self, cart: Cart, item_id: str) -> CartItem:
        item = cart.find_item(item_id)
        if item is None:
            raise NotFoundError("Item not found in cart")
        return item

    def update_item(self, customer_id: str, item_id: str, quantity: int) -> CartView:
        cart = self.get_cart(customer_id)
        item = self._require_item(cart, item_id)
        if quantity < 1:
            raise BadRequestError("Quantity must be at least 1")
        if item.type == ItemType.BOOK:
            self._check_book_stock(self._active_book(item.book_id), quantity)
        else:
            self._check_combo_stock(self._active_combo(item.combo_id), quantity)
        item.quantity = quantity
        self._carts.items.update(item)
        return self.render(self._carts.touch(cart.id))

    def remove_item(self, customer_id: str, item_id: str) -> CartView:
        cart = self.get_cart(customer_id)
        self._carts.items.delete(self._require_item(cart, item_id).id)
        return self.render(self._carts.touch(cart.id))

    def clear(self, customer_id: str) -> CartView:
        cart = self.get_cart(customer_id)
        self._carts.items.delete_for_cart(cart.id)
        return self.render(self._carts.touch(cart.id))

    def add_book_from_wishlist(self, cart: Cart, book: Book) -> bool:
        """Add one copy of a wishlist book if it can be sold; report success."""
        existing = cart.find_target(ItemType.BOOK, book.id)
        wanted = 1 + (existing.quantity if existing else 0)
        if not book.is_active or book.available_copies < wanted:
            return False
        now = utcnow()
        reserved_until = now + timedelta(hours=get_config().shop.cart_item_ttl_hours)
        if existing:
            existing.quantity = wanted
            existing.reserved_until = reserved_until
            self._carts.items.update(existing)
        else:
            item = self._carts.items.create(
                CartItem(
                    cart_id=cart.id,
                    type=ItemType.BOOK,
                    book_id=book.id,
                    quantity=1,
                    price=book.sale_price,
                    added_at=now,
                    reserved_until=reserved_until,
                )
            )
            cart.items.append(item)
        return True

    def remove_expired(self) -> int:
        removed = self._carts.items.delete_expired(utcnow())
        logger.info("Removed {} expired cart items", removed)
        return removed
