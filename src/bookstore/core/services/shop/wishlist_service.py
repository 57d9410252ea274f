from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ConflictError, NotFoundError
from src.bookstore.core.services.shop.cart_service import CartService
from src.bookstore.entities.catalog.book import BookRepository, BookSummary
from src.bookstore.entities.shop.wishlist import (
    MoveToCartResult,
    Wishlist,
    WishlistCheck,
    WishlistLine,
    WishlistRepository,
    WishlistView,
)


class WishlistService:
    def __init__(self, db_session: Session):
        self._wishlists = WishlistRepository(db_session)
        self._books = BookRepository(db_session)
        self._cart_service = CartService(db_session)

    def _render(self, wishlist: Wishlist) -> WishlistView:
        books = self._books.get_many(item.book_id for item in wishlist.items)
        lines = [
            WishlistLine(
                book_id=item.book_id,
                added_at=item.added_at,
                book=BookSummary.from_book(books[item.book_id]) if item.book_id in books else None,
            )
            for item in wishlist.items
        ]
        return WishlistView(
            id=wishlist.id,
            customer_id=wishlist.customer_id,
            items=lines,
            total_items=len(lines),
        )

    def view(self, customer_id: str) -> WishlistView:
        return self._render(self._wishlists.get_or_create(customer_id))

    def add(self, customer_id: str, book_id: str) -> WishlistView:
        book = self._books.get(book_id)
        if book is None or not book.is_active:
            raise NotFoundError("Book not found or inactive")
        wishlist = self._wishlists.get_or_create(customer_id)
        if wishlist.has_book(book_id):
            raise ConflictError("Book already in wishlist")
        self._wishlists.add_book(wishlist.id, book_id)
        return self._render(self._wishlists.get(wishlist.id))

    def remove(self, customer_id: str, book_id: str) -> WishlistView:
        wishlist = self._wishlists.get_or_create(customer_id)
        if not self._wishlists.remove_book(wishlist.id, book_id):
            raise NotFoundError("Book not found in wishlist")
        return self._render(self._wishlists.get(wishlist.id))

    def check(self, customer_id: str, book_id: str) -> WishlistCheck:
        wishlist = self._wishlists.get_by_customer(customer_id)
        return WishlistCheck(in_wishlist=bool(wishlist and wishlist.has_book(book_id)))

    def move_to_cart(self, customer_id: str) -> MoveToCartResult:
        """Move every sellable book to the cart; the rest stays in the wishlist."""
        wishlist = self._wishlists.get_or_create(customer_id)
        if not wishlist.items:
            raise BadRequestError("Wishlist is empty")
        cart = self._cart_service.get_cart(customer_id)
        books = self._books.get_many(item.book_id for item in wishlist.items)

        added = 0
        for item in wishlist.items:
            book = books.get(item.book_id)
            if book is not None and self._cart_service.add_book_from_wishlist(cart, book):
                self._wishlists.remove_book(wishlist.id, item.book_id)
                added += 1
        remaining = len(wishlist.items) - added
        logger.info("Moved {} wishlist books to cart for customer {}", added, customer_id)
        return MoveToCartResult(added_count=added, remaining_count=remaining)
