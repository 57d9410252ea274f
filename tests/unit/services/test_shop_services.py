"""Cart, address book, reviews and wishlist rules."""

from datetime import timedelta

import pytest

from src.bookstore.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from src.bookstore.core.helpers import utcnow
from src.bookstore.core.services.catalog.book_service import BookService
from src.bookstore.core.services.shop.address_service import AddressService
from src.bookstore.core.services.shop.cart_service import CartService
from src.bookstore.core.services.shop.order_service import OrderService
from src.bookstore.core.services.shop.review_service import ReviewService
from src.bookstore.core.services.shop.wishlist_service import WishlistService
from src.bookstore.entities.catalog.book import BookUpdate
from src.bookstore.entities.shop.address import AddressCreate, AddressUpdate
from src.bookstore.entities.shop.cart import CartItemAdd, CartRepository, ItemType
from src.bookstore.entities.shop.order import OrderCreate, OrderStatus
from src.bookstore.entities.shop.review import ReviewCreate, ReviewUpdate
from src.bookstore.runtime.config.config_data import ConfigData, ShopConfig
from src.bookstore.runtime.context import with_context

DELIVERY = (
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.SHIPPING,
    OrderStatus.DELIVERED,
)


def new_address(**fields) -> AddressCreate:
    data = {
        "recipient_name": "Nguyen Van An",
        "phone": "0901234567",
        "province": "Hà Nội",
        "district": "Cầu Giấy",
        "ward": "Dịch Vọng",
        "detail_address": "99 Xuân Thủy",
        **fields,
    }
    return AddressCreate(**data)


def delivered_order(session, customer_id, address_id, book_id):
    CartService(session).add_item(customer_id, CartItemAdd(book_id=book_id))
    service = OrderService(session)
    order = service.checkout(customer_id, OrderCreate(address_id=address_id))
    for status in DELIVERY:
        service.update_status(order.id, status)
    return order


class TestCart:
    def test_created_lazily_and_empty(self, session, customer):
        view = CartService(session).view(customer.id)
        assert view.items == []
        assert view.total_price == 0

    def test_repeat_adds_increase_quantity(self, session, customer, book):
        service = CartService(session)
        service.add_item(customer.id, CartItemAdd(book_id=book.id, quantity=2))
        view = service.add_item(customer.id, CartItemAdd(book_id=book.id, quantity=1))
        assert len(view.items) == 1
        assert view.items[0].quantity == 3
        assert view.total_items == 3

    def test_total_tracks_every_mutation(self, session, customer, book, second_book, combo):
        service = CartService(session)
        service.add_item(customer.id, CartItemAdd(book_id=book.id, quantity=2))
        service.add_item(customer.id, CartItemAdd(book_id=second_book.id))
        view = service.add_item(customer.id, CartItemAdd(type=ItemType.COMBO, combo_id=combo.id))
        assert view.total_price == sum(line.subtotal for line in view.items) == 500000

        combo_line = next(line for line in view.items if line.type == ItemType.COMBO)
        view = service.update_item(customer.id, combo_line.id, 2)
        assert view.total_price == 680000

        view = service.remove_item(customer.id, combo_line.id)
        assert view.total_price == 320000

        assert service.clear(customer.id).total_price == 0

    def test_price_snapshot_survives_price_change(self, session, customer, book):
        service = CartService(session)
        service.add_item(customer.id, CartItemAdd(book_id=book.id))
        BookService(session).update(book.id, BookUpdate(sale_price=100000))
        assert service.view(customer.id).items[0].price == 120000

    def test_stock_includes_what_is_already_in_cart(self, session, customer, book):
        service = CartService(session)
        service.add_item(customer.id, CartItemAdd(book_id=book.id, quantity=4))
        with pytest.raises(BadRequestError, match="Only 5 copies available"):
            service.add_item(customer.id, CartItemAdd(book_id=book.id, quantity=2))

    def test_inactive_book_rejected(self, session, customer, book):
        BookService(session).soft_delete(book.id)
        with pytest.raises(NotFoundError, match="Book not found or inactive"):
            CartService(session).add_item(customer.id, CartItemAdd(book_id=book.id))

    def test_combo_quantity_capped_by_availability(self, session, customer, combo):
        with pytest.raises(BadRequestError, match="Only 3 combos available"):
            CartService(session).add_item(
                customer.id, CartItemAdd(type=ItemType.COMBO, combo_id=combo.id, quantity=4)
            )

    def test_update_quantity_below_one_rejected(self, session, customer, book):
        service = CartService(session)
        view = service.add_item(customer.id, CartItemAdd(book_id=book.id))
        with pytest.raises(BadRequestError, match="at least 1"):
            service.update_item(customer.id, view.items[0].id, 0)

    def test_unknown_item(self, session, customer):
        with pytest.raises(NotFoundError, match="Item not found in cart"):
            CartService(session).update_item(customer.id, "missing", 1)

    def test_reservation_uses_configured_ttl(self, session, customer, book):
        with with_context(ConfigData(shop=ShopConfig(cart_item_ttl_hours=1))):
            line = CartService(session).add_item(customer.id, CartItemAdd(book_id=book.id)).items[0]
        assert line.reserved_until - line.added_at == timedelta(hours=1)

    def test_expired_items_removed(self, session, customer, book, second_book):
        service = CartService(session)
        service.add_item(customer.id, CartItemAdd(book_id=book.id))
        service.add_item(customer.id, CartItemAdd(book_id=second_book.id))

        carts = CartRepository(session)
        stale = carts.get_by_customer(customer.id).items[0]
        stale.reserved_until = utcnow() - timedelta(minutes=1)
        carts.items.update(stale)

        assert service.remove_expired() == 1
        remaining = service.view(customer.id).items
        assert [line.book.id for line in remaining] == [second_book.id]


class TestAddresses:
    def test_first_address_becomes_default(self, session, customer):
        address = AddressService(session).create(customer.id, new_address())
        assert address.is_default

    def test_single_default_per_customer(self, session, customer, address):
        service = AddressService(session)
        second = service.create(customer.id, new_address(is_default=True))
        third = service.create(customer.id, new_address())

        defaults = [item for item in service.list_addresses(customer.id) if item.is_default]
        assert [item.id for item in defaults] == [second.id]

        service.set_default(customer.id, third.id)
        defaults = [item for item in service.list_addresses(customer.id) if item.is_default]
        assert [item.id for item in defaults] == [third.id]

    def test_update_to_default_moves_the_flag(self, session, customer, address):
        service = AddressService(session)
        other = service.create(customer.id, new_address())
        service.update(customer.id, other.id, AddressUpdate(is_default=True))
        assert service.get_default(customer.id).id == other.id
        assert not service.get(customer.id, address.id).is_default

    def test_deleting_default_promotes_newest(self, session, customer, address):
        service = AddressService(session)
        service.create(customer.id, new_address(detail_address="1 Older"))
        newest = service.create(customer.id, new_address(detail_address="2 Newest"))
        service.delete(customer.id, address.id)
        assert service.get_default(customer.id).id == newest.id

    def test_no_default_when_book_is_empty(self, session, customer):
        with pytest.raises(NotFoundError, match="No default address found"):
            AddressService(session).get_default(customer.id)

    def test_other_customers_address_is_not_found(self, session, other_customer, address):
        with pytest.raises(NotFoundError, match="Address not found"):
            AddressService(session).get(other_customer.id, address.id)

    def test_full_address(self, address):
        expected = "12 Lê Lợi, Phường Bến Nghé, Quận 1, Hồ Chí Minh"
        assert address.full_address == expected


class TestReviews:
    def test_requires_a_delivered_order(self, session, customer, address, book):
        CartService(session).add_item(customer.id, CartItemAdd(book_id=book.id))
        order = OrderService(session).checkout(customer.id, OrderCreate(address_id=address.id))
        with pytest.raises(BadRequestError, match="not delivered"):
            ReviewService(session).create(
                customer.id, ReviewCreate(book_id=book.id, order_id=order.id, rating=5)
            )

    def test_book_must_be_in_the_order(self, session, customer, address, book, second_book):
        order = delivered_order(session, customer.id, address.id, book.id)
        with pytest.raises(BadRequestError, match="You have not purchased this book"):
            ReviewService(session).create(
                customer.id, ReviewCreate(book_id=second_book.id, order_id=order.id, rating=4)
            )

    def test_one_review_per_book_and_order(self, session, customer, address, book):
        order = delivered_order(session, customer.id, address.id, book.id)
        service = ReviewService(session)
        review = service.create(
            customer.id, ReviewCreate(book_id=book.id, order_id=order.id, rating=5)
        )
        assert review.is_verified
        assert review.customer.full_name == "Nguyen Van An"
        with pytest.raises(ConflictError, match="already reviewed"):
            service.create(customer.id, ReviewCreate(book_id=book.id, order_id=order.id, rating=1))

    def test_rating_uses_visible_reviews_only(
        self, session, customer, other_customer, address, book
    ):
        service = ReviewService(session)
        first = delivered_order(session, customer.id, address.id, book.id)
        other_address = AddressService(session).create(other_customer.id, new_address())
        second = delivered_order(session, other_customer.id, other_address.id, book.id)

        five = service.create(
            customer.id, ReviewCreate(book_id=book.id, order_id=first.id, rating=5)
        )
        service.create(
            other_customer.id, ReviewCreate(book_id=book.id, order_id=second.id, rating=4)
        )
        state = BookService(session)._require(book.id)
        assert (state.average_rating, state.review_count) == (4.5, 2)

        service.toggle_visibility(five.id)
        state = BookService(session)._require(book.id)
        assert (state.average_rating, state.review_count) == (4.0, 1)

        stats = service.stats(book.id)
        assert stats.total == 1
        assert stats.distribution == {"5": 0, "4": 1, "3": 0, "2": 0, "1": 0}
        assert [item.rating for item in service.for_book(book.id, 1, 10, None).items] == [4]

    def test_update_and_delete_refresh_rating(self, session, customer, address, book):
        order = delivered_order(session, customer.id, address.id, book.id)
        service = ReviewService(session)
        review = service.create(
            customer.id, ReviewCreate(book_id=book.id, order_id=order.id, rating=2)
        )
        service.update(customer, review.id, ReviewUpdate(rating=3))
        assert BookService(session)._require(book.id).average_rating == 3.0

        service.delete(customer, review.id)
        state = BookService(session)._require(book.id)
        assert (state.average_rating, state.review_count) == (0.0, 0)

    def test_only_the_author_may_edit(self, session, customer, other_customer, address, book):
        order = delivered_order(session, customer.id, address.id, book.id)
        service = ReviewService(session)
        review = service.create(
            customer.id, ReviewCreate(book_id=book.id, order_id=order.id, rating=5)
        )
        with pytest.raises(ForbiddenError):
            service.update(other_customer, review.id, ReviewUpdate(rating=1))
        with pytest.raises(ForbiddenError):
            service.delete(other_customer, review.id)

    def test_likes(self, session, customer, address, book):
        order = delivered_order(session, customer.id, address.id, book.id)
        service = ReviewService(session)
        review = service.create(
            customer.id, ReviewCreate(book_id=book.id, order_id=order.id, rating=5)
        )
        service.like(review.id)
        assert service.like(review.id).likes == 2


class TestWishlist:
    def test_add_check_remove(self, session, customer, book):
        service = WishlistService(session)
        view = service.add(customer.id, book.id)
        assert [line.book_id for line in view.items] == [book.id]
        assert service.check(customer.id, book.id).in_wishlist

        service.remove(customer.id, book.id)
        assert not service.check(customer.id, book.id).in_wishlist

    def test_duplicate_rejected(self, session, customer, book):
        service = WishlistService(session)
        service.add(customer.id, book.id)
        with pytest.raises(ConflictError, match="Book already in wishlist"):
            service.add(customer.id, book.id)

    def test_remove_missing_book(self, session, customer, book):
        with pytest.raises(NotFoundError, match="Book not found in wishlist"):
            WishlistService(session).remove(customer.id, book.id)

    def test_move_to_cart_keeps_unsellable_books(self, session, customer, book, make_book):
        empty = make_book("Sold Out", copies=0)
        service = WishlistService(session)
        service.add(customer.id, book.id)
        service.add(customer.id, empty.id)

        result = service.move_to_cart(customer.id)
        assert (result.added_count, result.remaining_count) == (1, 1)
        cart = CartService(session).view(customer.id)
        assert [(line.book.id, line.quantity, line.price) for line in cart.items] == [
            (book.id, 1, 120000)
        ]
        assert [line.book_id for line in service.view(customer.id).items] == [empty.id]

    def test_move_from_empty_wishlist(self, session, customer):
        with pytest.raises(BadRequestError, match="Wishlist is empty"):
            WishlistService(session).move_to_cart(customer.id)
