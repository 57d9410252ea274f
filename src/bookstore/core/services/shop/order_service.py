"""Checkout and the order lifecycle."""

from collections import Counter

from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ForbiddenError, NotFoundError
from src.bookstore.core.helpers import utcnow
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.catalog.combo_service import ComboService
from src.bookstore.core.services.catalog.inventory_service import InventoryService
from src.bookstore.core.services.shop.payment_gateway import PaymentGateway
from src.bookstore.entities.catalog.author import AuthorRepository
from src.bookstore.entities.catalog.book import BookRepository
from src.bookstore.entities.catalog.book_copy import CopyCondition, CopyStatus
from src.bookstore.entities.catalog.combo import ComboRepository
from src.bookstore.entities.core._base import Page, Pagination
from src.bookstore.entities.core.customer import CustomerRepository
from src.bookstore.entities.shop.address import AddressRepository
from src.bookstore.entities.shop.cart import CartRepository, ItemType
from src.bookstore.entities.shop.order import (
    COUNTED_STATUSES,
    Order,
    OrderCreate,
    OrderCustomer,
    OrderDetail,
    OrderItem,
    OrderQuery,
    OrderRepository,
    OrderStatus,
    ReviewableItem,
    ShippingAddress,
)
from src.bookstore.entities.shop.payment import PaymentStatus
from src.bookstore.entities.shop.recommendation import RecommendationRepository
from src.bookstore.entities.shop.review import ReviewRepository
from src.bookstore.runtime.context import get_config


def shipping_fee_for(subtotal: int) -> int:
    shop = get_config().shop
    return 0 if subtotal >= shop.free_shipping_threshold else shop.shipping_fee


class OrderService:
    def __init__(self, db_session: Session):
        self._orders = OrderRepository(db_session)
        self._carts = CartRepository(db_session)
        self._addresses = AddressRepository(db_session)
        self._books = BookRepository(db_session)
        self._authors = AuthorRepository(db_session)
        self._combos = ComboRepository(db_session)
        self._customers = CustomerRepository(db_session)
        self._reviews = ReviewRepository(db_session)
        self._recommendations = RecommendationRepository(db_session)
        self._inventory = InventoryService(db_session)
        self._combo_service = ComboService(db_session)
        self._payments = PaymentGateway(db_session)

    # -- lookups ---------------------------------------------------------
    def _require(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def _owned(self, principal: Principal, order_id: str) -> Order:
        order = self._require(order_id)
        if not principal.is_admin and order.customer_id != principal.id:
            raise ForbiddenError("Not authorized")
        return order

    def detail(self, order: Order) -> OrderDetail:
        customer = self._customers.get(order.customer_id)
        payment = self._payments.get_for_order(order.id)
        return OrderDetail(
            **order.model_dump(),
            customer=OrderCustomer(**customer.model_dump()) if customer else None,
            payment_status=payment.status if payment else None,
        )

    def get(self, principal: Principal, order_id: str) -> OrderDetail:
        return self.detail(self._owned(principal, order_id))

    def list_mine(
        self,
        customer_id: str,
        status: OrderStatus | None,
        page: int,
        limit: int,
        sort_by: str | None = None,
    ) -> Page[OrderDetail]:
        query = OrderQuery(customer_id=customer_id, status=status)
        orders, total = self._orders.search(query, page, limit, sort_by or "-created_at")
        return Page(
            items=[self.detail(order) for order in orders],
            pagination=Pagination.build(page, limit, total),
        )

    def search(
        self, query: OrderQuery, page: int, limit: int, sort_by: str | None
    ) -> Page[OrderDetail]:
        orders, total = self._orders.search(query, page, limit, sort_by or "-created_at")
        return Page(
            items=[self.detail(order) for order in orders],
            pagination=Pagination.build(page, limit, total),
        )

    # -- checkout --------------------------------------------------------
    def _shipping_address(self, customer_id: str, data: OrderCreate) -> ShippingAddress:
        if data.address_id:
            address = self._addresses.get_owned(data.address_id, customer_id)
            if address is None:
                raise NotFoundError("Address not found")
            return ShippingAddress(**address.model_dump())
        return data.shipping_address  # type: ignore[return-value]

    def checkout(self, customer_id: str, data: OrderCreate) -> OrderDetail:
        """Turn the customer's cart into a pending order.

        Copies are picked and linked to the order but stay available until
        the order is confirmed.
        """
        cart = self._carts.get_by_customer(customer_id)
        if cart is None or not cart.items:
            raise BadRequestError("Cart is empty")
        shipping_address = self._shipping_address(customer_id, data)

        picked: set[str] = set()
        items: list[OrderItem] = []
        for line in cart.items:
            if line.type == ItemType.BOOK:
                book = self._books.get(line.book_id)
                if book is None or not book.is_active:
                    raise BadRequestError("Book in cart is no longer available")
                copies = self._inventory.pick_for_order(book.id, line.quantity, picked)
                if copies is None:
                    raise BadRequestError(f"Not enough stock for {book.title}")
                author = self._authors.get(book.author_id)
                item = OrderItem(
                    type=ItemType.BOOK,
                    book_id=book.id,
                    title=book.title,
                    author=author.name if author else "Unknown",
                    image=book.cover_image,
                    quantity=line.quantity,
                    price=line.price,
                    sold_copy_ids=[copy.id for copy in copies],
                )
            else:
                combo = self._combos.get(line.combo_id)
                if combo is None or not combo.is_active:
                    raise BadRequestError("Combo in cart is no longer available")
                copy_ids: list[str] = []
                books = self._books.get_many(entry.book_id for entry in combo.items)
                for entry in combo.items:
                    book = books.get(entry.book_id)
                    needed = entry.quantity * line.quantity
                    copies = None
                    if book is not None:
                        taken = picked | set(copy_ids)
                        copies = self._inventory.pick_for_order(entry.book_id, needed, taken)
                    if copies is None:
                        title = book.title if book else entry.book_id
                        raise BadRequestError(f"Not enough stock for {title} in combo {combo.name}")
                    copy_ids += [copy.id for copy in copies]
                item = OrderItem(
                    type=ItemType.COMBO,
                    combo_id=combo.id,
                    title=combo.name,
                    image=combo.image,
                    quantity=line.quantity,
                    price=line.price,
                    sold_copy_ids=copy_ids,
                )
            picked.update(item.sold_copy_ids)
            items.append(item)

        subtotal = sum(item.subtotal for item in items)
        shipping_fee = shipping_fee_for(subtotal)
        order = self._orders.create(
            Order(
                order_number=self._orders.next_order_number(utcnow()),
                customer_id=customer_id,
                items=items,
                subtotal=subtotal,
                shipping_fee=shipping_fee,
                discount=0,
                total_price=subtotal + shipping_fee,
                shipping_address=shipping_address,
                payment_method=data.payment_method,
                notes=data.notes,
            )
        )
        self._inventory.link_to_order(order.copy_ids, order.id)
        self._payments.open(order, data.bank_code, data.card_number)

        self._carts.items.delete_for_cart(cart.id)
        self._carts.touch(cart.id)
        self._recommendations.delete_for_customer(customer_id)
        logger.bind(order_id=order.id, total=order.total_price).info(
            "Order {} created by customer {}", order.order_number, customer_id
        )
        return self.detail(order)

    # -- counters --------------------------------------------------------
    def _purchases(self, order: Order) -> Counter:
        """Books bought by an order, combos expanded to their books."""
        counts: Counter = Counter()
        for item in order.items:
            if item.type == ItemType.BOOK and item.book_id:
                counts[item.book_id] += item.quantity
            elif item.combo_id:
                combo = self._combos.get(item.combo_id)
                for entry in combo.items if combo else []:
                    counts[entry.book_id] += entry.quantity * item.quantity
        return counts

    def _apply_counters(self, order: Order, sign: int) -> None:
        """Add (``sign=1``) or roll back (``sign=-1``) purchase and combo sales."""
        for book_id, quantity in self._purchases(order).items():
            book = self._books.get(book_id)
            if book is not None:
                book.purchase_count = max(0, book.purchase_count + sign * quantity)
                self._books.update(book)
        for item in order.items:
            if item.type == ItemType.COMBO and item.combo_id:
                self._combo_service.adjust_sold_count(item.combo_id, sign * item.quantity)

    # -- transitions -----------------------------------------------------
    def confirm(self, order: Order) -> Order:
        self._inventory.move_copies(order.copy_ids, CopyStatus.RESERVED)
        self._apply_counters(order, 1)
        order.status = OrderStatus.CONFIRMED
        order.confirmed_at = utcnow()
        return self._orders.update(order)

    def _cancel(self, order: Order, reason: str | None) -> Order:
        previous = order.status
        self._inventory.move_copies(order.copy_ids, CopyStatus.AVAILABLE, release=True)
        if previous in COUNTED_STATUSES:
            self._apply_counters(order, -1)
        self._payments.refund_if_paid(order.id, f"Order cancelled - {reason}" if reason else None)
        order.status = OrderStatus.CANCELLED
        order.cancel_reason = reason
        order.cancelled_at = utcnow()
        return self._orders.update(order)

    def _deliver(self, order: Order) -> Order:
        self._inventory.move_copies(order.copy_ids, CopyStatus.SOLD)
        payment = self._payments.get_for_order(order.id)
        if payment is not None and payment.status == PaymentStatus.PENDING:
            self._payments.settle(payment)
        order.status = OrderStatus.DELIVERED
        order.delivered_at = utcnow()
        return self._orders.update(order)

    def _check_reason(self, reason: str | None, label: str) -> str:
        minimum = get_config().shop.min_reason_length
        if not reason or len(reason.strip()) < minimum:
            raise BadRequestError(
                f"{label} reason is required and must be at least {minimum} characters"
            )
        return reason.strip()

    def update_status(
        self, order_id: str, status: OrderStatus, reason: str | None = None
    ) -> OrderDetail:
        """Admin move along the fulfilment state machine."""
        order = self._require(order_id)
        previous = order.status
        if not order.can_move_to(status):
            raise BadRequestError(f"Cannot change order status from {previous} to {status}")

        if status == OrderStatus.CONFIRMED:
            order = self.confirm(order)
        elif status == OrderStatus.CANCELLED:
            order = self._cancel(order, self._check_reason(reason, "Cancel"))
        elif status == OrderStatus.DELIVERED:
            order = self._deliver(order)
        else:
            order.status = status
            order = self._orders.update(order)
        logger.bind(order_id=order.id).info(
            "Order {} status {} -> {}", order.order_number, previous, status
        )
        return self.detail(order)

    def cancel_by_customer(
        self, principal: Principal, order_id: str, reason: str | None
    ) -> OrderDetail:
        order = self._owned(principal, order_id)
        if order.status not in (OrderStatus.PENDING, OrderStatus.CONFIRMED):
            raise BadRequestError("Cannot cancel order at this stage")
        order = self._cancel(order, reason.strip() if reason else None)
        logger.bind(order_id=order.id).info("Order {} cancelled by customer", order.order_number)
        return self.detail(order)

    def request_return(self, principal: Principal, order_id: str, reason: str) -> OrderDetail:
        order = self._owned(principal, order_id)
        if order.status != OrderStatus.DELIVERED:
            raise BadRequestError("Can only request return for delivered orders")
        order.return_reason = self._check_reason(reason, "Return")
        order.return_requested_at = utcnow()
        order = self._orders.update(order)
        logger.bind(order_id=order.id).info("Return requested for order {}", order.order_number)
        return self.detail(order)

    def confirm_return(self, order_id: str) -> OrderDetail:
        order = self._require(order_id)
        if not order.return_requested_at:
            raise BadRequestError("No return request found for this order")
        if order.status != OrderStatus.DELIVERED:
            raise BadRequestError("Order must be in delivered status")

        self._inventory.move_copies(
            order.copy_ids, CopyStatus.AVAILABLE, release=True, condition=CopyCondition.LIKE_NEW
        )
        self._apply_counters(order, -1)
        payment = self._payments.get_for_order(order.id)
        if payment is not None and payment.status == PaymentStatus.PAID:
            self._payments.refund(payment, f"Order returned - {order.return_reason}")

        order.status = OrderStatus.RETURNED
        order.returned_at = utcnow()
        order = self._orders.update(order)
        logger.bind(order_id=order.id).info("Return confirmed for order {}", order.order_number)
        return self.detail(order)

    def reviewable_items(self, principal: Principal, order_id: str) -> list[ReviewableItem]:
        order = self._owned(principal, order_id)
        if order.customer_id != principal.id:
            raise ForbiddenError("Not authorized")
        if order.status != OrderStatus.DELIVERED:
            raise BadRequestError("Order must be delivered to review")

        reviewed = self._reviews.reviewed_book_ids(principal.id, order.id)
        entries: dict[str, str | None] = {}
        for item in order.items:
            if item.type == ItemType.BOOK and item.book_id:
                entries.setdefault(item.book_id, None)
            elif item.combo_id:
                combo = self._combos.get(item.combo_id)
                for entry in combo.items if combo else []:
                    entries.setdefault(entry.book_id, combo.name)
        books = self._books.get_many(entries)
        return [
            ReviewableItem(
                book_id=book_id,
                title=books[book_id].title,
                slug=books[book_id].slug,
                image=books[book_id].cover_image,
                from_combo=combo_name,
                is_reviewed=book_id in reviewed,
            )
            for book_id, combo_name in entries.items()
            if book_id in books
        ]

    def contains_book(self, order: Order, book_id: str) -> bool:
        """Whether an order delivered a book, directly or inside a combo."""
        return book_id in self._purchases(order)
