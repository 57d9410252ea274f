from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ForbiddenError, NotFoundError
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.order_service import OrderService
from src.bookstore.core.services.shop.payment_gateway import PaymentGateway
from src.bookstore.entities.shop.order import OrderRepository, OrderStatus
from src.bookstore.entities.shop.payment import (
    Payment,
    PaymentProcess,
    PaymentRepository,
    PaymentStatus,
    PaymentWebhook,
)


class PaymentService:
    """Customer payments, gateway callbacks and refunds."""

    def __init__(self, db_session: Session):
        self._gateway = PaymentGateway(db_session)
        self._payments = PaymentRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._order_service = OrderService(db_session)

    def _require_payment(self, order_id: str) -> Payment:
        payment = self._gateway.get_for_order(order_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment

    def _confirm_pending_order(self, order_id: str) -> None:
        order = self._orders.get(order_id)
        if order is not None and order.status == OrderStatus.PENDING:
            self._order_service.confirm(order)

    def get(self, principal: Principal, order_id: str) -> Payment:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if not principal.is_admin and order.customer_id != principal.id:
            raise ForbiddenError("Not authorized")
        return self._require_payment(order_id)

    def process(self, principal: Principal, order_id: str, data: PaymentProcess) -> Payment:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if order.customer_id != principal.id:
            raise ForbiddenError("Not authorized")
        if order.status in (OrderStatus.CANCELLED, OrderStatus.RETURNED):
            raise BadRequestError("Cannot pay for a cancelled or returned order")

        payment = self._gateway.get_for_order(order_id)
        if payment is None:
            payment = self._payments.create(
                Payment(order_id=order.id, method=order.payment_method, amount=order.total_price)
            )
        if payment.status in (PaymentStatus.PAID, PaymentStatus.REFUNDED):
            raise BadRequestError("Order has already been paid")

        payment = self._gateway.charge(
            payment, data.method or payment.method, data.bank_code, data.card_number
        )
        if payment.status != PaymentStatus.PAID:
            raise BadRequestError("Payment failed")
        self._confirm_pending_order(order_id)
        logger.info("Order {} paid with {}", order.order_number, payment.method)
        return payment

    def webhook(self, data: PaymentWebhook) -> Payment:
        payment = None
        if data.transaction_id:
            payment = self._gateway.get_by_transaction(data.transaction_id)
        if payment is None and data.order_id:
            payment = self._gateway.get_for_order(data.order_id)
        if payment is None:
            raise NotFoundError("Payment not found")

        if data.status == PaymentStatus.PAID:
            if payment.status != PaymentStatus.PAID:
                payment = self._gateway.settle(payment, data.transaction_id)
            self._confirm_pending_order(payment.order_id)
        elif data.status == PaymentStatus.FAILED:
            if payment.status == PaymentStatus.PAID:
                raise BadRequestError("Payment has already been settled")
            payment = self._gateway.fail(payment)
        else:
            raise BadRequestError(f"Unsupported webhook status: {data.status}")
        logger.info("Webhook applied to payment of order {}: {}", payment.order_id, data.status)
        return payment

    def refund(self, order_id: str, reason: str | None) -> Payment:
        return self._gateway.refund(self._require_payment(order_id), reason)
