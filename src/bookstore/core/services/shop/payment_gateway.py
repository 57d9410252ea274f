"""Simulated payment processing.

Outcomes are deterministic: card payments need a number that passes the
Luhn check, every other method settles immediately.
"""

import secrets

from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError
from src.bookstore.core.helpers import luhn_valid, mask_card_number, utcnow
from src.bookstore.entities.shop.order import Order
from src.bookstore.entities.shop.payment import (
    Payment,
    PaymentMethod,
    PaymentRepository,
    PaymentStatus,
)


def new_transaction_id() -> str:
    """``TXN-YYYYMMDDHHMMSS-NNNN``."""
    return f"TXN-{utcnow():%Y%m%d%H%M%S}-{secrets.randbelow(10000):04d}"


class PaymentGateway:
    def __init__(self, db_session: Session):
        self._payments = PaymentRepository(db_session)

    def get_for_order(self, order_id: str) -> Payment | None:
        return self._payments.get_by_order(order_id)

    def charge(
        self,
        payment: Payment,
        method: PaymentMethod,
        bank_code: str | None = None,
        card_number: str | None = None,
    ) -> Payment:
        """Run a payment through the gateway and store the outcome."""
        payment.method = method
        if bank_code:
            payment.bank_code = bank_code
        if card_number:
            payment.card_number = mask_card_number(card_number)

        if method == PaymentMethod.CREDIT_CARD and not (card_number and luhn_valid(card_number)):
            payment.status = PaymentStatus.FAILED
            payment.notes = "Payment failed - Please try again"
            logger.info("Payment declined for order {}", payment.order_id)
        else:
            self._mark_paid(payment)
        return self._payments.update(payment)

    def _mark_paid(self, payment: Payment, transaction_id: str | None = None) -> None:
        payment.status = PaymentStatus.PAID
        payment.transaction_id = payment.transaction_id or transaction_id or new_transaction_id()
        payment.paid_at = payment.paid_at or utcnow()
        payment.notes = None

    def open(
        self,
        order: Order,
        bank_code: str | None = None,
        card_number: str | None = None,
    ) -> Payment:
        """Create the payment of a new order; anything but COD is charged at once."""
        payment = self._payments.create(
            Payment(
                order_id=order.id,
                method=order.payment_method,
                amount=order.total_price,
            )
        )
        if order.payment_method == PaymentMethod.COD:
            return payment
        return self.charge(payment, order.payment_method, bank_code, card_number)

    def settle(self, payment: Payment, transaction_id: str | None = None) -> Payment:
        self._mark_paid(payment, transaction_id)
        logger.info("Payment {} settled for order {}", payment.transaction_id, payment.order_id)
        return self._payments.update(payment)

    def fail(self, payment: Payment) -> Payment:
        payment.status = PaymentStatus.FAILED
        return self._payments.update(payment)

    def refund(self, payment: Payment, reason: str | None = None) -> Payment:
        if payment.status != PaymentStatus.PAID:
            raise BadRequestError("Only paid payments can be refunded")
        payment.status = PaymentStatus.REFUNDED
        payment.refunded_at = utcnow()
        payment.notes = f"Refunded: {reason}" if reason else "Refunded"
        logger.info("Payment refunded for order {}", payment.order_id)
        return self._payments.update(payment)

    def refund_if_paid(self, order_id: str, reason: str | None = None) -> None:
        """Refund a settled non-COD payment, e.g. when its order is cancelled."""
        payment = self._payments.get_by_order(order_id)
        if (
            payment is not None
            and payment.status == PaymentStatus.PAID
            and payment.method != PaymentMethod.COD
        ):
            self.refund(payment, reason)

    def get_by_transaction(self, transaction_id: str) -> Payment | None:
        return self._payments.get_by_transaction(transaction_id)
