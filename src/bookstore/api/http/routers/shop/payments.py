from fastapi import APIRouter, Depends
from sqlmodel import Session

from src.bookstore.api.http.deps import (
    get_current_principal,
    get_session,
    require_admin,
    require_customer,
)
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.payment_service import PaymentService
from src.bookstore.entities.shop.payment import (
    Payment,
    PaymentProcess,
    PaymentRefund,
    PaymentWebhook,
)

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/webhook", response_model=Payment)
def payment_webhook(data: PaymentWebhook, session: Session = Depends(get_session)) -> Payment:
    """Gateway callback reporting the outcome of an asynchronous payment."""
    payment = PaymentService(session).webhook(data)
    session.commit()
    return payment


@router.post("/{order_id}/process", response_model=Payment)
def process_payment(
    order_id: str,
    data: PaymentProcess,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Payment:
    payment = PaymentService(session).process(principal, order_id, data)
    session.commit()
    return payment


@router.get("/{order_id}", response_model=Payment)
def get_payment(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
) -> Payment:
    return PaymentService(session).get(principal, order_id)


@router.post("/{order_id}/refund", response_model=Payment, dependencies=[Depends(require_admin)])
def refund_payment(
    order_id: str, data: PaymentRefund, session: Session = Depends(get_session)
) -> Payment:
    payment = PaymentService(session).refund(order_id, data.reason)
    session.commit()
    return payment
