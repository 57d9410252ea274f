"""Back-office order fulfilment."""

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.shop.order_service import OrderService
from src.bookstore.entities.core._base import Page
from src.bookstore.entities.shop.order import (
    OrderDetail,
    OrderQuery,
    OrderStatus,
    OrderStatusUpdate,
)

router = APIRouter(
    prefix="/admin/orders", tags=["admin: orders"], dependencies=[Depends(require_admin)]
)


@router.get("", response_model=Page[OrderDetail])
def list_orders(
    order_status: OrderStatus | None = Query(None, alias="status"),
    search: str | None = None,
    customer_id: str | None = None,
    params: PageParams = Depends(paging(20, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[OrderDetail]:
    query = OrderQuery(status=order_status, search=search, customer_id=customer_id)
    return OrderService(session).search(query, params.page, params.limit, params.sort_by)


@router.put("/{order_id}/status", response_model=OrderDetail)
def update_order_status(
    order_id: str, data: OrderStatusUpdate, session: Session = Depends(get_session)
) -> OrderDetail:
    order = OrderService(session).update_status(order_id, data.status, data.reason)
    session.commit()
    return order


@router.put("/{order_id}/confirm-return", response_model=OrderDetail)
def confirm_return(order_id: str, session: Session = Depends(get_session)) -> OrderDetail:
    order = OrderService(session).confirm_return(order_id)
    session.commit()
    return order
