from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from src.bookstore.api.http.deps import (
    PageParams,
    get_current_principal,
    get_session,
    paging,
    require_customer,
)
from src.bookstore.core.services.auth.auth_service import Principal
from src.bookstore.core.services.shop.order_service import OrderService
from src.bookstore.entities.core._base import Page
from src.bookstore.entities.shop.order import (
    OrderCancel,
    OrderCreate,
    OrderDetail,
    OrderStatus,
    ReturnRequest,
    ReviewableItem,
)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def create_order(
    data: OrderCreate,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> OrderDetail:
    order = OrderService(session).checkout(principal.id, data)
    session.commit()
    return order


@router.get("", response_model=Page[OrderDetail])
def my_orders(
    order_status: OrderStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(paging(10, "-created_at")),
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> Page[OrderDetail]:
    return OrderService(session).list_mine(
        principal.id, order_status, params.page, params.limit, params.sort_by
    )


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: str,
    principal: Principal = Depends(get_current_principal),
    session: Session = Depends(get_session),
) -> OrderDetail:
    return OrderService(session).get(principal, order_id)


@router.put("/{order_id}/cancel", response_model=OrderDetail)
def cancel_order(
    order_id: str,
    data: OrderCancel,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> OrderDetail:
    order = OrderService(session).cancel_by_customer(principal, order_id, data.reason)
    session.commit()
    return order


@router.get("/{order_id}/reviewable-items", response_model=list[ReviewableItem])
def reviewable_items(
    order_id: str,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> list[ReviewableItem]:
    return OrderService(session).reviewable_items(principal, order_id)


@router.put("/{order_id}/request-return", response_model=OrderDetail)
def request_return(
    order_id: str,
    data: ReturnRequest,
    principal: Principal = Depends(require_customer),
    session: Session = Depends(get_session),
) -> OrderDetail:
    order = OrderService(session).request_return(principal, order_id, data.reason)
    session.commit()
    return order
