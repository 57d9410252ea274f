from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from src.bookstore.api.http.deps import PageParams, get_session, paging, require_admin
from src.bookstore.core.services.admin.customer_service import CustomerDetail, CustomerService
from src.bookstore.core.services.shop.order_service import OrderService
from src.bookstore.core.services.shop.review_service import ReviewService
from src.bookstore.entities.core._base import Page
from src.bookstore.entities.core.customer import (
    Customer,
    CustomerCreate,
    CustomerQuery,
    CustomerUpdate,
)
from src.bookstore.entities.shop.order import OrderDetail, OrderQuery, OrderStatus
from src.bookstore.entities.shop.review import ReviewDetail

router = APIRouter(
    prefix="/admin/customers",
    tags=["admin: customers"],
    dependencies=[Depends(require_admin)],
)


@router.get("", response_model=Page[Customer])
def list_customers(
    search: str | None = None,
    is_active: bool | None = None,
    params: PageParams = Depends(paging(20, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[Customer]:
    query = CustomerQuery(search=search, is_active=is_active)
    return CustomerService(session).search(query, params.page, params.limit, params.sort_by)


@router.get("/{customer_id}", response_model=CustomerDetail)
def get_customer(customer_id: str, session: Session = Depends(get_session)) -> CustomerDetail:
    return CustomerService(session).get(customer_id)


@router.post("", response_model=Customer, status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerCreate, session: Session = Depends(get_session)) -> Customer:
    customer = CustomerService(session).create(data)
    session.commit()
    return customer


@router.put("/{customer_id}", response_model=Customer)
def update_customer(
    customer_id: str, data: CustomerUpdate, session: Session = Depends(get_session)
) -> Customer:
    customer = CustomerService(session).update(customer_id, data)
    session.commit()
    return customer


@router.put("/{customer_id}/toggle-active", response_model=Customer)
def toggle_customer_active(customer_id: str, session: Session = Depends(get_session)) -> Customer:
    customer = CustomerService(session).toggle_active(customer_id)
    session.commit()
    return customer


@router.delete("/{customer_id}")
def delete_customer(customer_id: str, session: Session = Depends(get_session)) -> dict[str, str]:
    CustomerService(session).delete(customer_id)
    session.commit()
    return {"message": "Customer deleted successfully"}


@router.get("/{customer_id}/orders", response_model=Page[OrderDetail])
def customer_orders(
    customer_id: str,
    order_status: OrderStatus | None = Query(None, alias="status"),
    params: PageParams = Depends(paging(10, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[OrderDetail]:
    CustomerService(session).get(customer_id)
    query = OrderQuery(customer_id=customer_id, status=order_status)
    return OrderService(session).search(query, params.page, params.limit, params.sort_by)


@router.get("/{customer_id}/reviews", response_model=Page[ReviewDetail])
def customer_reviews(
    customer_id: str,
    params: PageParams = Depends(paging(10, "-created_at")),
    session: Session = Depends(get_session),
) -> Page[ReviewDetail]:
    CustomerService(session).get(customer_id)
    return ReviewService(session).for_customer(
        customer_id, params.page, params.limit, params.sort_by
    )
