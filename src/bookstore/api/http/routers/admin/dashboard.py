from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from src.bookstore.api.http.deps import get_session, require_admin
from src.bookstore.core.services.admin.dashboard_service import (
    DashboardService,
    NewCustomers,
    OrderStatusStat,
    Overview,
    Period,
    TopBook,
)
from src.bookstore.entities.shop.payment import RevenuePoint

router = APIRouter(
    prefix="/admin/dashboard", tags=["admin: dashboard"], dependencies=[Depends(require_admin)]
)


@router.get("/overview", response_model=Overview)
def overview(session: Session = Depends(get_session)) -> Overview:
    return DashboardService(session).overview()


@router.get("/revenue", response_model=list[RevenuePoint])
def revenue(
    period: Period = "day",
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    session: Session = Depends(get_session),
) -> list[RevenuePoint]:
    return DashboardService(session).revenue(period, start_date, end_date)


@router.get("/top-books", response_model=list[TopBook])
def top_books(
    limit: int = Query(10, ge=1, le=100), session: Session = Depends(get_session)
) -> list[TopBook]:
    return DashboardService(session).top_books(limit)


@router.get("/order-stats", response_model=list[OrderStatusStat])
def order_stats(session: Session = Depends(get_session)) -> list[OrderStatusStat]:
    return DashboardService(session).order_stats()


@router.get("/new-customers", response_model=NewCustomers)
def new_customers(session: Session = Depends(get_session)) -> NewCustomers:
    return DashboardService(session).new_customers()
