"""Back-office reporting."""

from collections import OrderedDict
from datetime import datetime, time, timedelta
from typing import Literal

from pydantic import BaseModel
from sqlmodel import Session

from src.bookstore.core.helpers import utcnow
from src.bookstore.entities.catalog.author import AuthorRepository
from src.bookstore.entities.catalog.book import BookRepository, BookSummary
from src.bookstore.entities.core.customer import CustomerRepository
from src.bookstore.entities.shop.order import OrderRepository, OrderStatus
from src.bookstore.entities.shop.order.table import OrderTable
from src.bookstore.entities.shop.payment import PaymentRepository, RevenuePoint

Period = Literal["day", "month", "year"]

PERIOD_FORMATS: dict[str, str] = {"day": "%Y-%m-%d", "month": "%Y-%m", "year": "%Y"}


class Overview(BaseModel):
    total_books: int
    total_customers: int
    total_orders: int
    pending_orders: int
    monthly_revenue: int


class TopBook(BookSummary):
    author: str | None = None
    purchase_count: int
    sold_copies: int


class OrderStatusStat(BaseModel):
    status: str
    count: int
    total_amount: int


class NewCustomers(BaseModel):
    count: int
    since: datetime


def start_of_month(now: datetime) -> datetime:
    return datetime.combine(now.date().replace(day=1), time.min)


class DashboardService:
    def __init__(self, db_session: Session):
        self._books = BookRepository(db_session)
        self._authors = AuthorRepository(db_session)
        self._customers = CustomerRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._payments = PaymentRepository(db_session)

    def overview(self) -> Overview:
        now = utcnow()
        return Overview(
            total_books=self._books.count_active(),
            total_customers=self._customers.count(),
            total_orders=self._orders.count(),
            pending_orders=self._orders.count(OrderTable.status == OrderStatus.PENDING),
            monthly_revenue=self._payments.revenue_between(start_of_month(now), now),
        )

    def revenue(
        self,
        period: Period = "day",
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[RevenuePoint]:
        """Paid revenue grouped by day, month or year; defaults to the last 30 days."""
        end = end_date or utcnow()
        if end.time() == time.min:
            end = datetime.combine(end.date(), time.max)
        start = start_date or end - timedelta(days=30)
        key_format = PERIOD_FORMATS[period]

        points: OrderedDict[str, RevenuePoint] = OrderedDict()
        for paid_at, amount in self._payments.paid_between(start, end):
            key = paid_at.strftime(key_format)
            point = points.setdefault(key, RevenuePoint(period=key, revenue=0, transactions=0))
            point.revenue += amount
            point.transactions += 1
        return list(points.values())

    def top_books(self, limit: int = 10) -> list[TopBook]:
        books = self._books.top_by_purchases(limit)
        authors = self._authors.get_many(book.author_id for book in books)
        return [
            TopBook(
                **BookSummary.from_book(book).model_dump(),
                author=authors[book.author_id].name if book.author_id in authors else None,
                purchase_count=book.purchase_count,
                sold_copies=book.sold_copies,
            )
            for book in books
        ]

    def order_stats(self) -> list[OrderStatusStat]:
        return [
            OrderStatusStat(status=status, count=count, total_amount=total)
            for status, count, total in self._orders.status_totals()
        ]

    def new_customers(self) -> NewCustomers:
        since = start_of_month(utcnow())
        return NewCustomers(count=self._customers.count_registered_since(since), since=since)
