from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import BadRequestError, ConflictError, NotFoundError
from src.bookstore.core.services.auth.password import hash_password
from src.bookstore.entities.core._base import Page, Pagination
from src.bookstore.entities.core.customer import (
    Customer,
    CustomerCreate,
    CustomerQuery,
    CustomerRepository,
    CustomerStats,
    CustomerUpdate,
)
from src.bookstore.entities.core.customer.entity import DEFAULT_AVATAR
from src.bookstore.entities.shop.address import Address, AddressRepository
from src.bookstore.entities.shop.order import OrderRepository


class CustomerDetail(Customer):
    addresses: list[Address] = []
    stats: CustomerStats


class CustomerService:
    """Back-office management of customer accounts."""

    def __init__(self, db_session: Session):
        self._customers = CustomerRepository(db_session)
        self._addresses = AddressRepository(db_session)
        self._orders = OrderRepository(db_session)

    def _require(self, customer_id: str) -> Customer:
        customer = self._customers.get(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        return customer

    def search(
        self, query: CustomerQuery, page: int, limit: int, sort_by: str | None
    ) -> Page[Customer]:
        customers, total = self._customers.search(query, page, limit, sort_by or "-created_at")
        return Page(items=customers, pagination=Pagination.build(page, limit, total))

    def get(self, customer_id: str) -> CustomerDetail:
        customer = self._require(customer_id)
        return CustomerDetail(
            **customer.model_dump(),
            addresses=self._addresses.list_for_customer(customer_id),
            stats=CustomerStats(
                total_orders=self._orders.count_for_customer(customer_id),
                total_spent=self._orders.spent_by_customer(customer_id),
            ),
        )

    def create(self, data: CustomerCreate) -> Customer:
        if self._customers.get_by_email(data.email):
            raise ConflictError("Email already exists")
        fields = data.model_dump(exclude={"password"})
        fields["avatar"] = fields.get("avatar") or DEFAULT_AVATAR
        customer = self._customers.create(
            Customer(**fields, password_hash=hash_password(data.password))
        )
        logger.info("Customer {} created by admin", customer.id)
        return customer

    def update(self, customer_id: str, data: CustomerUpdate) -> Customer:
        customer = self._require(customer_id)
        changes = data.model_dump(exclude_unset=True)
        if "avatar" in changes and not changes["avatar"]:
            changes["avatar"] = DEFAULT_AVATAR
        return self._customers.update(customer.with_changes(changes))

    def toggle_active(self, customer_id: str) -> Customer:
        customer = self._require(customer_id)
        customer.is_active = not customer.is_active
        logger.info(
            "Customer {} {}", customer.id, "activated" if customer.is_active else "deactivated"
        )
        return self._customers.update(customer)

    def delete(self, customer_id: str) -> None:
        customer = self._require(customer_id)
        order_count = self._orders.count_for_customer(customer_id)
        if order_count:
            raise BadRequestError(
                f"Cannot delete customer with {order_count} orders. Deactivate the account instead."
            )
        for address in self._addresses.list_for_customer(customer_id):
            self._addresses.delete(address.id)
        self._customers.delete(customer.id)
        logger.info("Customer {} deleted", customer.id)

