from loguru import logger
from sqlmodel import Session

from src.bookstore.core.errors import NotFoundError
from src.bookstore.entities.shop.address import (
    Address,
    AddressCreate,
    AddressRepository,
    AddressUpdate,
)


class AddressService:
    """A customer's address book; at most one address is the default."""

    def __init__(self, db_session: Session):
        self._addresses = AddressRepository(db_session)

    def _require(self, customer_id: str, address_id: str) -> Address:
        address = self._addresses.get_owned(address_id, customer_id)
        if address is None:
            raise NotFoundError("Address not found")
        return address

    def list_addresses(self, customer_id: str) -> list[Address]:
        return self._addresses.list_for_customer(customer_id)

    def get(self, customer_id: str, address_id: str) -> Address:
        return self._require(customer_id, address_id)

    def get_default(self, customer_id: str) -> Address:
        address = self._addresses.get_default(customer_id)
        if address is None:
            raise NotFoundError("No default address found")
        return address

    def create(self, customer_id: str, data: AddressCreate) -> Address:
        is_first = self._addresses.count_for_customer(customer_id) == 0
        address = Address(customer_id=customer_id, **data.model_dump())
        address.is_default = address.is_default or is_first
        if address.is_default:
            self._addresses.clear_default(customer_id)
        address = self._addresses.create(address)
        logger.info("Address {} added for customer {}", address.id, customer_id)
        return address

    def update(self, customer_id: str, address_id: str, data: AddressUpdate) -> Address:
        address = self._require(customer_id, address_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("is_default"):
            self._addresses.clear_default(customer_id, keep_id=address.id)
        elif changes.get("is_default") is False and address.is_default:
            # the default can only move by choosing another address
            changes.pop("is_default")
        return self._addresses.update(address.with_changes(changes))

    def delete(self, customer_id: str, address_id: str) -> None:
        address = self._require(customer_id, address_id)
        self._addresses.delete(address.id)
        if address.is_default:
            remaining = self._addresses.list_for_customer(customer_id)
            if remaining:
                newest = max(remaining, key=lambda item: item.created_at)
                newest.is_default = True
                self._addresses.update(newest)
        logger.info("Address {} deleted for customer {}", address.id, customer_id)

    def set_default(self, customer_id: str, address_id: str) -> Address:
        address = self._require(customer_id, address_id)
        self._addresses.clear_default(customer_id, keep_id=address.id)
        address.is_default = True
        return self._addresses.update(address)
