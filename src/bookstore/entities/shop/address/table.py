"""Address database table model."""

from sqlmodel import Field

from src.bookstore.entities.core._base import EntityTable


class AddressTable(EntityTable, table=True):
    __tablename__ = "addresses"

    customer_id: str = Field(foreign_key="customers.id", index=True)
    recipient_name: str
    phone: str
    province: str
    district: str
    ward: str
    detail_address: str
    address_type: str
    is_default: bool = Field(default=False, index=True)
