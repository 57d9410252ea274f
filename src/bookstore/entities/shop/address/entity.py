"""Entity: Address."""

from enum import StrEnum

from pydantic import BaseModel, Field, computed_field

from src.bookstore.entities.core._base import Entity

PHONE_PATTERN = r"^\d{10,11}$"


class AddressType(StrEnum):
    HOME = "home"
    OFFICE = "office"
    OTHER = "other"


class Address(Entity):
    customer_id: str
    recipient_name: str = Field(min_length=1, max_length=100)
    phone: str = Field(pattern=PHONE_PATTERN)
    province: str = Field(min_length=1)
    district: str = Field(min_length=1)
    ward: str = Field(min_length=1)
    detail_address: str = Field(min_length=1)
    address_type: AddressType = AddressType.HOME
    is_default: bool = False

    @computed_field
    @property
    def full_address(self) -> str:
        return f"{self.detail_address}, {self.ward}, {self.district}, {self.province}"


class AddressCreate(BaseModel):
    recipient_name: str = Field(min_length=1, max_length=100)
    phone: str = Field(pattern=PHONE_PATTERN)
    province: str = Field(min_length=1)
    district: str = Field(min_length=1)
    ward: str = Field(min_length=1)
    detail_address: str = Field(min_length=1)
    address_type: AddressType = AddressType.HOME
    is_default: bool = False


class AddressUpdate(BaseModel):
    recipient_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    province: str | None = Field(default=None, min_length=1)
    district: str | None = Field(default=None, min_length=1)
    ward: str | None = Field(default=None, min_length=1)
    detail_address: str | None = Field(default=None, min_length=1)
    address_type: AddressType | None = None
    is_default: bool | None = None
