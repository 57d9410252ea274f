"""Entity: Customer."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from src.bookstore.entities.core._base import Entity

DEFAULT_AVATAR = "https://via.placeholder.com/150"
EMAIL_PATTERN = r"^\S+@\S+\.\S+$"


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Customer(Entity):
    """A storefront account.

    The password hash is kept on the entity for authentication but is never
    serialised.
    """

    email: str = Field(pattern=EMAIL_PATTERN, description="Login e-mail, lower-cased")
    password_hash: str = Field(default="", exclude=True, repr=False)
    full_name: str = Field(min_length=1, max_length=100)
    phone: str | None = Field(default=None)
    avatar: str = Field(default=DEFAULT_AVATAR)
    date_of_birth: date | None = None
    gender: Gender | None = None
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class CustomerRegister(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, max_length=100)
    phone: str | None = None


class CustomerCreate(CustomerRegister):
    """Admin-side account creation, with the optional profile fields."""

    date_of_birth: date | None = None
    gender: Gender | None = None
    avatar: str | None = None


class CustomerUpdate(BaseModel):
    full_name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    avatar: str | None = None


class CustomerStats(BaseModel):
    total_orders: int
    total_spent: int


class CustomerQuery(BaseModel):
    search: str | None = None
    is_active: bool | None = None
