"""Entity: Admin."""

from pydantic import BaseModel, Field, field_validator

from src.bookstore.entities.core._base import Entity
from src.bookstore.entities.core.customer.entity import DEFAULT_AVATAR, EMAIL_PATTERN


class Admin(Entity):
    """A back-office operator."""

    email: str = Field(pattern=EMAIL_PATTERN)
    password_hash: str = Field(default="", exclude=True, repr=False)
    full_name: str = Field(min_length=1, max_length=100)
    phone: str | None = None
    avatar: str = Field(default=DEFAULT_AVATAR)

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        return value.strip().lower()


class AdminCreate(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    full_name: str = Field(min_length=1, max_length=100)
    phone: str | None = None
