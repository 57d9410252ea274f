"""Entity package: Customer."""

from .entity import (
    Customer,
    CustomerCreate,
    CustomerQuery,
    CustomerRegister,
    CustomerStats,
    CustomerUpdate,
    Gender,
)
from .repository import CustomerRepository
from .table import CustomerTable

__all__ = [
    "Customer",
    "CustomerCreate",
    "CustomerQuery",
    "CustomerRegister",
    "CustomerRepository",
    "CustomerStats",
    "CustomerTable",
    "CustomerUpdate",
    "Gender",
]
