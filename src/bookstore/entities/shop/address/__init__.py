"""Entity package: Address."""

from .entity import Address, AddressCreate, AddressType, AddressUpdate
from .repository import AddressRepository
from .table import AddressTable

__all__ = [
    "Address",
    "AddressCreate",
    "AddressRepository",
    "AddressTable",
    "AddressType",
    "AddressUpdate",
]
