"""Entity package: Admin."""

from .entity import Admin, AdminCreate
from .repository import AdminRepository
from .table import AdminTable

__all__ = ["Admin", "AdminCreate", "AdminRepository", "AdminTable"]
