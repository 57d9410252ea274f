"""Entity package: Combo."""

from .entity import (
    Combo,
    ComboAvailability,
    ComboBookLine,
    ComboCreate,
    ComboDetail,
    ComboItem,
    ComboSummary,
    ComboUpdate,
)
from .repository import ComboRepository
from .table import ComboItemTable, ComboTable

__all__ = [
    "Combo",
    "ComboAvailability",
    "ComboBookLine",
    "ComboCreate",
    "ComboDetail",
    "ComboItem",
    "ComboItemTable",
    "ComboRepository",
    "ComboSummary",
    "ComboTable",
    "ComboUpdate",
]
