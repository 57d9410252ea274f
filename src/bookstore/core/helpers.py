"""Small shared helpers: time, slugs, money and pagination math."""

import math
import re
import unicodedata
from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what the database returns."""
    return datetime.now(UTC).replace(tzinfo=None)


def slugify(value: str) -> str:
    """Lower-case ASCII slug with accents stripped.

    ``"Đắc Nhân Tâm"`` becomes ``"dac-nhan-tam"``.
    """
    value = value.replace("đ", "d").replace("Đ", "D")
    value = unicodedata.normalize("NFD", value)
    value = "".join(ch for ch in value if unicodedata.category(ch) != "Mn")
    value = re.sub(r"[^a-z0-9\s-]", "", value.lower()).strip()
    value = re.sub(r"[\s-]+", "-", value)
    return value.strip("-")


def discount_percent(original_price: int, sale_price: int) -> int:
    if original_price <= 0:
        return 0
    return round((original_price - sale_price) / original_price * 100)


def price_after_discount(original_price: int, percent: int) -> int:
    return round(original_price - original_price * percent / 100)


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def mask_card_number(card_number: str) -> str:
    digits = re.sub(r"\D", "", card_number)
    return f"**** **** **** {digits[-4:]}"


def luhn_valid(card_number: str) -> bool:
    """Check a card number with the Luhn checksum."""
    digits = [int(ch) for ch in re.sub(r"\D", "", card_number)]
    if len(digits) < 12:
        return False
    checksum = 0
    for index, digit in enumerate(reversed(digits)):
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        checksum += digit
    return checksum % 10 == 0
