from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from .datetime_utils import parse_iso_date

Number = Union[int, float, Decimal]


def format_currency(value: Optional[Number]) -> str:
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"))
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_number(value: Optional[Number]) -> str:
    amount = Decimal(str(value or 0))
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount.normalize():,f}"


def format_date(value: Union[str, date, None]) -> str:
    """'2024-01-15' -> 'Jan 15, 2024'."""
    if not value:
        return "-"
    if isinstance(value, str):
        value = parse_iso_date(value[:10])
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def format_user_greeting(first_name: Optional[str], last_name: Optional[str]) -> str:
    """Display name as 'First L.'."""
    if not first_name or not last_name:
        return "User"
    return f"{first_name} {last_name[0].upper()}."


def full_name(first_name: Optional[str], last_name: Optional[str], *, default: str = "Unknown") -> str:
    if first_name and last_name:
        return f"{first_name} {last_name}"
    return default
