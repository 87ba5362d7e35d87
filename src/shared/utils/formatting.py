"""Display formatting for reports: currency amounts and dates (one fixed locale)."""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Union

from src.core.config import settings
from src.shared.utils.money import round_whole

_FILENAME_UNSAFE = re.compile(r"[\s\\/:*?\"<>|\x00-\x1f]+")

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_currency(
    amount: Union[Decimal, float, int, str, None],
    currency: str | None = None,
) -> str:
    """
    Format amount as currency with grouped thousands and no decimals.

    Examples:
        >>> format_currency(1500000)
        'UGX 1,500,000'
        >>> format_currency(-200000)
        'UGX -200,000'
    """
    code = currency or settings.currency_code
    return f"{code} {round_whole(amount):,}"


def parse_iso_date(value: Union[str, date, None]) -> date | None:
    """Parse the date part of an ISO string (YYYY-MM-DD[...]). None if missing or invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def format_date(value: Union[str, date, None]) -> str:
    """Format as day / short month / year, e.g. '05 Mar 2024'. Empty -> '-'."""
    if not value:
        return "-"
    parsed = parse_iso_date(value)
    if parsed is None:
        return str(value)
    return f"{parsed.day:02d} {MONTH_ABBR[parsed.month - 1]} {parsed.year}"


def format_generated_on(value: date) -> str:
    """Header timestamp line value: dd/mm/YYYY."""
    return value.strftime("%d/%m/%Y")


def safe_filename_part(text: str) -> str:
    """
    Make text usable inside a file name: whitespace, path separators and
    characters Windows forbids (: * ? " < > |) become underscores.
    """
    return _FILENAME_UNSAFE.sub("_", text)
