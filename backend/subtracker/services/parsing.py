"""Parsing helpers for user-facing tokens: ``MM-YYYY`` periods and UUIDs."""

import calendar
import re
from datetime import date
from uuid import UUID

from subtracker.core.errors import SubscriptionError

PERIOD_FORMAT = "MM-YYYY"
_PERIOD_RX = re.compile(r"^(0[1-9]|1[0-2])-(\d{4})$")


def parse_period(raw: str, field: str = "period") -> date:
    """Parse ``MM-YYYY`` into the first day of that month."""
    m = _PERIOD_RX.match(raw or "")
    if not m:
        raise SubscriptionError.invalid_input(f"invalid {field} format, expected {PERIOD_FORMAT}")
    month, year = int(m.group(1)), int(m.group(2))
    if year < 1:
        raise SubscriptionError.invalid_input(f"invalid {field} format, expected {PERIOD_FORMAT}")
    return date(year, month, 1)


def month_end(value: date) -> date:
    last_day = calendar.monthrange(value.year, value.month)[1]
    return date(value.year, value.month, last_day)


def format_period(value: date | None) -> str | None:
    if value is None:
        return None
    return f"{value.month:02d}-{value.year:04d}"


def parse_uuid(raw: str | None, label: str = "subscription ID") -> UUID:
    v = str(raw or "").strip()
    try:
        return UUID(v)
    except ValueError:
        raise SubscriptionError.invalid_input(f"invalid {label}") from None
