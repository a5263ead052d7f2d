"""Local-date helpers. Ledger dates are naive calendar dates in the shop's timezone."""

import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

APP_TIMEZONE = ZoneInfo(os.getenv("APP_TIMEZONE", "America/Puerto_Rico"))

# Monday first, matching date.weekday()
DAY_NAMES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")


def now_local() -> datetime:
    """Get current datetime in the shop's timezone."""
    return datetime.now(APP_TIMEZONE)


def today_local() -> date:
    """Get today's date in the shop's timezone."""
    return now_local().date()


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_local_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` string as a calendar date.

    No timezone conversion happens: ``"2024-03-01"`` is March 1st regardless of
    the server clock, never UTC midnight shifted into the previous day.

    Raises:
        ValueError: If the value is not a valid ``YYYY-MM-DD`` date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Date is required")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValueError(f"Invalid date format: {value} (expected YYYY-MM-DD)") from e


def day_name(value: date) -> str:
    """Spanish weekday name for display, e.g. ``lunes``."""
    return DAY_NAMES[value.weekday()]
