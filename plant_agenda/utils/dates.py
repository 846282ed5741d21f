"""
Calendar date helpers.

Dates travel as ISO strings ("YYYY-MM-DD") in JSON and as datetime.date
everywhere else. Keep conversions here so "today" means the same thing to the
season resolver, the seen-tip tracker and the health scorer.
"""

from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Optional


def parse_date(value) -> Optional[date]:
    """Parse a date value, handling date/datetime objects and ISO strings."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Accept full timestamps too; only the calendar part matters
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def parse_datetime(value) -> Optional[datetime]:
    """Parse an ISO datetime (e.g. Open-Meteo sunrise "2024-01-01T06:12")."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    raise ValueError(f"Unsupported datetime value: {value!r}")


def format_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative when end is earlier)."""
    return (end - start).days


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def js_weekday(value: date) -> int:
    """Weekday index with Sunday = 0, matching the stored sun/outdoor day sets."""
    return (value.weekday() + 1) % 7


def round_half_up(value: float) -> int:
    """Round x.5 away from zero for positive values (round() uses banker's rounding)."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
