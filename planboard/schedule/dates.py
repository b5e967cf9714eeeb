"""Calendar helpers shared by the timeline engine and the payload mapping.

All arithmetic happens on timezone-aware UTC datetimes. Plain dates are read
as midnight UTC and naive datetimes are assumed to already be UTC, so mixing
the two never raises.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone

ONE_DAY = timedelta(days=1)

MIN_INSTANT = datetime.min.replace(tzinfo=timezone.utc)
MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc)

MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def to_utc(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def start_of_day(value: date | datetime) -> datetime:
    dt = to_utc(value)
    return dt.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(value: date | datetime) -> datetime:
    return start_of_day(value).replace(day=1)


def next_month(value: datetime) -> datetime | None:
    """First instant of the month after ``value``'s month.

    Returns None for December of the last representable year.
    """
    first = start_of_month(value)
    if first.month == 12:
        if first.year == MAX_INSTANT.year:
            return None
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def shift(value: datetime, delta: timedelta) -> datetime:
    """``value + delta``, saturating at the ends of the datetime range."""
    try:
        return value + delta
    except OverflowError:
        return MAX_INSTANT if delta > timedelta(0) else MIN_INSTANT


def days_between(start: date | datetime, end: date | datetime) -> float:
    """Fractional days from ``start`` to ``end`` (negative when end is earlier)."""
    return (to_utc(end) - to_utc(start)) / ONE_DAY


def whole_days_between(start: date | datetime, end: date | datetime) -> int:
    return math.floor(days_between(start, end))


def month_label(value: datetime) -> str:
    return f"{MONTH_ABBR[value.month - 1]} {value.year}"


def parse_instant(value) -> datetime | None:
    """Parse an upstream date value; returns None for anything unreadable."""
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        return to_utc(value)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError:
        return None
