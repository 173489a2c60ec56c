"""
Clock helpers.
All day and week arithmetic runs on UTC calendar days.
"""
from datetime import datetime, timezone
from typing import Callable


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_day(value: datetime) -> datetime:
    """Midnight (UTC) of the calendar day containing value."""
    return as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def same_day(a: datetime, b: datetime) -> bool:
    """Check whether two datetimes fall on the same UTC calendar day."""
    return as_utc(a).date() == as_utc(b).date()

