"""
Week Key Calculator
Maps a timestamp to the calendar-week identifier used by weekly progress buckets.

The numbering is a simplified Sunday-start scheme, not ISO-8601:

    week = ceil((day_of_year + weekday(Jan 1) + 1) / 7)

where day_of_year is 0-based and weekday counts from Sunday = 0. Week 1 always
contains Jan 1, and weeks roll over on Sundays. Around year boundaries this
diverges from ISO weeks (e.g. Dec 31 can be week 53 and the following Jan 1
week 1 of the new year). Stored buckets depend on the exact keys, so the
formula must stay as is.
"""
import math
from datetime import date, datetime

from study_progress.core.clock import as_utc


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return day.isoweekday() % 7


def week_number(value: datetime | date) -> int:
    """Week number of value within its year."""
    day = as_utc(value).date() if isinstance(value, datetime) else value
    first_day_of_year = date(day.year, 1, 1)
    day_of_year = (day - first_day_of_year).days
    return math.ceil((day_of_year + sunday_weekday(first_day_of_year) + 1) / 7)


def week_key(value: datetime | date) -> str:
    """
    Calendar-week identifier for a timestamp.

    Args:
        value: Timestamp (naive values are treated as UTC) or date

    Returns:
        Key formatted as "<year>-W<week>", week zero-padded to 2 digits
    """
    day = as_utc(value).date() if isinstance(value, datetime) else value
    return f"{day.year}-W{week_number(day):02d}"
