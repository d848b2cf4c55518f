"""
Centralized week/clock logic for the directory.

Hour windows use a Sunday-first week (0=Sunday, 6=Saturday), while Python's
``datetime.weekday()`` is Monday-first. Everything that turns a datetime
into a schedule position goes through this module so the two conventions
never get mixed.

Example: Monday 2024-01-01 18:00 -> day_of_week 1, minute_of_day 1080.
"""
from datetime import datetime, timezone
from typing import Optional
import pytz


SUNDAY = 0
SATURDAY = 6
WEEKEND_DAYS = (SUNDAY, SATURDAY)
WEEKDAYS = (1, 2, 3, 4, 5)

MINUTES_PER_DAY = 24 * 60
END_OF_DAY_HOUR = 23
END_OF_DAY_MINUTE = 59

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


def day_of_week(dt: datetime) -> int:
    """
    Sunday-first weekday index for a datetime.

    Examples:
        >>> day_of_week(datetime(2024, 1, 7))   # Sunday
        0
        >>> day_of_week(datetime(2024, 1, 6))   # Saturday
        6
    """
    return dt.isoweekday() % 7


def minute_of_day(hour: int, minute: int) -> int:
    """Minutes since midnight for an hour/minute pair."""
    return hour * 60 + minute


def span_minutes(open_hour: int, open_minute: int, close_hour: int, close_minute: int) -> int:
    """
    Length of a same-day window in minutes.

    A close of 23:59 is the "rest of the day" marker produced when windows
    are split at midnight, so it counts through to 24:00.

    Examples:
        >>> span_minutes(9, 0, 17, 30)
        510
        >>> span_minutes(0, 0, 23, 59)
        1440
    """
    close_total = minute_of_day(close_hour, close_minute)
    if close_hour == END_OF_DAY_HOUR and close_minute == END_OF_DAY_MINUTE:
        close_total = MINUTES_PER_DAY
    return close_total - minute_of_day(open_hour, open_minute)


def local_now(timezone_name: Optional[str] = None, now: Optional[datetime] = None) -> datetime:
    """
    Naive wall-clock time in a city's timezone.

    Args:
        timezone_name: IANA timezone string (e.g., "America/Los_Angeles").
                       If None, the server's local time is used.
        now: Instant to convert (should be timezone-aware). Defaults to the
             current time.

    Returns:
        A timezone-naive datetime expressed in local wall-clock time, which is
        what the availability engine compares hour windows against.
    """
    if timezone_name is None:
        if now is None:
            return datetime.now()
        return now.replace(tzinfo=None) if now.tzinfo is None else now.astimezone().replace(tzinfo=None)

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        # Assume UTC if no timezone
        now = pytz.UTC.localize(now)

    tz = pytz.timezone(timezone_name)
    return now.astimezone(tz).replace(tzinfo=None)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form refresh times are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours between two naive UTC timestamps."""
    return (later - earlier).total_seconds() / 3600.0
