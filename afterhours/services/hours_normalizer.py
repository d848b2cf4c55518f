"""
Secondary-hours normalization.

Turns the provider's open/close period pairs (which may cross midnight or
span several days) into flat single-day windows, so downstream code never
has to reason about day boundaries.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from afterhours.core.clock import (
    END_OF_DAY_HOUR,
    END_OF_DAY_MINUTE,
    WEEKEND_DAYS,
    span_minutes,
)

logger = logging.getLogger(__name__)


DEFAULT_CATEGORY = "CONSULTATION"
REGULAR_HOURS_CATEGORY = "REGULAR_HOURS"

LATE_NIGHT_CLOSE_HOUR = 22
EVENING_OPEN_HOUR = 17


@dataclass(frozen=True)
class NormalizedWindow:
    """A same-day window plus its presentation label."""
    category: str
    day_of_week: int
    open_hour: int
    open_minute: int
    close_hour: int
    close_minute: int
    label: str = ""

    @property
    def duration_minutes(self) -> int:
        return span_minutes(self.open_hour, self.open_minute, self.close_hour, self.close_minute)

    def to_record(self) -> Dict[str, Any]:
        """Column values for an HourWindow row."""
        return {
            "category": self.category,
            "day_of_week": self.day_of_week,
            "open_hour": self.open_hour,
            "open_minute": self.open_minute,
            "close_hour": self.close_hour,
            "close_minute": self.close_minute,
        }


def humanize_category(category: str) -> str:
    """
    "EMERGENCY_HOURS" -> "Emergency hours".
    """
    text = (category or "").replace("_", " ").lower()
    return text[:1].upper() + text[1:]


def label_window(category: str, day_of_week: int, open_hour: int, close_hour: int) -> str:
    """
    Presentation hint for a window. Informational only; the availability
    flags use their own thresholds.
    """
    name = humanize_category(category)

    if close_hour >= LATE_NIGHT_CLOSE_HOUR:
        return f"Late Night {name}"
    if day_of_week in WEEKEND_DAYS:
        return f"Weekend {name}"
    if open_hour >= EVENING_OPEN_HOUR:
        return f"Evening {name}"
    return name


def _make_window(category: str, day: int, open_hour: int, open_minute: int,
                 close_hour: int, close_minute: int) -> NormalizedWindow:
    return NormalizedWindow(
        category=category,
        day_of_week=day,
        open_hour=open_hour,
        open_minute=open_minute,
        close_hour=close_hour,
        close_minute=close_minute,
        label=label_window(category, day, open_hour, close_hour),
    )


def _time_part(point: Optional[Dict[str, Any]], key: str, default: int) -> int:
    if not point:
        return default
    value = point.get(key)
    return default if value is None else int(value)


def _check_range(value: int, low: int, high: int, name: str) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} out of range: {value}")


def split_period(category: str, period: Dict[str, Any]) -> List[NormalizedWindow]:
    """
    Split one open/close period into same-day windows.

    - Same open and close day: one window, unchanged.
    - Different days: the open day runs to 23:59, every day in between is a
      full 00:00-23:59 window, and the close day starts at 00:00. Days wrap
      Saturday -> Sunday.
    - No close point: the window runs to 23:59 on the open day.
    - Close point without an hour: the close day runs to 23:59.

    Raises:
        ValueError: if any day/hour/minute is outside its valid range.
    """
    open_point = period.get("open") or {}
    close_point = period.get("close")

    open_day = _time_part(open_point, "day", 0)
    open_hour = _time_part(open_point, "hour", 0)
    open_minute = _time_part(open_point, "minute", 0)

    if close_point:
        close_day = _time_part(close_point, "day", open_day)
        if close_point.get("hour") is None:
            close_hour, close_minute = END_OF_DAY_HOUR, END_OF_DAY_MINUTE
        else:
            # A zero minute is omitted upstream when the hour is given
            close_hour = _time_part(close_point, "hour", 0)
            close_minute = _time_part(close_point, "minute", 0)
    else:
        logger.debug("Period without close time for %s; closing at 23:59 on day %s", category, open_day)
        close_day, close_hour, close_minute = open_day, END_OF_DAY_HOUR, END_OF_DAY_MINUTE

    for value, name in ((open_day, "open day"), (close_day, "close day")):
        _check_range(value, 0, 6, name)
    for value, name in ((open_hour, "open hour"), (close_hour, "close hour")):
        _check_range(value, 0, 23, name)
    for value, name in ((open_minute, "open minute"), (close_minute, "close minute")):
        _check_range(value, 0, 59, name)

    if open_day == close_day:
        return [_make_window(category, open_day, open_hour, open_minute, close_hour, close_minute)]

    windows = [_make_window(category, open_day, open_hour, open_minute, END_OF_DAY_HOUR, END_OF_DAY_MINUTE)]
    day = (open_day + 1) % 7
    while day != close_day:
        windows.append(_make_window(category, day, 0, 0, END_OF_DAY_HOUR, END_OF_DAY_MINUTE))
        day = (day + 1) % 7
    windows.append(_make_window(category, close_day, 0, 0, close_hour, close_minute))

    return windows


def normalize_periods(category: str, periods: Iterable[Any]) -> List[NormalizedWindow]:
    """Normalize a list of periods under one category, skipping malformed ones."""
    windows: List[NormalizedWindow] = []
    for period in periods or []:
        if not isinstance(period, dict):
            logger.warning("Skipping non-object period in %s hours: %r", category, period)
            continue
        try:
            windows.extend(split_period(category, period))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping malformed period in %s hours: %s", category, e)
    return windows


def normalize_secondary_hours(blocks: Optional[Iterable[Any]]) -> List[NormalizedWindow]:
    """
    Flatten raw secondary-hours blocks into single-day windows.

    Args:
        blocks: Provider "regularSecondaryOpeningHours" entries, each with a
                category ("secondaryHoursType" or "hoursType") and "periods".

    Returns:
        Windows in input order. Missing or malformed input yields an empty
        list rather than an error.
    """
    if not blocks or not isinstance(blocks, (list, tuple)):
        return []

    windows: List[NormalizedWindow] = []
    for block in blocks:
        if not isinstance(block, dict):
            logger.warning("Skipping non-object secondary hours block: %r", block)
            continue
        category = block.get("secondaryHoursType") or block.get("hoursType") or DEFAULT_CATEGORY
        windows.extend(normalize_periods(category, block.get("periods") or []))

    return windows


def normalize_regular_hours(opening_hours: Optional[Dict[str, Any]]) -> List[NormalizedWindow]:
    """
    Lower-fidelity windows from a place's primary opening hours, used when it
    reports no secondary hours so evening/weekend detection still has data.
    """
    if not opening_hours or not isinstance(opening_hours, dict):
        return []
    return normalize_periods(REGULAR_HOURS_CATEGORY, opening_hours.get("periods") or [])


def normalize_place_hours(place: Dict[str, Any], use_regular_fallback: bool = True) -> List[NormalizedWindow]:
    """Secondary hours for a raw place, falling back to regular hours if allowed."""
    windows = normalize_secondary_hours(place.get("regularSecondaryOpeningHours"))
    if not windows and use_regular_fallback:
        windows = normalize_regular_hours(place.get("regularOpeningHours"))
    return windows
