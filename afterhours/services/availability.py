"""
Availability computation for a business's hour windows.

Everything here is a pure function of the windows and a caller-supplied
reference instant. Local wall-clock time is assumed; no timezone
conversion happens in this module.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from afterhours.core.clock import (
    END_OF_DAY_HOUR,
    END_OF_DAY_MINUTE,
    WEEKDAYS,
    WEEKEND_DAYS,
    day_of_week,
    minute_of_day,
)
from afterhours.services.formatting import format_time
from afterhours.services.hours_normalizer import NormalizedWindow, label_window


# Weekday windows opening at/after 5 PM or closing at/after 6 PM count as evening
EVENING_OPEN_HOUR = 17
EVENING_CLOSE_HOUR = 18
# Closing at/after 10 PM counts as emergency (late-night) availability
EMERGENCY_CLOSE_HOUR = 22
EMERGENCY_KEYWORD = "emergency"


@dataclass
class CurrentWindow:
    """The open window that closes soonest."""
    category: str
    close_hour: int
    close_minute: int

    @property
    def closes_at(self) -> str:
        return format_time(self.close_hour, self.close_minute)


@dataclass
class AvailabilityResult:
    windows: List[NormalizedWindow] = field(default_factory=list)
    is_available_now: bool = False
    current_window: Optional[CurrentWindow] = None
    minutes_until_close: Optional[int] = None
    has_evening_hours: bool = False
    has_weekend_hours: bool = False
    has_emergency_hours: bool = False


@dataclass
class Listing:
    """A business paired with its availability at one reference instant."""
    business: Any
    availability: AvailabilityResult


def _coerce_window(raw: Any) -> Optional[NormalizedWindow]:
    """
    Read a window-like object (ORM row or NormalizedWindow). Returns None for
    anything malformed so bad data degrades to "no special availability".
    """
    try:
        day = int(raw.day_of_week)
        open_hour, open_minute = int(raw.open_hour), int(raw.open_minute)
        close_hour, close_minute = int(raw.close_hour), int(raw.close_minute)
    except (AttributeError, TypeError, ValueError):
        return None

    if not (0 <= day <= 6 and 0 <= open_hour <= 23 and 0 <= close_hour <= 23
            and 0 <= open_minute <= 59 and 0 <= close_minute <= 59):
        return None

    category = getattr(raw, "category", None) or ""
    return NormalizedWindow(
        category=category,
        day_of_week=day,
        open_hour=open_hour,
        open_minute=open_minute,
        close_hour=close_hour,
        close_minute=close_minute,
        label=label_window(category, day, open_hour, close_hour),
    )


def is_evening_window(w: NormalizedWindow) -> bool:
    # Either condition alone is enough: 4 PM-6 PM still counts
    return w.day_of_week in WEEKDAYS and (
        w.open_hour >= EVENING_OPEN_HOUR or w.close_hour >= EVENING_CLOSE_HOUR
    )


def is_weekend_window(w: NormalizedWindow) -> bool:
    return w.day_of_week in WEEKEND_DAYS


def is_full_day_window(w: NormalizedWindow) -> bool:
    return (w.open_hour == 0 and w.open_minute == 0
            and w.close_hour == END_OF_DAY_HOUR and w.close_minute == END_OF_DAY_MINUTE)


def is_emergency_window(w: NormalizedWindow) -> bool:
    return (
        w.close_hour >= EMERGENCY_CLOSE_HOUR
        or EMERGENCY_KEYWORD in w.category.lower()
        or is_full_day_window(w)
    )


def check_availability(hours: Optional[Iterable[Any]], now: datetime) -> AvailabilityResult:
    """
    Compute availability flags and open-now status in a single pass.

    Args:
        hours: Window-like objects with category, day_of_week and
               open/close hour/minute attributes
        now: Reference instant in the business's local wall-clock time

    Returns:
        AvailabilityResult. A window is open when now falls in
        [open, close); among open windows the one closing soonest is
        current, the first one winning ties.
    """
    result = AvailabilityResult()
    current_day = day_of_week(now)
    current_total = minute_of_day(now.hour, now.minute)

    for raw in hours or []:
        w = _coerce_window(raw)
        if w is None:
            continue
        result.windows.append(w)

        if is_evening_window(w):
            result.has_evening_hours = True
        if is_weekend_window(w):
            result.has_weekend_hours = True
        if is_emergency_window(w):
            result.has_emergency_hours = True

        if w.day_of_week != current_day:
            continue
        open_total = minute_of_day(w.open_hour, w.open_minute)
        close_total = minute_of_day(w.close_hour, w.close_minute)
        if open_total <= current_total < close_total:
            result.is_available_now = True
            remaining = close_total - current_total
            if result.minutes_until_close is None or remaining < result.minutes_until_close:
                result.minutes_until_close = remaining
                result.current_window = CurrentWindow(
                    category=w.category,
                    close_hour=w.close_hour,
                    close_minute=w.close_minute,
                )

    return result


def attach_availability(businesses: Iterable[Any], now: datetime) -> List[Listing]:
    """Pair each business with its availability, preserving order."""
    return [
        Listing(business=b, availability=check_availability(getattr(b, "hour_windows", None), now))
        for b in businesses
    ]


class AvailabilityEngine:
    """
    Availability with an injectable clock, for callers that do not carry a
    reference instant of their own.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self.clock = clock

    def evaluate(self, hours: Optional[Iterable[Any]], now: Optional[datetime] = None) -> AvailabilityResult:
        return check_availability(hours, now if now is not None else self.clock())

    def listings(self, businesses: Iterable[Any], now: Optional[datetime] = None) -> List[Listing]:
        return attach_availability(businesses, now if now is not None else self.clock())
