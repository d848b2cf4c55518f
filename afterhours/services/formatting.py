"""
Display formatting for hours and countdowns.
"""
from typing import Dict, Iterable, List

from afterhours.core.clock import DAY_NAMES


def format_time(hour: int, minute: int = 0) -> str:
    """
    12-hour clock display, minutes only when non-zero.

    Examples:
        >>> format_time(17, 0)
        '5PM'
        >>> format_time(9, 30)
        '9:30AM'
        >>> format_time(0, 0)
        '12AM'
    """
    period = "PM" if hour >= 12 else "AM"
    display_hour = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    display_minute = f":{minute:02d}" if minute > 0 else ""
    return f"{display_hour}{display_minute}{period}"


def format_time_range(open_hour: int, open_minute: int, close_hour: int, close_minute: int) -> str:
    return f"{format_time(open_hour, open_minute)} – {format_time(close_hour, close_minute)}"


def format_countdown(minutes: int) -> str:
    """
    Examples:
        >>> format_countdown(45)
        '45 min'
        >>> format_countdown(120)
        '2h'
        >>> format_countdown(135)
        '2h 15m'
    """
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def format_schedule(windows: Iterable) -> Dict[int, List[Dict[str, str]]]:
    """Group windows by day: {day: [{"category": ..., "range": ...}]}."""
    schedule: Dict[int, List[Dict[str, str]]] = {}
    for w in windows:
        schedule.setdefault(w.day_of_week, []).append({
            "category": (w.category or "").replace("_", " "),
            "range": format_time_range(w.open_hour, w.open_minute, w.close_hour, w.close_minute),
        })
    return schedule


def schedule_display_lines(windows: Iterable) -> List[str]:
    """One "Monday: CONSULTATION 5PM – 8PM" line per window, Sunday first."""
    schedule = format_schedule(windows)
    lines = []
    for day in range(7):
        for entry in schedule.get(day, []):
            lines.append(f"{DAY_NAMES[day]}: {entry['category']} {entry['range']}")
    return lines
