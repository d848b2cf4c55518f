"""
Tests for availability flags, open-now status and display formatting.
"""
from datetime import datetime
from types import SimpleNamespace

import pytest

from afterhours.services.availability import AvailabilityEngine, attach_availability, check_availability
from afterhours.services.formatting import (
    format_countdown,
    format_time,
    format_time_range,
    schedule_display_lines,
)
from afterhours.services.hours_normalizer import NormalizedWindow

# 2024-01-01 is a Monday, 2024-01-03 a Wednesday, 2024-01-06 a Saturday
MONDAY_6PM = datetime(2024, 1, 1, 18, 0)


def window(day, open_hour, close_hour, open_minute=0, close_minute=0, category="CONSULTATION"):
    return SimpleNamespace(
        category=category,
        day_of_week=day,
        open_hour=open_hour,
        open_minute=open_minute,
        close_hour=close_hour,
        close_minute=close_minute,
    )


class TestFlags:
    """Test evening / weekend / emergency flags."""

    def test_evening_by_close_hour(self):
        """Wednesday 16:30-18:00 counts as evening because it closes at 18."""
        result = check_availability([window(3, 16, 18, open_minute=30)], MONDAY_6PM)
        assert result.has_evening_hours is True

    def test_weekday_business_hours_not_evening(self):
        """Wednesday 09:00-17:00 is not evening."""
        result = check_availability([window(3, 9, 17)], MONDAY_6PM)
        assert result.has_evening_hours is False

    def test_evening_by_open_hour(self):
        result = check_availability([window(2, 17, 17, close_minute=45)], MONDAY_6PM)
        assert result.has_evening_hours is True

    def test_weekend_evening_not_counted_as_evening(self):
        result = check_availability([window(6, 17, 21)], MONDAY_6PM)
        assert result.has_evening_hours is False
        assert result.has_weekend_hours is True

    def test_saturday_any_hours_is_weekend(self):
        result = check_availability([window(6, 9, 10)], MONDAY_6PM)
        assert result.has_weekend_hours is True

    def test_friday_late_not_weekend(self):
        """Friday closing at 23:59 is not a weekend window."""
        result = check_availability([window(5, 20, 23, close_minute=59)], MONDAY_6PM)
        assert result.has_weekend_hours is False

    def test_full_day_is_emergency(self):
        result = check_availability([window(3, 0, 23, close_minute=59)], MONDAY_6PM)
        assert result.has_emergency_hours is True

    def test_emergency_category(self):
        result = check_availability([window(3, 9, 12, category="after_hours_Emergency")], MONDAY_6PM)
        assert result.has_emergency_hours is True

    def test_late_close_is_emergency(self):
        result = check_availability([window(3, 18, 22)], MONDAY_6PM)
        assert result.has_emergency_hours is True

    def test_no_windows(self):
        result = check_availability([], MONDAY_6PM)
        assert not (result.has_evening_hours or result.has_weekend_hours or result.has_emergency_hours)
        assert result.is_available_now is False
        assert result.current_window is None
        assert result.minutes_until_close is None


class TestOpenNow:
    """Test open-now status with a half-open [open, close) interval."""

    def test_open_inside_window(self):
        result = check_availability([window(1, 17, 20)], MONDAY_6PM)

        assert result.is_available_now is True
        assert result.minutes_until_close == 120
        assert result.current_window.close_hour == 20
        assert result.current_window.closes_at == "8PM"

    def test_closed_exactly_at_close_time(self):
        result = check_availability([window(1, 9, 18)], MONDAY_6PM)

        assert result.is_available_now is False
        assert result.current_window is None

    def test_open_exactly_at_open_time(self):
        result = check_availability([window(1, 18, 19)], MONDAY_6PM)
        assert result.is_available_now is True

    def test_other_day_ignored(self):
        result = check_availability([window(2, 17, 20)], MONDAY_6PM)
        assert result.is_available_now is False

    def test_soonest_closing_window_is_current(self):
        """Of two open windows the one closing in 10 minutes wins over 45."""
        windows = [
            window(1, 17, 18, close_minute=45, category="CONSULTATION"),
            window(1, 17, 18, close_minute=10, category="EMERGENCY"),
        ]

        result = check_availability(windows, MONDAY_6PM)

        assert result.minutes_until_close == 10
        assert result.current_window.category == "EMERGENCY"

    def test_tie_keeps_first(self):
        windows = [
            window(1, 17, 19, category="FIRST"),
            window(1, 16, 19, category="SECOND"),
        ]

        result = check_availability(windows, MONDAY_6PM)

        assert result.current_window.category == "FIRST"


class TestMalformedData:
    """Bad window data degrades to no availability instead of raising."""

    def test_none_fields_skipped(self):
        bad = window(1, None, 20)
        result = check_availability([bad, window(6, 9, 12)], MONDAY_6PM)

        assert result.has_weekend_hours is True
        assert result.is_available_now is False
        assert len(result.windows) == 1

    def test_out_of_range_skipped(self):
        result = check_availability([window(9, 17, 20), window(1, 17, 61)], MONDAY_6PM)

        assert result.windows == []

    def test_none_collection(self):
        assert check_availability(None, MONDAY_6PM).is_available_now is False

    def test_labels_attached(self):
        result = check_availability([window(1, 17, 20)], MONDAY_6PM)
        assert result.windows[0].label == "Evening Consultation"


class TestEngine:
    """Test the clock-injected wrapper."""

    def test_uses_clock_when_now_omitted(self):
        engine = AvailabilityEngine(clock=lambda: MONDAY_6PM)

        assert engine.evaluate([window(1, 17, 20)]).is_available_now is True

    def test_explicit_now_wins(self):
        engine = AvailabilityEngine(clock=lambda: MONDAY_6PM)

        assert engine.evaluate([window(1, 17, 20)], now=datetime(2024, 1, 1, 21, 0)).is_available_now is False

    def test_attach_preserves_order(self):
        businesses = [
            SimpleNamespace(display_name="B", hour_windows=[window(1, 17, 20)]),
            SimpleNamespace(display_name="A", hour_windows=[]),
        ]

        listings = attach_availability(businesses, MONDAY_6PM)

        assert [item.business.display_name for item in listings] == ["B", "A"]
        assert listings[0].availability.is_available_now is True

    def test_accepts_normalized_windows(self):
        w = NormalizedWindow("CONSULTATION", 1, 17, 0, 20, 0)
        assert check_availability([w], MONDAY_6PM).minutes_until_close == 120


class TestFormatting:
    """Test display helpers."""

    @pytest.mark.parametrize("hour,minute,expected", [
        (0, 0, "12AM"),
        (9, 30, "9:30AM"),
        (12, 0, "12PM"),
        (17, 0, "5PM"),
        (23, 59, "11:59PM"),
    ])
    def test_format_time(self, hour, minute, expected):
        assert format_time(hour, minute) == expected

    def test_format_time_range(self):
        assert format_time_range(17, 0, 20, 30) == "5PM – 8:30PM"

    @pytest.mark.parametrize("minutes,expected", [
        (0, "0 min"),
        (45, "45 min"),
        (60, "1h"),
        (135, "2h 15m"),
    ])
    def test_format_countdown(self, minutes, expected):
        assert format_countdown(minutes) == expected

    def test_schedule_lines_sunday_first(self):
        lines = schedule_display_lines([
            window(1, 17, 20, category="CONSULTATION"),
            window(0, 10, 14, category="WALK_IN"),
        ])

        assert lines == [
            "Sunday: WALK IN 10AM – 2PM",
            "Monday: CONSULTATION 5PM – 8PM",
        ]
