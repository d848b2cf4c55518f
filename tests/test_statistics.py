"""
Tests for roll-up/detailed statistics and neighborhood extraction.
"""
from datetime import datetime
from types import SimpleNamespace

import pytest

from afterhours.models.business import AMENITY_FIELDS
from afterhours.services.availability import attach_availability
from afterhours.services.neighborhoods import extract_neighborhood, neighborhood_from_zip, zip_code
from afterhours.services.statistics import compute_detailed_stats, compute_stats

MONDAY_6PM = datetime(2024, 1, 8, 18, 0)


def window(day, open_hour, close_hour, category="CONSULTATION", open_minute=0, close_minute=0):
    return SimpleNamespace(
        category=category,
        day_of_week=day,
        open_hour=open_hour,
        open_minute=open_minute,
        close_hour=close_hour,
        close_minute=close_minute,
    )


def business(name, windows=(), address=None, website_uri=None, **amenities):
    """Business-like object; amenity fields default to unreported."""
    values = {field: None for field in AMENITY_FIELDS}
    values.update(amenities)
    return SimpleNamespace(
        display_name=name,
        hour_windows=list(windows),
        formatted_address=address,
        website_uri=website_uri,
        **values,
    )


@pytest.fixture
def three_businesses():
    return [
        business("A", [window(1, 17, 20)]),
        business("B", [window(6, 9, 13)]),
        business("C"),
    ]


class TestRollupStats:
    """Test the lightweight roll-up."""

    def test_end_to_end_scenario(self, three_businesses):
        """Evening A, weekend B, nothing for C; only A is open Monday 18:00."""
        listings = attach_availability(three_businesses, MONDAY_6PM)

        stats = compute_stats(listings)

        assert stats.total == 3
        assert stats.evening_count == 1
        assert stats.weekend_count == 1
        assert stats.emergency_count == 0
        assert [x.business.display_name for x in stats.available_now] == ["A"]

        current = stats.available_now[0].availability
        assert current.minutes_until_close == 120
        assert (current.current_window.close_hour, current.current_window.close_minute) == (20, 0)

    def test_available_now_keeps_input_order(self):
        listings = attach_availability([
            business("Z", [window(1, 17, 19)]),
            business("M", [window(1, 18, 23)]),
        ], MONDAY_6PM)

        stats = compute_stats(listings)

        assert [x.business.display_name for x in stats.available_now] == ["Z", "M"]

    def test_empty(self):
        stats = compute_stats([])

        assert stats.total == 0
        assert stats.available_now == []


class TestAmenityCoverage:
    """Percentages are over businesses that reported the field."""

    def test_denominator_is_reported_count(self):
        """6 of 10 report free parking, 3 of those true -> 50%."""
        values = [True, True, True, False, False, False, None, None, None, None]
        businesses = [business(f"B{i}", free_parking_lot=v) for i, v in enumerate(values)]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        coverage = stats.amenities["free_parking_lot"]
        assert coverage.reported_count == 6
        assert coverage.true_count == 3
        assert coverage.percent == 50.0
        assert stats.parking_data_available == 6

    def test_no_reports_has_no_percent(self):
        stats = compute_detailed_stats(attach_availability([business("A")], MONDAY_6PM))

        assert stats.amenities["valet_parking"].percent is None
        assert stats.payment_data_available == 0

    def test_fully_accessible_needs_entrance_and_parking(self):
        businesses = [
            business("A", wheelchair_accessible_entrance=True, wheelchair_accessible_parking=True),
            business("B", wheelchair_accessible_entrance=True, wheelchair_accessible_parking=False),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.fully_accessible == 1
        assert stats.accessibility_data_available == 2

    def test_any_free_parking_and_website(self):
        businesses = [
            business("A", free_street_parking=True, website_uri="https://abbott.example"),
            business("B", paid_parking_lot=True),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.any_free_parking == 1
        assert stats.with_website == 1


class TestDayByDay:
    """Test the evening heatmap and busiest-day ranking."""

    def test_heatmap_counts_businesses_once_per_day(self):
        businesses = [
            business("A", [window(1, 9, 12), window(1, 17, 20), window(2, 16, 18)]),
            business("B", [window(1, 18, 21)]),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        monday, tuesday = stats.day_by_day[1], stats.day_by_day[2]
        assert monday.evening_count == 2
        assert monday.latest_close_hour == 21
        assert monday.latest_close_display == "9PM"
        assert tuesday.evening_count == 1
        assert stats.day_by_day[3].latest_close_display is None

    def test_busiest_and_least_busy(self):
        businesses = [
            business("A", [window(1, 17, 20), window(3, 17, 20)]),
            business("B", [window(3, 17, 20)]),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.busiest_evening_day == "Wednesday"
        # Tue, Thu and Fri all have zero; the last in week order wins
        assert stats.least_busy_evening_day == "Friday"

    def test_day_names_sunday_first(self):
        stats = compute_detailed_stats([])

        assert [d.day_name for d in stats.day_by_day][:2] == ["Sunday", "Monday"]


class TestLatestAndWeekend:

    def test_latest_hour_and_business(self):
        businesses = [
            business("A", [window(1, 17, 20)]),
            business("B", [window(2, 18, 23, close_minute=30)]),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.latest_available_hour == 23
        assert stats.latest_business == "B"
        assert stats.latest_available_display == "11PM"

    def test_close_hour_zero_is_literal(self):
        """A close hour of 0 is not treated as next-day midnight."""
        businesses = [
            business("A", [window(1, 0, 0, close_minute=30)]),
            business("B", [window(1, 9, 17)]),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.latest_available_hour == 17
        assert stats.latest_business == "B"

    def test_no_windows_has_no_latest(self):
        stats = compute_detailed_stats(attach_availability([business("A")], MONDAY_6PM))

        assert stats.latest_business is None
        assert stats.latest_available_display is None
        assert stats.earliest_weekend_open is None

    def test_weekend_counts_and_earliest_open(self):
        businesses = [
            business("A", [window(6, 10, 14), window(6, 15, 17)]),
            business("B", [window(0, 8, 12), window(6, 11, 13)]),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.saturday_count == 2
        assert stats.sunday_count == 1
        assert stats.earliest_weekend_open == 8
        assert stats.earliest_weekend_open_display == "8AM"


class TestCrossReferences:

    def test_emergency_with_free_parking(self):
        businesses = [
            business("A", [window(1, 18, 23)], free_parking_lot=True),
            business("B", [window(1, 18, 23)], free_parking_lot=False),
            business("C", [window(1, 9, 17)], free_parking_lot=True),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.emergency_with_free_parking == 1

    def test_weekend_with_accessible_entrance(self):
        businesses = [
            business("A", [window(0, 10, 12)], wheelchair_accessible_entrance=True),
            business("B", [window(1, 10, 12)], wheelchair_accessible_entrance=True),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM))

        assert stats.weekend_with_accessible_entrance == 1


class TestNeighborhoodClusters:

    def test_clusters_sorted_by_count(self):
        businesses = [
            business("A", [window(1, 17, 20)], address="1 A St, Hillcrest, San Diego, CA 92103"),
            business("B", [window(6, 9, 12)], address="2 B St, Hillcrest, San Diego, CA 92103",
                     free_parking_lot=True),
            business("C", address="600 B St, San Diego, CA 92101"),
        ]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM), city_name="San Diego")

        hillcrest, downtown = stats.neighborhoods
        assert (hillcrest.name, hillcrest.count) == ("Hillcrest", 2)
        assert (hillcrest.evening_count, hillcrest.weekend_count, hillcrest.free_parking_count) == (1, 1, 1)
        assert (downtown.name, downtown.count) == ("Downtown", 1)

    def test_top_ten_only(self):
        businesses = [business(f"B{i}", address=f"{i} X St, Hood{i}, Springfield, IL 62701") for i in range(12)]

        stats = compute_detailed_stats(attach_availability(businesses, MONDAY_6PM), city_name="Springfield")

        assert len(stats.neighborhoods) == 10

    def test_to_dict_includes_displays(self):
        stats = compute_detailed_stats(attach_availability([business("A", [window(1, 17, 20)])], MONDAY_6PM))

        data = stats.to_dict()

        assert data["latest_available_display"] == "8PM"
        assert data["amenities"]["cash_only"] == {"true_count": 0, "reported_count": 0, "percent": None}
        assert data["day_by_day"][1]["latest_close_display"] == "8PM"


class TestExtractNeighborhood:
    """Test the address heuristic."""

    def test_middle_segment(self):
        address = "123 Main St, Hillcrest, San Diego, CA 92103, USA"
        assert extract_neighborhood(address, "San Diego") == "Hillcrest"

    def test_skips_suite_and_city(self):
        address = "500 W Broadway, Suite 200, San Diego, CA 92101, USA"
        assert extract_neighborhood(address, "San Diego") == "Downtown"

    def test_zip_prefix_fallback(self):
        """Brooklyn ZIPs resolve through the 3-digit prefix entry."""
        assert extract_neighborhood("99 Court St, NY 11201", "New York") == "Brooklyn"

    def test_falls_back_to_city(self):
        assert extract_neighborhood("1 Elm St, Boise, ID 83702", "Boise") == "Boise"

    def test_citywide_without_address_or_city(self):
        assert extract_neighborhood(None) == "Citywide"

    def test_injected_table(self):
        table = {"837": "North End"}
        assert extract_neighborhood("1 Elm St, Boise, ID 83702", "Boise", table) == "North End"

    def test_zip_code_uses_last_match(self):
        assert zip_code("12345 Ocean Blvd, San Diego, CA 92109-1234") == "92109"
        assert zip_code("No zip here") is None

    def test_neighborhood_from_zip_longest_prefix(self):
        table = {"921": "County", "92103": "Hillcrest"}
        assert neighborhood_from_zip("92103", table) == "Hillcrest"
        assert neighborhood_from_zip("92199", table) == "County"
        assert neighborhood_from_zip(None, table) is None
