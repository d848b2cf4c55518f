"""
Roll-up and detailed statistics over a city's listings.

Both entry points are pure functions of a Listing collection and make a
single pass over it; there is no caching layer in front of them.
"""
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from afterhours.core.clock import DAY_NAMES, SATURDAY, SUNDAY, WEEKDAYS
from afterhours.data.neighborhoods import ZIP_NEIGHBORHOODS
from afterhours.models.business import (
    ACCESSIBILITY_FIELDS,
    AMENITY_FIELDS,
    FREE_PARKING_FIELDS,
    PARKING_FIELDS,
    PAYMENT_FIELDS,
)
from afterhours.services.availability import Listing
from afterhours.services.formatting import format_time
from afterhours.services.neighborhoods import extract_neighborhood


# A window closing at or after 5 PM counts toward that day's evening heatmap cell
HEATMAP_CLOSE_HOUR = 17
TOP_NEIGHBORHOODS = 10


@dataclass
class RollupStats:
    total: int = 0
    available_now: List[Listing] = field(default_factory=list)
    evening_count: int = 0
    weekend_count: int = 0
    emergency_count: int = 0


@dataclass
class AmenityCoverage:
    """true_count over reported_count; businesses with no data are excluded."""
    true_count: int = 0
    reported_count: int = 0

    @property
    def percent(self) -> Optional[float]:
        if self.reported_count == 0:
            return None
        return round(self.true_count / self.reported_count * 100, 1)


@dataclass
class DayAvailability:
    day_index: int
    day_name: str
    evening_count: int = 0
    latest_close_hour: int = 0

    @property
    def latest_close_display(self) -> Optional[str]:
        return format_time(self.latest_close_hour) if self.latest_close_hour > 0 else None


@dataclass
class NeighborhoodCluster:
    name: str
    count: int = 0
    evening_count: int = 0
    weekend_count: int = 0
    free_parking_count: int = 0
    accessible_entrance_count: int = 0


@dataclass
class DetailedStats:
    total: int = 0
    evening_count: int = 0
    weekend_count: int = 0
    emergency_count: int = 0

    amenities: Dict[str, AmenityCoverage] = field(default_factory=dict)
    payment_data_available: int = 0
    parking_data_available: int = 0
    accessibility_data_available: int = 0

    any_free_parking: int = 0
    fully_accessible: int = 0
    with_website: int = 0

    day_by_day: List[DayAvailability] = field(default_factory=list)
    busiest_evening_day: Optional[str] = None
    least_busy_evening_day: Optional[str] = None

    latest_available_hour: int = 0
    latest_business: Optional[str] = None

    saturday_count: int = 0
    sunday_count: int = 0
    earliest_weekend_open: Optional[int] = None

    neighborhoods: List[NeighborhoodCluster] = field(default_factory=list)

    emergency_with_free_parking: int = 0
    weekend_with_accessible_entrance: int = 0

    @property
    def latest_available_display(self) -> Optional[str]:
        if self.latest_business is None:
            return None
        return format_time(self.latest_available_hour)

    @property
    def earliest_weekend_open_display(self) -> Optional[str]:
        if self.earliest_weekend_open is None:
            return None
        return format_time(self.earliest_weekend_open)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["amenities"] = {
            name: {**asdict(cov), "percent": cov.percent}
            for name, cov in self.amenities.items()
        }
        data["day_by_day"] = [
            {**asdict(day), "latest_close_display": day.latest_close_display}
            for day in self.day_by_day
        ]
        data["latest_available_display"] = self.latest_available_display
        data["earliest_weekend_open_display"] = self.earliest_weekend_open_display
        return data


def compute_stats(listings: Iterable[Listing]) -> RollupStats:
    """Lightweight roll-up; available_now keeps the input order."""
    stats = RollupStats()
    for listing in listings:
        availability = listing.availability
        stats.total += 1
        if availability.is_available_now:
            stats.available_now.append(listing)
        if availability.has_evening_hours:
            stats.evening_count += 1
        if availability.has_weekend_hours:
            stats.weekend_count += 1
        if availability.has_emergency_hours:
            stats.emergency_count += 1
    return stats


def _reports_any(business, fields) -> bool:
    return any(getattr(business, name, None) is not None for name in fields)


def _rank_evening_days(day_by_day: List[DayAvailability]):
    """(busiest, least busy) weekday by evening count; ties keep day order."""
    weekdays = [d for d in day_by_day if d.day_index in WEEKDAYS]
    ranked = sorted(weekdays, key=lambda d: d.evening_count, reverse=True)
    if not ranked:
        return None, None
    return ranked[0].day_name, ranked[-1].day_name


def compute_detailed_stats(
    listings: Iterable[Listing],
    city_name: Optional[str] = None,
    neighborhood_table: Mapping[str, str] = ZIP_NEIGHBORHOODS,
) -> DetailedStats:
    """
    Detailed analysis for a city (or city + practice area) page.

    Args:
        listings: Businesses paired with their availability
        city_name: Used to discard the city segment of addresses and as the
                   fallback neighborhood label
        neighborhood_table: ZIP prefix -> neighborhood lookup

    Returns:
        DetailedStats. Amenity percentages use the number of businesses
        that reported each field, never the total.
    """
    stats = DetailedStats(
        amenities={name: AmenityCoverage() for name in AMENITY_FIELDS},
        day_by_day=[DayAvailability(day_index=i, day_name=DAY_NAMES[i]) for i in range(7)],
    )
    clusters: Dict[str, NeighborhoodCluster] = {}
    latest_hour: Optional[int] = None

    for listing in listings:
        business = listing.business
        availability = listing.availability
        stats.total += 1

        has_evening = availability.has_evening_hours
        has_weekend = availability.has_weekend_hours
        if has_evening:
            stats.evening_count += 1
        if has_weekend:
            stats.weekend_count += 1
        if availability.has_emergency_hours:
            stats.emergency_count += 1

        for name in AMENITY_FIELDS:
            value = getattr(business, name, None)
            if value is None:
                continue
            coverage = stats.amenities[name]
            coverage.reported_count += 1
            if value:
                coverage.true_count += 1

        if _reports_any(business, PAYMENT_FIELDS):
            stats.payment_data_available += 1
        if _reports_any(business, PARKING_FIELDS):
            stats.parking_data_available += 1
        if _reports_any(business, ACCESSIBILITY_FIELDS):
            stats.accessibility_data_available += 1

        free_parking = any(getattr(business, name, None) is True for name in FREE_PARKING_FIELDS)
        accessible_entrance = getattr(business, "wheelchair_accessible_entrance", None) is True
        accessible_parking = getattr(business, "wheelchair_accessible_parking", None) is True
        if free_parking:
            stats.any_free_parking += 1
        if accessible_entrance and accessible_parking:
            stats.fully_accessible += 1
        if getattr(business, "website_uri", None):
            stats.with_website += 1

        if availability.has_emergency_hours and free_parking:
            stats.emergency_with_free_parking += 1
        if has_weekend and accessible_entrance:
            stats.weekend_with_accessible_entrance += 1

        evening_days = set()
        open_saturday = open_sunday = False
        for w in availability.windows:
            # Literal maximum: a close hour of 0 is not read as next-day midnight
            if latest_hour is None or w.close_hour > latest_hour:
                latest_hour = w.close_hour
                stats.latest_business = getattr(business, "display_name", None)

            if w.close_hour >= HEATMAP_CLOSE_HOUR:
                evening_days.add(w.day_of_week)
                day = stats.day_by_day[w.day_of_week]
                day.latest_close_hour = max(day.latest_close_hour, w.close_hour)

            if w.day_of_week == SATURDAY:
                open_saturday = True
            elif w.day_of_week == SUNDAY:
                open_sunday = True
            if w.day_of_week in (SATURDAY, SUNDAY):
                if stats.earliest_weekend_open is None or w.open_hour < stats.earliest_weekend_open:
                    stats.earliest_weekend_open = w.open_hour

        for day_index in evening_days:
            stats.day_by_day[day_index].evening_count += 1
        if open_saturday:
            stats.saturday_count += 1
        if open_sunday:
            stats.sunday_count += 1

        hood = extract_neighborhood(getattr(business, "formatted_address", None), city_name, neighborhood_table)
        cluster = clusters.get(hood)
        if cluster is None:
            cluster = clusters[hood] = NeighborhoodCluster(name=hood)
        cluster.count += 1
        if has_evening:
            cluster.evening_count += 1
        if has_weekend:
            cluster.weekend_count += 1
        if free_parking:
            cluster.free_parking_count += 1
        if accessible_entrance:
            cluster.accessible_entrance_count += 1

    if latest_hour is not None:
        stats.latest_available_hour = latest_hour

    stats.busiest_evening_day, stats.least_busy_evening_day = _rank_evening_days(stats.day_by_day)
    stats.neighborhoods = sorted(clusters.values(), key=lambda c: c.count, reverse=True)[:TOP_NEIGHBORHOODS]

    return stats
