"""
Read side of the directory: listings with availability and statistics.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from afterhours.core.clock import local_now
from afterhours.core.errors import CityNotFoundError, StateNotFoundError
from afterhours.data.cities import CityData, get_cities_by_state, get_city_by_slug
from afterhours.services.availability import Listing, attach_availability
from afterhours.services.repository import BusinessRepository
from afterhours.services.statistics import DetailedStats, RollupStats, compute_detailed_stats, compute_stats

ONLY_WEEKEND = "weekend"
ONLY_EMERGENCY = "emergency"


@dataclass
class CityListings:
    city: CityData
    now: datetime
    listings: List[Listing] = field(default_factory=list)
    stats: RollupStats = field(default_factory=RollupStats)


def _late_or_all_day(listing: Listing) -> bool:
    return listing.availability.has_emergency_hours or any(
        w.close_hour >= 22 or (w.open_hour == 0 and w.close_hour == 23)
        for w in listing.availability.windows
    )


class DirectoryService:
    """Listings for city, practice-area, weekend and emergency pages."""

    def __init__(self, db: Session):
        self.db = db
        self.repository = BusinessRepository(db)

    def _city_data(self, slug: str) -> CityData:
        city = get_city_by_slug(slug)
        if city is None:
            raise CityNotFoundError(slug)
        return city

    def listings(self, slug: str, now: Optional[datetime] = None) -> CityListings:
        """
        All listings for a city, ordered by name.

        Args:
            slug: City slug
            now: Reference instant in city-local wall-clock time. Defaults to
                 the current time in the city's timezone.

        Raises:
            CityNotFoundError: slug not in the city table
        """
        city_data = self._city_data(slug)
        if now is None:
            now = local_now(city_data.timezone)

        city = self.repository.get_city(slug)
        businesses = self.repository.listings(city.id) if city is not None else []
        listings = attach_availability(businesses, now)
        return CityListings(city=city_data, now=now, listings=listings, stats=compute_stats(listings))

    def filtered(
        self,
        slug: str,
        practice_area: Optional[str] = None,
        only: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CityListings:
        """
        Listings narrowed by practice area and/or "weekend" / "emergency".

        A practice-area filter matches only businesses tagged with that
        area; "general" businesses are not folded in.
        """
        result = self.listings(slug, now=now)
        listings = result.listings

        if practice_area:
            listings = [x for x in listings if practice_area in (x.business.practice_areas or [])]
        if only == ONLY_WEEKEND:
            listings = [x for x in listings if x.availability.has_weekend_hours]
        elif only == ONLY_EMERGENCY:
            listings = [x for x in listings if _late_or_all_day(x)]

        result.listings = listings
        result.stats = compute_stats(listings)
        return result

    def analysis(self, slug: str, practice_area: Optional[str] = None,
                 now: Optional[datetime] = None) -> DetailedStats:
        result = self.filtered(slug, practice_area=practice_area, now=now)
        return compute_detailed_stats(result.listings, city_name=result.city.name)

    def state_summary(self, state_slug: str, now: Optional[datetime] = None) -> Dict:
        """Per-city and state-wide evening/weekend/emergency counts."""
        cities = get_cities_by_state(state_slug)
        if not cities:
            raise StateNotFoundError(state_slug)

        summaries = []
        totals = {"total_businesses": 0, "evening_count": 0, "weekend_count": 0, "emergency_count": 0}
        for city in cities:
            stats = self.listings(city.slug, now=now).stats
            entry = {
                "city": city.label,
                "slug": city.slug,
                "total_businesses": stats.total,
                "evening_count": stats.evening_count,
                "weekend_count": stats.weekend_count,
                "emergency_count": stats.emergency_count,
            }
            summaries.append(entry)
            for key in totals:
                totals[key] += entry[key]

        return {"state_slug": state_slug, "state_name": cities[0].state_name, "cities": summaries, **totals}
