"""
Directory router: listings with live availability and statistics.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from afterhours.core.clock import DAY_NAMES
from afterhours.core.errors import DirectoryError, error_to_http
from afterhours.data.cities import get_city_by_slug
from afterhours.db.session import get_db
from afterhours.models.business import AMENITY_FIELDS
from afterhours.schemas.directory import (
    AvailabilityResponse,
    BusinessResponse,
    CityListingsResponse,
    CurrentWindowResponse,
    DetailedStatsResponse,
    HourWindowResponse,
    RollupStatsResponse,
    StateSummaryResponse,
)
from afterhours.services.availability import Listing
from afterhours.services.directory import DirectoryService
from afterhours.services.formatting import format_countdown, format_time_range, schedule_display_lines

router = APIRouter(tags=["directory"])


def _listing_response(listing: Listing) -> BusinessResponse:
    business = listing.business
    availability = listing.availability

    return BusinessResponse(
        id=business.id,
        source_id=business.source_id,
        display_name=business.display_name,
        formatted_address=business.formatted_address,
        short_address=business.short_address,
        primary_type=business.primary_type,
        primary_type_display_name=business.primary_type_display_name,
        latitude=business.latitude,
        longitude=business.longitude,
        google_maps_uri=business.google_maps_uri,
        website_uri=business.website_uri,
        practice_areas=list(business.practice_areas or []),
        amenities={name: getattr(business, name) for name in AMENITY_FIELDS},
        hours=[
            HourWindowResponse(
                category=w.category,
                day_of_week=w.day_of_week,
                day_name=DAY_NAMES[w.day_of_week],
                open_hour=w.open_hour,
                open_minute=w.open_minute,
                close_hour=w.close_hour,
                close_minute=w.close_minute,
                label=w.label,
                display=format_time_range(w.open_hour, w.open_minute, w.close_hour, w.close_minute),
            )
            for w in availability.windows
        ],
        schedule=schedule_display_lines(availability.windows),
        availability=AvailabilityResponse(
            is_available_now=availability.is_available_now,
            current_window=(
                CurrentWindowResponse.model_validate(availability.current_window)
                if availability.current_window else None
            ),
            minutes_until_close=availability.minutes_until_close,
            countdown=(
                format_countdown(availability.minutes_until_close)
                if availability.minutes_until_close is not None else None
            ),
            has_evening_hours=availability.has_evening_hours,
            has_weekend_hours=availability.has_weekend_hours,
            has_emergency_hours=availability.has_emergency_hours,
        ),
        last_refreshed_at=business.last_refreshed_at,
    )


@router.get("/cities/{city_slug}/businesses", response_model=CityListingsResponse)
def city_businesses(
    city_slug: str,
    practice_area: Optional[str] = None,
    only: Optional[Literal["weekend", "emergency"]] = None,
    db: Session = Depends(get_db),
):
    """
    Listings for a city with availability at the city's current local time.

    Optional filters: practice_area (slug) and only=weekend|emergency.
    """
    try:
        result = DirectoryService(db).filtered(city_slug, practice_area=practice_area, only=only)
    except DirectoryError as e:
        raise error_to_http(e)

    stats = result.stats
    return CityListingsResponse(
        city=result.city.label,
        slug=result.city.slug,
        state_code=result.city.state_code,
        timezone=result.city.timezone,
        reference_time=result.now,
        practice_area=practice_area,
        only=only,
        stats=RollupStatsResponse(
            total=stats.total,
            available_now_count=len(stats.available_now),
            available_now_ids=[listing.business.id for listing in stats.available_now],
            evening_count=stats.evening_count,
            weekend_count=stats.weekend_count,
            emergency_count=stats.emergency_count,
        ),
        businesses=[_listing_response(listing) for listing in result.listings],
    )


@router.get("/cities/{city_slug}/analysis", response_model=DetailedStatsResponse)
def city_analysis(
    city_slug: str,
    practice_area: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Detailed availability, amenity and neighborhood analysis for a city."""
    service = DirectoryService(db)
    try:
        stats = service.analysis(city_slug, practice_area=practice_area)
        city = get_city_by_slug(city_slug)
    except DirectoryError as e:
        raise error_to_http(e)

    return {"city": city.label, "practice_area": practice_area, **stats.to_dict()}


@router.get("/states/{state_slug}/summary", response_model=StateSummaryResponse)
def state_summary(state_slug: str, db: Session = Depends(get_db)):
    try:
        return DirectoryService(db).state_summary(state_slug)
    except DirectoryError as e:
        raise error_to_http(e)
