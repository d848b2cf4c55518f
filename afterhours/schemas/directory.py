"""
Directory read-side Pydantic schemas.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class HourWindowResponse(BaseModel):
    category: str
    day_of_week: int
    day_name: str
    open_hour: int
    open_minute: int
    close_hour: int
    close_minute: int
    label: str
    display: str


class CurrentWindowResponse(BaseModel):
    category: str
    close_hour: int
    close_minute: int
    closes_at: str

    model_config = ConfigDict(from_attributes=True)


class AvailabilityResponse(BaseModel):
    is_available_now: bool
    current_window: Optional[CurrentWindowResponse] = None
    minutes_until_close: Optional[int] = None
    countdown: Optional[str] = None
    has_evening_hours: bool
    has_weekend_hours: bool
    has_emergency_hours: bool


class BusinessResponse(BaseModel):
    id: int
    source_id: str
    display_name: str
    formatted_address: Optional[str] = None
    short_address: Optional[str] = None
    primary_type: Optional[str] = None
    primary_type_display_name: Optional[str] = None
    latitude: float
    longitude: float
    google_maps_uri: Optional[str] = None
    website_uri: Optional[str] = None
    practice_areas: List[str]
    amenities: Dict[str, Optional[bool]]
    hours: List[HourWindowResponse]
    schedule: List[str]
    availability: AvailabilityResponse
    last_refreshed_at: Optional[datetime] = None


class RollupStatsResponse(BaseModel):
    """Lightweight roll-up shown above a listing page."""
    total: int
    available_now_count: int
    available_now_ids: List[int]
    evening_count: int
    weekend_count: int
    emergency_count: int


class CityListingsResponse(BaseModel):
    city: str
    slug: str
    state_code: str
    timezone: str
    reference_time: datetime
    practice_area: Optional[str] = None
    only: Optional[str] = None
    stats: RollupStatsResponse
    businesses: List[BusinessResponse]


class AmenityCoverageResponse(BaseModel):
    true_count: int
    reported_count: int
    percent: Optional[float] = None


class DayAvailabilityResponse(BaseModel):
    day_index: int
    day_name: str
    evening_count: int
    latest_close_hour: int
    latest_close_display: Optional[str] = None


class NeighborhoodClusterResponse(BaseModel):
    name: str
    count: int
    evening_count: int
    weekend_count: int
    free_parking_count: int
    accessible_entrance_count: int


class DetailedStatsResponse(BaseModel):
    """Detailed analysis; amenity percentages use reported counts as denominator."""
    city: str
    practice_area: Optional[str] = None
    total: int
    evening_count: int
    weekend_count: int
    emergency_count: int
    amenities: Dict[str, AmenityCoverageResponse]
    payment_data_available: int
    parking_data_available: int
    accessibility_data_available: int
    any_free_parking: int
    fully_accessible: int
    with_website: int
    day_by_day: List[DayAvailabilityResponse]
    busiest_evening_day: Optional[str] = None
    least_busy_evening_day: Optional[str] = None
    latest_available_hour: int
    latest_business: Optional[str] = None
    latest_available_display: Optional[str] = None
    saturday_count: int
    sunday_count: int
    earliest_weekend_open: Optional[int] = None
    earliest_weekend_open_display: Optional[str] = None
    neighborhoods: List[NeighborhoodClusterResponse]
    emergency_with_free_parking: int
    weekend_with_accessible_entrance: int


class CitySummary(BaseModel):
    city: str
    slug: str
    total_businesses: int
    evening_count: int
    weekend_count: int
    emergency_count: int


class StateSummaryResponse(BaseModel):
    state_slug: str
    state_name: str
    cities: List[CitySummary]
    total_businesses: int
    evening_count: int
    weekend_count: int
    emergency_count: int
