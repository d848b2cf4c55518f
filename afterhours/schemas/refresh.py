"""
Refresh and status Pydantic schemas.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BulkRefreshRequest(BaseModel):
    """Body for a synchronous bulk refresh. Omitting citySlugs means every city."""
    city_slugs: Optional[List[str]] = Field(default=None, alias="citySlugs")
    force: bool = False

    model_config = ConfigDict(populate_by_name=True)


class CityRefreshResponse(BaseModel):
    city: str
    slug: str
    status: str
    state: str
    cached: bool
    strategy: Optional[str] = None
    api_calls: int
    total_from_api: int
    created: int
    updated: int
    skipped: int
    errors: List[str]
    existing_count: Optional[int] = None
    hours_since_refresh: Optional[float] = None
    message: Optional[str] = None
    error: Optional[str] = None
    duration_ms: int


class BulkSummary(BaseModel):
    total_cities: int
    cities_complete: int
    cities_error: int
    total_from_api: int
    total_created: int
    total_updated: int
    total_skipped: int


class BulkRefreshResponse(BaseModel):
    summary: BulkSummary
    results: List[CityRefreshResponse]


class CityStatusResponse(BaseModel):
    city: str
    name: str
    state_code: str
    slug: str
    population: int
    total_businesses: int
    businesses_with_hours: int
    last_refresh: Optional[str] = None
    hours_since_refresh: Optional[float] = None
    status: str
    needs_fetch: bool


class StatusSummary(BaseModel):
    total_cities: int
    cities_fetched: int
    cities_never_fetched: int
    cities_fresh: int
    cities_stale: int
    total_businesses: int
    businesses_with_hours: int


class AllStatusResponse(BaseModel):
    api_key_configured: bool
    summary: StatusSummary
    cities: List[CityStatusResponse]


class KeyStatusResponse(BaseModel):
    configured: bool
    valid: bool
    error: Optional[str] = None
    key_prefix: Optional[str] = None
