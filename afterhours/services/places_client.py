"""
Google Places (New) "searchNearby" client and city fetch strategies.

The provider caps results per call, so denser cities are covered with
several queries ("grid" or "multi-radius") and the results de-duplicated
by place id.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple

import requests

from afterhours.core.config import Settings, get_settings, is_placeholder_key
from afterhours.core.errors import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


FIELD_MASK = ",".join([
    "places.id",
    "places.displayName",
    "places.formattedAddress",
    "places.shortFormattedAddress",
    "places.primaryType",
    "places.primaryTypeDisplayName",
    "places.location",
    "places.regularOpeningHours",
    "places.regularSecondaryOpeningHours",
    "places.paymentOptions",
    "places.parkingOptions",
    "places.accessibilityOptions",
    "places.googleMapsUri",
    "places.websiteUri",
])

INCLUDED_TYPES = ["lawyer"]

STRATEGY_GRID = "grid"
STRATEGY_MULTI_RADIUS = "multi-radius"
STRATEGY_SINGLE = "single"
STRATEGIES = (STRATEGY_GRID, STRATEGY_MULTI_RADIUS, STRATEGY_SINGLE)

SINGLE_RADIUS_M = 25_000
MULTI_RADII_M = (5_000, 10_000, 20_000, 35_000)
GRID_RADIUS_M = 12_000
# Degrees of latitude/longitude between the centre and each grid point (~15 km)
GRID_OFFSET_DEG = 0.135
GRID_OFFSETS = (
    (0.0, 0.0),
    (GRID_OFFSET_DEG, 0.0),
    (-GRID_OFFSET_DEG, 0.0),
    (0.0, GRID_OFFSET_DEG),
    (0.0, -GRID_OFFSET_DEG),
)


class PlacesProvider(Protocol):
    """Anything that can run a nearby search and return raw place dicts."""

    def search_nearby(self, latitude: float, longitude: float,
                      radius_m: float, max_results: int) -> List[Dict[str, Any]]:
        ...


@dataclass
class FetchResult:
    places: List[Dict[str, Any]] = field(default_factory=list)
    strategy: str = STRATEGY_SINGLE
    api_calls: int = 0


def validate_api_key(key: Optional[str]) -> Tuple[bool, Optional[str]]:
    """
    Returns:
        (valid, error message). No network call is made.
    """
    if not key:
        return False, "GOOGLE_PLACES_API_KEY is not set"
    if is_placeholder_key(key):
        return False, "GOOGLE_PLACES_API_KEY is a placeholder value"
    return True, None


def require_api_key(key: Optional[str]) -> str:
    valid, error = validate_api_key(key)
    if not valid:
        raise ConfigurationError(error)
    return key


class GooglePlacesClient:
    """
    HTTPS client for places:searchNearby.

    Every failure (timeout, connection error, non-2xx status, bad or
    wrong-shaped JSON) is raised as ProviderError so callers only handle
    one exception type.
    """

    def __init__(self, api_key: str, settings: Optional[Settings] = None,
                 session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.api_key = require_api_key(api_key)
        self.session = session or requests.Session()

    def search_nearby(self, latitude: float, longitude: float,
                      radius_m: float = SINGLE_RADIUS_M, max_results: Optional[int] = None) -> List[Dict[str, Any]]:
        body = {
            "includedTypes": INCLUDED_TYPES,
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": latitude, "longitude": longitude},
                    "radius": float(radius_m),
                },
            },
            "maxResultCount": max_results or self.settings.PLACES_MAX_RESULTS,
        }
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": FIELD_MASK,
        }

        try:
            response = self.session.post(
                self.settings.PLACES_API_URL,
                json=body,
                headers=headers,
                timeout=self.settings.PLACES_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise ProviderError(f"Google Places API request failed: {e}") from e

        if not response.ok:
            raise ProviderError(
                f"Google Places API error {response.status_code}: {response.text}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Google Places API returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProviderError(f"Google Places API returned an unexpected body: {type(data).__name__}")

        places = data.get("places")
        if places is None:
            return []
        if not isinstance(places, list):
            raise ProviderError(f"Google Places API returned non-list places: {type(places).__name__}")
        return places


def check_api_key(provider: PlacesProvider) -> Tuple[bool, Optional[str]]:
    """Live check: one single-result search near a fixed point."""
    try:
        provider.search_nearby(40.7128, -74.0060, 1_000, 1)
    except ProviderError as e:
        logger.warning("Places API key check failed: %s", e)
        return False, str(e)
    return True, None


def select_strategy(population: int, settings: Optional[Settings] = None) -> str:
    """
    Pick a fetch strategy from city population.

    Examples:
        >>> select_strategy(2_000_000)
        'grid'
        >>> select_strategy(600_000)
        'multi-radius'
        >>> select_strategy(100_000)
        'single'
    """
    settings = settings or get_settings()
    if population >= settings.GRID_POPULATION_THRESHOLD:
        return STRATEGY_GRID
    if population >= settings.MULTI_RADIUS_POPULATION_THRESHOLD:
        return STRATEGY_MULTI_RADIUS
    return STRATEGY_SINGLE


def _query_points(strategy: str, latitude: float, longitude: float) -> List[Tuple[float, float, float]]:
    if strategy == STRATEGY_GRID:
        return [(latitude + dlat, longitude + dlng, GRID_RADIUS_M) for dlat, dlng in GRID_OFFSETS]
    if strategy == STRATEGY_MULTI_RADIUS:
        return [(latitude, longitude, radius) for radius in MULTI_RADII_M]
    return [(latitude, longitude, SINGLE_RADIUS_M)]


def fetch_with_strategy(
    provider: PlacesProvider,
    latitude: float,
    longitude: float,
    population: int,
    strategy: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> FetchResult:
    """
    Run one or more nearby searches for a city, one at a time.

    Args:
        provider: Nearby-search implementation
        latitude, longitude: City centre
        population: Drives strategy selection when no override is given
        strategy: Explicit override ("grid", "multi-radius" or "single")

    Returns:
        FetchResult with places de-duplicated by id in first-seen order.

    Raises:
        ValueError: for an unknown strategy override
        ProviderError: propagated from the provider
    """
    settings = settings or get_settings()
    if strategy is None:
        strategy = select_strategy(population, settings)
    elif strategy not in STRATEGIES:
        raise ValueError(f"Unknown fetch strategy: {strategy}")

    result = FetchResult(strategy=strategy)
    seen = set()
    for lat, lng, radius in _query_points(strategy, latitude, longitude):
        places = provider.search_nearby(lat, lng, radius, settings.PLACES_MAX_RESULTS)
        result.api_calls += 1
        for place in places:
            if not isinstance(place, dict):
                logger.warning("Skipping non-object place entry: %r", place)
                continue
            place_id = place.get("id")
            if not place_id or place_id in seen:
                continue
            seen.add(place_id)
            result.places.append(place)

    logger.info(
        "Fetched %d unique places with %s strategy (%d calls)",
        len(result.places), strategy, result.api_calls,
    )
    return result
