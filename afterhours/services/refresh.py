"""
City refresh orchestration: staleness check, provider fetch, parse and
upsert, for one city or a sequential bulk run with progress events.
"""
import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from afterhours.core.clock import hours_between, utcnow
from afterhours.core.config import Settings, get_settings
from afterhours.core.errors import CityNotFoundError, ProviderError, describe_error
from afterhours.data.cities import CITIES, CityData, get_city_by_slug
from afterhours.services.place_parser import ParsedBusiness, parse_place
from afterhours.services.places_client import (
    GooglePlacesClient,
    PlacesProvider,
    fetch_with_strategy,
    require_api_key,
    validate_api_key,
)
from afterhours.services.practice_areas import PracticeAreaClassifier
from afterhours.services.progress import CancellationToken, ProgressChannel
from afterhours.services.repository import BusinessRepository

logger = logging.getLogger(__name__)


class RefreshState(str, Enum):
    NOT_STARTED = "not_started"
    CHECKING_STALENESS = "checking_staleness"
    SKIPPED = "skipped"
    FETCHING = "fetching"
    PARSING = "parsing"
    UPSERTING = "upserting"
    COMPLETE = "complete"
    ERROR = "error"


FRESHNESS_NEVER_FETCHED = "never_fetched"
FRESHNESS_FRESH = "fresh"
FRESHNESS_STALE = "stale"
FRESHNESS_VERY_STALE = "very_stale"


class CityRefreshResult:
    """Outcome of one city refresh."""

    def __init__(self, city: CityData):
        self.city = city.label
        self.slug = city.slug
        self.state = RefreshState.NOT_STARTED
        self.transitions: List[RefreshState] = [RefreshState.NOT_STARTED]
        self.strategy: Optional[str] = None
        self.api_calls = 0
        self.total_from_api = 0
        self.created = 0
        self.updated = 0
        self.skipped = 0
        self.errors: List[str] = []
        self.existing_count: Optional[int] = None
        self.hours_since_refresh: Optional[float] = None
        self.error: Optional[str] = None
        self.exception: Optional[ProviderError] = None
        self.duration_ms = 0

    def transition(self, state: RefreshState) -> None:
        logger.info("Refresh %s: %s -> %s", self.slug, self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    @property
    def cached(self) -> bool:
        return self.state == RefreshState.SKIPPED

    @property
    def status(self) -> str:
        """"error" for failed cities; skipped cities count as complete."""
        return "error" if self.state == RefreshState.ERROR else "complete"

    @property
    def skip_reason(self) -> Optional[str]:
        if not self.cached:
            return None
        return f"Recently fetched {self.hours_since_refresh:.1f}h ago"

    def to_dict(self) -> Dict:
        """Convert to dictionary for API response."""
        return {
            "city": self.city,
            "slug": self.slug,
            "status": self.status,
            "state": self.state.value,
            "cached": self.cached,
            "strategy": self.strategy,
            "api_calls": self.api_calls,
            "total_from_api": self.total_from_api,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
            "existing_count": self.existing_count,
            "hours_since_refresh": self.hours_since_refresh,
            "message": self.skip_reason,
            "error": self.error,
            "duration_ms": self.duration_ms,
        }


def summarize(results: Sequence[CityRefreshResult]) -> Dict[str, int]:
    return {
        "total_cities": len(results),
        "cities_complete": sum(1 for r in results if r.status == "complete"),
        "cities_error": sum(1 for r in results if r.status == "error"),
        "total_from_api": sum(r.total_from_api for r in results),
        "total_created": sum(r.created for r in results),
        "total_updated": sum(r.updated for r in results),
        "total_skipped": sum(r.skipped for r in results),
    }


def _iso(dt) -> Optional[str]:
    return dt.isoformat() + "Z" if dt is not None else None


class RefreshOrchestrator:
    """
    Refreshes city listings from the place-data provider.

    Cities are processed one at a time, and within a city provider calls
    and upserts are issued sequentially.
    """

    def __init__(
        self,
        db: Session,
        provider: Optional[PlacesProvider] = None,
        settings: Optional[Settings] = None,
        classifier: Optional[PracticeAreaClassifier] = None,
        clock: Callable = utcnow,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            db: SQLAlchemy database session
            provider: Nearby-search implementation; a GooglePlacesClient is
                      built from settings when omitted
            clock: Returns naive UTC "now" for staleness and timestamps
            sleep: Pause between bulk cities
        """
        self.db = db
        self.settings = settings or get_settings()
        self.repository = BusinessRepository(db)
        self.classifier = classifier or PracticeAreaClassifier()
        self.clock = clock
        self.sleep = sleep
        self._provider = provider

    @property
    def provider(self) -> PlacesProvider:
        if self._provider is None:
            self._provider = GooglePlacesClient(self.settings.GOOGLE_PLACES_API_KEY, settings=self.settings)
        return self._provider

    def require_api_key(self) -> str:
        """Raises ConfigurationError for a missing or placeholder key."""
        return require_api_key(self.settings.GOOGLE_PLACES_API_KEY)

    def resolve_cities(self, slugs: Optional[Sequence[str]] = None) -> List[CityData]:
        if slugs is None:
            return list(CITIES)
        cities = []
        for slug in slugs:
            city = get_city_by_slug(slug)
            if city is None:
                raise CityNotFoundError(slug)
            cities.append(city)
        return cities

    # ----- single city -----

    def refresh_city(self, slug: str, force: bool = False, strategy: Optional[str] = None) -> CityRefreshResult:
        """
        Refresh one city.

        Raises:
            ConfigurationError: API key missing or a placeholder
            CityNotFoundError: slug not in the city table
            ProviderError: the provider call failed
        """
        self.require_api_key()
        city = get_city_by_slug(slug)
        if city is None:
            raise CityNotFoundError(slug)

        result = self._refresh(city, force=force, strategy=strategy)
        if result.exception is not None:
            raise result.exception
        return result

    def _refresh(self, city_data: CityData, force: bool, strategy: Optional[str] = None) -> CityRefreshResult:
        started = time.monotonic()
        result = CityRefreshResult(city_data)

        try:
            result.transition(RefreshState.CHECKING_STALENESS)
            city = self.repository.ensure_city(city_data)

            if not force:
                latest = self.repository.latest_refresh(city.id)
                if latest is not None:
                    hours = hours_between(latest, self.clock())
                    if hours < self.settings.STALENESS_HOURS:
                        result.hours_since_refresh = round(hours, 1)
                        result.existing_count = self.repository.count_businesses(city.id)
                        result.transition(RefreshState.SKIPPED)
                        return result

            result.transition(RefreshState.FETCHING)
            fetched = fetch_with_strategy(
                self.provider,
                city_data.latitude,
                city_data.longitude,
                city_data.population,
                strategy=strategy,
                settings=self.settings,
            )
            result.strategy = fetched.strategy
            result.api_calls = fetched.api_calls
            result.total_from_api = len(fetched.places)

            result.transition(RefreshState.PARSING)
            parsed = self._parse_all(fetched.places, result)

            result.transition(RefreshState.UPSERTING)
            self._upsert_all(city, parsed, result)

            result.transition(RefreshState.COMPLETE)
        except ProviderError as e:
            result.exception = e
            result.error = describe_error(e)
            result.transition(RefreshState.ERROR)
            logger.error("Refresh failed for %s: %s", city_data.slug, result.error)
        finally:
            result.duration_ms = int((time.monotonic() - started) * 1000)

        return result

    def _parse_all(self, places: List[dict], result: CityRefreshResult) -> List[ParsedBusiness]:
        parsed = []
        for place in places:
            try:
                parsed.append(parse_place(
                    place,
                    self.classifier,
                    use_regular_fallback=self.settings.REGULAR_HOURS_FALLBACK,
                ))
            except (TypeError, ValueError, AttributeError) as e:
                name = ((place.get("displayName") or {}).get("text") if isinstance(place, dict) else None) or "Unknown Office"
                logger.warning("Skipping unparseable place %s: %s", name, e)
                result.errors.append(f"{name}: {describe_error(e)}")
                result.skipped += 1
        return parsed

    def _upsert_all(self, city, parsed: List[ParsedBusiness], result: CityRefreshResult) -> None:
        refreshed_at = self.clock()
        for record in parsed:
            try:
                if self.repository.upsert(city, record, refreshed_at=refreshed_at):
                    result.created += 1
                else:
                    result.updated += 1
            except Exception as e:
                # One bad record must not abort the rest of the city
                self.repository.rollback()
                logger.warning("Error processing place %s: %s", record.source_id, e)
                result.errors.append(f"{record.display_name}: {describe_error(e)}")
                result.skipped += 1

    # ----- bulk -----

    def run_bulk(self, slugs: Optional[Sequence[str]] = None, force: bool = False) -> Dict:
        """
        Refresh several cities and return {"summary": ..., "results": [...]}.

        A provider failure is recorded on that city's result and the run
        moves on to the next city.
        """
        self.require_api_key()
        cities = self.resolve_cities(slugs)

        results = []
        for i, city in enumerate(cities):
            results.append(self._refresh(city, force=force))
            if i < len(cities) - 1:
                self.sleep(self.settings.BULK_CITY_DELAY_SECONDS)

        return {"summary": summarize(results), "results": results}

    def stream_bulk(
        self,
        channel: ProgressChannel,
        slugs: Optional[Sequence[str]] = None,
        force: bool = False,
        cancel: Optional[CancellationToken] = None,
        cities: Optional[Sequence[CityData]] = None,
    ) -> None:
        """
        Refresh cities sequentially, emitting progress events to ``channel``.

        Events: start, then per city city_start followed by one of
        city_complete / city_skip / city_error, then complete. When
        ``cancel`` is set the run stops before the next city without
        emitting anything further. The channel is closed on return.
        """
        try:
            self.require_api_key()
            if cities is None:
                cities = self.resolve_cities(slugs)
            self._stream(channel, list(cities), force, cancel)
        finally:
            channel.close()

    def _stream(self, channel: ProgressChannel, cities: List[CityData], force: bool,
                cancel: Optional[CancellationToken]) -> None:
        total = len(cities)
        channel.emit("start", {
            "totalCities": total,
            "force": force,
            "startedAt": _iso(self.clock()),
        })

        results: List[CityRefreshResult] = []
        for i, city in enumerate(cities):
            if cancel is not None and cancel.cancelled:
                logger.info("Bulk refresh cancelled after %d of %d cities", i, total)
                return

            index = i + 1
            channel.emit("city_start", {"index": index, "total": total, "city": city.label, "slug": city.slug})

            result = self._refresh(city, force=force)
            results.append(result)

            if result.state == RefreshState.SKIPPED:
                channel.emit("city_skip", {
                    "index": index,
                    "city": result.city,
                    "reason": result.skip_reason,
                    "existingCount": result.existing_count,
                })
            elif result.state == RefreshState.ERROR:
                channel.emit("city_error", {
                    "index": index,
                    "city": result.city,
                    "error": result.error,
                    "durationMs": result.duration_ms,
                })
            else:
                channel.emit("city_complete", {
                    "index": index,
                    "city": result.city,
                    "totalFromApi": result.total_from_api,
                    "created": result.created,
                    "updated": result.updated,
                    "skipped": result.skipped,
                    "durationMs": result.duration_ms,
                    "strategy": result.strategy,
                    "apiCalls": result.api_calls,
                })

            if index < total:
                self.sleep(self.settings.BULK_CITY_DELAY_SECONDS)

        summary = {to_camel(key): value for key, value in summarize(results).items()}
        summary["completedAt"] = _iso(self.clock())
        channel.emit("complete", summary)

    # ----- status -----

    def _freshness(self, hours: Optional[float]) -> str:
        if hours is None:
            return FRESHNESS_NEVER_FETCHED
        if hours < self.settings.STALENESS_HOURS:
            return FRESHNESS_FRESH
        if hours < self.settings.STATUS_VERY_STALE_HOURS:
            return FRESHNESS_STALE
        return FRESHNESS_VERY_STALE

    def _status_entry(self, city: CityData, count: int, with_hours: int, latest) -> Dict:
        hours = round(hours_between(latest, self.clock()), 1) if latest is not None else None
        return {
            "city": city.label,
            "name": city.name,
            "state_code": city.state_code,
            "slug": city.slug,
            "population": city.population,
            "total_businesses": count,
            "businesses_with_hours": with_hours,
            "last_refresh": _iso(latest),
            "hours_since_refresh": hours,
            "status": self._freshness(hours),
            "needs_fetch": hours is None or hours > self.settings.STATUS_VERY_STALE_HOURS,
        }

    def city_status(self, slug: str) -> Dict:
        """Freshness and counts for one city. Raises CityNotFoundError."""
        city_data = get_city_by_slug(slug)
        if city_data is None:
            raise CityNotFoundError(slug)

        city = self.repository.get_city(slug)
        if city is None:
            return self._status_entry(city_data, 0, 0, None)
        return self._status_entry(
            city_data,
            self.repository.count_businesses(city.id),
            self.repository.count_with_hours(city.id),
            self.repository.latest_refresh(city.id),
        )

    def all_status(self) -> Dict:
        """Status for every reference city plus a summary."""
        counts = self.repository.city_counts()
        counts_by_slug = {
            city.slug: counts[city.id]
            for city in self.repository.all_cities()
            if city.id in counts
        }

        cities = [
            self._status_entry(c, *counts_by_slug.get(c.slug, (0, 0, None)))
            for c in CITIES
        ]
        valid, _ = validate_api_key(self.settings.GOOGLE_PLACES_API_KEY)

        return {
            "api_key_configured": valid,
            "summary": {
                "total_cities": len(cities),
                "cities_fetched": sum(1 for c in cities if c["total_businesses"] > 0),
                "cities_never_fetched": sum(1 for c in cities if c["status"] == FRESHNESS_NEVER_FETCHED),
                "cities_fresh": sum(1 for c in cities if c["status"] == FRESHNESS_FRESH),
                "cities_stale": sum(1 for c in cities if c["status"] in (FRESHNESS_STALE, FRESHNESS_VERY_STALE)),
                "total_businesses": sum(c["total_businesses"] for c in cities),
                "businesses_with_hours": sum(c["businesses_with_hours"] for c in cities),
            },
            "cities": cities,
        }
