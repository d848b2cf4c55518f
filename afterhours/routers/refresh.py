"""
Refresh router: pull listings from the place-data provider.

Provides endpoints for:
- Refreshing one city (with staleness skip, force and strategy override)
- Bulk refresh, as a JSON batch or a Server-Sent Events progress stream
- Refresh status per city and for all cities
- API key status
"""
import logging
import threading
from typing import Callable, Literal, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session, sessionmaker

from afterhours.core.config import Settings, get_settings
from afterhours.core.errors import DirectoryError, error_to_http
from afterhours.data.cities import CITIES
from afterhours.db.session import get_db, get_session_factory
from afterhours.schemas.refresh import (
    AllStatusResponse,
    BulkRefreshRequest,
    BulkRefreshResponse,
    CityRefreshResponse,
    CityStatusResponse,
    KeyStatusResponse,
)
from afterhours.services.places_client import GooglePlacesClient, check_api_key, validate_api_key
from afterhours.services.progress import CancellationToken, ProgressChannel
from afterhours.services.refresh import RefreshOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/refresh", tags=["refresh"])

Strategy = Literal["grid", "multi-radius", "single"]


def get_orchestrator_factory() -> Callable[[Session], RefreshOrchestrator]:
    """Builds an orchestrator around a session."""
    return RefreshOrchestrator


def get_refresh_orchestrator(
    db: Session = Depends(get_db),
    build: Callable[[Session], RefreshOrchestrator] = Depends(get_orchestrator_factory),
) -> RefreshOrchestrator:
    return build(db)


# ============ Status ============

@router.get("/status", response_model=AllStatusResponse)
def refresh_status(orchestrator: RefreshOrchestrator = Depends(get_refresh_orchestrator)):
    """Freshness of every city in the reference table plus a summary."""
    return orchestrator.all_status()


@router.get("/key-status", response_model=KeyStatusResponse)
def key_status(settings: Settings = Depends(get_settings)):
    """
    Check the Places API key: configured at all, then a live test call.
    """
    key = settings.GOOGLE_PLACES_API_KEY
    configured, error = validate_api_key(key)
    if not configured:
        return KeyStatusResponse(configured=False, valid=False, error=error)

    valid, error = check_api_key(GooglePlacesClient(key, settings=settings))
    return KeyStatusResponse(configured=True, valid=valid, error=error, key_prefix=key[:8] + "...")


# ============ Bulk ============

@router.get("/bulk")
def stream_bulk_refresh(
    force: bool = False,
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    build: Callable[[Session], RefreshOrchestrator] = Depends(get_orchestrator_factory),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Refresh a slice of the city table, streaming progress as Server-Sent
    Events (start, city_start, city_complete / city_skip / city_error,
    complete).

    The refresh runs in a worker thread with its own session. Closing the
    connection cancels the run before the next city.
    """
    db = session_factory()
    orchestrator = build(db)
    try:
        orchestrator.require_api_key()
    except DirectoryError as e:
        db.close()
        raise error_to_http(e)

    end = offset + limit if limit is not None else None
    cities = list(CITIES)[offset:end]
    channel = ProgressChannel()
    cancel = CancellationToken()

    def run():
        try:
            orchestrator.stream_bulk(channel, force=force, cancel=cancel, cities=cities)
        except Exception:
            logger.exception("Bulk refresh stream failed")
        finally:
            db.close()

    worker = threading.Thread(target=run, name="bulk-refresh", daemon=True)

    def event_stream():
        worker.start()
        try:
            for event in channel.drain():
                yield event.to_sse()
        finally:
            # No-op when the run finished; stops it when the client went away
            cancel.cancel()

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.post("/bulk", response_model=BulkRefreshResponse)
def bulk_refresh(
    request: Optional[BulkRefreshRequest] = None,
    orchestrator: RefreshOrchestrator = Depends(get_refresh_orchestrator),
):
    """Refresh the given cities (default: all) and return per-city results."""
    request = request or BulkRefreshRequest()
    try:
        outcome = orchestrator.run_bulk(request.city_slugs, force=request.force)
    except DirectoryError as e:
        raise error_to_http(e)

    return {
        "summary": outcome["summary"],
        "results": [r.to_dict() for r in outcome["results"]],
    }


# ============ Single city ============

@router.post("/{city_slug}", response_model=CityRefreshResponse)
def refresh_city(
    city_slug: str,
    force: bool = False,
    strategy: Optional[Strategy] = None,
    orchestrator: RefreshOrchestrator = Depends(get_refresh_orchestrator),
):
    """
    Refresh one city.

    Skips the provider when the city was refreshed within the staleness
    window, unless force=true.
    """
    try:
        result = orchestrator.refresh_city(city_slug, force=force, strategy=strategy)
    except DirectoryError as e:
        raise error_to_http(e)
    return result.to_dict()


@router.get("/{city_slug}", response_model=CityStatusResponse)
def city_refresh_status(
    city_slug: str,
    orchestrator: RefreshOrchestrator = Depends(get_refresh_orchestrator),
):
    try:
        return orchestrator.city_status(city_slug)
    except DirectoryError as e:
        raise error_to_http(e)
