"""
Test configuration and fixtures.
"""
import os
import pytest
from datetime import datetime
from typing import Generator, List, Optional
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set test database URL before importing app
os.environ["DATABASE_URL"] = "sqlite://"

from afterhours.main import app
from afterhours.core.config import Settings
from afterhours.db.base import Base
from afterhours.db.session import get_db, get_session_factory
from afterhours.routers.refresh import get_orchestrator_factory
from afterhours.services.refresh import RefreshOrchestrator
import afterhours.models  # noqa: F401


# In-memory SQLite shared across threads (the SSE endpoint refreshes in a worker thread)
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Fixed reference instant for refresh staleness: Monday 2024-01-08 12:00 UTC
NOW = datetime(2024, 1, 8, 12, 0)


class FakePlacesProvider:
    """Records nearby-search calls and returns canned places."""

    def __init__(self, places: Optional[List[dict]] = None, error: Optional[Exception] = None,
                 fail_latitudes: Optional[set] = None):
        self.places = places or []
        self.error = error
        self.fail_latitudes = fail_latitudes or set()
        self.calls = []

    def search_nearby(self, latitude, longitude, radius_m, max_results):
        self.calls.append((latitude, longitude, radius_m, max_results))
        if self.error is not None and (not self.fail_latitudes or latitude in self.fail_latitudes):
            raise self.error
        return [dict(p) if isinstance(p, dict) else p for p in self.places]


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", bad_json=False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.text = text
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value")
        return self._payload


class FakeSession:
    """Stands in for requests.Session; records every post."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def make_place(place_id: str, name: str, secondary_hours=None, **extra) -> dict:
    """Raw provider record in the shape places:searchNearby returns."""
    place = {
        "id": place_id,
        "displayName": {"text": name, "languageCode": "en"},
        "formattedAddress": "123 Main St, San Diego, CA 92101, USA",
        "location": {"latitude": 32.7157, "longitude": -117.1611},
        "primaryType": "lawyer",
        "primaryTypeDisplayName": {"text": "Lawyer"},
    }
    if secondary_hours is not None:
        place["regularSecondaryOpeningHours"] = secondary_hours
    place.update(extra)
    return place


def period(open_day, open_hour, close_day, close_hour, open_minute=0, close_minute=0) -> dict:
    return {
        "open": {"day": open_day, "hour": open_hour, "minute": open_minute},
        "close": {"day": close_day, "hour": close_hour, "minute": close_minute},
    }


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a database session for the test on a fresh schema."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        GOOGLE_PLACES_API_KEY="AIzaSyTestKey0123456789",
        BULK_CITY_DELAY_SECONDS=0.2,
    )


@pytest.fixture
def provider() -> FakePlacesProvider:
    return FakePlacesProvider()


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def make_orchestrator(test_settings, provider, sleeps):
    """Factory for orchestrators wired to the fake provider and a fixed clock."""
    def build(session: Session, **overrides) -> RefreshOrchestrator:
        options = {
            "provider": provider,
            "settings": test_settings,
            "clock": lambda: NOW,
            "sleep": sleeps.append,
        }
        options.update(overrides)
        return RefreshOrchestrator(session, **options)
    return build


@pytest.fixture(scope="function")
def client(db: Session, make_orchestrator) -> Generator[TestClient, None, None]:
    """Create test client with database session and provider overrides."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    app.dependency_overrides[get_orchestrator_factory] = lambda: make_orchestrator

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
