"""
Integration tests for the refresh API router.
"""
import json
from datetime import timedelta

import pytest

from afterhours.core.config import Settings, get_settings
from afterhours.core.errors import ProviderError
from afterhours.main import app
from afterhours.routers.refresh import get_orchestrator_factory
from tests.conftest import NOW, make_place, period


def parse_sse(body: str):
    """[(event name, data dict)] from a text/event-stream body."""
    events = []
    for frame in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in frame.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


@pytest.fixture
def places(provider):
    provider.places = [
        make_place("p1", "Abbott DUI Defense", [
            {"secondaryHoursType": "CONSULTATION", "periods": [period(1, 17, 1, 20)]},
        ]),
        make_place("p2", "Chen Law"),
    ]
    return provider.places


@pytest.fixture
def no_key_orchestrator(client, make_orchestrator):
    """Route orchestrators through settings without an API key."""
    settings = Settings(DATABASE_URL="sqlite://", GOOGLE_PLACES_API_KEY=None)
    app.dependency_overrides[get_orchestrator_factory] = (
        lambda: lambda session: make_orchestrator(session, settings=settings)
    )


class TestRefreshCityRouter:
    """Tests for POST/GET /api/refresh/{city_slug}."""

    def test_refresh_city(self, client, places):
        response = client.post("/api/refresh/san-diego-ca?strategy=single")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "complete"
        assert data["cached"] is False
        assert data["created"] == 2
        assert data["api_calls"] == 1
        assert data["strategy"] == "single"

    def test_second_refresh_is_cached(self, client, places, make_orchestrator, db):
        make_orchestrator(db, clock=lambda: NOW - timedelta(hours=1)).refresh_city("san-diego-ca", strategy="single")

        response = client.post("/api/refresh/san-diego-ca")

        data = response.json()
        assert data["cached"] is True
        assert data["message"] == "Recently fetched 1.0h ago"
        assert data["existing_count"] == 2

    def test_unknown_city_is_404(self, client):
        response = client.post("/api/refresh/atlantis-xx")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "CITY_NOT_FOUND"

    def test_invalid_strategy_is_422(self, client):
        response = client.post("/api/refresh/san-diego-ca?strategy=spiral")

        assert response.status_code == 422

    def test_missing_key_is_500(self, client, no_key_orchestrator, provider):
        response = client.post("/api/refresh/san-diego-ca")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "INVALID_API_KEY"
        assert provider.calls == []

    def test_provider_failure_is_502(self, client, provider):
        provider.error = ProviderError("Google Places API error 500: backend error", status_code=500)

        response = client.post("/api/refresh/san-diego-ca?strategy=single")

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail["code"] == "API_ERROR"
        assert "backend error" in detail["error"]

    def test_city_status(self, client, places):
        client.post("/api/refresh/san-diego-ca?strategy=single")

        response = client.get("/api/refresh/san-diego-ca")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "fresh"
        assert data["total_businesses"] == 2
        assert data["businesses_with_hours"] == 1
        assert data["last_refresh"] == "2024-01-08T12:00:00Z"

    def test_city_status_unknown(self, client):
        assert client.get("/api/refresh/atlantis-xx").status_code == 404


class TestBulkRouter:
    """Tests for /api/refresh/bulk and /api/refresh/status."""

    def test_post_bulk(self, client, places, sleeps):
        response = client.post("/api/refresh/bulk", json={"citySlugs": ["san-diego-ca", "austin-tx"]})

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total_cities"] == 2
        assert data["summary"]["cities_complete"] == 2
        # Same places returned for both cities: created once, then moved
        assert data["summary"]["total_created"] == 2
        assert data["summary"]["total_updated"] == 2
        assert [r["slug"] for r in data["results"]] == ["san-diego-ca", "austin-tx"]
        assert sleeps == [0.2]

    def test_post_bulk_unknown_city(self, client):
        response = client.post("/api/refresh/bulk", json={"citySlugs": ["atlantis-xx"]})

        assert response.status_code == 404

    def test_stream_bulk(self, client, places):
        response = client.get("/api/refresh/bulk?limit=2")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")

        events = parse_sse(response.text)
        assert [name for name, _ in events] == [
            "start",
            "city_start", "city_complete",
            "city_start", "city_complete",
            "complete",
        ]
        assert events[0][1]["totalCities"] == 2
        assert events[1][1]["city"] == "New York, NY"
        assert events[-1][1]["citiesComplete"] == 2

    def test_stream_bulk_offset(self, client, places):
        response = client.get("/api/refresh/bulk?limit=1&offset=7")

        events = parse_sse(response.text)
        assert events[1][1]["slug"] == "san-diego-ca"

    def test_stream_bulk_provider_error(self, client, places, provider):
        provider.error = ProviderError("Google Places API error 429: quota", status_code=429)

        events = parse_sse(client.get("/api/refresh/bulk?limit=1").text)

        assert [name for name, _ in events] == ["start", "city_start", "city_error", "complete"]
        assert "429" in events[2][1]["error"]
        assert events[-1][1]["citiesError"] == 1

    def test_stream_bulk_missing_key(self, client, no_key_orchestrator):
        response = client.get("/api/refresh/bulk")

        assert response.status_code == 500
        assert response.json()["detail"]["code"] == "INVALID_API_KEY"

    def test_all_status(self, client, places):
        client.post("/api/refresh/san-diego-ca?strategy=single")

        response = client.get("/api/refresh/status")

        assert response.status_code == 200
        data = response.json()
        assert data["api_key_configured"] is True
        assert data["summary"]["cities_fetched"] == 1
        san_diego = next(c for c in data["cities"] if c["slug"] == "san-diego-ca")
        assert san_diego["total_businesses"] == 2


class TestKeyStatusRouter:

    def test_unconfigured_key(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(
            DATABASE_URL="sqlite://", GOOGLE_PLACES_API_KEY="your-api-key",
        )

        response = client.get("/api/refresh/key-status")

        assert response.status_code == 200
        data = response.json()
        assert data["configured"] is False
        assert data["valid"] is False
        assert "placeholder" in data["error"]
