from __future__ import annotations

import httpx
import pytest

from src.adapters.api.dependencies import get_itinerary_service
from src.app.services.itinerary_service import ItineraryService
from src.domain.exceptions import GraphFrozenError, InvalidBound
from src.domain.models import GtfsFeed
from src.main import app


class _FakeGtfsRepository:
    def __init__(self, feed: GtfsFeed) -> None:
        self._feed = feed

    def load_feed(self) -> GtfsFeed:
        return self._feed


@pytest.fixture
def client_app(builder):
    feed = (
        builder.stop("B")
        .stop("B1", parent="B")
        .route("R1", short_name="1")
        .trip("T1", "R1", [("A", "08:00:00"), ("B", "08:10:00")], short_name="101")
        .trip("T2", "R2", [("B1", "08:20:00"), ("C", "24:30:00")])
        .build()
    )
    service = ItineraryService(gtfs_repository=_FakeGtfsRepository(feed))
    app.dependency_overrides[get_itinerary_service] = lambda: service
    yield app
    app.dependency_overrides.clear()


async def _request(target, method: str, url: str, **kwargs) -> httpx.Response:
    transport = httpx.ASGITransport(app=target)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


@pytest.mark.unit
@pytest.mark.anyio
async def test_post_itineraries_returns_journeys(client_app) -> None:
    resp = await _request(
        client_app,
        "POST",
        "/itineraries",
        json={
            "from_stop_id": "A",
            "to_stop_id": "C",
            "depart_at": "2025-06-02T07:30:00",
            "min_transfer_duration_s": 300,
        },
    )

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["service_date"] == "2025-06-02"
    assert payload["departure_time"] == "07:30:00"
    assert payload["count"] == 1

    journey = payload["journeys"][0]
    assert journey["transfers"] == 1
    first, second = journey["legs"]
    assert first["route_short_name"] == "1"
    assert first["trip_short_name"] == "101"
    assert first["departure_time"] == "08:00:00"
    assert second["boarding_stop_id"] == "B1"
    assert second["route_short_name"] == "R2"
    # Times past midnight keep counting hours but roll the datetime over.
    assert second["arrival_time"] == "24:30:00"
    assert second["arrive_at"].startswith("2025-06-03T00:30:00")


@pytest.mark.unit
@pytest.mark.anyio
async def test_post_itineraries_after_last_departure_is_empty(client_app) -> None:
    resp = await _request(
        client_app,
        "POST",
        "/itineraries",
        json={"from_stop_id": "A", "to_stop_id": "C", "depart_at": "2025-06-02T09:00:00"},
    )

    assert resp.status_code == 200
    assert resp.json()["count"] == 0
    assert resp.json()["journeys"] == []


@pytest.mark.unit
@pytest.mark.anyio
async def test_post_itineraries_unknown_stop_is_404(client_app) -> None:
    resp = await _request(
        client_app,
        "POST",
        "/itineraries",
        json={"from_stop_id": "A", "to_stop_id": "ZZZ"},
    )

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Unknown stop: ZZZ"


@pytest.mark.unit
@pytest.mark.anyio
async def test_post_itineraries_validates_bounds(client_app) -> None:
    resp = await _request(
        client_app,
        "POST",
        "/itineraries",
        json={"from_stop_id": "A", "to_stop_id": "C", "max_transfers": -1},
    )

    assert resp.status_code == 422


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_stops_and_routes(client_app) -> None:
    stops = await _request(client_app, "GET", "/stops")
    routes = await _request(client_app, "GET", "/routes")

    assert stops.status_code == 200
    by_id = {s["stop_id"]: s for s in stops.json()}
    assert by_id["B1"]["parent_station"] == "B"
    assert by_id["A"]["lat"] is None

    assert routes.status_code == 200
    assert [r["route_id"] for r in routes.json()] == ["R1", "R2"]
    assert routes.json()[0]["short_name"] == "1"


@pytest.mark.unit
@pytest.mark.anyio
async def test_health() -> None:
    resp = await _request(app, "GET", "/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


class _FailingItineraryService:
    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    def find_itineraries(self, **kwargs):
        raise self._exc


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    "exc",
    [InvalidBound("max_paths must be >= 1, got 0"), GraphFrozenError("frozen")],
)
async def test_routing_errors_are_client_errors(exc: Exception) -> None:
    app.dependency_overrides[get_itinerary_service] = lambda: _FailingItineraryService(exc)
    try:
        resp = await _request(
            app,
            "POST",
            "/itineraries",
            json={"from_stop_id": "A", "to_stop_id": "C"},
        )
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 400
    assert resp.json() == {"detail": str(exc)}


@pytest.mark.unit
def test_env_overrides_below_minimum_are_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ITINERARY_MAX_PATHS", "0")
    monkeypatch.setenv("ITINERARY_MAX_TRANSFERS", "-2")
    monkeypatch.setenv("ITINERARY_JOURNEYS_COUNT", "3")
    monkeypatch.setenv("ITINERARY_GRAPH_CACHE_SIZE", "0")
    get_itinerary_service.cache_clear()
    try:
        service = get_itinerary_service()
    finally:
        get_itinerary_service.cache_clear()

    assert service.max_paths == 1
    assert service.max_transfers == 0
    assert service.journeys_count == 3
    assert service.max_cached_graphs == 1
