"""API tests for GET /api/v1/analytics/{period}."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime
from fastapi.testclient import TestClient
from parking_analytics.main import app
from parking_analytics.routers.analytics import get_analytics_engine
from parking_analytics.services.analytics_service import AnalyticsEngine
from parking_analytics.services.intervals import ParkingSession
from parking_analytics.services.session_store import FixedClock, InMemorySessionStore, StaticSlotRegistry

NOW = datetime(2026, 2, 20, 9, 0)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def use_engine(store, capacity=6):
    engine = AnalyticsEngine(store, StaticSlotRegistry(capacity), clock=FixedClock(NOW))
    app.dependency_overrides[get_analytics_engine] = lambda: engine


class TestAnalyticsEndpoint:
    def test_returns_kpis(self, client):
        use_engine(InMemorySessionStore([
            ParkingSession(1, datetime(2026, 2, 20, 8, 0), datetime(2026, 2, 20, 9, 30), "ABC-1234"),
            ParkingSession(2, datetime(2026, 2, 20, 8, 45)),
        ]))

        resp = client.get("/api/v1/analytics/day")

        assert resp.status_code == 200
        body = resp.json()
        assert body["total_vehicles"] == 2
        assert body["occupancy_rate_percent"] == 33
        assert body["avg_duration_minutes"] == 90
        assert body["peak_hour_label"] == "8:00 AM"
        assert body["timeline"][-1] == {"label": "8:00 AM", "occupancy_percent": 33}
        assert body["longest_sessions"][0]["license_plate"] == "ABC-1234"

    def test_unknown_period_is_400(self, client):
        use_engine(InMemorySessionStore())
        resp = client.get("/api/v1/analytics/year")
        assert resp.status_code == 400
        assert "year" in resp.json()["detail"]

    def test_store_failure_is_503(self, client):
        store = MagicMock()
        store.fetch_sessions = AsyncMock(side_effect=ConnectionError("db down"))
        use_engine(store)

        resp = client.get("/api/v1/analytics/week")
        assert resp.status_code == 503

    def test_empty_lot_shows_placeholder_peak(self, client):
        use_engine(InMemorySessionStore())
        body = client.get("/api/v1/analytics/month").json()
        assert body["peak_hour_label"] == "--:--"
        assert body["total_vehicles"] == 0
