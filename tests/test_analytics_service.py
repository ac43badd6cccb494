"""Unit tests for the analytics engine (orchestration, trends, failure handling)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import datetime
from parking_analytics.exceptions import AnalyticsUnavailable, InvalidPeriod
from parking_analytics.services.analytics_service import (
    NO_PEAK_LABEL, AnalyticsEngine, PeakHour, TimelinePoint, compute_analytics,
)
from parking_analytics.services.intervals import ParkingSession
from parking_analytics.services.session_store import FixedClock, InMemorySessionStore, StaticSlotRegistry


def at(hour, minute=0, day=20):
    return datetime(2026, 2, day, hour, minute)


def make_engine(sessions=(), capacity=6, now=None):
    return AnalyticsEngine(InMemorySessionStore(sessions), StaticSlotRegistry(capacity),
                           clock=FixedClock(now) if now else None)


SCENARIO = [
    ParkingSession(1, at(8), at(9, 30), "ABC-1234"),
    ParkingSession(2, at(8, 45)),
]


class TestComputeAnalytics:
    @pytest.mark.asyncio
    async def test_two_slot_scenario(self):
        result = await make_engine(SCENARIO).compute_analytics("day", at(9))

        assert result.occupancy_rate_percent == 33
        assert result.avg_duration_minutes == 90
        assert result.total_vehicles == 2
        assert result.capacity == 6
        assert result.peak_hour_label == "8:00 AM"
        assert result.peak_hour_vehicles == 2

    @pytest.mark.asyncio
    async def test_timeline_stops_at_now(self):
        result = await make_engine(SCENARIO).compute_analytics("day", at(9))

        assert len(result.timeline) == 9
        assert result.timeline[0] == TimelinePoint("12:00 AM", 0)
        assert result.timeline[7] == TimelinePoint("7:00 AM", 17)
        assert result.timeline[8] == TimelinePoint("8:00 AM", 33)

    @pytest.mark.asyncio
    async def test_supplementary_rankings(self):
        result = await make_engine(SCENARIO).compute_analytics("day", at(9))

        assert result.peak_hours == (PeakHour("8:00 AM", 2), PeakHour("7:00 AM", 1))
        assert len(result.longest_sessions) == 1
        assert result.longest_sessions[0].license_plate == "ABC-1234"

    @pytest.mark.asyncio
    async def test_trends_against_yesterday(self):
        yesterday = [ParkingSession(i, at(8, day=19), at(10, day=19)) for i in range(1, 5)]
        result = await make_engine(SCENARIO + yesterday, capacity=4).compute_analytics("day", at(9))

        assert result.vehicles_trend_percent == -50        # 2 vs 4 entries
        assert result.duration_trend_percent == -25        # 90 vs 120 min
        assert result.occupancy_trend_percent == -50       # 50% vs 100% at 09:00

    @pytest.mark.asyncio
    async def test_empty_lot_reports_no_peak(self):
        result = await make_engine().compute_analytics("week", at(9))

        assert result.total_vehicles == 0
        assert result.avg_duration_minutes == 0
        assert result.occupancy_rate_percent == 0
        assert result.peak_hour_label == NO_PEAK_LABEL
        assert result.peak_hour_vehicles == 0
        assert result.vehicles_trend_percent == 0
        assert len(result.timeline) == 24

    @pytest.mark.asyncio
    async def test_malformed_session_does_not_fail_request(self):
        sessions = SCENARIO + [ParkingSession(3, at(10), at(9))]
        result = await make_engine(sessions).compute_analytics("day", at(12))
        assert result.total_vehicles == 2

    @pytest.mark.asyncio
    async def test_same_inputs_same_result(self):
        engine = make_engine(SCENARIO)
        first = await engine.compute_analytics("month", at(9))
        second = await engine.compute_analytics("month", at(9))
        assert first == second

    @pytest.mark.asyncio
    async def test_now_comes_from_clock_when_omitted(self):
        result = await make_engine(SCENARIO, now=at(9)).compute_analytics("day")
        assert result.window.end == at(9)

    @pytest.mark.asyncio
    async def test_functional_entry_point(self):
        result = await compute_analytics("day", at(9), InMemorySessionStore(SCENARIO), StaticSlotRegistry(6))
        assert result.total_vehicles == 2


class TestFailures:
    @pytest.mark.asyncio
    async def test_invalid_period_raised_before_fetch(self):
        store = MagicMock()
        store.fetch_sessions = AsyncMock(return_value=[])
        engine = AnalyticsEngine(store, StaticSlotRegistry(6))

        with pytest.raises(InvalidPeriod):
            await engine.compute_analytics("year", at(9))
        store.fetch_sessions.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_is_unavailable(self):
        store = MagicMock()
        store.fetch_sessions = AsyncMock(side_effect=ConnectionError("db down"))
        engine = AnalyticsEngine(store, StaticSlotRegistry(6))

        with pytest.raises(AnalyticsUnavailable) as exc_info:
            await engine.compute_analytics("day", at(9))
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_registry_failure_is_unavailable(self):
        registry = MagicMock()
        registry.total_capacity.side_effect = RuntimeError("registry down")
        engine = AnalyticsEngine(InMemorySessionStore(SCENARIO), registry)

        with pytest.raises(AnalyticsUnavailable):
            await engine.compute_analytics("day", at(9))

    @pytest.mark.asyncio
    async def test_cancelled_fetch_is_unavailable(self):
        store = MagicMock()
        store.fetch_sessions = AsyncMock(side_effect=asyncio.CancelledError())
        engine = AnalyticsEngine(store, StaticSlotRegistry(6))

        with pytest.raises(AnalyticsUnavailable):
            await engine.compute_analytics("day", at(9))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("capacity", [0, -3, None, True])
    async def test_invalid_capacity_is_unavailable(self, capacity):
        with pytest.raises(AnalyticsUnavailable):
            await make_engine(SCENARIO, capacity=capacity).compute_analytics("day", at(9))
