"""
Occupancy analytics engine — the public entry point.

compute_analytics(period, now):
  1. resolve current/previous windows
  2. fetch sessions for both windows concurrently (+ slot capacity)
  3. normalize, dropping malformed sessions
  4. bucketize and aggregate each window independently
  5. diff the two aggregates into trends
  6. assemble one immutable AnalyticsResult

Any Session Store / Slot Registry failure (cancellation included) surfaces as
AnalyticsUnavailable. A result is either complete or not produced at all.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from parking_analytics.exceptions import AnalyticsUnavailable
from parking_analytics.services.aggregator import (
    PeriodAggregate, SessionSummary, aggregate, longest_sessions, percent_of, top_buckets,
)
from parking_analytics.services.bucketizer import DEFAULT_BUCKET, HourBucket, bucketize
from parking_analytics.services.intervals import Interval, ParkingSession, TimeWindow, normalize_sessions
from parking_analytics.services.periods import resolve_period
from parking_analytics.services.session_store import Clock, SessionStore, SlotRegistry, SystemClock
from parking_analytics.services.trends import compute_trends
from parking_analytics.utils.logger import get_logger

logger = get_logger(__name__)

NO_PEAK_LABEL = "--:--"


@dataclass(frozen=True)
class TimelinePoint:
    label: str
    occupancy_percent: int


@dataclass(frozen=True)
class PeakHour:
    label: str
    vehicles: int


@dataclass(frozen=True)
class AnalyticsResult:
    period: str
    window: TimeWindow
    previous_window: TimeWindow
    capacity: int

    total_vehicles: int
    avg_duration_minutes: float
    occupancy_rate_percent: int
    peak_hour_label: str
    peak_hour_vehicles: int

    vehicles_trend_percent: int
    duration_trend_percent: int
    occupancy_trend_percent: int

    timeline: Tuple[TimelinePoint, ...]
    peak_hours: Tuple[PeakHour, ...] = ()
    longest_sessions: Tuple[SessionSummary, ...] = ()


@dataclass(frozen=True)
class _WindowAnalysis:
    intervals: List[Interval]
    buckets: List[HourBucket]
    aggregate: PeriodAggregate


class AnalyticsEngine:
    """Stateless apart from its collaborators; safe to share between requests."""

    def __init__(self, store: SessionStore, registry: SlotRegistry, clock: Optional[Clock] = None,
                 bucket: timedelta = DEFAULT_BUCKET, top_peak_hours: int = 3, top_longest_sessions: int = 5):
        self.store = store
        self.registry = registry
        self.clock = clock or SystemClock()
        self.bucket = bucket
        self.top_peak_hours = top_peak_hours
        self.top_longest_sessions = top_longest_sessions

    async def compute_analytics(self, period: str, now: Optional[datetime] = None) -> AnalyticsResult:
        now = now or self.clock.now()
        current_window, previous_window = resolve_period(period, now)   # InvalidPeriod propagates as-is

        capacity, current_sessions, previous_sessions = await self._fetch(current_window, previous_window)

        current = self._analyse(current_window, current_sessions, capacity, now, now)
        comparable = min(previous_window.start + (now - current_window.start), previous_window.end)
        previous = self._analyse(previous_window, previous_sessions, capacity, now, comparable)
        trends = compute_trends(current.aggregate, previous.aggregate)

        agg = current.aggregate
        labels = {b.hour_index: b.label for b in current.buckets}
        result = AnalyticsResult(
            period=period,
            window=current_window,
            previous_window=previous_window,
            capacity=capacity,
            total_vehicles=agg.total_vehicles,
            avg_duration_minutes=agg.avg_duration_minutes,
            occupancy_rate_percent=agg.occupancy_rate_percent,
            peak_hour_label=labels[agg.peak_hour_index] if agg.peak_hour_index is not None else NO_PEAK_LABEL,
            peak_hour_vehicles=agg.peak_hour_vehicles,
            vehicles_trend_percent=trends.vehicles_percent,
            duration_trend_percent=trends.duration_percent,
            occupancy_trend_percent=trends.occupancy_percent,
            timeline=tuple(TimelinePoint(b.label, percent_of(b.vehicles, capacity)) for b in current.buckets),
            peak_hours=tuple(PeakHour(b.label, min(b.vehicles, capacity))
                             for b in top_buckets(current.buckets, self.top_peak_hours)),
            longest_sessions=tuple(longest_sessions(current_window, current.intervals, self.top_longest_sessions)),
        )
        logger.info(
            f"[Analytics] {period} @ {now.isoformat()} | vehicles={result.total_vehicles} "
            f"avg={result.avg_duration_minutes:.1f}min occupancy={result.occupancy_rate_percent}% "
            f"peak={result.peak_hour_label} ({result.peak_hour_vehicles})"
        )
        return result

    async def _fetch(self, current_window: TimeWindow, previous_window: TimeWindow):
        try:
            capacity = self.registry.total_capacity()
            current_sessions, previous_sessions = await asyncio.gather(
                self.store.fetch_sessions(current_window),
                self.store.fetch_sessions(previous_window),
            )
        except asyncio.CancelledError as e:
            logger.error("[Analytics] Session fetch cancelled, aborting")
            raise AnalyticsUnavailable("Session fetch was cancelled") from e
        except Exception as e:
            logger.error(f"[Analytics] Upstream failure: {e}", exc_info=True)
            raise AnalyticsUnavailable(f"Session store or slot registry failed: {e}") from e

        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            logger.error(f"[Analytics] Slot registry returned invalid capacity {capacity!r}")
            raise AnalyticsUnavailable(f"Invalid slot capacity: {capacity!r}")
        return capacity, current_sessions, previous_sessions

    def _analyse(self, window: TimeWindow, sessions: Sequence[ParkingSession], capacity: int,
                 now: datetime, at: datetime) -> _WindowAnalysis:
        # Rows outside the overlap rule are ignored, whatever the store returned
        intervals = [iv for iv in normalize_sessions(sessions, now) if iv.overlaps(window)]
        buckets = bucketize(window, intervals, self.bucket)
        return _WindowAnalysis(intervals, buckets, aggregate(window, intervals, buckets, capacity, at))


async def compute_analytics(period: str, now: datetime, store: SessionStore, registry: SlotRegistry) -> AnalyticsResult:
    """Functional shortcut around AnalyticsEngine with default settings."""
    return await AnalyticsEngine(store, registry).compute_analytics(period, now)
