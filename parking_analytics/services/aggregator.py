"""
Per-window KPIs: vehicle count, average stay, occupancy rate, peak hour.

Inputs are the now-resolved but unclipped intervals of the window (duration
KPIs) and the bucketizer output for that window (peak/timeline KPIs).
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Hashable, List, Optional, Sequence, Tuple

from parking_analytics.services.bucketizer import HourBucket
from parking_analytics.services.intervals import Interval, TimeWindow


@dataclass(frozen=True)
class PeriodAggregate:
    total_vehicles: int
    avg_duration_minutes: float
    occupancy_rate_percent: int
    peak_hour_index: Optional[int]      # None when every bucket is empty
    peak_hour_vehicles: int


@dataclass(frozen=True)
class SessionSummary:
    slot_id: Hashable
    license_plate: Optional[str]
    entry_time: datetime
    exit_time: datetime
    duration_minutes: float


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percent_of(count: int, capacity: int) -> int:
    """Share of capacity as a whole percentage, capped at 100."""
    return round_half_up(min(100.0, 100.0 * count / capacity))


def count_entries(window: TimeWindow, intervals: Sequence[Interval]) -> int:
    # A stay that began before the window is not a vehicle of this window
    return sum(1 for iv in intervals if window.contains(iv.start))


def average_duration_minutes(intervals: Sequence[Interval]) -> float:
    closed = [iv.duration_minutes for iv in intervals if not iv.is_open]
    if not closed:
        return 0.0
    return sum(closed) / len(closed)


def occupied_slots_at(intervals: Sequence[Interval], instant: datetime) -> frozenset:
    """Distinct slots occupied at `instant`. A slot with two covering sessions counts once."""
    return frozenset(iv.slot_id for iv in intervals if iv.covers(instant))


def find_peak(buckets: Sequence[HourBucket]) -> Tuple[Optional[int], int]:
    """(index, vehicles) of the busiest bucket, earliest on ties; (None, 0) if all empty."""
    peak_index, peak_vehicles = None, 0
    for bucket in buckets:
        if bucket.vehicles > peak_vehicles:
            peak_index, peak_vehicles = bucket.hour_index, bucket.vehicles
    return peak_index, peak_vehicles


def top_buckets(buckets: Sequence[HourBucket], limit: int) -> List[HourBucket]:
    """Busiest non-empty buckets, most occupied first, chronological within ties."""
    ranked = sorted((b for b in buckets if b.vehicles), key=lambda b: (-b.vehicles, b.hour_index))
    return ranked[:limit]


def longest_sessions(window: TimeWindow, intervals: Sequence[Interval], limit: int) -> List[SessionSummary]:
    """Longest closed stays that entered during the window."""
    closed = [iv for iv in intervals if not iv.is_open and window.contains(iv.start)]
    closed.sort(key=lambda iv: (-iv.duration, iv.start, str(iv.slot_id)))
    return [
        SessionSummary(
            slot_id=iv.slot_id,
            license_plate=iv.session.license_plate if iv.session else None,
            entry_time=iv.start,
            exit_time=iv.end,
            duration_minutes=iv.duration_minutes,
        )
        for iv in closed[:limit]
    ]


def aggregate(window: TimeWindow, intervals: Sequence[Interval], buckets: Sequence[HourBucket],
              capacity: int, at: datetime) -> PeriodAggregate:
    """
    KPIs for one window.

    `at` is the instant the occupancy rate is sampled at: "now" for the
    current window, the comparable instant for the previous one.
    """
    if capacity <= 0:
        raise ValueError(f"capacity must be positive, got {capacity}")

    peak_index, peak_vehicles = find_peak(buckets)
    return PeriodAggregate(
        total_vehicles=count_entries(window, intervals),
        avg_duration_minutes=average_duration_minutes(intervals),
        occupancy_rate_percent=percent_of(len(occupied_slots_at(intervals, at)), capacity),
        peak_hour_index=peak_index,
        peak_hour_vehicles=min(peak_vehicles, capacity),
    )
