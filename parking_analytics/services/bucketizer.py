"""
Hourly bucketizer.

A window shorter than a day is cut into fixed slices from its start (the last
one clipped to the window end), one bucket per slice, so a partial "today"
yields no empty trailing hours. A window of a day or more is folded onto 24
hour-of-day buckets: bucket h collects every wall-clock hour h in the window,
whatever the configured slice width.

A slot counts in a slice when some interval has start <= slice_end and
end >= slice_start. Buckets hold distinct slot ids, so back-to-back sessions
on one slot count once.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, Hashable, Iterable, List, Set

from parking_analytics.services.intervals import Interval, TimeWindow, clip

DEFAULT_BUCKET = timedelta(hours=1)
HOURS_PER_DAY = 24
ONE_HOUR = timedelta(hours=1)


@dataclass(frozen=True)
class HourBucket:
    hour_index: int
    label: str
    occupied_slot_ids: FrozenSet[Hashable]

    @property
    def vehicles(self) -> int:
        return len(self.occupied_slot_ids)


def format_hour_label(instant: datetime) -> str:
    """12-hour clock label, e.g. '2:00 PM', '12:00 AM', '9:30 AM'."""
    suffix = "PM" if instant.hour >= 12 else "AM"
    hour12 = instant.hour % 12 or 12
    return f"{hour12}:{instant.minute:02d} {suffix}"


def _slice_count(window: TimeWindow, bucket: timedelta) -> int:
    whole, remainder = divmod(window.duration, bucket)
    return whole + (1 if remainder else 0)


def _slice(window: TimeWindow, bucket: timedelta, k: int):
    start = window.start + k * bucket
    return start, min(start + bucket, window.end)


def _touches(interval: Interval, s_start: datetime, s_end: datetime) -> bool:
    return interval.start <= s_end and interval.end >= s_start


def _slices_touched(interval: Interval, window: TimeWindow, bucket: timedelta, n: int) -> List[int]:
    # Candidate range widened by one on the left for the inclusive test
    lo = max(0, (interval.start - window.start) // bucket - 1)
    hi = min(n - 1, (interval.end - window.start) // bucket)
    return [k for k in range(lo, hi + 1) if _touches(interval, *_slice(window, bucket, k))]


def _hours_touched(interval: Interval, window: TimeWindow) -> Set[int]:
    """Hours of day whose wall-clock hour slice (clipped to the window) the interval touches."""
    hours = set()
    t = interval.start.replace(minute=0, second=0, microsecond=0) - ONE_HOUR
    while t <= interval.end:
        s_start, s_end = max(t, window.start), min(t + ONE_HOUR, window.end)
        if s_start < s_end and _touches(interval, s_start, s_end):
            hours.add(t.hour)
        t += ONE_HOUR
    return hours


def bucketize(window: TimeWindow, intervals: Iterable[Interval],
              bucket: timedelta = DEFAULT_BUCKET) -> List[HourBucket]:
    if bucket <= timedelta(0):
        raise ValueError("bucket width must be positive")

    n = _slice_count(window, bucket)
    folded = window.duration >= timedelta(days=1)

    if folded:
        slots = [set() for _ in range(HOURS_PER_DAY)]
        labels = [format_hour_label(window.start.replace(hour=h, minute=0, second=0, microsecond=0))
                  for h in range(HOURS_PER_DAY)]
    else:
        slots = [set() for _ in range(n)]
        labels = [format_hour_label(_slice(window, bucket, k)[0]) for k in range(n)]

    for interval in intervals:
        clipped = clip(interval, window)
        if clipped is None:
            continue

        indexes = _hours_touched(clipped, window) if folded else _slices_touched(clipped, window, bucket, n)
        for index in indexes:
            slots[index].add(clipped.slot_id)

    return [HourBucket(i, labels[i], frozenset(s)) for i, s in enumerate(slots)]
