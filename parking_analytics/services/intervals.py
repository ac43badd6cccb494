"""
Interval model for parking sessions.

A session is a half-open interval [entry, exit) on one slot. Sessions with no
exit are "open": they are resolved against "now" so they still count for
occupancy, but they stay flagged so duration metrics can leave them out.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Hashable, Iterable, List, Optional

from parking_analytics.exceptions import MalformedSession
from parking_analytics.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParkingSession:
    """One vehicle stay as supplied by the Session Store. Read-only to the engine."""
    slot_id: Hashable
    entry_time: datetime
    exit_time: Optional[datetime] = None     # None = still parked
    license_plate: Optional[str] = None


@dataclass(frozen=True)
class TimeWindow:
    """Half-open window [start, end)."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Window start {self.start} is after end {self.end}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class Interval:
    """A session with its exit resolved. `is_open` marks an exit borrowed from "now"."""
    slot_id: Hashable
    start: datetime
    end: datetime
    is_open: bool = False
    session: Optional[ParkingSession] = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def duration_minutes(self) -> float:
        return self.duration.total_seconds() / 60

    def covers(self, instant: datetime) -> bool:
        # An open interval ends at "now" and still covers it
        if self.is_open:
            return self.start <= instant <= self.end
        return self.start <= instant < self.end

    def overlaps(self, window: TimeWindow) -> bool:
        """Session-store overlap rule: entry < window.end and resolved exit >= window.start."""
        return self.start < window.end and self.end >= window.start


def _align(ts: datetime, reference: datetime) -> datetime:
    """Give a naive timestamp the reference's tzinfo so the two can be compared."""
    if ts.tzinfo is None and reference.tzinfo is not None:
        return ts.replace(tzinfo=reference.tzinfo)
    return ts


def normalize(session: ParkingSession, now: datetime) -> Interval:
    """Resolve a session against `now`. Raises MalformedSession for exit <= entry."""
    entry = _align(session.entry_time, now)
    if session.exit_time is None:
        if entry > now:
            raise MalformedSession(session, "open session entered after now")
        return Interval(session.slot_id, entry, now, is_open=True, session=session)

    exit_time = _align(session.exit_time, now)
    if exit_time <= entry:
        raise MalformedSession(session)
    return Interval(session.slot_id, entry, exit_time, is_open=False, session=session)


def normalize_sessions(sessions: Iterable[ParkingSession], now: datetime) -> List[Interval]:
    """
    Normalize every session, dropping malformed ones with a warning.
    Output is sorted by (start, slot) so downstream results never depend on
    the order the store returned rows in.
    """
    intervals = []
    for session in sessions:
        try:
            intervals.append(normalize(session, now))
        except MalformedSession as e:
            logger.warning(f"[Analytics] Skipped: {e} (entry={session.entry_time}, exit={session.exit_time})")
    intervals.sort(key=lambda iv: (iv.start, iv.end, str(iv.slot_id)))
    return intervals


def clip(interval: Interval, window: TimeWindow) -> Optional[Interval]:
    """Intersect with a window. None when they don't overlap."""
    if interval.end <= window.start or interval.start >= window.end:
        return None
    return replace(interval, start=max(interval.start, window.start), end=min(interval.end, window.end))
