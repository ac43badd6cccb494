"""
Collaborators the analytics engine reads from: Session Store, Slot Registry
and Clock. Abstract contracts plus the SQLAlchemy-backed implementations the
API uses and in-memory ones for tests and offline tools.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone, tzinfo
from typing import Iterable, List, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from parking_analytics.models.parking_log import ParkingLog
from parking_analytics.models.parking_slot import ParkingSlot
from parking_analytics.services.intervals import ParkingSession, TimeWindow
from parking_analytics.utils.logger import get_logger

logger = get_logger(__name__)


# ── Contracts ────────────────────────────────────────────────────────────────

class SessionStore(ABC):
    @abstractmethod
    async def fetch_sessions(self, window: TimeWindow) -> List[ParkingSession]:
        """Sessions with entry < window.end and (no exit or exit >= window.start). Any order."""


class SlotRegistry(ABC):
    @abstractmethod
    def total_capacity(self) -> int:
        """Number of physical slots in the lot."""


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        pass


# ── Clocks ───────────────────────────────────────────────────────────────────

class SystemClock(Clock):
    def __init__(self, tz: tzinfo = timezone.utc):
        self.tz = tz

    @classmethod
    def from_name(cls, name: str) -> "SystemClock":
        return cls(ZoneInfo(name))

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock(Clock):
    """Always returns the same instant. For tests and report reruns."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


# ── SQLAlchemy adapters ──────────────────────────────────────────────────────

class SqlSessionStore(SessionStore):
    """
    Reads ParkingLog rows. The DB holds naive wall-clock timestamps in `tz`;
    windows are converted to that form for the query and rows are converted
    back to aware datetimes.
    """

    def __init__(self, db: Session, tz: tzinfo = timezone.utc):
        self.db = db
        self.tz = tz

    def _to_db(self, ts: datetime) -> datetime:
        if ts.tzinfo is None:
            return ts
        return ts.astimezone(self.tz).replace(tzinfo=None)

    def _from_db(self, ts: Optional[datetime]) -> Optional[datetime]:
        if ts is None or ts.tzinfo is not None:
            return ts
        return ts.replace(tzinfo=self.tz)

    async def fetch_sessions(self, window: TimeWindow) -> List[ParkingSession]:
        start, end = self._to_db(window.start), self._to_db(window.end)
        rows = (
            self.db.query(ParkingLog)
            .filter(
                ParkingLog.entry_time < end,
                or_(ParkingLog.exit_time == None, ParkingLog.exit_time >= start),  # noqa: E711
            )
            .order_by(ParkingLog.entry_time, ParkingLog.id)
            .all()
        )
        logger.debug(f"[SessionStore] {len(rows)} sessions for {window.start} → {window.end}")
        return [
            ParkingSession(
                slot_id=row.slot_id,
                entry_time=self._from_db(row.entry_time),
                exit_time=self._from_db(row.exit_time),
                license_plate=row.license_plate,
            )
            for row in rows
        ]


class SqlSlotRegistry(SlotRegistry):
    def __init__(self, db: Session):
        self.db = db

    def total_capacity(self) -> int:
        return self.db.query(func.count(ParkingSlot.id)).scalar() or 0


# ── In-memory adapters ───────────────────────────────────────────────────────

class InMemorySessionStore(SessionStore):
    def __init__(self, sessions: Iterable[ParkingSession] = ()):
        self.sessions = list(sessions)

    async def fetch_sessions(self, window: TimeWindow) -> List[ParkingSession]:
        result = []
        for s in self.sessions:
            if s.entry_time >= window.end:
                continue
            if s.exit_time is not None and s.exit_time < window.start:
                continue
            result.append(s)
        return result


class StaticSlotRegistry(SlotRegistry):
    def __init__(self, capacity: int):
        self.capacity = capacity

    def total_capacity(self) -> int:
        return self.capacity
