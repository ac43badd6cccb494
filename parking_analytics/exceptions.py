"""
Errors raised by the occupancy analytics engine.
Routers map these to HTTP status codes; nothing here knows about HTTP.
"""


class AnalyticsError(Exception):
    """Base exception for analytics errors"""
    pass


class InvalidPeriod(AnalyticsError):
    """Unrecognised period keyword (caller error, never retried)"""

    def __init__(self, period):
        self.period = period
        super().__init__(f"Unknown period '{period}' (expected one of: day, week, month)")


class MalformedSession(AnalyticsError):
    """A parking session whose exit is not after its entry. Logged and skipped, never fatal."""

    def __init__(self, session, reason: str = "exit time is not after entry time"):
        self.session = session
        super().__init__(f"Malformed session on slot {session.slot_id}: {reason}")


class AnalyticsUnavailable(AnalyticsError):
    """Session Store or Slot Registry failed; no partial result is produced."""
    pass
