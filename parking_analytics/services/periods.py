"""
Period resolver: turns a period keyword into the current window and the
window it is compared against for trends.

  day   → [today 00:00, now)                vs  [yesterday 00:00, today 00:00)
  week  → [today 00:00 - 6 days, now)       vs  equal-length window ending at its start
  month → [1st of this month 00:00, now)    vs  equal-length window ending at the 1st

The current window is partial (it ends at now). "week" and "month" compare it
with an equally long window; "day" compares against all of yesterday, which
skews the day trend early in the day. That is accepted as an approximation;
do not stretch the current window to hide it.
"""

from datetime import datetime, timedelta
from typing import Tuple

from parking_analytics.exceptions import InvalidPeriod
from parking_analytics.services.intervals import TimeWindow

PERIODS = ("day", "week", "month")
WEEK_DAYS = 7


def start_of_day(instant: datetime) -> datetime:
    return instant.replace(hour=0, minute=0, second=0, microsecond=0)


def resolve_period(period: str, now: datetime) -> Tuple[TimeWindow, TimeWindow]:
    """Return (current_window, previous_window) for `period` at reference time `now`."""
    today = start_of_day(now)

    if period == "day":
        current = TimeWindow(today, now)
        previous = TimeWindow(today - timedelta(days=1), today)
    elif period == "week":
        start = today - timedelta(days=WEEK_DAYS - 1)
        current = TimeWindow(start, now)
        previous = TimeWindow(start - current.duration, start)
    elif period == "month":
        start = today.replace(day=1)
        current = TimeWindow(start, now)
        previous = TimeWindow(start - current.duration, start)
    else:
        raise InvalidPeriod(period)

    return current, previous
