"""Period-over-period deltas."""

from dataclasses import dataclass

from parking_analytics.services.aggregator import PeriodAggregate, round_half_up


@dataclass(frozen=True)
class Trends:
    vehicles_percent: int
    duration_percent: int
    occupancy_percent: int


def trend_percent(current: float, previous: float) -> int:
    """
    Percentage change from `previous` to `current`.
    A zero baseline reports 100 for any growth and 0 otherwise.
    Values above 100 are valid near small baselines.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up(100 * (current - previous) / previous)


def compute_trends(current: PeriodAggregate, previous: PeriodAggregate) -> Trends:
    return Trends(
        vehicles_percent=trend_percent(current.total_vehicles, previous.total_vehicles),
        duration_percent=trend_percent(current.avg_duration_minutes, previous.avg_duration_minutes),
        occupancy_percent=trend_percent(current.occupancy_rate_percent, previous.occupancy_rate_percent),
    )
