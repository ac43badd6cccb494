"""Unit tests for the trend calculator."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from parking_analytics.services.aggregator import PeriodAggregate
from parking_analytics.services.trends import compute_trends, trend_percent


class TestTrendPercent:
    def test_zero_over_zero(self):
        assert trend_percent(0, 0) == 0

    def test_growth_from_zero(self):
        assert trend_percent(5, 0) == 100

    def test_decrease(self):
        assert trend_percent(5, 10) == -50

    def test_more_than_double(self):
        assert trend_percent(30, 10) == 200

    def test_fractional_durations(self):
        assert trend_percent(45.0, 60.0) == -25

    def test_rounds_half_up(self):
        assert trend_percent(9, 8) == 13   # 12.5


class TestComputeTrends:
    def test_each_metric_independent(self):
        current = PeriodAggregate(12, 30.0, 50, 3, 4)
        previous = PeriodAggregate(8, 0.0, 50, 2, 3)
        trends = compute_trends(current, previous)
        assert trends.vehicles_percent == 50
        assert trends.duration_percent == 100
        assert trends.occupancy_percent == 0
