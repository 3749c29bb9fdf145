"""
Test Suite for Share of Search Trends

Tests:
- Calendar month arithmetic
- Per-period SOS normalization
- History table rows
"""

import pytest
from datetime import datetime, timedelta, timezone

from searchshare.metrics import (
    SnapshotHistory,
    build_history_table,
    calculate_sos_trend,
)
from searchshare.metrics.trends import get_volume_for_month, months_before


@pytest.fixture
def historical_volumes():
    """Branded volumes keyed by lower-cased brand name."""
    return {
        "stride": {
            "current": 100,
            "monthly": [
                {"year": 2023, "month": 9, "volume": 50},
                {"year": 2023, "month": 3, "volume": 20},
            ],
        },
        "pacer": {
            "current": 300,
            "monthly": [
                {"year": 2023, "month": 9, "volume": 150},
                {"year": 2023, "month": 3, "volume": 80},
            ],
        },
    }


class TestMonthArithmetic:
    """Test calendar month lookups."""

    def test_six_months_back(self, fixed_now):
        assert months_before(fixed_now, 6) == (2023, 9)

    def test_twelve_months_back(self, fixed_now):
        assert months_before(fixed_now, 12) == (2023, 3)

    def test_year_boundary(self):
        assert months_before(datetime(2024, 1, 31, tzinfo=timezone.utc), 1) == (2023, 12)

    def test_volume_for_missing_month(self):
        monthly = [{"year": 2023, "month": 9, "volume": 50}]

        assert get_volume_for_month(monthly, 2023, 9) == 50
        assert get_volume_for_month(monthly, 2023, 8) == 0
        assert get_volume_for_month(None, 2023, 9) == 0


class TestSOSTrend:
    """Test SOS per brand for now / 6m / 12m."""

    def test_periods_normalized(self, historical_volumes, fixed_now):
        trends = calculate_sos_trend(historical_volumes, ["Stride", "Pacer"], now=fixed_now)

        assert trends["Stride"]["now"] == pytest.approx(25.0)
        assert trends["Stride"]["6m"] == pytest.approx(25.0)
        assert trends["Stride"]["12m"] == pytest.approx(20.0)
        assert trends["Pacer"]["12m"] == pytest.approx(80.0)

    def test_each_period_sums_to_100(self, historical_volumes, fixed_now):
        trends = calculate_sos_trend(historical_volumes, ["Stride", "Pacer"], now=fixed_now)

        for period in ("now", "6m", "12m"):
            assert sum(t[period] for t in trends.values()) == pytest.approx(100.0)

    def test_brand_without_history(self, historical_volumes, fixed_now):
        trends = calculate_sos_trend(
            historical_volumes, ["Stride", "Pacer", "Sprintly"], now=fixed_now,
        )

        assert trends["Sprintly"] == {"now": 0.0, "6m": 0.0, "12m": 0.0}
        assert trends["Stride"]["now"] == pytest.approx(25.0)

    def test_brand_without_monthly_series_is_excluded(self, historical_volumes, fixed_now):
        """A brand with no monthly series is left out of every denominator."""
        historical_volumes["trailmark"] = {"current": 600, "monthly": None}

        trends = calculate_sos_trend(
            historical_volumes, ["Stride", "Pacer", "Trailmark"], now=fixed_now,
        )

        assert trends["Trailmark"]["now"] == 0.0
        assert trends["Stride"]["now"] == pytest.approx(25.0)

    def test_no_data(self, fixed_now):
        trends = calculate_sos_trend({}, ["Stride"], now=fixed_now)
        assert trends == {"Stride": {"now": 0.0, "6m": 0.0, "12m": 0.0}}


class TestHistoryTable:
    """Test history rows with period-over-period change."""

    def test_rows(self, sportswear_project, fixed_now):
        history = SnapshotHistory()
        history.record(sportswear_project, now=fixed_now)
        sportswear_project["positions"]["0"]["Stride"] = 2
        history.record(sportswear_project, now=fixed_now + timedelta(days=31))

        rows = build_history_table(history.snapshots)

        assert len(rows) == 2
        assert rows[0]["sos_change"] is None
        assert rows[0]["sov_change"] is None
        assert rows[1]["date"] == "2024-04"
        assert rows[1]["sos_change"] == pytest.approx(0.0)
        assert rows[1]["sov_change"] == pytest.approx(15.8 - 31.6)

    def test_empty(self):
        assert build_history_table([]) == []
