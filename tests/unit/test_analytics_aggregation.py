"""Tests for ft_analytics.domain.aggregation — pure functions, no DB."""

from datetime import date

import pytest

from src.ft_analytics.domain.aggregation import (
    check_date_range,
    dashboard_window,
    fold_buckets,
    month_name,
    monthly_overview,
    trend_bucket,
)
from src.ft_analytics.domain.models import TypeBucket
from src.ft_common.enums import DashboardPeriod, TrendPeriod
from src.ft_common.errors import InvalidDateRangeError, InvalidPeriodError


class TestTrendBucket:
    def test_weekly_uses_iso_weeks(self) -> None:
        assert trend_bucket(TrendPeriod.WEEKLY) == ("week", 'IYYY-"W"IW')

    def test_accepts_plain_string(self) -> None:
        assert trend_bucket("daily") == ("day", "YYYY-MM-DD")

    def test_unknown_period(self) -> None:
        with pytest.raises(InvalidPeriodError, match="hourly"):
            trend_bucket("hourly")


class TestDateRange:
    def test_open_ranges_ok(self) -> None:
        check_date_range(None, date(2026, 1, 1))
        check_date_range(date(2026, 1, 1), None)

    def test_same_day_ok(self) -> None:
        check_date_range(date(2026, 1, 1), date(2026, 1, 1))

    def test_reversed_raises(self) -> None:
        with pytest.raises(InvalidDateRangeError):
            check_date_range(date(2026, 2, 1), date(2026, 1, 1))


class TestDashboardWindow:
    TODAY = date(2026, 3, 15)

    def test_week(self) -> None:
        assert dashboard_window(DashboardPeriod.WEEK, self.TODAY) == (date(2026, 3, 8), None)

    def test_month(self) -> None:
        assert dashboard_window(DashboardPeriod.MONTH, self.TODAY) == (date(2026, 2, 13), None)

    def test_year_is_calendar_year(self) -> None:
        assert dashboard_window(DashboardPeriod.YEAR, self.TODAY) == (
            date(2026, 1, 1),
            date(2026, 12, 31),
        )

    def test_all(self) -> None:
        assert dashboard_window(DashboardPeriod.ALL, self.TODAY) == (None, None)


class TestFoldBuckets:
    def test_merges_income_and_expense(self) -> None:
        rows = [
            TypeBucket("2026-02", "income", 300000, 1),
            TypeBucket("2026-02", "expense", 4500, 3),
            TypeBucket("2026-03", "expense", 1000, 1),
        ]

        folded = fold_buckets(rows)

        assert [p.label for p in folded] == ["2026-02", "2026-03"]
        assert folded[0].income == 300000
        assert folded[0].expense_count == 3
        assert folded[0].net == 295500
        assert folded[1].income == 0
        assert folded[1].net == -1000

    def test_empty(self) -> None:
        assert fold_buckets([]) == []


class TestMonthlyOverview:
    def test_twelve_months_zero_filled(self) -> None:
        rows = [TypeBucket(3, "income", 1000, 1), TypeBucket(11, "expense", 250, 2)]

        months = monthly_overview(rows)

        assert [m.label for m in months] == list(range(1, 13))
        assert months[2].income == 1000
        assert months[10].expense == 250
        assert months[0].income == months[0].expense == 0

    def test_month_name(self) -> None:
        assert month_name(1) == "January"
        assert month_name(12) == "December"
