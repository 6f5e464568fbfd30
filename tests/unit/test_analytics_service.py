"""Unit tests for AnalyticsApplicationService using mock repositories."""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock

import pytest

from src.ft_analytics.application.service import AnalyticsApplicationService
from src.ft_analytics.domain.models import CategoryTotals, TopCategory, TypeBucket
from src.ft_common.enums import DashboardPeriod, TransactionType, TrendPeriod
from src.ft_common.errors import InvalidDateRangeError
from src.ft_transaction.domain.models import Transaction, TypeTotals


def _make_service() -> tuple[AnalyticsApplicationService, AsyncMock, AsyncMock]:
    repo, tx_repo = AsyncMock(), AsyncMock()
    return AnalyticsApplicationService(repo=repo, tx_repo=tx_repo), repo, tx_repo


def _make_tx(tx_id: int) -> Transaction:
    now = datetime.now(UTC)
    return Transaction(
        id=tx_id,
        user_id="user-1",
        category_id=1,
        amount_cents=1000,
        type="expense",
        description=None,
        transaction_date=date(2026, 3, 1),
        created_at=now,
        updated_at=now,
    )


class TestMonthly:
    async def test_twelve_months(self) -> None:
        svc, repo, _ = _make_service()
        repo.monthly_buckets.return_value = [TypeBucket(2, "expense", 5000, 2)]

        result = await svc.monthly(AsyncMock(), "user-1", 2026)

        assert result.year == 2026
        assert len(result.monthly_overview) == 12
        feb = result.monthly_overview[1]
        assert feb.month_name == "February"
        assert feb.net == -5000


class TestYearly:
    async def test_newest_first(self) -> None:
        svc, repo, _ = _make_service()
        repo.yearly_buckets.return_value = [
            TypeBucket(2024, "income", 100, 1),
            TypeBucket(2026, "income", 300, 1),
            TypeBucket(2025, "expense", 200, 1),
        ]

        result = await svc.yearly(AsyncMock(), "user-1")

        assert [y.year for y in result.yearly_overview] == [2026, 2025, 2024]


class TestCategories:
    async def test_percentages(self) -> None:
        svc, repo, _ = _make_service()
        repo.category_totals.return_value = [
            CategoryTotals(1, "Rent", None, None, 7500, 1, 7500, 7500),
            CategoryTotals(2, "Food", None, None, 2500, 4, 100, 1500),
        ]

        result = await svc.categories(AsyncMock(), "user-1", TransactionType.EXPENSE, None, None)

        assert result.type == "expense"
        assert result.total_amount == 10000
        assert [c.percentage for c in result.category_breakdown] == [75.0, 25.0]
        assert result.category_breakdown[1].average_amount == 625

    async def test_reversed_dates_rejected_before_query(self) -> None:
        svc, repo, _ = _make_service()

        with pytest.raises(InvalidDateRangeError):
            await svc.categories(
                AsyncMock(), "user-1", TransactionType.EXPENSE, date(2026, 2, 1), date(2026, 1, 1)
            )
        repo.category_totals.assert_not_awaited()


class TestTrends:
    async def test_folds_buckets(self) -> None:
        svc, repo, _ = _make_service()
        repo.trend_buckets.return_value = [
            TypeBucket("2026-W10", "income", 1000, 1),
            TypeBucket("2026-W10", "expense", 400, 1),
        ]
        db = AsyncMock()

        result = await svc.trends(db, "user-1", TrendPeriod.WEEKLY, None, None)

        repo.trend_buckets.assert_awaited_once_with(db, "user-1", TrendPeriod.WEEKLY, None, None)
        assert result.period == "weekly"
        assert [(t.period, t.net) for t in result.trends] == [("2026-W10", 600)]


class TestDashboard:
    async def test_assembles_summary_recent_and_top(self) -> None:
        svc, repo, tx_repo = _make_service()
        tx_repo.totals_by_type.return_value = [TypeTotals("income", 1, 5000, 5000, 5000)]
        tx_repo.list_transactions.return_value = [_make_tx(1), _make_tx(2)]
        repo.top_categories.return_value = [TopCategory("Salary", None, None, "income", 5000, 1)]
        db = AsyncMock()

        result = await svc.dashboard(db, "user-1", DashboardPeriod.WEEK, date(2026, 3, 15))

        assert result.start_date == date(2026, 3, 8)
        assert result.end_date is None
        assert result.summary.net == 5000
        assert len(result.recent_transactions) == 2
        assert result.top_categories[0].category_name == "Salary"
        flt, offset, limit = tx_repo.list_transactions.await_args.args[1:]
        assert flt.start_date == date(2026, 3, 8)
        assert (offset, limit) == (0, 10)
        assert repo.top_categories.await_args.args[-1] == 5
