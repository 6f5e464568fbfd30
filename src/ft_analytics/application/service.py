"""AnalyticsApplicationService — read-only reporting over one user's ledger.

No commit/rollback: every method only reads. Callers resolve which user
is being reported on (admins may pick any user).
"""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_analytics.application.schemas import (
    CategoryBreakdownResponse,
    DashboardResponse,
    DashboardSummary,
    MonthlyOverviewResponse,
    MonthOut,
    TopCategoryOut,
    TrendOut,
    TrendsResponse,
    YearlyOverviewResponse,
    YearOut,
)
from src.ft_analytics.domain.aggregation import (
    check_date_range,
    dashboard_window,
    fold_buckets,
    monthly_overview,
)
from src.ft_analytics.domain.repository import AnalyticsRepositoryProtocol
from src.ft_analytics.infrastructure.persistence import AnalyticsRepository
from src.ft_common.enums import DashboardPeriod, TransactionType, TrendPeriod
from src.ft_transaction.application.schemas import TransactionOut, TransactionSummaryResponse
from src.ft_transaction.domain.models import TransactionFilter
from src.ft_transaction.domain.repository import TransactionRepositoryProtocol
from src.ft_transaction.infrastructure.persistence import TransactionRepository

RECENT_TRANSACTIONS = 10
TOP_CATEGORIES = 5


class AnalyticsApplicationService:
    def __init__(
        self,
        repo: AnalyticsRepositoryProtocol | None = None,
        tx_repo: TransactionRepositoryProtocol | None = None,
    ) -> None:
        self._repo: AnalyticsRepositoryProtocol = repo or AnalyticsRepository()
        self._tx_repo: TransactionRepositoryProtocol = tx_repo or TransactionRepository()

    async def monthly(self, db: AsyncSession, user_id: str, year: int) -> MonthlyOverviewResponse:
        rows = await self._repo.monthly_buckets(db, user_id, year)
        return MonthlyOverviewResponse(
            year=year, monthly_overview=[MonthOut.from_domain(m) for m in monthly_overview(rows)]
        )

    async def yearly(self, db: AsyncSession, user_id: str) -> YearlyOverviewResponse:
        rows = await self._repo.yearly_buckets(db, user_id)
        years = sorted(fold_buckets(rows), key=lambda p: int(p.label), reverse=True)
        return YearlyOverviewResponse(yearly_overview=[YearOut.from_domain(y) for y in years])

    async def categories(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: TransactionType,
        start_date: date | None,
        end_date: date | None,
    ) -> CategoryBreakdownResponse:
        check_date_range(start_date, end_date)
        rows = await self._repo.category_totals(db, user_id, tx_type.value, start_date, end_date)
        return CategoryBreakdownResponse.from_domain(tx_type.value, rows)

    async def trends(
        self,
        db: AsyncSession,
        user_id: str,
        period: TrendPeriod,
        start_date: date | None,
        end_date: date | None,
    ) -> TrendsResponse:
        check_date_range(start_date, end_date)
        rows = await self._repo.trend_buckets(db, user_id, period, start_date, end_date)
        return TrendsResponse(
            period=period.value,
            start_date=start_date,
            end_date=end_date,
            trends=[TrendOut.from_domain(p) for p in fold_buckets(rows)],
        )

    async def dashboard(
        self, db: AsyncSession, user_id: str, period: DashboardPeriod, today: date
    ) -> DashboardResponse:
        start_date, end_date = dashboard_window(period, today)
        totals = await self._tx_repo.totals_by_type(db, user_id, start_date, end_date)
        summary = TransactionSummaryResponse.from_totals(totals, start_date, end_date)
        recent = await self._tx_repo.list_transactions(
            db,
            TransactionFilter(user_id=user_id, start_date=start_date, end_date=end_date),
            0,
            RECENT_TRANSACTIONS,
        )
        top = await self._repo.top_categories(db, user_id, start_date, end_date, TOP_CATEGORIES)
        return DashboardResponse(
            period=period.value,
            start_date=start_date,
            end_date=end_date,
            summary=DashboardSummary(
                income=summary.income,
                expense=summary.expense,
                net=summary.net,
                net_display=summary.net_display,
            ),
            recent_transactions=[TransactionOut.from_domain(t) for t in recent],
            top_categories=[TopCategoryOut.from_domain(t) for t in top],
        )
