"""Repository Protocol — dependency inversion for testability."""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_analytics.domain.models import CategoryTotals, TopCategory, TypeBucket
from src.ft_common.enums import TrendPeriod


class AnalyticsRepositoryProtocol(Protocol):
    async def monthly_buckets(
        self, db: AsyncSession, user_id: str, year: int
    ) -> list[TypeBucket]: ...

    async def yearly_buckets(self, db: AsyncSession, user_id: str) -> list[TypeBucket]: ...

    async def trend_buckets(
        self,
        db: AsyncSession,
        user_id: str,
        period: TrendPeriod,
        start_date: date | None,
        end_date: date | None,
    ) -> list[TypeBucket]: ...

    async def category_totals(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str,
        start_date: date | None,
        end_date: date | None,
    ) -> list[CategoryTotals]: ...

    async def top_categories(
        self,
        db: AsyncSession,
        user_id: str,
        start_date: date | None,
        end_date: date | None,
        limit: int,
    ) -> list[TopCategory]: ...
