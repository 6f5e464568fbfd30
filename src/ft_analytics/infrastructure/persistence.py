"""AnalyticsRepository — read-only aggregate queries over transactions.

All queries use raw text() SQL; money sums stay BIGINT cents.
Trend SQL is prepared once per TrendPeriod from a fixed table of
DATE_TRUNC units and TO_CHAR formats; request values only ever bind.
"""

from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_analytics.domain.aggregation import TREND_BUCKETS, trend_bucket
from src.ft_analytics.domain.models import CategoryTotals, TopCategory, TypeBucket
from src.ft_common.enums import TrendPeriod

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_DATE_RANGE = """
      AND (CAST(:start_date AS DATE) IS NULL OR t.transaction_date >= CAST(:start_date AS DATE))
      AND (CAST(:end_date AS DATE) IS NULL OR t.transaction_date <= CAST(:end_date AS DATE))
"""

_MONTHLY_SQL = text("""
    SELECT CAST(EXTRACT(MONTH FROM t.transaction_date) AS INTEGER) AS label,
           t.type,
           SUM(t.amount_cents) AS total,
           COUNT(*)            AS cnt
    FROM transactions t
    WHERE t.user_id = CAST(:user_id AS UUID)
      AND CAST(EXTRACT(YEAR FROM t.transaction_date) AS INTEGER) = CAST(:year AS INTEGER)
    GROUP BY 1, t.type
    ORDER BY 1
""")

_YEARLY_SQL = text("""
    SELECT CAST(EXTRACT(YEAR FROM t.transaction_date) AS INTEGER) AS label,
           t.type,
           SUM(t.amount_cents) AS total,
           COUNT(*)            AS cnt
    FROM transactions t
    WHERE t.user_id = CAST(:user_id AS UUID)
    GROUP BY 1, t.type
    ORDER BY 1 DESC
""")


def _trend_sql(unit: str, label_format: str) -> Any:
    return text(f"""
    SELECT TO_CHAR(DATE_TRUNC('{unit}', t.transaction_date), '{label_format}') AS label,
           DATE_TRUNC('{unit}', t.transaction_date) AS bucket,
           t.type,
           SUM(t.amount_cents) AS total,
           COUNT(*)            AS cnt
    FROM transactions t
    WHERE t.user_id = CAST(:user_id AS UUID)
    {_DATE_RANGE}
    GROUP BY bucket, label, t.type
    ORDER BY bucket
""")


_TREND_SQL = {period: _trend_sql(unit, fmt) for period, (unit, fmt) in TREND_BUCKETS.items()}

_CATEGORY_TOTALS_SQL = text(f"""
    SELECT c.id AS category_id, c.name, c.color, c.icon,
           SUM(t.amount_cents) AS total,
           COUNT(t.id)         AS cnt,
           MIN(t.amount_cents) AS minimum,
           MAX(t.amount_cents) AS maximum
    FROM transactions t
    JOIN categories c ON c.id = t.category_id
    WHERE t.user_id = CAST(:user_id AS UUID)
      AND t.type = :type
    {_DATE_RANGE}
    GROUP BY c.id, c.name, c.color, c.icon
    ORDER BY total DESC, c.name
""")

_TOP_CATEGORIES_SQL = text(f"""
    SELECT c.name, c.color, c.icon, t.type,
           SUM(t.amount_cents) AS total,
           COUNT(t.id)         AS cnt
    FROM transactions t
    JOIN categories c ON c.id = t.category_id
    WHERE t.user_id = CAST(:user_id AS UUID)
    {_DATE_RANGE}
    GROUP BY c.id, c.name, c.color, c.icon, t.type
    ORDER BY total DESC, c.name
    LIMIT :limit
""")


def _to_buckets(rows: Any) -> list[TypeBucket]:
    return [
        TypeBucket(label=r.label, type=r.type, total=int(r.total), count=int(r.cnt))
        for r in rows
    ]


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class AnalyticsRepository:
    async def monthly_buckets(
        self, db: AsyncSession, user_id: str, year: int
    ) -> list[TypeBucket]:
        result = await db.execute(_MONTHLY_SQL, {"user_id": user_id, "year": year})
        return _to_buckets(result.fetchall())

    async def yearly_buckets(self, db: AsyncSession, user_id: str) -> list[TypeBucket]:
        result = await db.execute(_YEARLY_SQL, {"user_id": user_id})
        return _to_buckets(result.fetchall())

    async def trend_buckets(
        self,
        db: AsyncSession,
        user_id: str,
        period: TrendPeriod,
        start_date: date | None,
        end_date: date | None,
    ) -> list[TypeBucket]:
        trend_bucket(period)  # raises InvalidPeriodError for unknown periods
        result = await db.execute(
            _TREND_SQL[TrendPeriod(period)],
            {"user_id": user_id, "start_date": start_date, "end_date": end_date},
        )
        return _to_buckets(result.fetchall())

    async def category_totals(
        self,
        db: AsyncSession,
        user_id: str,
        tx_type: str,
        start_date: date | None,
        end_date: date | None,
    ) -> list[CategoryTotals]:
        result = await db.execute(
            _CATEGORY_TOTALS_SQL,
            {"user_id": user_id, "type": tx_type, "start_date": start_date, "end_date": end_date},
        )
        return [
            CategoryTotals(
                category_id=r.category_id,
                name=r.name,
                color=r.color,
                icon=r.icon,
                total=int(r.total),
                count=int(r.cnt),
                minimum=int(r.minimum),
                maximum=int(r.maximum),
            )
            for r in result.fetchall()
        ]

    async def top_categories(
        self,
        db: AsyncSession,
        user_id: str,
        start_date: date | None,
        end_date: date | None,
        limit: int,
    ) -> list[TopCategory]:
        result = await db.execute(
            _TOP_CATEGORIES_SQL,
            {"user_id": user_id, "start_date": start_date, "end_date": end_date, "limit": limit},
        )
        return [
            TopCategory(
                name=r.name,
                color=r.color,
                icon=r.icon,
                type=r.type,
                total=int(r.total),
                count=int(r.cnt),
            )
            for r in result.fetchall()
        ]
