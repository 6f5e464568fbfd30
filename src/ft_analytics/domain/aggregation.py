"""Pure aggregation helpers for analytics — no I/O.

SQL hands back one row per (bucket, type); these functions fold them into
one income/expense record per bucket.
"""

import calendar
from datetime import date, timedelta

from src.ft_analytics.domain.models import PeriodTotals, TypeBucket
from src.ft_common.enums import DashboardPeriod, TransactionType, TrendPeriod
from src.ft_common.errors import InvalidDateRangeError, InvalidPeriodError

# (DATE_TRUNC unit, TO_CHAR format) per trend period; weeks are ISO weeks.
TREND_BUCKETS: dict[TrendPeriod, tuple[str, str]] = {
    TrendPeriod.DAILY: ("day", "YYYY-MM-DD"),
    TrendPeriod.WEEKLY: ("week", 'IYYY-"W"IW'),
    TrendPeriod.MONTHLY: ("month", "YYYY-MM"),
    TrendPeriod.YEARLY: ("year", "YYYY"),
}

_ROLLING_DAYS = {DashboardPeriod.WEEK: 7, DashboardPeriod.MONTH: 30}


def trend_bucket(period: TrendPeriod | str) -> tuple[str, str]:
    try:
        return TREND_BUCKETS[TrendPeriod(period)]
    except ValueError:
        raise InvalidPeriodError(str(period)) from None


def check_date_range(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError()


def dashboard_window(
    period: DashboardPeriod, today: date
) -> tuple[date | None, date | None]:
    """Inclusive (start, end) dates for a dashboard look-back period."""
    if period in _ROLLING_DAYS:
        return today - timedelta(days=_ROLLING_DAYS[period]), None
    if period == DashboardPeriod.YEAR:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    return None, None


def fold_buckets(rows: list[TypeBucket]) -> list[PeriodTotals]:
    """Merge income and expense rows sharing a label; keeps first-seen label order."""
    folded: dict[int | str, PeriodTotals] = {}
    for row in rows:
        totals = folded.setdefault(row.label, PeriodTotals(label=row.label))
        if row.type == TransactionType.INCOME.value:
            totals.income += row.total
            totals.income_count += row.count
        else:
            totals.expense += row.total
            totals.expense_count += row.count
    return list(folded.values())


def monthly_overview(rows: list[TypeBucket]) -> list[PeriodTotals]:
    """Twelve entries (January..December), months without activity zero-filled."""
    by_month = {int(p.label): p for p in fold_buckets(rows)}
    return [by_month.get(month, PeriodTotals(label=month)) for month in range(1, 13)]


def month_name(month: int) -> str:
    return calendar.month_name[month]
