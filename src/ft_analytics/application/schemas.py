"""Pydantic schemas for ft_analytics responses. All amounts are integer cents."""

from datetime import date

from pydantic import BaseModel

from src.ft_analytics.domain.aggregation import month_name
from src.ft_analytics.domain.models import CategoryTotals, PeriodTotals, TopCategory
from src.ft_common.cents import average_cents, cents_to_display, percentage
from src.ft_transaction.application.schemas import TransactionOut, TypeSummaryOut


class PeriodTotalsOut(BaseModel):
    income: int
    expense: int
    net: int
    income_count: int
    expense_count: int


def _totals(p: PeriodTotals) -> dict:
    return {
        "income": p.income,
        "expense": p.expense,
        "net": p.net,
        "income_count": p.income_count,
        "expense_count": p.expense_count,
    }


class MonthOut(PeriodTotalsOut):
    month: int
    month_name: str

    @classmethod
    def from_domain(cls, p: PeriodTotals) -> "MonthOut":
        month = int(p.label)
        return cls(month=month, month_name=month_name(month), **_totals(p))


class YearOut(PeriodTotalsOut):
    year: int

    @classmethod
    def from_domain(cls, p: PeriodTotals) -> "YearOut":
        return cls(year=int(p.label), **_totals(p))


class TrendOut(PeriodTotalsOut):
    period: str

    @classmethod
    def from_domain(cls, p: PeriodTotals) -> "TrendOut":
        return cls(period=str(p.label), **_totals(p))


class MonthlyOverviewResponse(BaseModel):
    year: int
    monthly_overview: list[MonthOut]


class YearlyOverviewResponse(BaseModel):
    yearly_overview: list[YearOut]


class TrendsResponse(BaseModel):
    period: str
    start_date: date | None
    end_date: date | None
    trends: list[TrendOut]


class CategoryBreakdownItem(BaseModel):
    category_id: int
    category_name: str
    category_color: str | None
    category_icon: str | None
    total_amount: int
    transaction_count: int
    average_amount: int
    min_amount: int
    max_amount: int
    percentage: float

    @classmethod
    def from_domain(cls, c: CategoryTotals, grand_total: int) -> "CategoryBreakdownItem":
        return cls(
            category_id=c.category_id,
            category_name=c.name,
            category_color=c.color,
            category_icon=c.icon,
            total_amount=c.total,
            transaction_count=c.count,
            average_amount=average_cents(c.total, c.count),
            min_amount=c.minimum,
            max_amount=c.maximum,
            percentage=percentage(c.total, grand_total),
        )


class CategoryBreakdownResponse(BaseModel):
    type: str
    total_amount: int
    total_amount_display: str
    category_breakdown: list[CategoryBreakdownItem]

    @classmethod
    def from_domain(cls, tx_type: str, rows: list[CategoryTotals]) -> "CategoryBreakdownResponse":
        grand_total = sum(c.total for c in rows)
        return cls(
            type=tx_type,
            total_amount=grand_total,
            total_amount_display=cents_to_display(grand_total),
            category_breakdown=[CategoryBreakdownItem.from_domain(c, grand_total) for c in rows],
        )


class TopCategoryOut(BaseModel):
    category_name: str
    category_color: str | None
    category_icon: str | None
    type: str
    total_amount: int
    transaction_count: int

    @classmethod
    def from_domain(cls, t: TopCategory) -> "TopCategoryOut":
        return cls(
            category_name=t.name,
            category_color=t.color,
            category_icon=t.icon,
            type=t.type,
            total_amount=t.total,
            transaction_count=t.count,
        )


class DashboardSummary(BaseModel):
    income: TypeSummaryOut
    expense: TypeSummaryOut
    net: int
    net_display: str


class DashboardResponse(BaseModel):
    period: str
    start_date: date | None
    end_date: date | None
    summary: DashboardSummary
    recent_transactions: list[TransactionOut]
    top_categories: list[TopCategoryOut]
