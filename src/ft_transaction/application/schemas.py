"""Pydantic schemas for ft_transaction requests and responses.

Amounts travel as integer cents; every amount field has a *_display twin
rendered by cents_to_display for clients that just print it.
"""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from src.ft_common.cents import average_cents, cents_to_display
from src.ft_common.enums import TransactionType
from src.ft_common.pagination import Pagination
from src.ft_transaction.domain.models import Transaction, TypeTotals

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class TransactionWriteRequest(BaseModel):
    category_id: int = Field(..., gt=0)
    amount_cents: int = Field(..., gt=0, description="Amount in cents, > 0")
    type: TransactionType
    description: str | None = Field(None, max_length=500)
    transaction_date: date


class TransactionCreateRequest(TransactionWriteRequest):
    # Honoured for admins only; everyone else always creates for themselves.
    user_id: uuid.UUID | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class TransactionOut(BaseModel):
    id: int
    user_id: str
    category_id: int
    category_name: str | None
    category_color: str | None
    category_icon: str | None
    amount_cents: int
    amount_display: str
    type: str
    description: str | None
    transaction_date: date
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, t: Transaction) -> "TransactionOut":
        return cls(
            id=t.id,
            user_id=t.user_id,
            category_id=t.category_id,
            category_name=t.category_name,
            category_color=t.category_color,
            category_icon=t.category_icon,
            amount_cents=t.amount_cents,
            amount_display=cents_to_display(t.amount_cents),
            type=t.type,
            description=t.description,
            transaction_date=t.transaction_date,
            created_at=t.created_at,
            updated_at=t.updated_at,
        )


class TransactionListResponse(BaseModel):
    transactions: list[TransactionOut]
    pagination: Pagination


class TypeSummaryOut(BaseModel):
    count: int
    total: int
    total_display: str
    average: int
    minimum: int
    maximum: int

    @classmethod
    def from_totals(cls, totals: TypeTotals | None) -> "TypeSummaryOut":
        if totals is None:
            return cls(
                count=0, total=0, total_display=cents_to_display(0), average=0, minimum=0, maximum=0
            )
        return cls(
            count=totals.count,
            total=totals.total,
            total_display=cents_to_display(totals.total),
            average=average_cents(totals.total, totals.count),
            minimum=totals.minimum,
            maximum=totals.maximum,
        )


class TransactionSummaryResponse(BaseModel):
    income: TypeSummaryOut
    expense: TypeSummaryOut
    net: int
    net_display: str
    transaction_count: int
    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def from_totals(
        cls, totals: list[TypeTotals], start_date: date | None, end_date: date | None
    ) -> "TransactionSummaryResponse":
        by_type = {t.type: t for t in totals}
        income = TypeSummaryOut.from_totals(by_type.get(TransactionType.INCOME.value))
        expense = TypeSummaryOut.from_totals(by_type.get(TransactionType.EXPENSE.value))
        net = income.total - expense.total
        return cls(
            income=income,
            expense=expense,
            net=net,
            net_display=cents_to_display(net),
            transaction_count=income.count + expense.count,
            start_date=start_date,
            end_date=end_date,
        )
