"""Domain models for ft_transaction — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class Transaction:
    id: int
    user_id: str
    category_id: int
    amount_cents: int
    type: str
    description: str | None
    transaction_date: date
    created_at: datetime
    updated_at: datetime
    category_name: str | None = None
    category_color: str | None = None
    category_icon: str | None = None


@dataclass
class TransactionFilter:
    """Optional list filters; None means "no constraint"."""

    user_id: str
    type: str | None = None
    category_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
    search: str | None = None


@dataclass
class TypeTotals:
    """Aggregates for one transaction type over a date range."""

    type: str
    count: int
    total: int
    minimum: int
    maximum: int
