"""Domain models for ft_analytics — pure dataclasses, no business logic."""

from dataclasses import dataclass


@dataclass
class TypeBucket:
    """One GROUP BY (bucket, type) row: total and count of one type in one bucket."""

    label: int | str
    type: str
    total: int
    count: int


@dataclass
class PeriodTotals:
    label: int | str
    income: int = 0
    expense: int = 0
    income_count: int = 0
    expense_count: int = 0

    @property
    def net(self) -> int:
        return self.income - self.expense


@dataclass
class CategoryTotals:
    category_id: int
    name: str
    color: str | None
    icon: str | None
    total: int
    count: int
    minimum: int
    maximum: int


@dataclass
class TopCategory:
    name: str
    color: str | None
    icon: str | None
    type: str
    total: int
    count: int
