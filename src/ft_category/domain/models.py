"""Domain models for ft_category — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Category:
    id: int
    name: str
    type: str
    color: str | None
    icon: str | None
    created_at: datetime


@dataclass
class CategoryUsage:
    """Category with aggregated usage over all users' transactions."""

    category: Category
    transaction_count: int
    total_amount: int
