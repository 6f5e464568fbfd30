"""Pydantic schemas for ft_category requests and responses."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, Field

from src.ft_category.domain.models import Category, CategoryUsage
from src.ft_common.cents import cents_to_display
from src.ft_common.enums import TransactionType

CategoryName = Annotated[
    str, Field(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9 &_-]+$")
]
HexColor = Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$")]


class CategoryWriteRequest(BaseModel):
    """Body for both POST and PUT; PUT replaces every field."""

    name: CategoryName
    type: TransactionType
    color: HexColor | None = None
    icon: str | None = Field(None, max_length=50)


class CategoryOut(BaseModel):
    id: int
    name: str
    type: str
    color: str | None
    icon: str | None
    created_at: datetime

    @classmethod
    def from_domain(cls, c: Category) -> "CategoryOut":
        return cls(
            id=c.id,
            name=c.name,
            type=c.type,
            color=c.color,
            icon=c.icon,
            created_at=c.created_at,
        )


class CategoryStatsItem(CategoryOut):
    transaction_count: int
    total_amount: int
    total_amount_display: str

    @classmethod
    def from_usage(cls, u: CategoryUsage) -> "CategoryStatsItem":
        base = CategoryOut.from_domain(u.category).model_dump()
        return cls(
            **base,
            transaction_count=u.transaction_count,
            total_amount=u.total_amount,
            total_amount_display=cents_to_display(u.total_amount),
        )
