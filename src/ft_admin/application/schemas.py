"""Request/response schemas for the admin API."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

from src.ft_common.cents import cents_to_display
from src.ft_common.enums import UserRole
from src.ft_gateway.user.schemas import RegisterRequest


class AdminCreateUserRequest(RegisterRequest):
    role: UserRole = UserRole.USER


class RoleUpdateRequest(BaseModel):
    role: UserRole


class AdminTransactionSort(str, Enum):
    TRANSACTION_DATE = "transaction_date"
    AMOUNT = "amount"
    TYPE = "type"
    CATEGORY_NAME = "category_name"
    USERNAME = "username"


class AdminUserOut(BaseModel):
    user_id: str
    username: str
    email: str
    role: str
    first_name: str | None
    last_name: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Any) -> "AdminUserOut":
        return cls(
            user_id=str(row.id),
            username=row.username,
            email=row.email,
            role=row.role,
            first_name=row.first_name,
            last_name=row.last_name,
            is_active=row.is_active,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class UserStatistics(BaseModel):
    total_transactions: int
    income_transactions: int
    expense_transactions: int
    total_income: int
    total_expense: int
    net_amount: int
    net_amount_display: str

    @classmethod
    def from_row(cls, row: Any) -> "UserStatistics":
        net = int(row.total_income) - int(row.total_expense)
        return cls(
            total_transactions=int(row.total_transactions),
            income_transactions=int(row.income_transactions),
            expense_transactions=int(row.expense_transactions),
            total_income=int(row.total_income),
            total_expense=int(row.total_expense),
            net_amount=net,
            net_amount_display=cents_to_display(net),
        )
