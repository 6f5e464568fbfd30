"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    READ_ONLY = "read-only"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TrendPeriod(str, Enum):
    """Bucket size for /analytics/trends."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class DashboardPeriod(str, Enum):
    """Look-back window for /analytics/dashboard."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    ALL = "all"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
