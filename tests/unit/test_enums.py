"""Tests for ft_common.enums — all enum values must match DB CHECK constraints."""

from src.ft_common.enums import (
    DashboardPeriod,
    SortOrder,
    TransactionType,
    TrendPeriod,
    UserRole,
)


class TestAllEnumsAreStr:
    """All enums inherit from (str, Enum) for JSON serialization."""

    def test_user_role_is_str(self) -> None:
        assert isinstance(UserRole.ADMIN, str)
        assert UserRole.READ_ONLY == "read-only"

    def test_transaction_type_is_str(self) -> None:
        assert isinstance(TransactionType.INCOME, str)
        assert TransactionType.EXPENSE == "expense"


class TestUserRole:
    def test_all_values(self) -> None:
        assert {r.value for r in UserRole} == {"admin", "user", "read-only"}


class TestTransactionType:
    def test_all_values(self) -> None:
        assert {t.value for t in TransactionType} == {"income", "expense"}


class TestPeriods:
    def test_trend_period(self) -> None:
        assert {p.value for p in TrendPeriod} == {"daily", "weekly", "monthly", "yearly"}

    def test_dashboard_period(self) -> None:
        assert {p.value for p in DashboardPeriod} == {"week", "month", "year", "all"}

    def test_sort_order(self) -> None:
        assert {s.value for s in SortOrder} == {"asc", "desc"}
