"""Unit tests for AdminService with a mocked session."""

import uuid
from datetime import UTC, date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.ft_admin.application.schemas import AdminTransactionSort, UserStatistics
from src.ft_admin.application.service import _ALL_TX_SQL, AdminService
from src.ft_common.enums import SortOrder, TransactionType, UserRole
from src.ft_common.errors import SelfModificationError, UserNotFoundError
from src.ft_transaction.application.schemas import TransactionWriteRequest

ACTOR = str(uuid.uuid4())


def _user_row(user_id: uuid.UUID, role: str = "user") -> SimpleNamespace:
    now = datetime.now(UTC)
    return SimpleNamespace(
        id=user_id,
        username="bob",
        email="bob@example.com",
        role=role,
        first_name=None,
        last_name=None,
        is_active=True,
        created_at=now,
        updated_at=now,
    )


def _result(row: object = None, rows: list | None = None, scalar: object = None) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    result.fetchall.return_value = rows or []
    result.scalar_one.return_value = scalar
    return result


def _session(*results: MagicMock) -> AsyncMock:
    db = AsyncMock()
    db.execute = AsyncMock(side_effect=list(results))
    return db


class TestUpdateRole:
    async def test_changes_role_and_evicts(self) -> None:
        target = uuid.uuid4()
        db = _session(_result(_user_row(target)), _result(_user_row(target, "read-only")))
        invalidator = AsyncMock()

        out = await AdminService().update_role(db, invalidator, ACTOR, target, UserRole.READ_ONLY)

        assert out.role == "read-only"
        db.commit.assert_awaited_once()
        invalidator.clear_admin.assert_awaited_once()
        invalidator.clear_for_principal.assert_awaited_once_with(str(target))

    async def test_missing_user_reported_before_self_check(self) -> None:
        db = _session(_result(None))
        invalidator = AsyncMock()

        with pytest.raises(UserNotFoundError):
            await AdminService().update_role(
                db, invalidator, ACTOR, uuid.UUID(ACTOR), UserRole.USER
            )
        db.rollback.assert_awaited_once()
        invalidator.clear_admin.assert_not_awaited()

    async def test_cannot_change_own_role(self) -> None:
        me = uuid.UUID(ACTOR)
        db = _session(_result(_user_row(me, "admin")))
        invalidator = AsyncMock()

        with pytest.raises(SelfModificationError, match="change the role of"):
            await AdminService().update_role(db, invalidator, ACTOR, me, UserRole.USER)
        db.commit.assert_not_awaited()


class TestDeleteUser:
    async def test_deletes_and_clears_everything_for_user(self) -> None:
        target = uuid.uuid4()
        db = _session(_result(_user_row(target)), _result())
        invalidator = AsyncMock()

        await AdminService().delete_user(db, invalidator, ACTOR, target)

        db.commit.assert_awaited_once()
        invalidator.clear_for_principal.assert_awaited_once_with(str(target))
        invalidator.clear_user_activity.assert_awaited_once_with(str(target))

    async def test_cannot_delete_self(self) -> None:
        me = uuid.UUID(ACTOR)
        db = _session(_result(_user_row(me, "admin")))
        invalidator = AsyncMock()

        with pytest.raises(SelfModificationError, match="delete"):
            await AdminService().delete_user(db, invalidator, ACTOR, me)
        db.rollback.assert_awaited_once()
        invalidator.clear_user_activity.assert_not_awaited()


class TestReads:
    async def test_list_users_paginates(self) -> None:
        rows = [_user_row(uuid.uuid4()) for _ in range(2)]
        db = _session(_result(scalar=12), _result(rows=rows))

        result = await AdminService().list_users(db, page=2, limit=10, role=None, search="bo")

        params = db.execute.await_args_list[1].args[1]
        assert params["search"] == "%bo%"
        assert params["offset"] == 10
        assert len(result["users"]) == 2
        assert result["pagination"]["total_pages"] == 2

    async def test_get_user_with_statistics(self) -> None:
        target = uuid.uuid4()
        stats = SimpleNamespace(
            total_transactions=3,
            income_transactions=1,
            expense_transactions=2,
            total_income=10000,
            total_expense=2500,
        )
        db = _session(_result(_user_row(target)), _result(stats))

        result = await AdminService().get_user(db, target)

        assert result["user"]["user_id"] == str(target)
        assert result["statistics"]["net_amount"] == 7500
        assert result["statistics"]["net_amount_display"] == "$75.00"

    async def test_get_missing_user(self) -> None:
        with pytest.raises(UserNotFoundError):
            await AdminService().get_user(_session(_result(None)), uuid.uuid4())

    async def test_list_all_transactions_uses_prepared_sort(self) -> None:
        db = _session(_result(scalar=0), _result(rows=[]))

        await AdminService().list_all_transactions(
            db, 1, 20, AdminTransactionSort.AMOUNT, SortOrder.ASC, search="rent"
        )

        stmt = db.execute.await_args_list[1].args[0]
        assert stmt is _ALL_TX_SQL[(AdminTransactionSort.AMOUNT, SortOrder.ASC)]
        assert "ORDER BY t.amount_cents ASC, t.id ASC" in str(stmt)


class TestCreateTransactionForUser:
    async def test_delegates_to_transaction_service(self) -> None:
        target = uuid.uuid4()
        db = _session(_result(_user_row(target)))
        tx_service = AsyncMock()
        tx_service.create_transaction.return_value = "tx"
        body = TransactionWriteRequest(
            category_id=1,
            amount_cents=100,
            type=TransactionType.INCOME,
            transaction_date=date(2026, 1, 1),
        )
        invalidator = AsyncMock()

        tx, username = await AdminService(transaction_service=tx_service).create_transaction_for_user(
            db, invalidator, ACTOR, target, body
        )

        assert (tx, username) == ("tx", "bob")
        tx_service.create_transaction.assert_awaited_once_with(
            db, invalidator, ACTOR, str(target), body
        )

    async def test_unknown_user(self) -> None:
        with pytest.raises(UserNotFoundError):
            await AdminService(transaction_service=AsyncMock()).create_transaction_for_user(
                _session(_result(None)), AsyncMock(), ACTOR, uuid.uuid4(), MagicMock()
            )


def test_user_statistics_negative_net() -> None:
    row = SimpleNamespace(
        total_transactions=1,
        income_transactions=0,
        expense_transactions=1,
        total_income=0,
        total_expense=1234,
    )
    stats = UserStatistics.from_row(row)
    assert stats.net_amount_display == "-$12.34"
