"""Admin application service: user management, system stats, cross-user ledger.

Raw SQL lives here (admin queries span users, transactions and categories
and have no other caller). Every write commits or rolls back here and only
then evicts the cached views it made stale.
"""

import logging
import uuid
from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_admin.application.schemas import (
    AdminCreateUserRequest,
    AdminTransactionSort,
    AdminUserOut,
    UserStatistics,
)
from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_common.enums import SortOrder, UserRole
from src.ft_common.errors import SelfModificationError, UserNotFoundError
from src.ft_common.pagination import Pagination, like_pattern, page_offset
from src.ft_gateway.user.schemas import UserInfo
from src.ft_gateway.user.service import UserService
from src.ft_transaction.application.schemas import TransactionOut, TransactionWriteRequest
from src.ft_transaction.application.service import TransactionApplicationService

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, username, email, role, first_name, last_name, is_active, created_at, updated_at"

_USER_FILTER = """
    WHERE (CAST(:role AS TEXT) IS NULL OR role = CAST(:role AS TEXT))
      AND (CAST(:search AS TEXT) IS NULL
           OR username ILIKE CAST(:search AS TEXT)
           OR email ILIKE CAST(:search AS TEXT)
           OR first_name ILIKE CAST(:search AS TEXT)
           OR last_name ILIKE CAST(:search AS TEXT))
"""

_LIST_USERS_SQL = text(f"""
    SELECT {_USER_COLUMNS}
    FROM users
    {_USER_FILTER}
    ORDER BY created_at DESC, id
    LIMIT :limit OFFSET :offset
""")

_COUNT_USERS_SQL = text(f"SELECT COUNT(*) AS cnt FROM users {_USER_FILTER}")

_GET_USER_SQL = text(f"SELECT {_USER_COLUMNS} FROM users WHERE id = :id")

_USER_TX_STATS_SQL = text("""
    SELECT COUNT(*) AS total_transactions,
           COUNT(*) FILTER (WHERE type = 'income')  AS income_transactions,
           COUNT(*) FILTER (WHERE type = 'expense') AS expense_transactions,
           COALESCE(SUM(amount_cents) FILTER (WHERE type = 'income'), 0)  AS total_income,
           COALESCE(SUM(amount_cents) FILTER (WHERE type = 'expense'), 0) AS total_expense
    FROM transactions
    WHERE user_id = :id
""")

_UPDATE_ROLE_SQL = text(f"""
    UPDATE users SET role = :role, updated_at = NOW()
    WHERE id = :id
    RETURNING {_USER_COLUMNS}
""")

# transactions.user_id is ON DELETE CASCADE
_DELETE_USER_SQL = text("DELETE FROM users WHERE id = :id RETURNING id")

_USER_STATS_SQL = text("""
    SELECT COUNT(*) AS total_users,
           COUNT(*) FILTER (WHERE role = 'admin')     AS admin_users,
           COUNT(*) FILTER (WHERE role = 'user')      AS regular_users,
           COUNT(*) FILTER (WHERE role = 'read-only') AS readonly_users,
           COUNT(*) FILTER (WHERE created_at >= NOW() - INTERVAL '30 days') AS new_users_last_month
    FROM users
""")

_TX_STATS_SQL = text("""
    SELECT COUNT(*) AS total_transactions,
           COUNT(*) FILTER (WHERE type = 'income')  AS income_transactions,
           COUNT(*) FILTER (WHERE type = 'expense') AS expense_transactions,
           COALESCE(SUM(amount_cents) FILTER (WHERE type = 'income'), 0)  AS total_income,
           COALESCE(SUM(amount_cents) FILTER (WHERE type = 'expense'), 0) AS total_expense,
           COUNT(*) FILTER (WHERE created_at >= NOW() - INTERVAL '30 days')
               AS new_transactions_last_month
    FROM transactions
""")

_CATEGORY_STATS_SQL = text("""
    SELECT COUNT(*) AS total_categories,
           COUNT(*) FILTER (WHERE type = 'income')  AS income_categories,
           COUNT(*) FILTER (WHERE type = 'expense') AS expense_categories
    FROM categories
""")

_ACTIVE_USERS_SQL = text("""
    SELECT u.id, u.username, u.email, u.role,
           COUNT(t.id)                      AS transaction_count,
           COALESCE(SUM(t.amount_cents), 0) AS total_amount
    FROM users u
    LEFT JOIN transactions t ON t.user_id = u.id
    GROUP BY u.id, u.username, u.email, u.role
    ORDER BY transaction_count DESC, total_amount DESC, u.username
    LIMIT 10
""")

_ALL_TX_FROM = """
    FROM transactions t
    JOIN users u ON u.id = t.user_id
    JOIN categories c ON c.id = t.category_id
    WHERE (CAST(:user_id AS UUID) IS NULL OR t.user_id = CAST(:user_id AS UUID))
      AND (CAST(:type AS TEXT) IS NULL OR t.type = CAST(:type AS TEXT))
      AND (CAST(:category_id AS INTEGER) IS NULL
           OR t.category_id = CAST(:category_id AS INTEGER))
      AND (CAST(:start_date AS DATE) IS NULL
           OR t.transaction_date >= CAST(:start_date AS DATE))
      AND (CAST(:end_date AS DATE) IS NULL
           OR t.transaction_date <= CAST(:end_date AS DATE))
      AND (CAST(:search AS TEXT) IS NULL
           OR t.description ILIKE CAST(:search AS TEXT)
           OR c.name ILIKE CAST(:search AS TEXT)
           OR u.username ILIKE CAST(:search AS TEXT)
           OR u.first_name ILIKE CAST(:search AS TEXT)
           OR u.last_name ILIKE CAST(:search AS TEXT))
"""

_COUNT_ALL_TX_SQL = text("SELECT COUNT(*) AS cnt" + _ALL_TX_FROM)

_SORT_COLUMNS = {
    AdminTransactionSort.TRANSACTION_DATE: "t.transaction_date",
    AdminTransactionSort.AMOUNT: "t.amount_cents",
    AdminTransactionSort.TYPE: "t.type",
    AdminTransactionSort.CATEGORY_NAME: "c.name",
    AdminTransactionSort.USERNAME: "u.username",
}


def _all_tx_sql(column: str, direction: str) -> Any:
    return text(f"""
    SELECT t.id, t.user_id, t.category_id, t.amount_cents, t.type, t.description,
           t.transaction_date, t.created_at, t.updated_at,
           u.username, u.first_name AS user_first_name, u.last_name AS user_last_name,
           c.name AS category_name, c.type AS category_type
    {_ALL_TX_FROM}
    ORDER BY {column} {direction}, t.id {direction}
    LIMIT :limit OFFSET :offset
""")


# Prepared for every (sort column, direction) pair; only enum values reach the SQL.
_ALL_TX_SQL = {
    (sort, order): _all_tx_sql(column, order.value.upper())
    for sort, column in _SORT_COLUMNS.items()
    for order in SortOrder
}


def _counts(row: Any) -> dict[str, int]:
    return {key: int(value) for key, value in row._mapping.items()}


class AdminService:
    def __init__(
        self,
        user_service: UserService | None = None,
        transaction_service: TransactionApplicationService | None = None,
    ) -> None:
        self._users = user_service or UserService()
        self._transactions = transaction_service or TransactionApplicationService()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(
        self, db: AsyncSession, invalidator: CacheInvalidator, body: AdminCreateUserRequest
    ) -> UserInfo:
        try:
            user = await self._users.create_user(
                db,
                body.username,
                body.email,
                body.password,
                body.role,
                body.first_name,
                body.last_name,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Admin created user %s with role %s", user.username, user.role)
        await invalidator.clear_admin()
        return UserInfo.from_model(user)

    async def list_users(
        self,
        db: AsyncSession,
        page: int,
        limit: int,
        role: UserRole | None,
        search: str | None,
    ) -> dict[str, Any]:
        params = {
            "role": role.value if role else None,
            "search": like_pattern(search) if search else None,
        }
        total = (await db.execute(_COUNT_USERS_SQL, params)).scalar_one()
        rows = (
            await db.execute(
                _LIST_USERS_SQL, {**params, "limit": limit, "offset": page_offset(page, limit)}
            )
        ).fetchall()
        return {
            "users": [AdminUserOut.from_row(r).model_dump(mode="json") for r in rows],
            "pagination": Pagination.from_counts(page, limit, int(total)).model_dump(),
        }

    async def get_user(self, db: AsyncSession, user_id: uuid.UUID) -> dict[str, Any]:
        row = (await db.execute(_GET_USER_SQL, {"id": user_id})).fetchone()
        if row is None:
            raise UserNotFoundError(str(user_id))
        stats = (await db.execute(_USER_TX_STATS_SQL, {"id": user_id})).fetchone()
        return {
            "user": AdminUserOut.from_row(row).model_dump(mode="json"),
            "statistics": UserStatistics.from_row(stats).model_dump(),
        }

    async def update_role(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        actor_id: str,
        user_id: uuid.UUID,
        role: UserRole,
    ) -> AdminUserOut:
        try:
            if (await db.execute(_GET_USER_SQL, {"id": user_id})).fetchone() is None:
                raise UserNotFoundError(str(user_id))
            if str(user_id) == actor_id:
                raise SelfModificationError("change the role of")
            row = (
                await db.execute(_UPDATE_ROLE_SQL, {"id": user_id, "role": role.value})
            ).fetchone()
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Role of user %s changed to %s by %s", user_id, role.value, actor_id)
        await invalidator.clear_admin()
        # Cached views of the target were rendered under the old role.
        await invalidator.clear_for_principal(str(user_id))
        return AdminUserOut.from_row(row)

    async def delete_user(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        actor_id: str,
        user_id: uuid.UUID,
    ) -> None:
        try:
            if (await db.execute(_GET_USER_SQL, {"id": user_id})).fetchone() is None:
                raise UserNotFoundError(str(user_id))
            if str(user_id) == actor_id:
                raise SelfModificationError("delete")
            await db.execute(_DELETE_USER_SQL, {"id": user_id})
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %s deleted by %s", user_id, actor_id)
        await invalidator.clear_for_principal(str(user_id))
        await invalidator.clear_user_activity(str(user_id))

    # ------------------------------------------------------------------
    # System
    # ------------------------------------------------------------------

    async def system_stats(self, db: AsyncSession) -> dict[str, Any]:
        users = _counts((await db.execute(_USER_STATS_SQL)).fetchone())
        transactions = _counts((await db.execute(_TX_STATS_SQL)).fetchone())
        categories = _counts((await db.execute(_CATEGORY_STATS_SQL)).fetchone())
        active = (await db.execute(_ACTIVE_USERS_SQL)).fetchall()
        return {
            "user_statistics": users,
            "transaction_statistics": transactions,
            "category_statistics": categories,
            "most_active_users": [
                {
                    "user_id": str(r.id),
                    "username": r.username,
                    "email": r.email,
                    "role": r.role,
                    "transaction_count": int(r.transaction_count),
                    "total_amount": int(r.total_amount),
                }
                for r in active
            ],
        }

    # ------------------------------------------------------------------
    # Transactions across users
    # ------------------------------------------------------------------

    async def create_transaction_for_user(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        actor_id: str,
        user_id: uuid.UUID,
        body: TransactionWriteRequest,
    ) -> tuple[TransactionOut, str]:
        """Returns the new transaction and the owner's username."""
        row = (await db.execute(_GET_USER_SQL, {"id": user_id})).fetchone()
        if row is None:
            raise UserNotFoundError(str(user_id))
        tx = await self._transactions.create_transaction(
            db, invalidator, actor_id, str(user_id), body
        )
        return tx, row.username

    async def list_all_transactions(
        self,
        db: AsyncSession,
        page: int,
        limit: int,
        sort_by: AdminTransactionSort = AdminTransactionSort.TRANSACTION_DATE,
        sort_order: SortOrder = SortOrder.DESC,
        user_id: uuid.UUID | None = None,
        tx_type: str | None = None,
        category_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        params = {
            "user_id": user_id,
            "type": tx_type,
            "category_id": category_id,
            "start_date": start_date,
            "end_date": end_date,
            "search": like_pattern(search) if search else None,
        }
        total = (await db.execute(_COUNT_ALL_TX_SQL, params)).scalar_one()
        rows = (
            await db.execute(
                _ALL_TX_SQL[(sort_by, sort_order)],
                {**params, "limit": limit, "offset": page_offset(page, limit)},
            )
        ).fetchall()
        return {
            "transactions": [
                {
                    "id": r.id,
                    "user_id": str(r.user_id),
                    "username": r.username,
                    "user_first_name": r.user_first_name,
                    "user_last_name": r.user_last_name,
                    "category_id": r.category_id,
                    "category_name": r.category_name,
                    "category_type": r.category_type,
                    "amount_cents": int(r.amount_cents),
                    "type": r.type,
                    "description": r.description,
                    "transaction_date": r.transaction_date.isoformat(),
                    "created_at": r.created_at.isoformat(),
                    "updated_at": r.updated_at.isoformat(),
                }
                for r in rows
            ],
            "pagination": Pagination.from_counts(page, limit, int(total)).model_dump(),
        }
