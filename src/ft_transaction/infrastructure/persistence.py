"""TransactionRepository — concrete implementation of TransactionRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: the CALLER (application service) commits or rolls back.
Writes return the bare row; category fields are filled by a follow-up read.
"""

from datetime import date
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_common.pagination import like_pattern
from src.ft_transaction.domain.models import Transaction, TransactionFilter, TypeTotals

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SELECT = """
    SELECT t.id, t.user_id, t.category_id, t.amount_cents, t.type, t.description,
           t.transaction_date, t.created_at, t.updated_at,
           c.name AS category_name, c.color AS category_color, c.icon AS category_icon
    FROM transactions t
    JOIN categories c ON c.id = t.category_id
"""

_FILTER = """
    WHERE t.user_id = CAST(:user_id AS UUID)
      AND (CAST(:type AS TEXT) IS NULL OR t.type = CAST(:type AS TEXT))
      AND (CAST(:category_id AS INTEGER) IS NULL
           OR t.category_id = CAST(:category_id AS INTEGER))
      AND (CAST(:start_date AS DATE) IS NULL
           OR t.transaction_date >= CAST(:start_date AS DATE))
      AND (CAST(:end_date AS DATE) IS NULL
           OR t.transaction_date <= CAST(:end_date AS DATE))
      AND (CAST(:search AS TEXT) IS NULL
           OR t.description ILIKE CAST(:search AS TEXT)
           OR c.name ILIKE CAST(:search AS TEXT))
"""

_LIST_SQL = text(
    _SELECT
    + _FILTER
    + """
    ORDER BY t.transaction_date DESC, t.created_at DESC, t.id DESC
    LIMIT :limit OFFSET :offset
"""
)

_COUNT_SQL = text(
    """
    SELECT COUNT(*) AS cnt
    FROM transactions t
    JOIN categories c ON c.id = t.category_id
"""
    + _FILTER
)

_GET_SQL = text(_SELECT + " WHERE t.id = :id")

_INSERT_SQL = text("""
    INSERT INTO transactions
        (user_id, category_id, amount_cents, type, description, transaction_date)
    VALUES
        (CAST(:user_id AS UUID), :category_id, :amount_cents, :type, :description,
         :transaction_date)
    RETURNING id
""")

_UPDATE_SQL = text("""
    UPDATE transactions
    SET category_id = :category_id,
        amount_cents = :amount_cents,
        type = :type,
        description = :description,
        transaction_date = :transaction_date,
        updated_at = NOW()
    WHERE id = :id
    RETURNING id
""")

_DELETE_SQL = text("DELETE FROM transactions WHERE id = :id RETURNING id")

_TOTALS_SQL = text("""
    SELECT type,
           COUNT(*)                    AS cnt,
           COALESCE(SUM(amount_cents), 0) AS total,
           COALESCE(MIN(amount_cents), 0) AS minimum,
           COALESCE(MAX(amount_cents), 0) AS maximum
    FROM transactions
    WHERE user_id = CAST(:user_id AS UUID)
      AND (CAST(:start_date AS DATE) IS NULL OR transaction_date >= CAST(:start_date AS DATE))
      AND (CAST(:end_date AS DATE) IS NULL OR transaction_date <= CAST(:end_date AS DATE))
    GROUP BY type
""")

_USER_EXISTS_SQL = text("SELECT 1 FROM users WHERE id = CAST(:user_id AS UUID)")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_transaction(row: Any) -> Transaction:
    return Transaction(
        id=row.id,
        user_id=str(row.user_id),
        category_id=row.category_id,
        amount_cents=int(row.amount_cents),
        type=row.type,
        description=row.description,
        transaction_date=row.transaction_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
        category_name=row.category_name,
        category_color=row.category_color,
        category_icon=row.category_icon,
    )


def _filter_params(flt: TransactionFilter) -> dict[str, Any]:
    return {
        "user_id": flt.user_id,
        "type": flt.type,
        "category_id": flt.category_id,
        "start_date": flt.start_date,
        "end_date": flt.end_date,
        "search": like_pattern(flt.search) if flt.search else None,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TransactionRepository:
    async def list_transactions(
        self, db: AsyncSession, flt: TransactionFilter, offset: int, limit: int
    ) -> list[Transaction]:
        params = {**_filter_params(flt), "offset": offset, "limit": limit}
        result = await db.execute(_LIST_SQL, params)
        return [_row_to_transaction(r) for r in result.fetchall()]

    async def count_transactions(self, db: AsyncSession, flt: TransactionFilter) -> int:
        row = (await db.execute(_COUNT_SQL, _filter_params(flt))).fetchone()
        return int(row.cnt) if row else 0

    async def get_transaction(
        self, db: AsyncSession, transaction_id: int
    ) -> Transaction | None:
        row = (await db.execute(_GET_SQL, {"id": transaction_id})).fetchone()
        return _row_to_transaction(row) if row else None

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        category_id: int,
        amount_cents: int,
        tx_type: str,
        description: str | None,
        transaction_date: date,
    ) -> Transaction:
        row = (
            await db.execute(
                _INSERT_SQL,
                {
                    "user_id": user_id,
                    "category_id": category_id,
                    "amount_cents": amount_cents,
                    "type": tx_type,
                    "description": description,
                    "transaction_date": transaction_date,
                },
            )
        ).fetchone()
        created = await self.get_transaction(db, row.id)  # type: ignore[union-attr]
        assert created is not None
        return created

    async def update_transaction(
        self,
        db: AsyncSession,
        transaction_id: int,
        category_id: int,
        amount_cents: int,
        tx_type: str,
        description: str | None,
        transaction_date: date,
    ) -> Transaction | None:
        row = (
            await db.execute(
                _UPDATE_SQL,
                {
                    "id": transaction_id,
                    "category_id": category_id,
                    "amount_cents": amount_cents,
                    "type": tx_type,
                    "description": description,
                    "transaction_date": transaction_date,
                },
            )
        ).fetchone()
        if row is None:
            return None
        return await self.get_transaction(db, transaction_id)

    async def delete_transaction(self, db: AsyncSession, transaction_id: int) -> bool:
        row = (await db.execute(_DELETE_SQL, {"id": transaction_id})).fetchone()
        return row is not None

    async def totals_by_type(
        self,
        db: AsyncSession,
        user_id: str,
        start_date: date | None,
        end_date: date | None,
    ) -> list[TypeTotals]:
        result = await db.execute(
            _TOTALS_SQL, {"user_id": user_id, "start_date": start_date, "end_date": end_date}
        )
        return [
            TypeTotals(
                type=r.type,
                count=int(r.cnt),
                total=int(r.total),
                minimum=int(r.minimum),
                maximum=int(r.maximum),
            )
            for r in result.fetchall()
        ]

    async def user_exists(self, db: AsyncSession, user_id: str) -> bool:
        row = (await db.execute(_USER_EXISTS_SQL, {"user_id": user_id})).fetchone()
        return row is not None
