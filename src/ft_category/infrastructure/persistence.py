"""CategoryRepository — concrete implementation of CategoryRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.domain.models import Category, CategoryUsage

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = "id, name, type, color, icon, created_at"

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM categories
    WHERE CAST(:type AS TEXT) IS NULL OR type = CAST(:type AS TEXT)
    ORDER BY type, name
""")

_GET_BY_ID_SQL = text(f"SELECT {_COLUMNS} FROM categories WHERE id = :id")

_GET_BY_NAME_SQL = text(f"SELECT {_COLUMNS} FROM categories WHERE LOWER(name) = LOWER(:name)")

_INSERT_SQL = text(f"""
    INSERT INTO categories (name, type, color, icon)
    VALUES (:name, :type, :color, :icon)
    RETURNING {_COLUMNS}
""")

_UPDATE_SQL = text(f"""
    UPDATE categories
    SET name = :name, type = :type, color = :color, icon = :icon
    WHERE id = :id
    RETURNING {_COLUMNS}
""")

_DELETE_SQL = text("DELETE FROM categories WHERE id = :id RETURNING id")

_COUNT_TRANSACTIONS_SQL = text(
    "SELECT COUNT(*) AS cnt FROM transactions WHERE category_id = :id"
)

_USAGE_SQL = text("""
    SELECT c.id, c.name, c.type, c.color, c.icon, c.created_at,
           COUNT(t.id)                      AS transaction_count,
           COALESCE(SUM(t.amount_cents), 0) AS total_amount
    FROM categories c
    LEFT JOIN transactions t ON t.category_id = c.id
    GROUP BY c.id, c.name, c.type, c.color, c.icon, c.created_at
    ORDER BY transaction_count DESC, c.name
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_category(row: object) -> Category:
    return Category(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        type=row.type,  # type: ignore[attr-defined]
        color=row.color,  # type: ignore[attr-defined]
        icon=row.icon,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CategoryRepository:
    async def list_categories(
        self, db: AsyncSession, category_type: str | None
    ) -> list[Category]:
        result = await db.execute(_LIST_SQL, {"type": category_type})
        return [_row_to_category(r) for r in result.fetchall()]

    async def get_category_by_id(
        self, db: AsyncSession, category_id: int
    ) -> Category | None:
        row = (await db.execute(_GET_BY_ID_SQL, {"id": category_id})).fetchone()
        return _row_to_category(row) if row else None

    async def get_category_by_name(self, db: AsyncSession, name: str) -> Category | None:
        row = (await db.execute(_GET_BY_NAME_SQL, {"name": name})).fetchone()
        return _row_to_category(row) if row else None

    async def insert_category(
        self, db: AsyncSession, name: str, category_type: str, color: str | None, icon: str | None
    ) -> Category:
        row = (
            await db.execute(
                _INSERT_SQL, {"name": name, "type": category_type, "color": color, "icon": icon}
            )
        ).fetchone()
        return _row_to_category(row)

    async def update_category(
        self,
        db: AsyncSession,
        category_id: int,
        name: str,
        category_type: str,
        color: str | None,
        icon: str | None,
    ) -> Category | None:
        row = (
            await db.execute(
                _UPDATE_SQL,
                {
                    "id": category_id,
                    "name": name,
                    "type": category_type,
                    "color": color,
                    "icon": icon,
                },
            )
        ).fetchone()
        return _row_to_category(row) if row else None

    async def delete_category(self, db: AsyncSession, category_id: int) -> bool:
        row = (await db.execute(_DELETE_SQL, {"id": category_id})).fetchone()
        return row is not None

    async def count_transactions(self, db: AsyncSession, category_id: int) -> int:
        row = (await db.execute(_COUNT_TRANSACTIONS_SQL, {"id": category_id})).fetchone()
        return int(row.cnt) if row else 0  # type: ignore[union-attr]

    async def list_usage(self, db: AsyncSession) -> list[CategoryUsage]:
        result = await db.execute(_USAGE_SQL)
        return [
            CategoryUsage(
                category=_row_to_category(r),
                transaction_count=int(r.transaction_count),
                total_amount=int(r.total_amount),
            )
            for r in result.fetchall()
        ]
