"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_transaction.domain.models import Transaction, TransactionFilter, TypeTotals


class TransactionRepositoryProtocol(Protocol):
    async def list_transactions(
        self, db: AsyncSession, flt: TransactionFilter, offset: int, limit: int
    ) -> list[Transaction]: ...

    async def count_transactions(self, db: AsyncSession, flt: TransactionFilter) -> int: ...

    async def get_transaction(
        self, db: AsyncSession, transaction_id: int
    ) -> Transaction | None: ...

    async def insert_transaction(
        self,
        db: AsyncSession,
        user_id: str,
        category_id: int,
        amount_cents: int,
        tx_type: str,
        description: str | None,
        transaction_date: date,
    ) -> Transaction: ...

    async def update_transaction(
        self,
        db: AsyncSession,
        transaction_id: int,
        category_id: int,
        amount_cents: int,
        tx_type: str,
        description: str | None,
        transaction_date: date,
    ) -> Transaction | None: ...

    async def delete_transaction(self, db: AsyncSession, transaction_id: int) -> bool: ...

    async def totals_by_type(
        self,
        db: AsyncSession,
        user_id: str,
        start_date: date | None,
        end_date: date | None,
    ) -> list[TypeTotals]: ...

    async def user_exists(self, db: AsyncSession, user_id: str) -> bool: ...
