"""TransactionApplicationService — per-user transaction ledger.

Reads are scoped to one owner (admins pick the owner via user_id, resolved
by the router). Writes validate the category, commit or roll back here,
and only after a successful commit evict the owner's cached views.
"""

import logging
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.errors import (
    CategoryTypeMismatchError,
    InvalidCategoryError,
    TargetUserNotFoundError,
    TransactionNotFoundError,
)
from src.ft_common.pagination import Pagination, page_offset
from src.ft_transaction.application.schemas import (
    TransactionListResponse,
    TransactionOut,
    TransactionSummaryResponse,
    TransactionWriteRequest,
)
from src.ft_transaction.domain.models import Transaction, TransactionFilter
from src.ft_transaction.domain.repository import TransactionRepositoryProtocol
from src.ft_transaction.infrastructure.persistence import TransactionRepository

logger = logging.getLogger(__name__)


class TransactionApplicationService:
    def __init__(
        self,
        repo: TransactionRepositoryProtocol | None = None,
        category_repo: CategoryRepositoryProtocol | None = None,
    ) -> None:
        self._repo: TransactionRepositoryProtocol = repo or TransactionRepository()
        self._categories: CategoryRepositoryProtocol = category_repo or CategoryRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_transactions(
        self, db: AsyncSession, flt: TransactionFilter, page: int, limit: int
    ) -> TransactionListResponse:
        total = await self._repo.count_transactions(db, flt)
        rows = await self._repo.list_transactions(db, flt, page_offset(page, limit), limit)
        return TransactionListResponse(
            transactions=[TransactionOut.from_domain(t) for t in rows],
            pagination=Pagination.from_counts(page, limit, total),
        )

    async def get_summary(
        self,
        db: AsyncSession,
        user_id: str,
        start_date: date | None,
        end_date: date | None,
    ) -> TransactionSummaryResponse:
        totals = await self._repo.totals_by_type(db, user_id, start_date, end_date)
        return TransactionSummaryResponse.from_totals(totals, start_date, end_date)

    async def get_transaction(
        self, db: AsyncSession, actor_id: str, is_admin: bool, transaction_id: int
    ) -> TransactionOut:
        tx = await self._load_visible(db, actor_id, is_admin, transaction_id)
        return TransactionOut.from_domain(tx)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_transaction(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        actor_id: str,
        owner_id: str,
        body: TransactionWriteRequest,
    ) -> TransactionOut:
        try:
            if owner_id != actor_id and not await self._repo.user_exists(db, owner_id):
                raise TargetUserNotFoundError(owner_id)
            await self._check_category(db, body.category_id, body.type.value)
            tx = await self._repo.insert_transaction(
                db,
                owner_id,
                body.category_id,
                body.amount_cents,
                body.type.value,
                body.description,
                body.transaction_date,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Transaction created: id=%s user=%s by=%s", tx.id, owner_id, actor_id)
        await invalidator.clear_user_activity(owner_id)
        return TransactionOut.from_domain(tx)

    async def update_transaction(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        actor_id: str,
        is_admin: bool,
        transaction_id: int,
        body: TransactionWriteRequest,
    ) -> TransactionOut:
        try:
            existing = await self._load_visible(db, actor_id, is_admin, transaction_id)
            await self._check_category(db, body.category_id, body.type.value)
            tx = await self._repo.update_transaction(
                db,
                transaction_id,
                body.category_id,
                body.amount_cents,
                body.type.value,
                body.description,
                body.transaction_date,
            )
            if tx is None:
                raise TransactionNotFoundError(transaction_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await invalidator.clear_user_activity(existing.user_id)
        return TransactionOut.from_domain(tx)

    async def delete_transaction(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        actor_id: str,
        is_admin: bool,
        transaction_id: int,
    ) -> None:
        try:
            existing = await self._load_visible(db, actor_id, is_admin, transaction_id)
            if not await self._repo.delete_transaction(db, transaction_id):
                raise TransactionNotFoundError(transaction_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Transaction deleted: id=%s user=%s by=%s", transaction_id, existing.user_id, actor_id
        )
        await invalidator.clear_user_activity(existing.user_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load_visible(
        self, db: AsyncSession, actor_id: str, is_admin: bool, transaction_id: int
    ) -> Transaction:
        """Other users' transactions look exactly like missing ones."""
        tx = await self._repo.get_transaction(db, transaction_id)
        if tx is None or (tx.user_id != actor_id and not is_admin):
            raise TransactionNotFoundError(transaction_id)
        return tx

    async def _check_category(self, db: AsyncSession, category_id: int, tx_type: str) -> None:
        category = await self._categories.get_category_by_id(db, category_id)
        if category is None:
            raise InvalidCategoryError(category_id)
        if category.type != tx_type:
            raise CategoryTypeMismatchError(category.type, tx_type)
