"""CategoryApplicationService — category lookups and admin maintenance.

Reads are plain repository calls. Writes commit (or roll back) here and
only then evict cached category and analytics views; a failed write leaves
the cache untouched.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_category.application.schemas import (
    CategoryOut,
    CategoryStatsItem,
    CategoryWriteRequest,
)
from src.ft_category.domain.repository import CategoryRepositoryProtocol
from src.ft_category.infrastructure.persistence import CategoryRepository
from src.ft_common.errors import (
    CategoryExistsError,
    CategoryInUseError,
    CategoryNotFoundError,
)

logger = logging.getLogger(__name__)


class CategoryApplicationService:
    def __init__(self, repo: CategoryRepositoryProtocol | None = None) -> None:
        self._repo: CategoryRepositoryProtocol = repo or CategoryRepository()

    async def list_categories(
        self, db: AsyncSession, category_type: str | None
    ) -> list[CategoryOut]:
        categories = await self._repo.list_categories(db, category_type)
        return [CategoryOut.from_domain(c) for c in categories]

    async def get_category(self, db: AsyncSession, category_id: int) -> CategoryOut:
        category = await self._repo.get_category_by_id(db, category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return CategoryOut.from_domain(category)

    async def get_stats(self, db: AsyncSession) -> list[CategoryStatsItem]:
        usage = await self._repo.list_usage(db)
        return [CategoryStatsItem.from_usage(u) for u in usage]

    async def create_category(
        self, db: AsyncSession, invalidator: CacheInvalidator, body: CategoryWriteRequest
    ) -> CategoryOut:
        try:
            if await self._repo.get_category_by_name(db, body.name) is not None:
                raise CategoryExistsError(body.name)
            category = await self._repo.insert_category(
                db, body.name, body.type.value, body.color, body.icon
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Category created: id=%s name=%s", category.id, category.name)
        await self._evict(invalidator)
        return CategoryOut.from_domain(category)

    async def update_category(
        self,
        db: AsyncSession,
        invalidator: CacheInvalidator,
        category_id: int,
        body: CategoryWriteRequest,
    ) -> CategoryOut:
        try:
            if await self._repo.get_category_by_id(db, category_id) is None:
                raise CategoryNotFoundError(category_id)
            clash = await self._repo.get_category_by_name(db, body.name)
            if clash is not None and clash.id != category_id:
                raise CategoryExistsError(body.name)
            category = await self._repo.update_category(
                db, category_id, body.name, body.type.value, body.color, body.icon
            )
            if category is None:
                raise CategoryNotFoundError(category_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await self._evict(invalidator)
        # Transaction payloads carry the category name, color and icon.
        await invalidator.clear_transactions()
        await invalidator.clear_admin()
        return CategoryOut.from_domain(category)

    async def delete_category(
        self, db: AsyncSession, invalidator: CacheInvalidator, category_id: int
    ) -> None:
        try:
            if await self._repo.get_category_by_id(db, category_id) is None:
                raise CategoryNotFoundError(category_id)
            if await self._repo.count_transactions(db, category_id) > 0:
                raise CategoryInUseError(category_id)
            if not await self._repo.delete_category(db, category_id):
                raise CategoryNotFoundError(category_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Category deleted: id=%s", category_id)
        await self._evict(invalidator)

    @staticmethod
    async def _evict(invalidator: CacheInvalidator) -> None:
        # Category names and types are embedded in analytics payloads too.
        await invalidator.clear_categories()
        await invalidator.clear_analytics()
