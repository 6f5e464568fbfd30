"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ft_category.domain.models import Category, CategoryUsage


class CategoryRepositoryProtocol(Protocol):
    async def list_categories(
        self, db: AsyncSession, category_type: str | None
    ) -> list[Category]: ...

    async def get_category_by_id(
        self, db: AsyncSession, category_id: int
    ) -> Category | None: ...

    async def get_category_by_name(
        self, db: AsyncSession, name: str
    ) -> Category | None: ...

    async def insert_category(
        self, db: AsyncSession, name: str, category_type: str, color: str | None, icon: str | None
    ) -> Category: ...

    async def update_category(
        self,
        db: AsyncSession,
        category_id: int,
        name: str,
        category_type: str,
        color: str | None,
        icon: str | None,
    ) -> Category | None: ...

    async def delete_category(self, db: AsyncSession, category_id: int) -> bool: ...

    async def count_transactions(self, db: AsyncSession, category_id: int) -> int: ...

    async def list_usage(self, db: AsyncSession) -> list[CategoryUsage]: ...
