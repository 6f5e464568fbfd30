"""CacheInvalidator — pattern-scoped eviction called by mutating operations.

Contract for callers: invoke the matching ``clear_*`` only after the
mutation has committed, never when it failed. Stale reads are bounded by
that discipline plus entry TTLs; a GET that started before the clear and
finishes after it can still re-populate an entry until its TTL runs out.

Every method returns the number of keys deleted; an unavailable store is a
no-op returning 0.
"""

import logging

from src.ft_cache.domain.keys import (
    ADMIN_FRAGMENT,
    ANALYTICS_FRAGMENT,
    ANY_PRINCIPAL,
    CATEGORIES_FRAGMENT,
    CATEGORY_STATS_FRAGMENT,
    TRANSACTIONS_FRAGMENT,
    domain_pattern,
    principal_pattern,
    subject_pattern,
)
from src.ft_cache.domain.store import KeyValueStore

logger = logging.getLogger("ft.cache")


class CacheInvalidator:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    async def clear_by_pattern(self, pattern: str) -> int:
        if not self._store.is_available():
            logger.debug("Cache store unavailable - skipping clear for %s", pattern)
            return 0
        cleared = await self._store.delete_matching(pattern)
        if cleared:
            logger.info("Cleared %d cache entries matching pattern: %s", cleared, pattern)
        return cleared

    async def clear_for_principal(self, principal_id: str) -> int:
        return await self.clear_by_pattern(principal_pattern(str(principal_id)))

    async def clear_for_domain(
        self, fragment: str, principal_id: str = ANY_PRINCIPAL
    ) -> int:
        return await self.clear_by_pattern(domain_pattern(fragment, str(principal_id)))

    # Resource-area shortcuts

    async def clear_transactions(self, principal_id: str = ANY_PRINCIPAL) -> int:
        return await self.clear_for_domain(TRANSACTIONS_FRAGMENT, principal_id)

    async def clear_analytics(self, principal_id: str = ANY_PRINCIPAL) -> int:
        return await self.clear_for_domain(ANALYTICS_FRAGMENT, principal_id)

    async def clear_categories(self) -> int:
        return await self.clear_for_domain(CATEGORIES_FRAGMENT)

    async def clear_admin(self) -> int:
        """Admin listings aggregate every user, so they are cleared for all principals."""
        return await self.clear_for_domain(ADMIN_FRAGMENT)

    async def clear_user_activity(self, user_id: str) -> int:
        """Everything a change to one user's transactions can make stale.

        Covers the owner's transaction and analytics views, admin views
        fetched with ``?user_id=<owner>``, and the cross-user admin listings
        and category statistics.
        """
        owner = str(user_id)
        return (
            await self.clear_transactions(owner)
            + await self.clear_analytics(owner)
            + await self.clear_by_pattern(subject_pattern(owner))
            + await self.clear_admin()
            + await self.clear_for_domain(CATEGORY_STATS_FRAGMENT)
        )
