"""KeyValueStore Protocol — the cache's only view of the remote store.

The Redis adapter implements it for production; unit tests inject an
in-memory fake. Implementations never raise for store-side failures:
they report them through return values and ``is_available()``.
"""

from typing import Protocol


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool: ...

    async def delete_matching(self, pattern: str) -> int: ...

    def is_available(self) -> bool: ...


class DisabledStore:
    """Always unavailable: the cache layer degrades to pass-through."""

    async def get(self, key: str) -> str | None:
        return None

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool:
        return False

    async def delete_matching(self, pattern: str) -> int:
        return 0

    def is_available(self) -> bool:
        return False
