"""RedisKeyValueStore — concrete KeyValueStore over redis.asyncio.

Every store failure is absorbed here: connection errors and timeouts mark
the store unavailable and the caller sees a miss / False / 0. While
unavailable, ``is_available()`` stays False until ``retry_seconds`` have
passed, then lets the next operation probe Redis again. A successful
operation marks the store available.

Pattern deletes use SCAN (not KEYS) so a large keyspace never blocks Redis.
"""

import asyncio
import logging
import time
from collections.abc import Callable

import redis.asyncio as aioredis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

logger = logging.getLogger("ft.cache")

_SCAN_BATCH = 500

# Failures that mean "Redis is not reachable" rather than "this command failed".
_CONNECTIVITY_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError, asyncio.TimeoutError)
_STORE_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class RedisKeyValueStore:
    def __init__(
        self,
        client: aioredis.Redis,
        retry_seconds: float = 30.0,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._retry_seconds = retry_seconds
        self._enabled = enabled
        self._clock = clock
        self._down_since: float | None = None

    async def connect(self) -> bool:
        """Probe Redis with PING at startup.

        A failure is not fatal: the application keeps serving requests with
        caching disabled until a later probe succeeds.
        """
        if not self._enabled:
            logger.info("Response cache disabled by configuration")
            return False
        try:
            await self._client.ping()
        except _STORE_ERRORS as exc:
            self._mark_down(exc)
            logger.warning("Redis connection failed - running without caching: %s", exc)
            return False
        self._mark_up()
        logger.info("Redis connected - response cache enabled")
        return True

    async def ping(self) -> bool:
        """Confirm Redis answers right now.

        Inside the retry window this returns False without contacting Redis.
        """
        if not self.is_available():
            return False
        try:
            await self._client.ping()
        except _STORE_ERRORS as exc:
            self._on_error("PING", "-", exc)
            return False
        self._mark_up()
        return True

    def is_available(self) -> bool:
        if not self._enabled:
            return False
        if self._down_since is None:
            return True
        return self._clock() - self._down_since >= self._retry_seconds

    async def get(self, key: str) -> str | None:
        if not self.is_available():
            return None
        try:
            value: str | None = await self._client.get(key)
        except _STORE_ERRORS as exc:
            self._on_error("GET", key, exc)
            return None
        self._mark_up()
        return value

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> bool:
        if not self.is_available():
            return False
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except _STORE_ERRORS as exc:
            self._on_error("SET", key, exc)
            return False
        self._mark_up()
        return True

    async def delete_matching(self, pattern: str) -> int:
        """Delete every key matching a glob pattern; returns the number removed.

        On a mid-scan failure the keys already deleted are still counted.
        """
        if not self.is_available():
            return 0
        deleted = 0
        batch: list[str] = []
        try:
            async for key in self._client.scan_iter(match=pattern, count=_SCAN_BATCH):
                batch.append(key)
                if len(batch) >= _SCAN_BATCH:
                    deleted += await self._client.delete(*batch)
                    batch.clear()
            if batch:
                deleted += await self._client.delete(*batch)
        except _STORE_ERRORS as exc:
            self._on_error("DELETE", pattern, exc)
            return deleted
        self._mark_up()
        return deleted

    # ------------------------------------------------------------------
    # Connectivity bookkeeping
    # ------------------------------------------------------------------

    def _on_error(self, op: str, target: str, exc: BaseException) -> None:
        if isinstance(exc, _CONNECTIVITY_ERRORS):
            self._mark_down(exc)
        else:
            logger.error("Cache %s failed for %s: %s", op, target, exc)

    def _mark_down(self, exc: BaseException) -> None:
        if self._down_since is None:
            logger.warning("Redis unavailable - caching disabled: %s", exc)
        self._down_since = self._clock()

    def _mark_up(self) -> None:
        if self._down_since is not None:
            logger.info("Redis reachable again - caching re-enabled")
        self._down_since = None
