"""ReadThroughCache — best-effort response cache around a downstream handler.

Flow for one request:
  1. non-GET or store unavailable  -> run downstream, no caching
  2. compose key, GET from store   -> hit: return decoded payload, downstream not run
  3. miss                          -> run downstream, schedule SET with TTL, return payload

The cache fails open: decode errors count as misses, encode errors skip the
write, and store errors are absorbed by the store itself. Exceptions from
the downstream handler propagate untouched and are never cached.

Concurrent misses on the same key are not de-duplicated; each runs the
downstream handler and the last write wins.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from src.ft_cache.domain.keys import compose_key
from src.ft_cache.domain.store import KeyValueStore

logger = logging.getLogger("ft.cache")

_RETRIEVAL_METHODS = frozenset({"GET"})
_MISS = object()


@dataclass(frozen=True)
class CacheRequest:
    """The parts of an inbound request the cache key depends on."""

    method: str
    path: str
    query_string: str = ""
    principal_id: str | None = None


def encode_payload(payload: Any) -> str:
    """Compact JSON, the same separators Starlette's JSONResponse renders with."""
    return json.dumps(payload, ensure_ascii=False, allow_nan=False, separators=(",", ":"))


class ReadThroughCache:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._pending: set[asyncio.Task[None]] = set()

    async def serve(
        self,
        request: CacheRequest,
        ttl_seconds: int,
        downstream: Callable[[], Awaitable[Any]],
    ) -> Any:
        if request.method.upper() not in _RETRIEVAL_METHODS:
            return await downstream()
        if not self._store.is_available():
            logger.debug("Cache store unavailable - skipping cache for %s", request.path)
            return await downstream()

        key = compose_key(request.path, request.query_string, request.principal_id)
        cached = await self._lookup(key)
        if cached is not _MISS:
            logger.debug("Cache hit for key: %s", key)
            return cached

        payload = await downstream()
        self._schedule_write(key, payload, ttl_seconds)
        return payload

    async def drain(self) -> None:
        """Wait for every scheduled cache write to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _lookup(self, key: str) -> Any:
        try:
            raw = await self._store.get(key)
        except Exception:
            logger.exception("Cache lookup failed for key: %s", key)
            return _MISS
        if raw is None:
            return _MISS
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry: %s", key)
            return _MISS

    def _schedule_write(self, key: str, payload: Any, ttl_seconds: int) -> None:
        try:
            raw = encode_payload(payload)
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping cache write for %s: payload not serializable (%s)", key, exc)
            return
        task = asyncio.create_task(self._write(key, raw, ttl_seconds))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, raw: str, ttl_seconds: int) -> None:
        try:
            stored = await self._store.set_with_expiry(key, raw, ttl_seconds)
        except Exception:
            logger.exception("Cache set error for key: %s", key)
            return
        if stored:
            logger.debug("Cached data for key: %s (ttl=%ds)", key, ttl_seconds)
        else:
            logger.warning("Cache set failed for key: %s", key)
