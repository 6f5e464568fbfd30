"""Redis client factory — used for the response cache and rate limiting.

The client is created once in the application lifespan and stored on
``app.state.redis``; nothing in this module holds a process-wide handle.
Socket timeouts bound every command so a stalled Redis surfaces as a
TimeoutError, which callers treat the same as a connection failure.
"""

import redis.asyncio as aioredis

from config.settings import settings


def create_redis(url: str | None = None) -> aioredis.Redis:
    """Build a pooled asyncio Redis client (connects lazily on first command)."""
    return aioredis.from_url(
        url or settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
    )


async def close_redis(client: aioredis.Redis) -> None:
    """Close the client and release its connection pool."""
    await client.aclose()
