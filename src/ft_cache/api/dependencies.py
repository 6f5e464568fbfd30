"""FastAPI glue for the response cache.

Usage in any read-only router:
    from src.ft_cache.api.dependencies import cached_endpoint

    @router.get("")
    @cached_endpoint(ttl=CATEGORY_TTL)
    async def list_categories(request: Request, ...) -> ApiResponse:
        ...

The wrapped endpoint must declare a ``request: Request`` parameter. The
principal comes from ``request.state.principal_id`` (set by
get_current_user); requests without one are cached as "anonymous".

Cache objects live on ``app.state`` (built in the lifespan); when they are
absent the endpoint simply runs uncached and invalidation does nothing.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.responses import Response

from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_cache.application.read_through import CacheRequest, ReadThroughCache
from src.ft_cache.domain.store import DisabledStore


def get_read_through_cache(request: Request) -> ReadThroughCache | None:
    return getattr(request.app.state, "read_through_cache", None)


def get_cache_invalidator(request: Request) -> CacheInvalidator:
    """FastAPI dependency: the invalidation facade for mutating endpoints.

    Without a lifespan-built invalidator every clear is a no-op returning 0.
    """
    invalidator = getattr(request.app.state, "cache_invalidator", None)
    if invalidator is None:
        return CacheInvalidator(DisabledStore())
    return invalidator  # type: ignore[no-any-return]


def cache_request_from(request: Request) -> CacheRequest:
    return CacheRequest(
        method=request.method,
        path=request.url.path,
        query_string=request.url.query,
        principal_id=getattr(request.state, "principal_id", None),
    )


def _find_request(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Request:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    raise TypeError("cached_endpoint requires the endpoint to accept a `request: Request` parameter")


def cached_endpoint(
    ttl: int,
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Serve the endpoint through the read-through cache with the given TTL."""

    def decorator(endpoint: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(endpoint)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = _find_request(args, kwargs)
            cache = get_read_through_cache(request)
            if cache is None:
                return await endpoint(*args, **kwargs)

            async def downstream() -> Any:
                result = await endpoint(*args, **kwargs)
                if isinstance(result, BaseModel):
                    return result.model_dump(mode="json")
                return result

            payload = await cache.serve(cache_request_from(request), ttl, downstream)
            if isinstance(payload, Response):
                return payload
            return JSONResponse(content=payload)

        return wrapper

    return decorator
