"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.ft_admin.api.router import router as admin_router
from src.ft_analytics.api.router import router as analytics_router
from src.ft_cache.application.invalidation import CacheInvalidator
from src.ft_cache.application.read_through import ReadThroughCache
from src.ft_cache.infrastructure.redis_store import RedisKeyValueStore
from src.ft_category.api.router import router as category_router
from src.ft_common.database import engine
from src.ft_common.errors import AppError
from src.ft_common.redis_client import close_redis, create_redis
from src.ft_common.response import error_response
from src.ft_gateway.api.router import router as auth_router
from src.ft_gateway.middleware.rate_limit import RateLimitMiddleware
from src.ft_gateway.middleware.request_log import RequestLogMiddleware
from src.ft_gateway.middleware.security_headers import SecurityHeadersMiddleware
from src.ft_transaction.api.router import router as transaction_router

VERSION = "1.0.0"

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, connect Redis, build the response cache. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

    redis = create_redis()
    cache_store = RedisKeyValueStore(
        redis,
        retry_seconds=settings.CACHE_RETRY_SECONDS,
        enabled=settings.CACHE_ENABLED,
    )
    await cache_store.connect()  # failure only disables caching
    app.state.redis = redis
    app.state.cache_store = cache_store
    app.state.read_through_cache = ReadThroughCache(cache_store)
    app.state.cache_invalidator = CacheInvalidator(cache_store)
    yield
    # Shutdown
    await app.state.read_through_cache.drain()
    await close_redis(redis)
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


# Added innermost first: RequestLog wraps everything, so 429s get headers and a log line.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(auth_router, prefix="/api/v1")
app.include_router(category_router, prefix="/api/v1")
app.include_router(transaction_router, prefix="/api/v1")
app.include_router(analytics_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health(request: Request) -> dict[str, Any]:
    store = getattr(request.app.state, "cache_store", None)
    cache_ok = store is not None and await store.ping()
    return {
        "status": "ok",
        "version": VERSION,
        "cache": "available" if cache_ok else "unavailable",
    }
