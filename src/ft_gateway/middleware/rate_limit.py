"""Fixed-window rate limiting backed by Redis.

Rules (per user when a valid Bearer token is sent, otherwise per client IP):
  - auth endpoints:         RATE_LIMIT_AUTH         per window
  - transaction endpoints:  RATE_LIMIT_TRANSACTIONS per window
  - analytics endpoints:    RATE_LIMIT_ANALYTICS    per window
  - everything else:        RATE_LIMIT_GENERAL      per window

Counting: INCR on "ratelimit:{user_or_ip}:{endpoint_group}", EXPIRE whenever
the key has no TTL (the first hit of a window, or a hit after a failed
EXPIRE). Over the limit -> 429 with Retry-After and an ApiResponse body
carrying RateLimitError (9001).

Redis trouble never blocks traffic: the request proceeds unlimited.
"""

import asyncio
import logging

from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from config.settings import settings
from src.ft_common.errors import AppError, RateLimitError
from src.ft_common.response import error_response
from src.ft_gateway.auth.jwt_handler import ACCESS, decode_token

logger = logging.getLogger("ft.ratelimit")

_API_PREFIX = "/api/v1/"
_GROUPS = ("auth", "transactions", "analytics")
GENERAL = "general"


def default_limits() -> dict[str, int]:
    return {
        "auth": settings.RATE_LIMIT_AUTH,
        "transactions": settings.RATE_LIMIT_TRANSACTIONS,
        "analytics": settings.RATE_LIMIT_ANALYTICS,
        GENERAL: settings.RATE_LIMIT_GENERAL,
    }


def endpoint_group(path: str) -> str:
    """Map "/api/v1/<resource>/..." to its limit group."""
    resource = path[len(_API_PREFIX):].split("/", 1)[0]
    return resource if resource in _GROUPS else GENERAL


def client_identity(request: Request) -> str:
    """Return "user:<id>" for a valid access token, else "ip:<addr>" (X-Forwarded-For aware)."""
    auth = request.headers.get("authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() == "bearer" and token:
        try:
            return f"user:{decode_token(token, expected_type=ACCESS)['sub']}"
        except (AppError, KeyError):
            pass  # invalid token: limit by IP, the auth dependency rejects it later
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        limits: dict[str, int] | None = None,
        window_seconds: int | None = None,
        enabled: bool | None = None,
    ) -> None:
        super().__init__(app)
        self._limits = limits or default_limits()
        self._window = window_seconds or settings.RATE_LIMIT_WINDOW_SECONDS
        self._enabled = settings.RATE_LIMIT_ENABLED if enabled is None else enabled

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        redis = getattr(request.app.state, "redis", None)
        if not self._enabled or redis is None or not request.url.path.startswith(_API_PREFIX):
            return await call_next(request)

        group = endpoint_group(request.url.path)
        key = f"ratelimit:{client_identity(request)}:{group}"
        limit = self._limits.get(group, self._limits[GENERAL])

        try:
            count = await redis.incr(key)
            # A key without a TTL never resets, so a failed EXPIRE is retried here.
            retry_after = await redis.ttl(key)
            if retry_after < 0:
                await redis.expire(key, self._window)
                retry_after = self._window
        except (RedisError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return await call_next(request)

        if count > limit:
            logger.info("Rate limit exceeded for %s (%d/%d)", key, count, limit)
            err = RateLimitError()
            body = error_response(err.code, err.message)
            body.request_id = getattr(request.state, "request_id", body.request_id)
            return JSONResponse(
                status_code=err.http_status,
                content=body.model_dump(),
                headers={"Retry-After": str(max(retry_after, 1))},
            )
        return await call_next(request)
