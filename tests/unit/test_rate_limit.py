"""Unit tests for the rate limit middleware (fake Redis counter)."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from starlette.requests import Request

from src.ft_gateway.auth.jwt_handler import create_access_token, create_refresh_token
from src.ft_gateway.middleware.rate_limit import (
    GENERAL,
    RateLimitMiddleware,
    client_identity,
    endpoint_group,
)
from src.ft_gateway.middleware.security_headers import SECURITY_HEADERS, SecurityHeadersMiddleware


class FakeCounter:
    def __init__(self) -> None:
        self.counts: dict[str, int] = {}
        self.expiries: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> bool:
        self.expiries[key] = seconds
        return True

    async def ttl(self, key: str) -> int:
        return self.expiries.get(key, -1)


class FlakyExpireCounter(FakeCounter):
    """First EXPIRE times out, later ones succeed."""

    def __init__(self) -> None:
        super().__init__()
        self.expire_calls = 0

    async def expire(self, key: str, seconds: int) -> bool:
        self.expire_calls += 1
        if self.expire_calls == 1:
            raise RedisTimeoutError("Timeout writing to socket")
        return await super().expire(key, seconds)


def _make_request(headers: dict[str, str] | None = None, host: str = "10.0.0.1") -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/transactions",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (host, 5000),
    }
    return Request(scope)


def _make_app(redis: object, limits: dict[str, int]) -> FastAPI:
    app = FastAPI()
    app.state.redis = redis
    app.add_middleware(RateLimitMiddleware, limits=limits, window_seconds=60, enabled=True)

    @app.get("/api/v1/transactions")
    async def transactions() -> dict:
        return {"ok": True}

    @app.get("/api/v1/categories")
    async def categories() -> dict:
        return {"ok": True}

    @app.get("/health")
    async def health() -> dict:
        return {"ok": True}

    return app


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestEndpointGroup:
    @pytest.mark.parametrize(
        ("path", "group"),
        [
            ("/api/v1/auth/login", "auth"),
            ("/api/v1/transactions/12", "transactions"),
            ("/api/v1/analytics/dashboard", "analytics"),
            ("/api/v1/categories", GENERAL),
            ("/api/v1/admin/users", GENERAL),
        ],
    )
    def test_groups(self, path: str, group: str) -> None:
        assert endpoint_group(path) == group


class TestClientIdentity:
    def test_valid_access_token(self) -> None:
        token = create_access_token("u-1")
        request = _make_request({"Authorization": f"Bearer {token}"})
        assert client_identity(request) == "user:u-1"

    def test_refresh_token_falls_back_to_ip(self) -> None:
        token = create_refresh_token("u-1")
        request = _make_request({"Authorization": f"Bearer {token}"})
        assert client_identity(request) == "ip:10.0.0.1"

    def test_forwarded_for_first_hop(self) -> None:
        request = _make_request({"X-Forwarded-For": "203.0.113.9, 10.0.0.2"})
        assert client_identity(request) == "ip:203.0.113.9"


class TestMiddleware:
    async def test_blocks_after_limit(self) -> None:
        redis = FakeCounter()
        app = _make_app(redis, {"transactions": 2, GENERAL: 100})

        async with _client(app) as ac:
            codes = [(await ac.get("/api/v1/transactions")).status_code for _ in range(3)]
            blocked = await ac.get("/api/v1/transactions")

        assert codes == [200, 200, 429]
        assert blocked.json()["code"] == 9001
        assert blocked.headers["Retry-After"] == "60"
        assert redis.expiries == {"ratelimit:ip:127.0.0.1:transactions": 60}

    async def test_failed_expire_is_reapplied(self) -> None:
        redis = FlakyExpireCounter()
        app = _make_app(redis, {"transactions": 2, GENERAL: 100})

        async with _client(app) as ac:
            responses = [await ac.get("/api/v1/transactions") for _ in range(4)]

        assert [r.status_code for r in responses] == [200, 200, 429, 429]
        assert redis.expiries == {"ratelimit:ip:127.0.0.1:transactions": 60}
        assert redis.expire_calls == 2
        assert responses[-1].headers["Retry-After"] == "60"

    async def test_groups_are_counted_separately(self) -> None:
        app = _make_app(FakeCounter(), {"transactions": 1, GENERAL: 100})

        async with _client(app) as ac:
            await ac.get("/api/v1/transactions")
            resp = await ac.get("/api/v1/categories")

        assert resp.status_code == 200

    async def test_non_api_paths_not_limited(self) -> None:
        redis = FakeCounter()
        app = _make_app(redis, {GENERAL: 0})

        async with _client(app) as ac:
            resp = await ac.get("/health")

        assert resp.status_code == 200
        assert redis.counts == {}

    async def test_redis_failure_fails_open(self) -> None:
        redis = SimpleNamespace(incr=AsyncMock(side_effect=RedisConnectionError("down")))
        app = _make_app(redis, {"transactions": 0, GENERAL: 0})

        async with _client(app) as ac:
            resp = await ac.get("/api/v1/transactions")

        assert resp.status_code == 200


class TestSecurityHeaders:
    async def test_headers_added(self) -> None:
        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)

        @app.get("/ping")
        async def ping() -> dict:
            return {}

        async with _client(app) as ac:
            resp = await ac.get("/ping")

        for name, value in SECURITY_HEADERS.items():
            assert resp.headers[name] == value
