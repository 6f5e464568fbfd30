"""Shared test fixtures."""

import os

# Settings are read at import time; JWT_SECRET has no default.
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-only")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints (no lifespan: no DB/Redis)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
