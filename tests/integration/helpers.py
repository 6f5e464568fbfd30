"""Helpers shared by the integration tests."""

import uuid

from httpx import AsyncClient


def unique_user() -> dict[str, str]:
    """Generate unique credentials to avoid test pollution."""
    uid = uuid.uuid4().hex[:8]
    return {
        "username": f"testuser_{uid}",
        "email": f"test_{uid}@example.com",
        "password": "TestPass1",
    }


async def register_and_login(client: AsyncClient) -> dict[str, str]:
    """Register a fresh user; returns the Authorization header for it."""
    user = unique_user()
    await client.post("/api/v1/auth/register", json=user)
    resp = await client.post(
        "/api/v1/auth/login", json={"username": user["username"], "password": user["password"]}
    )
    return {"Authorization": f"Bearer {resp.json()['data']['access_token']}"}
