"""Integration tests for auth flow (requires running PG).

Run: pytest tests/integration/test_auth_flow.py -v
"""

import pytest
from httpx import AsyncClient

from tests.integration.helpers import unique_user

# All tests in this module share the session-scoped event loop so that the
# module-level SQLAlchemy async engine pool stays alive across tests.
pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestRegister:
    async def test_register_success(self, client: AsyncClient) -> None:
        user = unique_user()
        resp = await client.post("/api/v1/auth/register", json=user)
        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["user"]["email"] == user["email"]
        assert "user_id" in body["data"]["user"]
        assert "request_id" in body

    async def test_register_duplicate_email(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        resp = await client.post("/api/v1/auth/register", json=user)
        assert resp.status_code == 409
        assert resp.json()["code"] == 1002

    async def test_register_weak_password(self, client: AsyncClient) -> None:
        user = unique_user() | {"password": "onlyletters"}
        resp = await client.post("/api/v1/auth/register", json=user)
        assert resp.status_code == 400


class TestLogin:
    async def test_login_and_profile(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        resp = await client.post(
            "/api/v1/auth/login", json={"email": user["email"], "password": user["password"]}
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["token_type"] == "Bearer"

        profile = await client.get(
            "/api/v1/auth/profile",
            headers={"Authorization": f"Bearer {data['access_token']}"},
        )
        assert profile.status_code == 200
        assert profile.json()["data"]["wallet_balance"] == 0

    async def test_wrong_password(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        resp = await client.post(
            "/api/v1/auth/login", json={"email": user["email"], "password": "WrongPass9"}
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 1003

    async def test_refresh(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        login = await client.post(
            "/api/v1/auth/login", json={"email": user["email"], "password": user["password"]}
        )
        refresh = login.json()["data"]["refresh_token"]
        resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]
