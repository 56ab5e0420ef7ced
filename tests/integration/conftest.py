"""Integration-test fixtures.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool (created at import time) remains valid across
the entire test session.

Pre-condition: PostgreSQL reachable at DATABASE_URL and ``alembic upgrade
head`` applied. Without it every integration test is skipped.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.main import app
from src.shop_common.database import engine
from tests.integration.helpers import login_headers


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def _require_database() -> None:
    try:
        async with engine.connect() as conn:
            migrated = (
                await conn.execute(text("SELECT to_regclass('public.transaction_histories')"))
            ).scalar_one()
    except (OSError, SQLAlchemyError) as exc:
        pytest.skip(f"PostgreSQL unavailable: {exc}")
    if migrated is None:
        pytest.skip("Schema missing: run `alembic upgrade head`")


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Headers for a freshly registered user."""
    return await login_headers(client)
