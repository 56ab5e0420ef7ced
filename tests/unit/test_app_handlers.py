"""App-level behaviour: health, error envelopes, public payment endpoints.

The database session is replaced with a mock, so none of these touch
PostgreSQL or Redis.
"""

from collections.abc import AsyncGenerator, Generator
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.main import app
from src.shop_common.database import get_db_session


@pytest.fixture
def mock_db() -> Generator[AsyncMock, None, None]:
    db = AsyncMock()

    async def _override() -> AsyncGenerator[AsyncMock, None]:
        yield db

    app.dependency_overrides[get_db_session] = _override
    yield db
    app.dependency_overrides.pop(get_db_session, None)


class TestHealth:
    async def test_reports_gateway_mode(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert body["payment_gateway"] == "sandbox"
        assert body["in_flight_gateway_requests"] == 0

    async def test_request_id_header(self, client: AsyncClient) -> None:
        resp = await client.get("/health")
        assert resp.headers["X-Request-ID"].startswith("req_")

    async def test_inbound_request_id_kept(self, client: AsyncClient) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "req_0123456789ab"})
        assert resp.headers["X-Request-ID"] == "req_0123456789ab"

    async def test_malformed_request_id_replaced(self, client: AsyncClient) -> None:
        resp = await client.get("/health", headers={"X-Request-ID": "<script>"})
        assert resp.headers["X-Request-ID"] != "<script>"
        assert resp.headers["X-Request-ID"].startswith("req_")


class TestErrorEnvelope:
    async def test_validation_error_is_400(self, client: AsyncClient, mock_db: AsyncMock) -> None:
        resp = await client.post("/api/v1/auth/register", json={"email": "bad"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["code"] == 9004
        assert body["data"] is None
        assert "email" in body["error"]

    async def test_missing_token_is_401(self, client: AsyncClient, mock_db: AsyncMock) -> None:
        resp = await client.get("/api/v1/wallet")
        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"
        body = resp.json()
        assert body["success"] is False
        assert body["code"] == 1001
        assert body["request_id"] == resp.headers["X-Request-ID"]

    async def test_bad_token_is_401(self, client: AsyncClient, mock_db: AsyncMock) -> None:
        resp = await client.get(
            "/api/v1/wallet", headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid or expired token"
        mock_db.execute.assert_not_awaited()

    async def test_unknown_route_uses_envelope(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/no-such-thing")
        assert resp.status_code == 404
        assert resp.json()["code"] == 9006


class TestPaymentEndpoints:
    async def test_webhook_bad_signature(self, client: AsyncClient, mock_db: AsyncMock) -> None:
        resp = await client.post(
            "/api/v1/payment/webhook",
            json={
                "order_id": "ORD-1-X",
                "status_code": "200",
                "gross_amount": "20000.00",
                "transaction_status": "settlement",
                "signature_key": "0" * 128,
            },
        )
        assert resp.status_code == 401
        assert resp.json()["code"] == 5002
        mock_db.execute.assert_not_awaited()

    async def test_pending_page_is_html(self, client: AsyncClient, mock_db: AsyncMock) -> None:
        resp = await client.get("/api/v1/payment/pending", params={"order_id": "ORD-1-X"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "payment_pending" in resp.text
