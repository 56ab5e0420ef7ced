"""Integration tests for wallet, ledger and investments (requires running PG)."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")


class TestWallet:
    async def test_topup_then_overdraw(self, client: AsyncClient, auth_headers: dict) -> None:
        topup = await client.post(
            "/api/v1/wallet/topup", json={"amount": 50000}, headers=auth_headers
        )
        assert topup.status_code == 200
        assert topup.json()["data"]["balance"] == 50000

        withdraw = await client.post(
            "/api/v1/wallet/withdraw", json={"amount": 70000}, headers=auth_headers
        )
        assert withdraw.status_code == 400
        assert withdraw.json()["code"] == 2001

        wallet = await client.get("/api/v1/wallet", headers=auth_headers)
        assert wallet.json()["data"]["balance"] == 50000

        records = await client.get("/api/v1/financial/records", headers=auth_headers)
        items = records.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["record_type"] == "income"
        assert items[0]["balance_after"] == 50000

    async def test_summary_reconciles(self, client: AsyncClient, auth_headers: dict) -> None:
        await client.post("/api/v1/wallet/topup", json={"amount": 30000}, headers=auth_headers)
        await client.post("/api/v1/wallet/withdraw", json={"amount": 10000}, headers=auth_headers)

        summary = await client.get("/api/v1/financial/summary", headers=auth_headers)
        data = summary.json()["data"]
        assert data["wallet_balance"] == 20000
        assert data["ledger_balance"] == 20000
        assert data["reconciled"] is True

        activities = await client.get(
            "/api/v1/activities", params={"type": "withdraw"}, headers=auth_headers
        )
        assert [a["activity_type"] for a in activities.json()["data"]["items"]] == ["withdraw"]


class TestInvestments:
    async def test_buy_and_sell(self, client: AsyncClient, auth_headers: dict) -> None:
        await client.post("/api/v1/wallet/topup", json={"amount": 50000}, headers=auth_headers)

        buy = await client.post(
            "/api/v1/investments",
            json={"wallet_address": "0xabc", "asset": "GOLD", "amount": 10000},
            headers=auth_headers,
        )
        assert buy.status_code == 201
        investment_id = buy.json()["data"]["id"]

        sell = await client.post(
            f"/api/v1/investments/{investment_id}/sell",
            json={"sell_amount": 12500},
            headers=auth_headers,
        )
        assert sell.status_code == 200
        assert sell.json()["data"]["gain"] == 2500
        assert sell.json()["data"]["wallet_balance"] == 52500

        again = await client.post(
            f"/api/v1/investments/{investment_id}/sell",
            json={"sell_amount": 12500},
            headers=auth_headers,
        )
        assert again.status_code == 404

        summary = await client.get("/api/v1/financial/summary", headers=auth_headers)
        assert summary.json()["data"]["reconciled"] is True


class TestTransactionHistory:
    async def test_record_and_filter(self, client: AsyncClient, auth_headers: dict) -> None:
        for order_id, status in [("ord-a", "completed"), ("ord-b", "pending")]:
            resp = await client.post(
                "/api/v1/transaction-history",
                json={
                    "order_id": order_id,
                    "total_amount": 15000,
                    "coupons_used": ["HEMAT5"],
                    "items": [{"product_id": "p-1", "quantity": 1}],
                    "status": status,
                },
                headers=auth_headers,
            )
            assert resp.status_code == 201

        completed = await client.get(
            "/api/v1/transaction-history", params={"status": "completed"}, headers=auth_headers
        )
        items = completed.json()["data"]["items"]
        assert [i["order_id"] for i in items] == ["ord-a"]
        assert items[0]["payment_method"] == "midtrans"
        assert items[0]["items_data"] == [{"product_id": "p-1", "quantity": 1}]

        first = await client.get(
            "/api/v1/transaction-history", params={"limit": 1}, headers=auth_headers
        )
        page = first.json()["data"]
        assert [i["order_id"] for i in page["items"]] == ["ord-b"]
        assert page["has_more"] is True
        rest = await client.get(
            "/api/v1/transaction-history",
            params={"limit": 1, "cursor": page["next_cursor"]},
            headers=auth_headers,
        )
        assert [i["order_id"] for i in rest.json()["data"]["items"]] == ["ord-a"]

        # history is informational; the wallet and ledger stay untouched
        wallet = await client.get("/api/v1/wallet", headers=auth_headers)
        assert wallet.json()["data"]["balance"] == 0
        records = await client.get("/api/v1/financial/records", headers=auth_headers)
        assert records.json()["data"]["items"] == []
