"""Shared helpers for the integration flows."""

import uuid

from httpx import AsyncClient


def unique_user() -> dict[str, str]:
    """Generate unique credentials to avoid test pollution."""
    uid = uuid.uuid4().hex[:8]
    return {
        "name": f"Test User {uid}",
        "email": f"test_{uid}@example.com",
        "password": "TestPass1",
    }


async def login_headers(client: AsyncClient, user: dict[str, str] | None = None) -> dict[str, str]:
    """Register (if new) and log in; return the Authorization header."""
    user = user or unique_user()
    await client.post("/api/v1/auth/register", json=user)
    resp = await client.post(
        "/api/v1/auth/login", json={"email": user["email"], "password": user["password"]}
    )
    token = resp.json()["data"]["access_token"]
    return {"Authorization": f"Bearer {token}"}


async def create_store_with_product(
    client: AsyncClient, headers: dict[str, str], price: int = 10000, stock: int = 5
) -> tuple[str, str]:
    """Create a store and one product in it; return (store_id, product_id)."""
    store = await client.post(
        "/api/v1/stores", json={"store_name": "Warung Test"}, headers=headers
    )
    store_id = store.json()["data"]["id"]
    product = await client.post(
        "/api/v1/products",
        json={"store_id": store_id, "name": "Kopi Susu", "price": price, "stock": stock},
        headers=headers,
    )
    return store_id, product.json()["data"]["id"]
