"""Unit tests for StoreRepository / ProductRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from src.shop_store.infrastructure.persistence import ProductRepository, StoreRepository

STORE_ID = "7d8f1c7e-2a1b-4c3d-9e8f-0a1b2c3d4e5f"


def _product_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", "p-1")
    row.store_id = STORE_ID
    row.name = "Kopi"
    row.description = None
    row.price = kwargs.get("price", 10000)
    row.stock = kwargs.get("stock", 5)
    row.is_active = True
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _result(row: Any) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


class TestProductStock:
    async def test_decrement_returns_remaining(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(MagicMock(stock=3))

        remaining = await ProductRepository().decrement_stock(db, "p-1", 2)

        assert remaining == 3
        assert db.execute.await_args.args[1] == {"product_id": "p-1", "quantity": 2}

    async def test_decrement_short_stock_returns_none(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(None)
        assert await ProductRepository().decrement_stock(db, "p-1", 99) is None

    async def test_restore_missing_product(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(None)
        assert await ProductRepository().restore_stock(db, "p-1", 2) is False

    async def test_lock_scoped_to_store(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_product_row(stock=7))

        product = await ProductRepository().lock_for_store(db, "p-1", STORE_ID)

        assert product is not None and product.stock == 7
        assert db.execute.await_args.args[1] == {"product_id": "p-1", "store_id": STORE_ID}


class TestPartialUpdate:
    async def test_unset_fields_bound_as_null(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_product_row(price=12000))

        product = await ProductRepository().update(db, "p-1", {"price": 12000})

        assert product is not None and product.price == 12000
        params = db.execute.await_args.args[1]
        assert params["price"] == 12000
        assert params["name"] is None
        assert params["stock"] is None

    async def test_store_has_orders(self) -> None:
        result = MagicMock()
        result.scalar_one.return_value = True
        db = AsyncMock()
        db.execute.return_value = result

        assert await StoreRepository().has_orders(db, STORE_ID) is True
