"""Unit tests for OrderApplicationService checkout orchestration."""

from unittest.mock import AsyncMock

import pytest

from src.shop_common.errors import (
    AccessDeniedError,
    EmptyOrderError,
    GatewayError,
    InsufficientStockError,
    InternalError,
    InvalidAmountError,
    ProductNotFoundError,
    StoreAccessDeniedError,
)
from src.shop_order.application.schemas import CreateOrderRequest
from src.shop_order.application.service import (
    OrderApplicationService,
    build_checkout_request,
    merge_quantities,
)
from src.shop_order.domain.models import LineItem, Order
from src.shop_payment.domain.models import CheckoutRequest, PaymentSession
from src.shop_store.domain.models import Product, Store

STORE_ID = "7d8f1c7e-2a1b-4c3d-9e8f-0a1b2c3d4e5f"
P1 = "11111111-1111-4111-8111-111111111111"
P2 = "22222222-2222-4222-8222-222222222222"


def _product(pid: str, price: int = 10000, stock: int = 10, active: bool = True) -> Product:
    return Product(
        id=pid, store_id=STORE_ID, name=f"Item {pid[:4]}", price=price, stock=stock,
        is_active=active,
    )


def _make_service(
    catalog: dict[str, Product],
) -> tuple[OrderApplicationService, AsyncMock, AsyncMock, AsyncMock]:
    orders = AsyncMock()
    orders.save.side_effect = lambda db, order: order
    stores = AsyncMock()
    stores.get_for_owner.return_value = Store(id=STORE_ID, user_id="user-1", store_name="S")
    products = AsyncMock()
    products.lock_for_store.side_effect = lambda db, pid, sid: catalog.get(pid)
    products.decrement_stock.side_effect = lambda db, pid, qty: catalog[pid].stock - qty
    gateway = AsyncMock()
    gateway.create_session.return_value = PaymentSession(
        token="snap-token", redirect_url="https://app.sandbox.midtrans.com/snap/v4/x"
    )
    svc = OrderApplicationService(orders, stores, products, gateway)
    return svc, orders, products, gateway


def _req(items: list[tuple[str, int]], discount: int = 0, **kwargs: str) -> CreateOrderRequest:
    return CreateOrderRequest(
        store_id=STORE_ID,
        items=[{"product_id": pid, "quantity": qty} for pid, qty in items],
        discount=discount,
        **kwargs,
    )


class TestMergeQuantities:
    def test_duplicates_are_summed(self) -> None:
        merged = merge_quantities(_req([(P2, 1), (P1, 2), (P2, 3)]))
        assert merged == {P2: 4, P1: 2}
        assert list(merged) == [P2, P1]


class TestCreateOrder:
    async def test_single_line_total(self) -> None:
        svc, orders, _, gateway = _make_service({P1: _product(P1, price=10000)})
        db = AsyncMock()

        resp = await svc.create_order(db, "user-1", _req([(P1, 2)]))

        assert resp.subtotal == 20000
        assert resp.total_amount == 20000
        assert resp.total_display == "Rp20.000"
        assert resp.payment_status == "pending"
        assert resp.snap_token == "snap-token"
        assert resp.external_order_id.startswith("ORD-")
        checkout: CheckoutRequest = gateway.create_session.await_args.args[0]
        assert checkout.gross_amount == 20000
        assert checkout.order_id == resp.external_order_id
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    async def test_discount_line_in_gateway_payload(self) -> None:
        svc, _, _, gateway = _make_service(
            {P1: _product(P1, price=10000), P2: _product(P2, price=5000)}
        )

        resp = await svc.create_order(AsyncMock(), "user-1", _req([(P1, 1), (P2, 2)], 3000))

        assert resp.subtotal == 20000
        assert resp.total_amount == 17000
        checkout: CheckoutRequest = gateway.create_session.await_args.args[0]
        assert checkout.items[-1].id == "DISCOUNT"
        assert checkout.items[-1].price == -3000
        assert checkout.items_total == 17000

    async def test_products_locked_in_id_order(self) -> None:
        svc, _, products, _ = _make_service({P1: _product(P1), P2: _product(P2)})

        await svc.create_order(AsyncMock(), "user-1", _req([(P2, 1), (P1, 1)]))

        locked = [c.args[1] for c in products.lock_for_store.await_args_list]
        assert locked == [P1, P2]

    async def test_insufficient_stock_rejects_whole_order(self) -> None:
        svc, orders, products, gateway = _make_service(
            {P1: _product(P1, stock=10), P2: _product(P2, stock=1)}
        )
        db = AsyncMock()

        with pytest.raises(InsufficientStockError) as exc:
            await svc.create_order(db, "user-1", _req([(P1, 1), (P2, 5)]))

        assert exc.value.http_status == 409
        products.decrement_stock.assert_not_awaited()
        orders.save.assert_not_awaited()
        gateway.create_session.assert_not_awaited()
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    async def test_lost_decrement_race_is_insufficient_stock(self) -> None:
        svc, _, products, _ = _make_service({P1: _product(P1, stock=3)})
        products.decrement_stock.side_effect = None
        products.decrement_stock.return_value = None
        db = AsyncMock()

        with pytest.raises(InsufficientStockError):
            await svc.create_order(db, "user-1", _req([(P1, 2)]))
        db.rollback.assert_awaited_once()

    async def test_inactive_product_is_not_found(self) -> None:
        svc, _, _, _ = _make_service({P1: _product(P1, active=False)})
        with pytest.raises(ProductNotFoundError):
            await svc.create_order(AsyncMock(), "user-1", _req([(P1, 1)]))

    async def test_product_from_other_store_is_not_found(self) -> None:
        svc, _, _, _ = _make_service({})
        with pytest.raises(ProductNotFoundError):
            await svc.create_order(AsyncMock(), "user-1", _req([(P1, 1)]))

    async def test_discount_swallowing_total(self) -> None:
        svc, orders, _, _ = _make_service({P1: _product(P1, price=10000)})
        db = AsyncMock()

        with pytest.raises(InvalidAmountError):
            await svc.create_order(db, "user-1", _req([(P1, 1)], discount=10000))

        orders.save.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_empty_cart(self) -> None:
        svc, _, products, _ = _make_service({})
        with pytest.raises(EmptyOrderError):
            await svc.create_order(AsyncMock(), "user-1", _req([]))
        products.lock_for_store.assert_not_awaited()

    async def test_gateway_failure_rolls_back(self) -> None:
        svc, orders, _, gateway = _make_service({P1: _product(P1)})
        gateway.create_session.side_effect = GatewayError("Payment gateway timed out")
        db = AsyncMock()

        with pytest.raises(GatewayError):
            await svc.create_order(db, "user-1", _req([(P1, 1)]))

        orders.save.assert_awaited_once()
        db.commit.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_customer_defaults(self) -> None:
        svc, _, _, gateway = _make_service({P1: _product(P1)})

        await svc.create_order(AsyncMock(), "user-1", _req([(P1, 1)]))

        checkout: CheckoutRequest = gateway.create_session.await_args.args[0]
        assert checkout.customer.first_name == "Customer"
        assert checkout.customer.email is None

    async def test_foreign_store_denied_before_locking(self) -> None:
        svc, orders, products, gateway = _make_service({P1: _product(P1)})
        stores = AsyncMock()
        stores.get_for_owner.return_value = None
        stores.get_by_id.return_value = Store(id=STORE_ID, user_id="user-2", store_name="S")
        svc._stores = stores
        db = AsyncMock()

        with pytest.raises(StoreAccessDeniedError):
            await svc.create_order(db, "user-1", _req([(P1, 1)]))

        products.lock_for_store.assert_not_awaited()
        products.decrement_stock.assert_not_awaited()
        orders.save.assert_not_awaited()
        gateway.create_session.assert_not_awaited()
        db.commit.assert_not_awaited()
        db.rollback.assert_awaited_once()


class TestBuildCheckoutRequest:
    def _order(self, **kwargs: int) -> Order:
        return Order(
            id="1",
            store_id=STORE_ID,
            external_order_id="ORD-1-ABCDEFGHI",
            subtotal=kwargs.get("subtotal", 30000),
            discount=kwargs.get("discount", 0),
            total_amount=kwargs.get("total", 30000),
            payment_status="pending",
            items=[LineItem(product_id=P1, product_name="x" * 80, quantity=3, unit_price=10000)],
        )

    def test_item_name_truncated(self) -> None:
        checkout = build_checkout_request(self._order())
        assert len(checkout.items[0].name) == 50

    def test_mismatched_total_raises(self) -> None:
        with pytest.raises(InternalError):
            build_checkout_request(self._order(total=25000))


class TestGetOrder:
    async def test_foreign_order_denied(self) -> None:
        orders = AsyncMock()
        orders.get_by_id.return_value = Order(
            id="1", store_id=STORE_ID, external_order_id="ORD-1-X", subtotal=1, discount=0,
            total_amount=1, payment_status="pending", owner_user_id="someone-else",
        )
        svc = OrderApplicationService(orders, AsyncMock(), AsyncMock(), AsyncMock())
        with pytest.raises(AccessDeniedError):
            await svc.get_order(AsyncMock(), "user-1", "1")
