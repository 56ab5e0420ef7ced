"""OrderApplicationService — checkout orchestration and order reads.

create_order runs as ONE transaction on the request session:

    1. ownership check on the store
    2. lock every product (SELECT ... FOR UPDATE, ascending id order)
    3. reject the whole order on a missing/inactive product or short stock
    4. decrement stock for every line
    5. total = subtotal - discount, must be > 0
    6. insert the order (pending) and its line items
    7. open the gateway checkout session
    8. COMMIT only after step 7 succeeds

Any failure, including a gateway timeout, rolls everything back, so no
stock stays reserved for an order that does not exist.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.enums import PaymentStatus
from src.shop_common.errors import (
    AccessDeniedError,
    EmptyOrderError,
    InsufficientStockError,
    InternalError,
    InvalidAmountError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from src.shop_common.id_generator import generate_external_order_id, generate_id
from src.shop_common.money import rupiah_display
from src.shop_common.pagination import cursor_decode, cursor_encode, split_page
from src.shop_order.application.schemas import (
    CreateOrderRequest,
    CreateOrderResponse,
    LineItemResponse,
    OrderListItem,
    OrderListResponse,
    OrderResponse,
)
from src.shop_order.domain.models import LineItem, Order
from src.shop_order.domain.repository import OrderRepositoryProtocol
from src.shop_order.infrastructure.persistence import OrderRepository
from src.shop_payment.domain.gateway import PaymentGatewayProtocol
from src.shop_payment.domain.models import CheckoutRequest, CustomerDetails, GatewayItem
from src.shop_payment.infrastructure.midtrans_client import get_gateway
from src.shop_store.application.service import require_owned_store
from src.shop_store.domain.models import Product
from src.shop_store.domain.repository import (
    ProductRepositoryProtocol,
    StoreRepositoryProtocol,
)
from src.shop_store.infrastructure.persistence import ProductRepository, StoreRepository

logger = logging.getLogger(__name__)

GATEWAY_ITEM_NAME_MAX = 50
DISCOUNT_ITEM_ID = "DISCOUNT"
DEFAULT_CUSTOMER_NAME = "Customer"


def merge_quantities(req: CreateOrderRequest) -> dict[str, int]:
    """product_id -> total quantity, first-occurrence order preserved."""
    merged: dict[str, int] = {}
    for item in req.items:
        key = str(item.product_id)
        merged[key] = merged.get(key, 0) + item.quantity
    return merged


def build_checkout_request(order: Order) -> CheckoutRequest:
    """Gateway payload for an order. The item breakdown sums to the gross amount."""
    items = [
        GatewayItem(
            id=item.product_id or "ITEM",
            name=item.product_name[:GATEWAY_ITEM_NAME_MAX],
            price=item.unit_price,
            quantity=item.quantity,
        )
        for item in order.items
    ]
    if order.discount > 0:
        items.append(
            GatewayItem(id=DISCOUNT_ITEM_ID, name="Discount", price=-order.discount, quantity=1)
        )
    checkout = CheckoutRequest(
        order_id=order.external_order_id,
        gross_amount=order.total_amount,
        items=items,
        customer=CustomerDetails(
            first_name=order.customer_name or DEFAULT_CUSTOMER_NAME,
            email=order.customer_email,
            phone=order.customer_phone,
        ),
    )
    if checkout.items_total != checkout.gross_amount:
        raise InternalError(
            f"Item breakdown {checkout.items_total} != gross amount {checkout.gross_amount}"
        )
    return checkout


class OrderApplicationService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol | None = None,
        stores: StoreRepositoryProtocol | None = None,
        products: ProductRepositoryProtocol | None = None,
        gateway: PaymentGatewayProtocol | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()
        self._stores: StoreRepositoryProtocol = stores or StoreRepository()
        self._products: ProductRepositoryProtocol = products or ProductRepository()
        self._gateway = gateway

    @property
    def gateway(self) -> PaymentGatewayProtocol:
        return self._gateway or get_gateway()

    async def create_order(
        self, db: AsyncSession, user_id: str, req: CreateOrderRequest
    ) -> CreateOrderResponse:
        quantities = merge_quantities(req)
        if not quantities:
            raise EmptyOrderError()
        store_id = str(req.store_id)

        try:
            await require_owned_store(self._stores, db, store_id, user_id)

            # Lock in ascending id order so concurrent checkouts cannot deadlock.
            locked: dict[str, Product] = {}
            for product_id in sorted(quantities):
                product = await self._products.lock_for_store(db, product_id, store_id)
                if product is None or not product.is_active:
                    raise ProductNotFoundError(product_id)
                if product.stock < quantities[product_id]:
                    raise InsufficientStockError(
                        product.name, quantities[product_id], product.stock
                    )
                locked[product_id] = product

            for product_id in sorted(quantities):
                remaining = await self._products.decrement_stock(
                    db, product_id, quantities[product_id]
                )
                if remaining is None:
                    product = locked[product_id]
                    raise InsufficientStockError(
                        product.name, quantities[product_id], product.stock
                    )

            items = [
                LineItem(
                    product_id=product_id,
                    product_name=locked[product_id].name,
                    quantity=qty,
                    unit_price=locked[product_id].price,
                )
                for product_id, qty in quantities.items()
            ]
            subtotal = sum(i.line_total for i in items)
            total = subtotal - req.discount
            if total <= 0:
                raise InvalidAmountError(total)

            order = Order(
                id=generate_id(),
                store_id=store_id,
                external_order_id=generate_external_order_id(),
                subtotal=subtotal,
                discount=req.discount,
                total_amount=total,
                payment_status=PaymentStatus.PENDING.value,
                customer_name=req.customer_name,
                customer_email=req.customer_email,
                customer_phone=req.customer_phone,
                items=items,
                owner_user_id=user_id,
            )
            order = await self._orders.save(db, order)

            session = await self.gateway.create_session(build_checkout_request(order))
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s (%s) created in store %s: total %d, %d line(s)",
            order.id,
            order.external_order_id,
            store_id,
            order.total_amount,
            len(order.items),
        )
        return CreateOrderResponse(
            order_id=order.id,
            external_order_id=order.external_order_id,
            subtotal=order.subtotal,
            discount=order.discount,
            total_amount=order.total_amount,
            total_display=rupiah_display(order.total_amount),
            payment_status=order.payment_status,
            snap_token=session.token,
            redirect_url=session.redirect_url,
            items=[LineItemResponse.from_domain(i) for i in order.items],
        )

    async def get_order(self, db: AsyncSession, user_id: str, order_id: str) -> OrderResponse:
        order = await self._orders.get_by_id(db, order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        if order.owner_user_id != user_id:
            raise AccessDeniedError(f"Order not found or access denied: {order_id}")
        return OrderResponse.from_domain(order)

    async def list_store_orders(
        self,
        db: AsyncSession,
        user_id: str,
        store_id: str,
        payment_status: str | None,
        cursor: str | None,
        limit: int,
    ) -> OrderListResponse:
        await require_owned_store(self._stores, db, store_id, user_id)
        key = cursor_decode(cursor)
        rows = await self._orders.list_by_store(
            db, store_id, payment_status, str(key) if key is not None else None, limit + 1
        )
        page, has_more = split_page(rows, limit)
        return OrderListResponse(
            items=[OrderListItem.from_domain(o) for o in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )
