"""OrderRepository — raw SQL persistence for orders and order_items.

``transition_status`` is the only statement that mutates an order after
creation. It is a compare-and-set on ``payment_status = 'pending'``: the
UPDATE takes the row lock, so of two concurrent terminal signals for the
same order exactly one gets a row back and the other sees 0 rows. Ledger
and stock side effects are keyed on that returned row.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import InternalError
from src.shop_order.domain.models import LineItem, Order, StatusTransition

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, store_id, external_order_id,
        subtotal, discount, total_amount, payment_status,
        customer_name, customer_email, customer_phone)
    VALUES (:id, CAST(:store_id AS UUID), :external_order_id,
        :subtotal, :discount, :total_amount, :payment_status,
        :customer_name, :customer_email, :customer_phone)
    RETURNING created_at, updated_at
""")

_INSERT_ITEM_SQL = text("""
    INSERT INTO order_items (order_id, product_id, product_name, quantity, unit_price)
    VALUES (:order_id, CAST(:product_id AS UUID), :product_name, :quantity, :unit_price)
    RETURNING id
""")

_SELECT_COLUMNS = """
    o.id, o.store_id, o.external_order_id,
    o.subtotal, o.discount, o.total_amount, o.payment_status,
    o.customer_name, o.customer_email, o.customer_phone,
    o.created_at, o.updated_at, s.user_id AS owner_user_id
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o
    JOIN stores s ON s.id = o.store_id
    WHERE o.id = :id
""")

_GET_ORDER_BY_EXTERNAL_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o
    JOIN stores s ON s.id = o.store_id
    WHERE o.external_order_id = :external_order_id
""")

_LIST_ORDERS_SQL = text(f"""
    SELECT {_SELECT_COLUMNS},
           (SELECT COUNT(*) FROM order_items oi WHERE oi.order_id = o.id) AS item_count
    FROM orders o
    JOIN stores s ON s.id = o.store_id
    WHERE o.store_id = CAST(:store_id AS UUID)
      AND (CAST(:payment_status AS TEXT) IS NULL
           OR o.payment_status = CAST(:payment_status AS TEXT))
      AND (CAST(:cursor_id AS TEXT) IS NULL OR o.id < CAST(:cursor_id AS TEXT))
    ORDER BY o.id DESC
    LIMIT :limit
""")

_GET_ITEMS_SQL = text("""
    SELECT id, order_id, product_id, product_name, quantity, unit_price
    FROM order_items
    WHERE order_id = :order_id
    ORDER BY id
""")

_TRANSITION_STATUS_SQL = text("""
    UPDATE orders o
    SET payment_status = :new_status, updated_at = NOW()
    FROM stores s
    WHERE o.external_order_id = :external_order_id
      AND o.payment_status = 'pending'
      AND s.id = o.store_id
    RETURNING o.id, o.store_id, o.external_order_id, o.total_amount,
              o.payment_status, s.user_id AS owner_user_id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    return Order(
        id=row.id,
        store_id=str(row.store_id),
        external_order_id=row.external_order_id,
        subtotal=row.subtotal,
        discount=row.discount,
        total_amount=row.total_amount,
        payment_status=row.payment_status,
        customer_name=row.customer_name,
        customer_email=row.customer_email,
        customer_phone=row.customer_phone,
        owner_user_id=row.owner_user_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_item(row: Any) -> LineItem:
    return LineItem(
        id=row.id,
        order_id=row.order_id,
        product_id=str(row.product_id) if row.product_id is not None else None,
        product_name=row.product_name,
        quantity=row.quantity,
        unit_price=row.unit_price,
    )


class OrderRepository:
    """Caller owns the transaction; nothing here commits."""

    async def save(self, db: AsyncSession, order: Order) -> Order:
        """Insert the order row and its items. Returns the order with DB timestamps."""
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "store_id": order.store_id,
                "external_order_id": order.external_order_id,
                "subtotal": order.subtotal,
                "discount": order.discount,
                "total_amount": order.total_amount,
                "payment_status": order.payment_status,
                "customer_name": order.customer_name,
                "customer_email": order.customer_email,
                "customer_phone": order.customer_phone,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Order insert returned no rows")
        order.created_at = row.created_at
        order.updated_at = row.updated_at

        for item in order.items:
            item_result = await db.execute(
                _INSERT_ITEM_SQL,
                {
                    "order_id": order.id,
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                },
            )
            item.id = item_result.scalar_one()
            item.order_id = order.id
        return order

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_ID_SQL, {"id": order_id})
        row = result.fetchone()
        if row is None:
            return None
        order = _row_to_order(row)
        order.items = await self.get_items(db, order.id)
        return order

    async def get_by_external_id(
        self, db: AsyncSession, external_order_id: str
    ) -> Order | None:
        result = await db.execute(
            _GET_ORDER_BY_EXTERNAL_ID_SQL, {"external_order_id": external_order_id}
        )
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def list_by_store(
        self,
        db: AsyncSession,
        store_id: str,
        payment_status: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ORDERS_SQL,
            {
                "store_id": store_id,
                "payment_status": payment_status,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        orders = []
        for row in result.fetchall():
            order = _row_to_order(row)
            order.item_count = row.item_count
            orders.append(order)
        return orders

    async def get_items(self, db: AsyncSession, order_id: str) -> list[LineItem]:
        result = await db.execute(_GET_ITEMS_SQL, {"order_id": order_id})
        return [_row_to_item(row) for row in result.fetchall()]

    async def transition_status(
        self, db: AsyncSession, external_order_id: str, new_status: str
    ) -> StatusTransition | None:
        """Move a pending order to ``new_status``. None if absent or already terminal."""
        result = await db.execute(
            _TRANSITION_STATUS_SQL,
            {"external_order_id": external_order_id, "new_status": new_status},
        )
        row = result.fetchone()
        if row is None:
            return None
        return StatusTransition(
            order_id=row.id,
            store_id=str(row.store_id),
            external_order_id=row.external_order_id,
            total_amount=row.total_amount,
            payment_status=row.payment_status,
            owner_user_id=row.owner_user_id,
        )
