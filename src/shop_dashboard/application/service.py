"""Dashboard statistics for the signed-in user."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.money import rupiah_display

_STORE_STATS_SQL = text("""
    SELECT
        COUNT(DISTINCT s.id) AS store_count,
        (SELECT COUNT(*) FROM products p
           JOIN stores ps ON ps.id = p.store_id
          WHERE ps.user_id = :user_id) AS product_count
    FROM stores s
    WHERE s.user_id = :user_id
""")
_ORDER_STATS_SQL = text("""
    SELECT
        COUNT(*) AS order_count,
        COUNT(*) FILTER (WHERE o.payment_status = 'paid') AS paid_order_count,
        COUNT(*) FILTER (WHERE o.payment_status = 'pending') AS pending_order_count,
        COALESCE(SUM(o.total_amount) FILTER (WHERE o.payment_status = 'paid'), 0) AS revenue
    FROM orders o
    JOIN stores s ON s.id = o.store_id
    WHERE s.user_id = :user_id
""")
_WALLET_SQL = text("SELECT balance FROM wallets WHERE user_id = :user_id")
_INVESTMENT_STATS_SQL = text("""
    SELECT
        COUNT(*) AS active_investments,
        COALESCE(SUM(amount), 0) AS total_invested
    FROM investments
    WHERE user_id = :user_id AND status = 'active'
""")


class DashboardService:
    async def get_stats(self, user_id: str, db: AsyncSession) -> dict[str, Any]:
        params = {"user_id": user_id}
        stores = (await db.execute(_STORE_STATS_SQL, params)).fetchone()
        orders = (await db.execute(_ORDER_STATS_SQL, params)).fetchone()
        wallet = (await db.execute(_WALLET_SQL, params)).fetchone()
        investments = (await db.execute(_INVESTMENT_STATS_SQL, params)).fetchone()

        balance = wallet.balance if wallet else 0
        revenue = int(orders.revenue) if orders else 0
        return {
            "store_count": stores.store_count if stores else 0,
            "product_count": stores.product_count if stores else 0,
            "order_count": orders.order_count if orders else 0,
            "paid_order_count": orders.paid_order_count if orders else 0,
            "pending_order_count": orders.pending_order_count if orders else 0,
            "revenue": revenue,
            "revenue_display": rupiah_display(revenue),
            "wallet_balance": balance,
            "wallet_balance_display": rupiah_display(balance),
            "active_investments": investments.active_investments if investments else 0,
            "total_invested": int(investments.total_invested) if investments else 0,
        }
