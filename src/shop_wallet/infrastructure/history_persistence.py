"""TransactionHistoryRepository — raw SQL over transaction_histories.

Rows are append-only. The JSONB columns are bound as JSON text and cast in
SQL; on read they are decoded if the driver hands back a string.
"""

import json
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import InternalError
from src.shop_wallet.domain.models import TransactionHistory

_COLUMNS = """
    id, user_id, order_id, midtrans_order_id, total_amount, discount_amount,
    payment_method, coupons_used, items_data, status, created_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO transaction_histories
        (user_id, order_id, midtrans_order_id, total_amount, discount_amount,
         payment_method, coupons_used, items_data, status)
    VALUES (:user_id, :order_id, :midtrans_order_id, :total_amount, :discount_amount,
            :payment_method, CAST(:coupons_used AS JSONB), CAST(:items_data AS JSONB),
            :status)
    RETURNING {_COLUMNS}
""")

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM transaction_histories
    WHERE user_id = :user_id
      AND (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")


def _json_list(value: Any) -> list[Any]:
    if isinstance(value, str):
        value = json.loads(value)
    return list(value or [])


def _row_to_history(row: Any) -> TransactionHistory:
    return TransactionHistory(
        id=row.id,
        user_id=row.user_id,
        order_id=row.order_id,
        midtrans_order_id=row.midtrans_order_id,
        total_amount=row.total_amount,
        discount_amount=row.discount_amount,
        payment_method=row.payment_method,
        coupons_used=_json_list(row.coupons_used),
        items_data=_json_list(row.items_data),
        status=row.status,
        created_at=row.created_at,
    )


class TransactionHistoryRepository:
    async def create(
        self, db: AsyncSession, history: TransactionHistory
    ) -> TransactionHistory:
        result = await db.execute(
            _INSERT_SQL,
            {
                "user_id": history.user_id,
                "order_id": history.order_id,
                "midtrans_order_id": history.midtrans_order_id,
                "total_amount": history.total_amount,
                "discount_amount": history.discount_amount,
                "payment_method": history.payment_method,
                "coupons_used": json.dumps(history.coupons_used),
                "items_data": json.dumps(history.items_data),
                "status": history.status,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction history insert returned no rows")
        return _row_to_history(row)

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[TransactionHistory]:
        result = await db.execute(
            _LIST_SQL,
            {"user_id": user_id, "status": status, "cursor_id": cursor_id, "limit": limit},
        )
        return [_row_to_history(row) for row in result.fetchall()]
