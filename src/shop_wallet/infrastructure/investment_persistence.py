"""InvestmentRepository — raw SQL over the investments table.

``mark_sold`` is a compare-and-set on ``status = 'active'``: a second sell of
the same investment (double click, concurrent request) matches 0 rows and the
caller reports it as not found, so proceeds are credited at most once.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import InternalError
from src.shop_wallet.domain.models import Investment

_COLUMNS = """
    id, user_id, wallet_address, asset, amount, status,
    sell_amount, sold_at, created_at
"""

_INSERT_SQL = text(f"""
    INSERT INTO investments (user_id, wallet_address, asset, amount, status)
    VALUES (:user_id, :wallet_address, :asset, :amount, 'active')
    RETURNING {_COLUMNS}
""")

_MARK_SOLD_SQL = text(f"""
    UPDATE investments
    SET status = 'sold', sell_amount = :sell_amount, sold_at = NOW()
    WHERE id = CAST(:id AS UUID) AND user_id = :user_id AND status = 'active'
    RETURNING {_COLUMNS}
""")

_LIST_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM investments
    WHERE user_id = :user_id
    ORDER BY created_at DESC
""")


def _row_to_investment(row: Any) -> Investment:
    return Investment(
        id=str(row.id),
        user_id=row.user_id,
        wallet_address=row.wallet_address,
        asset=row.asset,
        amount=row.amount,
        status=row.status,
        sell_amount=row.sell_amount,
        sold_at=row.sold_at,
        created_at=row.created_at,
    )


class InvestmentRepository:
    async def create(
        self, db: AsyncSession, user_id: str, wallet_address: str, asset: str, amount: int
    ) -> Investment:
        result = await db.execute(
            _INSERT_SQL,
            {
                "user_id": user_id,
                "wallet_address": wallet_address,
                "asset": asset,
                "amount": amount,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Investment insert returned no rows")
        return _row_to_investment(row)

    async def mark_sold(
        self, db: AsyncSession, investment_id: str, user_id: str, sell_amount: int
    ) -> Investment | None:
        result = await db.execute(
            _MARK_SOLD_SQL,
            {"id": investment_id, "user_id": user_id, "sell_amount": sell_amount},
        )
        row = result.fetchone()
        return _row_to_investment(row) if row else None

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Investment]:
        result = await db.execute(_LIST_SQL, {"user_id": user_id})
        return [_row_to_investment(row) for row in result.fetchall()]
