"""TransactionHistoryService — client-reported checkout summaries.

A history row is a receipt the client keeps for its own records. It does not
touch the wallet or the ledger: store income is credited only by payment
reconciliation, so a client-posted ``completed`` entry cannot mint balance.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.pagination import cursor_decode, cursor_encode, split_page
from src.shop_wallet.application.history_schemas import (
    CreateTransactionHistoryRequest,
    TransactionHistoryItem,
    TransactionHistoryListResponse,
)
from src.shop_wallet.domain.models import TransactionHistory
from src.shop_wallet.domain.repository import TransactionHistoryRepositoryProtocol
from src.shop_wallet.infrastructure.history_persistence import TransactionHistoryRepository

logger = logging.getLogger(__name__)


class TransactionHistoryService:
    def __init__(self, repo: TransactionHistoryRepositoryProtocol | None = None) -> None:
        self._repo: TransactionHistoryRepositoryProtocol = (
            repo or TransactionHistoryRepository()
        )

    async def record(
        self, db: AsyncSession, user_id: str, req: CreateTransactionHistoryRequest
    ) -> TransactionHistoryItem:
        try:
            history = await self._repo.create(
                db,
                TransactionHistory(
                    id=0,
                    user_id=user_id,
                    order_id=req.order_id,
                    midtrans_order_id=req.midtrans_order_id,
                    total_amount=req.total_amount,
                    discount_amount=req.discount_amount,
                    payment_method=req.payment_method,
                    coupons_used=list(req.coupons_used),
                    items_data=list(req.items),
                    status=req.status.value,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "History %d recorded for user %s: order %s (%s)",
            history.id,
            user_id,
            history.order_id,
            history.status,
        )
        return TransactionHistoryItem.from_domain(history)

    async def list_history(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        cursor: str | None,
        limit: int,
    ) -> TransactionHistoryListResponse:
        key = cursor_decode(cursor)
        rows = await self._repo.list_by_user(
            db, user_id, status, key if isinstance(key, int) else None, limit + 1
        )
        page, has_more = split_page(rows, limit)
        return TransactionHistoryListResponse(
            items=[TransactionHistoryItem.from_domain(h) for h in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )
