"""WalletApplicationService — thin composition layer over WalletRepository.

Top-up and withdraw run the ledger update and commit it as one transaction;
any failure rolls back all three writes (balance, record, activity).
Read operations (wallet, records, activities, summary) do not commit.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.enums import ActivityType, FinancialRecordType, ReferenceType
from src.shop_common.money import rupiah_display
from src.shop_common.pagination import cursor_decode, cursor_encode, split_page
from src.shop_wallet.application.schemas import (
    ActivityItem,
    ActivityListResponse,
    FinancialRecordItem,
    FinancialRecordListResponse,
    FinancialSummaryResponse,
    WalletMovementResponse,
    WalletResponse,
)
from src.shop_wallet.domain.models import LedgerDelta
from src.shop_wallet.domain.repository import WalletRepositoryProtocol
from src.shop_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


def _int_cursor(cursor: str | None) -> int | None:
    key = cursor_decode(cursor)
    return key if isinstance(key, int) else None


class WalletApplicationService:
    def __init__(self, repo: WalletRepositoryProtocol | None = None) -> None:
        self._repo: WalletRepositoryProtocol = repo or WalletRepository()

    async def get_wallet(self, db: AsyncSession, user_id: str) -> WalletResponse:
        try:
            wallet = await self._repo.get_or_create_wallet(db, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return WalletResponse.from_domain(wallet)

    async def top_up(self, db: AsyncSession, user_id: str, amount: int) -> WalletMovementResponse:
        delta = LedgerDelta(
            user_id=user_id,
            amount=amount,
            record_type=FinancialRecordType.INCOME.value,
            activity_type=ActivityType.TOPUP.value,
            description="Wallet top-up",
            reference_type=ReferenceType.TOPUP.value,
        )
        return await self._move(db, delta)

    async def withdraw(
        self, db: AsyncSession, user_id: str, amount: int
    ) -> WalletMovementResponse:
        """Debit the wallet; InsufficientFundsError leaves the balance untouched."""
        delta = LedgerDelta(
            user_id=user_id,
            amount=-amount,
            record_type=FinancialRecordType.EXPENSE.value,
            activity_type=ActivityType.WITHDRAW.value,
            description="Wallet withdrawal",
            reference_type=ReferenceType.WITHDRAW.value,
        )
        return await self._move(db, delta)

    async def _move(self, db: AsyncSession, delta: LedgerDelta) -> WalletMovementResponse:
        try:
            wallet, record = await self._repo.apply_delta(db, delta)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Wallet %s for user %s: %+d -> balance %d",
            delta.activity_type,
            delta.user_id,
            delta.amount,
            wallet.balance,
        )
        return WalletMovementResponse(
            balance=wallet.balance,
            balance_display=rupiah_display(wallet.balance),
            amount=abs(delta.amount),
            amount_display=rupiah_display(abs(delta.amount)),
            record_id=record.id,
        )

    async def list_records(
        self,
        db: AsyncSession,
        user_id: str,
        record_type: str | None,
        cursor: str | None,
        limit: int,
    ) -> FinancialRecordListResponse:
        rows = await self._repo.list_records(
            db, user_id, record_type, _int_cursor(cursor), limit + 1
        )
        page, has_more = split_page(rows, limit)
        return FinancialRecordListResponse(
            items=[FinancialRecordItem.from_domain(r) for r in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )

    async def list_activities(
        self,
        db: AsyncSession,
        user_id: str,
        activity_type: str | None,
        cursor: str | None,
        limit: int,
    ) -> ActivityListResponse:
        rows = await self._repo.list_activities(
            db, user_id, activity_type, _int_cursor(cursor), limit + 1
        )
        page, has_more = split_page(rows, limit)
        return ActivityListResponse(
            items=[ActivityItem.from_domain(a) for a in page],
            next_cursor=cursor_encode(page[-1].id) if has_more and page else None,
            has_more=has_more,
        )

    async def summary(self, db: AsyncSession, user_id: str) -> FinancialSummaryResponse:
        summary = await self._repo.summarize(db, user_id)
        if not summary.reconciled:
            logger.warning(
                "Ledger for user %s does not reconcile: ledger=%d wallet=%d",
                user_id,
                summary.ledger_balance,
                summary.wallet_balance,
            )
        return FinancialSummaryResponse.from_domain(summary)
