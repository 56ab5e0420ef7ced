"""Repository Protocols — dependency inversion for testability.

Unit tests inject mocks that conform to these Protocols.
The infrastructure layer provides the real implementations.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_wallet.domain.models import (
    ActivityLog,
    FinancialRecord,
    Investment,
    LedgerDelta,
    LedgerSummary,
    TransactionHistory,
    Wallet,
)


class WalletRepositoryProtocol(Protocol):
    async def get_or_create_wallet(self, db: AsyncSession, user_id: str) -> Wallet: ...

    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None: ...

    async def apply_delta(
        self, db: AsyncSession, delta: LedgerDelta
    ) -> tuple[Wallet, FinancialRecord]: ...

    async def append_memo_record(
        self,
        db: AsyncSession,
        user_id: str,
        record_type: str,
        amount: int,
        balance_after: int,
        description: str,
        reference_type: str | None,
        reference_id: str | None,
    ) -> FinancialRecord: ...

    async def list_records(
        self,
        db: AsyncSession,
        user_id: str,
        record_type: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[FinancialRecord]: ...

    async def list_activities(
        self,
        db: AsyncSession,
        user_id: str,
        activity_type: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[ActivityLog]: ...

    async def summarize(self, db: AsyncSession, user_id: str) -> LedgerSummary: ...


class InvestmentRepositoryProtocol(Protocol):
    async def create(
        self, db: AsyncSession, user_id: str, wallet_address: str, asset: str, amount: int
    ) -> Investment: ...

    async def mark_sold(
        self, db: AsyncSession, investment_id: str, user_id: str, sell_amount: int
    ) -> Investment | None: ...

    async def list_by_user(self, db: AsyncSession, user_id: str) -> list[Investment]: ...


class TransactionHistoryRepositoryProtocol(Protocol):
    async def create(
        self, db: AsyncSession, history: TransactionHistory
    ) -> TransactionHistory: ...

    async def list_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        status: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[TransactionHistory]: ...
