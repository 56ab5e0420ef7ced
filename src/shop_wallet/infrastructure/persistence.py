"""WalletRepository — the ledger/wallet updater and ledger queries.

Balance mutations are a single atomic PostgreSQL ``UPDATE ... RETURNING`` whose
WHERE clause carries the business rule (``balance + :amount >= 0``). The UPDATE
takes the row lock and re-reads the committed balance, so two concurrent
withdrawals can never both pass the check against a stale read. A result of
0 rows means the wallet is missing or the rule was violated.

Transaction ownership: the CALLER (application service) commits or rolls back.
``apply_delta`` issues its three statements on the caller's session, so the
balance change, the financial record and the activity log commit together.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import InsufficientFundsError, InternalError, WalletNotFoundError
from src.shop_wallet.domain.models import (
    ActivityLog,
    FinancialRecord,
    LedgerDelta,
    LedgerSummary,
    Wallet,
)

# ---------------------------------------------------------------------------
# SQL: wallets
# ---------------------------------------------------------------------------

_WALLET_COLUMNS = "id, user_id, balance, version, created_at, updated_at"

_GET_WALLET_SQL = text(f"""
    SELECT {_WALLET_COLUMNS}
    FROM wallets
    WHERE user_id = :user_id
""")

_ENSURE_WALLET_SQL = text("""
    INSERT INTO wallets (user_id, balance, version)
    VALUES (:user_id, 0, 0)
    ON CONFLICT (user_id) DO NOTHING
""")

_APPLY_DELTA_SQL = text(f"""
    UPDATE wallets
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND balance + :amount >= 0
    RETURNING {_WALLET_COLUMNS}
""")

# ---------------------------------------------------------------------------
# SQL: append-only ledger tables
# ---------------------------------------------------------------------------

_RECORD_COLUMNS = """
    id, user_id, record_type, amount, balance_after,
    description, reference_type, reference_id, created_at
"""

_INSERT_RECORD_SQL = text(f"""
    INSERT INTO financial_records
        (user_id, record_type, amount, balance_after,
         description, reference_type, reference_id)
    VALUES
        (:user_id, :record_type, :amount, :balance_after,
         :description, :reference_type, :reference_id)
    RETURNING {_RECORD_COLUMNS}
""")

_INSERT_ACTIVITY_SQL = text("""
    INSERT INTO activity_logs (user_id, activity_type, amount, description)
    VALUES (:user_id, :activity_type, :amount, :description)
""")

_LIST_RECORDS_SQL = text(f"""
    SELECT {_RECORD_COLUMNS}
    FROM financial_records
    WHERE user_id = :user_id
      AND (CAST(:record_type AS TEXT) IS NULL OR record_type = CAST(:record_type AS TEXT))
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")

_LIST_ACTIVITIES_SQL = text("""
    SELECT id, user_id, activity_type, amount, description, created_at
    FROM activity_logs
    WHERE user_id = :user_id
      AND (CAST(:activity_type AS TEXT) IS NULL OR activity_type = CAST(:activity_type AS TEXT))
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")

_SUMMARY_SQL = text("""
    SELECT record_type, COALESCE(SUM(amount), 0) AS total, COUNT(*) AS cnt
    FROM financial_records
    WHERE user_id = :user_id
    GROUP BY record_type
""")


def _row_to_wallet(row: Any) -> Wallet:
    return Wallet(
        id=str(row.id),
        user_id=row.user_id,
        balance=row.balance,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_record(row: Any) -> FinancialRecord:
    return FinancialRecord(
        id=row.id,
        user_id=row.user_id,
        record_type=row.record_type,
        amount=row.amount,
        balance_after=row.balance_after,
        description=row.description,
        reference_type=row.reference_type,
        reference_id=row.reference_id,
        created_at=row.created_at,
    )


def _row_to_activity(row: Any) -> ActivityLog:
    return ActivityLog(
        id=row.id,
        user_id=row.user_id,
        activity_type=row.activity_type,
        amount=row.amount,
        description=row.description,
        created_at=row.created_at,
    )


class WalletRepository:
    """Concrete repository — every balance change is atomic at the SQL level."""

    async def get_wallet(self, db: AsyncSession, user_id: str) -> Wallet | None:
        result = await db.execute(_GET_WALLET_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_wallet(row) if row else None

    async def get_or_create_wallet(self, db: AsyncSession, user_id: str) -> Wallet:
        await db.execute(_ENSURE_WALLET_SQL, {"user_id": user_id})
        wallet = await self.get_wallet(db, user_id)
        if wallet is None:
            raise InternalError(f"Wallet upsert returned no row for user {user_id}")
        return wallet

    async def apply_delta(
        self, db: AsyncSession, delta: LedgerDelta
    ) -> tuple[Wallet, FinancialRecord]:
        """Adjust the balance, append a financial record and an activity log.

        Raises:
            WalletNotFoundError: the user has no wallet row.
            InsufficientFundsError: a debit would take the balance below zero.
        """
        result = await db.execute(
            _APPLY_DELTA_SQL, {"user_id": delta.user_id, "amount": delta.amount}
        )
        row = result.fetchone()
        if row is None:
            current = await self.get_wallet(db, delta.user_id)
            if current is None:
                raise WalletNotFoundError(delta.user_id)
            raise InsufficientFundsError(-delta.amount, current.balance)
        wallet = _row_to_wallet(row)

        record = await self._insert_record(
            db,
            user_id=delta.user_id,
            record_type=delta.record_type,
            amount=delta.amount,
            balance_after=wallet.balance,
            description=delta.description,
            reference_type=delta.reference_type,
            reference_id=delta.reference_id,
        )
        await db.execute(
            _INSERT_ACTIVITY_SQL,
            {
                "user_id": delta.user_id,
                "activity_type": delta.activity_type,
                "amount": abs(delta.amount),
                "description": delta.description,
            },
        )
        return wallet, record

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
    ) -> FinancialRecord:
        """Append a record that does not move the balance (e.g. realised gain)."""
        return await self._insert_record(
            db,
            user_id=user_id,
            record_type=record_type,
            amount=amount,
            balance_after=balance_after,
            description=description,
            reference_type=reference_type,
            reference_id=reference_id,
        )

    async def _insert_record(self, db: AsyncSession, **params: Any) -> FinancialRecord:
        result = await db.execute(_INSERT_RECORD_SQL, params)
        row = result.fetchone()
        if row is None:
            raise InternalError("Financial record insert returned no rows")
        return _row_to_record(row)

    async def list_records(
        self,
        db: AsyncSession,
        user_id: str,
        record_type: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[FinancialRecord]:
        result = await db.execute(
            _LIST_RECORDS_SQL,
            {
                "user_id": user_id,
                "record_type": record_type,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_record(row) for row in result.fetchall()]

    async def list_activities(
        self,
        db: AsyncSession,
        user_id: str,
        activity_type: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[ActivityLog]:
        result = await db.execute(
            _LIST_ACTIVITIES_SQL,
            {
                "user_id": user_id,
                "activity_type": activity_type,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_activity(row) for row in result.fetchall()]

    async def summarize(self, db: AsyncSession, user_id: str) -> LedgerSummary:
        wallet = await self.get_wallet(db, user_id)
        result = await db.execute(_SUMMARY_SQL, {"user_id": user_id})
        summary = LedgerSummary(user_id=user_id, wallet_balance=wallet.balance if wallet else 0)
        for row in result.fetchall():
            summary.totals[row.record_type] = int(row.total)
            summary.counts[row.record_type] = int(row.cnt)
        return summary
