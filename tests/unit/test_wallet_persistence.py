"""Unit tests for WalletRepository using a mocked AsyncSession."""

from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.shop_common.errors import InsufficientFundsError, WalletNotFoundError
from src.shop_wallet.domain.models import LedgerDelta
from src.shop_wallet.infrastructure.persistence import WalletRepository


def _wallet_row(balance: int = 50000) -> MagicMock:
    row = MagicMock()
    row.id = "w-1"
    row.user_id = "user-1"
    row.balance = balance
    row.version = 2
    row.created_at = datetime.now(UTC)
    row.updated_at = datetime.now(UTC)
    return row


def _record_row(**kwargs: Any) -> MagicMock:
    row = MagicMock()
    row.id = kwargs.get("id", 11)
    row.user_id = "user-1"
    row.record_type = kwargs.get("record_type", "income")
    row.amount = kwargs.get("amount", 20000)
    row.balance_after = kwargs.get("balance_after", 70000)
    row.description = "desc"
    row.reference_type = kwargs.get("reference_type")
    row.reference_id = kwargs.get("reference_id")
    row.created_at = datetime.now(UTC)
    return row


def _result(row: Any) -> MagicMock:
    result = MagicMock()
    result.fetchone.return_value = row
    return result


def _delta(amount: int) -> LedgerDelta:
    return LedgerDelta(
        user_id="user-1",
        amount=amount,
        record_type="income" if amount > 0 else "expense",
        activity_type="topup" if amount > 0 else "withdraw",
        description="test",
    )


class TestApplyDelta:
    async def test_writes_balance_record_and_activity(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(_wallet_row(70000)),
            _result(_record_row(amount=20000, balance_after=70000)),
            MagicMock(),
        ]

        wallet, record = await WalletRepository().apply_delta(db, _delta(20000))

        assert wallet.balance == 70000
        assert record.balance_after == 70000
        assert db.execute.await_count == 3
        record_params = db.execute.await_args_list[1].args[1]
        assert record_params["amount"] == 20000
        assert record_params["balance_after"] == 70000
        activity_params = db.execute.await_args_list[2].args[1]
        assert activity_params["activity_type"] == "topup"

    async def test_activity_amount_is_absolute(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [
            _result(_wallet_row(30000)),
            _result(_record_row(record_type="expense", amount=-20000, balance_after=30000)),
            MagicMock(),
        ]

        await WalletRepository().apply_delta(db, _delta(-20000))

        assert db.execute.await_args_list[2].args[1]["amount"] == 20000

    async def test_overdraw_raises_insufficient_funds(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(None), _result(_wallet_row(50000))]

        with pytest.raises(InsufficientFundsError) as exc:
            await WalletRepository().apply_delta(db, _delta(-70000))

        assert "70000" in exc.value.message
        assert "50000" in exc.value.message
        # no ledger rows attempted
        assert db.execute.await_count == 2

    async def test_missing_wallet(self) -> None:
        db = AsyncMock()
        db.execute.side_effect = [_result(None), _result(None)]

        with pytest.raises(WalletNotFoundError):
            await WalletRepository().apply_delta(db, _delta(1000))


class TestMemoRecord:
    async def test_single_insert_no_balance_update(self) -> None:
        db = AsyncMock()
        db.execute.return_value = _result(_record_row(record_type="gain", amount=-500))

        record = await WalletRepository().append_memo_record(
            db, "user-1", "gain", -500, 10000, "Loss", "INVESTMENT", "inv-1"
        )

        assert record.record_type == "gain"
        db.execute.assert_awaited_once()


class TestSummarize:
    async def test_groups_by_type(self) -> None:
        rows = [
            MagicMock(record_type="income", total=50000, cnt=1),
            MagicMock(record_type="expense", total=-20000, cnt=1),
        ]
        summary_result = MagicMock()
        summary_result.fetchall.return_value = rows
        db = AsyncMock()
        db.execute.side_effect = [_result(_wallet_row(30000)), summary_result]

        summary = await WalletRepository().summarize(db, "user-1")

        assert summary.totals == {"income": 50000, "expense": -20000}
        assert summary.reconciled is True
