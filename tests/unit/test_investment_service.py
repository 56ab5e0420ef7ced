"""Unit tests for InvestmentApplicationService with mocked repositories."""

from unittest.mock import AsyncMock

import pytest

from src.shop_common.errors import InsufficientFundsError, InvestmentNotFoundError
from src.shop_wallet.application.investment_service import InvestmentApplicationService
from src.shop_wallet.domain.models import FinancialRecord, Investment, LedgerDelta, Wallet


def _investment(status: str = "active", sell_amount: int | None = None) -> Investment:
    return Investment(
        id="inv-1",
        user_id="user-1",
        wallet_address="0xabc",
        asset="GOLD",
        amount=10000,
        status=status,
        sell_amount=sell_amount,
    )


def _wallet(balance: int) -> Wallet:
    return Wallet(id="w-1", user_id="user-1", balance=balance, version=1)


def _record() -> FinancialRecord:
    return FinancialRecord(
        id=1, user_id="user-1", record_type="investment", amount=0, balance_after=0
    )


class TestBuy:
    async def test_debits_wallet_with_investment_reference(self) -> None:
        investments = AsyncMock()
        investments.create.return_value = _investment()
        wallets = AsyncMock()
        wallets.apply_delta.return_value = (_wallet(40000), _record())
        db = AsyncMock()

        result = await InvestmentApplicationService(investments, wallets).buy(
            db, "user-1", "0xabc", "GOLD", 10000
        )

        delta: LedgerDelta = wallets.apply_delta.await_args.args[1]
        assert delta.amount == -10000
        assert delta.record_type == "investment"
        assert delta.activity_type == "invest_buy"
        assert delta.reference_id == "inv-1"
        assert result.status == "active"
        db.commit.assert_awaited_once()

    async def test_insufficient_funds_rolls_back_position(self) -> None:
        investments = AsyncMock()
        investments.create.return_value = _investment()
        wallets = AsyncMock()
        wallets.apply_delta.side_effect = InsufficientFundsError(10000, 500)
        db = AsyncMock()

        with pytest.raises(InsufficientFundsError):
            await InvestmentApplicationService(investments, wallets).buy(
                db, "user-1", "0xabc", "GOLD", 10000
            )
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestSell:
    async def test_credits_proceeds_and_records_gain(self) -> None:
        investments = AsyncMock()
        investments.mark_sold.return_value = _investment("sold", 12500)
        wallets = AsyncMock()
        wallets.apply_delta.return_value = (_wallet(52500), _record())
        db = AsyncMock()

        result = await InvestmentApplicationService(investments, wallets).sell(
            db, "user-1", "inv-1", 12500
        )

        delta: LedgerDelta = wallets.apply_delta.await_args.args[1]
        assert delta.amount == 12500
        assert delta.activity_type == "invest_sell"
        memo = wallets.append_memo_record.await_args.kwargs
        assert memo["record_type"] == "gain"
        assert memo["amount"] == 2500
        assert memo["balance_after"] == 52500
        assert result.gain == 2500
        assert result.wallet_balance == 52500

    async def test_loss_is_negative_gain(self) -> None:
        investments = AsyncMock()
        investments.mark_sold.return_value = _investment("sold", 8000)
        wallets = AsyncMock()
        wallets.apply_delta.return_value = (_wallet(48000), _record())

        result = await InvestmentApplicationService(investments, wallets).sell(
            AsyncMock(), "user-1", "inv-1", 8000
        )
        assert result.gain == -2000

    async def test_second_sell_is_not_found(self) -> None:
        investments = AsyncMock()
        investments.mark_sold.return_value = None
        wallets = AsyncMock()
        db = AsyncMock()

        with pytest.raises(InvestmentNotFoundError):
            await InvestmentApplicationService(investments, wallets).sell(
                db, "user-1", "inv-1", 12500
            )
        wallets.apply_delta.assert_not_awaited()
        db.rollback.assert_awaited_once()
