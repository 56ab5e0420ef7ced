"""InvestmentApplicationService — buy/sell simple investments against the wallet.

Buy:  debit ``amount`` (``investment`` record, negative) + insert the position.
Sell: CAS the position to ``sold``, credit ``sell_amount`` (``investment``
      record, positive) and append a ``gain`` memo record of
      ``sell_amount - amount`` (negative for a loss).
Each runs in a single transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.enums import ActivityType, FinancialRecordType, ReferenceType
from src.shop_common.errors import InvestmentNotFoundError
from src.shop_wallet.application.investment_schemas import (
    InvestmentResponse,
    SellInvestmentResponse,
)
from src.shop_wallet.domain.models import LedgerDelta
from src.shop_wallet.domain.repository import (
    InvestmentRepositoryProtocol,
    WalletRepositoryProtocol,
)
from src.shop_wallet.infrastructure.investment_persistence import InvestmentRepository
from src.shop_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)


class InvestmentApplicationService:
    def __init__(
        self,
        investments: InvestmentRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
    ) -> None:
        self._investments: InvestmentRepositoryProtocol = investments or InvestmentRepository()
        self._wallets: WalletRepositoryProtocol = wallets or WalletRepository()

    async def buy(
        self,
        db: AsyncSession,
        user_id: str,
        wallet_address: str,
        asset: str,
        amount: int,
    ) -> InvestmentResponse:
        try:
            investment = await self._investments.create(
                db, user_id, wallet_address, asset, amount
            )
            # Debit after the insert so the ledger row can reference the investment;
            # InsufficientFundsError rolls the insert back with everything else.
            await self._wallets.apply_delta(
                db,
                LedgerDelta(
                    user_id=user_id,
                    amount=-amount,
                    record_type=FinancialRecordType.INVESTMENT.value,
                    activity_type=ActivityType.INVEST_BUY.value,
                    description=f"Invested {amount} in {asset}",
                    reference_type=ReferenceType.INVESTMENT.value,
                    reference_id=investment.id,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %s invested %d in %s (%s)", user_id, amount, asset, investment.id)
        return InvestmentResponse.from_domain(investment)

    async def sell(
        self, db: AsyncSession, user_id: str, investment_id: str, sell_amount: int
    ) -> SellInvestmentResponse:
        try:
            investment = await self._investments.mark_sold(
                db, investment_id, user_id, sell_amount
            )
            if investment is None:
                raise InvestmentNotFoundError(investment_id)

            gain = sell_amount - investment.amount
            wallet, _ = await self._wallets.apply_delta(
                db,
                LedgerDelta(
                    user_id=user_id,
                    amount=sell_amount,
                    record_type=FinancialRecordType.INVESTMENT.value,
                    activity_type=ActivityType.INVEST_SELL.value,
                    description=f"Sold {investment.asset} for {sell_amount}",
                    reference_type=ReferenceType.INVESTMENT.value,
                    reference_id=investment.id,
                ),
            )
            await self._wallets.append_memo_record(
                db,
                user_id=user_id,
                record_type=FinancialRecordType.GAIN.value,
                amount=gain,
                balance_after=wallet.balance,
                description=f"{'Gain' if gain >= 0 else 'Loss'} from {investment.asset}",
                reference_type=ReferenceType.INVESTMENT.value,
                reference_id=investment.id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %s sold investment %s, gain %d", user_id, investment_id, gain)
        return SellInvestmentResponse(
            investment_id=investment.id,
            original_amount=investment.amount,
            sell_amount=sell_amount,
            gain=gain,
            wallet_balance=wallet.balance,
        )

    async def list_investments(
        self, db: AsyncSession, user_id: str
    ) -> list[InvestmentResponse]:
        investments = await self._investments.list_by_user(db, user_id)
        return [InvestmentResponse.from_domain(i) for i in investments]
