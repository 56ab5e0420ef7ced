"""Pydantic schemas for the wallet, ledger and activity endpoints."""

from pydantic import BaseModel, Field

from src.shop_common.enums import ActivityType, FinancialRecordType
from src.shop_common.money import MAX_AMOUNT, rupiah_display
from src.shop_wallet.domain.models import ActivityLog, FinancialRecord, LedgerSummary, Wallet

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TopUpRequest(BaseModel):
    amount: int = Field(..., gt=0, le=MAX_AMOUNT, description="Amount to add to the wallet")


class WithdrawRequest(BaseModel):
    amount: int = Field(
        ..., gt=0, le=MAX_AMOUNT, description="Amount to take out of the wallet"
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class WalletResponse(BaseModel):
    wallet_id: str
    user_id: str
    balance: int
    balance_display: str
    updated_at: str | None = None

    @classmethod
    def from_domain(cls, wallet: Wallet) -> "WalletResponse":
        return cls(
            wallet_id=wallet.id,
            user_id=wallet.user_id,
            balance=wallet.balance,
            balance_display=rupiah_display(wallet.balance),
            updated_at=wallet.updated_at.isoformat() if wallet.updated_at else None,
        )


class WalletMovementResponse(BaseModel):
    balance: int
    balance_display: str
    amount: int
    amount_display: str
    record_id: int


class FinancialRecordItem(BaseModel):
    id: int
    record_type: FinancialRecordType
    amount: int
    amount_display: str
    balance_after: int
    description: str | None
    reference_type: str | None
    reference_id: str | None
    created_at: str

    @classmethod
    def from_domain(cls, r: FinancialRecord) -> "FinancialRecordItem":
        return cls(
            id=r.id,
            record_type=FinancialRecordType(r.record_type),
            amount=r.amount,
            amount_display=rupiah_display(r.amount),
            balance_after=r.balance_after,
            description=r.description,
            reference_type=r.reference_type,
            reference_id=r.reference_id,
            created_at=r.created_at.isoformat() if r.created_at else "",
        )


class FinancialRecordListResponse(BaseModel):
    items: list[FinancialRecordItem]
    next_cursor: str | None
    has_more: bool


class ActivityItem(BaseModel):
    id: int
    activity_type: ActivityType
    amount: int
    description: str | None
    created_at: str

    @classmethod
    def from_domain(cls, a: ActivityLog) -> "ActivityItem":
        return cls(
            id=a.id,
            activity_type=ActivityType(a.activity_type),
            amount=a.amount,
            description=a.description,
            created_at=a.created_at.isoformat() if a.created_at else "",
        )


class ActivityListResponse(BaseModel):
    items: list[ActivityItem]
    next_cursor: str | None
    has_more: bool


class FinancialSummaryResponse(BaseModel):
    income: int
    expense: int
    investment: int
    gain: int
    counts: dict[str, int]
    wallet_balance: int
    wallet_balance_display: str
    ledger_balance: int
    reconciled: bool

    @classmethod
    def from_domain(cls, s: LedgerSummary) -> "FinancialSummaryResponse":
        return cls(
            income=s.totals.get(FinancialRecordType.INCOME.value, 0),
            expense=s.totals.get(FinancialRecordType.EXPENSE.value, 0),
            investment=s.totals.get(FinancialRecordType.INVESTMENT.value, 0),
            gain=s.totals.get(FinancialRecordType.GAIN.value, 0),
            counts=dict(s.counts),
            wallet_balance=s.wallet_balance,
            wallet_balance_display=rupiah_display(s.wallet_balance),
            ledger_balance=s.ledger_balance,
            reconciled=s.reconciled,
        )
