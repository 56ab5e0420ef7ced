"""Domain models for shop_wallet — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Wallet:
    id: str
    user_id: str
    balance: int
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class FinancialRecord:
    """Append-only ledger row. Never updated or deleted."""

    id: int                          # BIGSERIAL
    user_id: str
    record_type: str                 # FinancialRecordType value
    amount: int                      # signed wallet delta; gain rows carry the gain itself
    balance_after: int               # wallet balance snapshot after the op
    description: str | None = None
    reference_type: str | None = None
    reference_id: str | None = None
    created_at: datetime | None = None


@dataclass
class ActivityLog:
    id: int
    user_id: str
    activity_type: str               # ActivityType value
    amount: int
    description: str | None = None
    created_at: datetime | None = None


@dataclass
class LedgerDelta:
    """One money-moving event to apply atomically to a wallet."""

    user_id: str
    amount: int                      # signed: + credit, - debit
    record_type: str
    activity_type: str
    description: str
    reference_type: str | None = None
    reference_id: str | None = None


@dataclass
class Investment:
    id: str
    user_id: str
    wallet_address: str
    asset: str
    amount: int
    status: str                      # InvestmentStatus value
    sell_amount: int | None = None
    sold_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def gain(self) -> int | None:
        if self.sell_amount is None:
            return None
        return self.sell_amount - self.amount


@dataclass
class LedgerSummary:
    user_id: str
    wallet_balance: int
    totals: dict[str, int] = field(default_factory=dict)   # signed sum per record type
    counts: dict[str, int] = field(default_factory=dict)

    @property
    def ledger_balance(self) -> int:
        """Sum of balance-moving records; gain rows are memo entries."""
        return sum(v for k, v in self.totals.items() if k != "gain")

    @property
    def reconciled(self) -> bool:
        return self.ledger_balance == self.wallet_balance


@dataclass
class TransactionHistory:
    """Client-reported checkout summary. Informational only: never moves the wallet."""

    id: int                          # BIGSERIAL
    user_id: str
    order_id: str
    total_amount: int
    status: str                      # TransactionHistoryStatus value
    midtrans_order_id: str | None = None
    discount_amount: int = 0
    payment_method: str = "midtrans"
    coupons_used: list[Any] = field(default_factory=list)
    items_data: list[Any] = field(default_factory=list)
    created_at: datetime | None = None
