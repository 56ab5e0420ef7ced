"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


class FinancialRecordType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"
    # Memo entry: realised gain/loss on an investment sale, no balance movement
    GAIN = "gain"


class ActivityType(str, Enum):
    TOPUP = "topup"
    WITHDRAW = "withdraw"
    PAYMENT = "payment"
    INVEST_BUY = "invest_buy"
    INVEST_SELL = "invest_sell"


class InvestmentStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"


class ReferenceType(str, Enum):
    ORDER = "ORDER"
    INVESTMENT = "INVESTMENT"
    TOPUP = "TOPUP"
    WITHDRAW = "WITHDRAW"


class TransactionHistoryStatus(str, Enum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"
    CANCELLED = "cancelled"


class GatewayTransactionStatus(str, Enum):
    """transaction_status values reported by the payment gateway."""

    CAPTURE = "capture"
    SETTLEMENT = "settlement"
    PENDING = "pending"
    DENY = "deny"
    CANCEL = "cancel"
    EXPIRE = "expire"
    REFUND = "refund"
    PARTIAL_REFUND = "partial_refund"
    AUTHORIZE = "authorize"
