"""Gateway transaction_status → internal PaymentStatus."""

from src.shop_common.enums import GatewayTransactionStatus, PaymentStatus

_FAILED = frozenset(
    {
        GatewayTransactionStatus.DENY.value,
        GatewayTransactionStatus.EXPIRE.value,
        GatewayTransactionStatus.CANCEL.value,
    }
)


def map_transaction_status(
    transaction_status: str | None, fraud_status: str | None = None
) -> PaymentStatus:
    """Classify a gateway status.

    ``capture`` counts as paid only when the fraud check passed (no fraud
    status, or ``accept``); a ``challenge`` stays pending until the gateway
    sends a follow-up. Unknown or missing statuses are pending.
    """
    if transaction_status == GatewayTransactionStatus.CAPTURE.value:
        if fraud_status in (None, "", "accept"):
            return PaymentStatus.PAID
        return PaymentStatus.PENDING
    if transaction_status == GatewayTransactionStatus.SETTLEMENT.value:
        return PaymentStatus.PAID
    if transaction_status in _FAILED:
        return PaymentStatus.FAILED
    return PaymentStatus.PENDING
