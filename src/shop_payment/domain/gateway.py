"""Payment gateway Protocol — what the order and payment services need.

Unit tests inject fakes conforming to it; MidtransClient is the real one.
"""

from typing import Any, Protocol

from src.shop_payment.domain.models import (
    CheckoutRequest,
    GatewayTransaction,
    PaymentSession,
)


class PaymentGatewayProtocol(Protocol):
    async def create_session(self, request: CheckoutRequest) -> PaymentSession:
        """Open a hosted checkout session. Raises GatewayError on any failure."""
        ...

    async def get_status(self, order_id: str) -> GatewayTransaction:
        """Authoritative transaction status. Raises GatewayError on any failure."""
        ...

    def verify_notification(self, payload: dict[str, Any]) -> GatewayTransaction:
        """Check the webhook signature and parse it. Raises InvalidSignatureError."""
        ...
