"""MidtransClient — Snap checkout sessions, Core API status, webhook verification.

Every outbound call goes through one shared ``httpx.AsyncClient`` with a
bounded timeout. Transport failures, timeouts and non-success responses are
logged and re-raised as GatewayError so callers roll back their transaction.

Notification signature:
    SHA512(order_id + status_code + gross_amount + server_key), hex digest,
    compared in constant time.
"""

import hashlib
import hmac
import logging
from typing import Any

import httpx

from config.settings import settings
from src.shop_common.errors import GatewayError, InvalidSignatureError
from src.shop_payment.domain.models import (
    CheckoutRequest,
    GatewayTransaction,
    PaymentSession,
)

logger = logging.getLogger(__name__)

_SNAP_URL = {
    False: "https://app.sandbox.midtrans.com/snap/v1/transactions",
    True: "https://app.midtrans.com/snap/v1/transactions",
}
_CORE_API_URL = {
    False: "https://api.sandbox.midtrans.com/v2",
    True: "https://api.midtrans.com/v2",
}

# Core API answers 200 with this status_code in the body for unknown order ids.
_STATUS_NOT_FOUND = "404"


def notification_signature(
    order_id: str, status_code: str, gross_amount: str, server_key: str
) -> str:
    payload = f"{order_id}{status_code}{gross_amount}{server_key}"
    return hashlib.sha512(payload.encode()).hexdigest()


def _to_transaction(body: dict[str, Any], order_id: str) -> GatewayTransaction:
    return GatewayTransaction(
        order_id=str(body.get("order_id") or order_id),
        transaction_status=body.get("transaction_status"),
        fraud_status=body.get("fraud_status"),
        status_code=body.get("status_code"),
        gross_amount=body.get("gross_amount"),
        payment_type=body.get("payment_type"),
        raw=body,
    )


class MidtransClient:
    def __init__(
        self,
        server_key: str | None = None,
        is_production: bool | None = None,
        timeout: float | None = None,
        callback_base_url: str | None = None,
        enabled_payments: list[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._server_key = settings.MIDTRANS_SERVER_KEY if server_key is None else server_key
        self._is_production = (
            settings.MIDTRANS_IS_PRODUCTION if is_production is None else is_production
        )
        self._callback_base_url = (
            callback_base_url or settings.PUBLIC_BASE_URL
        ).rstrip("/")
        self._enabled_payments = (
            settings.MIDTRANS_ENABLED_PAYMENTS if enabled_payments is None else enabled_payments
        )
        self._client = httpx.AsyncClient(
            auth=(self._server_key, ""),
            timeout=timeout or settings.MIDTRANS_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Gateway requests currently awaiting a response."""
        return self._in_flight

    @property
    def mode(self) -> str:
        return "production" if self._is_production else "sandbox"

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Snap
    # ------------------------------------------------------------------

    def _callback_url(self, kind: str, order_id: str) -> str:
        return f"{self._callback_base_url}/api/v1/payment/{kind}?order_id={order_id}"

    def _snap_payload(self, request: CheckoutRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "transaction_details": {
                "order_id": request.order_id,
                "gross_amount": request.gross_amount,
            },
            "credit_card": {"secure": True},
            "customer_details": {
                key: value
                for key, value in (
                    ("first_name", request.customer.first_name),
                    ("email", request.customer.email),
                    ("phone", request.customer.phone),
                )
                if value
            },
            "item_details": [
                {"id": i.id, "name": i.name, "price": i.price, "quantity": i.quantity}
                for i in request.items
            ],
            "callbacks": {
                "finish": self._callback_url("finish", request.order_id),
                "error": self._callback_url("error", request.order_id),
                "pending": self._callback_url("pending", request.order_id),
            },
        }
        if self._enabled_payments:
            payload["enabled_payments"] = list(self._enabled_payments)
        return payload

    async def create_session(self, request: CheckoutRequest) -> PaymentSession:
        body = await self._request(
            "POST", _SNAP_URL[self._is_production], json=self._snap_payload(request)
        )
        token = body.get("token")
        redirect_url = body.get("redirect_url")
        if not token or not redirect_url:
            logger.warning(
                "Snap response for %s missing token: %s", request.order_id, body
            )
            raise GatewayError("Payment gateway returned no checkout token")
        return PaymentSession(token=token, redirect_url=redirect_url)

    # ------------------------------------------------------------------
    # Core API
    # ------------------------------------------------------------------

    async def get_status(self, order_id: str) -> GatewayTransaction:
        body = await self._request(
            "GET", f"{_CORE_API_URL[self._is_production]}/{order_id}/status"
        )
        if str(body.get("status_code")) == _STATUS_NOT_FOUND:
            return GatewayTransaction(
                order_id=order_id, transaction_status=None, status_code=_STATUS_NOT_FOUND, raw=body
            )
        return _to_transaction(body, order_id)

    # ------------------------------------------------------------------
    # Webhook
    # ------------------------------------------------------------------

    def verify_notification(self, payload: dict[str, Any]) -> GatewayTransaction:
        order_id = payload.get("order_id")
        status_code = payload.get("status_code")
        gross_amount = payload.get("gross_amount")
        signature = payload.get("signature_key")
        fields = (order_id, status_code, gross_amount, signature)
        if not all(isinstance(v, str) and v for v in fields):
            logger.warning("Notification missing signature fields: order_id=%s", order_id)
            raise InvalidSignatureError()

        expected = notification_signature(order_id, status_code, gross_amount, self._server_key)
        if not hmac.compare_digest(expected, signature):
            logger.warning("Notification signature mismatch for order %s", order_id)
            raise InvalidSignatureError()
        return _to_transaction(payload, order_id)

    # ------------------------------------------------------------------

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        self._in_flight += 1
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Gateway %s %s timed out: %s", method, url, exc)
            raise GatewayError("Payment gateway timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Gateway %s %s returned %d: %s",
                method,
                url,
                exc.response.status_code,
                exc.response.text[:500],
            )
            raise GatewayError() from exc
        except httpx.HTTPError as exc:
            logger.warning("Gateway %s %s failed: %s", method, url, exc)
            raise GatewayError() from exc
        except ValueError as exc:
            logger.warning("Gateway %s %s returned non-JSON body", method, url)
            raise GatewayError() from exc
        finally:
            self._in_flight -= 1
        if not isinstance(body, dict):
            raise GatewayError("Unexpected payment gateway response")
        return body


_gateway: MidtransClient | None = None


def get_gateway() -> MidtransClient:
    """Process-wide gateway client, created on first use."""
    global _gateway  # noqa: PLW0603
    if _gateway is None:
        _gateway = MidtransClient()
    return _gateway


async def close_gateway() -> None:
    global _gateway  # noqa: PLW0603
    if _gateway is not None:
        await _gateway.aclose()
        _gateway = None
