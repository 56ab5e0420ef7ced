"""Pydantic schemas for the payment endpoints."""

from pydantic import BaseModel


class ReconcileResult(BaseModel):
    """Outcome of one reconciliation attempt.

    ``changed`` is True only for the call that moved the order out of
    ``pending``; repeats and non-terminal signals report False.
    """

    external_order_id: str
    order_id: str
    payment_status: str
    changed: bool


class PaymentStatusResponse(BaseModel):
    order_id: str
    external_order_id: str
    payment_status: str
    gateway_status: str | None
    fraud_status: str | None
    changed: bool


class WebhookAck(BaseModel):
    status: str = "ok"
