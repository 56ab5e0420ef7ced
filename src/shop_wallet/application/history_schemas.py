"""Pydantic schemas for the transaction-history endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from src.shop_common.enums import TransactionHistoryStatus
from src.shop_common.money import MAX_AMOUNT, rupiah_display
from src.shop_wallet.domain.models import TransactionHistory


class CreateTransactionHistoryRequest(BaseModel):
    order_id: str = Field(..., min_length=1, max_length=64)
    midtrans_order_id: str | None = Field(None, max_length=64)
    total_amount: int = Field(..., gt=0, le=MAX_AMOUNT)
    discount_amount: int = Field(0, ge=0, le=MAX_AMOUNT)
    coupons_used: list[Any] = Field(default_factory=list, max_length=50)
    payment_method: str = Field("midtrans", min_length=1, max_length=32)
    items: list[dict[str, Any]] = Field(default_factory=list, max_length=100)
    status: TransactionHistoryStatus = TransactionHistoryStatus.COMPLETED


class TransactionHistoryItem(BaseModel):
    id: int
    order_id: str
    midtrans_order_id: str | None
    total_amount: int
    total_display: str
    discount_amount: int
    payment_method: str
    coupons_used: list[Any]
    items_data: list[Any]
    status: TransactionHistoryStatus
    created_at: str | None

    @classmethod
    def from_domain(cls, h: TransactionHistory) -> "TransactionHistoryItem":
        return cls(
            id=h.id,
            order_id=h.order_id,
            midtrans_order_id=h.midtrans_order_id,
            total_amount=h.total_amount,
            total_display=rupiah_display(h.total_amount),
            discount_amount=h.discount_amount,
            payment_method=h.payment_method,
            coupons_used=h.coupons_used,
            items_data=h.items_data,
            status=TransactionHistoryStatus(h.status),
            created_at=h.created_at.isoformat() if h.created_at else None,
        )


class TransactionHistoryListResponse(BaseModel):
    items: list[TransactionHistoryItem]
    next_cursor: str | None
    has_more: bool
