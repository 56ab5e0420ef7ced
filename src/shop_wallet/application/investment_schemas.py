"""Pydantic schemas for the investment endpoints."""

from pydantic import BaseModel, Field, field_validator

from src.shop_common.money import MAX_AMOUNT
from src.shop_wallet.domain.models import Investment


class CreateInvestmentRequest(BaseModel):
    wallet_address: str = Field(..., min_length=1, max_length=128)
    asset: str = Field(..., min_length=1, max_length=64)
    amount: int = Field(..., gt=0, le=MAX_AMOUNT)

    @field_validator("wallet_address", "asset")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class SellInvestmentRequest(BaseModel):
    sell_amount: int = Field(..., gt=0, le=MAX_AMOUNT)


class InvestmentResponse(BaseModel):
    id: str
    wallet_address: str
    asset: str
    amount: int
    status: str
    sell_amount: int | None
    gain: int | None
    sold_at: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, inv: Investment) -> "InvestmentResponse":
        return cls(
            id=inv.id,
            wallet_address=inv.wallet_address,
            asset=inv.asset,
            amount=inv.amount,
            status=inv.status,
            sell_amount=inv.sell_amount,
            gain=inv.gain,
            sold_at=inv.sold_at.isoformat() if inv.sold_at else None,
            created_at=inv.created_at.isoformat() if inv.created_at else None,
        )


class SellInvestmentResponse(BaseModel):
    investment_id: str
    original_amount: int
    sell_amount: int
    gain: int
    wallet_balance: int
