"""Investment endpoints: buy, list, sell."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.response import ApiResponse, success_response
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel
from src.shop_wallet.application.investment_schemas import (
    CreateInvestmentRequest,
    SellInvestmentRequest,
)
from src.shop_wallet.application.investment_service import InvestmentApplicationService

router = APIRouter(prefix="/investments", tags=["investments"])

_service = InvestmentApplicationService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_investment(
    body: CreateInvestmentRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.buy(
        db, str(current_user.id), body.wallet_address, body.asset, body.amount
    )
    resp = success_response(data.model_dump(), message="Investment created")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def list_investments(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    items = await _service.list_investments(db, str(current_user.id))
    resp = success_response({"items": [i.model_dump() for i in items]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{investment_id}/sell")
async def sell_investment(
    investment_id: uuid.UUID,
    body: SellInvestmentRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.sell(db, str(current_user.id), str(investment_id), body.sell_amount)
    resp = success_response(data.model_dump(), message="Investment sold")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
