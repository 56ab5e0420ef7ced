"""shop_wallet REST API — wallet, financial records, activities. All require JWT."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.enums import ActivityType, FinancialRecordType
from src.shop_common.response import ApiResponse, success_response
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel
from src.shop_wallet.application.schemas import TopUpRequest, WithdrawRequest
from src.shop_wallet.application.service import WalletApplicationService

router = APIRouter(tags=["wallet"])

_service = WalletApplicationService()


@router.get("/wallet")
async def get_wallet(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_wallet(db, str(current_user.id))
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/wallet/topup")
async def top_up(
    body: TopUpRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.top_up(db, str(current_user.id), body.amount)
    resp = success_response(data.model_dump(), message="Top-up successful")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/wallet/withdraw")
async def withdraw(
    body: WithdrawRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.withdraw(db, str(current_user.id), body.amount)
    resp = success_response(data.model_dump(), message="Withdrawal successful")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/financial/records")
async def list_records(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    record_type: FinancialRecordType | None = Query(None, alias="type"),
) -> ApiResponse:
    data = await _service.list_records(
        db,
        str(current_user.id),
        record_type.value if record_type else None,
        cursor,
        limit,
    )
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/financial/summary")
async def financial_summary(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.summary(db, str(current_user.id))
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/activities")
async def list_activities(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    activity_type: ActivityType | None = Query(None, alias="type"),
) -> ApiResponse:
    data = await _service.list_activities(
        db,
        str(current_user.id),
        activity_type.value if activity_type else None,
        cursor,
        limit,
    )
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
