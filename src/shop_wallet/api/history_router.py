"""Transaction-history endpoints: record and list. Both require JWT."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.enums import TransactionHistoryStatus
from src.shop_common.response import ApiResponse, success_response
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel
from src.shop_wallet.application.history_schemas import CreateTransactionHistoryRequest
from src.shop_wallet.application.history_service import TransactionHistoryService

router = APIRouter(prefix="/transaction-history", tags=["transaction-history"])

_service = TransactionHistoryService()


@router.post("", status_code=status.HTTP_201_CREATED)
async def record_transaction_history(
    body: CreateTransactionHistoryRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.record(db, str(current_user.id), body)
    resp = success_response(data.model_dump(), message="Transaction history recorded")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def list_transaction_history(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    history_status: TransactionHistoryStatus | None = Query(None, alias="status"),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_history(
        db,
        str(current_user.id),
        history_status.value if history_status else None,
        cursor,
        limit,
    )
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
