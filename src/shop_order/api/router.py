"""Order REST API: checkout, store order list, order detail. All require JWT."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.enums import PaymentStatus
from src.shop_common.response import ApiResponse, success_response
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel
from src.shop_order.application.schemas import CreateOrderRequest
from src.shop_order.application.service import OrderApplicationService

router = APIRouter(tags=["orders"])

_service = OrderApplicationService()


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.create_order(db, str(current_user.id), body)
    resp = success_response(data.model_dump(), message="Order created successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/stores/{store_id}/orders")
async def list_store_orders(
    store_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    payment_status: PaymentStatus | None = Query(None),
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_store_orders(
        db,
        str(current_user.id),
        str(store_id),
        payment_status.value if payment_status else None,
        cursor,
        limit,
    )
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_order(db, str(current_user.id), order_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
