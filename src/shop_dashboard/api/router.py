"""Dashboard REST API."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.response import ApiResponse, success_response
from src.shop_dashboard.application.service import DashboardService
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel

router = APIRouter(prefix="/dashboard", tags=["dashboard"])
_service = DashboardService()


@router.get("/stats")
async def dashboard_stats(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    result = await _service.get_stats(str(current_user.id), db)
    resp = success_response(result)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
