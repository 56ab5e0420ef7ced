"""Payment API: browser redirects, gateway webhook, status query.

The redirect pages and the webhook are public (the gateway and the browser
carry no bearer token). The webhook answers ``{"status": "ok"}`` rather than
the ApiResponse envelope; any error status makes the gateway retry.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.response import ApiResponse, success_response
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel
from src.shop_payment.application.schemas import WebhookAck
from src.shop_payment.application.service import PaymentReconciliationService

router = APIRouter(prefix="/payment", tags=["payment"])

_service = PaymentReconciliationService()


async def _redirect_page(
    kind: str,
    db: AsyncSession,
    order_id: str | None,
    transaction_status: str | None,
    status_code: str | None,
) -> HTMLResponse:
    page = await _service.handle_redirect(db, kind, order_id, transaction_status, status_code)
    return HTMLResponse(content=page, status_code=200)


@router.get("/finish", response_class=HTMLResponse)
async def payment_finish(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    order_id: str | None = Query(None),
    transaction_status: str | None = Query(None),
    status_code: str | None = Query(None),
) -> HTMLResponse:
    return await _redirect_page("finish", db, order_id, transaction_status, status_code)


@router.get("/error", response_class=HTMLResponse)
async def payment_error(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    order_id: str | None = Query(None),
    transaction_status: str | None = Query(None),
    status_code: str | None = Query(None),
) -> HTMLResponse:
    return await _redirect_page("error", db, order_id, transaction_status, status_code)


@router.get("/pending", response_class=HTMLResponse)
async def payment_pending(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    order_id: str | None = Query(None),
    transaction_status: str | None = Query(None),
    status_code: str | None = Query(None),
) -> HTMLResponse:
    return await _redirect_page("pending", db, order_id, transaction_status, status_code)


@router.post("/webhook")
async def payment_webhook(
    payload: Annotated[dict[str, Any], Body()],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> dict[str, str]:
    await _service.handle_notification(db, payload)
    return WebhookAck().model_dump()


@router.get("/status/{external_order_id}")
async def payment_status(
    external_order_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.check_status(db, str(current_user.id), external_order_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
