"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.shop_common.database import engine
from src.shop_common.errors import AppError, StorageError, ValidationError
from src.shop_common.redis_client import close_redis, get_redis
from src.shop_common.response import error_response
from src.shop_dashboard.api.router import router as dashboard_router
from src.shop_gateway.api.router import router as auth_router
from src.shop_gateway.middleware.rate_limit import RateLimitMiddleware
from src.shop_gateway.middleware.request_log import RequestLogMiddleware
from src.shop_order.api.router import router as order_router
from src.shop_payment.api.router import router as payment_router
from src.shop_payment.infrastructure.midtrans_client import close_gateway, get_gateway
from src.shop_store.api.router import router as store_router
from src.shop_wallet.api.history_router import router as history_router
from src.shop_wallet.api.investment_router import router as investment_router
from src.shop_wallet.api.router import router as wallet_router

APP_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: logging, verify DB + Redis. Shutdown: close gateway, DB, Redis."""
    # Startup
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    await get_redis()
    if not settings.MIDTRANS_SERVER_KEY:
        logger.warning("MIDTRANS_SERVER_KEY is empty: checkout and webhooks will fail")
    logger.info("%s started, payment gateway in %s mode", settings.APP_NAME, get_gateway().mode)
    yield
    # Shutdown
    await close_gateway()
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    lifespan=lifespan,
)


# Added last = outermost: the request id exists before rate limiting runs.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError, error: str | None = None) -> JSONResponse:
    resp = error_response(exc.code, exc.message, error)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_json(request, exc)


# Framework-raised HTTP errors (missing or rejected bearer token, unknown
# route, wrong method) mapped onto the envelope's error codes.
_HTTP_ERROR_CODES = {401: 1001, 403: 9005, 404: 9006}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    resp = error_response(_HTTP_ERROR_CODES.get(exc.status_code, 9000), str(exc.detail))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.status_code,
        content=resp.model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return _error_json(request, ValidationError("Invalid request"), details)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return _error_json(request, StorageError())


app.include_router(auth_router, prefix="/api/v1")
app.include_router(store_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(payment_router, prefix="/api/v1")
app.include_router(wallet_router, prefix="/api/v1")
app.include_router(investment_router, prefix="/api/v1")
app.include_router(history_router, prefix="/api/v1")
app.include_router(dashboard_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, Any]:
    gateway = get_gateway()
    return {
        "status": "ok",
        "version": APP_VERSION,
        "payment_gateway": gateway.mode,
        "in_flight_gateway_requests": gateway.in_flight,
    }
