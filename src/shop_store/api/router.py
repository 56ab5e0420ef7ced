"""Store and product REST API. All endpoints require JWT and are owner-scoped."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.database import get_db_session
from src.shop_common.response import ApiResponse, success_response
from src.shop_gateway.auth.dependencies import get_current_user
from src.shop_gateway.user.db_models import UserModel
from src.shop_store.application.schemas import (
    CreateProductRequest,
    CreateStoreRequest,
    UpdateProductRequest,
    UpdateStoreRequest,
)
from src.shop_store.application.service import (
    ProductApplicationService,
    StoreApplicationService,
)

router = APIRouter(tags=["stores"])

_stores = StoreApplicationService()
_products = ProductApplicationService()


def _respond(request: Request, data: object, message: str = "success") -> ApiResponse:
    resp = success_response(data, message=message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@router.post("/stores", status_code=status.HTTP_201_CREATED)
async def create_store(
    body: CreateStoreRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _stores.create_store(db, str(current_user.id), body)
    return _respond(request, data.model_dump(), "Store created")


@router.get("/stores")
async def list_stores(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    items = await _stores.list_stores(db, str(current_user.id))
    return _respond(request, {"items": [s.model_dump() for s in items]})


@router.get("/stores/{store_id}")
async def get_store(
    store_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _stores.get_store(db, str(current_user.id), str(store_id))
    return _respond(request, data.model_dump())


@router.put("/stores/{store_id}")
async def update_store(
    store_id: uuid.UUID,
    body: UpdateStoreRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _stores.update_store(db, str(current_user.id), str(store_id), body)
    return _respond(request, data.model_dump(), "Store updated")


@router.delete("/stores/{store_id}")
async def delete_store(
    store_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _stores.delete_store(db, str(current_user.id), str(store_id))
    return _respond(request, {"id": str(store_id)}, "Store deleted")


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: CreateProductRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _products.create_product(db, str(current_user.id), body)
    return _respond(request, data.model_dump(), "Product created")


@router.get("/stores/{store_id}/products")
async def list_products(
    store_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    items = await _products.list_products(db, str(current_user.id), str(store_id))
    return _respond(request, {"items": [p.model_dump() for p in items]})


@router.get("/products/{product_id}")
async def get_product(
    product_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _products.get_product(db, str(current_user.id), str(product_id))
    return _respond(request, data.model_dump())


@router.put("/products/{product_id}")
async def update_product(
    product_id: uuid.UUID,
    body: UpdateProductRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _products.update_product(db, str(current_user.id), str(product_id), body)
    return _respond(request, data.model_dump(), "Product updated")


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: uuid.UUID,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    await _products.delete_product(db, str(current_user.id), str(product_id))
    return _respond(request, {"id": str(product_id)}, "Product deleted")
