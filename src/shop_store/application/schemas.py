"""Pydantic schemas for the store and product endpoints."""

import uuid

from pydantic import BaseModel, Field

from src.shop_common.money import MAX_AMOUNT, rupiah_display
from src.shop_store.domain.models import Product, Store


class CreateStoreRequest(BaseModel):
    store_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    address: str | None = None
    logo_url: str | None = Field(None, max_length=2048)


class UpdateStoreRequest(BaseModel):
    """Partial update: omitted (None) fields keep their current value."""

    store_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    address: str | None = None
    logo_url: str | None = Field(None, max_length=2048)


class StoreResponse(BaseModel):
    id: str
    store_name: str
    description: str | None
    address: str | None
    logo_url: str | None
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, store: Store) -> "StoreResponse":
        return cls(
            id=store.id,
            store_name=store.store_name,
            description=store.description,
            address=store.address,
            logo_url=store.logo_url,
            created_at=store.created_at.isoformat() if store.created_at else None,
            updated_at=store.updated_at.isoformat() if store.updated_at else None,
        )


class CreateProductRequest(BaseModel):
    store_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: int = Field(..., gt=0, le=MAX_AMOUNT, description="Unit price in IDR")
    stock: int = Field(0, ge=0)
    is_active: bool = True


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: int | None = Field(None, gt=0, le=MAX_AMOUNT)
    stock: int | None = Field(None, ge=0)
    is_active: bool | None = None


class ProductResponse(BaseModel):
    id: str
    store_id: str
    name: str
    description: str | None
    price: int
    price_display: str
    stock: int
    is_active: bool
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.id,
            store_id=product.store_id,
            name=product.name,
            description=product.description,
            price=product.price,
            price_display=rupiah_display(product.price),
            stock=product.stock,
            is_active=product.is_active,
            created_at=product.created_at.isoformat() if product.created_at else None,
            updated_at=product.updated_at.isoformat() if product.updated_at else None,
        )
