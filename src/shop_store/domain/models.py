"""Domain models for shop_store — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Store:
    id: str
    user_id: str                     # owner
    store_name: str
    description: str | None = None
    address: str | None = None
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Product:
    id: str
    store_id: str
    name: str
    price: int                       # IDR, > 0
    stock: int                       # >= 0, enforced by CHECK constraint
    description: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
