"""Repository Protocols for stores and products."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_store.domain.models import Product, Store


class StoreRepositoryProtocol(Protocol):
    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        store_name: str,
        description: str | None,
        address: str | None,
        logo_url: str | None,
    ) -> Store: ...

    async def get_by_id(self, db: AsyncSession, store_id: str) -> Store | None: ...

    async def get_for_owner(
        self, db: AsyncSession, store_id: str, user_id: str
    ) -> Store | None: ...

    async def list_by_owner(self, db: AsyncSession, user_id: str) -> list[Store]: ...

    async def update(
        self, db: AsyncSession, store_id: str, user_id: str, fields: dict[str, Any]
    ) -> Store | None: ...

    async def delete(self, db: AsyncSession, store_id: str, user_id: str) -> bool: ...

    async def has_orders(self, db: AsyncSession, store_id: str) -> bool: ...


class ProductRepositoryProtocol(Protocol):
    async def create(
        self,
        db: AsyncSession,
        store_id: str,
        name: str,
        description: str | None,
        price: int,
        stock: int,
        is_active: bool,
    ) -> Product: ...

    async def get_by_id(self, db: AsyncSession, product_id: str) -> Product | None: ...

    async def get_owner_id(self, db: AsyncSession, product_id: str) -> str | None: ...

    async def list_by_store(self, db: AsyncSession, store_id: str) -> list[Product]: ...

    async def update(
        self, db: AsyncSession, product_id: str, fields: dict[str, Any]
    ) -> Product | None: ...

    async def delete(self, db: AsyncSession, product_id: str) -> bool: ...

    async def lock_for_store(
        self, db: AsyncSession, product_id: str, store_id: str
    ) -> Product | None: ...

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> int | None: ...

    async def restore_stock(self, db: AsyncSession, product_id: str, quantity: int) -> bool: ...
