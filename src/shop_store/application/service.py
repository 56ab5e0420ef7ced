"""Store and product services. Every store-scoped operation checks ownership.

A store that exists but belongs to someone else is reported as
StoreAccessDeniedError (403); ids that do not exist at all are 404.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import (
    ProductNotFoundError,
    StoreAccessDeniedError,
    StoreHasOrdersError,
    StoreNotFoundError,
)
from src.shop_store.application.schemas import (
    CreateProductRequest,
    CreateStoreRequest,
    ProductResponse,
    StoreResponse,
    UpdateProductRequest,
    UpdateStoreRequest,
)
from src.shop_store.domain.models import Store
from src.shop_store.domain.repository import (
    ProductRepositoryProtocol,
    StoreRepositoryProtocol,
)
from src.shop_store.infrastructure.persistence import ProductRepository, StoreRepository

logger = logging.getLogger(__name__)


async def require_owned_store(
    stores: StoreRepositoryProtocol, db: AsyncSession, store_id: str, user_id: str
) -> Store:
    """Return the store if ``user_id`` owns it.

    Raises:
        StoreNotFoundError: no store with that id.
        StoreAccessDeniedError: the store belongs to another user.
    """
    store = await stores.get_for_owner(db, store_id, user_id)
    if store is not None:
        return store
    if await stores.get_by_id(db, store_id) is None:
        raise StoreNotFoundError(store_id)
    raise StoreAccessDeniedError(store_id)


class StoreApplicationService:
    def __init__(self, stores: StoreRepositoryProtocol | None = None) -> None:
        self._stores: StoreRepositoryProtocol = stores or StoreRepository()

    async def create_store(
        self, db: AsyncSession, user_id: str, req: CreateStoreRequest
    ) -> StoreResponse:
        try:
            store = await self._stores.create(
                db, user_id, req.store_name, req.description, req.address, req.logo_url
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Store %s created by user %s", store.id, user_id)
        return StoreResponse.from_domain(store)

    async def list_stores(self, db: AsyncSession, user_id: str) -> list[StoreResponse]:
        stores = await self._stores.list_by_owner(db, user_id)
        return [StoreResponse.from_domain(s) for s in stores]

    async def get_store(self, db: AsyncSession, user_id: str, store_id: str) -> StoreResponse:
        store = await require_owned_store(self._stores, db, store_id, user_id)
        return StoreResponse.from_domain(store)

    async def update_store(
        self, db: AsyncSession, user_id: str, store_id: str, req: UpdateStoreRequest
    ) -> StoreResponse:
        try:
            await require_owned_store(self._stores, db, store_id, user_id)
            store = await self._stores.update(
                db, store_id, user_id, req.model_dump(exclude_none=True)
            )
            if store is None:
                raise StoreNotFoundError(store_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return StoreResponse.from_domain(store)

    async def delete_store(self, db: AsyncSession, user_id: str, store_id: str) -> None:
        """Delete an owned store. Refused while any order references it."""
        try:
            await require_owned_store(self._stores, db, store_id, user_id)
            if await self._stores.has_orders(db, store_id):
                raise StoreHasOrdersError(store_id)
            await self._stores.delete(db, store_id, user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Store %s deleted by user %s", store_id, user_id)


class ProductApplicationService:
    def __init__(
        self,
        products: ProductRepositoryProtocol | None = None,
        stores: StoreRepositoryProtocol | None = None,
    ) -> None:
        self._products: ProductRepositoryProtocol = products or ProductRepository()
        self._stores: StoreRepositoryProtocol = stores or StoreRepository()

    async def _require_owned_product(
        self, db: AsyncSession, user_id: str, product_id: str
    ) -> None:
        owner_id = await self._products.get_owner_id(db, product_id)
        if owner_id is None:
            raise ProductNotFoundError(product_id)
        if owner_id != user_id:
            raise StoreAccessDeniedError(f"product {product_id}")

    async def create_product(
        self, db: AsyncSession, user_id: str, req: CreateProductRequest
    ) -> ProductResponse:
        store_id = str(req.store_id)
        try:
            await require_owned_store(self._stores, db, store_id, user_id)
            product = await self._products.create(
                db, store_id, req.name, req.description, req.price, req.stock, req.is_active
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Product %s created in store %s", product.id, store_id)
        return ProductResponse.from_domain(product)

    async def list_products(
        self, db: AsyncSession, user_id: str, store_id: str
    ) -> list[ProductResponse]:
        await require_owned_store(self._stores, db, store_id, user_id)
        products = await self._products.list_by_store(db, store_id)
        return [ProductResponse.from_domain(p) for p in products]

    async def get_product(
        self, db: AsyncSession, user_id: str, product_id: str
    ) -> ProductResponse:
        await self._require_owned_product(db, user_id, product_id)
        product = await self._products.get_by_id(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return ProductResponse.from_domain(product)

    async def update_product(
        self, db: AsyncSession, user_id: str, product_id: str, req: UpdateProductRequest
    ) -> ProductResponse:
        try:
            await self._require_owned_product(db, user_id, product_id)
            product = await self._products.update(
                db, product_id, req.model_dump(exclude_none=True)
            )
            if product is None:
                raise ProductNotFoundError(product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ProductResponse.from_domain(product)

    async def delete_product(self, db: AsyncSession, user_id: str, product_id: str) -> None:
        """Existing order items keep their name/price snapshot; product_id becomes NULL."""
        try:
            await self._require_owned_product(db, user_id, product_id)
            await self._products.delete(db, product_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Product %s deleted by user %s", product_id, user_id)
