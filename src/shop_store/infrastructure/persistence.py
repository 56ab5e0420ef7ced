"""Store and product repositories — raw text() SQL over ``stores`` / ``products``.

Partial updates use ``COALESCE(CAST(:param AS TYPE), column)``: a None
parameter keeps the current value, so one statement serves every field subset.
Ids are UUIDs; callers pass strings and the SQL casts them.

Stock changes are single conditional statements. ``decrement_stock`` only
matches when ``stock >= :quantity`` so the CHECK (stock >= 0) is never the
thing that stops an oversell.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_common.errors import InternalError
from src.shop_store.domain.models import Product, Store

# ---------------------------------------------------------------------------
# SQL: stores
# ---------------------------------------------------------------------------

_STORE_COLUMNS = "id, user_id, store_name, description, address, logo_url, created_at, updated_at"

_INSERT_STORE_SQL = text(f"""
    INSERT INTO stores (user_id, store_name, description, address, logo_url)
    VALUES (:user_id, :store_name, :description, :address, :logo_url)
    RETURNING {_STORE_COLUMNS}
""")

_GET_STORE_SQL = text(f"""
    SELECT {_STORE_COLUMNS}
    FROM stores
    WHERE id = CAST(:store_id AS UUID)
""")

_GET_STORE_FOR_OWNER_SQL = text(f"""
    SELECT {_STORE_COLUMNS}
    FROM stores
    WHERE id = CAST(:store_id AS UUID) AND user_id = :user_id
""")

_LIST_STORES_SQL = text(f"""
    SELECT {_STORE_COLUMNS}
    FROM stores
    WHERE user_id = :user_id
    ORDER BY created_at DESC
""")

_UPDATE_STORE_SQL = text(f"""
    UPDATE stores
    SET store_name = COALESCE(CAST(:store_name AS TEXT), store_name),
        description = COALESCE(CAST(:description AS TEXT), description),
        address = COALESCE(CAST(:address AS TEXT), address),
        logo_url = COALESCE(CAST(:logo_url AS TEXT), logo_url)
    WHERE id = CAST(:store_id AS UUID) AND user_id = :user_id
    RETURNING {_STORE_COLUMNS}
""")

_DELETE_STORE_SQL = text("""
    DELETE FROM stores
    WHERE id = CAST(:store_id AS UUID) AND user_id = :user_id
    RETURNING id
""")

_STORE_HAS_ORDERS_SQL = text("""
    SELECT EXISTS (
        SELECT 1 FROM orders WHERE store_id = CAST(:store_id AS UUID)
    ) AS has_orders
""")

# ---------------------------------------------------------------------------
# SQL: products
# ---------------------------------------------------------------------------

_PRODUCT_COLUMNS = """
    id, store_id, name, description, price, stock, is_active, created_at, updated_at
"""

_INSERT_PRODUCT_SQL = text(f"""
    INSERT INTO products (store_id, name, description, price, stock, is_active)
    VALUES (CAST(:store_id AS UUID), :name, :description, :price, :stock, :is_active)
    RETURNING {_PRODUCT_COLUMNS}
""")

_GET_PRODUCT_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products
    WHERE id = CAST(:product_id AS UUID)
""")

_GET_PRODUCT_OWNER_SQL = text("""
    SELECT s.user_id
    FROM products p
    JOIN stores s ON s.id = p.store_id
    WHERE p.id = CAST(:product_id AS UUID)
""")

_LIST_PRODUCTS_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products
    WHERE store_id = CAST(:store_id AS UUID)
    ORDER BY created_at DESC
""")

_UPDATE_PRODUCT_SQL = text(f"""
    UPDATE products
    SET name = COALESCE(CAST(:name AS TEXT), name),
        description = COALESCE(CAST(:description AS TEXT), description),
        price = COALESCE(CAST(:price AS BIGINT), price),
        stock = COALESCE(CAST(:stock AS INTEGER), stock),
        is_active = COALESCE(CAST(:is_active AS BOOLEAN), is_active)
    WHERE id = CAST(:product_id AS UUID)
    RETURNING {_PRODUCT_COLUMNS}
""")

_DELETE_PRODUCT_SQL = text("""
    DELETE FROM products
    WHERE id = CAST(:product_id AS UUID)
    RETURNING id
""")

# Row lock held until the enclosing transaction ends.
_LOCK_PRODUCT_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products
    WHERE id = CAST(:product_id AS UUID) AND store_id = CAST(:store_id AS UUID)
    FOR UPDATE
""")

_DECREMENT_STOCK_SQL = text("""
    UPDATE products
    SET stock = stock - :quantity
    WHERE id = CAST(:product_id AS UUID) AND stock >= :quantity
    RETURNING stock
""")

_RESTORE_STOCK_SQL = text("""
    UPDATE products
    SET stock = stock + :quantity
    WHERE id = CAST(:product_id AS UUID)
    RETURNING stock
""")

_STORE_FIELDS = ("store_name", "description", "address", "logo_url")
_PRODUCT_FIELDS = ("name", "description", "price", "stock", "is_active")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_store(row: Any) -> Store:
    return Store(
        id=str(row.id),
        user_id=row.user_id,
        store_name=row.store_name,
        description=row.description,
        address=row.address,
        logo_url=row.logo_url,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_product(row: Any) -> Product:
    return Product(
        id=str(row.id),
        store_id=str(row.store_id),
        name=row.name,
        description=row.description,
        price=row.price,
        stock=row.stock,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class StoreRepository:
    async def create(
        self,
        db: AsyncSession,
        user_id: str,
        store_name: str,
        description: str | None,
        address: str | None,
        logo_url: str | None,
    ) -> Store:
        result = await db.execute(
            _INSERT_STORE_SQL,
            {
                "user_id": user_id,
                "store_name": store_name,
                "description": description,
                "address": address,
                "logo_url": logo_url,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Store insert returned no rows")
        return _row_to_store(row)

    async def get_by_id(self, db: AsyncSession, store_id: str) -> Store | None:
        result = await db.execute(_GET_STORE_SQL, {"store_id": store_id})
        row = result.fetchone()
        return _row_to_store(row) if row else None

    async def get_for_owner(
        self, db: AsyncSession, store_id: str, user_id: str
    ) -> Store | None:
        result = await db.execute(
            _GET_STORE_FOR_OWNER_SQL, {"store_id": store_id, "user_id": user_id}
        )
        row = result.fetchone()
        return _row_to_store(row) if row else None

    async def list_by_owner(self, db: AsyncSession, user_id: str) -> list[Store]:
        result = await db.execute(_LIST_STORES_SQL, {"user_id": user_id})
        return [_row_to_store(row) for row in result.fetchall()]

    async def update(
        self, db: AsyncSession, store_id: str, user_id: str, fields: dict[str, Any]
    ) -> Store | None:
        params = {name: fields.get(name) for name in _STORE_FIELDS}
        params.update(store_id=store_id, user_id=user_id)
        result = await db.execute(_UPDATE_STORE_SQL, params)
        row = result.fetchone()
        return _row_to_store(row) if row else None

    async def delete(self, db: AsyncSession, store_id: str, user_id: str) -> bool:
        result = await db.execute(
            _DELETE_STORE_SQL, {"store_id": store_id, "user_id": user_id}
        )
        return result.fetchone() is not None

    async def has_orders(self, db: AsyncSession, store_id: str) -> bool:
        result = await db.execute(_STORE_HAS_ORDERS_SQL, {"store_id": store_id})
        return bool(result.scalar_one())


class ProductRepository:
    async def create(
        self,
        db: AsyncSession,
        store_id: str,
        name: str,
        description: str | None,
        price: int,
        stock: int,
        is_active: bool,
    ) -> Product:
        result = await db.execute(
            _INSERT_PRODUCT_SQL,
            {
                "store_id": store_id,
                "name": name,
                "description": description,
                "price": price,
                "stock": stock,
                "is_active": is_active,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Product insert returned no rows")
        return _row_to_product(row)

    async def get_by_id(self, db: AsyncSession, product_id: str) -> Product | None:
        result = await db.execute(_GET_PRODUCT_SQL, {"product_id": product_id})
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def get_owner_id(self, db: AsyncSession, product_id: str) -> str | None:
        """user_id of the store that owns the product, None if the product is absent."""
        result = await db.execute(_GET_PRODUCT_OWNER_SQL, {"product_id": product_id})
        row = result.fetchone()
        return row.user_id if row else None

    async def list_by_store(self, db: AsyncSession, store_id: str) -> list[Product]:
        result = await db.execute(_LIST_PRODUCTS_SQL, {"store_id": store_id})
        return [_row_to_product(row) for row in result.fetchall()]

    async def update(
        self, db: AsyncSession, product_id: str, fields: dict[str, Any]
    ) -> Product | None:
        params = {name: fields.get(name) for name in _PRODUCT_FIELDS}
        params["product_id"] = product_id
        result = await db.execute(_UPDATE_PRODUCT_SQL, params)
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def delete(self, db: AsyncSession, product_id: str) -> bool:
        result = await db.execute(_DELETE_PRODUCT_SQL, {"product_id": product_id})
        return result.fetchone() is not None

    async def lock_for_store(
        self, db: AsyncSession, product_id: str, store_id: str
    ) -> Product | None:
        """SELECT ... FOR UPDATE scoped to the store. None if absent or in another store."""
        result = await db.execute(
            _LOCK_PRODUCT_SQL, {"product_id": product_id, "store_id": store_id}
        )
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def decrement_stock(
        self, db: AsyncSession, product_id: str, quantity: int
    ) -> int | None:
        """Reserve ``quantity`` units. Returns the new stock, or None if short."""
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        row = result.fetchone()
        return row.stock if row else None

    async def restore_stock(self, db: AsyncSession, product_id: str, quantity: int) -> bool:
        """Put ``quantity`` units back. False if the product no longer exists."""
        result = await db.execute(
            _RESTORE_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        return result.fetchone() is not None
