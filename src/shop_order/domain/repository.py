"""OrderRepository Protocol."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.shop_order.domain.models import LineItem, Order, StatusTransition


class OrderRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, order: Order) -> Order: ...

    async def get_by_id(self, db: AsyncSession, order_id: str) -> Order | None: ...

    async def get_by_external_id(
        self, db: AsyncSession, external_order_id: str
    ) -> Order | None: ...

    async def list_by_store(
        self,
        db: AsyncSession,
        store_id: str,
        payment_status: str | None,
        cursor_id: str | None,
        limit: int,
    ) -> list[Order]: ...

    async def get_items(self, db: AsyncSession, order_id: str) -> list[LineItem]: ...

    async def transition_status(
        self, db: AsyncSession, external_order_id: str, new_status: str
    ) -> StatusTransition | None: ...
