"""Async engine, session factory and the FastAPI session dependency.

One PostgreSQL engine serves the whole platform. Only the ``users`` table is
ORM-mapped; stores, orders, wallets and the ledger are written with raw
``text()`` statements so that row locks and conditional UPDATEs stay visible
in the SQL.

Repositories never commit. Application services own the transaction boundary:
they run their statements on the request session and finish with
``await db.commit()`` (or ``await db.rollback()`` on any exception). Checkout
and payment reconciliation each hold one transaction across several tables,
so a failure in any step leaves stock, order status and balance unchanged.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for the ORM-mapped users table."""


# Gateway webhooks arrive in bursts and each holds a row lock while it
# reconciles, so the pool is sized from settings rather than fixed.
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """One AsyncSession per request.

    Closing a session with an open transaction rolls it back, so a handler that
    raises before its service commits never leaves partial writes behind.
    """
    async with async_session_factory() as session:
        yield session
