"""PaymentReconciliationService — maps gateway signals onto order and ledger state.

Every entry point (webhook, browser redirect, status query) funnels into
``reconcile``. Idempotence comes from the database, not from the caller:

    - the pending → paid/failed write is a compare-and-set on the order row
    - side effects run only when that write returned a row
    - status write and side effects commit in one transaction

so repeated or out-of-order signals (pending after settlement, a second
settlement) find no pending row and change nothing. A failure before commit
rolls back the status too, leaving the order pending for the next retry.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.shop_common.enums import (
    ActivityType,
    FinancialRecordType,
    PaymentStatus,
    ReferenceType,
)
from src.shop_common.errors import AccessDeniedError, OrderNotFoundError
from src.shop_order.domain.models import StatusTransition
from src.shop_order.domain.repository import OrderRepositoryProtocol
from src.shop_order.infrastructure.persistence import OrderRepository
from src.shop_payment.application.pages import render_payment_page
from src.shop_payment.application.schemas import PaymentStatusResponse, ReconcileResult
from src.shop_payment.domain.gateway import PaymentGatewayProtocol
from src.shop_payment.domain.status_mapping import map_transaction_status
from src.shop_payment.infrastructure.midtrans_client import get_gateway
from src.shop_store.domain.repository import ProductRepositoryProtocol
from src.shop_store.infrastructure.persistence import ProductRepository
from src.shop_wallet.domain.models import LedgerDelta
from src.shop_wallet.domain.repository import WalletRepositoryProtocol
from src.shop_wallet.infrastructure.persistence import WalletRepository

logger = logging.getLogger(__name__)

# Redirect kinds that trigger a status check; "pending" only renders.
_RECONCILING_REDIRECTS = frozenset({"finish", "error"})


class PaymentReconciliationService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol | None = None,
        wallets: WalletRepositoryProtocol | None = None,
        products: ProductRepositoryProtocol | None = None,
        gateway: PaymentGatewayProtocol | None = None,
        restore_stock_on_failure: bool | None = None,
    ) -> None:
        self._orders: OrderRepositoryProtocol = orders or OrderRepository()
        self._wallets: WalletRepositoryProtocol = wallets or WalletRepository()
        self._products: ProductRepositoryProtocol = products or ProductRepository()
        self._gateway = gateway
        self._restore_stock = (
            settings.RESTORE_STOCK_ON_FAILURE
            if restore_stock_on_failure is None
            else restore_stock_on_failure
        )

    @property
    def gateway(self) -> PaymentGatewayProtocol:
        return self._gateway or get_gateway()

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    async def reconcile(
        self,
        db: AsyncSession,
        external_order_id: str,
        transaction_status: str | None,
        fraud_status: str | None = None,
    ) -> ReconcileResult:
        """Apply one gateway status to the order identified by ``external_order_id``.

        Raises:
            OrderNotFoundError: no order carries that external id.
        """
        target = map_transaction_status(transaction_status, fraud_status)

        try:
            transition = None
            if target.is_terminal:
                transition = await self._orders.transition_status(
                    db, external_order_id, target.value
                )

            if transition is None:
                order = await self._orders.get_by_external_id(db, external_order_id)
                if order is None:
                    raise OrderNotFoundError(external_order_id)
                await db.commit()
                logger.info(
                    "Reconcile %s: gateway=%s mapped=%s, order stays %s",
                    external_order_id,
                    transaction_status,
                    target.value,
                    order.payment_status,
                )
                return ReconcileResult(
                    external_order_id=external_order_id,
                    order_id=order.id,
                    payment_status=order.payment_status,
                    changed=False,
                )

            if target is PaymentStatus.PAID:
                await self._credit_store_owner(db, transition)
            elif self._restore_stock:
                await self._restore_reserved_stock(db, transition)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Reconcile %s: order %s pending -> %s (gateway=%s)",
            external_order_id,
            transition.order_id,
            transition.payment_status,
            transaction_status,
        )
        return ReconcileResult(
            external_order_id=external_order_id,
            order_id=transition.order_id,
            payment_status=transition.payment_status,
            changed=True,
        )

    async def _credit_store_owner(self, db: AsyncSession, transition: StatusTransition) -> None:
        await self._wallets.get_or_create_wallet(db, transition.owner_user_id)
        await self._wallets.apply_delta(
            db,
            LedgerDelta(
                user_id=transition.owner_user_id,
                amount=transition.total_amount,
                record_type=FinancialRecordType.INCOME.value,
                activity_type=ActivityType.PAYMENT.value,
                description=f"Payment for order {transition.external_order_id}",
                reference_type=ReferenceType.ORDER.value,
                reference_id=transition.order_id,
            ),
        )

    async def _restore_reserved_stock(
        self, db: AsyncSession, transition: StatusTransition
    ) -> None:
        items = await self._orders.get_items(db, transition.order_id)
        for item in sorted(items, key=lambda i: i.product_id or ""):
            if item.product_id is None:
                continue
            restored = await self._products.restore_stock(db, item.product_id, item.quantity)
            if not restored:
                logger.warning(
                    "Order %s: product %s gone, %d unit(s) not restored",
                    transition.order_id,
                    item.product_id,
                    item.quantity,
                )
        logger.info("Order %s failed: reserved stock restored", transition.order_id)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_notification(
        self, db: AsyncSession, payload: dict[str, Any]
    ) -> ReconcileResult:
        """Webhook: verify the signature before anything touches the database."""
        tx = self.gateway.verify_notification(payload)
        logger.info(
            "Notification for %s: status=%s fraud=%s type=%s",
            tx.order_id,
            tx.transaction_status,
            tx.fraud_status,
            tx.payment_type,
        )
        return await self.reconcile(db, tx.order_id, tx.transaction_status, tx.fraud_status)

    async def handle_redirect(
        self,
        db: AsyncSession,
        kind: str,
        external_order_id: str | None,
        transaction_status: str | None,
        status_code: str | None,
    ) -> str:
        """Browser redirect: best-effort reconcile, then always return the page.

        Query parameters are not trusted for state changes; the status comes
        from the gateway. Failures are logged and the page still renders so
        the embedding WebView can detect completion.
        """
        if kind in _RECONCILING_REDIRECTS and external_order_id:
            try:
                tx = await self.gateway.get_status(external_order_id)
                await self.reconcile(
                    db, external_order_id, tx.transaction_status, tx.fraud_status
                )
            except Exception:
                logger.exception(
                    "Redirect %s for %s: reconciliation failed", kind, external_order_id
                )
        return render_payment_page(kind, external_order_id, transaction_status, status_code)

    async def check_status(
        self, db: AsyncSession, user_id: str, external_order_id: str
    ) -> PaymentStatusResponse:
        """Pull the gateway status for an owned order and reconcile with it."""
        order = await self._orders.get_by_external_id(db, external_order_id)
        if order is None:
            raise OrderNotFoundError(external_order_id)
        if order.owner_user_id != user_id:
            raise AccessDeniedError(f"Order not found or access denied: {external_order_id}")

        tx = await self.gateway.get_status(external_order_id)
        result = await self.reconcile(
            db, external_order_id, tx.transaction_status, tx.fraud_status
        )
        return PaymentStatusResponse(
            order_id=result.order_id,
            external_order_id=external_order_id,
            payment_status=result.payment_status,
            gateway_status=tx.transaction_status,
            fraud_status=tx.fraud_status,
            changed=result.changed,
        )
