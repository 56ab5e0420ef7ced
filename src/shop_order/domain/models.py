"""Domain models for shop_order — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class LineItem:
    """Order line with name and unit price captured at checkout.

    ``product_id`` becomes None if the product is later deleted; the
    snapshot fields keep the order readable.
    """

    product_id: str | None
    product_name: str
    quantity: int
    unit_price: int
    id: int | None = None
    order_id: str | None = None

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


@dataclass
class Order:
    id: str                          # snowflake id
    store_id: str
    external_order_id: str           # id shared with the payment gateway
    subtotal: int
    discount: int
    total_amount: int
    payment_status: str              # PaymentStatus value
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    items: list[LineItem] = field(default_factory=list)
    item_count: int | None = None    # filled by list queries instead of items
    owner_user_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class StatusTransition:
    """Result of the single pending → terminal compare-and-set on an order."""

    order_id: str
    store_id: str
    external_order_id: str
    total_amount: int
    payment_status: str              # the new, terminal status
    owner_user_id: str
