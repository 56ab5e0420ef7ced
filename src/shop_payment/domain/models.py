"""Payment-gateway value objects, independent of any particular provider SDK."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class GatewayItem:
    """One line of the gateway item breakdown. Price may be negative (discount)."""

    id: str
    name: str
    price: int
    quantity: int


@dataclass
class CustomerDetails:
    first_name: str
    email: str | None = None
    phone: str | None = None


@dataclass
class CheckoutRequest:
    order_id: str                    # external order id
    gross_amount: int
    items: list[GatewayItem]
    customer: CustomerDetails

    @property
    def items_total(self) -> int:
        return sum(i.price * i.quantity for i in self.items)


@dataclass
class PaymentSession:
    token: str
    redirect_url: str


@dataclass
class GatewayTransaction:
    """Transaction state as reported by the gateway (status query or webhook).

    ``transaction_status`` is None when the gateway has no transaction for the
    order yet (customer never opened the checkout page).
    """

    order_id: str
    transaction_status: str | None
    fraud_status: str | None = None
    status_code: str | None = None
    gross_amount: str | None = None
    payment_type: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)
