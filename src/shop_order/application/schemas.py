"""Pydantic schemas for order creation and order reads."""

import uuid

from pydantic import BaseModel, EmailStr, Field

from src.shop_common.money import MAX_AMOUNT, rupiah_display
from src.shop_order.domain.models import LineItem, Order


class OrderItemRequest(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(..., gt=0, le=10_000)


class CreateOrderRequest(BaseModel):
    store_id: uuid.UUID
    items: list[OrderItemRequest] = Field(default_factory=list, max_length=100)
    discount: int = Field(0, ge=0, le=MAX_AMOUNT, description="Flat discount in IDR")
    customer_name: str | None = Field(None, max_length=255)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(None, max_length=32)


class LineItemResponse(BaseModel):
    product_id: str | None
    product_name: str
    quantity: int
    unit_price: int
    line_total: int

    @classmethod
    def from_domain(cls, item: LineItem) -> "LineItemResponse":
        return cls(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=item.line_total,
        )


class CreateOrderResponse(BaseModel):
    order_id: str
    external_order_id: str
    subtotal: int
    discount: int
    total_amount: int
    total_display: str
    payment_status: str
    snap_token: str
    redirect_url: str
    items: list[LineItemResponse]


class OrderResponse(BaseModel):
    id: str
    store_id: str
    external_order_id: str
    subtotal: int
    discount: int
    total_amount: int
    total_display: str
    payment_status: str
    customer_name: str | None
    customer_email: str | None
    customer_phone: str | None
    items: list[LineItemResponse]
    created_at: str | None
    updated_at: str | None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            store_id=order.store_id,
            external_order_id=order.external_order_id,
            subtotal=order.subtotal,
            discount=order.discount,
            total_amount=order.total_amount,
            total_display=rupiah_display(order.total_amount),
            payment_status=order.payment_status,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            items=[LineItemResponse.from_domain(i) for i in order.items],
            created_at=order.created_at.isoformat() if order.created_at else None,
            updated_at=order.updated_at.isoformat() if order.updated_at else None,
        )


class OrderListItem(BaseModel):
    id: str
    external_order_id: str
    total_amount: int
    total_display: str
    payment_status: str
    item_count: int
    customer_name: str | None
    created_at: str | None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderListItem":
        return cls(
            id=order.id,
            external_order_id=order.external_order_id,
            total_amount=order.total_amount,
            total_display=rupiah_display(order.total_amount),
            payment_status=order.payment_status,
            item_count=order.item_count or 0,
            customer_name=order.customer_name,
            created_at=order.created_at.isoformat() if order.created_at else None,
        )


class OrderListResponse(BaseModel):
    items: list[OrderListItem]
    next_cursor: str | None
    has_more: bool
