"""Unit tests for shop_order Pydantic schemas."""
import pytest
from pydantic import ValidationError

from src.shop_common.money import MAX_AMOUNT
from src.shop_order.application.schemas import CreateOrderRequest

STORE_ID = "7d8f1c7e-2a1b-4c3d-9e8f-0a1b2c3d4e5f"
P1 = "11111111-1111-4111-8111-111111111111"


class TestCreateOrderRequest:
    def test_defaults(self) -> None:
        req = CreateOrderRequest(store_id=STORE_ID, items=[{"product_id": P1, "quantity": 1}])
        assert req.discount == 0
        assert req.customer_email is None

    def test_items_default_to_empty(self) -> None:
        # empty carts are rejected by the service with a dedicated error code
        assert CreateOrderRequest(store_id=STORE_ID).items == []

    def test_zero_quantity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(store_id=STORE_ID, items=[{"product_id": P1, "quantity": 0}])

    def test_negative_discount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                store_id=STORE_ID, items=[{"product_id": P1, "quantity": 1}], discount=-1
            )

    def test_oversized_discount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                store_id=STORE_ID,
                items=[{"product_id": P1, "quantity": 1}],
                discount=MAX_AMOUNT + 1,
            )

    def test_bad_email_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(
                store_id=STORE_ID,
                items=[{"product_id": P1, "quantity": 1}],
                customer_email="not-an-email",
            )

    def test_bad_product_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateOrderRequest(store_id=STORE_ID, items=[{"product_id": "abc", "quantity": 1}])
