"""Redirect page rendering."""

from src.shop_payment.application.pages import render_payment_page


class TestRenderPaymentPage:
    def test_finish_message(self) -> None:
        page = render_payment_page("finish", "ORD-1-X", "settlement", "200")
        assert "Payment Successful!" in page
        assert '"type": "payment_complete"' in page
        assert '"orderId": "ORD-1-X"' in page
        assert "ReactNativeWebView" in page

    def test_error_and_pending_types(self) -> None:
        assert "payment_error" in render_payment_page("error", "o", None, None)
        assert "payment_pending" in render_payment_page("pending", "o", None, None)

    def test_unknown_kind_renders_pending(self) -> None:
        assert "payment_pending" in render_payment_page("weird", None, None, None)

    def test_query_values_escaped(self) -> None:
        hostile = "</script><script>alert(1)</script>"
        page = render_payment_page("finish", hostile, hostile, None)
        assert "</script><script>" not in page
        assert "&lt;/script&gt;" in page

    def test_no_order_block_without_id(self) -> None:
        assert "Order ID:" not in render_payment_page("pending", None, None, None)
