"""HTML pages for the gateway browser redirects.

The mobile client loads checkout in a WebView and watches for these pages;
each one posts a JSON message to ``window.ReactNativeWebView`` after a short
delay. All interpolated values are escaped: they come from the query string.
"""

import html
import json
from dataclasses import dataclass


@dataclass(frozen=True)
class _PageStyle:
    title: str
    heading: str
    body: str
    color: str
    icon: str
    message_type: str


_PAGES = {
    "finish": _PageStyle(
        title="Payment Success",
        heading="Payment Successful!",
        body="Thank you for your payment.",
        color="#10B981",
        icon="&#10003;",
        message_type="payment_complete",
    ),
    "error": _PageStyle(
        title="Payment Failed",
        heading="Payment Failed",
        body="Your payment could not be processed. Please try again.",
        color="#EF4444",
        icon="&#10007;",
        message_type="payment_error",
    ),
    "pending": _PageStyle(
        title="Payment Pending",
        heading="Waiting for Payment",
        body="Complete the payment using the instructions you received.",
        color="#F59E0B",
        icon="&#8987;",
        message_type="payment_pending",
    ),
}

_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>
    body {{
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
      display: flex; justify-content: center; align-items: center;
      min-height: 100vh; margin: 0; background: #F3F4F6;
    }}
    .container {{
      background: white; padding: 40px; border-radius: 20px;
      box-shadow: 0 20px 60px rgba(0,0,0,0.15); text-align: center; max-width: 400px;
    }}
    .icon {{
      width: 80px; height: 80px; border-radius: 50%; margin: 0 auto 20px;
      background: {color}; color: white; font-size: 40px; line-height: 80px;
    }}
    h1 {{ color: {color}; margin: 0 0 10px 0; font-size: 28px; }}
    p {{ color: #6B7280; margin: 10px 0; font-size: 16px; }}
    .order-id {{
      background: #F3F4F6; padding: 10px; border-radius: 8px;
      font-family: monospace; margin: 20px 0; color: #374151;
    }}
  </style>
</head>
<body>
  <div class="container">
    <div class="icon">{icon}</div>
    <h1>{heading}</h1>
    <p>{body}</p>
    {order_block}
    <p>Returning to the app...</p>
  </div>
  <script>
    setTimeout(function () {{
      if (window.ReactNativeWebView) {{
        window.ReactNativeWebView.postMessage(JSON.stringify({message}));
      }}
    }}, 1500);
  </script>
</body>
</html>
"""


def _script_json(value: dict[str, str | None]) -> str:
    # json.dumps does not escape "</", which would close the script element.
    return json.dumps(value).replace("</", "<\\/")


def render_payment_page(
    kind: str,
    order_id: str | None,
    transaction_status: str | None,
    status_code: str | None,
) -> str:
    style = _PAGES.get(kind, _PAGES["pending"])
    order_block = (
        f'<div class="order-id">Order ID: {html.escape(order_id)}</div>' if order_id else ""
    )
    message = {
        "type": style.message_type,
        "orderId": order_id,
        "transactionStatus": transaction_status,
        "statusCode": status_code,
    }
    return _TEMPLATE.format(
        title=style.title,
        heading=style.heading,
        body=style.body,
        color=style.color,
        icon=style.icon,
        order_block=order_block,
        message=_script_json(message),
    )
