"""Per-request access log and request-id propagation.

Every request gets an id stored on ``request.state.request_id``. Routers,
the exception handlers and the rate limiter copy it into the response
envelope, and it is echoed back as the ``X-Request-ID`` header so a client
report can be matched to the ``shop.request`` log line. A caller-supplied
``X-Request-ID`` in the same ``req_<hex>`` shape is kept, which lets the
mobile client correlate its own retries.

Server errors are logged at WARNING, everything else at INFO:
    INFO [POST] /api/v1/orders → 201 (142ms) req_a1b2c3d4e5f6
"""

import logging
import re
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("shop.request")

_REQUEST_ID_RE = re.compile(r"^req_[0-9a-f]{12}$")


def resolve_request_id(incoming: str | None) -> str:
    """Keep a well-formed inbound id, otherwise mint a new one."""
    if incoming and _REQUEST_ID_RE.match(incoming):
        return incoming
    return f"req_{uuid.uuid4().hex[:12]}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = resolve_request_id(request.headers.get("x-request-id"))

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        response.headers["X-Request-ID"] = request.state.request_id
        return response
