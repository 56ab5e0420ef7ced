"""Fixed-window rate limiting backed by Redis.

Rules (requests per minute per client IP):
  - Auth endpoints (/auth/*):     RATE_LIMIT_AUTH_PER_MINUTE    (anti brute-force)
  - Order creation (POST /orders): RATE_LIMIT_ORDER_PER_MINUTE
  - Everything else:               RATE_LIMIT_DEFAULT_PER_MINUTE

Gateway callbacks (/payment/webhook and the browser redirect pages) and
/health are never limited: the gateway retries on 429 and a throttled redirect
page would leave the WebView hanging.

Key pattern: "ratelimit:{ip}:{group}:{window}" with a 60s expiry.
If Redis is unreachable the request is let through and a warning is logged.
"""

import logging
import time

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.settings import settings
from src.shop_common.errors import RateLimitError
from src.shop_common.redis_client import get_redis
from src.shop_common.response import error_response

logger = logging.getLogger(__name__)

_WINDOW_SECONDS = 60
_EXEMPT_PREFIXES = ("/health", "/api/v1/payment/", "/docs", "/openapi.json")


def client_ip(request: Request) -> str:
    """Client IP for rate-limit keys.

    Each trusted proxy appends the address it received the request from, so
    with N proxies the client is the N-th entry from the right. Entries further
    left are supplied by the caller and can be forged. With no trusted proxies
    the header is ignored.
    """
    hops = settings.TRUSTED_PROXY_HOPS
    forwarded = request.headers.get("x-forwarded-for") if hops > 0 else None
    if forwarded:
        chain = [part.strip() for part in forwarded.split(",") if part.strip()]
        if chain:
            return chain[-min(hops, len(chain))]
    return request.client.host if request.client else "unknown"


def endpoint_group(method: str, path: str) -> tuple[str, int] | None:
    """Map a request to (group, limit); None means the path is not limited."""
    if path.startswith(_EXEMPT_PREFIXES):
        return None
    if path.startswith("/api/v1/auth/"):
        return "auth", settings.RATE_LIMIT_AUTH_PER_MINUTE
    if method == "POST" and path.rstrip("/") == "/api/v1/orders":
        return "order", settings.RATE_LIMIT_ORDER_PER_MINUTE
    return "default", settings.RATE_LIMIT_DEFAULT_PER_MINUTE


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)

        rule = endpoint_group(request.method, request.url.path)
        if rule is None:
            return await call_next(request)
        group, limit = rule

        now = int(time.time())
        window = now // _WINDOW_SECONDS
        key = f"ratelimit:{client_ip(request)}:{group}:{window}"
        try:
            redis = await get_redis()
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, _WINDOW_SECONDS)
        except RedisError:
            logger.warning("Rate limiter unavailable, allowing request to %s", request.url.path)
            return await call_next(request)

        if count > limit:
            logger.info("Rate limit hit: group=%s key=%s count=%d", group, key, count)
            err = RateLimitError()
            retry_after = _WINDOW_SECONDS - (now % _WINDOW_SECONDS)
            body = error_response(err.code, err.message)
            body.request_id = getattr(request.state, "request_id", body.request_id)
            return JSONResponse(
                status_code=err.http_status,
                content=body.model_dump(),
                headers={"Retry-After": str(retry_after)},
            )
        return await call_next(request)
