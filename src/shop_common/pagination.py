"""Opaque cursor helpers shared by the list endpoints.

Lists are keyset-paginated on a monotonically increasing key (BIGSERIAL ids or
snowflake order ids). The service fetches ``limit + 1`` rows to detect
``has_more`` without a COUNT(*) query.
"""

import base64
import json
from typing import TypeVar

T = TypeVar("T")


def cursor_encode(last_key: int | str) -> str:
    """Encode the last seen key into an opaque Base64 cursor string."""
    payload = json.dumps({"k": last_key})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | str | None:
    """Decode a cursor back to the last seen key. Returns None on malformed input."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        key = payload["k"]
    except (ValueError, KeyError, TypeError):
        return None
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        return None
    return key


def split_page(rows: list[T], limit: int) -> tuple[list[T], bool]:
    """Trim a ``limit + 1`` fetch to one page and report whether more rows exist."""
    return rows[:limit], len(rows) > limit
