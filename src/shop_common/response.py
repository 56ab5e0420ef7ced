"""Unified API response wrapper.

All JSON endpoints (except the gateway webhook acknowledgement) return:
{
    "success": true,
    "code": 0,           // 0=success, non-0=error code
    "message": "success",
    "data": { ... },     // null on error
    "error": null,       // optional detail on error
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    success: bool = True
    code: int = 0
    message: str = "success"
    data: Any = None
    error: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(success=True, code=0, message=message, data=data)


def error_response(code: int, message: str, error: str | None = None) -> ApiResponse:
    return ApiResponse(success=False, code=code, message=message, data=None, error=error)
