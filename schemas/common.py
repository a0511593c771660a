"""
schemas/common.py

- Shared error body used by routers (utils/responses.py) and the global error handler
- pydantic v2
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Union

from pydantic import BaseModel, Field, ConfigDict


class ErrorDetail(BaseModel):
    """Smallest unit carrying an error code and message"""
    code: Union[int, str] = Field(..., description="HTTP status or error id (e.g. 404, INTERNAL_ERROR)")
    message: str = Field(..., description="Human readable message")

class ErrorResponse(BaseModel):
    """
    {"success": False, "error": {...}, "generated_at": ...}
    - success is always False
    """
    success: bool = False
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response creation time (UTC)"
    )

    model_config = ConfigDict(extra="ignore")
