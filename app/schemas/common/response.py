# --- File: app/schemas/common/response.py ---
"""
Response envelopes.

Success: ``{"status": "success", "body": ..., "message": ...}``
Failure: ``{"status": "failed", "body": {}, "message": ..., "error": ...}``
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import Field

from app.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = ["ApiResponse", "ErrorResponse", "success_response"]


class ApiResponse(BaseSchema, Generic[T]):
    """Standard success envelope."""

    status: str = Field(default="success", description="Outcome flag")
    body: T = Field(..., description="Response payload")
    message: str = Field(default="", description="Human readable message")


class ErrorResponse(BaseSchema):
    """Standard failure envelope."""

    status: str = Field(default="failed")
    body: Dict[str, Any] = Field(default_factory=dict)
    message: str
    error: Optional[Dict[str, Any]] = None


def success_response(body: Any, message: str = "") -> Dict[str, Any]:
    return {"status": "success", "body": body, "message": message}
