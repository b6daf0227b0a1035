# --- File: app/schemas/booking/blocked_date.py ---
"""
Blocked-date schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common.base import BaseDBSchema, BaseSchema

__all__ = ["BlockedDateCreate", "BlockedDateUpdate", "BlockedDateResponse"]


class BlockedDateCreate(BaseSchema):
    car_id: str = Field(..., alias="carId")
    blocked_from: datetime = Field(..., alias="blockedFrom")
    blocked_to: datetime = Field(..., alias="blockedTo")
    reason: Optional[str] = Field(default=None, max_length=255)


class BlockedDateUpdate(BaseSchema):
    blocked_from: Optional[datetime] = Field(default=None, alias="blockedFrom")
    blocked_to: Optional[datetime] = Field(default=None, alias="blockedTo")
    reason: Optional[str] = Field(default=None, max_length=255)


class BlockedDateResponse(BaseDBSchema):
    car_id: str
    blocked_from: datetime
    blocked_to: datetime
    reason: str
    is_active: bool
    created_by: Optional[str] = None
    created_by_role: Optional[str] = None
