# --- File: app/schemas/car/inventory.py ---
"""
Inventory gate schemas: counters, the stop-bookings flag and tokens.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.base.enums import InventoryResource, TokenStatus
from app.schemas.common.base import BaseDBSchema, BaseSchema

__all__ = [
    "InventoryUpdate",
    "StopBookingsUpdate",
    "CarInventoryResponse",
    "ReconcileResponse",
    "TokenPurchase",
    "TokenResponse",
]


class InventoryUpdate(BaseSchema):
    """Admin edit of a car's counters; range checks happen in the gate."""

    waitlist_tokens: Optional[int] = Field(default=None, alias="totalNumberOfWaitListTokens")
    book_now_tokens: Optional[int] = Field(default=None, alias="totalNumberOfBookNowTokens")
    stop_bookings: Optional[bool] = Field(default=None, alias="stopBookings")


class StopBookingsUpdate(BaseSchema):
    stop_bookings: bool = Field(..., alias="stopBookings")


class CarInventoryResponse(BaseDBSchema):
    name: str
    waitlist_tokens_available: int
    book_now_tokens_available: int
    stop_bookings: bool


class ReconcileResponse(BaseSchema):
    total_checked: int
    bookings_stopped: int
    cars_updated: int


class TokenPurchase(BaseSchema):
    car_id: str = Field(..., alias="carId")
    kind: InventoryResource
    user_id: Optional[str] = Field(default=None, alias="userId")


class TokenResponse(BaseDBSchema):
    car_id: str
    user_id: str
    kind: InventoryResource
    status: TokenStatus
    dropped_at: Optional[datetime] = None
