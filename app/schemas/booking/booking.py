# --- File: app/schemas/booking/booking.py ---
"""
Booking request and response schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.base.enums import BookingStatus
from app.schemas.common.base import BaseDBSchema, BaseSchema

__all__ = [
    "BookingCreate",
    "BookingUpdate",
    "BookingStatusUpdate",
    "BookingResponse",
    "AvailabilityRequest",
    "AvailabilityResponse",
]


class BookingCreate(BaseSchema):
    """
    New booking.

    ``user_id`` and ``status`` are honoured for admins only; regular users
    always book for themselves with the default status.
    """

    car_id: str = Field(..., alias="carId")
    booking_from: datetime = Field(..., alias="bookingFrom")
    booking_to: datetime = Field(..., alias="bookingTo")
    comments: Optional[str] = Field(default=None, max_length=2000)
    user_id: Optional[str] = Field(default=None, alias="userId")
    status: Optional[BookingStatus] = None


class BookingUpdate(BaseSchema):
    """Partial booking update (admin only)."""

    car_id: Optional[str] = Field(default=None, alias="carId")
    booking_from: Optional[datetime] = Field(default=None, alias="bookingFrom")
    booking_to: Optional[datetime] = Field(default=None, alias="bookingTo")
    comments: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[BookingStatus] = None


class BookingStatusUpdate(BaseSchema):
    status: BookingStatus


class BookingResponse(BaseDBSchema):
    car_id: str
    user_id: str
    booking_from: datetime
    booking_to: datetime
    status: BookingStatus
    comments: Optional[str] = None
    accepted_by: Optional[str] = None
    accepted_by_role: Optional[str] = None
    status_changed_at: Optional[datetime] = None


class AvailabilityRequest(BaseSchema):
    car_id: str = Field(..., alias="carId")
    start: datetime = Field(..., alias="startDate")
    end: datetime = Field(..., alias="endDate")
    exclude_booking_id: Optional[str] = Field(default=None, alias="excludeBookingId")


class ConflictRef(BaseSchema):
    id: str
    start: datetime
    end: datetime


class AvailabilityResponse(BaseSchema):
    available: bool
    conflicting_bookings: List[ConflictRef] = Field(default_factory=list)
    conflicting_blocks: List[ConflictRef] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result) -> "AvailabilityResponse":
        return cls(
            available=result.available,
            conflicting_bookings=[
                ConflictRef(id=b.id, start=b.booking_from, end=b.booking_to)
                for b in result.conflicting_bookings
            ],
            conflicting_blocks=[
                ConflictRef(id=b.id, start=b.blocked_from, end=b.blocked_to)
                for b in result.conflicting_blocks
            ],
        )
