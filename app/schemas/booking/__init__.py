"""Booking and blocked-date schemas."""

from app.schemas.booking.blocked_date import (
    BlockedDateCreate,
    BlockedDateResponse,
    BlockedDateUpdate,
)
from app.schemas.booking.booking import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
)

__all__ = [
    "AvailabilityRequest",
    "AvailabilityResponse",
    "BlockedDateCreate",
    "BlockedDateResponse",
    "BlockedDateUpdate",
    "BookingCreate",
    "BookingResponse",
    "BookingStatusUpdate",
    "BookingUpdate",
]
