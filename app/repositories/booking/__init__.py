"""Booking repositories."""

from app.repositories.booking.booking_repository import BookingRepository
from app.repositories.booking.blocked_date_repository import BlockedDateRepository

__all__ = ["BookingRepository", "BlockedDateRepository"]
