"""Booking and blocked-date models."""

from app.models.booking.booking import Booking
from app.models.booking.blocked_date import BlockedDate

__all__ = ["Booking", "BlockedDate"]
