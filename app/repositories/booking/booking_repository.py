"""
Booking repository.

Conflict queries consider only accepted bookings and use the shared
closed-interval overlap clause.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.base.enums import BookingStatus
from app.models.booking import Booking
from app.repositories.base.base_repository import BaseRepository
from app.services.booking.overlap import overlap_clause


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking operations."""

    def __init__(self, db: Session):
        super().__init__(Booking, db)

    def find_conflicting(
        self,
        car_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """Accepted bookings for ``car_id`` overlapping ``[start, end]``."""
        stmt = select(Booking).where(
            Booking.car_id == car_id,
            Booking.status == BookingStatus.ACCEPTED,
            overlap_clause(Booking.booking_from, Booking.booking_to, start, end),
        )
        if exclude_booking_id:
            stmt = stmt.where(Booking.id != exclude_booking_id)
        return self._all(stmt.order_by(Booking.booking_from))

    def find_accepted_for_car(self, car_id: str) -> List[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.car_id == car_id, Booking.status == BookingStatus.ACCEPTED)
            .order_by(Booking.booking_from)
        )
        return self._all(stmt)

    def find_by_user(self, user_id: str) -> List[Booking]:
        stmt = select(Booking).where(Booking.user_id == user_id).order_by(Booking.created_at.desc())
        return self._all(stmt)

    def find_all_newest_first(self) -> List[Booking]:
        return self._all(select(Booking).order_by(Booking.created_at.desc()))
