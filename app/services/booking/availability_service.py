"""
Availability resolver.

Answers whether a car is free for a closed date range by looking at
accepted bookings and active blocked dates. Read-only.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.booking import BlockedDate, Booking
from app.repositories.booking import BlockedDateRepository, BookingRepository
from app.repositories.car import CarRepository
from app.services.base.base_service import BaseService
from app.services.booking.overlap import validate_range
from app.utils.datetime_utils import to_naive_utc


@dataclass
class AvailabilityResult:
    """Outcome of an availability check with both conflict sets."""
    available: bool
    conflicting_bookings: List[Booking] = field(default_factory=list)
    conflicting_blocks: List[BlockedDate] = field(default_factory=list)


class AvailabilityService(BaseService[Booking, BookingRepository]):
    """Date-range availability for cars."""

    def __init__(self, db_session: Session):
        super().__init__(BookingRepository(db_session), db_session)
        self.blocked_date_repo = BlockedDateRepository(db_session)
        self.car_repo = CarRepository(db_session)

    def is_range_available(
        self,
        car_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """
        Check ``[start, end]`` against accepted bookings and active blocks.

        Args:
            car_id: Car to check
            start: Range start (inclusive)
            end: Range end (inclusive)
            exclude_booking_id: Booking to ignore, used when re-checking an update

        Raises:
            InvalidRangeError: If ``start >= end``
        """
        validate_range(start, end)
        start, end = to_naive_utc(start), to_naive_utc(end)

        bookings = self.repository.find_conflicting(car_id, start, end, exclude_booking_id)
        blocks = self.blocked_date_repo.find_conflicting(car_id, start, end)

        return AvailabilityResult(
            available=not bookings and not blocks,
            conflicting_bookings=bookings,
            conflicting_blocks=blocks,
        )

    def list_car_bookings(self, car_id: str) -> List[Booking]:
        """Accepted bookings for a car ordered by start date."""
        self.car_repo.get_by_id(car_id)
        return self.repository.find_accepted_for_car(car_id)

    def list_car_blocked_dates(self, car_id: str) -> List[BlockedDate]:
        self.car_repo.get_by_id(car_id)
        return self.blocked_date_repo.find_active(car_id)
