"""
Booking model for shared-car reservations.

A booking holds a car for a closed date range. Only accepted bookings
take part in availability checks.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel, enum_type
from app.models.base.enums import BookingStatus

if TYPE_CHECKING:
    from app.models.car.car import Car
    from app.models.user.user import User

__all__ = ["Booking"]


class Booking(TimestampModel):
    """
    Reservation of a car by a user.

    Attributes:
        car_id: Booked car
        user_id: User the booking belongs to
        booking_from: Start of the reserved range (inclusive)
        booking_to: End of the reserved range (inclusive)
        status: accepted or rejected
        comments: Free-form comments
        accepted_by: Back-office account that last set the status
        accepted_by_role: Role of that account
        status_changed_at: When the status was last set explicitly
    """

    __tablename__ = "bookings"

    car_id: Mapped[str] = mapped_column(
        ForeignKey("cars.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    booking_from: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    booking_to: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    status: Mapped[BookingStatus] = mapped_column(
        enum_type(BookingStatus),
        nullable=False,
        default=BookingStatus.ACCEPTED,
        index=True,
    )
    comments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    accepted_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    accepted_by_role: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    status_changed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    car: Mapped["Car"] = relationship(back_populates="bookings")
    user: Mapped["User"] = relationship(back_populates="bookings")

    __table_args__ = (
        Index("ix_bookings_car_status_range", "car_id", "status", "booking_from", "booking_to"),
    )

    @property
    def is_accepted(self) -> bool:
        return self.status == BookingStatus.ACCEPTED
