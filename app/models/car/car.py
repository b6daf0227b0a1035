"""
Car model: the resource container for fractional ownership.

Holds the per-car countable pools (waitlist tokens, book-now tokens)
and the derived ``stop_bookings`` flag maintained by the inventory gate.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.models.base.mixins import AuditMixin

if TYPE_CHECKING:
    from app.models.booking.blocked_date import BlockedDate
    from app.models.booking.booking import Booking
    from app.models.car.token import Token

__all__ = ["Car"]


class Car(TimestampModel, AuditMixin):
    """
    Car listed for fractional ownership.

    Attributes:
        name: Display name of the car
        brand: Brand name
        contract_years: Amortization horizon for tickets
        waitlist_tokens_available: Remaining waitlist tokens (0-20)
        book_now_tokens_available: Remaining book-now tokens (0-12)
        stop_bookings: True while bookings are disallowed; forced True
            whenever both token pools are empty
    """

    __tablename__ = "cars"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    brand: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    contract_years: Mapped[int] = mapped_column(Integer, nullable=False, default=5)

    waitlist_tokens_available: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=20,
        comment="Remaining waitlist tokens",
    )
    book_now_tokens_available: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=12,
        comment="Remaining book-now tokens",
    )
    stop_bookings: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Derived: bookings disallowed",
    )

    bookings: Mapped[List["Booking"]] = relationship(back_populates="car")
    blocked_dates: Mapped[List["BlockedDate"]] = relationship(back_populates="car")
    tokens: Mapped[List["Token"]] = relationship(back_populates="car")

    __table_args__ = (
        CheckConstraint(
            "waitlist_tokens_available >= 0",
            name="ck_cars_waitlist_tokens_non_negative",
        ),
        CheckConstraint(
            "book_now_tokens_available >= 0",
            name="ck_cars_book_now_tokens_non_negative",
        ),
        Index(
            "ix_cars_stop_bookings_pools",
            "stop_bookings",
            "waitlist_tokens_available",
            "book_now_tokens_available",
        ),
    )

    @property
    def pools_exhausted(self) -> bool:
        """Both token pools are empty."""
        return self.waitlist_tokens_available == 0 and self.book_now_tokens_available == 0
