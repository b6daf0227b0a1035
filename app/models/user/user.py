"""
User model.

End users own fractional tickets, book cars and receive AMC and KYC
reminders. Email delivery honours the per-user ``email_preferences``.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel, enum_type
from app.models.base.enums import KYCStatus, UserStatus
from app.models.base.mixins import ContactMixin

if TYPE_CHECKING:
    from app.models.booking.booking import Booking

__all__ = ["User", "default_email_preferences"]


def default_email_preferences() -> Dict[str, Any]:
    return {"enabled": True, "amc": True, "kyc": True, "booking": True}


class User(TimestampModel, ContactMixin):
    """
    Core user entity.

    Attributes:
        name: Full name
        kyc_status: pending until documents are submitted and reviewed
        status: active, suspended or deactivated
        suspension_end_date: When a temporary suspension lapses
        suspension_reason: Why the account was suspended
        email_preferences: ``{"enabled": bool, "<category>": bool}``
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    kyc_status: Mapped[KYCStatus] = mapped_column(
        enum_type(KYCStatus),
        nullable=False,
        default=KYCStatus.PENDING,
        index=True,
    )
    status: Mapped[UserStatus] = mapped_column(
        enum_type(UserStatus),
        nullable=False,
        default=UserStatus.ACTIVE,
        index=True,
    )
    suspension_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    suspension_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email_preferences: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=default_email_preferences,
    )

    bookings: Mapped[List["Booking"]] = relationship(back_populates="user")

    def wants_email(self, category: Optional[str] = None) -> bool:
        """Whether email for ``category`` may be sent to this user."""
        prefs = self.email_preferences or {}
        if prefs.get("enabled") is False:
            return False
        if category and prefs.get(category) is False:
            return False
        return True
