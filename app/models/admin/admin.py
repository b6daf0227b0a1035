"""
Back-office account model.

Admins and superadmins manage cars, blocked dates and bookings and
receive fan-out notifications about user activity.
"""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base.base_model import TimestampModel, enum_type
from app.models.base.enums import AdminRole
from app.models.base.mixins import ContactMixin

__all__ = ["Admin"]


class Admin(TimestampModel, ContactMixin):
    """Admin or superadmin account."""

    __tablename__ = "admins"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[AdminRole] = mapped_column(
        enum_type(AdminRole),
        nullable=False,
        default=AdminRole.ADMIN,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    @property
    def is_superadmin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN
