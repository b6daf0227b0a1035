"""
Blocked date model: admin-declared maintenance or blackout window for a car.

Blocks are soft-deleted through ``is_active`` so their history is kept.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel
from app.models.base.mixins import AuditMixin

if TYPE_CHECKING:
    from app.models.car.car import Car

__all__ = ["BlockedDate"]


class BlockedDate(TimestampModel, AuditMixin):
    """Unavailability window for a car."""

    __tablename__ = "blocked_dates"

    car_id: Mapped[str] = mapped_column(
        ForeignKey("cars.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    blocked_from: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    blocked_to: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    reason: Mapped[str] = mapped_column(String(255), nullable=False, default="Maintenance")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    car: Mapped["Car"] = relationship(back_populates="blocked_dates")

    __table_args__ = (
        Index("ix_blocked_dates_car_active", "car_id", "is_active"),
        Index("ix_blocked_dates_range", "blocked_from", "blocked_to"),
    )
