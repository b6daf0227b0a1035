"""
Token model: a purchased claim against one of a car's token pools.
"""

from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base.base_model import TimestampModel, enum_type
from app.models.base.enums import InventoryResource, TokenStatus

if TYPE_CHECKING:
    from app.models.car.car import Car
    from app.models.user.user import User

__all__ = ["Token"]


class Token(TimestampModel):
    """Waitlist or book-now token held by a user for a car."""

    __tablename__ = "tokens"

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
    kind: Mapped[InventoryResource] = mapped_column(
        enum_type(InventoryResource),
        nullable=False,
    )
    status: Mapped[TokenStatus] = mapped_column(
        enum_type(TokenStatus),
        nullable=False,
        default=TokenStatus.ACTIVE,
    )
    dropped_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    car: Mapped["Car"] = relationship(back_populates="tokens")
    user: Mapped["User"] = relationship()

    __table_args__ = (
        Index("ix_tokens_car_kind_status", "car_id", "kind", "status"),
    )
