"""
AMC (Annual Maintenance Charge) models.

An AMC belongs to one user, car and ticket and carries an ordered list of
yearly installments. Unpaid overdue installments accrue a daily penalty;
paying an installment freezes its penalty.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.ext.orderinglist import ordering_list

from app.models.base.base_model import TimestampModel

if TYPE_CHECKING:
    from app.models.car.car import Car
    from app.models.user.user import User

__all__ = ["AMC", "AMCInstallment"]


class AMC(TimestampModel):
    """Annual maintenance charge schedule for a ticket."""

    __tablename__ = "amcs"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    car_id: Mapped[str] = mapped_column(
        ForeignKey("cars.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    ticket_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    user: Mapped["User"] = relationship()
    car: Mapped["Car"] = relationship()
    installments: Mapped[List["AMCInstallment"]] = relationship(
        back_populates="amc",
        order_by="AMCInstallment.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )


class AMCInstallment(TimestampModel):
    """
    One yearly AMC installment.

    Attributes:
        position: Index of the installment within its AMC
        year: Contract year the installment covers
        amount: Principal due
        paid: Whether the installment has been paid
        due_date: When payment is due
        paid_date: When payment was recorded
        penalty: Accrued late-payment penalty (frozen once paid)
        last_penalty_calculation: When the penalty was last recomputed
    """

    __tablename__ = "amc_installments"

    amc_id: Mapped[str] = mapped_column(
        ForeignKey("amcs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    penalty: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    last_penalty_calculation: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    amc: Mapped["AMC"] = relationship(back_populates="installments")

    __table_args__ = (
        UniqueConstraint("amc_id", "position", name="uq_amc_installments_position"),
    )

    @property
    def total_due(self) -> Decimal:
        return Decimal(self.amount) + Decimal(self.penalty or 0)
