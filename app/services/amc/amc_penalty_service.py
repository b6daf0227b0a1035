"""
AMC penalty engine.

Per installment: unpaid and not yet due, then unpaid and overdue (penalty
accrues daily at the annual rate), then paid (penalty frozen).

    penalty = round(amount * rate / 365 * ceil(days overdue), 2)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models.amc import AMC, AMCInstallment
from app.models.base.enums import NotificationType
from app.repositories.amc import AMCRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.utils.datetime_utils import ceil_days, to_naive_utc, utcnow

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
DAYS_PER_YEAR = Decimal(365)


def calculate_penalty(amount: Any, days_overdue: int, annual_rate: Optional[Decimal] = None) -> Decimal:
    """
    Simple-interest late penalty rounded half-up to cents.

    Never negative; ``days_overdue <= 0`` yields zero.
    """
    if days_overdue <= 0:
        return ZERO
    rate = Decimal(str(annual_rate if annual_rate is not None else settings.AMC_PENALTY_ANNUAL_RATE))
    penalty = Decimal(str(amount)) * rate / DAYS_PER_YEAR * days_overdue
    return max(penalty.quantize(CENT, rounding=ROUND_HALF_UP), ZERO)


def days_overdue(installment: AMCInstallment, now: datetime) -> int:
    if installment.due_date is None:
        return 0
    return ceil_days(now - installment.due_date)


def is_overdue(installment: AMCInstallment, now: datetime) -> bool:
    return not installment.paid and installment.due_date is not None and installment.due_date < now


def total_penalty(amc: AMC) -> Decimal:
    return sum((Decimal(i.penalty or 0) for i in amc.installments), ZERO)


def total_with_penalties(amc: AMC) -> Decimal:
    return sum((Decimal(i.amount) + Decimal(i.penalty or 0) for i in amc.installments), ZERO)


@dataclass
class PenaltySweepReport:
    penalties_applied: int = 0
    total_penalty_amount: Decimal = ZERO
    total_checked: int = 0
    updated_count: int = 0
    error_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "penalties_applied": self.penalties_applied,
            "total_penalty_amount": self.total_penalty_amount,
            "total_checked": self.total_checked,
            "updated_count": self.updated_count,
            "error_count": self.error_count,
        }


@dataclass
class PenaltyApplyReport:
    penalties_applied: int = 0
    total_penalty_amount: Decimal = ZERO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "penalties_applied": self.penalties_applied,
            "total_penalty_amount": self.total_penalty_amount,
        }


@dataclass
class OverdueInstallment:
    position: int
    year: int
    amount: Decimal
    due_date: datetime
    days_overdue: int
    current_penalty: Decimal
    calculated_penalty: Decimal
    total_amount: Decimal


@dataclass
class OverdueAMC:
    amc: AMC
    overdue_years: List[OverdueInstallment] = field(default_factory=list)


@dataclass
class _PenaltyChange:
    installment: AMCInstallment
    penalty: Decimal
    previous: Decimal
    days_overdue: int


class AMCPenaltyService(BaseService[AMC, AMCRepository]):
    """Computes, persists and announces late-payment penalties."""

    def __init__(self, db_session: Session, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(AMCRepository(db_session), db_session)
        self.dispatcher = dispatcher or NotificationDispatcher(db_session)

    calculate_penalty = staticmethod(calculate_penalty)
    total_penalty = staticmethod(total_penalty)
    total_with_penalties = staticmethod(total_with_penalties)

    # -------------------------------------------------------------------------
    # Sweeps
    # -------------------------------------------------------------------------

    @track_performance("amc_penalty_sweep")
    def sweep(self, now: Optional[datetime] = None) -> PenaltySweepReport:
        """
        Recalculate penalties on every overdue unpaid installment.

        An installment whose penalty is non-zero and was calculated less
        than ``AMC_PENALTY_RECALC_HOURS`` ago is skipped. One AMC failing
        is logged and counted; the sweep carries on with the rest.
        """
        now = to_naive_utc(now) or utcnow()
        throttle = timedelta(hours=settings.AMC_PENALTY_RECALC_HOURS)
        report = PenaltySweepReport()
        self._logger.info("Starting AMC penalty check...")

        for amc in self.repository.find_all_with_installments():
            report.total_checked += 1
            amc_id = amc.id
            try:
                with self.transaction():
                    changes = self._recalculate(amc, now, throttle)
            except Exception as e:
                report.error_count += 1
                self._logger.error(f"Error applying penalties for AMC {amc_id}: {e}", exc_info=True)
                continue

            if changes:
                report.updated_count += 1
                for change in changes:
                    report.penalties_applied += 1
                    report.total_penalty_amount += change.penalty
                self._announce(amc, changes)

        self._logger.info(
            f"AMC penalty check completed. {report.penalties_applied} penalties applied, "
            f"total penalty amount: {report.total_penalty_amount}"
        )
        return report

    @track_performance("amc_penalty_apply")
    def apply_penalty_for_amc(self, amc_id: str, now: Optional[datetime] = None) -> PenaltyApplyReport:
        """Recalculate one AMC's overdue installments, ignoring the throttle."""
        now = to_naive_utc(now) or utcnow()
        amc = self.repository.get_by_id(amc_id)
        report = PenaltyApplyReport()

        with self.transaction():
            changes = self._recalculate(amc, now, throttle=None)

        for change in changes:
            report.penalties_applied += 1
            report.total_penalty_amount += change.penalty
        announced = [c for c in changes if c.penalty != c.previous]
        if announced:
            self._announce(amc, announced)
        return report

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_overdue(self, now: Optional[datetime] = None) -> List[OverdueAMC]:
        """AMCs with overdue unpaid installments and their projected penalties."""
        now = to_naive_utc(now) or utcnow()
        records = []
        for amc in self.repository.find_with_unpaid_due_before(now):
            overdue = []
            for installment in amc.installments:
                if not is_overdue(installment, now):
                    continue
                days = days_overdue(installment, now)
                calculated = calculate_penalty(installment.amount, days)
                overdue.append(OverdueInstallment(
                    position=installment.position,
                    year=installment.year,
                    amount=Decimal(installment.amount),
                    due_date=installment.due_date,
                    days_overdue=days,
                    current_penalty=Decimal(installment.penalty or 0),
                    calculated_penalty=calculated,
                    total_amount=Decimal(installment.amount) + calculated,
                ))
            if overdue:
                records.append(OverdueAMC(amc=amc, overdue_years=overdue))
        return records

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _recalculate(self, amc: AMC, now: datetime, throttle: Optional[timedelta]) -> List[_PenaltyChange]:
        """
        Update penalties in place and return what changed.

        With a throttle only changed penalties are written. Without one
        (manual recalculation) every overdue installment is stamped and
        reported.
        """
        changes = []
        for installment in amc.installments:
            if not is_overdue(installment, now):
                continue
            days = days_overdue(installment, now)
            if days <= 0:
                continue

            current = Decimal(installment.penalty or 0)
            if throttle is not None and current > ZERO:
                last = installment.last_penalty_calculation or installment.due_date
                if now - last < throttle:
                    continue

            penalty = calculate_penalty(installment.amount, days)
            if throttle is not None and penalty == current:
                continue

            installment.penalty = penalty
            installment.last_penalty_calculation = now
            changes.append(_PenaltyChange(installment, penalty, current, days))
            self._logger.info(
                f"Penalty applied for AMC {amc.id}, Year {installment.year}: {penalty} ({days} days overdue)"
            )
        if changes:
            self.db.flush()
        return changes

    def _announce(self, amc: AMC, changes: List[_PenaltyChange]) -> None:
        user = amc.user
        car_name = amc.car.name if amc.car else ""
        for change in changes:
            installment = change.installment
            amount = Decimal(installment.amount)
            metadata = {
                "amc_id": amc.id,
                "car_name": car_name,
                "year": installment.year,
                "original_amount": str(amount),
                "penalty_amount": str(change.penalty),
                "days_overdue": change.days_overdue,
                "total_amount": str(amount + change.penalty),
            }
            self.dispatcher.notify_user(
                amc.user_id,
                NotificationType.AMC_PENALTY,
                "AMC Penalty Applied",
                f"A penalty of ₹{change.penalty} has been applied to your AMC payment for {car_name} "
                f"(Year {installment.year}) as it is {change.days_overdue} days overdue. "
                f"Please make the payment immediately to avoid further penalties.",
                metadata,
                amc.id,
            )
            self.dispatcher.notify_admins(
                NotificationType.AMC_PENALTY_APPLIED,
                "AMC Penalty Applied",
                f"A penalty of ₹{change.penalty} has been applied to {user.name if user else 'a user'}'s "
                f"AMC payment for {car_name} (Year {installment.year}) as it is "
                f"{change.days_overdue} days overdue.",
                dict(metadata, user_name=user.name if user else None, user_email=user.email if user else None),
                amc.id,
            )
