"""
AMC reminder scheduler.

Unpaid installments due within the reminder window (``0 < days until due
<= AMC_REMINDER_WINDOW_DAYS``) get an in-app reminder on every run.
Installments already past due belong to the penalty engine instead.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.models.amc import AMC, AMCInstallment
from app.models.base.enums import NotificationType
from app.repositories.amc import AMCRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.utils.datetime_utils import days_until, to_naive_utc, utcnow


@dataclass
class UpcomingInstallment:
    position: int
    year: int
    amount: Decimal
    due_date: datetime
    days_until_due: int


@dataclass
class AMCReminderPreview:
    amc: AMC
    unpaid_years: List[UpcomingInstallment] = field(default_factory=list)


@dataclass
class ReminderReport:
    reminders_sent: int = 0
    total_checked: int = 0
    error_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reminders_sent": self.reminders_sent,
            "total_checked": self.total_checked,
            "error_count": self.error_count,
        }


def in_reminder_window(installment: AMCInstallment, now: datetime) -> bool:
    if installment.paid or installment.due_date is None:
        return False
    remaining = days_until(installment.due_date, now)
    return 0 < remaining <= settings.AMC_REMINDER_WINDOW_DAYS


class AMCReminderService(BaseService[AMC, AMCRepository]):
    """Preview and send AMC due-date reminders."""

    def __init__(self, db_session: Session, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(AMCRepository(db_session), db_session)
        self.dispatcher = dispatcher or NotificationDispatcher(db_session)

    def preview(self, now: Optional[datetime] = None) -> List[AMCReminderPreview]:
        """Read-only list of AMCs that ``send`` would remind about."""
        now = to_naive_utc(now) or utcnow()
        previews = []
        for amc in self._candidates(now):
            upcoming = self._upcoming(amc, now)
            if upcoming:
                previews.append(AMCReminderPreview(amc=amc, unpaid_years=upcoming))
        return previews

    @track_performance("amc_reminders")
    def send(self, now: Optional[datetime] = None) -> ReminderReport:
        """Send one reminder per upcoming unpaid installment."""
        now = to_naive_utc(now) or utcnow()
        report = ReminderReport()
        self._logger.info("Starting AMC reminder check...")

        amcs = self.repository.find_all_with_installments()
        report.total_checked = len(amcs)
        for amc in amcs:
            for upcoming in self._upcoming(amc, now):
                if self._remind(amc, upcoming):
                    report.reminders_sent += 1
                else:
                    report.error_count += 1

        self._logger.info(f"AMC reminder check completed. {report.reminders_sent} reminders sent.")
        return report

    def send_for_amc(self, amc_id: str, now: Optional[datetime] = None) -> ReminderReport:
        """Send reminders for a single AMC."""
        now = to_naive_utc(now) or utcnow()
        amc = self.repository.get_by_id(amc_id)
        report = ReminderReport(total_checked=1)
        for upcoming in self._upcoming(amc, now):
            if self._remind(amc, upcoming):
                report.reminders_sent += 1
            else:
                report.error_count += 1
        return report

    def _candidates(self, now: datetime) -> List[AMC]:
        window = timedelta(days=settings.AMC_REMINDER_WINDOW_DAYS)
        return self.repository.find_with_unpaid_due_between(now, now + window)

    @staticmethod
    def _upcoming(amc: AMC, now: datetime) -> List[UpcomingInstallment]:
        return [
            UpcomingInstallment(
                position=i.position,
                year=i.year,
                amount=Decimal(i.amount),
                due_date=i.due_date,
                days_until_due=days_until(i.due_date, now),
            )
            for i in amc.installments
            if in_reminder_window(i, now)
        ]

    def _remind(self, amc: AMC, upcoming: UpcomingInstallment) -> bool:
        car_name = amc.car.name if amc.car else ""
        sent = self.dispatcher.notify_user(
            amc.user_id,
            NotificationType.AMC_REMINDER,
            "AMC Payment Reminder",
            f"Your Annual Maintenance Charge for {car_name} is due in {upcoming.days_until_due} days. "
            f"Please make the payment to avoid penalties.",
            {
                "amc_id": amc.id,
                "car_name": car_name,
                "year": upcoming.year,
                "days_left": upcoming.days_until_due,
                "amount": str(upcoming.amount),
            },
            amc.id,
        )
        if sent:
            self._logger.info(
                f"AMC reminder sent to user {amc.user_id} for {car_name} - {upcoming.days_until_due} days left"
            )
        return sent
