"""
KYC reminder scheduler.

Active users whose KYC is still pending get an in-app reminder and an
email (subject to their email preferences) on every run once they have
been registered for ``KYC_REMINDER_MIN_DAYS``.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import ValidationError
from app.models.base.enums import KYCStatus, NotificationType, UserStatus
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.amc.amc_reminder_service import ReminderReport
from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.utils import email_templates
from app.utils.datetime_utils import days_since, to_naive_utc, utcnow


@dataclass
class KYCReminderPreview:
    user: User
    days_since_registration: int


@dataclass
class KYCReminderResult:
    """Outcome of reminding one user."""
    notified: bool
    email_sent: bool
    email_skipped: bool
    days_since_registration: int

    @property
    def success(self) -> bool:
        return self.notified and (self.email_sent or self.email_skipped)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "notified": self.notified,
            "email_sent": self.email_sent,
            "email_skipped": self.email_skipped,
            "days_since_registration": self.days_since_registration,
        }


class KYCReminderService(BaseService[User, UserRepository]):
    """Preview and send KYC completion reminders."""

    def __init__(self, db_session: Session, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(UserRepository(db_session), db_session)
        self.dispatcher = dispatcher or NotificationDispatcher(db_session)

    def preview(self, now: Optional[datetime] = None) -> List[KYCReminderPreview]:
        now = to_naive_utc(now) or utcnow()
        return [
            KYCReminderPreview(user=user, days_since_registration=days)
            for user, days in self._eligible(self.repository.find_kyc_pending_active(), now)
        ]

    @track_performance("kyc_reminders")
    def send(self, now: Optional[datetime] = None) -> ReminderReport:
        """
        Remind every eligible user.

        A reminder counts as sent once the in-app notification is recorded;
        a failed channel adds to ``error_count``.
        """
        now = to_naive_utc(now) or utcnow()
        report = ReminderReport()
        self._logger.info("Starting KYC reminder check...")

        users = self.repository.find_kyc_pending_active()
        report.total_checked = len(users)
        for user, days in self._eligible(users, now):
            result = self._remind(user, days)
            if result.notified:
                report.reminders_sent += 1
            if not result.success:
                report.error_count += 1

        self._logger.info(f"KYC reminder check completed. {report.reminders_sent} reminders sent.")
        return report

    def send_for_user(self, user_id: str, now: Optional[datetime] = None) -> KYCReminderResult:
        """
        Remind one user regardless of registration age.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If KYC is not pending or the account is not active
        """
        now = to_naive_utc(now) or utcnow()
        user = self.repository.get_by_id(user_id)
        if user.kyc_status != KYCStatus.PENDING:
            raise ValidationError("User KYC is not in pending status", field_errors={"kyc_status": [user.kyc_status.value]})
        if user.status != UserStatus.ACTIVE:
            raise ValidationError("User account is not active", field_errors={"status": [user.status.value]})
        return self._remind(user, days_since(user.created_at, now))

    @staticmethod
    def _eligible(users: List[User], now: datetime):
        for user in users:
            days = days_since(user.created_at, now)
            if days >= settings.KYC_REMINDER_MIN_DAYS:
                yield user, days

    def _remind(self, user: User, days: int) -> KYCReminderResult:
        plural = "s" if days > 1 else ""
        notified = self.dispatcher.notify_user(
            user.id,
            NotificationType.KYC_REMINDER,
            "KYC Verification Reminder",
            f"Hi {user.name}! Please complete your KYC verification to access all features and start "
            f"booking cars. Your account was created {days} day{plural} ago.",
            {"user_name": user.name, "days_since_registration": days, "reminder_type": "kyc_pending"},
            user.id,
        )
        subject, body = email_templates.kyc_reminder(user, days)
        email = self.dispatcher.send_user_email(user, "kyc", subject, body)

        result = KYCReminderResult(
            notified=notified,
            email_sent=email.success and not email.skipped,
            email_skipped=email.skipped,
            days_since_registration=days,
        )
        if result.success:
            self._logger.info(f"KYC reminder sent to user {user.email} - {days} days since registration")
        return result
