"""
Notification dispatcher: the best-effort boundary for in-app notifications
and email.

Every public method reports success as a bool (or ``EmailResult``) and never
raises. Failures are wrapped in ``ExternalServiceError`` subclasses, logged
with enough context to retry by hand, and swallowed so the primary write
that triggered them stands.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.config.settings import settings
from app.core.exceptions import EmailServiceError, ExternalServiceError, NotificationServiceError
from app.models.base.enums import AdminRole, NotificationPriority, NotificationType, RecipientModel
from app.models.notification import Notification
from app.models.user import User
from app.repositories.admin import AdminRepository
from app.repositories.notification import NotificationRepository
from app.services.base.base_service import BaseService
from app.utils.email import EmailResult, EmailSender, SMTPEmailSender


PRIORITY_BY_TYPE = {
    NotificationType.AMC_REMINDER: NotificationPriority.HIGH,
    NotificationType.AMC_PENALTY: NotificationPriority.HIGH,
    NotificationType.AMC_PENALTY_APPLIED: NotificationPriority.HIGH,
    NotificationType.USER_SUSPENSION_EXPIRED: NotificationPriority.HIGH,
}


def priority_for(type: NotificationType) -> NotificationPriority:
    return PRIORITY_BY_TYPE.get(type, NotificationPriority.MEDIUM)


def should_send_email(user: Optional[User], category: Optional[str] = None) -> bool:
    """Honour the user's email preferences; users without preferences get email."""
    if user is None:
        return False
    return user.wants_email(category)


class NotificationDispatcher(BaseService[Notification, NotificationRepository]):
    """
    Records in-app notifications and sends email without letting
    delivery problems reach the caller.
    """

    def __init__(self, db_session: Session, email_sender: Optional[EmailSender] = None):
        super().__init__(NotificationRepository(db_session), db_session)
        self.admin_repo = AdminRepository(db_session)
        self.email_sender: EmailSender = email_sender or SMTPEmailSender()

    # -------------------------------------------------------------------------
    # In-app notifications
    # -------------------------------------------------------------------------

    def notify_user(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        related_entity_id: Optional[str] = None,
    ) -> bool:
        """Record a notification for one user. Returns False on failure."""
        notification = self._build(
            user_id, RecipientModel.USER, type, title, message, metadata, related_entity_id
        )
        return self._persist([notification], type, recipient=user_id)

    def notify_admins(
        self,
        type: NotificationType,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        related_entity_id: Optional[str] = None,
    ) -> bool:
        """Record one notification per active admin and superadmin."""
        try:
            admins = self.admin_repo.find_active()
        except Exception as e:
            self._report(NotificationServiceError(f"Could not load admin recipients: {e}"), type)
            return False

        notifications: List[Notification] = [
            self._build(
                admin.id,
                RecipientModel.SUPER_ADMIN if admin.role == AdminRole.SUPER_ADMIN else RecipientModel.ADMIN,
                type,
                title,
                message,
                metadata,
                related_entity_id,
            )
            for admin in admins
        ]
        if not notifications:
            return True
        return self._persist(notifications, type, recipient="admins")

    # -------------------------------------------------------------------------
    # Email
    # -------------------------------------------------------------------------

    def send_email(self, to: Optional[str], subject: str, body: str) -> bool:
        return self._deliver_email(to, subject, body).success

    def send_user_email(self, user: User, category: Optional[str], subject: str, body: str) -> EmailResult:
        """
        Email a user unless their preferences opt out of ``category``.

        An opt-out yields a successful, skipped result.
        """
        if not should_send_email(user, category):
            self._logger.info(f"{category or 'email'} notifications disabled for user {user.email}")
            return EmailResult(success=True, skipped=True)
        return self._deliver_email(user.email, subject, body)

    def send_superadmin_email(self, subject: str, body: str) -> bool:
        if not settings.SUPERADMIN_EMAIL:
            self._logger.debug("SUPERADMIN_EMAIL not configured; skipping superadmin email")
            return True
        return self.send_email(settings.SUPERADMIN_EMAIL, subject, body)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _build(
        recipient_id: str,
        recipient_model: RecipientModel,
        type: NotificationType,
        title: str,
        message: str,
        metadata: Optional[Dict[str, Any]],
        related_entity_id: Optional[str],
    ) -> Notification:
        return Notification(
            recipient_id=recipient_id,
            recipient_model=recipient_model,
            type=type,
            title=title,
            message=message,
            metadata_=metadata or {},
            priority=priority_for(type),
            related_entity_id=related_entity_id,
        )

    def _persist(self, notifications: List[Notification], type: NotificationType, recipient: str) -> bool:
        try:
            for notification in notifications:
                self.repository.create(notification)
            self.db.commit()
        except Exception as e:
            self._rollback()
            self._report(NotificationServiceError(str(e), recipient=recipient), type)
            return False
        self._logger.info(f"Notification created for {recipient}: {type.value}")
        return True

    def _deliver_email(self, to: Optional[str], subject: str, body: str) -> EmailResult:
        if not to:
            self._report(EmailServiceError("No recipient address"), None)
            return EmailResult(success=False, error="No recipient address")
        try:
            result = self.email_sender.send_email(to, subject, body)
        except Exception as e:
            result = EmailResult(success=False, error=str(e))
        if not result.success:
            self._report(EmailServiceError(result.error or "Email delivery failed", recipient=to), None)
        return result

    def _report(self, error: ExternalServiceError, type: Optional[NotificationType]) -> None:
        self._logger.error(
            f"Best-effort delivery failed: {error.message}",
            extra={
                "error_code": error.error_code.value,
                "details": error.details,
                "notification_type": type.value if type else None,
            },
        )
