"""User-facing reminder and account-status services."""

from app.services.users.kyc_reminder_service import KYCReminderService
from app.services.users.user_status_service import UserStatusService

__all__ = ["KYCReminderService", "UserStatusService"]
