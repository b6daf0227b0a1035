# --- File: app/schemas/kyc/kyc_reminder.py ---
"""
KYC reminder schemas.
"""

from __future__ import annotations

from datetime import datetime

from app.models.base.enums import KYCStatus
from app.schemas.common.base import BaseSchema

__all__ = ["KYCReminderPreviewResponse", "KYCReminderResultResponse"]


class KYCReminderPreviewResponse(BaseSchema):
    user_id: str
    name: str
    email: str
    kyc_status: KYCStatus
    registered_at: datetime
    days_since_registration: int

    @classmethod
    def from_preview(cls, preview) -> "KYCReminderPreviewResponse":
        user = preview.user
        return cls(
            user_id=user.id,
            name=user.name,
            email=user.email,
            kyc_status=user.kyc_status,
            registered_at=user.created_at,
            days_since_registration=preview.days_since_registration,
        )


class KYCReminderResultResponse(BaseSchema):
    success: bool
    notified: bool
    email_sent: bool
    email_skipped: bool
    days_since_registration: int
