"""KYC reminder schemas."""

from app.schemas.kyc.kyc_reminder import KYCReminderPreviewResponse, KYCReminderResultResponse

__all__ = ["KYCReminderPreviewResponse", "KYCReminderResultResponse"]
