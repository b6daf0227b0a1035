"""AMC schemas."""

from app.schemas.amc.amc import (
    AMCReminderPreviewResponse,
    AMCResponse,
    InstallmentPaymentUpdate,
    InstallmentResponse,
    OverdueAMCResponse,
    OverdueInstallmentResponse,
    PenaltyApplyResponse,
    PenaltySweepResponse,
    ReminderReportResponse,
    UpcomingInstallmentResponse,
)

__all__ = [
    "AMCReminderPreviewResponse",
    "AMCResponse",
    "InstallmentPaymentUpdate",
    "InstallmentResponse",
    "OverdueAMCResponse",
    "OverdueInstallmentResponse",
    "PenaltyApplyResponse",
    "PenaltySweepResponse",
    "ReminderReportResponse",
    "UpcomingInstallmentResponse",
]
