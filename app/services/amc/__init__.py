"""AMC penalty, payment and reminder services."""

from app.services.amc.amc_penalty_service import (
    AMCPenaltyService,
    PenaltyApplyReport,
    PenaltySweepReport,
    calculate_penalty,
)
from app.services.amc.amc_reminder_service import AMCReminderService, ReminderReport
from app.services.amc.amc_service import AMCService

__all__ = [
    "AMCPenaltyService",
    "AMCReminderService",
    "AMCService",
    "PenaltyApplyReport",
    "PenaltySweepReport",
    "ReminderReport",
    "calculate_penalty",
]
