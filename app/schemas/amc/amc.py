# --- File: app/schemas/amc/amc.py ---
"""
AMC schemas: installments, penalty reports and reminder previews.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from app.schemas.common.base import BaseDBSchema, BaseSchema

__all__ = [
    "InstallmentResponse",
    "AMCResponse",
    "InstallmentPaymentUpdate",
    "OverdueInstallmentResponse",
    "OverdueAMCResponse",
    "PenaltySweepResponse",
    "PenaltyApplyResponse",
    "UpcomingInstallmentResponse",
    "AMCReminderPreviewResponse",
    "ReminderReportResponse",
]


class InstallmentResponse(BaseSchema):
    position: int
    year: int
    amount: Decimal
    paid: bool
    due_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    penalty: Decimal
    last_penalty_calculation: Optional[datetime] = None
    total_due: Decimal


class AMCResponse(BaseDBSchema):
    user_id: str
    car_id: str
    ticket_id: str
    installments: List[InstallmentResponse] = Field(default_factory=list)


class InstallmentPaymentUpdate(BaseSchema):
    paid: bool = True
    paid_date: Optional[datetime] = Field(default=None, alias="paidDate")


class OverdueInstallmentResponse(BaseSchema):
    position: int
    year: int
    amount: Decimal
    due_date: datetime
    days_overdue: int
    current_penalty: Decimal
    calculated_penalty: Decimal
    total_amount: Decimal


class OverdueAMCResponse(BaseSchema):
    amc_id: str
    user_id: str
    car_id: str
    overdue_years: List[OverdueInstallmentResponse]

    @classmethod
    def from_overdue(cls, overdue) -> "OverdueAMCResponse":
        return cls(
            amc_id=overdue.amc.id,
            user_id=overdue.amc.user_id,
            car_id=overdue.amc.car_id,
            overdue_years=[OverdueInstallmentResponse.model_validate(i) for i in overdue.overdue_years],
        )


class PenaltySweepResponse(BaseSchema):
    penalties_applied: int
    total_penalty_amount: Decimal
    total_checked: int
    updated_count: int
    error_count: int


class PenaltyApplyResponse(BaseSchema):
    penalties_applied: int
    total_penalty_amount: Decimal


class UpcomingInstallmentResponse(BaseSchema):
    position: int
    year: int
    amount: Decimal
    due_date: datetime
    days_until_due: int


class AMCReminderPreviewResponse(BaseSchema):
    amc_id: str
    user_id: str
    user_email: Optional[str] = None
    car_name: Optional[str] = None
    unpaid_years: List[UpcomingInstallmentResponse]

    @classmethod
    def from_preview(cls, preview) -> "AMCReminderPreviewResponse":
        amc = preview.amc
        return cls(
            amc_id=amc.id,
            user_id=amc.user_id,
            user_email=amc.user.email if amc.user else None,
            car_name=amc.car.name if amc.car else None,
            unpaid_years=[UpcomingInstallmentResponse.model_validate(i) for i in preview.unpaid_years],
        )


class ReminderReportResponse(BaseSchema):
    reminders_sent: int
    total_checked: int
    error_count: int
