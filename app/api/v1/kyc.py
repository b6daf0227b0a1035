"""
KYC reminder endpoints (admin only).
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Actor
from app.schemas.amc import ReminderReportResponse
from app.schemas.common import ApiResponse, success_response
from app.schemas.kyc import KYCReminderPreviewResponse, KYCReminderResultResponse
from app.services.users.kyc_reminder_service import KYCReminderService

router = APIRouter(prefix="/kyc")


@router.get("/reminders/preview", response_model=ApiResponse[List[KYCReminderPreviewResponse]])
def preview_kyc_reminders(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    previews = KYCReminderService(db).preview()
    return success_response(
        [KYCReminderPreviewResponse.from_preview(p) for p in previews],
        f"Found {len(previews)} users with pending KYC",
    )


@router.post("/reminders/send", response_model=ApiResponse[ReminderReportResponse])
def send_kyc_reminders(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    report = KYCReminderService(db).send()
    return success_response(
        ReminderReportResponse.model_validate(report),
        f"Sent {report.reminders_sent} KYC reminders",
    )


@router.post("/reminders/users/{user_id}", response_model=ApiResponse[KYCReminderResultResponse])
def send_kyc_reminder_to_user(
    user_id: str,
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    result = KYCReminderService(db).send_for_user(user_id)
    message = "KYC reminder sent" if result.success else "KYC reminder partially failed"
    return success_response(KYCReminderResultResponse.model_validate(result), message)
