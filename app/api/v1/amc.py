"""
AMC endpoints: overdue listing, penalties, payments and reminders.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Actor, require_owner_or_privileged
from app.schemas.amc import (
    AMCReminderPreviewResponse,
    AMCResponse,
    InstallmentPaymentUpdate,
    InstallmentResponse,
    OverdueAMCResponse,
    PenaltyApplyResponse,
    PenaltySweepResponse,
    ReminderReportResponse,
)
from app.schemas.common import ApiResponse, success_response
from app.services.amc.amc_penalty_service import AMCPenaltyService
from app.services.amc.amc_reminder_service import AMCReminderService
from app.services.amc.amc_service import AMCService

router = APIRouter(prefix="/amc")


@router.get("/overdue", response_model=ApiResponse[List[OverdueAMCResponse]])
def list_overdue(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    overdue = AMCPenaltyService(db).list_overdue()
    return success_response(
        [OverdueAMCResponse.from_overdue(o) for o in overdue],
        f"Found {len(overdue)} AMCs with overdue payments",
    )


@router.post("/penalties/sweep", response_model=ApiResponse[PenaltySweepResponse])
def sweep_penalties(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    report = AMCPenaltyService(db).sweep()
    return success_response(
        PenaltySweepResponse.model_validate(report),
        f"Penalty calculation completed. Applied {report.penalties_applied} penalties.",
    )


@router.get("/reminders/preview", response_model=ApiResponse[List[AMCReminderPreviewResponse]])
def preview_reminders(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    previews = AMCReminderService(db).preview()
    return success_response(
        [AMCReminderPreviewResponse.from_preview(p) for p in previews],
        f"Found {len(previews)} AMCs due for reminders",
    )


@router.post("/reminders/send", response_model=ApiResponse[ReminderReportResponse])
def send_reminders(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    report = AMCReminderService(db).send()
    return success_response(
        ReminderReportResponse.model_validate(report),
        f"Sent {report.reminders_sent} AMC reminders",
    )


@router.get("/{amc_id}", response_model=ApiResponse[AMCResponse])
def get_amc(
    amc_id: str,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    amc = AMCService(db).get_amc(amc_id)
    require_owner_or_privileged(actor, amc.user_id, "view this AMC")
    return success_response(AMCResponse.model_validate(amc))


@router.post("/{amc_id}/penalties", response_model=ApiResponse[PenaltyApplyResponse])
def apply_penalties(
    amc_id: str,
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    report = AMCPenaltyService(db).apply_penalty_for_amc(amc_id)
    return success_response(
        PenaltyApplyResponse.model_validate(report),
        f"Applied penalties to {report.penalties_applied} installments",
    )


@router.put("/{amc_id}/installments/{position}/payment", response_model=ApiResponse[InstallmentResponse])
def mark_installment_paid(
    amc_id: str,
    position: int,
    payload: InstallmentPaymentUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    installment = AMCService(db).mark_installment_paid(
        amc_id, position, actor, paid=payload.paid, paid_date=payload.paid_date
    )
    return success_response(InstallmentResponse.model_validate(installment), "AMC payment updated")


@router.post("/{amc_id}/reminders/send", response_model=ApiResponse[ReminderReportResponse])
def send_reminder_for_amc(
    amc_id: str,
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    report = AMCReminderService(db).send_for_amc(amc_id)
    return success_response(ReminderReportResponse.model_validate(report), "AMC reminder processed")
