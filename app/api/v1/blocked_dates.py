"""
Blocked-date endpoints. Mutations are admin only.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Actor
from app.schemas.booking import (
    AvailabilityRequest,
    AvailabilityResponse,
    BlockedDateCreate,
    BlockedDateResponse,
    BlockedDateUpdate,
)
from app.schemas.common import ApiResponse, success_response
from app.services.booking.blocked_date_service import BlockedDateService

router = APIRouter(prefix="/blocked-dates")


@router.post("", response_model=ApiResponse[BlockedDateResponse], status_code=status.HTTP_201_CREATED)
def create_blocked_date(
    payload: BlockedDateCreate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    block = BlockedDateService(db).create_block(
        payload.car_id, payload.blocked_from, payload.blocked_to, actor, reason=payload.reason
    )
    return success_response(BlockedDateResponse.model_validate(block), "Dates blocked successfully")


@router.get("", response_model=ApiResponse[List[BlockedDateResponse]])
def list_blocked_dates(car_id: Optional[str] = None, db: Session = Depends(deps.get_db)):
    blocks = BlockedDateService(db).list_blocks(car_id)
    return success_response([BlockedDateResponse.model_validate(b) for b in blocks])


@router.get("/car/{car_id}", response_model=ApiResponse[List[BlockedDateResponse]])
def list_car_blocked_dates(car_id: str, db: Session = Depends(deps.get_db)):
    blocks = BlockedDateService(db).list_blocks(car_id)
    return success_response([BlockedDateResponse.model_validate(b) for b in blocks])


@router.post("/check-availability", response_model=ApiResponse[AvailabilityResponse])
def check_blocked_availability(payload: AvailabilityRequest, db: Session = Depends(deps.get_db)):
    """Checks blocked dates only; accepted bookings are not consulted."""
    result = BlockedDateService(db).check_availability(payload.car_id, payload.start, payload.end)
    message = "Dates are available" if result.available else "Dates are blocked"
    return success_response(AvailabilityResponse.from_result(result), message)


@router.put("/{block_id}", response_model=ApiResponse[BlockedDateResponse])
def update_blocked_date(
    block_id: str,
    payload: BlockedDateUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    block = BlockedDateService(db).update_block(
        block_id, actor, start=payload.blocked_from, end=payload.blocked_to, reason=payload.reason
    )
    return success_response(BlockedDateResponse.model_validate(block), "Blocked dates updated successfully")


@router.delete("/{block_id}", response_model=ApiResponse[BlockedDateResponse])
def delete_blocked_date(
    block_id: str,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    block = BlockedDateService(db).delete_block(block_id, actor)
    return success_response(BlockedDateResponse.model_validate(block), "Blocked dates removed successfully")
