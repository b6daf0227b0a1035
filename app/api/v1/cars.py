"""
Car inventory endpoints (admin only).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Actor
from app.schemas.car import CarInventoryResponse, InventoryUpdate, ReconcileResponse, StopBookingsUpdate
from app.schemas.common import ApiResponse, success_response
from app.services.inventory.inventory_gate import InventoryGate

router = APIRouter(prefix="/cars")


@router.put("/{car_id}/inventory", response_model=ApiResponse[CarInventoryResponse])
def update_inventory(
    car_id: str,
    payload: InventoryUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    car = InventoryGate(db).update_inventory(
        car_id,
        actor,
        waitlist_tokens=payload.waitlist_tokens,
        book_now_tokens=payload.book_now_tokens,
        stop_bookings=payload.stop_bookings,
    )
    return success_response(CarInventoryResponse.model_validate(car), "Inventory updated successfully")


@router.put("/{car_id}/stop-bookings", response_model=ApiResponse[CarInventoryResponse])
def set_stop_bookings(
    car_id: str,
    payload: StopBookingsUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    car = InventoryGate(db).set_stop_bookings(car_id, payload.stop_bookings, actor)
    message = "Bookings stopped" if car.stop_bookings else "Bookings resumed"
    return success_response(CarInventoryResponse.model_validate(car), message)


@router.post("/reconcile-stop-bookings", response_model=ApiResponse[ReconcileResponse])
def reconcile_stop_bookings(
    actor: Actor = Depends(deps.get_privileged_actor),
    db: Session = Depends(deps.get_db),
):
    report = InventoryGate(db).reconcile_all()
    return success_response(
        ReconcileResponse.model_validate(report),
        f"Stopped bookings on {report.bookings_stopped} cars",
    )
