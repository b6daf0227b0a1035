"""
Booking endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api import deps
from app.core.permissions import Actor
from app.schemas.booking import (
    AvailabilityRequest,
    AvailabilityResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
)
from app.schemas.common import ApiResponse, success_response
from app.services.booking.availability_service import AvailabilityService
from app.services.booking.booking_service import BookingService

router = APIRouter(prefix="/bookings")


@router.post("", response_model=ApiResponse[BookingResponse], status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    booking = BookingService(db).create_booking(
        car_id=payload.car_id,
        user_id=payload.user_id,
        start=payload.booking_from,
        end=payload.booking_to,
        actor=actor,
        comments=payload.comments,
        status=payload.status,
    )
    return success_response(BookingResponse.model_validate(booking), "Booking created successfully")


@router.get("", response_model=ApiResponse[List[BookingResponse]])
def list_bookings(
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    bookings = BookingService(db).list_bookings(actor)
    return success_response([BookingResponse.model_validate(b) for b in bookings])


@router.post("/check-availability", response_model=ApiResponse[AvailabilityResponse])
def check_availability(
    payload: AvailabilityRequest,
    db: Session = Depends(deps.get_db),
):
    result = AvailabilityService(db).is_range_available(
        payload.car_id, payload.start, payload.end, exclude_booking_id=payload.exclude_booking_id
    )
    message = "Selected dates are available" if result.available else "Selected dates are not available"
    return success_response(AvailabilityResponse.from_result(result), message)


@router.get("/car/{car_id}", response_model=ApiResponse[List[BookingResponse]])
def list_car_bookings(car_id: str, db: Session = Depends(deps.get_db)):
    """Accepted bookings of a car, for drawing its calendar."""
    bookings = AvailabilityService(db).list_car_bookings(car_id)
    return success_response([BookingResponse.model_validate(b) for b in bookings])


@router.get("/{booking_id}", response_model=ApiResponse[BookingResponse])
def get_booking(
    booking_id: str,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    booking = BookingService(db).get_booking(booking_id, actor)
    return success_response(BookingResponse.model_validate(booking))


@router.put("/{booking_id}", response_model=ApiResponse[BookingResponse])
def update_booking(
    booking_id: str,
    payload: BookingUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    patch = payload.model_dump(exclude_unset=True, by_alias=False)
    booking = BookingService(db).update_booking(booking_id, patch, actor)
    return success_response(BookingResponse.model_validate(booking), "Booking updated successfully")


@router.put("/{booking_id}/status", response_model=ApiResponse[BookingResponse])
def update_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    booking = BookingService(db).update_status(booking_id, payload.status, actor)
    return success_response(BookingResponse.model_validate(booking), f"Booking {payload.status.value}")


@router.delete("/{booking_id}", response_model=ApiResponse[dict])
def delete_booking(
    booking_id: str,
    actor: Actor = Depends(deps.get_current_actor),
    db: Session = Depends(deps.get_db),
):
    BookingService(db).delete_booking(booking_id, actor)
    return success_response({}, "Booking deleted successfully")
