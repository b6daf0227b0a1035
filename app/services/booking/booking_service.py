"""
Booking lifecycle: create, update, status changes, delete and reads.

Availability is re-checked inside the write path right before the insert
or update. Two concurrent requests for overlapping ranges can still both
pass that check; no lock is taken.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, ValidationError
from app.core.permissions import Actor, require_owner_or_privileged, require_privileged
from app.models.base.enums import BookingStatus, NotificationType
from app.models.booking import Booking
from app.models.car import Car
from app.models.user import User
from app.repositories.booking import BookingRepository
from app.repositories.car import CarRepository
from app.repositories.user import UserRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.base.notification_dispatcher import NotificationDispatcher
from app.services.booking.availability_service import AvailabilityResult, AvailabilityService
from app.services.booking.overlap import validate_range
from app.utils import email_templates
from app.utils.datetime_utils import to_naive_utc, utcnow

BOOKING_CONFLICT_MESSAGE = "No vacancy available on the selected dates. Please choose different dates."
BLOCKED_CONFLICT_MESSAGE = (
    "Bookings are not available on the selected dates due to maintenance or other restrictions."
)

UPDATABLE_FIELDS = ("car_id", "booking_from", "booking_to", "comments", "status")


def raise_for_conflicts(result: AvailabilityResult) -> None:
    """Translate a negative availability result into ``ConflictError``."""
    if result.available:
        return
    message = BOOKING_CONFLICT_MESSAGE if result.conflicting_bookings else BLOCKED_CONFLICT_MESSAGE
    raise ConflictError(
        message,
        conflicting_booking_ids=[b.id for b in result.conflicting_bookings],
        conflicting_block_ids=[b.id for b in result.conflicting_blocks],
    )


class BookingService(BaseService[Booking, BookingRepository]):
    """
    Core booking operations.

    Responsibilities:
    - Enforcing that accepted bookings of a car never overlap each other
      or an active blocked date
    - Role checks for who may create, change and delete bookings
    - Best-effort confirmation emails and notifications after commit
    """

    def __init__(self, db_session: Session, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(BookingRepository(db_session), db_session)
        self.car_repo = CarRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.availability = AvailabilityService(db_session)
        self.dispatcher = dispatcher or NotificationDispatcher(db_session)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    @track_performance("create_booking")
    def create_booking(
        self,
        car_id: str,
        user_id: Optional[str],
        start: datetime,
        end: datetime,
        actor: Actor,
        comments: Optional[str] = None,
        status: Optional[BookingStatus] = None,
    ) -> Booking:
        """
        Create a booking.

        Regular users always book for themselves and get the default status.
        Admins may book for any user (themselves when ``user_id`` is omitted)
        and may pick the initial status.

        Raises:
            InvalidRangeError: If ``start >= end``
            NotFoundError: If the car or user does not exist
            ConflictError: If the range overlaps an accepted booking or active block
        """
        if actor.is_privileged:
            owner_id = user_id or actor.id
            initial_status = BookingStatus(status) if status else BookingStatus.ACCEPTED
        else:
            owner_id = actor.id
            initial_status = BookingStatus.ACCEPTED

        car = self.car_repo.get_by_id(car_id)
        user = self.user_repo.get_by_id(owner_id)
        start, end = to_naive_utc(start), to_naive_utc(end)
        validate_range(start, end)

        with self.transaction():
            if initial_status == BookingStatus.ACCEPTED:
                raise_for_conflicts(self.availability.is_range_available(car.id, start, end))
            booking = self.repository.create(Booking(
                car_id=car.id,
                user_id=user.id,
                booking_from=start,
                booking_to=end,
                comments=comments,
                status=initial_status,
            ))

        self._log_operation("create booking", booking.id, {"car_id": car.id, "user_id": user.id})
        self._dispatch_created(booking, user, car)
        return booking

    @track_performance("update_booking")
    def update_booking(self, booking_id: str, patch: Dict[str, Any], actor: Actor) -> Booking:
        """
        Apply a partial update to a booking. Admin only.

        When the car or dates change the availability check is re-run
        against the resulting range, ignoring the booking itself.
        """
        booking = self.repository.get_by_id(booking_id)
        require_privileged(actor, "update bookings")

        unknown = set(patch) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                "Unknown booking fields",
                field_errors={name: ["not updatable"] for name in sorted(unknown)},
            )

        changes = {key: value for key, value in patch.items() if value is not None or key == "comments"}
        for key in ("booking_from", "booking_to"):
            if key in changes:
                changes[key] = to_naive_utc(changes[key])
        if "status" in changes:
            changes["status"] = BookingStatus(changes["status"])

        car_id = changes.get("car_id", booking.car_id)
        start = changes.get("booking_from", booking.booking_from)
        end = changes.get("booking_to", booking.booking_to)
        status = changes.get("status", booking.status)

        if car_id != booking.car_id:
            self.car_repo.get_by_id(car_id)

        moves = any(key in changes for key in ("car_id", "booking_from", "booking_to"))
        reaccepts = status == BookingStatus.ACCEPTED and booking.status != BookingStatus.ACCEPTED

        if moves:
            validate_range(start, end)

        with self.transaction():
            if (moves or reaccepts) and status == BookingStatus.ACCEPTED:
                raise_for_conflicts(self.availability.is_range_available(
                    car_id, start, end, exclude_booking_id=booking.id
                ))
            if "status" in changes:
                self._stamp_status(changes, actor)
            self.repository.update(booking, changes)

        self._log_operation("update booking", booking.id, {"fields": sorted(changes)})
        return booking

    @track_performance("update_booking_status")
    def update_status(self, booking_id: str, status: BookingStatus, actor: Actor) -> Booking:
        """
        Accept or reject a booking. Admin only.

        Records who made the change and re-sends the confirmation email.
        """
        booking = self.repository.get_by_id(booking_id)
        require_privileged(actor, "update booking status")
        status = BookingStatus(status)

        with self.transaction():
            if status == BookingStatus.ACCEPTED and booking.status != BookingStatus.ACCEPTED:
                raise_for_conflicts(self.availability.is_range_available(
                    booking.car_id, booking.booking_from, booking.booking_to, exclude_booking_id=booking.id
                ))
            changes: Dict[str, Any] = {"status": status}
            self._stamp_status(changes, actor)
            self.repository.update(booking, changes)

        self._log_operation("update booking status", booking.id, {"status": status.value})
        self._send_confirmation(booking)
        return booking

    @track_performance("delete_booking")
    def delete_booking(self, booking_id: str, actor: Actor) -> None:
        """Hard delete. The owner or an admin may delete; counters are untouched."""
        booking = self.repository.get_by_id(booking_id)
        require_owner_or_privileged(actor, booking.user_id, "delete this booking")
        with self.transaction():
            self.repository.delete(booking)
        self._log_operation("delete booking", booking_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_booking(self, booking_id: str, actor: Actor) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        require_owner_or_privileged(actor, booking.user_id, "view this booking")
        return booking

    def list_bookings(self, actor: Actor) -> List[Booking]:
        """Own bookings for users, every booking for admins; newest first."""
        if actor.is_privileged:
            return self.repository.find_all_newest_first()
        return self.repository.find_by_user(actor.id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _stamp_status(changes: Dict[str, Any], actor: Actor) -> None:
        changes["accepted_by"] = actor.id
        changes["accepted_by_role"] = actor.role.value
        changes["status_changed_at"] = utcnow()

    def _dispatch_created(self, booking: Booking, user: User, car: Car) -> None:
        subject, body = email_templates.booking_confirmation(user, booking, car)
        self.dispatcher.send_user_email(user, "booking", subject, body)

        subject, body = email_templates.superadmin_booking_notice(user, booking, car)
        self.dispatcher.send_superadmin_email(subject, body)

        metadata = {
            "booking_id": booking.id,
            "car_name": car.name,
            "booking_from": booking.booking_from.isoformat(),
            "booking_to": booking.booking_to.isoformat(),
        }
        self.dispatcher.notify_user(
            user.id,
            NotificationType.BOOKING_DONE,
            "Booking Confirmed!",
            f"Your booking for {car.name} has been confirmed. Enjoy your ride!",
            metadata,
            booking.id,
        )
        self.dispatcher.notify_admins(
            NotificationType.USER_MADE_BOOKING,
            "User Made Booking",
            f"{user.name} has made a booking for {car.name}.",
            dict(metadata, user_name=user.name, user_email=user.email),
            booking.id,
        )

    def _send_confirmation(self, booking: Booking) -> None:
        user = self.user_repo.find_by_id(booking.user_id)
        car = self.car_repo.find_by_id(booking.car_id)
        if user is None or car is None:
            self._logger.warning(f"Skipping confirmation for booking {booking.id}: user or car missing")
            return
        subject, body = email_templates.booking_confirmation(user, booking, car)
        self.dispatcher.send_user_email(user, "booking", subject, body)
