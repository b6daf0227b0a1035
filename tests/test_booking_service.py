import pytest

from app.core.exceptions import ConflictError, ForbiddenError, InvalidRangeError, NotFoundError, ValidationError
from app.core.permissions import Actor
from app.models.base.enums import ActorRole, BookingStatus, NotificationType, RecipientModel
from app.models.booking import BlockedDate, Booking
from app.models.notification import Notification
from app.services.booking.availability_service import AvailabilityService
from app.services.booking.booking_service import (
    BLOCKED_CONFLICT_MESSAGE,
    BOOKING_CONFLICT_MESSAGE,
    BookingService,
)
from tests.conftest import day


@pytest.fixture
def service(db, dispatcher):
    return BookingService(db, dispatcher=dispatcher)


def test_user_books_free_range(service, car, user, user_actor):
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor, comments="Weekend trip")

    assert booking.user_id == user.id
    assert booking.status == BookingStatus.ACCEPTED
    assert booking.comments == "Weekend trip"


def test_overlapping_booking_is_rejected(service, car, user_actor, make_user):
    service.create_booking(car.id, None, day(1), day(5), user_actor)
    other = make_user()

    with pytest.raises(ConflictError) as exc:
        service.create_booking(car.id, None, day(4), day(8), Actor(other.id, ActorRole.USER))
    assert exc.value.message == BOOKING_CONFLICT_MESSAGE
    assert exc.value.status_code == 409


def test_touching_ranges_conflict(service, car, user_actor):
    service.create_booking(car.id, None, day(1), day(3), user_actor)
    with pytest.raises(ConflictError):
        service.create_booking(car.id, None, day(3), day(4), user_actor)


def test_adjacent_ranges_on_other_car_do_not_conflict(service, make_car, user_actor):
    first, second = make_car(), make_car(name="Audi A4")
    service.create_booking(first.id, None, day(1), day(3), user_actor)
    booking = service.create_booking(second.id, None, day(1), day(3), user_actor)
    assert booking.car_id == second.id


def test_blocked_range_is_rejected_with_block_message(db, service, car, user_actor, admin):
    db.add(BlockedDate(car_id=car.id, blocked_from=day(10), blocked_to=day(12), created_by=admin.id))
    db.commit()

    with pytest.raises(ConflictError) as exc:
        service.create_booking(car.id, None, day(11), day(14), user_actor)
    assert exc.value.message == BLOCKED_CONFLICT_MESSAGE
    assert exc.value.details["conflicting_block_ids"]


def test_inactive_block_does_not_conflict(db, service, car, user_actor):
    db.add(BlockedDate(car_id=car.id, blocked_from=day(10), blocked_to=day(12), is_active=False))
    db.commit()
    assert service.create_booking(car.id, None, day(11), day(14), user_actor).id


def test_invalid_range_and_unknown_car(service, car, user_actor):
    with pytest.raises(InvalidRangeError):
        service.create_booking(car.id, None, day(3), day(3), user_actor)
    with pytest.raises(NotFoundError):
        service.create_booking("missing-car", None, day(1), day(2), user_actor)


def test_regular_user_cannot_book_for_someone_else(service, car, user, user_actor, make_user):
    other = make_user()
    booking = service.create_booking(
        car.id, other.id, day(1), day(2), user_actor, status=BookingStatus.REJECTED
    )
    assert booking.user_id == user.id
    assert booking.status == BookingStatus.ACCEPTED


def test_admin_books_for_user_with_chosen_status(service, car, user, admin_actor):
    booking = service.create_booking(
        car.id, user.id, day(1), day(2), admin_actor, status=BookingStatus.REJECTED
    )
    assert booking.user_id == user.id
    assert booking.status == BookingStatus.REJECTED


def test_rejected_booking_does_not_hold_the_car(service, car, user, user_actor, admin_actor):
    service.create_booking(car.id, user.id, day(1), day(5), admin_actor, status=BookingStatus.REJECTED)
    assert service.create_booking(car.id, None, day(2), day(3), user_actor).status == BookingStatus.ACCEPTED


def test_creation_sends_emails_and_notifications(db, service, car, user, user_actor, admin, superadmin, email_outbox):
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor)

    assert user.email in email_outbox.recipients()
    assert "owner@fraction.test" in email_outbox.recipients()

    notes = db.query(Notification).filter(Notification.related_entity_id == booking.id).all()
    by_type = {}
    for note in notes:
        by_type.setdefault(note.type, []).append(note)
    assert len(by_type[NotificationType.BOOKING_DONE]) == 1
    assert by_type[NotificationType.BOOKING_DONE][0].recipient_id == user.id
    admin_models = {n.recipient_model for n in by_type[NotificationType.USER_MADE_BOOKING]}
    assert admin_models == {RecipientModel.ADMIN, RecipientModel.SUPER_ADMIN}


def test_booking_email_respects_preferences(service, car, make_user, email_outbox):
    user = make_user(email_preferences={"enabled": True, "booking": False})
    service.create_booking(car.id, None, day(1), day(3), Actor(user.id, ActorRole.USER))
    assert user.email not in email_outbox.recipients()


def test_email_failure_does_not_undo_booking(db, service, car, user_actor, email_outbox):
    email_outbox.fail = True
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor)
    assert db.get(Booking, booking.id) is not None


def test_update_is_admin_only(service, car, user_actor):
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor)
    with pytest.raises(ForbiddenError):
        service.update_booking(booking.id, {"comments": "changed"}, user_actor)


def test_update_rechecks_availability_excluding_itself(service, car, user_actor, admin_actor):
    first = service.create_booking(car.id, None, day(1), day(3), user_actor)
    service.create_booking(car.id, None, day(6), day(8), user_actor)

    moved = service.update_booking(first.id, {"booking_from": day(2), "booking_to": day(4)}, admin_actor)
    assert moved.booking_to == day(4)

    with pytest.raises(ConflictError):
        service.update_booking(first.id, {"booking_to": day(7)}, admin_actor)


def test_update_rejects_unknown_fields(service, car, user_actor, admin_actor):
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor)
    with pytest.raises(ValidationError):
        service.update_booking(booking.id, {"user_id": "someone"}, admin_actor)


def test_status_change_records_actor(service, car, user_actor, admin_actor):
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor)
    updated = service.update_status(booking.id, BookingStatus.REJECTED, admin_actor)

    assert updated.status == BookingStatus.REJECTED
    assert updated.accepted_by == admin_actor.id
    assert updated.accepted_by_role == "admin"
    assert updated.status_changed_at is not None

    with pytest.raises(ForbiddenError):
        service.update_status(booking.id, BookingStatus.ACCEPTED, user_actor)


def test_reaccepting_into_taken_range_conflicts(service, car, user, user_actor, admin_actor):
    rejected = service.create_booking(car.id, user.id, day(1), day(3), admin_actor, status=BookingStatus.REJECTED)
    service.create_booking(car.id, None, day(2), day(4), user_actor)

    with pytest.raises(ConflictError):
        service.update_status(rejected.id, BookingStatus.ACCEPTED, admin_actor)


def test_accepted_bookings_never_overlap(db, service, car, user_actor):
    attempts = [(1, 4), (3, 6), (5, 7), (8, 9), (0, 1), (9, 12)]
    for start, end in attempts:
        try:
            service.create_booking(car.id, None, day(start), day(end), user_actor)
        except ConflictError:
            pass

    accepted = AvailabilityService(db).list_car_bookings(car.id)
    for i, a in enumerate(accepted):
        for b in accepted[i + 1:]:
            assert not (a.booking_from <= b.booking_to and a.booking_to >= b.booking_from)


def test_delete_by_owner_or_admin_only(db, service, car, user_actor, admin_actor, make_user):
    booking = service.create_booking(car.id, None, day(1), day(3), user_actor)
    stranger = make_user()

    with pytest.raises(ForbiddenError):
        service.delete_booking(booking.id, Actor(stranger.id, ActorRole.USER))

    service.delete_booking(booking.id, user_actor)
    assert db.get(Booking, booking.id) is None

    other = service.create_booking(car.id, None, day(1), day(3), user_actor)
    service.delete_booking(other.id, admin_actor)
    with pytest.raises(NotFoundError):
        service.get_booking(other.id, admin_actor)


def test_list_bookings_scopes_to_owner(service, car, user_actor, admin_actor, make_user):
    service.create_booking(car.id, None, day(1), day(2), user_actor)
    other = make_user()
    service.create_booking(car.id, None, day(5), day(6), Actor(other.id, ActorRole.USER))

    assert len(service.list_bookings(user_actor)) == 1
    assert len(service.list_bookings(admin_actor)) == 2
