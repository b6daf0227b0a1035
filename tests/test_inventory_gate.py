import pytest

from app.core.exceptions import ExhaustedError, ForbiddenError, NotFoundError, PolicyError, ValidationError
from app.core.permissions import Actor
from app.models.base.enums import ActorRole, InventoryResource, TokenStatus
from app.models.car import Car
from app.services.inventory.inventory_gate import InventoryGate
from app.services.inventory.token_service import TokenService

WAITLIST = InventoryResource.WAITLIST_TOKEN
BOOK_NOW = InventoryResource.BOOK_NOW_TOKEN


@pytest.fixture
def gate(db):
    return InventoryGate(db)


def test_decrement_takes_one_unit(gate, car):
    updated = gate.decrement(car.id, WAITLIST)
    assert updated.waitlist_tokens_available == 19
    assert updated.book_now_tokens_available == 12


def test_decrement_at_zero_is_exhausted_and_never_negative(db, gate, make_car):
    car = make_car(waitlist_tokens_available=1)
    gate.decrement(car.id, WAITLIST)

    with pytest.raises(ExhaustedError):
        gate.decrement(car.id, WAITLIST)
    db.refresh(car)
    assert car.waitlist_tokens_available == 0


def test_decrement_unknown_car(gate):
    with pytest.raises(NotFoundError):
        gate.decrement("missing", BOOK_NOW)


def test_increment_is_clamped_at_maximum(db, gate, make_car):
    car = make_car(book_now_tokens_available=11)
    assert gate.increment(car.id, BOOK_NOW) is True
    assert gate.increment(car.id, BOOK_NOW) is False
    db.refresh(car)
    assert car.book_now_tokens_available == 12


def test_exhausting_both_pools_stops_bookings(db, gate, make_car):
    car = make_car(waitlist_tokens_available=0, book_now_tokens_available=1)
    gate.decrement(car.id, BOOK_NOW)
    db.refresh(car)
    assert car.stop_bookings is True


def test_refilling_does_not_reopen_bookings_until_admin_does(db, gate, make_car, admin_actor):
    car = make_car(waitlist_tokens_available=0, book_now_tokens_available=0, stop_bookings=True)
    with pytest.raises(PolicyError):
        gate.set_stop_bookings(car.id, False, admin_actor)

    gate.increment(car.id, WAITLIST)
    db.refresh(car)
    assert car.stop_bookings is True

    assert gate.set_stop_bookings(car.id, False, admin_actor).stop_bookings is False
    db.refresh(car)
    assert car.stop_bookings is False
    assert car.waitlist_tokens_available == 1


def test_manual_reopen_refused_while_exhausted(gate, make_car, admin_actor):
    car = make_car(waitlist_tokens_available=0, book_now_tokens_available=0, stop_bookings=True)
    with pytest.raises(PolicyError):
        gate.set_stop_bookings(car.id, False, admin_actor)


def test_manual_stop_and_reopen(gate, car, admin_actor, user_actor):
    assert gate.set_stop_bookings(car.id, True, admin_actor).stop_bookings is True
    assert gate.set_stop_bookings(car.id, False, admin_actor).stop_bookings is False
    with pytest.raises(ForbiddenError):
        gate.set_stop_bookings(car.id, True, user_actor)


def test_update_inventory_validates_ranges(gate, car, admin_actor):
    with pytest.raises(ValidationError):
        gate.update_inventory(car.id, admin_actor, waitlist_tokens=21)
    with pytest.raises(ValidationError):
        gate.update_inventory(car.id, admin_actor, book_now_tokens=-1)


def test_update_inventory_to_zero_forces_stop(gate, car, admin_actor):
    updated = gate.update_inventory(car.id, admin_actor, waitlist_tokens=0, book_now_tokens=0)
    assert updated.stop_bookings is True

    with pytest.raises(PolicyError):
        gate.update_inventory(car.id, admin_actor, stop_bookings=False)


def test_reconcile_stops_exhausted_open_cars(db, gate, make_car):
    stale = make_car(waitlist_tokens_available=0, book_now_tokens_available=0, stop_bookings=False)
    open_car = make_car(name="Open", waitlist_tokens_available=3)

    report = gate.reconcile_all()

    assert report.to_dict() == {"total_checked": 1, "bookings_stopped": 1, "cars_updated": 1}
    assert db.get(Car, stale.id).stop_bookings is True
    assert db.get(Car, open_car.id).stop_bookings is False
    assert gate.reconcile_all().total_checked == 0


def test_purchase_and_drop_token_round_trip(db, car, user, user_actor):
    tokens = TokenService(db)
    token = tokens.purchase_token(car.id, user.id, BOOK_NOW)
    db.refresh(car)
    assert token.status == TokenStatus.ACTIVE
    assert car.book_now_tokens_available == 11

    dropped = tokens.drop_token(token.id, user_actor)
    db.refresh(car)
    assert dropped.status == TokenStatus.DROPPED
    assert dropped.dropped_at is not None
    assert car.book_now_tokens_available == 12

    with pytest.raises(ValidationError):
        tokens.drop_token(token.id, user_actor)


def test_purchase_from_empty_pool(db, make_car, user):
    car = make_car(waitlist_tokens_available=0)
    with pytest.raises(ExhaustedError):
        TokenService(db).purchase_token(car.id, user.id, WAITLIST)


def test_only_owner_or_admin_drops(db, car, user, make_user, admin_actor):
    tokens = TokenService(db)
    token = tokens.purchase_token(car.id, user.id, WAITLIST)
    stranger = make_user()

    with pytest.raises(ForbiddenError):
        tokens.drop_token(token.id, Actor(stranger.id, ActorRole.USER))
    assert tokens.drop_token(token.id, admin_actor).status == TokenStatus.DROPPED
