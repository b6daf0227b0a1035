import pytest

from app.core.exceptions import ConflictError, ForbiddenError, InvalidRangeError, NotFoundError
from app.models.booking import BlockedDate
from app.services.booking.availability_service import AvailabilityService
from app.services.booking.blocked_date_service import BLOCK_OVERLAP_MESSAGE, BlockedDateService
from tests.conftest import day


@pytest.fixture
def service(db):
    return BlockedDateService(db)


def test_admin_blocks_dates(service, car, admin_actor):
    block = service.create_block(car.id, day(1), day(4), admin_actor, reason="Service")

    assert block.is_active
    assert block.reason == "Service"
    assert block.created_by == admin_actor.id
    assert block.created_by_role == "admin"


def test_reason_defaults_to_maintenance(service, car, admin_actor):
    assert service.create_block(car.id, day(1), day(2), admin_actor).reason == "Maintenance"


def test_users_cannot_block(service, car, user_actor):
    with pytest.raises(ForbiddenError):
        service.create_block(car.id, day(1), day(2), user_actor)


def test_invalid_range_and_missing_car(service, car, admin_actor):
    with pytest.raises(InvalidRangeError):
        service.create_block(car.id, day(2), day(1), admin_actor)
    with pytest.raises(NotFoundError):
        service.create_block("missing", day(1), day(2), admin_actor)


def test_active_blocks_of_a_car_never_overlap(service, car, admin_actor):
    service.create_block(car.id, day(1), day(4), admin_actor)
    with pytest.raises(ConflictError) as exc:
        service.create_block(car.id, day(4), day(6), admin_actor)
    assert exc.value.message == BLOCK_OVERLAP_MESSAGE


def test_soft_deleted_block_frees_the_range(db, service, car, admin_actor):
    block = service.create_block(car.id, day(1), day(4), admin_actor)
    service.delete_block(block.id, admin_actor)

    assert db.get(BlockedDate, block.id).is_active is False
    assert service.create_block(car.id, day(2), day(3), admin_actor).is_active
    assert AvailabilityService(db).is_range_available(car.id, day(0), day(1, 12)).available


def test_inactive_blocks_cannot_be_updated_or_deleted_again(service, car, admin_actor):
    block = service.create_block(car.id, day(1), day(4), admin_actor)
    service.delete_block(block.id, admin_actor)

    with pytest.raises(NotFoundError):
        service.update_block(block.id, admin_actor, reason="again")
    with pytest.raises(NotFoundError):
        service.delete_block(block.id, admin_actor)


def test_update_moves_block_excluding_itself(service, car, admin_actor):
    block = service.create_block(car.id, day(1), day(4), admin_actor)
    service.create_block(car.id, day(10), day(12), admin_actor)

    moved = service.update_block(block.id, admin_actor, start=day(2), end=day(5))
    assert (moved.blocked_from, moved.blocked_to) == (day(2), day(5))

    with pytest.raises(ConflictError):
        service.update_block(block.id, admin_actor, end=day(11))


def test_list_and_check_availability(service, make_car, admin_actor):
    first, second = make_car(), make_car(name="BMW 3")
    service.create_block(first.id, day(5), day(6), admin_actor)
    service.create_block(first.id, day(1), day(2), admin_actor)
    service.create_block(second.id, day(1), day(2), admin_actor)

    listed = service.list_blocks(first.id)
    assert [b.blocked_from for b in listed] == [day(1), day(5)]
    assert len(service.list_blocks()) == 3

    assert not service.check_availability(first.id, day(6), day(7)).available
    assert service.check_availability(first.id, day(3), day(4)).available
