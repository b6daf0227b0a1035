"""
Blocked-date manager.

Maintains maintenance and blackout windows per car. Active blocks of the
same car never overlap one another; deletes are soft so history is kept.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.core.permissions import Actor, require_privileged
from app.models.booking import BlockedDate
from app.repositories.booking import BlockedDateRepository
from app.repositories.car import CarRepository
from app.services.base.base_service import BaseService, track_performance
from app.services.booking.availability_service import AvailabilityResult
from app.services.booking.overlap import validate_range
from app.utils.datetime_utils import to_naive_utc

DEFAULT_REASON = "Maintenance"
BLOCK_OVERLAP_MESSAGE = "Date range overlaps with existing blocked dates"


class BlockedDateService(BaseService[BlockedDate, BlockedDateRepository]):
    """Create, change, soft-delete and query blocked date windows."""

    def __init__(self, db_session: Session):
        super().__init__(BlockedDateRepository(db_session), db_session)
        self.car_repo = CarRepository(db_session)

    @track_performance("create_blocked_date")
    def create_block(
        self,
        car_id: str,
        start: datetime,
        end: datetime,
        actor: Actor,
        reason: Optional[str] = None,
    ) -> BlockedDate:
        """
        Block a car for ``[start, end]``. Admin only.

        Raises:
            ForbiddenError: If the actor is not an admin
            InvalidRangeError: If ``start >= end``
            NotFoundError: If the car does not exist
            ConflictError: If the range overlaps another active block of the car
        """
        require_privileged(actor, "block dates")
        validate_range(start, end)
        start, end = to_naive_utc(start), to_naive_utc(end)
        car = self.car_repo.get_by_id(car_id)

        with self.transaction():
            self._ensure_no_overlap(car.id, start, end)
            block = self.repository.create(BlockedDate(
                car_id=car.id,
                blocked_from=start,
                blocked_to=end,
                reason=reason or DEFAULT_REASON,
                is_active=True,
                created_by=actor.id,
                created_by_role=actor.role.value,
            ))

        self._log_operation("create blocked date", block.id, {"car_id": car.id})
        return block

    @track_performance("update_blocked_date")
    def update_block(
        self,
        block_id: str,
        actor: Actor,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> BlockedDate:
        """Change the window or reason of an active block. Admin only."""
        require_privileged(actor, "update blocked dates")
        block = self._get_active(block_id)

        new_start = to_naive_utc(start) if start is not None else block.blocked_from
        new_end = to_naive_utc(end) if end is not None else block.blocked_to

        with self.transaction():
            if start is not None or end is not None:
                validate_range(new_start, new_end)
                self._ensure_no_overlap(block.car_id, new_start, new_end, exclude_block_id=block.id)
            changes = {"blocked_from": new_start, "blocked_to": new_end}
            if reason is not None:
                changes["reason"] = reason
            self.repository.update(block, changes)

        self._log_operation("update blocked date", block.id)
        return block

    @track_performance("delete_blocked_date")
    def delete_block(self, block_id: str, actor: Actor) -> BlockedDate:
        """Soft delete: the block stops counting but is kept."""
        require_privileged(actor, "delete blocked dates")
        block = self._get_active(block_id)
        with self.transaction():
            self.repository.update(block, {"is_active": False})
        self._log_operation("delete blocked date", block.id)
        return block

    def list_blocks(self, car_id: Optional[str] = None) -> List[BlockedDate]:
        """Active blocks, optionally for one car, ordered by start."""
        return self.repository.find_active(car_id)

    def check_availability(self, car_id: str, start: datetime, end: datetime) -> AvailabilityResult:
        """Whether ``[start, end]`` is free of active blocks for the car."""
        validate_range(start, end)
        blocks = self.repository.find_conflicting(car_id, to_naive_utc(start), to_naive_utc(end))
        return AvailabilityResult(available=not blocks, conflicting_blocks=blocks)

    def _get_active(self, block_id: str) -> BlockedDate:
        block = self.repository.find_by_id(block_id)
        if block is None or not block.is_active:
            raise NotFoundError("Blocked date", block_id)
        return block

    def _ensure_no_overlap(
        self,
        car_id: str,
        start: datetime,
        end: datetime,
        exclude_block_id: Optional[str] = None,
    ) -> None:
        conflicts = self.repository.find_conflicting(car_id, start, end, exclude_block_id)
        if conflicts:
            raise ConflictError(BLOCK_OVERLAP_MESSAGE, conflicting_block_ids=[b.id for b in conflicts])
