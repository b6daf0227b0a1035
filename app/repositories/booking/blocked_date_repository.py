"""Blocked date repository."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.booking import BlockedDate
from app.repositories.base.base_repository import BaseRepository
from app.services.booking.overlap import overlap_clause


class BlockedDateRepository(BaseRepository[BlockedDate]):
    """Repository for blocked date windows. Inactive rows are history only."""

    def __init__(self, db: Session):
        super().__init__(BlockedDate, db)

    def find_conflicting(
        self,
        car_id: str,
        start: datetime,
        end: datetime,
        exclude_block_id: Optional[str] = None,
    ) -> List[BlockedDate]:
        """Active blocks for ``car_id`` overlapping ``[start, end]``."""
        stmt = select(BlockedDate).where(
            BlockedDate.car_id == car_id,
            BlockedDate.is_active.is_(True),
            overlap_clause(BlockedDate.blocked_from, BlockedDate.blocked_to, start, end),
        )
        if exclude_block_id:
            stmt = stmt.where(BlockedDate.id != exclude_block_id)
        return self._all(stmt.order_by(BlockedDate.blocked_from))

    def find_active(self, car_id: Optional[str] = None) -> List[BlockedDate]:
        stmt = select(BlockedDate).where(BlockedDate.is_active.is_(True))
        if car_id:
            stmt = stmt.where(BlockedDate.car_id == car_id)
        return self._all(stmt.order_by(BlockedDate.blocked_from))
