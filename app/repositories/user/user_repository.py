"""User repository."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.base.enums import KYCStatus, UserStatus
from app.models.user import User
from app.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for end-user accounts."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.scalar(select(User).where(User.email == email.strip().lower()))

    def find_kyc_pending_active(self, registered_before: Optional[datetime] = None) -> List[User]:
        """Active users with pending KYC, optionally registered strictly before a cutoff."""
        stmt = select(User).where(
            User.kyc_status == KYCStatus.PENDING,
            User.status == UserStatus.ACTIVE,
        )
        if registered_before is not None:
            stmt = stmt.where(User.created_at < registered_before)
        stmt = stmt.order_by(User.created_at)
        return self._all(stmt)

    def find_expired_suspensions(self, now: datetime) -> List[User]:
        stmt = select(User).where(
            User.status == UserStatus.SUSPENDED,
            User.suspension_end_date.is_not(None),
            User.suspension_end_date <= now,
        )
        return self._all(stmt)
