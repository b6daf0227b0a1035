"""Admin repository."""

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.admin import Admin
from app.repositories.base.base_repository import BaseRepository


class AdminRepository(BaseRepository[Admin]):

    def __init__(self, db: Session):
        super().__init__(Admin, db)

    def find_active(self) -> List[Admin]:
        """All active admins and superadmins."""
        stmt = select(Admin).where(Admin.is_active.is_(True)).order_by(Admin.created_at)
        return self._all(stmt)
