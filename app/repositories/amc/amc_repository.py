"""AMC repository."""

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError
from app.models.amc import AMC, AMCInstallment
from app.repositories.base.base_repository import BaseRepository


class AMCRepository(BaseRepository[AMC]):
    """Repository for AMC records and their installments."""

    def __init__(self, db: Session):
        super().__init__(AMC, db)

    def find_all_with_installments(self) -> List[AMC]:
        stmt = select(AMC).options(selectinload(AMC.installments)).order_by(AMC.created_at)
        return self._all(stmt)

    def find_with_unpaid_due_before(self, cutoff: datetime) -> List[AMC]:
        """AMCs having at least one unpaid installment due before ``cutoff``."""
        stmt = (
            select(AMC)
            .where(
                AMC.installments.any(
                    (AMCInstallment.paid.is_(False))
                    & (AMCInstallment.due_date.is_not(None))
                    & (AMCInstallment.due_date < cutoff)
                )
            )
            .options(selectinload(AMC.installments))
            .order_by(AMC.created_at)
        )
        return self._all(stmt)

    def find_with_unpaid_due_between(self, after: datetime, until: datetime) -> List[AMC]:
        """AMCs having an unpaid installment with ``after < due_date <= until``."""
        stmt = (
            select(AMC)
            .where(
                AMC.installments.any(
                    (AMCInstallment.paid.is_(False))
                    & (AMCInstallment.due_date > after)
                    & (AMCInstallment.due_date <= until)
                )
            )
            .options(selectinload(AMC.installments))
            .order_by(AMC.created_at)
        )
        return self._all(stmt)

    def get_installment(self, amc: AMC, position: int) -> AMCInstallment:
        for installment in amc.installments:
            if installment.position == position:
                return installment
        raise NotFoundError("AMC installment", f"{amc.id}/{position}")
