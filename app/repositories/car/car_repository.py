"""
Car repository.

Token pool counters are mutated only through single-statement conditional
UPDATEs so concurrent purchases can never drive a pool below zero or above
its maximum.
"""

from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models.base.enums import InventoryResource
from app.models.car import Car
from app.repositories.base.base_repository import BaseRepository

POOL_COLUMNS = {
    InventoryResource.WAITLIST_TOKEN: "waitlist_tokens_available",
    InventoryResource.BOOK_NOW_TOKEN: "book_now_tokens_available",
}


class CarRepository(BaseRepository[Car]):
    """Repository for cars and their token pools."""

    def __init__(self, db: Session):
        super().__init__(Car, db)

    @staticmethod
    def pool_column(resource: InventoryResource):
        return getattr(Car, POOL_COLUMNS[InventoryResource(resource)])

    def atomic_decrement(self, car_id: str, resource: InventoryResource) -> bool:
        """
        Decrement a pool by one if it is above zero.

        Returns:
            True if a row was updated, False if the pool was already empty
            or the car does not exist
        """
        column = self.pool_column(resource)
        result = self.db.execute(
            update(Car)
            .where(Car.id == car_id, column > 0)
            .values({column: column - 1})
            .execution_options(synchronize_session=False)
        )
        self._expire(car_id)
        return result.rowcount == 1

    def atomic_increment(self, car_id: str, resource: InventoryResource, maximum: int) -> bool:
        """Increment a pool by one if it is below ``maximum``."""
        column = self.pool_column(resource)
        result = self.db.execute(
            update(Car)
            .where(Car.id == car_id, column < maximum)
            .values({column: column + 1})
            .execution_options(synchronize_session=False)
        )
        self._expire(car_id)
        return result.rowcount == 1

    def force_stop_bookings_if_exhausted(self, car_id: str) -> bool:
        """Set ``stop_bookings`` when both pools are empty. Returns True if changed."""
        result = self.db.execute(
            update(Car)
            .where(
                Car.id == car_id,
                Car.stop_bookings.is_(False),
                Car.waitlist_tokens_available == 0,
                Car.book_now_tokens_available == 0,
            )
            .values(stop_bookings=True)
            .execution_options(synchronize_session=False)
        )
        self._expire(car_id)
        return result.rowcount == 1

    def find_exhausted_open_cars(self) -> List[Car]:
        """Cars still accepting bookings although both pools are empty."""
        stmt = select(Car).where(
            Car.stop_bookings.is_(False),
            Car.waitlist_tokens_available == 0,
            Car.book_now_tokens_available == 0,
        )
        return self._all(stmt)

    def _expire(self, car_id: str) -> None:
        car = self.db.identity_map.get(self.db.identity_key(Car, car_id)) if car_id else None
        if car is not None:
            self.db.expire(car)
