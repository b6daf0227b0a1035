"""Car and token repositories."""

from app.repositories.car.car_repository import CarRepository
from app.repositories.car.token_repository import TokenRepository

__all__ = ["CarRepository", "TokenRepository"]
