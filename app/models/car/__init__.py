"""Car and token models."""

from app.models.car.car import Car
from app.models.car.token import Token

__all__ = ["Car", "Token"]
