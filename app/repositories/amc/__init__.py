"""AMC repositories."""

from app.repositories.amc.amc_repository import AMCRepository

__all__ = ["AMCRepository"]
