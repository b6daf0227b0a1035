"""AMC models."""

from app.models.amc.amc import AMC, AMCInstallment

__all__ = ["AMC", "AMCInstallment"]
