"""
Column mixins shared by account and fleet models.
"""

import re
from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, validates

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")


class AuditMixin:
    """Back-office account (admin or superadmin) that created the row."""

    created_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    created_by_role: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)


class ContactMixin:
    """Unique, lower-cased email plus an optional phone number."""

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    @validates("email")
    def _normalize_email(self, key: str, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip().lower()
        if not _EMAIL_RE.match(value):
            raise ValueError(f"Invalid email format: {value}")
        return value
