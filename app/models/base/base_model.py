"""
Declarative base and abstract model classes.

Every table has a string UUID primary key. Timestamps are naive UTC.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Type
from uuid import uuid4

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from app.utils.datetime_utils import utcnow


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    return str(uuid4())


def enum_type(enum_cls: Type[PyEnum], length: int = 32) -> Enum:
    """String column constrained to the values of ``enum_cls``."""
    return Enum(
        enum_cls,
        values_callable=lambda members: [member.value for member in members],
        native_enum=False,
        length=length,
        validate_strings=True,
    )


class BaseModel(Base):
    __abstract__ = True

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class TimestampModel(BaseModel):
    """Adds ``created_at`` and ``updated_at`` maintained on insert and update."""

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
