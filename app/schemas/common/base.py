"""
Shared pydantic configuration for request and response bodies.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

__all__ = [
    "BaseSchema",
    "BaseDBSchema",
]


class BaseSchema(BaseModel):
    """Accepts camelCase aliases or field names; reads ORM objects and dataclasses."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BaseDBSchema(BaseSchema):
    id: str
    created_at: datetime
    updated_at: datetime
