"""
Date and time helpers shared by the availability, penalty and reminder engines.

All persisted datetimes are naive UTC.
"""

import math
from datetime import datetime, timedelta, timezone
from typing import Optional

ONE_DAY = timedelta(days=1)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize an aware datetime to naive UTC; naive values are assumed UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def ceil_days(delta: timedelta) -> int:
    """
    Whole days in a timedelta, rounded up.

    A positive fraction of a day counts as a full day; negative deltas
    round towards zero, so ``ceil_days(-1.5 days) == -1``.
    """
    return math.ceil(delta.total_seconds() / ONE_DAY.total_seconds())


def days_until(target: datetime, now: datetime) -> int:
    """Days remaining until ``target`` (negative once it has passed)."""
    return ceil_days(target - now)


def days_since(origin: datetime, now: datetime) -> int:
    """Days elapsed since ``origin``."""
    return ceil_days(now - origin)
