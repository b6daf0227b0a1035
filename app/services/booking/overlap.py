"""
Date-range overlap rule shared by bookings, blocked dates and availability.

Ranges are closed: ``[a_start, a_end]`` and ``[b_start, b_end]`` overlap when
``a_start <= b_end and a_end >= b_start``. Touching endpoints conflict.
"""

from datetime import datetime

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from app.core.exceptions import InvalidRangeError
from app.utils.datetime_utils import to_naive_utc


def validate_range(start: datetime, end: datetime) -> None:
    """Raise ``InvalidRangeError`` unless ``start`` is strictly before ``end``."""
    if start is None or end is None:
        raise InvalidRangeError(start, end, "Both start and end dates are required")
    if to_naive_utc(start) >= to_naive_utc(end):
        raise InvalidRangeError(start, end)


def ranges_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start <= b_end and a_end >= b_start


def overlap_clause(start_col, end_col, start: datetime, end: datetime) -> ColumnElement:
    """The ``ranges_overlap`` rule as a SQL expression over two columns."""
    return and_(start_col <= end, end_col >= start)
