from datetime import datetime, timedelta

import pytest

from app.core.exceptions import InvalidRangeError
from app.services.booking.overlap import ranges_overlap, validate_range

T0 = datetime(2025, 7, 1)


def at(days):
    return T0 + timedelta(days=days)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((0, 2), (3, 5), False),
        ((0, 3), (3, 5), True),
        ((0, 10), (2, 4), True),
        ((2, 4), (0, 10), True),
        ((1, 4), (3, 6), True),
        ((6, 8), (0, 5), False),
    ],
)
def test_overlap_is_symmetric_and_inclusive(a, b, expected):
    a_start, a_end = at(a[0]), at(a[1])
    b_start, b_end = at(b[0]), at(b[1])
    assert ranges_overlap(a_start, a_end, b_start, b_end) is expected
    assert ranges_overlap(b_start, b_end, a_start, a_end) is expected


def test_validate_range_rejects_empty_and_reversed_ranges():
    with pytest.raises(InvalidRangeError):
        validate_range(at(2), at(2))
    with pytest.raises(InvalidRangeError):
        validate_range(at(3), at(1))
    with pytest.raises(InvalidRangeError):
        validate_range(None, at(1))
    validate_range(at(1), at(2))
