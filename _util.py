"""Shared low-level helpers used by the statistics modules."""

import math


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; display percentages round .5 up.
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    """Whole-number percentage of part in whole. 0 when whole is 0."""
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)
