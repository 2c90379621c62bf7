"""Date-range selection over entries.

Both the bulk-delete preview count and the bulk delete itself go through
in_range(), so the two can never disagree.
"""

from datetime import date, datetime, time
from typing import Iterable


def parse_day(value: date | datetime | str | None) -> date | None:
    """Normalize a day bound.

    Args:
        value: date, datetime, 'YYYY-MM-DD' string, or None/'' for unset.

    Returns:
        The calendar date, or None if unset.

    Raises:
        ValueError: If a string is not a valid ISO date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD") from None


def start_of_day(day: date) -> int:
    """Epoch ms at local 00:00:00.000 of day."""
    return int(datetime.combine(day, time.min).timestamp()) * 1000


def end_of_day(day: date) -> int:
    """Epoch ms at local 23:59:59.999 of day."""
    return int(datetime.combine(day, time(23, 59, 59)).timestamp()) * 1000 + 999


def day_bounds(start_day, end_day) -> tuple[int, int] | None:
    """(start ms, end ms) for an inclusive day range, or None if a bound is unset."""
    start = parse_day(start_day)
    end = parse_day(end_day)
    if start is None or end is None:
        return None
    return start_of_day(start), end_of_day(end)


def in_range(entry, start_ms: int, end_ms: int) -> bool:
    return start_ms <= entry.timestamp <= end_ms


def select_in_range(entries: Iterable, start_day, end_day) -> list:
    """Entries whose timestamp falls within the inclusive day range."""
    bounds = day_bounds(start_day, end_day)
    if bounds is None:
        return []
    start_ms, end_ms = bounds
    return [e for e in entries if in_range(e, start_ms, end_ms)]


def count_in_range(entries: Iterable, start_day, end_day) -> int:
    """Number of entries a bulk delete over this range would remove."""
    return len(select_in_range(entries, start_day, end_day))
