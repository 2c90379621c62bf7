"""Shared fixtures for mood-diary tests."""

from datetime import datetime

import pytest


def _ms(year, month, day, hour=12, minute=0, second=0):
    """Epoch ms for a local wall-clock time."""
    return int(datetime(year, month, day, hour, minute, second).timestamp()) * 1000


@pytest.fixture
def ms():
    return _ms


@pytest.fixture
def make_entry():
    """Factory for MoodEntry objects at a local date/time."""
    from entry_store import MoodEntry
    from moods import parse_mood

    counter = iter(range(1, 10_000))

    def _make(mood, when, note="", nuances=None, entry_id=None):
        timestamp = _ms(*when) if isinstance(when, tuple) else when
        return MoodEntry(
            id=entry_id or f"e{next(counter)}",
            timestamp=timestamp,
            mood=parse_mood(mood),
            note=note,
            nuances=dict(nuances or {}),
        )

    return _make


@pytest.fixture
def memory_storage():
    from storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture
def clock():
    """Settable clock for EntryStore; call clock.set(ms) to move time."""
    class Clock:
        def __init__(self):
            self.now = _ms(2026, 3, 14, 9, 0)

        def set(self, value):
            self.now = value

        def __call__(self):
            value = self.now
            self.now += 1000
            return value

    return Clock()


@pytest.fixture
def store(memory_storage, clock):
    from entry_store import EntryStore
    s = EntryStore(memory_storage, clock=clock)
    s.load()
    return s
