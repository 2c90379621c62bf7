"""Entry store: the newest-first collection of mood entries and its persistence.

The store is the only writer of entries. Every successful mutation writes
the whole snapshot back to storage and then notifies listeners (the
pattern-report cache subscribes here).
"""

import json
import math
import sys
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

import config
from moods import MoodType, parse_mood
from nuances import validate_nuances
from range_select import day_bounds, in_range


@dataclass(frozen=True)
class MoodEntry:
    id: str
    timestamp: int  # epoch ms
    mood: MoodType
    note: str = ""
    nuances: dict[str, str] = field(default_factory=dict)
    image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "mood": self.mood.value,
            "note": self.note,
        }
        if self.nuances:
            data["nuances"] = dict(self.nuances)
        if self.image:
            data["image"] = self.image
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MoodEntry":
        """Build an entry from its stored form.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed,
                including timestamps that are not finite or fall outside the
                range local dates can represent.
        """
        timestamp = data["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise TypeError(f"timestamp must be a number, got {timestamp!r}")
        if not math.isfinite(timestamp):
            raise ValueError(f"timestamp must be finite, got {timestamp!r}")
        try:
            datetime.fromtimestamp(timestamp / 1000)
        except (OverflowError, OSError, ValueError):
            raise ValueError(f"timestamp out of range: {timestamp!r}") from None
        return cls(
            id=str(data["id"]),
            timestamp=int(timestamp),
            mood=parse_mood(data["mood"]),
            note=str(data.get("note") or ""),
            nuances=validate_nuances(data.get("nuances")),
            image=data.get("image") or None,
        )


class EntryStore:
    """Owns the canonical entry collection."""

    def __init__(self, storage, key: str | None = None, clock: Callable[[], int] | None = None):
        """Initialize store.

        Args:
            storage: Object with get(key), set(key, value) and remove(key).
            key: Storage key for the entry document. Defaults to config.ENTRIES_KEY.
            clock: Returns current epoch ms. Defaults to the system clock.
        """
        self.storage = storage
        self.key = key or config.ENTRIES_KEY
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._entries: list[MoodEntry] = []
        self._listeners: list[Callable[[], None]] = []
        self.revision = 0

    @property
    def entries(self) -> tuple[MoodEntry, ...]:
        """Snapshot of all entries, newest first."""
        return tuple(self._entries)

    @property
    def latest(self) -> MoodEntry | None:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: Callable[[], None]) -> None:
        """Call listener after every mutation."""
        self._listeners.append(listener)

    def load(self) -> tuple[MoodEntry, ...]:
        """Load the persisted snapshot. Missing or corrupt data loads as empty."""
        self._entries = self._read()
        self.revision += 1
        self._notify()
        return self.entries

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def _read(self) -> list[MoodEntry]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except json.JSONDecodeError as e:
            print(f"Entry data is corrupt, starting empty: {e}", file=sys.stderr)
            return []
        if not isinstance(records, list):
            print("Entry data is not a list, starting empty", file=sys.stderr)
            return []

        entries = []
        seen: set[str] = set()
        for record in records:
            try:
                entry = MoodEntry.from_dict(record)
            except (KeyError, TypeError, ValueError, OverflowError, AttributeError) as e:
                print(f"Skipping malformed entry {record!r:.80}: {e}", file=sys.stderr)
                continue
            if entry.id in seen:
                print(f"Skipping duplicate entry id {entry.id}", file=sys.stderr)
                continue
            seen.add(entry.id)
            entries.append(entry)
        return entries

    def _commit(self, entries: list[MoodEntry]) -> None:
        """Replace the snapshot, persist it, then notify listeners."""
        payload = json.dumps([e.to_dict() for e in entries], ensure_ascii=False)
        self.storage.set(self.key, payload)
        self._entries = entries
        self.revision += 1
        self._notify()

    def _new_id(self, now: int) -> str:
        entry_id = str(now)
        existing = {e.id for e in self._entries}
        if entry_id in existing:
            entry_id = f"{now}-{uuid.uuid4().hex[:8]}"
        return entry_id

    def create(
        self,
        mood: MoodType | str,
        note: str = "",
        nuances: dict[str, str] | None = None,
        image: str | None = None,
    ) -> MoodEntry:
        """Record a new entry at the current time.

        Args:
            mood: Mood id or MoodType.
            note: Free-text note, may be empty.
            nuances: Optional scale key -> pole label mapping.
            image: Optional opaque image reference.

        Returns:
            The created entry.

        Raises:
            ValueError: If mood or nuances are invalid. Nothing is stored.
        """
        if mood is None or (isinstance(mood, str) and not mood.strip()):
            raise ValueError("A mood must be selected")
        mood_type = parse_mood(mood)
        selected = validate_nuances(nuances)

        now = self._clock()
        entry = MoodEntry(
            id=self._new_id(now),
            timestamp=now,
            mood=mood_type,
            note=note or "",
            nuances=selected,
            image=image or None,
        )
        self._commit([entry] + self._entries)
        return entry

    def delete_by_id(self, entry_id: str) -> bool:
        """Delete one entry. Returns False (and changes nothing) if absent."""
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._commit(remaining)
        return True

    def delete_range(self, start_day, end_day) -> int:
        """Delete all entries within an inclusive local-day range.

        Args:
            start_day: First day (date or 'YYYY-MM-DD'); starts at 00:00:00.000.
            end_day: Last day (date or 'YYYY-MM-DD'); ends at 23:59:59.999.

        Returns:
            Number of entries removed. Zero means nothing was changed.
        """
        bounds = day_bounds(start_day, end_day)
        if bounds is None:
            return 0
        start_ms, end_ms = bounds
        remaining = [e for e in self._entries if not in_range(e, start_ms, end_ms)]
        removed = len(self._entries) - len(remaining)
        if removed == 0:
            return 0
        self._commit(remaining)
        return removed
