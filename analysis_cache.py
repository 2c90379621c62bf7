"""State machine for the cached pattern analysis."""

import asyncio
from enum import Enum, auto
from typing import Any


class CacheState(Enum):
    """Analysis cache states."""
    STALE = auto()
    LOADING = auto()
    READY = auto()
    ERROR = auto()


class AnalysisCache:
    """Holds the last analysis result for one store revision.

    STALE -> LOADING -> READY
    STALE -> LOADING -> ERROR (a canned result is still held)
    any   -> STALE on invalidate()
    """

    def __init__(self):
        self.state = CacheState.STALE
        self.revision: int | None = None
        self.result: Any = None
        self.pending: asyncio.Future | None = None

    def invalidate(self) -> CacheState:
        """Drop the cached result and any in-flight load."""
        self.state = CacheState.STALE
        self.revision = None
        self.result = None
        self.pending = None
        return self.state

    def cached_for(self, revision: int) -> Any:
        """Cached result for revision, or None if there is none."""
        if self.revision == revision and self.state in (CacheState.READY, CacheState.ERROR):
            return self.result
        return None

    def pending_for(self, revision: int) -> asyncio.Future | None:
        """In-flight load for revision, if any. A cancelled load does not count."""
        if self.revision == revision and self.state == CacheState.LOADING:
            if self.pending is not None and self.pending.cancelled():
                return None
            return self.pending
        return None

    def begin(self, revision: int, pending: asyncio.Future) -> CacheState:
        self.state = CacheState.LOADING
        self.revision = revision
        self.result = None
        self.pending = pending
        return self.state

    def finish(self, revision: int, result: Any, failed: bool = False) -> bool:
        """Store a load's result.

        Returns:
            False if the cache was invalidated or moved on since begin();
            the result is then discarded.
        """
        if self.state != CacheState.LOADING or self.revision != revision:
            return False
        self.state = CacheState.ERROR if failed else CacheState.READY
        self.result = result
        self.pending = None
        return True

    def settle(self, revision: int, result: Any) -> CacheState:
        """Store a result that needed no load."""
        self.state = CacheState.READY
        self.revision = revision
        self.result = result
        self.pending = None
        return self.state
