"""Pattern report: mood frequency ranking, notes grouped by mood, and AI analysis.

The AI analysis goes through a PatternAnalyzer. The builder owns every
policy around that call: the minimum-entries short-circuit, canned
fallbacks, caching per store revision, and coalescing concurrent requests.
"""

import asyncio
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Protocol

import config
from _util import percent
from analysis_cache import AnalysisCache, CacheState
from moods import MoodConfig, MoodType, get_mood_config, list_moods
from nuances import NuanceKey


@dataclass
class MoodFrequency:
    mood: MoodConfig
    count: int
    percent: int


@dataclass
class MoodNotes:
    mood: MoodConfig
    notes: list[str]


@dataclass(frozen=True)
class Pattern:
    situation: str
    mood_emoji: str
    description: str


@dataclass(frozen=True)
class PatternAnalysis:
    summary: str
    patterns: tuple[Pattern, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "patterns": [
                {"situation": p.situation, "moodEmoji": p.mood_emoji, "description": p.description}
                for p in self.patterns
            ],
        }


@dataclass
class PatternReport:
    ranking: list[MoodFrequency]
    notes_by_mood: list[MoodNotes]
    analysis: PatternAnalysis | None
    analysis_state: CacheState


INSUFFICIENT_DATA = PatternAnalysis(
    summary="기록이 조금 더 쌓이면 당신만의 특별한 마음 패턴을 발견해드릴 수 있어요.",
)
ANALYSIS_FAILED = PatternAnalysis(
    summary="패턴을 분석하는 중에 잠시 오류가 발생했어요.",
)


class PatternAnalyzer(Protocol):
    """External pattern analysis service."""

    async def analyze(self, records: list[dict[str, Any]]) -> dict[str, Any]:
        """Analyze entry records.

        Args:
            records: Newest-first list of {glyph, label, nuance_labels, note}.

        Returns:
            {"summary": str, "patterns": [{"situation", "moodEmoji", "description"}]}
        """
        ...


def _registry_index() -> dict[MoodType, int]:
    return {mood.type: i for i, mood in enumerate(list_moods())}


def frequency_ranking(entries: Iterable) -> list[MoodFrequency]:
    """Moods by how often they were recorded, most frequent first.

    Ties keep registry order. Moods never recorded are left out.
    """
    entries = list(entries)
    counts: dict[MoodType, int] = {}
    for e in entries:
        counts[e.mood] = counts.get(e.mood, 0) + 1

    order = _registry_index()
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], order[kv[0]]))
    return [
        MoodFrequency(mood=get_mood_config(mood), count=count, percent=percent(count, len(entries)))
        for mood, count in ranked
    ]


def notes_by_mood(entries: Iterable, max_per_group: int | None = None) -> list[MoodNotes]:
    """Most recent non-empty notes for each mood.

    Args:
        entries: Entries in newest-first order.
        max_per_group: Notes kept per mood. Defaults to config.NOTES_PER_MOOD.

    Returns:
        Groups ordered by note count, largest first; ties keep registry order.
    """
    limit = config.NOTES_PER_MOOD if max_per_group is None else max_per_group
    groups: dict[MoodType, list[str]] = {}
    for e in entries:
        note = (e.note or "").strip()
        if not note:
            continue
        notes = groups.setdefault(e.mood, [])
        if len(notes) < limit:
            notes.append(note)

    order = _registry_index()
    ranked = sorted(
        ((mood, notes) for mood, notes in groups.items() if notes),
        key=lambda kv: (-len(kv[1]), order[kv[0]]),
    )
    return [MoodNotes(mood=get_mood_config(mood), notes=notes) for mood, notes in ranked]


def analysis_records(entries: Iterable) -> list[dict[str, Any]]:
    """Entries in the shape sent to the analyzer, newest first."""
    records = []
    for e in entries:
        mood = get_mood_config(e.mood)
        nuance_labels = [e.nuances[key.value] for key in NuanceKey if key.value in (e.nuances or {})]
        records.append({
            "glyph": mood.emoji,
            "label": mood.label,
            "nuance_labels": nuance_labels,
            "note": e.note or "",
        })
    return records


def parse_analysis(raw: Any) -> PatternAnalysis:
    """Validate an analyzer response.

    Raises:
        ValueError: If the response does not have the expected shape.
    """
    if not isinstance(raw, dict):
        raise ValueError(f"Analysis must be an object, got {type(raw).__name__}")
    summary = raw.get("summary")
    if not isinstance(summary, str):
        raise ValueError("Analysis summary must be a string")
    items = raw.get("patterns", [])
    if not isinstance(items, list):
        raise ValueError("Analysis patterns must be a list")

    patterns = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError("Each pattern must be an object")
        emoji = item.get("moodEmoji", item.get("mood_emoji"))
        fields = (item.get("situation"), emoji, item.get("description"))
        if not all(isinstance(f, str) for f in fields):
            raise ValueError(f"Pattern is missing fields: {item!r}")
        patterns.append(Pattern(situation=fields[0], mood_emoji=fields[1], description=fields[2]))

    return PatternAnalysis(summary=summary, patterns=tuple(patterns))


class PatternReportBuilder:
    """Builds pattern reports from an entry store."""

    def __init__(self, store, analyzer: PatternAnalyzer, min_entries: int | None = None):
        """Initialize builder.

        Args:
            store: EntryStore to read from. Its mutations invalidate the cache.
            analyzer: PatternAnalyzer used for AI analysis.
            min_entries: Fewest entries worth analyzing. Defaults to
                config.MIN_ENTRIES_FOR_ANALYSIS.
        """
        self.store = store
        self.analyzer = analyzer
        self.min_entries = config.MIN_ENTRIES_FOR_ANALYSIS if min_entries is None else min_entries
        self.cache = AnalysisCache()
        store.subscribe(self.cache.invalidate)

    def frequency_ranking(self) -> list[MoodFrequency]:
        return frequency_ranking(self.store.entries)

    def notes_by_mood(self, max_per_group: int | None = None) -> list[MoodNotes]:
        return notes_by_mood(self.store.entries, max_per_group)

    def report(self) -> PatternReport:
        """Current ranking and notes, plus the cached analysis if any."""
        return PatternReport(
            ranking=self.frequency_ranking(),
            notes_by_mood=self.notes_by_mood(),
            analysis=self.cache.cached_for(self.store.revision),
            analysis_state=self.cache.state,
        )

    async def request_analysis(self) -> PatternAnalysis:
        """Get the pattern analysis for the current entries.

        Never raises for analyzer failures; a canned result is returned
        instead. Concurrent calls for the same entries share one request.
        """
        revision = self.store.revision

        cached = self.cache.cached_for(revision)
        if cached is not None:
            return cached

        pending = self.cache.pending_for(revision)
        if pending is not None:
            return await asyncio.shield(pending)

        entries = self.store.entries
        if len(entries) < self.min_entries:
            self.cache.settle(revision, INSUFFICIENT_DATA)
            return INSUFFICIENT_DATA

        task = asyncio.ensure_future(self._load(revision, entries))
        self.cache.begin(revision, task)
        return await asyncio.shield(task)

    async def _load(self, revision: int, entries) -> PatternAnalysis:
        failed = False
        try:
            raw = await self.analyzer.analyze(analysis_records(entries))
            result = parse_analysis(raw)
        except asyncio.CancelledError:
            if self.cache.pending is asyncio.current_task():
                self.cache.invalidate()
            raise
        except Exception as e:
            print(f"Pattern analysis error: {e}", file=sys.stderr)
            result = ANALYSIS_FAILED
            failed = True

        if not self.cache.finish(revision, result, failed):
            print("Entries changed during analysis; result not cached", file=sys.stderr)
        return result
