"""Per-day mood statistics: latest-day average, calendar map and chart series.

Days are local calendar days, computed with the local time zone at read
time. Averages are snapped back to the nearest mood category because the
display always shows one discrete mood.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable

from moods import MoodConfig, get_mood_config, list_moods
from nuances import NuanceKey, nuance_polarity


@dataclass
class DailyAverage:
    date: date
    date_label: str
    average_score: float
    count: int
    mood: MoodConfig


@dataclass
class DaySummary:
    date: date
    count: int
    average_score: float
    mood: MoodConfig


@dataclass
class TimelinePoint:
    timestamp: int
    time_label: str
    date_label: str
    score: float
    emoji: str
    nuances: dict[str, int] = field(default_factory=dict)


def local_day(timestamp_ms: int) -> date:
    """Local calendar date of an epoch-ms timestamp."""
    return datetime.fromtimestamp(timestamp_ms / 1000).date()


def day_key(day: date) -> str:
    return day.isoformat()


def nearest_mood(score: float) -> MoodConfig:
    """Mood whose score is closest to score.

    On a tie the mood that comes first in registry order wins: a later
    mood only replaces the current pick when it is strictly closer.
    """
    moods = list_moods()
    best = moods[0]
    for candidate in moods[1:]:
        if abs(candidate.score - score) < abs(best.score - score):
            best = candidate
    return best


def _mean_score(entries: list) -> float:
    return sum(get_mood_config(e.mood).score for e in entries) / len(entries)


def latest_day_average(entries: Iterable) -> DailyAverage | None:
    """Average mood of the day of the newest entry.

    Args:
        entries: Entries in newest-first order.

    Returns:
        DailyAverage for that day, or None if there are no entries.
    """
    entries = list(entries)
    if not entries:
        return None

    latest_day = local_day(entries[0].timestamp)
    same_day = [e for e in entries if local_day(e.timestamp) == latest_day]
    average = _mean_score(same_day)

    return DailyAverage(
        date=latest_day,
        date_label=latest_day.isoformat(),
        average_score=average,
        count=len(same_day),
        mood=nearest_mood(average),
    )


def per_day_summary(entries: Iterable) -> dict[str, DaySummary]:
    """Group entries by local day; only days with entries are present."""
    buckets: dict[date, list] = {}
    for e in entries:
        buckets.setdefault(local_day(e.timestamp), []).append(e)

    summary = {}
    for day, day_entries in buckets.items():
        average = _mean_score(day_entries)
        summary[day_key(day)] = DaySummary(
            date=day,
            count=len(day_entries),
            average_score=average,
            mood=nearest_mood(average),
        )
    return summary


def per_day_mood_map(entries: Iterable) -> dict[str, str]:
    """Day key ('YYYY-MM-DD') -> glyph of the day's nearest mood."""
    return {key: s.mood.emoji for key, s in per_day_summary(entries).items()}


def month_calendar(entries: Iterable, year: int, month: int) -> list[list[tuple[int, str | None] | None]]:
    """Sunday-first weeks for one month.

    Each cell is (day, glyph or None), or None for padding outside the month.
    """
    mood_map = per_day_mood_map(entries)
    weeks = []
    for week in calendar.Calendar(firstweekday=6).monthdayscalendar(year, month):
        row = []
        for day in week:
            if day == 0:
                row.append(None)
            else:
                row.append((day, mood_map.get(day_key(date(year, month, day)))))
        weeks.append(row)
    return weeks


def overall_average(entries: Iterable) -> float:
    """Mean score over all entries, 0.0 when empty."""
    entries = list(entries)
    if not entries:
        return 0.0
    return _mean_score(entries)


def mood_timeline(entries: Iterable) -> list[TimelinePoint]:
    """Chart series, oldest first, with every nuance scale as -1/0/1."""
    points = []
    for e in reversed(list(entries)):
        dt = datetime.fromtimestamp(e.timestamp / 1000)
        config = get_mood_config(e.mood)
        points.append(TimelinePoint(
            timestamp=e.timestamp,
            time_label=dt.strftime("%H:%M"),
            date_label=f"{dt.month}/{dt.day}",
            score=config.score,
            emoji=config.emoji,
            nuances={key.value: nuance_polarity(key, e.nuances.get(key.value)) for key in NuanceKey},
        ))
    return points
