"""Mood categories: score, glyph and label for each selectable mood."""

from dataclasses import dataclass
from enum import Enum


class MoodType(Enum):
    """Selectable moods, most positive first."""
    EXCITED = "EXCITED"
    FUN = "FUN"
    HAPPY = "HAPPY"
    NORMAL = "NORMAL"
    NEUTRAL = "NEUTRAL"
    UNHAPPY = "UNHAPPY"
    ANXIOUS = "ANXIOUS"
    SAD = "SAD"


@dataclass(frozen=True)
class MoodConfig:
    type: MoodType
    emoji: str
    label: str
    color: str
    score: float


# Registry order is the tie-break order for every nearest-mood lookup.
MOOD_CONFIGS: dict[MoodType, MoodConfig] = {
    MoodType.EXCITED: MoodConfig(MoodType.EXCITED, "🤩", "최고예요", "yellow", 5.0),
    MoodType.FUN: MoodConfig(MoodType.FUN, "😆", "즐거워요", "orange", 4.5),
    MoodType.HAPPY: MoodConfig(MoodType.HAPPY, "😊", "좋아요", "green", 4.0),
    MoodType.NORMAL: MoodConfig(MoodType.NORMAL, "🙂", "보통이에요", "teal", 3.0),
    MoodType.NEUTRAL: MoodConfig(MoodType.NEUTRAL, "😐", "그저 그래요", "blue", 2.5),
    MoodType.UNHAPPY: MoodConfig(MoodType.UNHAPPY, "☹", "침울해요", "gray", 2.0),
    MoodType.ANXIOUS: MoodConfig(MoodType.ANXIOUS, "😰", "불안해요", "orange", 1.5),
    MoodType.SAD: MoodConfig(MoodType.SAD, "😢", "슬퍼요", "indigo", 1.0),
}

if set(MOOD_CONFIGS) != set(MoodType):
    raise RuntimeError("MOOD_CONFIGS must define every MoodType")
if len({c.score for c in MOOD_CONFIGS.values()}) != len(MOOD_CONFIGS):
    raise RuntimeError("MOOD_CONFIGS scores must be unique")


def parse_mood(value: MoodType | str) -> MoodType:
    """Normalize a mood id or enum member to MoodType.

    Raises:
        ValueError: If value is not a known mood id.
    """
    if isinstance(value, MoodType):
        return value
    try:
        return MoodType(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Unknown mood: {value}") from None


def get_mood_config(mood: MoodType | str) -> MoodConfig:
    """Look up the config for a mood."""
    return MOOD_CONFIGS[parse_mood(mood)]


def list_moods() -> list[MoodConfig]:
    """All mood configs in registry order."""
    return list(MOOD_CONFIGS.values())
