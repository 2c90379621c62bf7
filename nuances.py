"""Nuance scales: bipolar qualitative tags that can be attached to an entry."""

from enum import Enum
from typing import Mapping


class NuanceKey(Enum):
    FEAR_SAFETY = "fear_safety"
    ANXIETY_STABILITY = "anxiety_stability"
    WORRY_CAREFREE = "worry_carefree"
    OMINOUS_GOOD = "ominous_good"
    GUILT_PROUD = "guilt_proud"


# (negative pole, positive pole)
NUANCE_PAIRS: dict[NuanceKey, tuple[str, str]] = {
    NuanceKey.FEAR_SAFETY: ("무섭다", "안전하다"),
    NuanceKey.ANXIETY_STABILITY: ("불안하다", "안정적이다"),
    NuanceKey.WORRY_CAREFREE: ("걱정하다", "태평천하하다"),
    NuanceKey.OMINOUS_GOOD: ("불길하다", "예감이 좋다"),
    NuanceKey.GUILT_PROUD: ("죄책감이 든다", "떳떳당당하다"),
}

if set(NUANCE_PAIRS) != set(NuanceKey):
    raise RuntimeError("NUANCE_PAIRS must define every NuanceKey")


def parse_nuance_key(key: NuanceKey | str) -> NuanceKey:
    if isinstance(key, NuanceKey):
        return key
    try:
        return NuanceKey(str(key).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown nuance scale: {key}") from None


def get_nuance_pair(key: NuanceKey | str) -> tuple[str, str]:
    return NUANCE_PAIRS[parse_nuance_key(key)]


def validate_nuances(nuances: Mapping[NuanceKey | str, str] | None) -> dict[str, str]:
    """Check a scale -> pole mapping and normalize its keys to strings.

    Args:
        nuances: Mapping from scale key to one of that scale's pole labels.
            Scales left out are unselected.

    Returns:
        Dict keyed by scale key string, in scale registry order.

    Raises:
        ValueError: If a key is not a known scale or a value is not one of its poles.
    """
    if not nuances:
        return {}

    selected: dict[NuanceKey, str] = {}
    for raw_key, value in nuances.items():
        key = parse_nuance_key(raw_key)
        pair = NUANCE_PAIRS[key]
        if value not in pair:
            raise ValueError(
                f"Invalid value {value!r} for {key.value}; expected one of {pair[0]!r}, {pair[1]!r}"
            )
        selected[key] = value

    return {key.value: selected[key] for key in NuanceKey if key in selected}


def nuance_polarity(key: NuanceKey | str, value: str | None) -> int:
    """-1 for the left pole, 1 for the right pole, 0 when unselected."""
    left, right = get_nuance_pair(key)
    if value == left:
        return -1
    if value == right:
        return 1
    return 0
