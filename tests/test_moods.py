"""Tests for mood and nuance taxonomies."""

import pytest


def test_every_mood_has_config():
    """Each MoodType should map to a config of the same type."""
    from moods import MOOD_CONFIGS, MoodType

    for mood in MoodType:
        assert MOOD_CONFIGS[mood].type == mood


def test_registry_is_ordered_by_descending_score():
    """Registry order runs from most positive to most negative."""
    from moods import list_moods

    scores = [m.score for m in list_moods()]
    assert scores == sorted(scores, reverse=True)
    assert len(set(scores)) == len(scores)


def test_parse_mood_accepts_strings_and_members():
    from moods import MoodType, parse_mood

    assert parse_mood("happy") == MoodType.HAPPY
    assert parse_mood(" SAD ") == MoodType.SAD
    assert parse_mood(MoodType.FUN) == MoodType.FUN


def test_parse_mood_rejects_unknown():
    from moods import parse_mood

    with pytest.raises(ValueError, match="Unknown mood"):
        parse_mood("ELATED")


def test_get_mood_config():
    from moods import get_mood_config

    config = get_mood_config("NEUTRAL")
    assert config.score == 2.5
    assert config.emoji == "😐"


def test_every_nuance_has_pair():
    from nuances import NUANCE_PAIRS, NuanceKey

    assert set(NUANCE_PAIRS) == set(NuanceKey)
    for left, right in NUANCE_PAIRS.values():
        assert left != right


def test_validate_nuances_normalizes_keys_and_order():
    """Keys come back as strings in scale registry order."""
    from nuances import NuanceKey, validate_nuances

    result = validate_nuances({"guilt_proud": "떳떳당당하다", NuanceKey.FEAR_SAFETY: "무섭다"})

    assert list(result) == ["fear_safety", "guilt_proud"]
    assert result["fear_safety"] == "무섭다"


def test_validate_nuances_empty():
    from nuances import validate_nuances

    assert validate_nuances(None) == {}
    assert validate_nuances({}) == {}


def test_validate_nuances_rejects_unknown_key():
    from nuances import validate_nuances

    with pytest.raises(ValueError, match="Unknown nuance scale"):
        validate_nuances({"joy_sorrow": "기쁘다"})


def test_validate_nuances_rejects_value_outside_poles():
    from nuances import validate_nuances

    with pytest.raises(ValueError, match="Invalid value"):
        validate_nuances({"fear_safety": "안정적이다"})


def test_nuance_polarity():
    from nuances import nuance_polarity

    assert nuance_polarity("fear_safety", "무섭다") == -1
    assert nuance_polarity("fear_safety", "안전하다") == 1
    assert nuance_polarity("fear_safety", None) == 0
    assert nuance_polarity("fear_safety", "something else") == 0
