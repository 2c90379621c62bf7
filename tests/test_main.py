"""Tests for the mood-diary command line."""

import json
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest


@pytest.fixture
def storage():
    from storage import MemoryStorage
    return MemoryStorage()


@pytest.fixture(autouse=True)
def no_env_pin(monkeypatch):
    monkeypatch.delenv("MOOD_DIARY_PIN", raising=False)


def run(storage, *argv):
    from main import main
    main(list(argv), storage=storage)


def test_add_and_list(storage, capsys):
    run(storage, "add", "happy", "-n", "커피 한 잔", "--nuance", "fear_safety=안전하다")
    run(storage, "list")

    out = capsys.readouterr().out
    assert "😊 좋아요 [안전하다]  커피 한 잔" in out


def test_list_empty(storage, capsys):
    run(storage, "list")

    assert "No entries yet" in capsys.readouterr().err


def test_add_unknown_mood_exits_with_error(storage, capsys):
    with pytest.raises(SystemExit) as exc:
        run(storage, "add", "GRUMPY")

    assert exc.value.code == 1
    assert "Error: Unknown mood" in capsys.readouterr().err
    assert storage.get("mood_entries") is None


def test_add_malformed_nuance(storage, capsys):
    with pytest.raises(SystemExit) as exc:
        run(storage, "add", "SAD", "--nuance", "fear_safety")

    assert exc.value.code == 1
    assert "key=value" in capsys.readouterr().err


def test_delete(storage, capsys):
    from entry_store import EntryStore

    run(storage, "add", "SAD")
    store = EntryStore(storage)
    store.load()
    entry_id = store.entries[0].id

    run(storage, "delete", entry_id)
    run(storage, "delete", entry_id)

    err = capsys.readouterr().err
    assert f"Deleted {entry_id}" in err
    assert f"No entry with id {entry_id}" in err


def test_purge_previews_then_deletes(storage, capsys):
    today = date.today().isoformat()
    run(storage, "add", "SAD")
    run(storage, "add", "FUN")

    run(storage, "purge", today, today)
    assert "2 entries" in capsys.readouterr().out
    assert len(json.loads(storage.get("mood_entries"))) == 2

    run(storage, "purge", today, today, "--yes")
    assert "Deleted 2 entries" in capsys.readouterr().err
    assert json.loads(storage.get("mood_entries")) == []


def test_purge_bad_date(storage, capsys):
    with pytest.raises(SystemExit) as exc:
        run(storage, "purge", "yesterday", "2026-01-01")

    assert exc.value.code == 1
    assert "Invalid date" in capsys.readouterr().err


def test_summary(storage, capsys):
    run(storage, "add", "HAPPY")
    run(storage, "add", "SAD")
    run(storage, "summary")

    out = capsys.readouterr().out
    assert "(2 entries)" in out
    assert "2.50 / 5.00" in out


def test_calendar_bad_month(storage, capsys):
    with pytest.raises(SystemExit):
        run(storage, "calendar", "--month", "March")

    assert "Invalid month" in capsys.readouterr().err


def test_calendar_marks_today(storage, capsys):
    today = date.today()
    run(storage, "add", "EXCITED")
    run(storage, "calendar", "--month", today.strftime("%Y-%m"))

    out = capsys.readouterr().out
    assert f"{today.day:>2}🤩" in out


def test_nuances_and_report(storage, capsys):
    run(storage, "add", "SAD", "-n", "야근", "--nuance", "worry_carefree=걱정하다")
    run(storage, "nuances")
    run(storage, "report")

    out = capsys.readouterr().out
    assert "걱정하다 100%" in out
    assert "Mood frequency:" in out
    assert "- 야근" in out


def test_analyze_insufficient_data(storage, capsys):
    from pattern_report import INSUFFICIENT_DATA

    run(storage, "analyze")

    assert INSUFFICIENT_DATA.summary in capsys.readouterr().out


def test_analyze_json(storage, capsys):
    response = {
        "summary": "산책할 때 편안해요.",
        "patterns": [{"situation": "산책", "moodEmoji": "😊", "description": "걷고 나면 기분이 좋아요."}],
    }
    for mood in ["HAPPY", "FUN", "NORMAL"]:
        run(storage, "add", mood)
    capsys.readouterr()

    analyzer = MagicMock()
    analyzer.analyze = AsyncMock(return_value=response)
    with patch("pattern_analyzer.LLMPatternAnalyzer", return_value=analyzer):
        run(storage, "analyze", "--json")

    assert json.loads(capsys.readouterr().out) == response


def test_profile_switch_and_list(storage, capsys, monkeypatch, tmp_path):
    import config

    monkeypatch.setattr(config, "PROFILE_OVERRIDE_FILE", tmp_path / "profile.override")

    run(storage, "profile", "analyst")
    run(storage, "profile")
    assert "analyst *" in capsys.readouterr().out

    run(storage, "profile", "reset")
    assert not (tmp_path / "profile.override").exists()

    with pytest.raises(SystemExit):
        run(storage, "profile", "nope")
    assert "Unknown profile" in capsys.readouterr().err


# ═══════════════════════════════════════════════════════════
# PIN LOCK
# ═══════════════════════════════════════════════════════════

def test_locked_diary_refuses_without_pin(storage, capsys):
    storage.set("mind_diary_pin", json.dumps("1234"))

    with pytest.raises(SystemExit) as exc:
        run(storage, "list")

    assert exc.value.code == 1
    assert "Diary is locked" in capsys.readouterr().err


def test_locked_diary_opens_with_pin(storage, capsys, monkeypatch):
    storage.set("mind_diary_pin", json.dumps("1234"))

    run(storage, "--pin", "1234", "list")
    monkeypatch.setenv("MOOD_DIARY_PIN", "1234")
    run(storage, "list")

    assert "Diary is locked" not in capsys.readouterr().err


def test_pin_set_and_clear(storage):
    run(storage, "pin", "set", "0420")
    assert json.loads(storage.get("mind_diary_pin")) == "0420"

    run(storage, "--pin", "0420", "pin", "clear")
    assert storage.get("mind_diary_pin") is None


def test_pin_set_rejects_bad_pin(storage, capsys):
    with pytest.raises(SystemExit) as exc:
        run(storage, "pin", "set", "12")

    assert exc.value.code == 1
    assert "4 digits" in capsys.readouterr().err


def test_locked_diary_changes_pin_with_unlock_flag(storage):
    """--pin unlocks; the positional after 'pin set' is the new PIN."""
    storage.set("mind_diary_pin", json.dumps("1234"))

    run(storage, "--pin", "1234", "pin", "set", "5678")

    assert json.loads(storage.get("mind_diary_pin")) == "5678"


def test_missing_profiles_file_is_reported(storage, capsys, monkeypatch, tmp_path):
    import config

    monkeypatch.setattr(config, "PROFILES_FILE", tmp_path / "absent.yaml")

    with pytest.raises(SystemExit) as exc:
        run(storage, "profile")

    assert exc.value.code == 1
    assert "Profiles file not found" in capsys.readouterr().err
