#!/usr/bin/env python3
"""Main entry point for mood-diary.

Each command is a separate process invocation: the entry store is loaded
from disk, the command runs, and any change is written back immediately.
"""

import argparse
import asyncio
import json
import os
import sys
from datetime import date, datetime
from pathlib import Path

import config
from daily_stats import latest_day_average, month_calendar, mood_timeline, overall_average
from entry_store import EntryStore
from moods import get_mood_config, list_moods
from nuance_balance import balance
from nuances import NUANCE_PAIRS
from pattern_report import PatternReportBuilder
from pin_lock import PinLock
from range_select import count_in_range
from storage import JsonFileStorage


def open_store(storage) -> EntryStore:
    """Load the entry store from storage."""
    store = EntryStore(storage)
    store.load()
    return store


def make_builder(store: EntryStore) -> PatternReportBuilder:
    from pattern_analyzer import LLMPatternAnalyzer
    return PatternReportBuilder(store, LLMPatternAnalyzer())


def _parse_nuance_args(values: list[str] | None) -> dict[str, str]:
    """Turn ['fear_safety=안전하다', ...] into a dict."""
    nuances = {}
    for item in values or []:
        if "=" not in item:
            raise ValueError(f"Nuance must be key=value, got {item!r}")
        key, value = item.split("=", 1)
        nuances[key.strip()] = value.strip()
    return nuances


def _fmt_ts(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp / 1000).strftime("%Y-%m-%d %H:%M")


def handle_moods(args, store):
    """List moods and nuance scales."""
    for m in list_moods():
        print(f"{m.type.value:<8} {m.emoji}  {m.label} ({m.score:g})")
    print()
    for key, (left, right) in NUANCE_PAIRS.items():
        print(f"{key.value:<18} {left} / {right}")


def handle_add(args, store):
    entry = store.create(args.mood, note=args.note or "", nuances=_parse_nuance_args(args.nuance))
    mood = get_mood_config(entry.mood)
    print(f"Saved {mood.emoji} {mood.label} ({entry.id})", file=sys.stderr)


def handle_list(args, store):
    entries = store.entries[: args.limit] if args.limit else store.entries
    if not entries:
        print("No entries yet. Record your first mood!", file=sys.stderr)
        return
    for e in entries:
        mood = get_mood_config(e.mood)
        nuance = f" [{', '.join(e.nuances.values())}]" if e.nuances else ""
        print(f"{e.id}  {_fmt_ts(e.timestamp)}  {mood.emoji} {mood.label}{nuance}  {e.note}")


def handle_delete(args, store):
    if store.delete_by_id(args.id):
        print(f"Deleted {args.id}", file=sys.stderr)
    else:
        print(f"No entry with id {args.id}", file=sys.stderr)


def handle_purge(args, store):
    """Bulk delete by inclusive day range, with a preview count."""
    count = count_in_range(store.entries, args.start, args.end)
    if count == 0:
        print(f"No entries between {args.start} and {args.end}", file=sys.stderr)
        return
    if not args.yes:
        print(f"{count} entries between {args.start} and {args.end} would be deleted. Re-run with --yes to confirm.")
        return
    removed = store.delete_range(args.start, args.end)
    print(f"Deleted {removed} entries", file=sys.stderr)


def handle_summary(args, store):
    avg = latest_day_average(store.entries)
    if avg is None:
        print("No entries yet.", file=sys.stderr)
        return
    print(f"{avg.mood.emoji} {avg.mood.label}  {avg.date_label} ({avg.count} entries)  {avg.average_score:.2f} / 5.00")


def handle_calendar(args, store):
    if args.month:
        try:
            first = datetime.strptime(args.month, "%Y-%m").date()
        except ValueError:
            raise ValueError(f"Invalid month {args.month!r}; expected YYYY-MM") from None
    else:
        first = date.today().replace(day=1)

    print(f"{first.year}-{first.month:02d}")
    print("  ".join(f"{d:>4}" for d in ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]))
    for week in month_calendar(store.entries, first.year, first.month):
        cells = []
        for cell in week:
            if cell is None:
                cells.append("    ")
            else:
                day, emoji = cell
                cells.append(f"{day:>2}{emoji or '  '}")
        print("  ".join(cells))


def handle_nuances(args, store):
    for key, tally in balance(store.entries).items():
        print(
            f"{key:<18} {tally.left_label} {tally.left_percent:>3}% "
            f"| {tally.right_percent:>3}% {tally.right_label}  (n={tally.total_selected})"
        )


def handle_timeline(args, store):
    points = mood_timeline(store.entries)
    if len(points) < 2:
        print("At least two entries are needed for a trend.", file=sys.stderr)
        return
    print(f"average {overall_average(store.entries):.2f}")
    for p in points:
        nuance = " ".join(f"{v:+d}" for v in p.nuances.values())
        print(f"{p.date_label} {p.time_label}  {p.emoji} {p.score:g}  {nuance}")


def handle_report(args, store):
    builder = PatternReportBuilder(store, analyzer=None)
    print("Mood frequency:")
    for f in builder.frequency_ranking():
        print(f"  {f.mood.emoji} {f.mood.label}: {f.count} ({f.percent}%)")
    print("Notes by mood:")
    for group in builder.notes_by_mood(args.notes):
        print(f"  {group.mood.emoji} {group.mood.label}")
        for note in group.notes:
            print(f"    - {note}")


def _print_analysis(analysis):
    print(analysis.summary)
    for p in analysis.patterns:
        print(f"  {p.mood_emoji} {p.situation}: {p.description}")


def handle_analyze(args, store):
    builder = make_builder(store)
    analysis = asyncio.run(builder.request_analysis())
    if args.json:
        print(json.dumps(analysis.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_analysis(analysis)


def handle_narrate(args, store):
    """Analyze, then speak the summary into a WAV file."""
    from profile_manager import ProfileManager
    from speech import Narrator, SpeechSynthesizer, save_wav

    builder = make_builder(store)
    analysis = asyncio.run(builder.request_analysis())
    _print_analysis(analysis)

    voice = ProfileManager().get_current().get("voice", "coral")
    narrator = Narrator(SpeechSynthesizer(voice=voice))
    print("Synthesizing speech...", file=sys.stderr)
    audio = asyncio.run(narrator.narrate(analysis.summary))
    if audio is None:
        print("Could not synthesize speech. Please try again later.", file=sys.stderr)
        sys.exit(1)
    path = save_wav(audio, Path(args.out))
    print(f"Saved narration to {path} ({len(audio) / config.TTS_SAMPLE_RATE:.1f}s)", file=sys.stderr)


def handle_profile(args, store):
    """List, reset or select the analysis profile."""
    from profile_manager import ProfileManager
    profile_manager = ProfileManager()

    if args.profile_id is None or args.profile_id == "list":
        print(profile_manager.list_profiles_formatted())
        return

    if args.profile_id == "reset":
        profile_manager.clear_override()
        print(f"Reset to default: {profile_manager.default_profile}", file=sys.stderr)
        return

    profile = profile_manager.switch(args.profile_id)
    print(f"Profile: {profile['name']} ({args.profile_id})", file=sys.stderr)


def handle_pin(args, lock):
    if args.action == "set":
        lock.set_pin(args.new_pin or "")
        print("PIN set", file=sys.stderr)
    else:
        lock.clear()
        print("PIN removed", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mood-diary", description="Personal mood diary")
    parser.add_argument("--pin", help="PIN to unlock the diary (or MOOD_DIARY_PIN)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("moods", help="List moods and nuance scales")

    p = sub.add_parser("add", help="Record a mood")
    p.add_argument("mood", help="Mood id, e.g. HAPPY")
    p.add_argument("-n", "--note", default="", help="Free-text note")
    p.add_argument("--nuance", action="append", metavar="KEY=VALUE", help="Nuance pole, repeatable")

    p = sub.add_parser("list", help="List entries, newest first")
    p.add_argument("--limit", type=int, default=0)

    p = sub.add_parser("delete", help="Delete one entry")
    p.add_argument("id")

    p = sub.add_parser("purge", help="Delete entries in an inclusive date range")
    p.add_argument("start", help="YYYY-MM-DD")
    p.add_argument("end", help="YYYY-MM-DD")
    p.add_argument("--yes", action="store_true", help="Actually delete")

    sub.add_parser("summary", help="Average mood of the latest day")

    p = sub.add_parser("calendar", help="Month view of daily moods")
    p.add_argument("--month", help="YYYY-MM (default: this month)")

    sub.add_parser("nuances", help="Nuance balance per scale")
    sub.add_parser("timeline", help="Mood and nuance trend, oldest first")

    p = sub.add_parser("report", help="Mood frequency and notes by mood")
    p.add_argument("--notes", type=int, default=None, help="Notes per mood")

    p = sub.add_parser("analyze", help="AI pattern analysis")
    p.add_argument("--json", action="store_true")

    p = sub.add_parser("narrate", help="Speak the analysis summary into a WAV file")
    p.add_argument("--out", default="narration.wav")

    p = sub.add_parser("profile", help="List, select or reset the analysis profile")
    p.add_argument("profile_id", nargs="?")

    p = sub.add_parser("pin", help="Set or clear the PIN lock")
    p.add_argument("action", choices=["set", "clear"])
    p.add_argument("new_pin", nargs="?", metavar="PIN", help="New 4-digit PIN (for set)")

    return parser


HANDLERS = {
    "moods": handle_moods,
    "add": handle_add,
    "list": handle_list,
    "delete": handle_delete,
    "purge": handle_purge,
    "summary": handle_summary,
    "calendar": handle_calendar,
    "nuances": handle_nuances,
    "timeline": handle_timeline,
    "report": handle_report,
    "analyze": handle_analyze,
    "narrate": handle_narrate,
    "profile": handle_profile,
}


def main(argv: list[str] | None = None, storage=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    storage = storage or JsonFileStorage()

    lock = PinLock(storage)
    if lock.locked:
        attempt = args.pin or os.environ.get("MOOD_DIARY_PIN", "")
        if not lock.unlock(attempt):
            print("Diary is locked. Pass --pin or set MOOD_DIARY_PIN.", file=sys.stderr)
            sys.exit(1)

    try:
        if args.command == "pin":
            handle_pin(args, lock)
        else:
            HANDLERS[args.command](args, open_store(storage))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
