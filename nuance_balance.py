"""Left/right pole tallies for each nuance scale."""

from dataclasses import dataclass
from typing import Iterable

from _util import percent
from nuances import NUANCE_PAIRS, NuanceKey


@dataclass
class NuanceTally:
    key: NuanceKey
    left_label: str
    right_label: str
    left_count: int = 0
    right_count: int = 0

    @property
    def total_selected(self) -> int:
        return self.left_count + self.right_count

    @property
    def left_percent(self) -> int:
        # An empty scale shows an even bar, never a blank one.
        if self.total_selected == 0:
            return 50
        return percent(self.left_count, self.total_selected)

    @property
    def right_percent(self) -> int:
        return 100 - self.left_percent


def balance(entries: Iterable) -> dict[str, NuanceTally]:
    """Tally every scale across entries.

    Entries that left a scale unselected add nothing to that scale.

    Returns:
        Dict with one NuanceTally per scale key, in scale registry order.
    """
    tallies = {
        key.value: NuanceTally(key=key, left_label=left, right_label=right)
        for key, (left, right) in NUANCE_PAIRS.items()
    }
    for e in entries:
        for key_str, value in (e.nuances or {}).items():
            tally = tallies.get(key_str)
            if tally is None:
                continue
            if value == tally.left_label:
                tally.left_count += 1
            elif value == tally.right_label:
                tally.right_count += 1
    return tallies
