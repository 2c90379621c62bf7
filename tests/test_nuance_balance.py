"""Tests for the nuance balance calculator."""


def test_all_scales_present_even_when_empty():
    """Empty scales read 0/0 and show a 50/50 bar."""
    from nuance_balance import balance
    from nuances import NuanceKey

    tallies = balance([])

    assert list(tallies) == [k.value for k in NuanceKey]
    for tally in tallies.values():
        assert tally.total_selected == 0
        assert (tally.left_percent, tally.right_percent) == (50, 50)


def test_unselected_entries_count_for_nothing(make_entry):
    """fear_safety = 안전하다 in 3 of 4 entries: 0 left, 3 right, 0%/100%."""
    from nuance_balance import balance

    safe = {"fear_safety": "안전하다"}
    entries = [
        make_entry("HAPPY", (2026, 3, 1), nuances=safe),
        make_entry("HAPPY", (2026, 3, 2), nuances=safe),
        make_entry("NORMAL", (2026, 3, 3)),
        make_entry("FUN", (2026, 3, 4), nuances=safe),
    ]
    tally = balance(entries)["fear_safety"]

    assert tally.left_count == 0
    assert tally.right_count == 3
    assert tally.total_selected == 3
    assert tally.left_percent == 0
    assert tally.right_percent == 100


def test_mixed_scale_percentages(make_entry):
    from nuance_balance import balance

    entries = [
        make_entry("SAD", (2026, 3, 1), nuances={"worry_carefree": "걱정하다"}),
        make_entry("SAD", (2026, 3, 2), nuances={"worry_carefree": "걱정하다"}),
        make_entry("FUN", (2026, 3, 3), nuances={"worry_carefree": "태평천하하다"}),
    ]
    tally = balance(entries)["worry_carefree"]

    assert (tally.left_count, tally.right_count) == (2, 1)
    assert tally.left_percent == 67
    assert tally.right_percent == 33


def test_half_rounds_up(make_entry):
    """1 of 8 is 12.5%, displayed as 13%."""
    from nuance_balance import balance

    entries = [make_entry("SAD", (2026, 3, 1), nuances={"guilt_proud": "죄책감이 든다"})]
    entries += [
        make_entry("FUN", (2026, 3, 2), nuances={"guilt_proud": "떳떳당당하다"}) for _ in range(7)
    ]
    tally = balance(entries)["guilt_proud"]

    assert tally.left_percent == 13
    assert tally.right_percent == 87


def test_values_outside_poles_are_ignored(make_entry):
    from nuance_balance import balance

    entry = make_entry("SAD", (2026, 3, 1), nuances={"fear_safety": "애매하다", "unknown": "x"})

    assert balance([entry])["fear_safety"].total_selected == 0
