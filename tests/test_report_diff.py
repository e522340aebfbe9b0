"""Golden tests for Battle Report diffing."""

from __future__ import annotations

import pytest

from analysis.dto import DiffSummary, ValueMismatch
from analysis.report_diff import (
    diff_reports,
    flat_text_length,
    has_invisible_characters,
    invisible_code_points,
)
from core.parsers.battle_report import parse_battle_report

pytestmark = [pytest.mark.unit, pytest.mark.golden]


def test_diff_reports_finds_missing_keys_and_mismatches() -> None:
    """Report keys missing on either side and differing shared values."""

    flat_a = {"Tier": "14", "Wave": "3987", "Killed By": "Ranged", "Only A": "1"}
    flat_b = {"Only B": "2", "Killed By": "Ranged", "Wave": "5217", "Tier": "15"}

    diff = diff_reports(flat_a, flat_b, label_a="Working", label_b="Failing")

    assert diff.label_a == "Working"
    assert diff.label_b == "Failing"
    assert diff.only_in_a == ("Only A",)
    assert diff.only_in_b == ("Only B",)
    assert diff.value_mismatches == (
        ValueMismatch(key="Tier", value_a="14", value_b="15"),
        ValueMismatch(key="Wave", value_a="3987", value_b="5217"),
    )
    assert diff.suspicious_keys == ()
    assert not diff.is_identical


def test_diff_reports_compares_strings_strictly() -> None:
    """Formatting drift such as `0` vs `0.00` is a mismatch."""

    diff = diff_reports({"HP From Death Wave": "0"}, {"HP From Death Wave": "0.00"})

    assert diff.value_mismatches == (ValueMismatch(key="HP From Death Wave", value_a="0", value_b="0.00"),)


def test_diff_reports_is_symmetric() -> None:
    """Swapping inputs swaps the missing-key findings."""

    flat_a = {"a": "1", "b": "2", "c": "3"}
    flat_b = {"b": "2", "d": "4"}

    forward = diff_reports(flat_a, flat_b)
    backward = diff_reports(flat_b, flat_a)

    assert forward.only_in_a == backward.only_in_b == ("a", "c")
    assert forward.only_in_b == backward.only_in_a == ("d",)


def test_diff_reports_identity_is_empty(aligned_report_text: str) -> None:
    """Diffing a report against itself finds nothing."""

    flat = parse_battle_report(aligned_report_text).flat

    diff = diff_reports(flat, flat)

    assert diff.only_in_a == ()
    assert diff.only_in_b == ()
    assert diff.value_mismatches == ()
    assert diff.is_identical


def test_diff_reports_flags_invisible_characters_in_keys() -> None:
    """A trailing non-breaking space makes a key suspicious; the plain key is not."""

    flat_a = {"Tier": "15", "Wave\u00a0": "10"}
    flat_b = {"Tier": "15", "Wave": "10", "Coins\u200bearned": "1M"}

    diff = diff_reports(flat_a, flat_b)

    assert diff.suspicious_keys == ("Wave\u00a0", "Coins\u200bearned")
    assert "Wave" not in diff.suspicious_keys
    assert "Tier" not in diff.suspicious_keys


@pytest.mark.parametrize(
    "char",
    ["\x00", "\t", "\x1f", "\x7f", "\x85", "\x9f", "\u00a0", "\u2000", "\u200b", "\u2028", "\u2029", "\u3000"],
)
def test_has_invisible_characters_covers_blocklist(char: str) -> None:
    """Every blocklisted range is detected."""

    assert has_invisible_characters(f"Tier{char}")


@pytest.mark.parametrize("text", ["Tier", "Coins From Death Wave", "Pièces Obtenues", "Заработанные Монеты"])
def test_has_invisible_characters_ignores_visible_text(text: str) -> None:
    """Ordinary and non-Latin labels are not suspicious."""

    assert not has_invisible_characters(text)


def test_invisible_code_points_formats_offenders() -> None:
    """Offending characters are reported as `U+XXXX` strings."""

    assert invisible_code_points("Wave\u00a0\u200b") == ("U+00A0", "U+200B")
    assert invisible_code_points("Wave") == ()


def test_diff_reports_summary_counts_each_category() -> None:
    """The summary exposes headline counts only."""

    diff = diff_reports({"a": "1", "b\u00a0": "2"}, {"a": "2", "c": "3"})

    assert diff.summary() == DiffSummary(
        field_count_a=2,
        field_count_b=2,
        only_in_a=1,
        only_in_b=1,
        value_mismatches=1,
        suspicious_keys=1,
        text_length_a=14,
        text_length_b=13,
    )


def test_diff_reports_accepts_empty_mappings() -> None:
    """Empty inputs produce an empty, identical diff."""

    diff = diff_reports({}, {})

    assert diff.is_identical
    assert diff.summary().field_count_a == 0


def test_diff_reports_real_game_samples(aligned_report_text: str, tabbed_report_text: str) -> None:
    """Aligned and tabbed pastes share every key but differ in most values."""

    working = parse_battle_report(aligned_report_text)
    failing = parse_battle_report(tabbed_report_text)

    diff = diff_reports(working.flat, failing.flat, label_a="Working Report", label_b="Failing Report")

    assert diff.only_in_a == ()
    assert diff.only_in_b == ()
    assert diff.suspicious_keys == ()
    assert len(diff.value_mismatches) == 78
    assert diff.value_mismatches[0] == ValueMismatch(
        key="Battle Date", value_a="Oct 15, 2025 23:11", value_b="Oct 17, 2025 14:06"
    )
    assert ValueMismatch(key="Tier", value_a="14", value_b="15") in diff.value_mismatches
    assert "Combat Damage Gain From Berserk" not in {mismatch.key for mismatch in diff.value_mismatches}


def test_flat_text_length_rebuilds_key_value_lines() -> None:
    """Lengths count `key    value` lines joined by newlines."""

    assert flat_text_length({}) == 0
    assert flat_text_length({"Tier": "14"}) == len("Tier    14")
    assert flat_text_length({"Tier": "14", "Wave": "10"}) == len("Tier    14\nWave    10")


def test_diff_reports_text_lengths_expose_multi_line_values() -> None:
    """A value carrying an embedded line break lengthens its report."""

    diff = diff_reports({"Killed By": "Ranged"}, {"Killed By": "Ranged\nBoss"})

    assert diff.text_length_a == len("Killed By    Ranged")
    assert diff.text_length_b == diff.text_length_a + len("\nBoss")
