"""Integration tests for the compare_battle_reports management command."""

from __future__ import annotations

import io
import json

import pytest
import yaml
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


def _run(*args: str) -> tuple[str, str]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    call_command("compare_battle_reports", *args, stdout=stdout, stderr=stderr)
    return stdout.getvalue(), stderr.getvalue()


@pytest.fixture
def report_paths(fixtures_dir) -> tuple[str, str]:
    """Return the aligned and tabbed sample report paths."""

    return str(fixtures_dir / "report_aligned.txt"), str(fixtures_dir / "report_tabbed.txt")


def test_compare_battle_reports_prints_text_summary(report_paths) -> None:
    """Text output shows counts, value differences, and the summary block."""

    stdout, stderr = _run(*report_paths, "--label-a", "Working Report", "--label-b", "Failing Report")

    lines = stdout.splitlines()
    assert lines[:3] == [
        "=== REPORT COMPARISON ===",
        "Working Report: 86 fields",
        "Failing Report: 86 fields",
    ]
    assert '  "Tier":' in lines
    assert '    Working Report: "14"' in lines
    assert '    Failing Report: "15"' in lines
    assert "Keys missing in Failing Report: 0" in lines
    assert "Value differences: 78" in lines
    assert "=== RAW TEXT LENGTHS ===" in lines
    assert "Keys with invisible chars: 0" in lines
    assert stderr == ""


def test_compare_battle_reports_default_labels(report_paths) -> None:
    """Labels default to `Report 1` and `Report 2`."""

    stdout, _ = _run(*report_paths)

    assert "Report 1: 86 fields" in stdout
    assert "Report 2: 86 fields" in stdout


def test_compare_battle_reports_emits_json(report_paths) -> None:
    """JSON output carries summary counts and ordered mismatches."""

    stdout, _ = _run(*report_paths, "--format", "json")

    payload = json.loads(stdout)
    summary = payload["summary"]
    assert summary.pop("text_length_a") > 0
    assert summary.pop("text_length_b") > 0
    assert summary == {
        "field_count_a": 86,
        "field_count_b": 86,
        "only_in_a": 0,
        "only_in_b": 0,
        "value_mismatches": 78,
        "suspicious_keys": 0,
    }
    assert payload["value_mismatches"][0] == {
        "key": "Battle Date",
        "value_a": "Oct 15, 2025 23:11",
        "value_b": "Oct 17, 2025 14:06",
    }


def test_compare_battle_reports_emits_yaml_with_suspicious_keys(tmp_path) -> None:
    """A non-breaking space inside a label is surfaced with its code point."""

    report_a = tmp_path / "a.txt"
    report_b = tmp_path / "b.txt"
    report_a.write_text("Tier\u00a0    15\nWave\t10\n", encoding="utf-8")
    report_b.write_text("Tier    15\nWave\t12\n", encoding="utf-8")

    stdout, _ = _run(str(report_a), str(report_b), "--format", "yaml")

    payload = yaml.safe_load(stdout)
    assert payload["only_in_a"] == ["Tier\u00a0"]
    assert payload["only_in_b"] == ["Tier"]
    assert payload["value_mismatches"] == [{"key": "Wave", "value_a": "10", "value_b": "12"}]
    assert payload["suspicious_keys"] == [{"key": "Tier\u00a0", "code_points": ["U+00A0"]}]


def test_compare_battle_reports_writes_malformed_lines_to_stderr(tmp_path, report_paths) -> None:
    """Malformed lines are reported per report without aborting the comparison."""

    report_b = tmp_path / "b.txt"
    report_b.write_text("Tier\t14\nJustOneToken\n", encoding="utf-8")

    stdout, stderr = _run(report_paths[0], str(report_b), "--label-b", "Pasted")

    assert 'Pasted: malformed line [2]: "JustOneToken"' in stderr
    assert "Pasted: 1 fields" in stdout


def test_compare_battle_reports_fail_on_diff(report_paths) -> None:
    """`--fail-on-diff` raises when the reports differ."""

    with pytest.raises(CommandError, match="Reports differ"):
        _run(*report_paths, "--fail-on-diff")


def test_compare_battle_reports_fail_on_diff_passes_for_identical_reports(report_paths) -> None:
    """Identical reports do not fail, and only the summary block is printed."""

    stdout, _ = _run(report_paths[1], report_paths[1], "--fail-on-diff")

    assert "Value differences: 0" in stdout
    assert "Value differences:\n" not in stdout


def test_compare_battle_reports_tab_and_space_layouts_are_equivalent(tmp_path) -> None:
    """The same values pasted with tabs or aligned spaces compare as identical."""

    report_a = tmp_path / "a.txt"
    report_b = tmp_path / "b.txt"
    report_a.write_text("Battle Report\nTier\t15\nCombat\nDamage dealt\t1.2M\n", encoding="utf-8")
    report_b.write_text("Battle Report\nTier    15\nCombat\nDamage dealt      1.2M\n", encoding="utf-8")

    stdout, _ = _run(str(report_a), str(report_b), "--format", "json", "--fail-on-diff")

    assert json.loads(stdout)["summary"]["value_mismatches"] == 0


def test_compare_battle_reports_uses_extended_notation_setting(settings, tmp_path) -> None:
    """Extended notation makes drift available for tiers past `Q`."""

    report_a = tmp_path / "a.txt"
    report_b = tmp_path / "b.txt"
    report_a.write_text("Combat\nDamage dealt\t1aa\n", encoding="utf-8")
    report_b.write_text("Combat\nDamage dealt\t2aa\n", encoding="utf-8")

    stdout, _ = _run(str(report_a), str(report_b))
    assert "drift:" not in stdout

    settings.BATTLE_REPORT_EXTENDED_NOTATION = True
    stdout, _ = _run(str(report_a), str(report_b))
    assert "(+100.0%)" in stdout


def test_compare_battle_reports_rejects_two_stdin_inputs() -> None:
    """Only one report may come from stdin."""

    with pytest.raises(CommandError, match="stdin"):
        _run("-", "-")


def test_compare_battle_reports_rejects_missing_file(tmp_path, report_paths) -> None:
    """Unreadable paths fail with a CommandError."""

    with pytest.raises(CommandError, match="Could not read Battle Report"):
        _run(report_paths[0], str(tmp_path / "missing.txt"))
