"""Console and payload rendering for parsed reports and report diffs.

Rendering is the caller's concern; the parser and differ only return data.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import TypedDict

from analysis.deltas import value_delta
from analysis.dto import ReportDiff
from analysis.quantity import MAGNITUDE_SUFFIXES
from analysis.report_diff import invisible_code_points
from core.parsers.battle_report import ParsedBattleReport


class MalformedLinePayload(TypedDict):
    """Serialized MalformedLine."""

    line_number: int
    raw_text: str


class ParsedReportPayload(TypedDict):
    """Serialized ParsedBattleReport."""

    checksum: str
    sections: dict[str, dict[str, str]]
    flat: dict[str, str]
    malformed_lines: list[MalformedLinePayload]
    overwritten: list[dict[str, str | int]]


class ValueMismatchPayload(TypedDict):
    """Serialized ValueMismatch."""

    key: str
    value_a: str
    value_b: str


class SuspiciousKeyPayload(TypedDict):
    """Serialized suspicious key with its offending code points."""

    key: str
    code_points: list[str]


class ReportDiffPayload(TypedDict):
    """Serialized ReportDiff."""

    label_a: str
    label_b: str
    summary: dict[str, int]
    only_in_a: list[str]
    only_in_b: list[str]
    value_mismatches: list[ValueMismatchPayload]
    suspicious_keys: list[SuspiciousKeyPayload]


def parsed_report_to_payload(parsed: ParsedBattleReport) -> ParsedReportPayload:
    """Return a JSON/YAML-serializable view of a parsed report."""

    return {
        "checksum": parsed.checksum,
        "sections": {name: dict(fields) for name, fields in parsed.sections.items()},
        "flat": dict(parsed.flat),
        "malformed_lines": [
            {"line_number": line.line_number, "raw_text": line.raw_text} for line in parsed.diagnostics
        ],
        "overwritten": [
            {
                "flat_key": overwrite.flat_key,
                "previous_value": overwrite.previous_value,
                "value": overwrite.value,
                "line_number": overwrite.line_number,
            }
            for overwrite in parsed.overwrites
        ],
    }


def diff_to_payload(diff: ReportDiff) -> ReportDiffPayload:
    """Return a JSON/YAML-serializable view of a report diff."""

    summary = diff.summary()
    return {
        "label_a": diff.label_a,
        "label_b": diff.label_b,
        "summary": {
            "field_count_a": summary.field_count_a,
            "field_count_b": summary.field_count_b,
            "only_in_a": summary.only_in_a,
            "only_in_b": summary.only_in_b,
            "value_mismatches": summary.value_mismatches,
            "suspicious_keys": summary.suspicious_keys,
            "text_length_a": summary.text_length_a,
            "text_length_b": summary.text_length_b,
        },
        "only_in_a": list(diff.only_in_a),
        "only_in_b": list(diff.only_in_b),
        "value_mismatches": [
            {"key": mismatch.key, "value_a": mismatch.value_a, "value_b": mismatch.value_b}
            for mismatch in diff.value_mismatches
        ],
        "suspicious_keys": [
            {"key": key, "code_points": list(invisible_code_points(key))} for key in diff.suspicious_keys
        ],
    }


def render_parsed_report_text(parsed: ParsedBattleReport) -> str:
    """Render a parsed report as indented console text."""

    lines: list[str] = []
    for section, fields in parsed.sections.items():
        lines.append(section)
        lines.extend(f"  {label}: {value}" for label, value in fields.items())

    if parsed.diagnostics:
        lines.append("")
        lines.append("Malformed lines:")
        lines.extend(f'  [{line.line_number}] "{line.raw_text}"' for line in parsed.diagnostics)

    if parsed.overwrites:
        lines.append("")
        lines.append("Overwritten values:")
        lines.extend(
            f'  [{overwrite.line_number}] "{overwrite.flat_key}": "{overwrite.previous_value}" -> "{overwrite.value}"'
            for overwrite in parsed.overwrites
        )

    return "\n".join(lines)


def render_diff_text(
    diff: ReportDiff,
    *,
    flat_a: Mapping[str, str],
    flat_b: Mapping[str, str],
    suffixes: Mapping[str, Decimal] = MAGNITUDE_SUFFIXES,
) -> str:
    """Render a report diff as console text.

    Args:
        diff: ReportDiff to render.
        flat_a: Flat mapping for report A (used to show values of missing keys).
        flat_b: Flat mapping for report B.
        suffixes: Magnitude suffix table used to annotate numeric drift.

    Returns:
        Multi-line text with field counts, missing keys, value differences,
        keys with invisible characters, rebuilt text lengths and a summary.
    """

    lines = [
        "=== REPORT COMPARISON ===",
        f"{diff.label_a}: {diff.field_count_a} fields",
        f"{diff.label_b}: {diff.field_count_b} fields",
    ]

    if diff.only_in_a:
        lines.append("")
        lines.append(f"Keys missing in {diff.label_b}:")
        lines.extend(f'  "{key}": "{flat_a[key]}"' for key in diff.only_in_a)

    if diff.only_in_b:
        lines.append("")
        lines.append(f"Keys missing in {diff.label_a}:")
        lines.extend(f'  "{key}": "{flat_b[key]}"' for key in diff.only_in_b)

    if diff.value_mismatches:
        lines.append("")
        lines.append("Value differences:")
        for mismatch in diff.value_mismatches:
            lines.append(f'  "{mismatch.key}":')
            lines.append(f'    {diff.label_a}: "{mismatch.value_a}"')
            lines.append(f'    {diff.label_b}: "{mismatch.value_b}"')
            delta = value_delta(mismatch, suffixes=suffixes)
            if delta is not None:
                lines.append(f"    drift: {_format_drift(delta.absolute, delta.percent)}")

    if diff.suspicious_keys:
        lines.append("")
        lines.append("Keys with invisible characters:")
        lines.extend(
            f'  "{key}" -> {" ".join(invisible_code_points(key))}' for key in diff.suspicious_keys
        )

    lines.extend(
        [
            "",
            "=== RAW TEXT LENGTHS ===",
            f"{diff.label_a}: {diff.text_length_a} characters",
            f"{diff.label_b}: {diff.text_length_b} characters",
        ]
    )

    summary = diff.summary()
    lines.extend(
        [
            "",
            "=== SUMMARY ===",
            f"Keys missing in {diff.label_b}: {summary.only_in_a}",
            f"Keys missing in {diff.label_a}: {summary.only_in_b}",
            f"Value differences: {summary.value_mismatches}",
            f"Keys with invisible chars: {summary.suspicious_keys}",
        ]
    )
    return "\n".join(lines)


def _format_drift(absolute: Decimal, percent: Decimal | None) -> str:
    """Format an absolute/percent drift pair for display."""

    if absolute == absolute.to_integral_value():
        absolute_text = f"{absolute:+,.0f}"
    else:
        absolute_text = f"{absolute:+,.2f}"
    if percent is None:
        return absolute_text
    return f"{absolute_text} ({percent * 100:+.1f}%)"
