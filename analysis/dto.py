"""DTO types returned by the Report Differ.

DTOs are plain data containers used to transport diff results to callers
(console output, JSON bodies, chat embeds). They intentionally avoid any
Django dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .quantity import ValueKind


@dataclass(frozen=True, slots=True)
class ValueMismatch:
    """A key present in both reports with differing values.

    Attributes:
        key: Flat key.
        value_a: Value in report A.
        value_b: Value in report B.
    """

    key: str
    value_a: str
    value_b: str


@dataclass(frozen=True, slots=True)
class DiffSummary:
    """Headline counts for a ReportDiff."""

    field_count_a: int
    field_count_b: int
    only_in_a: int
    only_in_b: int
    value_mismatches: int
    suspicious_keys: int
    text_length_a: int
    text_length_b: int


@dataclass(frozen=True)
class ReportDiff:
    """Structured comparison of two flat report mappings.

    Attributes:
        label_a: Display label for report A.
        label_b: Display label for report B.
        field_count_a: Number of keys in report A.
        field_count_b: Number of keys in report B.
        only_in_a: Keys missing from B, in A's order.
        only_in_b: Keys missing from A, in B's order.
        value_mismatches: Shared keys whose values differ, in A's order.
        suspicious_keys: Keys from either report containing invisible or
            control characters.
        text_length_a: Length of report A rebuilt as `key    value` lines.
            Padded or multi-line values show up as an unexpected gap.
        text_length_b: Same for report B.
    """

    label_a: str
    label_b: str
    field_count_a: int
    field_count_b: int
    only_in_a: tuple[str, ...] = ()
    only_in_b: tuple[str, ...] = ()
    value_mismatches: tuple[ValueMismatch, ...] = ()
    suspicious_keys: tuple[str, ...] = ()
    text_length_a: int = 0
    text_length_b: int = 0

    @property
    def is_identical(self) -> bool:
        """Return True when both reports carry the same keys and values."""

        return not (self.only_in_a or self.only_in_b or self.value_mismatches)

    def summary(self) -> DiffSummary:
        """Return the count of each finding category."""

        return DiffSummary(
            field_count_a=self.field_count_a,
            field_count_b=self.field_count_b,
            only_in_a=len(self.only_in_a),
            only_in_b=len(self.only_in_b),
            value_mismatches=len(self.value_mismatches),
            suspicious_keys=len(self.suspicious_keys),
            text_length_a=self.text_length_a,
            text_length_b=self.text_length_b,
        )


@dataclass(frozen=True, slots=True)
class ValueDelta:
    """A numeric drift between two decoded values of the same kind.

    Attributes:
        kind: Shared ValueKind of both sides.
        baseline: Decoded value A.
        comparison: Decoded value B.
        absolute: `comparison - baseline`.
        percent: `(comparison - baseline) / baseline`, or None when baseline is 0.
    """

    kind: ValueKind
    baseline: Decimal
    comparison: Decimal
    absolute: Decimal
    percent: Decimal | None
