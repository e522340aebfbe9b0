"""Comparison of two flat Battle Report mappings.

The differ works on plain `Mapping[str, str]` inputs, so it does not care
whether they came from `core.parsers.battle_report` or were built by hand.
Values are compared byte-for-byte: `0` vs `0.00` is a mismatch, because
formatting drift is exactly what this comparison is meant to surface.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Final

from .dto import ReportDiff, ValueMismatch

logger = logging.getLogger(__name__)

# C0/C1 controls, NBSP, U+2000-U+200B spaces, line/paragraph separators and
# the ideographic space.
INVISIBLE_CHARACTERS_RE: Final[re.Pattern[str]] = re.compile(
    r"[\x00-\x1f\x7f-\x9f\u00a0\u2000-\u200b\u2028\u2029\u3000]"
)


def has_invisible_characters(text: str) -> bool:
    """Return True when `text` contains a blocklisted invisible character."""

    return INVISIBLE_CHARACTERS_RE.search(text) is not None


def invisible_code_points(text: str) -> tuple[str, ...]:
    """Return each blocklisted character in `text` as a `U+XXXX` string."""

    return tuple(f"U+{ord(char):04X}" for char in INVISIBLE_CHARACTERS_RE.findall(text))


def flat_text_length(flat: Mapping[str, str]) -> int:
    """Return the length of `flat` rebuilt as newline-joined `key    value` lines."""

    return len("\n".join(f"{key}    {value}" for key, value in flat.items()))


def diff_reports(
    flat_a: Mapping[str, str],
    flat_b: Mapping[str, str],
    *,
    label_a: str = "Report 1",
    label_b: str = "Report 2",
) -> ReportDiff:
    """Compare two flat report mappings.

    Args:
        flat_a: Flat key -> value mapping for report A.
        flat_b: Flat key -> value mapping for report B.
        label_a: Display label for report A.
        label_b: Display label for report B.

    Returns:
        ReportDiff with missing keys, value mismatches and suspicious keys.
    """

    only_in_a = tuple(key for key in flat_a if key not in flat_b)
    only_in_b = tuple(key for key in flat_b if key not in flat_a)
    mismatches = tuple(
        ValueMismatch(key=key, value_a=value, value_b=flat_b[key])
        for key, value in flat_a.items()
        if key in flat_b and flat_b[key] != value
    )

    all_keys = dict.fromkeys([*flat_a, *flat_b])
    suspicious = tuple(key for key in all_keys if has_invisible_characters(key))

    result = ReportDiff(
        label_a=label_a,
        label_b=label_b,
        field_count_a=len(flat_a),
        field_count_b=len(flat_b),
        only_in_a=only_in_a,
        only_in_b=only_in_b,
        value_mismatches=mismatches,
        suspicious_keys=suspicious,
        text_length_a=flat_text_length(flat_a),
        text_length_b=flat_text_length(flat_b),
    )
    logger.debug("Diff %r vs %r: %s", label_a, label_b, result.summary())
    return result
