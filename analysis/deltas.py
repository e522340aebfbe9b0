"""Numeric drift for mismatched Battle Report values.

Deltas are computed on-demand for display only. They never influence
mismatch detection, which stays strict string equality.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from .dto import ValueDelta, ValueMismatch
from .quantity import MAGNITUDE_SUFFIXES, decode_value


def value_delta(
    mismatch: ValueMismatch,
    *,
    suffixes: Mapping[str, Decimal] = MAGNITUDE_SUFFIXES,
) -> ValueDelta | None:
    """Compute absolute and percentage drift between two mismatched values.

    Args:
        mismatch: ValueMismatch from `analysis.report_diff.diff_reports`.
        suffixes: Magnitude suffix table used for decoding.

    Returns:
        ValueDelta when both values decode to numbers of the same kind;
        otherwise None. Percentage delta is None when the baseline is 0.
    """

    baseline = decode_value(mismatch.value_a, suffixes=suffixes)
    comparison = decode_value(mismatch.value_b, suffixes=suffixes)
    if baseline.numeric is None or comparison.numeric is None:
        return None
    if baseline.kind is not comparison.kind:
        return None

    absolute = comparison.numeric - baseline.numeric
    percent: Decimal | None
    if baseline.numeric == 0:
        percent = None
    else:
        percent = absolute / baseline.numeric
    return ValueDelta(
        kind=baseline.kind,
        baseline=baseline.numeric,
        comparison=comparison.numeric,
        absolute=absolute,
        percent=percent,
    )
