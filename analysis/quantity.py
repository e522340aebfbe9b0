"""Best-effort value decoding for Battle Report strings.

Battle Report values are opaque strings as far as parsing and diffing are
concerned. This module offers an optional decode step for callers that need
typed values: compact magnitudes (`7.67M`, `$55.90M`), locale decimal
separators (`2,03q`), multipliers (`x8.00`), percentages (`15%`) and
durations (`1d 2h 42m 21s`).

This module is intentionally:
- pure (no Django imports),
- non-raising (unknown formats come back as text),
- table-driven (new magnitude tiers only extend a mapping).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from string import ascii_lowercase
from types import MappingProxyType
from typing import Final


class ValueKind(StrEnum):
    """Shape of a decoded Battle Report value."""

    duration = "duration"
    number = "number"
    multiplier = "multiplier"
    percent = "percent"
    unparsed = "unparsed"
    text = "text"


@dataclass(frozen=True, slots=True)
class DecodedValue:
    """A decoded value with both raw and numeric representations.

    Attributes:
        raw_value: The original value string (trimmed).
        kind: Detected value shape.
        numeric: Decoded value as a Decimal (seconds for durations, a fraction
            for percentages), or None when the value is not numeric or its
            magnitude suffix is unknown.
        mantissa: Number before magnitude scaling, when a number was found.
        magnitude: Recognized magnitude suffix (e.g. `M`, `q`), if any.
        unparsed_suffix: Trailing letters that are not in the suffix table.
        is_currency: Whether the value carried a leading `$`.
    """

    raw_value: str
    kind: ValueKind
    numeric: Decimal | None = None
    mantissa: Decimal | None = None
    magnitude: str | None = None
    unparsed_suffix: str | None = None
    is_currency: bool = False


def _build_suffix_table(suffixes: tuple[str, ...], *, start_exponent: int) -> dict[str, Decimal]:
    """Map each suffix to successive powers of 1000."""

    return {
        suffix: Decimal(10) ** (start_exponent + 3 * index)
        for index, suffix in enumerate(suffixes)
    }


_BASE_SUFFIXES: Final[dict[str, Decimal]] = _build_suffix_table(("K", "M", "B", "T", "q", "Q"), start_exponent=3)

# No lowercase `m` alias: `m` is the minutes unit of the duration grammar.
MAGNITUDE_SUFFIXES: Final[Mapping[str, Decimal]] = MappingProxyType(
    {
        **_BASE_SUFFIXES,
        **{alias: _BASE_SUFFIXES[alias.upper()] for alias in ("k", "b", "t")},
    }
)

# Game notation past `Q`. Not confirmed against an authoritative table, so it
# is opt-in; by default these suffixes decode as `ValueKind.unparsed`, except
# `s`, which then reads as seconds.
EXTENDED_MAGNITUDE_SUFFIXES: Final[Mapping[str, Decimal]] = MappingProxyType(
    {
        **MAGNITUDE_SUFFIXES,
        **_build_suffix_table(
            ("s", "S", "O", "N", "D", *(f"a{letter}" for letter in ascii_lowercase)),
            start_exponent=21,
        ),
    }
)

# Lowercase units only: `15M` is a magnitude, `15m` is minutes.
_DURATION_AMOUNT = r"\d+(?:[.,]\d+)?"
_DURATION_RE = re.compile(
    rf"^(?:(?P<d>{_DURATION_AMOUNT})\s*d)?\s*(?:(?P<h>{_DURATION_AMOUNT})\s*h)?"
    rf"\s*(?:(?P<m>{_DURATION_AMOUNT})\s*m)?\s*(?:(?P<s>{_DURATION_AMOUNT})\s*s)?$"
)
# `HH:MM:SS` only; a bare `14:06` could be `HH:MM` or `MM:SS`.
_CLOCK_RE = re.compile(r"^(?P<h>\d+):(?P<m>\d{2}):(?P<s>\d{2})$")
_NUMBER_RE = re.compile(
    r"^(?P<sign>-?)(?P<currency>\$?)(?P<body>\d+(?:[.,]\d+)*)(?P<suffix>[A-Za-z]*)$"
)
_DURATION_SECONDS: Final[dict[str, int]] = {"d": 86_400, "h": 3_600, "m": 60, "s": 1}


def decode_value(raw_value: str, *, suffixes: Mapping[str, Decimal] = MAGNITUDE_SUFFIXES) -> DecodedValue:
    """Decode a Battle Report value string.

    Args:
        raw_value: Raw value string (e.g. `17.69T`, `$2.47T`, `x8.00`,
            `1d 2h 42m 21s`).
        suffixes: Magnitude suffix table (case-sensitive).

    Returns:
        DecodedValue. Unknown formats come back as `ValueKind.text` with the
        raw value unchanged.

    Notes:
        - Each letter has one meaning per suffix table. A single
          `<number><letter>` whose letter is in `suffixes` is a magnitude;
          otherwise duration units win, so with the default table `45s` and
          `2.5s` are both seconds, and with the extended table both are
          magnitudes. Multi-component values such as `17m 35s` are always
          durations.
        - Magnitude suffixes are matched case-sensitively because `q` and `Q`
          denote different tiers.
    """

    trimmed = (raw_value or "").strip()
    if not trimmed:
        return DecodedValue(raw_value=trimmed, kind=ValueKind.text)

    number_match = _NUMBER_RE.match(trimmed)
    if number_match is not None and number_match.group("suffix") in suffixes:
        return _decode_compact_number(trimmed, suffixes=suffixes)

    seconds = parse_duration_seconds(trimmed)
    if seconds is not None:
        return DecodedValue(raw_value=trimmed, kind=ValueKind.duration, numeric=seconds)

    if trimmed[:1].casefold() == "x":
        number = parse_localized_decimal(trimmed[1:].strip())
        if number is not None:
            return DecodedValue(
                raw_value=trimmed, kind=ValueKind.multiplier, numeric=number, mantissa=number
            )

    if trimmed.endswith("%"):
        number = parse_localized_decimal(trimmed[:-1].strip())
        if number is not None:
            return DecodedValue(
                raw_value=trimmed,
                kind=ValueKind.percent,
                numeric=number / Decimal(100),
                mantissa=number,
            )

    return _decode_compact_number(trimmed, suffixes=suffixes)


def parse_duration_seconds(value: str) -> Decimal | None:
    """Parse `1d 2h 42m 21s` or `HH:MM:SS` style durations into seconds.

    Components must appear in descending unit order; any subset is allowed
    and each amount may carry a decimal part (`1.5m`). Clock notation needs
    all three fields. Returns None when the value is not a duration.
    """

    clock = _CLOCK_RE.match(value)
    if clock is not None:
        return Decimal(int(clock.group("h")) * 3_600 + int(clock.group("m")) * 60 + int(clock.group("s")))

    match = _DURATION_RE.match(value)
    if match is None:
        return None
    parts = {unit: amount for unit, amount in match.groupdict().items() if amount is not None}
    if not parts:
        return None

    total = Decimal(0)
    for unit, amount in parts.items():
        number = parse_localized_decimal(amount)
        if number is None:
            return None
        total += number * _DURATION_SECONDS[unit]
    return total


def parse_localized_decimal(number_text: str) -> Decimal | None:
    """Parse a number that may use `.` or `,` as its decimal separator.

    Args:
        number_text: Digits with optional separators, e.g. `2,03`, `1.234,5`.

    Returns:
        Decimal, or None when the text is not a well-formed number.

    Notes:
        - When both separators occur, the last one is the decimal point.
        - A separator that repeats is a thousands separator (`1,234,567`).
        - A single separator is the decimal point (`17,69` == `17.69`).
        - Thousands groups must be exactly three digits.
    """

    cleaned = number_text.strip()
    sign = ""
    if cleaned.startswith("-"):
        sign, cleaned = "-", cleaned[1:]
    if not re.fullmatch(r"\d+(?:[.,]\d+)*", cleaned):
        return None

    separators = [char for char in cleaned if char in ".,"]
    if not separators:
        return Decimal(sign + cleaned)

    grouping = separators[:-1]
    if len(set(grouping)) > 1:
        return None

    if separators[-1] in grouping:
        integer_part, fraction = cleaned, ""
    else:
        split_at = max(cleaned.rfind("."), cleaned.rfind(","))
        integer_part, fraction = cleaned[:split_at], cleaned[split_at + 1 :]

    groups = re.split(r"[.,]", integer_part)
    if len(groups) > 1 and (len(groups[0]) > 3 or any(len(group) != 3 for group in groups[1:])):
        return None

    digits = "".join(groups)
    try:
        return Decimal(f"{sign}{digits}.{fraction}" if fraction else f"{sign}{digits}")
    except InvalidOperation:
        return None


def _decode_compact_number(value: str, *, suffixes: Mapping[str, Decimal]) -> DecodedValue:
    """Decode `$1.41T`-style compact numbers."""

    match = _NUMBER_RE.match(value)
    if match is None:
        return DecodedValue(raw_value=value, kind=ValueKind.text)

    mantissa = parse_localized_decimal(match.group("sign") + match.group("body"))
    if mantissa is None:
        return DecodedValue(raw_value=value, kind=ValueKind.text)

    is_currency = bool(match.group("currency"))
    suffix = match.group("suffix")
    if not suffix:
        return DecodedValue(
            raw_value=value,
            kind=ValueKind.number,
            numeric=mantissa,
            mantissa=mantissa,
            is_currency=is_currency,
        )

    multiplier = suffixes.get(suffix)
    if multiplier is None:
        return DecodedValue(
            raw_value=value,
            kind=ValueKind.unparsed,
            mantissa=mantissa,
            unparsed_suffix=suffix,
            is_currency=is_currency,
        )

    return DecodedValue(
        raw_value=value,
        kind=ValueKind.number,
        numeric=mantissa * multiplier,
        mantissa=mantissa,
        magnitude=suffix,
        is_currency=is_currency,
    )
