"""Single-line classification for Battle Report text.

A Battle Report line is one of:
- a section header (exact match against `KNOWN_SECTIONS`),
- a label/value pair split by one of the separator heuristics,
- a malformed line that yields neither.

Reports reach us in at least two real-world layouts: multi-space column
alignment and literal tab characters. Some sources also emit `Label: Value`
or `Label - Value`, which is handled by a punctuation fallback that only runs
after both whitespace rules fail.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

SECTIONS_VERSION: Final[int] = 1

DEFAULT_SECTION: Final[str] = "Battle Report"

KNOWN_SECTIONS: Final[frozenset[str]] = frozenset(
    {
        "Battle Report",
        "Combat",
        "Utility",
        "Enemies Destroyed",
        "Bots",
        "Guardian",
    }
)

# ASCII whitespace only; Unicode invisibles must survive trimming so the
# differ can report them.
TRIM_CHARS: Final[str] = " \t\r\n\x0b\x0c"


class SeparatorRule(StrEnum):
    """Label/value separator heuristics, listed in priority order."""

    whitespace_run = "whitespace_run"
    tab = "tab"
    punctuation = "punctuation"


DEFAULT_SEPARATOR_RULES: Final[tuple[SeparatorRule, ...]] = (
    SeparatorRule.whitespace_run,
    SeparatorRule.tab,
    SeparatorRule.punctuation,
)

_SEPARATOR_PATTERNS: Final[dict[SeparatorRule, re.Pattern[str]]] = {
    SeparatorRule.whitespace_run: re.compile(r"^(?P<label>.+?)[ \t]{2,}(?P<value>.+)$", re.DOTALL),
    SeparatorRule.tab: re.compile(r"^(?P<label>.+?)\t+(?P<value>.+)$", re.DOTALL),
    SeparatorRule.punctuation: re.compile(r"^(?P<label>.+?)[ \t]*[:|\-][ \t]*(?P<value>.+)$", re.DOTALL),
}


@dataclass(frozen=True, slots=True)
class RawLine:
    """One input line during classification.

    Attributes:
        line_number: 1-based physical line number in the raw input.
        original: Line text exactly as pasted.
        normalized: `original` with commas replaced by periods. Used only to
            locate separators; extracted text always comes from `original`.
    """

    line_number: int
    original: str
    normalized: str

    @classmethod
    def from_text(cls, text: str, *, line_number: int) -> RawLine:
        """Build a RawLine from untrusted line text."""

        return cls(line_number=line_number, original=text, normalized=text.replace(",", "."))


@dataclass(frozen=True, slots=True)
class SectionHeader:
    """A line that switches the current section."""

    name: str


@dataclass(frozen=True, slots=True)
class FieldLine:
    """A line that produced a label/value pair.

    Attributes:
        label: Trimmed label text.
        value: Trimmed value text.
        rule: Separator heuristic that matched.
    """

    label: str
    value: str
    rule: SeparatorRule


@dataclass(frozen=True, slots=True)
class MalformedLine:
    """A non-blank line with no section match and no usable separator.

    Attributes:
        line_number: 1-based physical line number in the raw input.
        raw_text: Line text exactly as pasted.
    """

    line_number: int
    raw_text: str


LineClassification = SectionHeader | FieldLine | MalformedLine


def trim(text: str) -> str:
    """Strip ASCII whitespace from both ends of `text`."""

    return text.strip(TRIM_CHARS)


def classify_line(
    raw_line: RawLine,
    *,
    sections: frozenset[str] = KNOWN_SECTIONS,
    rules: tuple[SeparatorRule, ...] = DEFAULT_SEPARATOR_RULES,
) -> LineClassification:
    """Classify a single non-blank Battle Report line.

    Args:
        raw_line: Line to classify.
        sections: Recognized section names (exact, case-sensitive match).
        rules: Enabled separator heuristics, tried in the given order.

    Returns:
        SectionHeader, FieldLine, or MalformedLine.

    Notes:
        Every rule splits on the first qualifying separator only, so later
        colons or hyphens stay inside the value. A rule whose label or value
        would be empty after trimming does not match.
    """

    original = trim(raw_line.original)
    if original in sections:
        return SectionHeader(name=original)

    # Leading trim length is identical for both forms since only commas differ.
    offset = len(raw_line.original) - len(raw_line.original.lstrip(TRIM_CHARS))
    normalized = trim(raw_line.normalized)
    original = raw_line.original[offset : offset + len(normalized)]

    for rule in rules:
        match = _SEPARATOR_PATTERNS[rule].match(normalized)
        if match is None:
            continue
        label = trim(original[match.start("label") : match.end("label")])
        value = trim(original[match.start("value") : match.end("value")])
        if label and value:
            return FieldLine(label=label, value=value, rule=rule)

    return MalformedLine(line_number=raw_line.line_number, raw_text=raw_line.original)
