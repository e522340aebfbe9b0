"""Best-effort Battle Report parsing.

Turns pasted Battle Report text into section-scoped label/value mappings
while keeping the same guiding rules as before:

- Unknown labels are non-fatal; every label is kept as an opaque string.
- Malformed lines are reported as diagnostics, never raised.
- Raw report text is never modified; the checksum uses a normalized copy.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from .line_classifier import (
    DEFAULT_SECTION,
    DEFAULT_SEPARATOR_RULES,
    KNOWN_SECTIONS,
    FieldLine,
    MalformedLine,
    RawLine,
    SectionHeader,
    SeparatorRule,
    classify_line,
)

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True, slots=True)
class FieldEntry:
    """A single (section, label, value) triple from a parsed report."""

    section: str
    label: str
    value: str


@dataclass(frozen=True, slots=True)
class OverwrittenField:
    """A value discarded by the last-write-wins duplicate rule.

    Attributes:
        section: Section owning the line that won.
        label: Label of the line that won.
        flat_key: Flat key that was overwritten.
        previous_value: Value that was discarded.
        value: Value that replaced it.
        line_number: 1-based line number of the replacing line.
    """

    section: str
    label: str
    flat_key: str
    previous_value: str
    value: str
    line_number: int


@dataclass(frozen=True)
class ParsedBattleReport:
    """Parsed output for a single Battle Report.

    Attributes:
        checksum: SHA-256 checksum of the normalized raw text.
        flat: Read-only mapping of flat key -> value.
        sections: Read-only mapping of section name -> label -> value.
        diagnostics: Malformed lines, in input order.
        overwrites: Values discarded by duplicate labels or flat-key collisions.
    """

    checksum: str
    flat: Mapping[str, str]
    sections: Mapping[str, Mapping[str, str]]
    diagnostics: tuple[MalformedLine, ...] = ()
    overwrites: tuple[OverwrittenField, ...] = ()

    def field_entries(self) -> Iterator[FieldEntry]:
        """Yield every (section, label, value) triple in encounter order."""

        for section, fields in self.sections.items():
            for label, value in fields.items():
                yield FieldEntry(section=section, label=label, value=value)


def flat_key(section: str, label: str) -> str:
    """Return the cross-report key for a label in a section.

    Labels in the default `Battle Report` section are used verbatim; every
    other label is prefixed with its section name.
    """

    if section == DEFAULT_SECTION:
        return label
    return f"{section} {label}"


def compute_battle_report_checksum(raw_text: str) -> str:
    """Compute a deterministic checksum for a Battle Report.

    Args:
        raw_text: Raw Battle Report text as pasted by the user.

    Returns:
        A hex-encoded SHA-256 checksum.

    Notes:
        The checksum is computed on a normalized form of the raw text to make
        pastes robust to common newline differences. The stored raw text is not
        modified.
    """

    normalized = raw_text.replace("\r\n", "\n").replace("\r", "\n").strip()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def parse_battle_report(
    raw_text: str | None,
    *,
    rules: tuple[SeparatorRule, ...] = DEFAULT_SEPARATOR_RULES,
    sections: frozenset[str] = KNOWN_SECTIONS,
) -> ParsedBattleReport:
    """Parse Battle Report text into flat and section-scoped mappings.

    Args:
        raw_text: Raw Battle Report text as pasted by the user. `None` is
            treated as empty text.
        rules: Enabled separator heuristics in priority order.
        sections: Recognized section header names.

    Returns:
        ParsedBattleReport. Empty input yields empty mappings and no
        diagnostics.
    """

    text = raw_text or ""
    section_fields: dict[str, dict[str, str]] = {}
    flat: dict[str, str] = {}
    diagnostics: list[MalformedLine] = []
    overwrites: list[OverwrittenField] = []
    current_section = DEFAULT_SECTION

    for raw_line in _iter_raw_lines(text):
        classified = classify_line(raw_line, sections=sections, rules=rules)

        if isinstance(classified, SectionHeader):
            current_section = classified.name
            section_fields.setdefault(current_section, {})
            continue

        if isinstance(classified, MalformedLine):
            logger.debug("Malformed line [%d]: %r", classified.line_number, classified.raw_text)
            diagnostics.append(classified)
            continue

        overwrite = _record_field(
            classified,
            section=current_section,
            line_number=raw_line.line_number,
            section_fields=section_fields,
            flat=flat,
        )
        if overwrite is not None:
            logger.debug(
                "Line [%d] overwrote %r: %r -> %r",
                overwrite.line_number,
                overwrite.flat_key,
                overwrite.previous_value,
                overwrite.value,
            )
            overwrites.append(overwrite)

    return ParsedBattleReport(
        checksum=compute_battle_report_checksum(text),
        flat=MappingProxyType(flat),
        sections=MappingProxyType(
            {name: MappingProxyType(fields) for name, fields in section_fields.items()}
        ),
        diagnostics=tuple(diagnostics),
        overwrites=tuple(overwrites),
    )


def _iter_raw_lines(text: str) -> Iterator[RawLine]:
    """Yield non-blank lines with their 1-based physical line numbers.

    Blankness uses full Unicode whitespace, so NBSP-only or U+3000-only lines
    are dropped; labels and values are still trimmed of ASCII whitespace only.
    """

    for index, line in enumerate(_LINE_BREAK_RE.split(text), start=1):
        if not line.strip():
            continue
        yield RawLine.from_text(line, line_number=index)


def _record_field(
    field: FieldLine,
    *,
    section: str,
    line_number: int,
    section_fields: dict[str, dict[str, str]],
    flat: dict[str, str],
) -> OverwrittenField | None:
    """Store a field in both mappings and report any value it replaced.

    When the same flat key was produced by a different (section, label) pair,
    the stale section entry is removed so both mappings stay in lockstep.
    """

    key = flat_key(section, field.label)
    fields = section_fields.setdefault(section, {})
    previous_value = flat.get(key)

    if previous_value is not None and field.label not in fields:
        _drop_colliding_entry(key, section_fields)

    fields[field.label] = field.value
    flat[key] = field.value

    if previous_value is None:
        return None
    return OverwrittenField(
        section=section,
        label=field.label,
        flat_key=key,
        previous_value=previous_value,
        value=field.value,
        line_number=line_number,
    )


def _drop_colliding_entry(key: str, section_fields: dict[str, dict[str, str]]) -> None:
    """Remove the section entry that previously produced `key`."""

    for section, fields in section_fields.items():
        for label in fields:
            if flat_key(section, label) == key:
                del fields[label]
                return
