"""Input and output helpers shared by the Battle Report management commands."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml
from django.conf import settings
from django.core.management.base import CommandError

from analysis.quantity import EXTENDED_MAGNITUDE_SUFFIXES, MAGNITUDE_SUFFIXES
from core.parsers.line_classifier import SeparatorRule

logger = logging.getLogger(__name__)

OUTPUT_FORMATS: tuple[str, ...] = ("text", "json", "yaml")


def read_report_text(path: str) -> str:
    """Read Battle Report text from a file path, or stdin when `path` is `-`.

    Raises:
        CommandError: When the file cannot be read or decoded as UTF-8.
    """

    if path == "-":
        logger.info("Reading Battle Report from stdin")
        return sys.stdin.read()

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CommandError(f"Could not read Battle Report {path!r}: {exc}") from exc
    logger.info("Read Battle Report %s (%d characters)", path, len(text))
    return text


def separator_rules(*, punctuation_fallback: bool) -> tuple[SeparatorRule, ...]:
    """Return the configured separator rules, optionally without the fallback."""

    configured: tuple[SeparatorRule, ...] = settings.BATTLE_REPORT_SEPARATOR_RULES
    if punctuation_fallback:
        return configured
    return tuple(rule for rule in configured if rule is not SeparatorRule.punctuation)


def magnitude_suffixes() -> Mapping[str, Decimal]:
    """Return the configured magnitude suffix table."""

    if settings.BATTLE_REPORT_EXTENDED_NOTATION:
        return EXTENDED_MAGNITUDE_SUFFIXES
    return MAGNITUDE_SUFFIXES


def dump_structured(payload: Mapping[str, Any], *, output_format: str) -> str:
    """Serialize a payload as JSON or YAML, preserving key order."""

    if output_format == "json":
        return json.dumps(payload, indent=2, ensure_ascii=False)
    if output_format == "yaml":
        return yaml.safe_dump(dict(payload), sort_keys=False, allow_unicode=True)
    raise CommandError(f"Unsupported output format: {output_format!r}.")
