"""Django settings for battleReportDiff.

The project has no database, URLs or static files; Django is used for its
settings layer, logging configuration and management commands. Configuration
is driven by environment variables so deployments do not edit this file.
"""

from __future__ import annotations

import os
from pathlib import Path

from core.parsers.line_classifier import DEFAULT_SEPARATOR_RULES, SeparatorRule

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name: str, *, default: bool) -> bool:
    """Parse a boolean environment variable.

    Args:
        name: Environment variable name.
        default: Value when the variable is not set.

    Returns:
        Parsed boolean value.
    """

    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _env_str(name: str, *, default: str) -> str:
    """Return a trimmed environment variable, or `default` when unset or blank."""

    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


DEBUG = _env_bool("DJANGO_DEBUG", default=True)

_DEV_SECRET_KEY = "dev-only-insecure-secret-key"
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY") or (_DEV_SECRET_KEY if DEBUG else "")
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY is required when DJANGO_DEBUG is False.")

INSTALLED_APPS = [
    "core.apps.CoreConfig",
]

DATABASES: dict[str, dict[str, str]] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True

# Separator heuristics used by the management commands. The punctuation
# fallback (`Label: Value`, `Label - Value`) can be disabled for sources known
# to emit only aligned or tab-delimited text.
BATTLE_REPORT_PUNCTUATION_FALLBACK = _env_bool("BATTLE_REPORT_PUNCTUATION_FALLBACK", default=True)
BATTLE_REPORT_SEPARATOR_RULES: tuple[SeparatorRule, ...] = tuple(
    rule
    for rule in DEFAULT_SEPARATOR_RULES
    if BATTLE_REPORT_PUNCTUATION_FALLBACK or rule is not SeparatorRule.punctuation
)

# Decode magnitude suffixes past `Q` (s, S, O, N, D, aa...az) when annotating
# numeric drift. Off by default: the tier table is not authoritative.
BATTLE_REPORT_EXTENDED_NOTATION = _env_bool("BATTLE_REPORT_EXTENDED_NOTATION", default=False)

BATTLE_REPORT_LOG_LEVEL = _env_str("BATTLE_REPORT_LOG_LEVEL", default="WARNING").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "console": {"format": "%(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "console",
        },
    },
    "loggers": {
        "core": {"handlers": ["console"], "level": BATTLE_REPORT_LOG_LEVEL, "propagate": False},
        "analysis": {"handlers": ["console"], "level": BATTLE_REPORT_LOG_LEVEL, "propagate": False},
    },
}
