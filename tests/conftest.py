"""Pytest fixtures shared across the Battle Report test suite."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the directory holding sample Battle Report files."""

    return FIXTURES_DIR


@pytest.fixture
def aligned_report_text() -> str:
    """Return a real Battle Report pasted with multi-space column alignment."""

    return (FIXTURES_DIR / "report_aligned.txt").read_text(encoding="utf-8")


@pytest.fixture
def tabbed_report_text() -> str:
    """Return a real Battle Report pasted with tab delimiters."""

    return (FIXTURES_DIR / "report_tabbed.txt").read_text(encoding="utf-8")


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite must be runnable by intent:
    - `unit`: pure, fast tests with no Django machinery.
    - `integration`: tests touching Django settings, management commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
