"""Pure analysis package for Battle Report comparison.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
I/O.
"""

from .quantity import decode_value
from .report_diff import diff_reports

__all__ = ["decode_value", "diff_reports"]
