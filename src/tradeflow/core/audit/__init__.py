"""Logging setup for Tradeflow entry points."""
from __future__ import annotations

from .stdlib_logging import (
    configure_stdlib_logging,
    reset_stdlib_logging_for_tests,
    suppress_lastresort_in_json_mode,
)

__all__ = [
    "configure_stdlib_logging",
    "reset_stdlib_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]
