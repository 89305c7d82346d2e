"""Domain-specific configuration accessors."""
from __future__ import annotations

from .checklist import ChecklistConfig
from .display import DisplayConfig, StepDisplay
from .logging import LoggingConfig

__all__ = [
    "ChecklistConfig",
    "DisplayConfig",
    "StepDisplay",
    "LoggingConfig",
]
