"""Dependency-gated checklist core.

Responsibilities:
  - Step registry and prerequisite graph (registry.py)
  - Eligibility rules (eligibility.py)
  - Completion state and mutators (machine.py)
  - Progress figures (progress.py)

The core never formats output; renderers live in ``tradeflow.presentation``.
"""
from __future__ import annotations

from .eligibility import EligibilityEvaluator, is_enabled, unmet_dependencies
from .machine import ChecklistStateMachine, Subscriber
from .models import ChecklistSnapshot, Step
from .progress import completed_count, is_all_complete, progress_percent
from .registry import StepRegistry
from .factory import build_registry, build_state_machine

__all__ = [
    "Step",
    "ChecklistSnapshot",
    "StepRegistry",
    "EligibilityEvaluator",
    "is_enabled",
    "unmet_dependencies",
    "completed_count",
    "progress_percent",
    "is_all_complete",
    "ChecklistStateMachine",
    "Subscriber",
    "build_registry",
    "build_state_machine",
]
