"""Progress figures derived from completion state."""
from __future__ import annotations

from typing import Mapping

from .registry import StepRegistry


def completed_count(registry: StepRegistry, state: Mapping[str, bool]) -> int:
    # Only registered steps count toward progress.
    return sum(1 for step_id in registry if state.get(step_id, False))


def progress_percent(registry: StepRegistry, state: Mapping[str, bool]) -> float:
    """Completed share in [0, 100]. Not rounded; renderers round for display."""
    total = len(registry)
    if total == 0:
        return 0.0
    return 100 * completed_count(registry, state) / total


def is_all_complete(registry: StepRegistry, state: Mapping[str, bool]) -> bool:
    return completed_count(registry, state) == len(registry)


__all__ = ["completed_count", "progress_percent", "is_all_complete"]
