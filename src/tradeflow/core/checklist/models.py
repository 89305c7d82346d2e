"""Checklist data carriers.

Responsibilities:
  - Define the immutable Step definition and the snapshot handed to renderers.

Invariants:
  - Models are plain containers; gating rules live in eligibility.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class Step:
    """One unit of the checklist workflow.

    ``title`` is opaque to the core. Renderers prefer the ``display`` section
    and use it only for steps that section does not describe.
    """

    id: str
    depends_on: tuple[str, ...] = ()
    title: str = ""


@dataclass(frozen=True)
class ChecklistSnapshot:
    """Read-only view of completion state after a command or query."""

    steps: tuple[str, ...]
    checked: Mapping[str, bool]
    enabled: Mapping[str, bool]
    completed_count: int
    total_count: int
    progress_percent: float
    all_complete: bool
    changed: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "checked", MappingProxyType(dict(self.checked)))
        object.__setattr__(self, "enabled", MappingProxyType(dict(self.enabled)))

    def is_checked(self, step_id: str) -> bool:
        return bool(self.checked.get(step_id, False))

    def is_enabled(self, step_id: str) -> bool:
        return bool(self.enabled.get(step_id, False))

    def to_dict(self) -> dict[str, Any]:
        return {
            "steps": [
                {
                    "id": step_id,
                    "checked": self.is_checked(step_id),
                    "enabled": self.is_enabled(step_id),
                }
                for step_id in self.steps
            ],
            "completedCount": self.completed_count,
            "totalCount": self.total_count,
            "progressPercent": self.progress_percent,
            "allComplete": self.all_complete,
            "changed": list(self.changed),
        }


__all__ = ["Step", "ChecklistSnapshot"]
