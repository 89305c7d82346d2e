"""Contract between the checklist core and its renderers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from tradeflow.core.checklist.machine import ChecklistStateMachine
from tradeflow.core.checklist.models import ChecklistSnapshot
from tradeflow.core.config.domains.display import DisplayConfig, StepDisplay


class ChecklistView(Protocol):
    """Anything that re-renders from a snapshot; usable as a machine subscriber."""

    def refresh(self, snapshot: ChecklistSnapshot) -> None:
        ...


@dataclass(frozen=True)
class StepCard:
    """Everything a renderer needs to draw one step."""

    id: str
    position: int
    title: str
    subtitle: str
    icon: Optional[str]
    color: Optional[str]
    details: tuple[str, ...]
    enabled: bool
    checked: bool
    blocked_by: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position,
            "title": self.title,
            "subtitle": self.subtitle,
            "icon": self.icon,
            "color": self.color,
            "details": list(self.details),
            "enabled": self.enabled,
            "checked": self.checked,
            "blockedBy": list(self.blocked_by),
        }


def build_cards(machine: ChecklistStateMachine, display: DisplayConfig) -> list[StepCard]:
    """Combine machine state with display metadata, in registry order.

    ``blocked_by`` holds the labels of unmet prerequisites, so it is empty for
    enabled steps.
    """
    registry = machine.registry

    def _meta(step_id: str) -> StepDisplay:
        step = registry.get(step_id)
        return display.step(step_id, fallback_title=step.title if step else "")

    cards: list[StepCard] = []
    for position, step_id in enumerate(machine.all_steps(), start=1):
        meta = _meta(step_id)
        enabled = machine.is_enabled(step_id)
        blocked_by = () if enabled else tuple(
            _meta(dep).label for dep in machine.unmet_dependencies(step_id)
        )
        cards.append(
            StepCard(
                id=step_id,
                position=position,
                title=meta.title,
                subtitle=meta.subtitle,
                icon=meta.icon,
                color=meta.color,
                details=meta.details,
                enabled=enabled,
                checked=machine.is_checked(step_id),
                blocked_by=blocked_by,
            )
        )
    return cards


__all__ = ["ChecklistView", "StepCard", "build_cards"]
