"""Eligibility rules for checklist steps.

A step is enabled when every prerequisite is checked. Evaluation follows the
FAIL-CLOSED principle:
- A step that is not registered is never enabled
- A prerequisite that is not registered is never satisfied
- Only return True when all prerequisites are explicitly checked
"""
from __future__ import annotations

from typing import Mapping

from .registry import StepRegistry


def is_enabled(registry: StepRegistry, step_id: str, state: Mapping[str, bool]) -> bool:
    """Return True if ``step_id`` may be toggled under ``state``.

    Pure function of its inputs. Steps without prerequisites are always enabled.
    """
    if step_id not in registry:
        return False
    return all(
        dep in registry and bool(state.get(dep, False))
        for dep in registry.ordered_dependencies_of(step_id)
    )


def unmet_dependencies(
    registry: StepRegistry, step_id: str, state: Mapping[str, bool]
) -> tuple[str, ...]:
    """Prerequisites of ``step_id`` that block it.

    Registered prerequisites come first, in registry order; references to
    unregistered steps follow in declaration order.
    """
    deps = registry.ordered_dependencies_of(step_id)
    known = [d for d in registry if d in deps and not state.get(d, False)]
    unknown = [d for d in deps if d not in registry]
    return tuple(known + unknown)


class EligibilityEvaluator:
    """Eligibility queries bound to one registry."""

    def __init__(self, registry: StepRegistry) -> None:
        self.registry = registry

    def is_enabled(self, step_id: str, state: Mapping[str, bool]) -> bool:
        return is_enabled(self.registry, step_id, state)

    def unmet_dependencies(self, step_id: str, state: Mapping[str, bool]) -> tuple[str, ...]:
        return unmet_dependencies(self.registry, step_id, state)

    def enabled_map(self, state: Mapping[str, bool]) -> dict[str, bool]:
        return {step_id: is_enabled(self.registry, step_id, state) for step_id in self.registry}


__all__ = ["is_enabled", "unmet_dependencies", "EligibilityEvaluator"]
