"""Wire configuration into the checklist core."""
from __future__ import annotations

from pathlib import Path
from typing import Any, ContextManager, Mapping, Optional

from .machine import ChecklistStateMachine
from .registry import StepRegistry


def build_registry(
    config: Optional[Mapping[str, Any]] = None,
    *,
    repo_root: Optional[Path] = None,
) -> StepRegistry:
    """Build and validate the step registry from the ``checklist`` config section."""
    # Lazy import to avoid circular dependencies
    from tradeflow.core.config.domains import ChecklistConfig

    cfg = ChecklistConfig(repo_root=repo_root, config=config)
    return StepRegistry(cfg.steps, strict=cfg.strict_references)


def build_state_machine(
    config: Optional[Mapping[str, Any]] = None,
    *,
    repo_root: Optional[Path] = None,
    lock: Optional[ContextManager[object]] = None,
) -> ChecklistStateMachine:
    """Build a fresh, empty state machine for one session."""
    from tradeflow.core.config.domains import ChecklistConfig

    cfg = ChecklistConfig(repo_root=repo_root, config=config)
    registry = StepRegistry(cfg.steps, strict=cfg.strict_references)
    return ChecklistStateMachine(registry, cascade_uncheck=cfg.cascade_uncheck, lock=lock)


__all__ = ["build_registry", "build_state_machine"]
