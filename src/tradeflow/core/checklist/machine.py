"""Checklist state machine: completion state plus its three mutators.

Responsibilities:
  - Own the completion state for one session.
  - Gate toggles through the eligibility rules.
  - Notify subscribers synchronously after every command.

Inputs/Outputs:
  - Inputs: a validated StepRegistry and step identifiers from the presentation layer.
  - Outputs: immutable ChecklistSnapshot per command; the same snapshot is
    handed to subscribers before the command returns.

Invariants:
  - No command or query raises, including for unknown step identifiers.
  - While steps are only ever checked through toggle, every checked step has
    all of its prerequisites checked.
  - Unchecking a prerequisite leaves its dependents alone unless
    ``cascade_uncheck`` is set.
"""
from __future__ import annotations

import contextlib
import logging
from types import MappingProxyType
from typing import Callable, ContextManager, Mapping, Optional

from . import eligibility, progress
from .models import ChecklistSnapshot
from .registry import StepRegistry

logger = logging.getLogger(__name__)

Subscriber = Callable[[ChecklistSnapshot], None]


class ChecklistStateMachine:
    """Dependency-gated completion state for a fixed registry.

    Usage:
        machine = ChecklistStateMachine(registry)
        unsubscribe = machine.subscribe(view.refresh)
        machine.toggle("htf")
        machine.progress_percent()

    ``lock`` is the per-session mutual-exclusion boundary. The default is a
    no-op context; pass a ``threading.Lock`` when commands can arrive from
    more than one thread.
    """

    def __init__(
        self,
        registry: StepRegistry,
        *,
        cascade_uncheck: bool = False,
        lock: Optional[ContextManager[object]] = None,
    ) -> None:
        self.registry = registry
        self.cascade_uncheck = cascade_uncheck
        self._lock: ContextManager[object] = lock if lock is not None else contextlib.nullcontext()
        self._state: dict[str, bool] = {}
        self._subscribers: list[Subscriber] = []

    # ---------- Queries ----------

    @property
    def state(self) -> Mapping[str, bool]:
        """Read-only copy of the completion state (absent means unchecked)."""
        return MappingProxyType(dict(self._state))

    def all_steps(self) -> tuple[str, ...]:
        return self.registry.all_steps()

    def is_enabled(self, step_id: str) -> bool:
        return eligibility.is_enabled(self.registry, step_id, self._state)

    def is_checked(self, step_id: str) -> bool:
        return bool(self._state.get(step_id, False))

    def unmet_dependencies(self, step_id: str) -> tuple[str, ...]:
        return eligibility.unmet_dependencies(self.registry, step_id, self._state)

    def completed_count(self) -> int:
        return progress.completed_count(self.registry, self._state)

    def progress_percent(self) -> float:
        return progress.progress_percent(self.registry, self._state)

    def is_all_complete(self) -> bool:
        return progress.is_all_complete(self.registry, self._state)

    def snapshot(self, changed: tuple[str, ...] = ()) -> ChecklistSnapshot:
        steps = self.registry.all_steps()
        return ChecklistSnapshot(
            steps=steps,
            checked={step_id: self.is_checked(step_id) for step_id in steps},
            enabled={step_id: self.is_enabled(step_id) for step_id in steps},
            completed_count=self.completed_count(),
            total_count=len(self.registry),
            progress_percent=self.progress_percent(),
            all_complete=self.is_all_complete(),
            changed=changed,
        )

    # ---------- Commands ----------

    def toggle(self, step_id: str) -> ChecklistSnapshot:
        """Flip ``step_id`` if it is enabled; otherwise leave state unchanged."""
        with self._lock:
            if not self.is_enabled(step_id):
                logger.debug(
                    "Toggle of '%s' ignored; blocked by %s",
                    step_id,
                    list(self.unmet_dependencies(step_id)) if step_id in self.registry else "unknown step",
                )
                changed: tuple[str, ...] = ()
            else:
                new_value = not self._state.get(step_id, False)
                self._state[step_id] = new_value
                changed = (step_id,)
                if not new_value and self.cascade_uncheck:
                    cascaded = tuple(
                        d for d in self.registry.transitive_dependents_of(step_id) if self._state.get(d)
                    )
                    for dep in cascaded:
                        self._state[dep] = False
                    changed += cascaded
                logger.debug("Step '%s' set to %s (changed: %s)", step_id, new_value, list(changed))
            snap = self.snapshot(changed)
        self._notify(snap)
        return snap

    def check_all(self) -> ChecklistSnapshot:
        """Mark every registered step checked, without eligibility checks."""
        with self._lock:
            changed = tuple(s for s in self.registry.all_steps() if not self._state.get(s, False))
            self._state = {step_id: True for step_id in self.registry.all_steps()}
            logger.debug("Checked all %d steps", len(self.registry))
            snap = self.snapshot(changed)
        self._notify(snap)
        return snap

    def clear_all(self) -> ChecklistSnapshot:
        """Reset completion state to empty."""
        with self._lock:
            changed = tuple(s for s in self.registry.all_steps() if self._state.get(s, False))
            self._state = {}
            logger.debug("Cleared all steps")
            snap = self.snapshot(changed)
        self._notify(snap)
        return snap

    # ---------- Notification ----------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for post-command snapshots; returns an unsubscribe callable."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                pass

        return _unsubscribe

    def publish(self) -> ChecklistSnapshot:
        """Send the current snapshot to subscribers without changing state."""
        with self._lock:
            snap = self.snapshot()
        self._notify(snap)
        return snap

    def _notify(self, snap: ChecklistSnapshot) -> None:
        for callback in list(self._subscribers):
            try:
                callback(snap)
            except Exception:
                # A broken view must not turn a command into an error.
                logger.exception("Checklist subscriber %r failed", callback)


__all__ = ["ChecklistStateMachine", "Subscriber"]
