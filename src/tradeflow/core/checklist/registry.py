"""Immutable step registry and prerequisite graph.

Responsibilities:
  - Hold the ordered steps and their prerequisite relation.
  - Validate the graph once, at construction time.

Invariants:
  - The graph is acyclic; construction fails otherwise.
  - Queries never raise: unknown identifiers have no dependencies and no dependents.
  - A dependency on an unregistered step is rejected in strict mode and kept
    (permanently unsatisfied) in tolerant mode.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from tradeflow.core.exceptions import (
    CyclicDependencyError,
    DuplicateStepError,
    UnknownDependencyError,
)

from .models import Step

logger = logging.getLogger(__name__)

_EMPTY: frozenset[str] = frozenset()


class StepRegistry:
    """Ordered, validated set of checklist steps.

    Usage:
        registry = StepRegistry([
            Step("htf"),
            Step("structure", depends_on=("htf",)),
        ])
        registry.dependencies_of("structure")  # frozenset({'htf'})
    """

    def __init__(self, steps: Iterable[Step], *, strict: bool = True) -> None:
        steps = list(steps)
        ids = [s.id for s in steps]
        if len(set(ids)) != len(ids):
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            raise DuplicateStepError(
                f"Duplicate step ids found: {dupes}",
                context={"duplicates": dupes},
            )

        known = set(ids)
        self._order: tuple[str, ...] = tuple(ids)
        self._steps: dict[str, Step] = {s.id: s for s in steps}
        self._deps: dict[str, tuple[str, ...]] = {}
        self._unknown: dict[str, tuple[str, ...]] = {}

        for step in steps:
            # Keep declaration order, drop repeats.
            deps = tuple(dict.fromkeys(step.depends_on))
            if step.id in deps:
                raise CyclicDependencyError(
                    f"Step '{step.id}' depends on itself",
                    context={"step": step.id},
                )
            missing = tuple(d for d in deps if d not in known)
            if missing:
                if strict:
                    raise UnknownDependencyError(
                        f"Step '{step.id}' depends on unknown step(s) {list(missing)}. "
                        f"Known steps: {sorted(known)}",
                        context={"step": step.id, "missing": list(missing)},
                    )
                logger.warning(
                    "Step '%s' depends on unknown step(s) %s; it will stay disabled",
                    step.id,
                    list(missing),
                )
                self._unknown[step.id] = missing
            self._deps[step.id] = deps

        dependents: dict[str, set[str]] = {i: set() for i in ids}
        for step_id, deps in self._deps.items():
            for dep in deps:
                if dep in dependents:
                    dependents[dep].add(step_id)
        self._dependents: dict[str, frozenset[str]] = {
            k: frozenset(v) for k, v in dependents.items()
        }
        self._levels = self._compute_levels()

    @classmethod
    def from_mapping(
        cls,
        order: Sequence[str],
        dependencies: Mapping[str, Iterable[str]],
        *,
        strict: bool = True,
    ) -> "StepRegistry":
        """Build from an ordered id list plus a ``step -> prerequisites`` table.

        Steps missing from ``dependencies`` have no prerequisites.
        """
        return cls(
            (Step(id=step_id, depends_on=tuple(dependencies.get(step_id, ()))) for step_id in order),
            strict=strict,
        )

    def _compute_levels(self) -> list[list[str]]:
        """Group steps into topological stages; raise on cycles."""
        indeg = {i: sum(1 for d in self._deps[i] if d in self._steps) for i in self._order}
        position = {step_id: idx for idx, step_id in enumerate(self._order)}
        q = deque(i for i in self._order if indeg[i] == 0)

        levels: list[list[str]] = []
        processed = 0
        while q:
            level: list[str] = []
            for _ in range(len(q)):
                node = q.popleft()
                level.append(node)
                processed += 1
                for child in sorted(self._dependents[node], key=position.__getitem__):
                    indeg[child] -= 1
                    if indeg[child] == 0:
                        q.append(child)
            levels.append(level)

        if processed != len(self._order):
            stuck = [i for i in self._order if indeg[i] > 0]
            raise CyclicDependencyError(
                f"Dependency graph has a cycle. Stuck steps: {stuck}",
                context={"stuck": stuck},
            )
        return levels

    # ---------- Queries ----------

    def all_steps(self) -> tuple[str, ...]:
        return self._order

    def get(self, step_id: str) -> Optional[Step]:
        return self._steps.get(step_id)

    def dependencies_of(self, step_id: str) -> frozenset[str]:
        """Prerequisites of ``step_id``; empty for leaf or unknown steps."""
        return frozenset(self._deps.get(step_id, ()))

    def ordered_dependencies_of(self, step_id: str) -> tuple[str, ...]:
        """Prerequisites in declaration order."""
        return self._deps.get(step_id, ())

    def dependents_of(self, step_id: str) -> frozenset[str]:
        """Steps that list ``step_id`` as a direct prerequisite."""
        return self._dependents.get(step_id, _EMPTY)

    def transitive_dependents_of(self, step_id: str) -> tuple[str, ...]:
        """All steps downstream of ``step_id``, in registry order."""
        seen: set[str] = set()
        stack = list(self.dependents_of(step_id))
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            stack.extend(self.dependents_of(node))
        return tuple(i for i in self._order if i in seen)

    def unknown_references(self) -> dict[str, tuple[str, ...]]:
        """Tolerated references to unregistered steps, keyed by the referring step."""
        return dict(self._unknown)

    def topo_levels(self) -> list[list[str]]:
        """Steps grouped by depth; every step follows all of its prerequisites."""
        return [list(level) for level in self._levels]

    def __contains__(self, step_id: object) -> bool:
        return step_id in self._steps

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __repr__(self) -> str:
        return f"StepRegistry({list(self._order)!r})"


__all__ = ["StepRegistry"]
