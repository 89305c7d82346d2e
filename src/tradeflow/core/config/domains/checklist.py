"""Domain-specific configuration for the checklist steps and their prerequisites."""
from __future__ import annotations

from functools import cached_property

from tradeflow.core.checklist.models import Step
from tradeflow.core.exceptions import ConfigError

from ..base import BaseDomainConfig


class ChecklistConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "checklist"

    @cached_property
    def steps(self) -> tuple[Step, ...]:
        """Step definitions in display order."""
        raw = self.section.get("steps") or []
        if not isinstance(raw, list):
            raise ConfigError("checklist.steps must be a list", context={"value": raw})

        steps: list[Step] = []
        for entry in raw:
            if not isinstance(entry, dict) or not entry.get("id"):
                raise ConfigError("Each checklist step needs an 'id'", context={"entry": entry})
            depends_on = entry.get("dependsOn") or []
            steps.append(
                Step(
                    id=str(entry["id"]),
                    depends_on=tuple(str(d) for d in depends_on),
                    title=str(entry.get("title") or ""),
                )
            )
        return tuple(steps)

    @cached_property
    def strict_references(self) -> bool:
        """Reject dependencies on unregistered steps instead of keeping them fail-closed."""
        return bool(self.section.get("strictReferences", True))

    @cached_property
    def cascade_uncheck(self) -> bool:
        return bool(self.section.get("cascadeUncheck", False))


__all__ = ["ChecklistConfig"]
