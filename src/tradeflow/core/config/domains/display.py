"""Domain-specific configuration for presentation metadata.

Titles, icons, colors and hint text are never embedded in the checklist core;
renderers read them from the ``display`` section.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Any, Mapping, Optional

from ..base import BaseDomainConfig

DEFAULT_PROGRESS_TEMPLATE = "{completed}/{total} ({percent}%)"


@dataclass(frozen=True)
class StepDisplay:
    step_id: str
    title: str
    subtitle: str = ""
    short_label: str = ""
    icon: Optional[str] = None
    color: Optional[str] = None
    details: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        """Name used when another step refers to this one."""
        return self.short_label or self.title or self.step_id

    @classmethod
    def from_mapping(cls, step_id: str, data: Mapping[str, Any]) -> "StepDisplay":
        return cls(
            step_id=step_id,
            title=str(data.get("title") or step_id),
            subtitle=str(data.get("subtitle") or ""),
            short_label=str(data.get("shortLabel") or ""),
            icon=data.get("icon"),
            color=data.get("color"),
            details=tuple(str(d) for d in data.get("details") or ()),
        )


class DisplayConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "display"

    @cached_property
    def title(self) -> str:
        return str(self.section.get("title", "Checklist"))

    @cached_property
    def subtitle(self) -> str:
        return str(self.section.get("subtitle", ""))

    @cached_property
    def check_all_label(self) -> str:
        return str(self.section.get("checkAllLabel", "Check all"))

    @cached_property
    def clear_all_label(self) -> str:
        return str(self.section.get("clearAllLabel", "Clear all"))

    @cached_property
    def progress_template(self) -> str:
        return str(self.section.get("progressTemplate", DEFAULT_PROGRESS_TEMPLATE))

    @cached_property
    def blocked_hint_prefix(self) -> str:
        return str(self.section.get("blockedHintPrefix", "Requires:"))

    @cached_property
    def completion_title(self) -> str:
        return str(self.section.get("completionTitle", ""))

    @cached_property
    def completion_message(self) -> str:
        return str(self.section.get("completionMessage", ""))

    @cached_property
    def summary_title(self) -> str:
        return str(self.section.get("summaryTitle", ""))

    @cached_property
    def summary(self) -> tuple[str, ...]:
        """Lines of the workflow summary card shown below the steps."""
        return tuple(str(line) for line in self.section.get("summary") or ())

    @cached_property
    def show_disabled_details(self) -> bool:
        return bool(self.section.get("showDisabledDetails", False))

    @cached_property
    def footer_title(self) -> str:
        return str(self.section.get("footerTitle", ""))

    @cached_property
    def footer(self) -> str:
        return str(self.section.get("footer", ""))

    @cached_property
    def _steps(self) -> dict[str, StepDisplay]:
        raw = self.section.get("steps") or {}
        return {
            str(step_id): StepDisplay.from_mapping(str(step_id), data or {})
            for step_id, data in raw.items()
        }

    def step(self, step_id: str, fallback_title: str = "") -> StepDisplay:
        """Display metadata for ``step_id``.

        Steps without a ``display.steps`` entry use ``fallback_title`` (the
        step's own ``title`` from the checklist section), then the raw id.
        """
        found = self._steps.get(step_id)
        if found is not None:
            return found
        return StepDisplay(step_id=step_id, title=fallback_title or step_id)


__all__ = ["DisplayConfig", "StepDisplay", "DEFAULT_PROGRESS_TEMPLATE"]
