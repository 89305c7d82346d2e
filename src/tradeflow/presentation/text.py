"""Plain-text rendering of the checklist for terminals."""
from __future__ import annotations

from typing import Optional, TextIO

from tradeflow.core.checklist.machine import ChecklistStateMachine
from tradeflow.core.checklist.models import ChecklistSnapshot
from tradeflow.core.config.domains.display import DisplayConfig

from .contract import StepCard, build_cards

CHECKED_MARK = "[x]"
OPEN_MARK = "[ ]"
DISABLED_MARK = "[-]"
DETAIL_BULLET = "•"
DIMMED_DETAIL_BULLET = "◦"


class TextRenderer:
    """Render cards and progress as text; never touches machine state."""

    def __init__(self, display: DisplayConfig, *, show_details: bool = True) -> None:
        self.display = display
        self.show_details = show_details

    def progress_line(self, snapshot: ChecklistSnapshot) -> str:
        return self.display.progress_template.format(
            completed=snapshot.completed_count,
            total=snapshot.total_count,
            percent=round(snapshot.progress_percent),
        )

    def controls_line(self) -> str:
        return f"check-all: {self.display.check_all_label} | clear-all: {self.display.clear_all_label}"

    def progress_bar(self, snapshot: ChecklistSnapshot, width: int = 28) -> str:
        filled = int(round(width * snapshot.progress_percent / 100))
        return "[" + "#" * filled + "." * (width - filled) + "]"

    def render_card(self, card: StepCard) -> list[str]:
        if card.checked:
            mark = CHECKED_MARK
        elif card.enabled:
            mark = OPEN_MARK
        else:
            mark = DISABLED_MARK

        heading = f"{mark} {card.title}"
        if card.subtitle:
            heading += f" ({card.subtitle})"
        heading += f"  <{card.id}>"
        lines = [heading]
        if card.blocked_by:
            lines.append(f"    {self.display.blocked_hint_prefix} {', '.join(card.blocked_by)}")
        if self.show_details and card.enabled:
            lines.extend(f"    {DETAIL_BULLET} {detail}" for detail in card.details)
        elif self.show_details and self.display.show_disabled_details:
            lines.extend(f"    {DIMMED_DETAIL_BULLET} {detail}" for detail in card.details)
        return lines

    def render(self, snapshot: ChecklistSnapshot, cards: list[StepCard]) -> str:
        lines: list[str] = [self.display.title]
        if self.display.subtitle:
            lines.append(self.display.subtitle)
        lines.append(self.controls_line())
        lines.append("")
        lines.append(f"{self.progress_bar(snapshot)} {self.progress_line(snapshot)}")
        lines.append("")
        for card in cards:
            lines.extend(self.render_card(card))
        if self.display.summary:
            lines.append("")
            if self.display.summary_title:
                lines.append(self.display.summary_title)
            lines.extend(self.display.summary)
        if snapshot.all_complete and (self.display.completion_title or self.display.completion_message):
            lines.append("")
            if self.display.completion_title:
                lines.append(self.display.completion_title)
            if self.display.completion_message:
                lines.append(self.display.completion_message)
        if self.display.footer:
            lines.append("")
            if self.display.footer_title:
                lines.append(self.display.footer_title)
            lines.append(self.display.footer)
        return "\n".join(lines)

    def render_machine(self, machine: ChecklistStateMachine) -> str:
        return self.render(machine.snapshot(), build_cards(machine, self.display))


class TextView:
    """Subscriber that re-renders the whole checklist to ``stream`` on every change."""

    def __init__(
        self,
        machine: ChecklistStateMachine,
        renderer: TextRenderer,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.machine = machine
        self.renderer = renderer
        self.stream = stream
        self.last_output: str = ""

    def refresh(self, snapshot: ChecklistSnapshot) -> None:
        self.last_output = self.renderer.render(snapshot, build_cards(self.machine, self.renderer.display))
        if self.stream is not None:
            print(self.last_output, file=self.stream)


__all__ = [
    "TextRenderer",
    "TextView",
    "CHECKED_MARK",
    "OPEN_MARK",
    "DISABLED_MARK",
    "DETAIL_BULLET",
    "DIMMED_DETAIL_BULLET",
]
