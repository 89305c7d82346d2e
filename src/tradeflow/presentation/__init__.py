"""Presentation layer for the checklist core.

Renderers only read state and route user actions to the machine's commands.
"""
from __future__ import annotations

from .contract import ChecklistView, StepCard, build_cards
from .text import TextRenderer, TextView

__all__ = [
    "ChecklistView",
    "StepCard",
    "build_cards",
    "TextRenderer",
    "TextView",
]
