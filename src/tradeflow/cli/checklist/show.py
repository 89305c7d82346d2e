"""
Tradeflow checklist show command.

SUMMARY: Render the checklist after applying toggle/check-all/clear-all in order
"""

from __future__ import annotations

import argparse
import sys

from tradeflow.cli import OutputFormatter, add_standard_flags, open_session
from tradeflow.core.exceptions import TradeflowError
from tradeflow.presentation import TextRenderer, build_cards

SUMMARY = "Render the checklist after applying toggle/check-all/clear-all in order"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--toggle",
        dest="actions",
        action="append",
        type=lambda step_id: ("toggle", step_id),
        metavar="STEP_ID",
        help="Toggle a step (repeatable; applied in command-line order)",
    )
    parser.add_argument(
        "--check-all",
        dest="actions",
        action="append_const",
        const=("check-all", None),
        help="Check every step",
    )
    parser.add_argument(
        "--clear-all",
        dest="actions",
        action="append_const",
        const=("clear-all", None),
        help="Uncheck every step",
    )
    parser.add_argument(
        "--no-details",
        action="store_true",
        help="Hide step details in text output",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        session = open_session(args)
    except TradeflowError as e:
        formatter.error(e, error_code="config_error")
        return 1

    machine = session.machine
    # Reasons are captured at the time of the toggle; later actions may unblock the step.
    ignored: list[tuple[str, str]] = []
    for action, step_id in args.actions or []:
        if action == "toggle":
            snap = machine.toggle(step_id)
            if not snap.changed:
                reason = (
                    f"blocked by {', '.join(machine.unmet_dependencies(step_id))}"
                    if step_id in machine.registry
                    else "unknown step"
                )
                ignored.append((step_id, reason))
        elif action == "check-all":
            machine.check_all()
        elif action == "clear-all":
            machine.clear_all()

    for step_id, reason in ignored:
        formatter.notice(f"Ignored toggle of '{step_id}': {reason}")

    snapshot = machine.snapshot()
    if formatter.json_mode:
        formatter.json_output(
            {
                **snapshot.to_dict(),
                "cards": [c.to_dict() for c in build_cards(machine, session.display)],
                "ignored": [step_id for step_id, _ in ignored],
            }
        )
        return 0

    renderer = TextRenderer(session.display, show_details=not args.no_details)
    formatter.text(renderer.render_machine(machine))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
