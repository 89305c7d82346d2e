"""
Tradeflow checklist run command.

SUMMARY: Interactive checklist session reading commands from stdin
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, TextIO

from tradeflow.cli import OutputFormatter, add_standard_flags, open_session
from tradeflow.core.checklist import ChecklistSnapshot, ChecklistStateMachine
from tradeflow.core.exceptions import TradeflowError
from tradeflow.presentation import ChecklistView, TextRenderer, TextView

SUMMARY = "Interactive checklist session reading commands from stdin"

HELP_TEXT = """Commands:
  toggle <step-id>   toggle one step (alias: t)
  check-all          check every step
  clear-all          uncheck every step
  show               render the checklist again
  help               show this help
  quit               end the session (alias: exit)"""


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--input",
        metavar="PATH",
        help="Read commands from a file instead of stdin",
    )
    parser.add_argument(
        "--no-details",
        action="store_true",
        help="Hide step details in text output",
    )
    add_standard_flags(parser)


def _print_json_snapshot(snapshot: ChecklistSnapshot) -> None:
    print(json.dumps(snapshot.to_dict(), ensure_ascii=False))


def dispatch_line(line: str, machine: ChecklistStateMachine, out: Optional[TextIO] = None) -> bool:
    """Apply one input line to ``machine``. Returns False when the session should end."""
    parts = line.split()
    if not parts:
        return True
    verb, rest = parts[0].lower(), parts[1:]

    if verb in {"quit", "exit"}:
        return False
    if verb in {"toggle", "t"}:
        if not rest:
            print("Usage: toggle <step-id>", file=sys.stderr)
            return True
        for step_id in rest:
            machine.toggle(step_id)
    elif verb == "check-all":
        machine.check_all()
    elif verb == "clear-all":
        machine.clear_all()
    elif verb == "show":
        machine.publish()
    elif verb == "help":
        print(HELP_TEXT, file=out or sys.stdout)
    else:
        print(f"Unknown command '{verb}'. Type 'help' for commands.", file=sys.stderr)
    return True


def _read_loop(
    source: TextIO,
    machine: ChecklistStateMachine,
    *,
    interactive: bool,
    out: Optional[TextIO] = None,
) -> None:
    while True:
        if interactive:
            print("> ", end="", flush=True, file=out or sys.stdout)
        line = source.readline()
        if not line:
            break
        if not dispatch_line(line, machine, out):
            break


def main(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        session = open_session(args)
    except TradeflowError as e:
        formatter.error(e, error_code="config_error")
        return 1

    machine = session.machine
    if formatter.json_mode:
        machine.subscribe(_print_json_snapshot)
    else:
        renderer = TextRenderer(session.display, show_details=not args.no_details)
        view: ChecklistView = TextView(machine, renderer, stream=sys.stdout)
        machine.subscribe(view.refresh)
        formatter.text(HELP_TEXT)

    machine.publish()

    # Stdout carries one snapshot per line in JSON mode.
    help_out = sys.stderr if formatter.json_mode else None
    if args.input:
        try:
            with open(args.input, encoding="utf-8") as handle:
                _read_loop(handle, machine, interactive=False, out=help_out)
        except OSError as e:
            formatter.error(e, error_code="input_error")
            return 1
        return 0

    source = stdin or sys.stdin
    _read_loop(source, machine, interactive=source.isatty(), out=help_out)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
