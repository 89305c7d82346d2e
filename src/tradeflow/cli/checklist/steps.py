"""
Tradeflow checklist steps command.

SUMMARY: List checklist steps with their prerequisites and dependents
"""

from __future__ import annotations

import argparse
import sys

from tradeflow.cli import OutputFormatter, add_standard_flags, open_session
from tradeflow.core.exceptions import TradeflowError

SUMMARY = "List checklist steps with their prerequisites and dependents"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        session = open_session(args)
    except TradeflowError as e:
        formatter.error(e, error_code="config_error")
        return 1

    registry = session.machine.registry
    rows = [
        {
            "id": step_id,
            "label": session.display.step(step_id, fallback_title=registry.get(step_id).title).label,
            "dependsOn": list(registry.ordered_dependencies_of(step_id)),
            "dependents": [d for d in registry.all_steps() if d in registry.dependents_of(step_id)],
        }
        for step_id in registry.all_steps()
    ]

    if formatter.json_mode:
        formatter.json_output({"steps": rows, "count": len(rows), "levels": registry.topo_levels()})
        return 0

    lines = [f"Steps ({len(rows)}):"]
    for position, row in enumerate(rows, start=1):
        deps = ", ".join(row["dependsOn"]) or "-"
        lines.append(f"  {position}. {row['id']}: {row['label']} (requires: {deps})")
    formatter.text("\n".join(lines))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
