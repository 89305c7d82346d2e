"""
Tradeflow config validate command.

SUMMARY: Validate configuration and the checklist dependency graph
"""

from __future__ import annotations

import argparse
import sys

from tradeflow.cli import OutputFormatter, add_standard_flags, get_repo_root
from tradeflow.core.checklist import build_registry
from tradeflow.core.config import ConfigManager
from tradeflow.core.exceptions import TradeflowError
from tradeflow.core.schemas import validate_payload_safe

SUMMARY = "Validate configuration and the checklist dependency graph"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    repo_root = get_repo_root(args)

    try:
        manager = ConfigManager(repo_root)
        config = manager.load_config(validate=False)
    except TradeflowError as e:
        formatter.error(e, error_code="config_error")
        return 1

    errors = validate_payload_safe(config, "config/config.schema.yaml", repo_root=repo_root)
    if errors:
        if formatter.json_mode:
            formatter.json_output({"valid": False, "errors": errors})
        else:
            formatter.text("Configuration is invalid:\n" + "\n".join(f"  - {e}" for e in errors))
        return 1

    try:
        registry = build_registry(config, repo_root=repo_root)
    except TradeflowError as e:
        formatter.error(e, error_code=e.__class__.__name__)
        return 1

    unknown = registry.unknown_references()
    formatter.success(
        {
            "valid": True,
            "steps": len(registry),
            "levels": registry.topo_levels(),
            "unknownReferences": {k: list(v) for k, v in unknown.items()},
        },
        f"Configuration OK: {len(registry)} steps in {len(registry.topo_levels())} levels"
        + (f" ({len(unknown)} step(s) reference unknown prerequisites)" if unknown else ""),
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    sys.exit(main(parser.parse_args()))
