"""Shared CLI utilities."""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from tradeflow.core.audit import configure_stdlib_logging, suppress_lastresort_in_json_mode
from tradeflow.core.checklist import ChecklistStateMachine, build_state_machine
from tradeflow.core.config import ConfigManager, DisplayConfig, LoggingConfig
from tradeflow.core.exceptions import TradeflowError
from tradeflow.core.utils.paths import resolve_project_root

logger = logging.getLogger(__name__)


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get repository root from args or auto-detect."""
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def configure_cli_logging(args: argparse.Namespace) -> None:
    """Configure stdlib logging from ``--log-level`` or the ``logging`` config section.

    Falls back to WARNING on stderr when configuration cannot be loaded; the
    command itself reports the configuration error.
    """
    json_mode = bool(getattr(args, "json", False))
    explicit_level: Optional[str] = getattr(args, "log_level", None)
    level = explicit_level or "WARNING"
    log_path: Optional[Path] = None
    try:
        repo_root = get_repo_root(args)
        cfg = LoggingConfig(repo_root=repo_root, config=ConfigManager(repo_root).load_config(validate=False))
        level = explicit_level or cfg.level
        log_path = cfg.file
    except (TradeflowError, OSError) as exc:
        logger.debug("Logging config unavailable, using defaults: %s", exc)

    if json_mode:
        suppress_lastresort_in_json_mode()
    configure_stdlib_logging(level=level, log_path=log_path)


@dataclass
class ChecklistSession:
    """One CLI session: a fresh machine plus the display metadata to render it."""

    repo_root: Path
    config: Dict[str, Any]
    machine: ChecklistStateMachine
    display: DisplayConfig


def open_session(args: argparse.Namespace) -> ChecklistSession:
    """Load validated config and build an empty state machine."""
    repo_root = get_repo_root(args)
    config = ConfigManager(repo_root).load_config(validate=True)
    machine = build_state_machine(config, repo_root=repo_root)
    display = DisplayConfig(repo_root=repo_root, config=config)
    return ChecklistSession(repo_root=repo_root, config=config, machine=machine, display=display)


__all__ = ["get_repo_root", "configure_cli_logging", "ChecklistSession", "open_session"]
