from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_INSTALLED_HANDLER: logging.Handler | None = None
_JSON_MODE_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_stdlib_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Route ``tradeflow`` logging to ``log_path`` or, without one, to stderr.

    Idempotent per-process: calling again replaces the previously installed
    handler. Stdout is never used so JSON output stays pure.
    """
    global _INSTALLED_HANDLER

    logger = logging.getLogger("tradeflow")
    logger.setLevel(_level_from_name(level))

    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
        _INSTALLED_HANDLER = None

    handler: logging.Handler
    if log_path is not None:
        resolved = Path(log_path).resolve()
        resolved.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(resolved, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    _INSTALLED_HANDLER = handler


def reset_stdlib_logging_for_tests() -> None:
    """Test-only: drop the installed handler and restore the default level."""
    global _INSTALLED_HANDLER
    logger = logging.getLogger("tradeflow")
    if _INSTALLED_HANDLER is not None:
        logger.removeHandler(_INSTALLED_HANDLER)
        _INSTALLED_HANDLER.close()
    _INSTALLED_HANDLER = None
    logger.setLevel(logging.NOTSET)


def suppress_lastresort_in_json_mode() -> None:
    """Prevent stdlib logging's lastResort handler from polluting JSON output.

    When no handlers are configured, WARNING+ records go to stderr via
    ``logging.lastResort``. Installing a NullHandler on the root logger keeps
    machine-readable output clean without changing levels.
    """
    global _JSON_MODE_NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _JSON_MODE_NULL_HANDLER_INSTALLED = True


__all__ = ["configure_stdlib_logging", "reset_stdlib_logging_for_tests", "suppress_lastresort_in_json_mode"]
