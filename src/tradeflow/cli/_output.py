"""Unified CLI output formatting utilities.

Commands print through OutputFormatter so every command supports both JSON
and text output modes.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Output success result: ``data`` in JSON mode, ``message`` otherwise."""
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str, ensure_ascii=False))
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Output error result to stderr."""
        msg = message or str(error)
        if self.json_mode:
            output: Dict[str, Any] = {
                "error": error_code,
                "message": msg,
            }
            to_json_error = getattr(error, "to_json_error", None)
            if callable(to_json_error):
                output["details"] = to_json_error()
            print(json.dumps(output, indent=self.indent, default=str, ensure_ascii=False), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str, ensure_ascii=False))

    def text(self, message: str) -> None:
        print(message)

    def notice(self, message: str) -> None:
        """Side-channel message for text mode (stderr); silent in JSON mode."""
        if not self.json_mode:
            print(message, file=sys.stderr)


__all__ = ["OutputFormatter"]
