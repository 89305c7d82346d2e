"""
Tradeflow CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (checklist/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import add_json_flag, add_repo_root_flag, add_standard_flags
from ._utils import ChecklistSession, configure_cli_logging, get_repo_root, open_session

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_repo_root_flag",
    "add_standard_flags",
    "ChecklistSession",
    "configure_cli_logging",
    "get_repo_root",
    "open_session",
]
