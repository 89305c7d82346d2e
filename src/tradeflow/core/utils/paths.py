"""Project root and config directory resolution."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

PROJECT_ROOT_ENV = "TRADEFLOW_PROJECT_ROOT"
PROJECT_CONFIG_DIRNAME = ".tradeflow"


def resolve_project_root(start: Optional[Path] = None) -> Path:
    """Resolve the project root.

    Resolution order:
    1. ``TRADEFLOW_PROJECT_ROOT`` environment variable
    2. Nearest ancestor of ``start`` (default: cwd) holding a ``.tradeflow/`` directory
    3. ``start`` itself
    """
    env_root = os.environ.get(PROJECT_ROOT_ENV, "").strip()
    if env_root:
        return Path(env_root).expanduser().resolve()

    here = Path(start or Path.cwd()).expanduser().resolve()
    for candidate in (here, *here.parents):
        if (candidate / PROJECT_CONFIG_DIRNAME).is_dir():
            return candidate
    return here


def get_project_config_dir(repo_root: Path) -> Path:
    """Return ``<repo_root>/.tradeflow`` (not created)."""
    return Path(repo_root) / PROJECT_CONFIG_DIRNAME


__all__ = [
    "PROJECT_ROOT_ENV",
    "PROJECT_CONFIG_DIRNAME",
    "resolve_project_root",
    "get_project_config_dir",
]
