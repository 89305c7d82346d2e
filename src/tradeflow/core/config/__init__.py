"""Tradeflow configuration system.

Usage:
    from tradeflow.core.config import ConfigManager
    from tradeflow.core.config.domains import ChecklistConfig

    # Direct config manager usage
    config = ConfigManager(repo_root=Path("/path/to/project")).load_config()

    # Domain-specific accessors (recommended)
    checklist = ChecklistConfig(repo_root=Path("/path/to/project"))
    steps = checklist.steps
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config, is_cached
from .domains import ChecklistConfig, DisplayConfig, LoggingConfig, StepDisplay
from .manager import ConfigManager

__all__ = [
    "ConfigManager",
    "BaseDomainConfig",
    "get_cached_config",
    "clear_all_caches",
    "is_cached",
    "ChecklistConfig",
    "DisplayConfig",
    "LoggingConfig",
    "StepDisplay",
]
