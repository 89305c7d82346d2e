"""Base class for domain-specific configuration accessors.

Provides a standardized pattern for all domain configs with:
- Centralized caching via cache.py
- Consistent repo_root handling
- Type-safe section access
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Abstract base class for domain-specific configuration accessors.

    Usage:
        class MyConfig(BaseDomainConfig):
            def _config_section(self) -> str:
                return "mySection"

            @cached_property
            def my_setting(self) -> str:
                return self.section.get("mySetting", "default")

        cfg = MyConfig(repo_root=Path("/path/to/project"))
        print(cfg.my_setting)

    Tests and embedders may pass an already-merged ``config`` mapping instead
    of loading from disk.
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._repo_root = repo_root
        if config is not None:
            self._config: Mapping[str, Any] = config
        else:
            self._config = get_cached_config(repo_root=repo_root)

    @abstractmethod
    def _config_section(self) -> str:
        """Return the top-level config key for this domain."""
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        """Get this domain's configuration section (empty dict if missing)."""
        return dict(self._config.get(self._config_section(), {}) or {})


__all__ = ["BaseDomainConfig"]
