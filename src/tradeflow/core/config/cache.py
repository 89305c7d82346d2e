"""Centralized configuration caching.

Domain configs read the merged configuration through this module so every
accessor for one project shares a single loaded dict.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

from tradeflow.core.utils.paths import get_project_config_dir, resolve_project_root
from tradeflow.core.utils.yaml_io import iter_yaml_files

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _cache_key(repo_root: Optional[Path], validate: bool = True) -> str:
    """Generate cache key from repo_root, env overrides and project config mtimes.

    Without the fingerprints, cache hits could return stale config after
    TRADEFLOW_* env vars change or project YAML files are rewritten.
    """
    base = str(_normalize_repo_root(repo_root))
    suffix = ":validated" if validate else ":raw"

    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith("TRADEFLOW_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files: list[tuple[str, int, int]] = []
    for p in iter_yaml_files(get_project_config_dir(Path(base)) / "config"):
        try:
            st = p.stat()
            files.append((p.name, int(st.st_mtime_ns), int(st.st_size)))
        except OSError:
            files.append((p.name, 0, 0))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{base}{suffix}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None, validate: bool = True) -> Dict[str, Any]:
    """Get configuration with caching.

    Returns the same config dict instance for the same repo_root, avoiding
    repeated file I/O. Treat the returned dict as immutable.
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root, validate=validate)

    # Lazy import to avoid circular dependency
    from .manager import ConfigManager

    if key not in _config_cache:
        manager = ConfigManager(repo_root=normalized_root)
        _config_cache[key] = manager._load_config_uncached(validate=validate)
    return _config_cache[key]


def clear_all_caches() -> None:
    """Clear the config dict cache."""
    _config_cache.clear()


def is_cached(repo_root: Optional[Path] = None, validate: bool = True) -> bool:
    return _cache_key(repo_root, validate=validate) in _config_cache


__all__ = [
    "get_cached_config",
    "clear_all_caches",
    "is_cached",
]
