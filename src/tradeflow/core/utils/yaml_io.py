"""YAML reading and layering for configuration directories.

Layers stack bundled defaults, project files and env overrides. A higher
layer wins key by key inside mappings and replaces everything else outright,
lists included, so a project that redefines ``checklist.steps`` gets exactly
the steps it lists. A list whose first item is ``"+"`` extends the lower
layer's list instead.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

APPEND_MARKER = "+"


def _extends(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and value[0] == APPEND_MARKER


def merge_layer(lower: Dict[str, Any], upper: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay ``upper`` onto ``lower``; neither input is mutated.

    Example:
        >>> merge_layer({"checklist": {"steps": [{"id": "htf"}]}},
        ...             {"checklist": {"steps": ["+", {"id": "journal"}]}})
        {'checklist': {'steps': [{'id': 'htf'}, {'id': 'journal'}]}}
    """
    merged: Dict[str, Any] = dict(lower)
    for key, value in (upper or {}).items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_layer(current, value)
        elif _extends(value):
            base = current if isinstance(current, list) else []
            merged[key] = [*base, *value[1:]]
        else:
            merged[key] = value
    return merged


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def iter_yaml_files(dir_path: Path) -> list[Path]:
    """Return YAML files in ``dir_path`` in deterministic order.

    When both ``<name>.yaml`` and ``<name>.yml`` exist, only the ``.yaml``
    path is returned.
    """
    d = Path(dir_path)
    if not d.exists():
        return []
    yml_files = {p.stem: p for p in d.glob("*.yml")}
    yaml_files = {p.stem: p for p in d.glob("*.yaml")}

    out: list[Path] = []
    for stem in sorted(set(yml_files.keys()) | set(yaml_files.keys())):
        preferred = yaml_files.get(stem) or yml_files.get(stem)
        if preferred is not None:
            out.append(preferred)
    return out


def merge_yaml_directory(base: Dict[str, Any], directory: Path) -> Dict[str, Any]:
    """Merge all YAML files from ``directory`` into ``base``.

    Missing directories are ignored. Invalid YAML raises.
    """
    d = Path(directory)
    if not d.exists():
        return base

    cfg: Dict[str, Any] = dict(base)
    for path in iter_yaml_files(d):
        module_cfg = read_yaml(path, default={}, raise_on_error=True) or {}
        if not isinstance(module_cfg, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        cfg = merge_layer(cfg, module_cfg)
    return cfg


__all__ = ["APPEND_MARKER", "merge_layer", "read_yaml", "iter_yaml_files", "merge_yaml_directory"]
