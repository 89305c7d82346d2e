"""Shared helpers for configuration loading."""
from __future__ import annotations

from .paths import get_project_config_dir, resolve_project_root
from .yaml_io import iter_yaml_files, merge_layer, merge_yaml_directory, read_yaml

__all__ = [
    "merge_layer",
    "iter_yaml_files",
    "merge_yaml_directory",
    "read_yaml",
    "get_project_config_dir",
    "resolve_project_root",
]
