"""
Tradeflow configuration management (YAML layers + env overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import yaml

from tradeflow.core.exceptions import ConfigError
from tradeflow.core.utils.paths import PROJECT_ROOT_ENV, get_project_config_dir, resolve_project_root
from tradeflow.core.utils.yaml_io import merge_layer, merge_yaml_directory, read_yaml
from tradeflow.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRADEFLOW_"
CONFIG_SCHEMA = "config/config.schema.yaml"

# Env vars under the prefix that are not config overrides.
_RESERVED_ENV_KEYS = {PROJECT_ROOT_ENV}


class ConfigManager:
    """Load, merge, and validate Tradeflow configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: TRADEFLOW_* (``__`` separates nested keys)
    2. Project config: <repo_root>/.tradeflow/config/*.yaml (alphabetical order)
    3. Bundled defaults: tradeflow.data/config/*.yaml (alphabetical order)
    """

    ARRAY_APPEND_MARKER = object()

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root) if repo_root else resolve_project_root()
        self.core_config_dir = get_data_path("config")
        self.project_config_dir = get_project_config_dir(self.repo_root) / "config"

    def merge_layer(self, lower: Dict[str, Any], upper: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay one config layer onto another (see ``utils.yaml_io``)."""
        return merge_layer(lower, upper)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        return read_yaml(path, default={}, raise_on_error=True)

    def validate_schema(self, config: Dict[str, Any], schema_name: str = CONFIG_SCHEMA) -> None:
        from tradeflow.core.schemas.validation import validate_payload

        validate_payload(config, schema_name, repo_root=self.repo_root)

    # ---------- Env overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except ValueError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str, *, strict: bool) -> List[Union[str, int, object]]:
        if not raw:
            return []
        segs = raw.split("__")
        processed: List[Union[str, int, object]] = []
        for seg in segs:
            if seg == "":
                if strict:
                    raise ConfigError(
                        f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                        context={"key": raw},
                    )
                return []
            if seg.isdigit():
                processed.append(int(seg))
            elif seg.upper() == "APPEND":
                processed.append(self.ARRAY_APPEND_MARKER)
            else:
                # Lowercased here; matched case-insensitively against existing keys.
                processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self, *, strict: bool) -> Iterator[Tuple[List[Union[str, int, object]], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV_KEYS:
                continue
            raw = key[len(ENV_PREFIX) :]
            path = self._parse_env_key(raw, strict=strict)
            if not path:
                continue
            yield path, self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[Union[str, int, object]], value: Any) -> None:
        if not path:
            return

        cur: Any = root
        for i, part in enumerate(path[:-1]):
            nxt = path[i + 1]
            if isinstance(part, int) or part is self.ARRAY_APPEND_MARKER:
                raise ConfigError("Invalid path: list index/APPEND may only appear at leaf")
            if not isinstance(cur, dict):
                raise ConfigError("Path traverses non-dict container")
            key_candidates = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            key_to_use = key_candidates.get(str(part).lower(), part)
            if key_to_use not in cur:
                cur[key_to_use] = [] if (isinstance(nxt, int) or nxt is self.ARRAY_APPEND_MARKER) else {}
            cur = cur[key_to_use]

        leaf = path[-1]
        if leaf is self.ARRAY_APPEND_MARKER:
            if not isinstance(cur, list):
                raise ConfigError("APPEND requires list")
            cur.append(value)
            return
        if isinstance(leaf, int):
            if not isinstance(cur, list):
                raise ConfigError("Index assignment requires list")
            while len(cur) <= leaf:
                cur.append(None)
            cur[leaf] = value
            return
        if not isinstance(cur, dict):
            raise ConfigError("Key assignment requires dict")
        lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
        cur[lower_map.get(str(leaf).lower(), leaf)] = value

    def apply_env_overrides(self, cfg: Dict[str, Any], *, strict: bool) -> None:
        for path, typed_value in self._iter_env_overrides(strict=strict):
            self._set_nested(cfg, path, typed_value)

    # ---------- Loading ----------

    def _load_config_uncached(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all layers (UNCACHED)."""
        try:
            cfg: Dict[str, Any] = merge_yaml_directory({}, self.core_config_dir)
            cfg = merge_yaml_directory(cfg, self.project_config_dir)
        except (yaml.YAMLError, ValueError) as exc:
            raise ConfigError(
                f"Failed to read configuration: {exc}",
                context={"repo_root": str(self.repo_root)},
            ) from exc

        self.apply_env_overrides(cfg, strict=validate)
        logger.debug("Loaded configuration for %s (keys: %s)", self.repo_root, sorted(cfg))

        if validate:
            self.validate_schema(cfg)
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Return the merged configuration (cached per project + env fingerprint)."""
        from .cache import get_cached_config

        return get_cached_config(repo_root=self.repo_root, validate=validate)


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_SCHEMA"]
