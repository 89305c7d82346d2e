"""Shared schema validation utilities.

Configuration payloads are validated using JSON Schema. Schemas are stored as
YAML files and loaded the same way everywhere.

Schema resolution order (highest priority → lowest):
1) Project schemas: ``.tradeflow/schemas/``
2) Bundled defaults: ``tradeflow.data/schemas/``
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema import Draft202012Validator

from tradeflow.core.exceptions import ConfigValidationError
from tradeflow.core.utils.paths import get_project_config_dir
from tradeflow.core.utils.yaml_io import read_yaml
from tradeflow.data import get_data_path


class SchemaValidationError(ConfigValidationError):
    """Raised when schema validation fails."""


def _iter_schema_dirs(repo_root: Optional[Path] = None) -> List[Path]:
    """Return schema search roots in priority order."""
    roots: List[Path] = []
    if repo_root is not None:
        roots.append(get_project_config_dir(repo_root) / "schemas")
    roots.append(get_data_path("schemas"))
    return roots


def load_schema(schema_name: str, *, repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Load a schema dict from project or bundled schema directories.

    Automatically appends ``.yaml`` if no extension is present.

    Args:
        schema_name: Relative schema file path under schemas root
            (e.g., "config/config.schema.yaml" or "config/config.schema").
        repo_root: Repository root (enables project schema overrides).

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    schema_path: Optional[Path] = None
    for schemas_dir in _iter_schema_dirs(repo_root):
        candidate = schemas_dir / schema_name
        if candidate.exists():
            schema_path = candidate
            break

    if schema_path is None:
        searched = "\n".join(f"- {p}" for p in _iter_schema_dirs(repo_root))
        raise FileNotFoundError(f"Schema not found: {schema_name}\nSearched:\n{searched}")

    schema = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(schema, dict):
        raise ValueError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_payload(
    payload: Dict[str, Any],
    schema_name: str,
    *,
    repo_root: Optional[Path] = None,
) -> None:
    """Validate a payload against a JSON schema.

    Raises:
        SchemaValidationError: If validation fails.
        FileNotFoundError: If schema doesn't exist.
    """
    schema = load_schema(schema_name, repo_root=repo_root)

    try:
        jsonschema.validate(instance=payload, schema=schema, cls=Draft202012Validator)
    except jsonschema.ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        raise SchemaValidationError(
            f"Validation failed against schema '{schema_name}': {exc.message}",
            context={"schema": schema_name, "path": path},
        ) from exc


def validate_payload_safe(
    payload: Dict[str, Any],
    schema_name: str,
    *,
    repo_root: Optional[Path] = None,
) -> List[str]:
    """Validate a payload and return list of error messages (empty if valid)."""
    try:
        schema = load_schema(schema_name, repo_root=repo_root)
    except (FileNotFoundError, ValueError) as e:
        return [f"Schema loading failed: {e}"]

    errors: List[str] = []
    validator = Draft202012Validator(schema)
    for error in sorted(validator.iter_errors(payload), key=lambda e: str(e.path)):
        if error.path:
            path_str = ".".join(str(p) for p in error.path)
            errors.append(f"{path_str}: {error.message}")
        else:
            errors.append(error.message)
    return errors


__all__ = [
    "SchemaValidationError",
    "load_schema",
    "validate_payload",
    "validate_payload_safe",
]
