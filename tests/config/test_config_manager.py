from __future__ import annotations

from pathlib import Path

import pytest

from helpers.io_utils import write_project_config
from tradeflow.core.config import ConfigManager, get_cached_config, is_cached
from tradeflow.core.exceptions import ConfigError, ConfigValidationError
from tradeflow.core.schemas import SchemaValidationError, load_schema, validate_payload_safe
from tradeflow.data import get_data_path


def test_merge_layer_mappings_and_lists(project_root: Path) -> None:
    mgr = ConfigManager(project_root)
    lower = {"display": {"title": "A", "steps": {"htf": {"icon": "eye"}}}, "tags": [1, 2]}
    upper = {"display": {"steps": {"htf": {"color": "red"}}}, "tags": [3]}
    merged = mgr.merge_layer(lower, upper)
    assert merged["display"] == {"title": "A", "steps": {"htf": {"icon": "eye", "color": "red"}}}
    assert merged["tags"] == [3]
    assert mgr.merge_layer({"tags": [1]}, {"tags": ["+", 2]})["tags"] == [1, 2]
    assert mgr.merge_layer({}, {"tags": ["+", 2]})["tags"] == [2]
    assert lower["display"]["steps"]["htf"] == {"icon": "eye"}


def test_bundled_defaults_load_and_validate(project_root: Path) -> None:
    cfg = ConfigManager(project_root).load_config(validate=True)
    steps = cfg["checklist"]["steps"]
    assert [s["id"] for s in steps] == [
        "htf",
        "structure",
        "entry-zone",
        "entry",
        "risk",
        "analysis",
        "improvement",
    ]
    assert cfg["checklist"]["strictReferences"] is True
    assert cfg["checklist"]["cascadeUncheck"] is False
    assert cfg["logging"]["level"] == "WARNING"
    assert "htf" in cfg["display"]["steps"]


def test_project_overlay_overrides_defaults(project_root: Path) -> None:
    write_project_config(
        project_root,
        "display",
        {"display": {"title": "Morning routine", "steps": {"htf": {"shortLabel": "HTF"}}}},
    )
    cfg = ConfigManager(project_root).load_config()
    assert cfg["display"]["title"] == "Morning routine"
    assert cfg["display"]["steps"]["htf"]["shortLabel"] == "HTF"
    # Sibling keys from the bundled layer survive the merge.
    assert cfg["display"]["steps"]["htf"]["color"] == "purple"


def test_project_overlay_can_replace_steps(project_root: Path) -> None:
    write_project_config(
        project_root,
        "checklist",
        {"checklist": {"steps": [{"id": "plan"}, {"id": "execute", "dependsOn": ["plan"]}]}},
    )
    cfg = ConfigManager(project_root).load_config()
    assert [s["id"] for s in cfg["checklist"]["steps"]] == ["plan", "execute"]


def test_project_overlay_can_extend_steps(project_root: Path) -> None:
    write_project_config(
        project_root,
        "checklist",
        {"checklist": {"steps": ["+", {"id": "journal", "dependsOn": ["analysis"]}]}},
    )
    cfg = ConfigManager(project_root).load_config(validate=True)
    ids = [s["id"] for s in cfg["checklist"]["steps"]]
    assert len(ids) == 8
    assert ids[0] == "htf"
    assert ids[-1] == "journal"


def test_env_overrides_coerce_types(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRADEFLOW_checklist__cascadeuncheck", "true")
    monkeypatch.setenv("TRADEFLOW_LOGGING__LEVEL", "DEBUG")
    monkeypatch.setenv("TRADEFLOW_display__steps__htf__details", '["one", "two"]')

    cfg = ConfigManager(project_root).load_config()
    assert cfg["checklist"]["cascadeUncheck"] is True
    assert "cascadeuncheck" not in cfg["checklist"]
    assert cfg["logging"]["level"] == "DEBUG"
    assert cfg["display"]["steps"]["htf"]["details"] == ["one", "two"]


def test_env_override_append_and_index(project_root: Path) -> None:
    mgr = ConfigManager(project_root)
    cfg = {"checklist": {"steps": [{"id": "a"}]}, "tags": ["x"]}
    mgr._set_nested(cfg, mgr._parse_env_key("tags__APPEND", strict=True), "y")
    mgr._set_nested(cfg, mgr._parse_env_key("tags__0", strict=True), "z")
    assert cfg["tags"] == ["z", "y"]


def test_coerce_type(project_root: Path) -> None:
    mgr = ConfigManager(project_root)
    assert mgr._coerce_type("False") is False
    assert mgr._coerce_type("42") == 42
    assert mgr._coerce_type("1.5") == 1.5
    assert mgr._coerce_type('{"a": 1}') == {"a": 1}
    assert mgr._coerce_type(" plain ") == "plain"


def test_malformed_env_key_fails_closed(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRADEFLOW_logging____level", "DEBUG")
    with pytest.raises(ConfigError):
        ConfigManager(project_root).load_config(validate=True)


def test_project_root_env_is_not_an_override(project_root: Path) -> None:
    cfg = ConfigManager(project_root).load_config()
    assert "project" not in cfg
    assert "project_root" not in cfg


def test_invalid_yaml_raises_config_error(project_root: Path) -> None:
    (project_root / ".tradeflow" / "config" / "broken.yaml").write_text("checklist: [\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        ConfigManager(project_root).load_config()


def test_schema_violation_raises(project_root: Path) -> None:
    write_project_config(
        project_root,
        "checklist",
        {"checklist": {"steps": [{"id": "a", "requires": ["b"]}]}},
    )
    with pytest.raises(ConfigValidationError) as exc:
        ConfigManager(project_root).load_config(validate=True)
    assert isinstance(exc.value, SchemaValidationError)
    assert exc.value.context["schema"] == "config/config.schema.yaml"

    # Unvalidated loads still succeed so tooling can report every problem.
    raw = ConfigManager(project_root).load_config(validate=False)
    assert raw["checklist"]["steps"][0]["requires"] == ["b"]


def test_validate_payload_safe_lists_errors() -> None:
    errors = validate_payload_safe(
        {"checklist": {"steps": "nope"}, "logging": {"level": "LOUD"}},
        "config/config.schema",
    )
    assert len(errors) == 2
    assert any(e.startswith("checklist.steps:") for e in errors)
    assert any(e.startswith("logging.level:") for e in errors)


def test_project_schema_overrides_bundled(project_root: Path) -> None:
    schema_dir = project_root / ".tradeflow" / "schemas" / "config"
    schema_dir.mkdir(parents=True)
    (schema_dir / "config.schema.yaml").write_text("type: object\ntitle: custom\n", encoding="utf-8")

    assert load_schema("config/config.schema.yaml", repo_root=project_root)["title"] == "custom"
    assert load_schema("config/config.schema.yaml")["title"] == "Tradeflow configuration"


def test_missing_schema_raises_file_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        load_schema("config/missing.schema.yaml")


def test_config_is_cached_until_project_files_change(project_root: Path) -> None:
    first = get_cached_config(project_root)
    assert is_cached(project_root)
    assert get_cached_config(project_root) is first

    write_project_config(project_root, "logging", {"logging": {"level": "ERROR"}})
    second = get_cached_config(project_root)
    assert second is not first
    assert second["logging"]["level"] == "ERROR"


def test_env_change_invalidates_cache(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_cached_config(project_root)
    monkeypatch.setenv("TRADEFLOW_logging__level", "INFO")
    assert get_cached_config(project_root) is not first
    assert get_cached_config(project_root)["logging"]["level"] == "INFO"


def test_bundled_data_path_points_into_package() -> None:
    assert (get_data_path("config") / "checklist.yaml").exists()
    assert get_data_path("schemas", "config/config.schema.yaml").exists()
