from __future__ import annotations

from pathlib import Path

import pytest

from helpers.io_utils import write_project_config
from tradeflow.core.checklist import Step, build_registry, build_state_machine
from tradeflow.core.config import ChecklistConfig, DisplayConfig, LoggingConfig
from tradeflow.core.exceptions import ConfigError, CyclicDependencyError, UnknownDependencyError


def test_checklist_config_from_bundled_defaults(project_root: Path) -> None:
    cfg = ChecklistConfig(repo_root=project_root)
    assert cfg.steps[0] == Step("htf")
    assert cfg.steps[2] == Step("entry-zone", depends_on=("htf", "structure"))
    assert cfg.strict_references is True
    assert cfg.cascade_uncheck is False


def test_checklist_config_defaults_when_flags_missing() -> None:
    cfg = ChecklistConfig(config={"checklist": {"steps": [{"id": "a"}]}})
    assert cfg.steps == (Step("a"),)
    assert cfg.strict_references is True
    assert cfg.cascade_uncheck is False


def test_checklist_config_rejects_entries_without_id() -> None:
    cfg = ChecklistConfig(config={"checklist": {"steps": [{"dependsOn": ["a"]}]}})
    with pytest.raises(ConfigError):
        _ = cfg.steps


def test_build_registry_from_bundled_config(project_root: Path) -> None:
    registry = build_registry(repo_root=project_root)
    assert len(registry) == 7
    assert registry.dependencies_of("improvement") == frozenset(
        {"htf", "structure", "entry-zone", "entry", "risk", "analysis"}
    )


def test_build_registry_rejects_cycles() -> None:
    config = {
        "checklist": {
            "steps": [{"id": "a", "dependsOn": ["b"]}, {"id": "b", "dependsOn": ["a"]}],
        }
    }
    with pytest.raises(CyclicDependencyError):
        build_registry(config)


def test_build_registry_tolerant_mode() -> None:
    config = {
        "checklist": {
            "strictReferences": False,
            "steps": [{"id": "a", "dependsOn": ["ghost"]}],
        }
    }
    assert build_registry(config).unknown_references() == {"a": ("ghost",)}
    config["checklist"]["strictReferences"] = True
    with pytest.raises(UnknownDependencyError):
        build_registry(config)


def test_build_state_machine_honours_cascade_flag(project_root: Path) -> None:
    write_project_config(project_root, "checklist", {"checklist": {"cascadeUncheck": True}})
    machine = build_state_machine(repo_root=project_root)
    assert machine.cascade_uncheck is True
    machine.check_all()
    machine.toggle("structure")
    assert machine.completed_count() == 1


def test_display_config_step_metadata(project_root: Path) -> None:
    display = DisplayConfig(repo_root=project_root)
    htf = display.step("htf")
    assert htf.subtitle == "Daily/4H"
    assert htf.label == "Том зураг"
    assert htf.icon == "trending-up"
    assert len(htf.details) == 4
    assert display.blocked_hint_prefix == "⚠️ Эхлээд:"


def test_display_label_falls_back_to_title_then_id(project_root: Path) -> None:
    display = DisplayConfig(repo_root=project_root)
    assert display.step("improvement").label == "7. Тогтмол сайжруулалт"
    unknown = display.step("ghost")
    assert unknown.title == "ghost"
    assert unknown.label == "ghost"


def test_display_config_defaults_without_section() -> None:
    display = DisplayConfig(config={"checklist": {"steps": []}})
    assert display.title == "Checklist"
    assert display.progress_template == "{completed}/{total} ({percent}%)"
    assert display.blocked_hint_prefix == "Requires:"
    assert display.completion_message == ""


def test_logging_config_resolves_relative_file(project_root: Path) -> None:
    write_project_config(project_root, "logging", {"logging": {"level": "INFO", "file": "logs/tradeflow.log"}})
    cfg = LoggingConfig(repo_root=project_root)
    assert cfg.level == "INFO"
    assert cfg.file == project_root / "logs" / "tradeflow.log"


def test_logging_config_defaults(project_root: Path) -> None:
    cfg = LoggingConfig(repo_root=project_root)
    assert cfg.level == "WARNING"
    assert cfg.file is None


def test_logging_level_is_uppercased() -> None:
    assert LoggingConfig(config={"logging": {"level": "debug"}}).level == "DEBUG"


def test_step_titles_pass_schema_and_reach_steps(project_root: Path) -> None:
    write_project_config(
        project_root,
        "checklist",
        {"checklist": {"steps": [{"id": "plan", "title": "Write the plan"}, {"id": "execute", "dependsOn": ["plan"]}]}},
    )
    cfg = ChecklistConfig(repo_root=project_root)
    assert cfg.steps == (
        Step("plan", title="Write the plan"),
        Step("execute", depends_on=("plan",)),
    )
