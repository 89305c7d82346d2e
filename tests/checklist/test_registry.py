from __future__ import annotations

import logging

import pytest

from tradeflow.core.checklist import Step, StepRegistry
from tradeflow.core.exceptions import (
    CyclicDependencyError,
    DuplicateStepError,
    RegistryError,
    UnknownDependencyError,
)


def test_all_steps_keeps_declaration_order(chain_registry: StepRegistry) -> None:
    assert chain_registry.all_steps() == (
        "htf",
        "structure",
        "entry-zone",
        "entry",
        "risk",
        "analysis",
        "improvement",
    )
    assert len(chain_registry) == 7
    assert list(chain_registry) == list(chain_registry.all_steps())


def test_dependencies_of_known_leaf_and_unknown(chain_registry: StepRegistry) -> None:
    assert chain_registry.dependencies_of("entry-zone") == frozenset({"htf", "structure"})
    assert chain_registry.dependencies_of("htf") == frozenset()
    assert chain_registry.dependencies_of("nope") == frozenset()


def test_ordered_dependencies_drop_repeats() -> None:
    reg = StepRegistry([Step("a"), Step("b"), Step("c", depends_on=("b", "a", "b"))])
    assert reg.ordered_dependencies_of("c") == ("b", "a")


def test_dependents_and_transitive_dependents(chain_registry: StepRegistry) -> None:
    assert chain_registry.dependents_of("analysis") == frozenset({"improvement"})
    assert chain_registry.dependents_of("improvement") == frozenset()
    assert chain_registry.dependents_of("unknown") == frozenset()
    assert chain_registry.transitive_dependents_of("entry") == ("risk", "analysis", "improvement")


def test_duplicate_ids_rejected() -> None:
    with pytest.raises(DuplicateStepError) as exc:
        StepRegistry([Step("a"), Step("a")])
    assert exc.value.context["duplicates"] == ["a"]


def test_self_dependency_rejected() -> None:
    with pytest.raises(CyclicDependencyError):
        StepRegistry([Step("a", depends_on=("a",))])


def test_cycle_rejected_and_reports_stuck_steps() -> None:
    with pytest.raises(CyclicDependencyError) as exc:
        StepRegistry.from_mapping(["a", "b", "c"], {"a": ["c"], "b": ["a"], "c": ["b"]})
    assert sorted(exc.value.context["stuck"]) == ["a", "b", "c"]


def test_registry_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        StepRegistry([Step("a"), Step("a")])
    assert issubclass(UnknownDependencyError, RegistryError)


def test_unknown_reference_rejected_in_strict_mode() -> None:
    with pytest.raises(UnknownDependencyError) as exc:
        StepRegistry([Step("a", depends_on=("ghost",))])
    assert exc.value.context == {"step": "a", "missing": ["ghost"]}


def test_unknown_reference_tolerated_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING, logger="tradeflow")
    reg = StepRegistry([Step("a"), Step("b", depends_on=("a", "ghost"))], strict=False)

    assert reg.unknown_references() == {"b": ("ghost",)}
    assert reg.dependencies_of("b") == frozenset({"a", "ghost"})
    assert "ghost" in caplog.text


def test_topo_levels_follow_prerequisites() -> None:
    reg = StepRegistry.from_mapping(
        ["d", "a", "b", "c"],
        {"d": ["b", "c"], "b": ["a"], "c": ["a"]},
    )
    assert reg.topo_levels() == [["a"], ["b", "c"], ["d"]]


def test_chain_levels_are_one_step_each(chain_registry: StepRegistry) -> None:
    levels = chain_registry.topo_levels()
    assert [len(level) for level in levels] == [1] * 7
    assert [level[0] for level in levels] == list(chain_registry.all_steps())


def test_empty_registry() -> None:
    reg = StepRegistry([])
    assert reg.all_steps() == ()
    assert reg.topo_levels() == []
    assert "htf" not in reg
