import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'tradeflow' without an install
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_tradeflow_caches
from tradeflow.core.checklist import ChecklistStateMachine, StepRegistry

# The seven-step trading chain used by the bundled defaults.
CHAIN_ORDER = ["htf", "structure", "entry-zone", "entry", "risk", "analysis", "improvement"]
CHAIN_DEPS = {step_id: CHAIN_ORDER[:i] for i, step_id in enumerate(CHAIN_ORDER)}


@pytest.fixture(autouse=True)
def _isolate_tradeflow(tmp_path, monkeypatch):
    """Fresh caches and no developer TRADEFLOW_* overrides for every test."""
    for key in list(os.environ):
        if key.startswith("TRADEFLOW_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("TRADEFLOW_PROJECT_ROOT", str(tmp_path))
    reset_tradeflow_caches()
    yield
    reset_tradeflow_caches()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Isolated project with an empty ``.tradeflow/config`` overlay directory."""
    (tmp_path / ".tradeflow" / "config").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def chain_registry() -> StepRegistry:
    return StepRegistry.from_mapping(CHAIN_ORDER, CHAIN_DEPS)


@pytest.fixture
def machine(chain_registry: StepRegistry) -> ChecklistStateMachine:
    return ChecklistStateMachine(chain_registry)
