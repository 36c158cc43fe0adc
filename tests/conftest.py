"""Shared fixtures and helpers for tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from ide_bridge.core.extract import StateExtractor
from ide_bridge.core.owner import ModelAccessThread
from ide_bridge.workspace.memory import InMemoryProject, InMemoryWorkspace

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Sample sources
# ---------------------------------------------------------------------------

JS_SOURCE = """\
import { format } from './format';

function greet(name) {
  const message = format('hi ' + name);
  return message;
}

class Greeter {
  hello(who) {
    return greet(who);
  }
}
"""

PY_SOURCE = """\
import os


class Config:
    def load(self, path):
        data = os.path.join(path, "x")
        return data
"""


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def workspace() -> InMemoryWorkspace:
    return InMemoryWorkspace()


@pytest.fixture
def project(workspace: InMemoryWorkspace) -> InMemoryProject:
    return workspace.open_project("demo", "/work/demo")


@pytest.fixture
def extractor(workspace: InMemoryWorkspace) -> StateExtractor:
    return StateExtractor(workspace)


@pytest.fixture
def owner() -> Iterator[ModelAccessThread]:
    thread = ModelAccessThread()
    yield thread
    thread.shutdown()


@pytest.fixture
def js_source() -> str:
    return JS_SOURCE


@pytest.fixture
def py_source() -> str:
    return PY_SOURCE
