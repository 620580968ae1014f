"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from stepgraph.core import Bucket, Chainable, StateGraph, TaskStateBase
from stepgraph.core.types import PolicyStatement


class FakeTask(TaskStateBase):
    """Task rendering a fixed resource, with optional parameters and policies."""

    def __init__(
        self,
        id: str,
        *,
        parameters: dict[str, Any] | None = None,
        policies: list[PolicyStatement] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.task_parameters = parameters
        self.task_policies = list(policies or [])

    def _render_task(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Resource": "resource"}
        if self.task_parameters is not None:
            rendered["Parameters"] = self.task_parameters
        return rendered


def render_chainable(chainable: Chainable) -> dict[str, Any]:
    return StateGraph(chainable.start_state, "Test Graph").to_graph_json()


@pytest.fixture
def fake_task():
    """The FakeTask class: ``fake_task("Task1")`` builds a task."""
    return FakeTask


@pytest.fixture
def render():
    """Render a state, chain or fragment as a top level graph."""
    return render_chainable


@pytest.fixture
def bucket():
    """A bucket in the default partition."""
    return Bucket("test-bucket")


@pytest.fixture
def workflow_file(tmp_path):
    """Write a definition file and return its path."""

    def write(source: str, name: str = "workflow.py"):
        path = tmp_path / name
        path.write_text(source)
        return path

    return write
