"""Parallel state: run branches concurrently and collect their outputs."""

from __future__ import annotations

from typing import Any

from stepgraph.core.chain import Chainable
from stepgraph.core.state_graph import StateGraph
from stepgraph.core.states.state import ErrorHandling, State
from stepgraph.core.types import StateType


class Parallel(ErrorHandling, State):
    """Run several branches with the same input.

    Each branch is its own graph: a state may only be used in one branch,
    and a branch may not jump into another branch. State names are unique
    across all branches.

    Args:
        id: State id.
        **kwargs: state_name, comment, input_path, output_path,
            result_path, parameters, result_selector.
    """

    def __init__(self, id: str, **kwargs: Any) -> None:
        super().__init__(id, **kwargs)
        self.branches: list[StateGraph] = []

    def branch(self, *branches: Chainable) -> Parallel:
        """Add one graph per chainable."""
        for chainable in branches:
            description = f"Parallel '{self.state_name}' branch {len(self.branches) + 1}"
            self.branches.append(StateGraph(chainable.start_state, description))
        return self

    def child_graphs(self) -> list[StateGraph]:
        return list(self.branches)

    def validate_state(self) -> list[str]:
        if not self.branches:
            return ["Parallel must have at least one branch"]
        return []

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.PARALLEL.value}
        rendered.update(self._render_comment())
        rendered.update(self._render_result_path())
        rendered.update(self._render_input_output())
        rendered.update(self._render_parameters())
        rendered.update(self._render_result_selector())
        rendered.update(self._render_retry_catch())
        rendered["Branches"] = [graph.to_graph_json() for graph in self.branches]
        rendered.update(self._render_next_end())
        return rendered
