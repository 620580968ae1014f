"""StateGraph: validation and rendering of a set of reachable states.

A graph is identified by its start state. The top level definition is one
graph; every Parallel branch and Map item processor is another graph nested
inside the state that owns it.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from stepgraph.core.duration import Duration
from stepgraph.core.errors import GraphValidationError
from stepgraph.core.logging_config import get_logger
from stepgraph.core.states.state import State
from stepgraph.core.types import PolicyStatement

logger = get_logger(__name__)


class StateGraph:
    """The states reachable from one start state.

    Pure with respect to the states: building, validating and rendering a
    graph never modifies a state, so ``to_graph_json()`` can be called any
    number of times with identical results.

    Example:
        >>> graph = StateGraph(Chain.start(a).next(b).start_state, "State Machine definition")
        >>> graph.validate()
        []
        >>> graph.to_graph_json()["StartAt"]
        'a'
    """

    def __init__(self, start_state: State, graph_description: str) -> None:
        self.start_state = start_state
        self.graph_description = graph_description
        self.timeout: Duration | None = None

    @property
    def states(self) -> list[State]:
        """States in this graph only; nested graphs are not included."""
        return State.find_reachable_states(self.start_state, include_error_handlers=True)

    def all_graphs(self) -> list[StateGraph]:
        """This graph and every graph nested in it, outermost first."""
        graphs: list[StateGraph] = []
        pending: deque[StateGraph] = deque([self])
        while pending:
            graph = pending.popleft()
            if graph in graphs:
                continue
            graphs.append(graph)
            for state in graph.states:
                pending.extend(state.child_graphs())
        return graphs

    def validate(self) -> list[str]:
        """Check the graph and everything nested in it.

        Checks for:
        - States used in more than one graph (e.g. a jump between two
          Parallel branches)
        - Two distinct states with the same state name anywhere in the
          hierarchy
        - Property errors reported by each state's ``validate_state()``

        Returns:
            List of error messages (empty if valid).
        """
        errors: list[str] = []
        owners: dict[State, StateGraph] = {}
        names: dict[str, tuple[State, StateGraph]] = {}
        pending: deque[StateGraph] = deque([self])

        while pending:
            graph = pending.popleft()
            for state in graph.states:
                owner = owners.get(state)
                if owner is not None:
                    if owner is not graph:
                        errors.append(
                            f"Trying to use state '{state.state_name}' in {graph}, but is already "
                            f"in {owner}. Every state can only be used in one graph."
                        )
                    continue
                owners[state] = graph

                existing = names.get(state.state_name)
                if existing is not None:
                    errors.append(
                        f"State with name '{state.state_name}' occurs in both {existing[1]} and "
                        f"{graph}. All states must have unique names."
                    )
                else:
                    names[state.state_name] = (state, graph)

                errors.extend(state.validate_state())
                pending.extend(state.child_graphs())

        return errors

    def to_graph_json(self) -> dict[str, Any]:
        """Render ``{StartAt, States, TimeoutSeconds?}``.

        Raises:
            GraphValidationError: If ``validate()`` reports any error.
        """
        errors = self.validate()
        if errors:
            raise GraphValidationError(errors)

        states = self.states
        logger.debug("rendering %s with %d states", self, len(states))

        rendered: dict[str, Any] = {
            "StartAt": self.start_state.state_name,
            "States": {state.state_name: state.to_state_json() for state in states},
        }
        if self.timeout is not None:
            rendered["TimeoutSeconds"] = self.timeout.to_seconds()
        return rendered

    @property
    def policy_statements(self) -> list[PolicyStatement]:
        """Permissions needed by states in this graph and nested graphs, without duplicates."""
        statements: list[PolicyStatement] = []
        for graph in self.all_graphs():
            for state in graph.states:
                for statement in state.policy_statements:
                    if statement not in statements:
                        statements.append(statement)
        return statements

    def __str__(self) -> str:
        return self.graph_description

    def __repr__(self) -> str:
        return f"StateGraph({self.graph_description!r}, start={self.start_state.state_name!r})"
