"""Base class for all states in a workflow graph.

A State holds:
- identity: ``id`` and the rendered ``state_name`` (defaults to id)
- routing: at most one ``next`` state
- error handling: ordered Retry and Catch rules

Subclasses implement ``to_state_json()``. Composite states (Parallel, Map)
expose their nested graphs through ``child_graphs()`` so reachability,
validation and prefixing can see inside them without knowing their types.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, Any

from stepgraph.core.errors import ChainingError
from stepgraph.core.fields import render_object, render_path_fields
from stepgraph.core.policy import CatchProps, CatchRule, RetryProps

if TYPE_CHECKING:
    from stepgraph.core.chain import Chain, Chainable
    from stepgraph.core.state_graph import StateGraph
    from stepgraph.core.types import PolicyStatement


class State(ABC):
    """A node of a state machine definition.

    Args:
        id: Identifier of the state, used in error messages and as the
            default state name.
        state_name: Name the state is rendered under. Must be unique in
            the whole definition.
        comment: Human readable description.
        input_path: Selects the part of the input the state works on.
        output_path: Selects the part of the output passed on.
        result_path: Where the state's result is placed in its input.
        parameters: Payload template passed as the effective input.
        result_selector: Payload template applied to the raw result.
    """

    # False for states that end a path (Succeed, Fail) or fan out (Choice).
    nextable = True

    def __init__(
        self,
        id: str,
        *,
        state_name: str | None = None,
        comment: str | None = None,
        input_path: str | None = None,
        output_path: str | None = None,
        result_path: str | None = None,
        parameters: dict[str, Any] | None = None,
        result_selector: dict[str, Any] | None = None,
    ) -> None:
        if not id:
            raise ValueError("State id is required")

        self.id = id
        self.state_name = state_name or id
        self.comment = comment
        self.input_path = input_path
        self.output_path = output_path
        self.result_path = result_path
        self.parameters = parameters
        self.result_selector = result_selector

        self._next: State | None = None
        self.retries: list[RetryProps] = []
        self.catches: list[CatchRule] = []

    # ------------------------------------------------------------------
    # Chainable protocol
    # ------------------------------------------------------------------

    @property
    def start_state(self) -> State:
        return self

    @property
    def end_states(self) -> list[State]:
        return [self] if self.nextable else []

    @property
    def next_state(self) -> State | None:
        """The state that runs after this one, if any."""
        return self._next

    def next(self, target: Chainable) -> Chain:
        """Continue with ``target`` after this state.

        Returns:
            A Chain starting at this state and ending at target's end states.

        Raises:
            ChainingError: If this state is terminal or already has a next state.
        """
        from stepgraph.core.chain import Chain

        if not self.nextable:
            raise ChainingError(
                f"State '{self.id}' is a {type(self).__name__} state and cannot be followed by another state"
            )
        self._make_next(target.start_state)
        return Chain.sequence(self, target)

    def _make_next(self, target: State) -> None:
        if self._next is not None:
            raise ChainingError(f"State '{self.id}' already has a next state")
        self._next = target

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------

    def _add_retry(self, props: RetryProps | None = None, **kwargs: Any) -> None:
        self.retries.append(props if props is not None else RetryProps(**kwargs))

    def _add_catch(self, handler: Chainable, props: CatchProps | None = None, **kwargs: Any) -> None:
        props = props if props is not None else CatchProps(**kwargs)
        self.catches.append(CatchRule(handler.start_state, props))

    # ------------------------------------------------------------------
    # Graph structure
    # ------------------------------------------------------------------

    def outgoing_transitions(self, include_error_handlers: bool = True) -> list[State]:
        """States this state can move to directly, in a stable order.

        Order: next, then catch handlers. Choice adds its default and its
        branch targets between the two.
        """
        out: list[State] = []
        if self._next is not None:
            out.append(self._next)
        if include_error_handlers:
            out.extend(rule.handler for rule in self.catches)
        return out

    def child_graphs(self) -> list[StateGraph]:
        """Nested graphs owned by this state (Parallel branches, Map processors)."""
        return []

    @property
    def policy_statements(self) -> list[PolicyStatement]:
        """Permissions this state needs from the state machine role."""
        return []

    def add_prefix(self, prefix: str) -> None:
        """Prepend ``prefix`` to this state's name."""
        self.state_name = f"{prefix}{self.state_name}"

    @staticmethod
    def find_reachable_states(
        start: State,
        include_error_handlers: bool = True,
        include_branches: bool = False,
    ) -> list[State]:
        """Every state reachable from ``start``, in order of first discovery.

        Breadth-first over an explicit queue with a visited set, so cycles
        (``a.next(b).next(a)``) terminate and depth does not grow the stack.

        Args:
            start: State to start from. Always the first element.
            include_error_handlers: Follow Catch handlers.
            include_branches: Also descend into nested graphs of composite
                states. Their start states are queued after the state's
                regular transitions.

        Returns:
            Reachable states; states not reachable from start are excluded.
        """
        visited: set[State] = set()
        found: list[State] = []
        queue: deque[State] = deque([start])

        while queue:
            state = queue.popleft()
            if state in visited:
                continue
            visited.add(state)
            found.append(state)

            queue.extend(state.outgoing_transitions(include_error_handlers))
            if include_branches:
                queue.extend(graph.start_state for graph in state.child_graphs())

        return found

    @staticmethod
    def find_reachable_end_states(start: State, include_error_handlers: bool = False) -> list[State]:
        """Reachable states that have no outgoing transition."""
        return [
            state
            for state in State.find_reachable_states(start, include_error_handlers)
            if not state.outgoing_transitions(include_error_handlers)
        ]

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    @abstractmethod
    def to_state_json(self) -> dict[str, Any]:
        """Render this state. Must not modify the state."""

    def validate_state(self) -> list[str]:
        """Problems that make this state unrenderable. Empty when valid."""
        return []

    def _render_next_end(self) -> dict[str, Any]:
        if self._next is not None:
            return {"Next": self._next.state_name}
        return {"End": True}

    def _render_comment(self) -> dict[str, Any]:
        return {"Comment": self.comment} if self.comment is not None else {}

    def _render_input_output(self) -> dict[str, Any]:
        return render_path_fields({"InputPath": self.input_path, "OutputPath": self.output_path})

    def _render_result_path(self) -> dict[str, Any]:
        return render_path_fields({"ResultPath": self.result_path})

    def _render_parameters(self) -> dict[str, Any]:
        if self.parameters is None:
            return {}
        return {"Parameters": render_object(self.parameters)}

    def _render_result_selector(self) -> dict[str, Any]:
        if self.result_selector is None:
            return {}
        return {"ResultSelector": render_object(self.result_selector)}

    def _render_retry_catch(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        if self.retries:
            rendered["Retry"] = [retry.render() for retry in self.retries]
        if self.catches:
            rendered["Catch"] = [rule.render() for rule in self.catches]
        return rendered

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.state_name!r})"


class ErrorHandling:
    """Public ``add_retry`` / ``add_catch`` for states that can fail.

    Mixed into Task, Parallel, Map and CustomState.
    """

    def add_retry(self, props: RetryProps | None = None, **kwargs: Any):
        """Retry this state when it fails with matching errors.

        Accepts a RetryProps or its fields as keyword arguments.

        Returns:
            self, for chaining.
        """
        self._add_retry(props, **kwargs)  # type: ignore[attr-defined]
        return self

    def add_catch(self, handler: Chainable, props: CatchProps | None = None, **kwargs: Any):
        """Route matching errors to ``handler``.

        Chaining with ``next()`` never continues from a handler.

        Returns:
            self, for chaining.
        """
        self._add_catch(handler, props, **kwargs)  # type: ignore[attr-defined]
        return self
