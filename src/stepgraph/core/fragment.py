"""Reusable, named pieces of a state machine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from stepgraph.core.chain import Chain, Chainable
from stepgraph.core.logging_config import get_logger
from stepgraph.core.states.state import State

if TYPE_CHECKING:
    from stepgraph.core.states.parallel import Parallel

logger = get_logger(__name__)


class StateMachineFragment(ABC):
    """A subgraph with one entry state and any number of exits.

    Subclasses build their states in ``__init__`` and expose the entry as
    ``start_state`` and the dangling exits as ``end_states``.

    Example:
        >>> class Approval(StateMachineFragment):
        ...     def __init__(self, id):
        ...         super().__init__(id)
        ...         ask = Pass("Ask")
        ...         self._start = ask
        ...         self._ends = [ask]
        ...     @property
        ...     def start_state(self):
        ...         return self._start
        ...     @property
        ...     def end_states(self):
        ...         return self._ends
        >>> Approval("First").prefix_states().start_state.state_name
        'First: Ask'
    """

    def __init__(self, id: str) -> None:
        if not id:
            raise ValueError("Fragment id is required")
        self.id = id

    @property
    @abstractmethod
    def start_state(self) -> State:
        """Entry state of the fragment."""

    @property
    @abstractmethod
    def end_states(self) -> list[Any]:
        """States (or stand-ins) that can be continued with ``next()``."""

    def next(self, target: Chainable) -> Chain:
        """Link every exit of this fragment to ``target``."""
        return Chain.start(self).next(target)

    def prefix_states(self, prefix: str | None = None) -> StateMachineFragment:
        """Prepend ``prefix`` to the name of every state in the fragment.

        Covers states reached through Catch handlers and states nested in
        Parallel branches or Map processors. Call it once, before the
        fragment is rendered.

        Args:
            prefix: Text to prepend. Defaults to ``"{id}: "``.

        Returns:
            self, for chaining.
        """
        prefix = f"{self.id}: " if prefix is None else prefix
        states = State.find_reachable_states(
            self.start_state, include_error_handlers=True, include_branches=True
        )
        for state in states:
            state.add_prefix(prefix)
        logger.debug("prefixed %d states of fragment %s with %r", len(states), self.id, prefix)
        return self

    def to_single_state(
        self,
        state_name: str | None = None,
        prefix_states: str | None = None,
        **props: Any,
    ) -> Parallel:
        """Wrap the fragment in a one-branch Parallel state.

        The inner states are prefixed first so the fragment can be wrapped
        more than once in the same definition. The Parallel state itself
        is not prefixed.

        Args:
            state_name: Id of the Parallel state. Defaults to the fragment id.
            prefix_states: Prefix for the inner states. Defaults to
                ``"{state_name}: "``.
            **props: Extra Parallel options (comment, result_path, ...).
        """
        from stepgraph.core.states.parallel import Parallel

        state_id = state_name or self.id
        self.prefix_states(prefix_states if prefix_states is not None else f"{state_id}: ")
        return Parallel(state_id, **props).branch(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"
