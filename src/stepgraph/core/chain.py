"""Chains: a start state plus the dangling ends that can be continued.

Anything with ``id``, ``start_state`` and ``end_states`` can take part in
chaining (a State, a Chain, a StateMachineFragment). ``end_states`` holds
objects with a ``next()`` method; usually states, but Choice.afterwards()
can also contribute a stand-in that sets the Choice's default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from stepgraph.core.errors import ChainingError

if TYPE_CHECKING:
    from stepgraph.core.states.parallel import Parallel
    from stepgraph.core.states.state import State


class Nextable(Protocol):
    def next(self, target: Chainable) -> Chain: ...


@runtime_checkable
class Chainable(Protocol):
    """Something that can be the target of ``next()``."""

    id: str

    @property
    def start_state(self) -> State: ...

    @property
    def end_states(self) -> list[Any]: ...


class Chain:
    """A sequence of linked states.

    Chains are views: they record the start and the current ends but the
    links themselves live on the states.

    Example:
        >>> chain = Chain.start(validate).next(enrich).next(store)
        >>> chain.start_state is validate
        True
    """

    def __init__(self, start_state: State, end_states: list[Nextable], last_added: Chainable) -> None:
        self.start_state = start_state
        self.end_states = list(end_states)
        self.last_added = last_added
        self.id = f"{start_state.id}...{last_added.id}"

    @staticmethod
    def start(state: Chainable) -> Chain:
        """Begin a chain at ``state``."""
        return Chain(state.start_state, state.end_states, state)

    @staticmethod
    def sequence(start: Chainable, next: Chainable) -> Chain:
        """A chain from ``start`` to ``next``'s ends; does not link them."""
        return Chain(start.start_state, next.end_states, next)

    @staticmethod
    def custom(start_state: State, end_states: list[Nextable], last_added: Chainable) -> Chain:
        """A chain with explicitly chosen ends."""
        return Chain(start_state, end_states, last_added)

    def next(self, target: Chainable) -> Chain:
        """Link every end of this chain to ``target``.

        Raises:
            ChainingError: If the chain has no ends (its last state is terminal).
        """
        if not self.end_states:
            raise ChainingError(
                f"Cannot add to chain: last state in chain ({self.last_added.id}) does not allow it"
            )

        for end in self.end_states:
            end.next(target)

        return Chain(self.start_state, target.end_states, target)

    def to_single_state(self, id: str, **props: Any) -> Parallel:
        """Wrap the whole chain in a one-branch Parallel state.

        State names inside the chain are not changed.

        Args:
            id: Id of the Parallel state.
            **props: Extra Parallel options (comment, result_path, ...).
        """
        from stepgraph.core.states.parallel import Parallel

        return Parallel(id, **props).branch(self)

    def __repr__(self) -> str:
        return f"Chain({self.id!r})"
