"""Choice state: pick the next state by evaluating conditions in order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stepgraph.core.chain import Chain, Chainable
from stepgraph.core.condition import Condition
from stepgraph.core.errors import ChainingError
from stepgraph.core.states.state import State
from stepgraph.core.types import StateType

if TYPE_CHECKING:
    from stepgraph.core.chain import Nextable


@dataclass
class ChoiceRule:
    """One ``when`` branch of a Choice."""

    condition: Condition
    next: State = field(repr=False)
    comment: str | None = None

    def render(self) -> dict[str, Any]:
        rendered = {**self.condition.render_condition(), "Next": self.next.state_name}
        if self.comment is not None:
            rendered["Comment"] = self.comment
        return rendered


class Choice(State):
    """Branch on the state input.

    A Choice cannot be continued with ``next()`` directly; use
    ``afterwards()`` to continue from the ends of its branches.

    Example:
        >>> choice = (
        ...     Choice("Route")
        ...     .when(Condition.string_equals("$.kind", "refund"), refund)
        ...     .otherwise(charge)
        ... )
        >>> choice.afterwards().next(notify)
    """

    nextable = False

    def __init__(
        self,
        id: str,
        *,
        state_name: str | None = None,
        comment: str | None = None,
        input_path: str | None = None,
        output_path: str | None = None,
    ) -> None:
        super().__init__(
            id,
            state_name=state_name,
            comment=comment,
            input_path=input_path,
            output_path=output_path,
        )
        self.choices: list[ChoiceRule] = []
        self.default: State | None = None

    def when(self, condition: Condition, next: Chainable, comment: str | None = None) -> Choice:
        """Go to ``next`` if ``condition`` matches (and no earlier rule did)."""
        self.choices.append(ChoiceRule(condition, next.start_state, comment))
        return self

    def otherwise(self, default: Chainable) -> Choice:
        """Go to ``default`` when no rule matches."""
        if self.default is not None:
            raise ChainingError(f"Choice '{self.id}' already has a default transition")
        self.default = default.start_state
        return self

    def afterwards(self, include_otherwise: bool = False) -> Chain:
        """A chain whose ends are the open ends of every branch.

        Branches ending in a terminal state (Fail, Succeed) are skipped.

        Args:
            include_otherwise: Also treat the missing default as an open
                end, so the next state becomes the default.

        Raises:
            ChainingError: If include_otherwise is set but a default exists.
        """
        ends: list[Nextable] = [
            state for state in State.find_reachable_end_states(self) if state.nextable
        ]
        if include_otherwise:
            if self.default is not None:
                raise ChainingError(
                    f"'include_otherwise' set but Choice state {self.id} already has an 'otherwise' transition"
                )
            ends.append(_DefaultAsNext(self))
        return Chain.custom(self, ends, self)

    def outgoing_transitions(self, include_error_handlers: bool = True) -> list[State]:
        out: list[State] = []
        if self.default is not None:
            out.append(self.default)
        out.extend(rule.next for rule in self.choices)
        return out

    def validate_state(self) -> list[str]:
        if not self.choices:
            return [f"Choice '{self.state_name}' must have at least one 'when' condition"]
        return []

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.CHOICE.value}
        rendered.update(self._render_comment())
        rendered.update(self._render_input_output())
        rendered["Choices"] = [rule.render() for rule in self.choices]
        if self.default is not None:
            rendered["Default"] = self.default.state_name
        return rendered


class _DefaultAsNext:
    """Chain end that turns ``next(x)`` into ``choice.otherwise(x)``."""

    def __init__(self, choice: Choice) -> None:
        self.choice = choice

    def next(self, target: Chainable) -> Chain:
        self.choice.otherwise(target)
        return Chain.sequence(self.choice, target)
