"""Pass state: forwards its input, optionally injecting data."""

from __future__ import annotations

from typing import Any

from stepgraph.core.fields import Result
from stepgraph.core.states.state import State
from stepgraph.core.types import StateType


class Pass(State):
    """A state that does no work.

    Useful as a placeholder, or to reshape data with ``parameters``,
    ``result`` and ``result_path``.

    Args:
        id: State id.
        result: Literal output of the state.
        **kwargs: state_name, comment, input_path, output_path,
            result_path, parameters.
    """

    def __init__(self, id: str, *, result: Result | None = None, **kwargs: Any) -> None:
        super().__init__(id, **kwargs)
        self.result = result

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.PASS.value}
        rendered.update(self._render_comment())
        rendered.update(self._render_input_output())
        rendered.update(self._render_parameters())
        if self.result is not None:
            rendered["Result"] = self.result.value
        rendered.update(self._render_result_path())
        rendered.update(self._render_next_end())
        return rendered
