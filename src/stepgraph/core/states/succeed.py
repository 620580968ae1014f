"""Succeed state: stop the execution successfully."""

from __future__ import annotations

from typing import Any

from stepgraph.core.states.state import State
from stepgraph.core.types import StateType


class Succeed(State):
    """Terminal state that ends the execution (or branch) with success."""

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

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.SUCCEED.value}
        rendered.update(self._render_comment())
        rendered.update(self._render_input_output())
        return rendered
