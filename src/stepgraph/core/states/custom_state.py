"""CustomState: drop a raw state declaration into a definition."""

from __future__ import annotations

import copy
from typing import Any

from stepgraph.core.logging_config import get_logger
from stepgraph.core.policy import merge_rules
from stepgraph.core.states.state import ErrorHandling, State

logger = get_logger(__name__)


class CustomState(ErrorHandling, State):
    """A state given as its Amazon States Language JSON.

    ``Next``/``End`` come from chaining and replace any in the declaration;
    every other field is rendered exactly as given. Retriers and catchers
    added with ``add_retry()``/``add_catch()`` are placed before any
    ``Retry``/``Catch`` entries already in ``state_json``.

    Args:
        id: State id.
        state_json: The raw declaration, e.g. ``{"Type": "Task", "Resource": ...}``.
        state_name: Rendered name, defaults to id.
    """

    def __init__(self, id: str, *, state_json: dict[str, Any], state_name: str | None = None) -> None:
        super().__init__(id, state_name=state_name)
        self.state_json = copy.deepcopy(state_json)

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {
            key: value for key, value in self.state_json.items() if key not in ("Next", "End")
        }
        rendered.update(self._render_next_end())
        programmatic = self._render_retry_catch()

        declared_retry = self.state_json.get("Retry")
        if self.retries and isinstance(declared_retry, list):
            logger.warning(
                "CustomState constructs can configure state retries using the stateJson or "
                "add_retry(); state %s uses both, added retriers are evaluated first",
                self.state_name,
            )
        if self.retries:
            rendered["Retry"] = merge_rules(
                programmatic["Retry"], declared_retry if isinstance(declared_retry, list) else []
            )

        declared_catch = self.state_json.get("Catch")
        if self.catches and isinstance(declared_catch, list):
            logger.warning(
                "CustomState constructs can configure state catchers using the stateJson or "
                "add_catch(); state %s uses both, added catchers are evaluated first",
                self.state_name,
            )
        if self.catches:
            rendered["Catch"] = merge_rules(
                programmatic["Catch"], declared_catch if isinstance(declared_catch, list) else []
            )

        return rendered
