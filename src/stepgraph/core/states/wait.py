"""Wait state: pause for a duration or until a point in time."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stepgraph.core.duration import Duration
from stepgraph.core.states.state import State
from stepgraph.core.types import StateType


@dataclass(frozen=True)
class WaitTime:
    """How long a Wait state waits.

    Attributes:
        json: The fragment merged into the rendered state, e.g. ``{"Seconds": 30}``.
    """

    json: dict[str, Any]

    @classmethod
    def duration(cls, duration: Duration) -> WaitTime:
        return cls({"Seconds": duration.to_seconds()})

    @classmethod
    def timestamp(cls, timestamp: str) -> WaitTime:
        """Wait until an ISO 8601 timestamp, e.g. ``2016-03-14T01:59:00Z``."""
        return cls({"Timestamp": timestamp})

    @classmethod
    def seconds_path(cls, path: str) -> WaitTime:
        return cls({"SecondsPath": path})

    @classmethod
    def timestamp_path(cls, path: str) -> WaitTime:
        return cls({"TimestampPath": path})


class Wait(State):
    """Delay the execution.

    Args:
        id: State id.
        time: How long to wait.
        comment: Human readable description.
        state_name: Rendered name, defaults to id.
    """

    def __init__(
        self,
        id: str,
        *,
        time: WaitTime,
        comment: str | None = None,
        state_name: str | None = None,
    ) -> None:
        super().__init__(id, state_name=state_name, comment=comment)
        self.time = time

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.WAIT.value}
        rendered.update(self._render_comment())
        rendered.update(self.time.json)
        rendered.update(self._render_next_end())
        return rendered
