"""Fail state: stop the execution with an error."""

from __future__ import annotations

from typing import Any

from stepgraph.core.states.state import State
from stepgraph.core.types import StateType

# Intrinsics whose result can be used as an error or cause.
ALLOWED_INTRINSICS = (
    "States.Format",
    "States.JsonToString",
    "States.ArrayGetItem",
    "States.Base64Encode",
    "States.Base64Decode",
    "States.Hash",
    "States.UUID",
)


class Fail(State):
    """Terminal state that ends the execution with an error.

    Error and cause can each be given literally or read from the input
    with a path (or one of the allowed intrinsic functions), but not both.
    Conflicts are reported when the definition is rendered.

    Args:
        id: State id.
        error: Error name.
        error_path: JSON path or intrinsic producing the error name.
        cause: Human readable failure description.
        cause_path: JSON path or intrinsic producing the cause.
        comment: Human readable description.
        state_name: Rendered name, defaults to id.
    """

    nextable = False

    def __init__(
        self,
        id: str,
        *,
        error: str | None = None,
        error_path: str | None = None,
        cause: str | None = None,
        cause_path: str | None = None,
        comment: str | None = None,
        state_name: str | None = None,
    ) -> None:
        super().__init__(id, state_name=state_name, comment=comment)
        self.error = error
        self.error_path = error_path
        self.cause = cause
        self.cause_path = cause_path

    def validate_state(self) -> list[str]:
        errors = []
        if self.error is not None and self.error_path is not None:
            errors.append("Fail state cannot have both error and errorPath")
        if self.cause is not None and self.cause_path is not None:
            errors.append("Fail state cannot have both cause and causePath")

        for field_name, path in (("errorPath", self.error_path), ("causePath", self.cause_path)):
            if path is not None and not _is_allowed_path(path):
                errors.append(
                    f"You must specify a valid intrinsic function in {field_name}. "
                    f"Must be one of {', '.join(ALLOWED_INTRINSICS)}"
                )
        return errors

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.FAIL.value}
        rendered.update(self._render_comment())
        for key, value in (
            ("Error", self.error),
            ("ErrorPath", self.error_path),
            ("Cause", self.cause),
            ("CausePath", self.cause_path),
        ):
            if value is not None:
                rendered[key] = value
        return rendered


def _is_allowed_path(path: str) -> bool:
    if path.startswith("$"):
        return True
    return any(path.startswith(f"{fn}(") for fn in ALLOWED_INTRINSICS)
