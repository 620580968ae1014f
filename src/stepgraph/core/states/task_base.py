"""Common behaviour of Task states that call a service integration."""

from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol

from stepgraph.core.duration import Duration, Timeout
from stepgraph.core.fields import validate_json_path
from stepgraph.core.states.state import ErrorHandling, State
from stepgraph.core.types import PolicyStatement, StateType


class RoleRef(Protocol):
    role_arn: str


@dataclass(frozen=True)
class TaskRole:
    """Role a task assumes when it calls its resource.

    Use ``TaskRole.from_role()`` or ``TaskRole.from_role_arn_json_path()``.

    Attributes:
        role_arn: The role ARN, or a path to it in the state input.
        resource: What ``sts:AssumeRole`` is granted on; ``*`` when the
            role is only known at run time.
    """

    role_arn: str
    resource: str
    is_path: bool = False

    @classmethod
    def from_role(cls, role: RoleRef) -> TaskRole:
        return cls(role.role_arn, role.role_arn)

    @classmethod
    def from_role_arn_json_path(cls, expression: str) -> TaskRole:
        """Read the role ARN from the state input.

        Raises:
            ValueError: If ``expression`` is not a JSON path.
        """
        validate_json_path(expression)
        return cls(expression, "*", is_path=True)

    def render(self) -> dict[str, Any]:
        key = "RoleArn.$" if self.is_path else "RoleArn"
        return {key: self.role_arn}


def _as_timeout(value: Timeout | Duration | None) -> Timeout | None:
    if isinstance(value, Duration):
        return Timeout.duration(value)
    return value


class TaskStateBase(ErrorHandling, State):
    """Base for Task states.

    Subclasses return their ``Resource`` and ``Parameters`` from
    ``_render_task()`` and list the permissions they need in
    ``task_policies``.

    Args:
        id: State id.
        timeout: Fail the task after this long; a Duration or ``Timeout.at(path)``.
        heartbeat: Fail the task if no heartbeat arrives within this time.
        credentials: Role to assume for the call.
        state_name: Rendered name, defaults to id.
        comment: Human readable description.
        input_path: Selects the part of the input passed to the task.
        output_path: Selects the part of the result passed on.
        result_path: Where the result is placed in the input.
        result_selector: Reshapes the raw result.

    Integrations build their own ``Parameters``, so ``parameters`` is not
    accepted here; subclasses that take free-form parameters declare it.
    """

    def __init__(
        self,
        id: str,
        *,
        timeout: Timeout | Duration | None = None,
        heartbeat: Timeout | Duration | None = None,
        credentials: TaskRole | None = None,
        state_name: str | None = None,
        comment: str | None = None,
        input_path: str | None = None,
        output_path: str | None = None,
        result_path: str | None = None,
        result_selector: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            id,
            state_name=state_name,
            comment=comment,
            input_path=input_path,
            output_path=output_path,
            result_path=result_path,
            result_selector=result_selector,
        )
        self.timeout = _as_timeout(timeout)
        self.heartbeat = _as_timeout(heartbeat)
        self.credentials = credentials
        self.task_policies: list[PolicyStatement] = []

    @abstractmethod
    def _render_task(self) -> dict[str, Any]:
        """``Resource`` and ``Parameters`` of this task."""

    @property
    def policy_statements(self) -> list[PolicyStatement]:
        statements = list(self.task_policies)
        if self.credentials is not None:
            statements.append(PolicyStatement(["sts:AssumeRole"], [self.credentials.resource]))
        return statements

    def _render_timeouts(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {}
        for name, value in (("Timeout", self.timeout), ("Heartbeat", self.heartbeat)):
            if value is None:
                continue
            if value.path is not None:
                rendered[f"{name}SecondsPath"] = value.path
            else:
                rendered[f"{name}Seconds"] = value.seconds
        return rendered

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.TASK.value}
        rendered.update(self._render_comment())
        rendered.update(self._render_next_end())
        rendered.update(self._render_retry_catch())
        rendered.update(self._render_input_output())
        rendered.update(self._render_result_selector())
        rendered.update(self._render_result_path())
        rendered.update(self._render_task())
        rendered.update(self._render_timeouts())
        if self.credentials is not None:
            rendered["Credentials"] = self.credentials.render()
        return rendered
