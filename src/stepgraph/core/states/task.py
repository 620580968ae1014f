"""Task state driven by a pluggable task object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from stepgraph.core.duration import Duration, Timeout
from stepgraph.core.fields import render_object
from stepgraph.core.states.task_base import TaskStateBase
from stepgraph.core.types import PolicyStatement


@dataclass
class StepFunctionsTaskConfig:
    """What a task object contributes to the Task state it is bound to."""

    resource_arn: str
    parameters: dict[str, Any] | None = None
    heartbeat: Duration | None = None
    policy_statements: list[PolicyStatement] = field(default_factory=list)


class StepFunctionsTask(Protocol):
    def bind(self, task: Task) -> StepFunctionsTaskConfig: ...


class Task(TaskStateBase):
    """A Task whose resource and parameters come from ``task.bind()``.

    Parameters passed directly override parameters with the same name
    returned by the task object.

    Example:
        >>> Task("Charge", task=ActivityTask(activity_arn), timeout=Duration.minutes(5))
    """

    def __init__(
        self,
        id: str,
        *,
        task: StepFunctionsTask,
        parameters: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.task_config = task.bind(self)
        merged = {**(self.task_config.parameters or {}), **(parameters or {})}
        self.parameters = merged or None
        if self.heartbeat is None and self.task_config.heartbeat is not None:
            self.heartbeat = Timeout.duration(self.task_config.heartbeat)
        self.task_policies = list(self.task_config.policy_statements)

    def _render_task(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Resource": self.task_config.resource_arn}
        if self.parameters is not None:
            rendered["Parameters"] = render_object(self.parameters)
        return rendered
