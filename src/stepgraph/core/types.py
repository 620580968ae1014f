"""Pure data types for stepgraph.core.

Enumerations used in rendered definitions, predefined error names and the
policy statement value type collected from states.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StateType(Enum):
    """Values of the ``Type`` field."""

    PASS = "Pass"
    TASK = "Task"
    CHOICE = "Choice"
    WAIT = "Wait"
    SUCCEED = "Succeed"
    FAIL = "Fail"
    PARALLEL = "Parallel"
    MAP = "Map"


class ProcessorMode(Enum):
    """Where a Map item processor runs."""

    INLINE = "INLINE"  # Inside the parent execution
    DISTRIBUTED = "DISTRIBUTED"  # As child executions


class ProcessorType(Enum):
    """Execution type of Distributed Map child workflows."""

    STANDARD = "STANDARD"
    EXPRESS = "EXPRESS"


class StateMachineType(Enum):
    STANDARD = "STANDARD"
    EXPRESS = "EXPRESS"


class JitterType(Enum):
    """Randomization applied to retry intervals."""

    FULL = "FULL"
    NONE = "NONE"


class LogLevel(Enum):
    """Execution history log level of a state machine."""

    OFF = "OFF"
    ALL = "ALL"
    ERROR = "ERROR"
    FATAL = "FATAL"


class IntegrationPattern(Enum):
    """How a Task waits on the service it calls."""

    REQUEST_RESPONSE = "REQUEST_RESPONSE"
    RUN_JOB = "RUN_JOB"
    WAIT_FOR_TASK_TOKEN = "WAIT_FOR_TASK_TOKEN"


RESOURCE_ARN_SUFFIX: dict[IntegrationPattern, str] = {
    IntegrationPattern.REQUEST_RESPONSE: "",
    IntegrationPattern.RUN_JOB: ".sync",
    IntegrationPattern.WAIT_FOR_TASK_TOKEN: ".waitForTaskToken",
}


def integration_resource_arn(
    partition: str,
    service: str,
    api: str,
    pattern: IntegrationPattern = IntegrationPattern.REQUEST_RESPONSE,
) -> str:
    """Build an optimized service integration ARN.

    Example:
        >>> integration_resource_arn("aws", "sqs", "sendMessage")
        'arn:aws:states:::sqs:sendMessage'
    """
    if not service or not api:
        raise ValueError("Both 'service' and 'api' must be provided to build the resource ARN.")
    return f"arn:{partition}:states:::{service}:{api}{RESOURCE_ARN_SUFFIX[pattern]}"


class Errors:
    """Predefined error names usable in Retry and Catch rules."""

    ALL = "States.ALL"
    HEARTBEAT_TIMEOUT = "States.HeartbeatTimeout"
    TIMEOUT = "States.Timeout"
    TASKS_FAILED = "States.TaskFailed"
    PERMISSIONS = "States.Permissions"
    RESULT_PATH_MATCH_FAILURE = "States.ResultPathMatchFailure"
    PARAMETER_PATH_FAILURE = "States.ParameterPathFailure"
    BRANCH_FAILED = "States.BranchFailed"
    NO_CHOICE_MATCHED = "States.NoChoiceMatched"
    INTRINSIC_FAILURE = "States.IntrinsicFailure"
    EXCEEDS_TOLERATED_FAILURE_THRESHOLD = "States.ExceedToleratedFailureThreshold"
    ITEM_READER_FAILED = "States.ItemReaderFailed"
    RESULT_WRITER_FAILED = "States.ResultWriterFailed"


@dataclass(frozen=True)
class PolicyStatement:
    """An IAM permission a state machine role needs.

    Attributes:
        actions: IAM actions, e.g. ``["s3:GetObject"]``.
        resources: Resource ARNs the actions apply to.
    """

    actions: tuple[str, ...]
    resources: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", tuple(self.actions))
        object.__setattr__(self, "resources", tuple(self.resources))

    def to_dict(self) -> dict[str, Any]:
        """Render as an IAM policy document statement."""
        return {
            "Effect": "Allow",
            "Action": list(self.actions),
            "Resource": list(self.resources),
        }
