"""Service integration tasks.

Each task renders an optimized integration resource
(``arn:{partition}:states:::{service}:{api}[.suffix]``) and declares the
permissions its call needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from stepgraph.core.duration import Duration
from stepgraph.core.fields import TaskInput, contains_task_token, render_object
from stepgraph.core.states.task_base import TaskStateBase
from stepgraph.core.types import IntegrationPattern, PolicyStatement, integration_resource_arn


class FunctionRef(Protocol):
    function_arn: str


class QueueRef(Protocol):
    queue_url: str
    queue_arn: str


class ActivityRef(Protocol):
    activity_arn: str


class EventBusRef(Protocol):
    event_bus_arn: str


def validate_pattern_supported(
    pattern: IntegrationPattern, supported: tuple[IntegrationPattern, ...]
) -> None:
    if pattern not in supported:
        raise ValueError(
            f"Unsupported service integration pattern. Supported Patterns: "
            f"{', '.join(p.value for p in supported)}. Received: {pattern.value}"
        )


def _without_none(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


class LambdaInvocationType(Enum):
    REQUEST_RESPONSE = "RequestResponse"
    EVENT = "Event"
    DRY_RUN = "DryRun"


LAMBDA_SERVICE_ERRORS = [
    "Lambda.ClientExecutionTimeoutException",
    "Lambda.ServiceException",
    "Lambda.AWSLambdaException",
    "Lambda.SdkClientException",
]


class LambdaInvoke(TaskStateBase):
    """Invoke a Lambda function.

    Args:
        id: State id.
        lambda_function: Function to call.
        payload: Event passed to the function; defaults to the state input.
        invocation_type: Synchronous, asynchronous or dry run.
        client_context: Base64 client context.
        qualifier: Version or alias to invoke.
        payload_response_only: Call the function ARN directly so the state
            output is the bare function result.
        retry_on_service_exceptions: Add a retrier for transient Lambda
            service errors. On by default.
        integration_pattern: REQUEST_RESPONSE or WAIT_FOR_TASK_TOKEN.
        partition: Partition of the integration ARN.
        **kwargs: TaskStateBase options.

    Raises:
        ValueError: On an unsupported pattern, a callback without a task
            token in the payload, or payload_response_only combined with
            call options.
    """

    SUPPORTED_PATTERNS = (IntegrationPattern.REQUEST_RESPONSE, IntegrationPattern.WAIT_FOR_TASK_TOKEN)

    def __init__(
        self,
        id: str,
        *,
        lambda_function: FunctionRef,
        payload: TaskInput | None = None,
        invocation_type: LambdaInvocationType | None = None,
        client_context: str | None = None,
        qualifier: str | None = None,
        payload_response_only: bool = False,
        retry_on_service_exceptions: bool = True,
        integration_pattern: IntegrationPattern | None = None,
        partition: str = "aws",
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.integration_pattern = integration_pattern or IntegrationPattern.REQUEST_RESPONSE
        validate_pattern_supported(self.integration_pattern, self.SUPPORTED_PATTERNS)

        if self.integration_pattern is IntegrationPattern.WAIT_FOR_TASK_TOKEN and not (
            payload is not None and contains_task_token(payload.value)
        ):
            raise ValueError(
                "Task Token is required in `payload` for callback. Use JsonPath.task_token to set the token."
            )
        if payload_response_only and (integration_pattern or invocation_type or client_context or qualifier):
            raise ValueError(
                "The 'payloadResponseOnly' property cannot be used if 'integrationPattern', "
                "'invocationType', 'clientContext', or 'qualifier' are specified."
            )

        self.lambda_function = lambda_function
        self.payload = payload
        self.invocation_type = invocation_type
        self.client_context = client_context
        self.qualifier = qualifier
        self.payload_response_only = payload_response_only
        self.partition = partition

        self.task_policies = [PolicyStatement(["lambda:InvokeFunction"], [lambda_function.function_arn])]
        if retry_on_service_exceptions:
            self.add_retry(
                errors=list(LAMBDA_SERVICE_ERRORS),
                interval=Duration.seconds(2),
                max_attempts=6,
                backoff_rate=2,
            )

    def _render_task(self) -> dict[str, Any]:
        if self.payload_response_only:
            rendered: dict[str, Any] = {"Resource": self.lambda_function.function_arn}
            if self.payload is not None:
                rendered["Parameters"] = render_object(self.payload.value)
            return rendered

        payload = self.payload or TaskInput.from_json_path_at("$")
        parameters = _without_none(
            {
                "FunctionName": self.lambda_function.function_arn,
                "Payload": payload.value,
                "InvocationType": self.invocation_type.value if self.invocation_type else None,
                "ClientContext": self.client_context,
                "Qualifier": self.qualifier,
            }
        )
        return {
            "Resource": integration_resource_arn(
                self.partition, "lambda", "invoke", self.integration_pattern
            ),
            "Parameters": render_object(parameters),
        }


class SqsSendMessage(TaskStateBase):
    """Send a message to an SQS queue.

    Args:
        id: State id.
        queue: Target queue.
        message_body: Message payload.
        delay: Delivery delay.
        message_deduplication_id: FIFO deduplication id.
        message_group_id: FIFO message group.
        integration_pattern: REQUEST_RESPONSE or WAIT_FOR_TASK_TOKEN.
        partition: Partition of the integration ARN.
        **kwargs: TaskStateBase options.
    """

    SUPPORTED_PATTERNS = (IntegrationPattern.REQUEST_RESPONSE, IntegrationPattern.WAIT_FOR_TASK_TOKEN)

    def __init__(
        self,
        id: str,
        *,
        queue: QueueRef,
        message_body: TaskInput,
        delay: Duration | None = None,
        message_deduplication_id: str | None = None,
        message_group_id: str | None = None,
        integration_pattern: IntegrationPattern | None = None,
        partition: str = "aws",
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.integration_pattern = integration_pattern or IntegrationPattern.REQUEST_RESPONSE
        validate_pattern_supported(self.integration_pattern, self.SUPPORTED_PATTERNS)

        if self.integration_pattern is IntegrationPattern.WAIT_FOR_TASK_TOKEN and not contains_task_token(
            message_body.value
        ):
            raise ValueError(
                "Task Token is required in `messageBody` Use JsonPath.task_token to set the token."
            )

        self.queue = queue
        self.message_body = message_body
        self.delay = delay
        self.message_deduplication_id = message_deduplication_id
        self.message_group_id = message_group_id
        self.partition = partition
        self.task_policies = [PolicyStatement(["sqs:SendMessage"], [queue.queue_arn])]

    def _render_task(self) -> dict[str, Any]:
        parameters = _without_none(
            {
                "QueueUrl": self.queue.queue_url,
                "MessageBody": self.message_body.value,
                "DelaySeconds": self.delay.to_seconds() if self.delay else None,
                "MessageDeduplicationId": self.message_deduplication_id,
                "MessageGroupId": self.message_group_id,
            }
        )
        return {
            "Resource": integration_resource_arn(
                self.partition, "sqs", "sendMessage", self.integration_pattern
            ),
            "Parameters": render_object(parameters),
        }


class InvokeActivity(TaskStateBase):
    """Hand work to an activity worker.

    No permissions are needed; the worker polls the activity itself.
    """

    def __init__(
        self,
        id: str,
        *,
        activity: ActivityRef,
        parameters: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.activity = activity
        self.parameters = parameters

    def _render_task(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Resource": self.activity.activity_arn}
        if self.parameters is not None:
            rendered["Parameters"] = render_object(self.parameters)
        return rendered


@dataclass
class EventBridgePutEventsEntry:
    """One event sent by ``EventBridgePutEvents``.

    Attributes:
        detail: Event body, as text, an object or a path in the input.
        detail_type: Identifies the shape of ``detail`` together with ``source``.
        source: Service or application that produced the event, for example
            ``com.example.service``.
        event_bus: Bus to send to; the account's default bus when None.
    """

    detail: TaskInput
    detail_type: str
    source: str
    event_bus: EventBusRef | None = None


class EventBridgePutEvents(TaskStateBase):
    """Send events to EventBridge.

    Args:
        id: State id.
        entries: Events to send, at least one.
        integration_pattern: REQUEST_RESPONSE or WAIT_FOR_TASK_TOKEN.
        partition: Partition of the integration and default bus ARNs.
        region: Region of the default event bus, used in the policy.
        account: Account of the default event bus, used in the policy.
        **kwargs: TaskStateBase options.

    Raises:
        ValueError: On an unsupported pattern, a callback without a task
            token in any detail, no entries, or a source starting with "aws.".
    """

    SUPPORTED_PATTERNS = (IntegrationPattern.REQUEST_RESPONSE, IntegrationPattern.WAIT_FOR_TASK_TOKEN)

    def __init__(
        self,
        id: str,
        *,
        entries: list[EventBridgePutEventsEntry],
        integration_pattern: IntegrationPattern | None = None,
        partition: str = "aws",
        region: str = "*",
        account: str = "*",
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.integration_pattern = integration_pattern or IntegrationPattern.REQUEST_RESPONSE
        validate_pattern_supported(self.integration_pattern, self.SUPPORTED_PATTERNS)

        if self.integration_pattern is IntegrationPattern.WAIT_FOR_TASK_TOKEN and not contains_task_token(
            [entry.detail.value for entry in entries]
        ):
            raise ValueError("Task Token is required in `entries`. Use JsonPath.task_token to set the token.")
        if not entries:
            raise ValueError("Value for property `entries` must be a non-empty array.")
        if any(entry.source.startswith("aws.") for entry in entries):
            raise ValueError('Event source cannot start with "aws."')

        self.entries = list(entries)
        self.partition = partition
        default_bus = f"arn:{partition}:events:{region}:{account}:event-bus/default"
        self.task_policies = [
            PolicyStatement(
                ["events:PutEvents"],
                [entry.event_bus.event_bus_arn if entry.event_bus else default_bus for entry in self.entries],
            )
        ]

    def _render_entries(self) -> list[dict[str, Any]]:
        return [
            _without_none(
                {
                    "Detail": entry.detail.value,
                    "DetailType": entry.detail_type,
                    "EventBusName": entry.event_bus.event_bus_arn if entry.event_bus else None,
                    "Source": entry.source,
                }
            )
            for entry in self.entries
        ]

    def _render_task(self) -> dict[str, Any]:
        return {
            "Resource": integration_resource_arn(
                self.partition, "events", "putEvents", self.integration_pattern
            ),
            "Parameters": render_object({"Entries": self._render_entries()}),
        }
