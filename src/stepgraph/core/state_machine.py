"""State machine: a rendered definition plus the settings deployed with it."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from stepgraph.core.chain import Chainable
from stepgraph.core.duration import Duration
from stepgraph.core.errors import StepGraphError
from stepgraph.core.logging_config import get_logger
from stepgraph.core.state_graph import StateGraph
from stepgraph.core.types import LogLevel, PolicyStatement, StateMachineType
from stepgraph.core.validation import MAX_STATE_MACHINE_NAME_LENGTH, validate_state_machine_name

logger = get_logger(__name__)

GRAPH_DESCRIPTION = "State Machine definition"

LOG_DELIVERY_ACTIONS = [
    "logs:CreateLogDelivery",
    "logs:GetLogDelivery",
    "logs:UpdateLogDelivery",
    "logs:DeleteLogDelivery",
    "logs:ListLogDeliveries",
    "logs:PutResourcePolicy",
    "logs:DescribeResourcePolicies",
    "logs:DescribeLogGroups",
]

TRACING_ACTIONS = [
    "xray:PutTraceSegments",
    "xray:PutTelemetryRecords",
    "xray:GetSamplingRules",
    "xray:GetSamplingTargets",
]


def to_json_string(definition: dict[str, Any]) -> str:
    """Compact JSON, key order preserved."""
    return json.dumps(definition, separators=(",", ":"))


class DefinitionBody(ABC):
    """Where a state machine definition comes from.

    Example:
        >>> body = DefinitionBody.from_chainable(Chain.start(Pass("a")))
        >>> body.bind(comment="demo")
        '{"StartAt":"a","States":{"a":{"Type":"Pass","End":true}},"Comment":"demo"}'
    """

    @staticmethod
    def from_string(definition: str) -> DefinitionBody:
        return StringDefinitionBody(definition)

    @staticmethod
    def from_file(path: str | Path) -> DefinitionBody:
        """Use the contents of a JSON definition file as is.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        return StringDefinitionBody(Path(path).read_text(encoding="utf-8"))

    @staticmethod
    def from_chainable(chainable: Chainable) -> DefinitionBody:
        return ChainDefinitionBody(chainable)

    @abstractmethod
    def bind(self, comment: str | None = None, timeout: Duration | None = None) -> str:
        """Render the definition string."""


class StringDefinitionBody(DefinitionBody):
    """A definition supplied as text. ``comment`` and ``timeout`` are not applied."""

    def __init__(self, body: str) -> None:
        self.body = body

    def bind(self, comment: str | None = None, timeout: Duration | None = None) -> str:
        return self.body


class ChainDefinitionBody(DefinitionBody):
    """A definition rendered from states."""

    def __init__(self, chainable: Chainable) -> None:
        self.chainable = chainable

    def graph(self, timeout: Duration | None = None) -> StateGraph:
        graph = StateGraph(self.chainable.start_state, GRAPH_DESCRIPTION)
        graph.timeout = timeout
        return graph

    def bind(self, comment: str | None = None, timeout: Duration | None = None) -> str:
        definition = self.graph(timeout).to_graph_json()
        if comment is not None:
            definition["Comment"] = comment
        return to_json_string(definition)


@dataclass
class LogOptions:
    """Execution history logging."""

    log_destination: str | None = None
    include_execution_data: bool | None = None
    level: LogLevel = LogLevel.ERROR

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"level": self.level.value}
        if self.log_destination is not None:
            rendered["log_destination"] = self.log_destination
        if self.include_execution_data is not None:
            rendered["include_execution_data"] = self.include_execution_data
        return rendered


class StateMachine:
    """A workflow definition with its deployment settings.

    Args:
        id: Identifier; used for the generated name prefix.
        definition_body: Source of the definition.
        comment: Rendered as the definition's top level ``Comment``.
        timeout: Maximum execution time, rendered as ``TimeoutSeconds``.
        state_machine_type: STANDARD (default) or EXPRESS.
        state_machine_name: Explicit name.
        name_prefix: Prefix for a generated name. Cannot be combined with
            state_machine_name.
        tracing_enabled: Enable X-Ray tracing. None leaves it unconfigured.
        logs: Execution history logging.

    Raises:
        StepGraphError: On conflicting or invalid names.

    Example:
        >>> machine = StateMachine(
        ...     "Orders",
        ...     definition_body=DefinitionBody.from_chainable(chain),
        ...     timeout=Duration.minutes(5),
        ... )
        >>> machine.definition["TimeoutSeconds"]
        300
    """

    def __init__(
        self,
        id: str,
        *,
        definition_body: DefinitionBody,
        comment: str | None = None,
        timeout: Duration | None = None,
        state_machine_type: StateMachineType = StateMachineType.STANDARD,
        state_machine_name: str | None = None,
        name_prefix: str | None = None,
        tracing_enabled: bool | None = None,
        logs: LogOptions | None = None,
    ) -> None:
        if state_machine_name is not None and name_prefix is not None:
            raise StepGraphError("Cannot specify both 'stateMachineName' and 'namePrefix'. Use only one.")
        if state_machine_name is not None:
            try:
                validate_state_machine_name(state_machine_name)
            except ValueError as e:
                raise StepGraphError(str(e)) from e

        self.id = id
        self.definition_body = definition_body
        self.comment = comment
        self.timeout = timeout
        self.state_machine_type = state_machine_type
        self.state_machine_name = state_machine_name
        self.name_prefix = None if state_machine_name is not None else _generated_prefix(name_prefix or id)
        self.tracing_enabled = tracing_enabled
        self.logs = logs

    @property
    def graph(self) -> StateGraph | None:
        """The state graph, or None for a definition supplied as text."""
        if isinstance(self.definition_body, ChainDefinitionBody):
            return self.definition_body.graph(self.timeout)
        return None

    @property
    def definition_string(self) -> str:
        """The rendered definition.

        Raises:
            GraphValidationError: If the states do not form a valid definition.
        """
        logger.debug("rendering definition of state machine %s", self.id)
        return self.definition_body.bind(self.comment, self.timeout)

    @property
    def definition(self) -> dict[str, Any]:
        return json.loads(self.definition_string)

    @property
    def policy_statements(self) -> list[PolicyStatement]:
        """Permissions the execution role needs."""
        graph = self.graph
        statements = list(graph.policy_statements) if graph is not None else []
        if self.logs is not None:
            statements.append(PolicyStatement(LOG_DELIVERY_ACTIONS))
        if self.tracing_enabled:
            statements.append(PolicyStatement(TRACING_ACTIONS))
        return statements

    def to_resource_config(self) -> dict[str, Any]:
        """Everything needed to create the state machine resource."""
        config: dict[str, Any] = {
            "type": self.state_machine_type.value,
            "definition": self.definition_string,
            "policy_statements": [statement.to_dict() for statement in self.policy_statements],
        }
        if self.state_machine_name is not None:
            config["name"] = self.state_machine_name
        else:
            config["name_prefix"] = self.name_prefix
        if self.logs is not None:
            config["logging_configuration"] = self.logs.render()
        if self.tracing_enabled is not None:
            config["tracing_configuration"] = {"enabled": self.tracing_enabled}
        return config

    def __repr__(self) -> str:
        return f"StateMachine({self.id!r})"


def _generated_prefix(base: str) -> str:
    # Unsupported characters are dropped; room is left for the provider suffix.
    cleaned = "".join(ch for ch in base if ch.isalnum() or ch in "-_")
    return f"{cleaned[: MAX_STATE_MACHINE_NAME_LENGTH - 27]}-"
