"""stepgraph - build Step Functions workflow definitions in Python.

States are linked with ``next()`` into chains, grouped into fragments and
composite states, then rendered into an Amazon States Language document.

Layers:
    core/       The workflow model and renderer
    frontends/  User interfaces (CLI)

Quick Start:
    >>> from stepgraph import Chain, Condition, Choice, DefinitionBody, Pass, StateMachine, Succeed
    >>>
    >>> start = Pass("Start")
    >>> route = Choice("Route").when(Condition.boolean_equals("$.ok", True), Succeed("Done"))
    >>> route.otherwise(Pass("Retry later"))
    >>> machine = StateMachine("Demo", definition_body=DefinitionBody.from_chainable(start.next(route)))
    >>> print(machine.definition_string)

Logging is configured with ``stepgraph.core.logging_config.configure_logging``
or the ``STEPGRAPH_LOG_LEVEL`` / ``STEPGRAPH_LOG_FORMAT`` environment variables.
"""

from stepgraph.__version__ import __version__

# Re-export core for convenience
from stepgraph.core import (
    Bucket,
    CatchProps,
    Chain,
    Choice,
    Condition,
    CustomState,
    DefinitionBody,
    DistributedMap,
    Duration,
    Errors,
    Fail,
    GraphValidationError,
    JsonPath,
    Map,
    Parallel,
    Pass,
    Result,
    RetryProps,
    StateGraph,
    StateMachine,
    StateMachineFragment,
    StepGraphError,
    Succeed,
    Task,
    Wait,
    WaitTime,
)

__all__ = [
    "__version__",
    "Bucket",
    "CatchProps",
    "Chain",
    "Choice",
    "Condition",
    "CustomState",
    "DefinitionBody",
    "DistributedMap",
    "Duration",
    "Errors",
    "Fail",
    "GraphValidationError",
    "JsonPath",
    "Map",
    "Parallel",
    "Pass",
    "Result",
    "RetryProps",
    "StateGraph",
    "StateMachine",
    "StateMachineFragment",
    "StepGraphError",
    "Succeed",
    "Task",
    "Wait",
    "WaitTime",
]
