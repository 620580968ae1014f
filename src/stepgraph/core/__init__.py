"""Core - the workflow model and its renderer.

Nothing here knows about files, terminals or deployment tooling. States
are plain Python objects linked into graphs; rendering turns a graph
into an Amazon States Language document.

Architecture:
    states/         State types (Pass, Task, Choice, Parallel, Map, ...)
    chain           Fluent sequencing of states
    fragment        Reusable named subgraphs
    state_graph     Validation and rendering of a graph and its nested graphs
    state_machine   Definition body plus deployment settings
    condition       Choice rule conditions
    fields          JSON paths, intrinsic functions, payload templates
    tasks           Service integration tasks

Example:
    >>> from stepgraph.core import Chain, Choice, Condition, Pass, StateGraph, Succeed
    >>>
    >>> check = Choice("Check").when(Condition.is_present("$.id"), Succeed("Done"))
    >>> check.otherwise(Pass("Fallback"))
    >>> graph = StateGraph(Chain.start(Pass("Start")).next(check).start_state, "demo")
    >>> graph.to_graph_json()["StartAt"]
    'Start'
"""

# States (loaded before state_graph, see stepgraph.core.states)
from stepgraph.core.states import (
    Choice,
    ChoiceRule,
    CustomState,
    DistributedMap,
    ErrorHandling,
    Fail,
    Map,
    MapBase,
    Parallel,
    Pass,
    ProcessorConfig,
    State,
    StepFunctionsTask,
    StepFunctionsTaskConfig,
    Succeed,
    Task,
    TaskRole,
    TaskStateBase,
    Wait,
    WaitTime,
)
from stepgraph.core.states.distributed import (
    Bucket,
    BucketRef,
    CsvHeaderLocation,
    CsvHeaders,
    ItemBatcher,
    ItemReader,
    Partition,
    PartitionScope,
    ResultWriter,
    S3CsvItemReader,
    S3JsonItemReader,
    S3ManifestItemReader,
    S3ObjectsItemReader,
)

# Structure
from stepgraph.core.chain import Chain, Chainable
from stepgraph.core.fragment import StateMachineFragment
from stepgraph.core.state_graph import StateGraph
from stepgraph.core.state_machine import (
    DefinitionBody,
    LogOptions,
    StateMachine,
)

# Values
from stepgraph.core.condition import Condition
from stepgraph.core.duration import Duration, Timeout
from stepgraph.core.fields import JsonPath, JsonPathToken, Result, TaskInput
from stepgraph.core.policy import CatchProps, RetryProps
from stepgraph.core.types import (
    Errors,
    IntegrationPattern,
    JitterType,
    LogLevel,
    PolicyStatement,
    ProcessorMode,
    ProcessorType,
    StateMachineType,
)

# Errors
from stepgraph.core.errors import ChainingError, GraphValidationError, StepGraphError

# Service integrations
from stepgraph.core.tasks import (
    EventBridgePutEvents,
    EventBridgePutEventsEntry,
    InvokeActivity,
    LambdaInvocationType,
    LambdaInvoke,
    SqsSendMessage,
)

__all__ = [
    # States
    "State",
    "ErrorHandling",
    "Pass",
    "Succeed",
    "Fail",
    "Wait",
    "WaitTime",
    "Choice",
    "ChoiceRule",
    "CustomState",
    "Parallel",
    "MapBase",
    "Map",
    "DistributedMap",
    "ProcessorConfig",
    "TaskStateBase",
    "TaskRole",
    "Task",
    "StepFunctionsTask",
    "StepFunctionsTaskConfig",
    # Distributed map
    "Bucket",
    "BucketRef",
    "Partition",
    "PartitionScope",
    "ItemReader",
    "S3ObjectsItemReader",
    "S3JsonItemReader",
    "S3CsvItemReader",
    "S3ManifestItemReader",
    "CsvHeaders",
    "CsvHeaderLocation",
    "ItemBatcher",
    "ResultWriter",
    # Structure
    "Chain",
    "Chainable",
    "StateMachineFragment",
    "StateGraph",
    "DefinitionBody",
    "LogOptions",
    "StateMachine",
    # Values
    "Condition",
    "Duration",
    "Timeout",
    "JsonPath",
    "JsonPathToken",
    "Result",
    "TaskInput",
    "RetryProps",
    "CatchProps",
    "Errors",
    "IntegrationPattern",
    "JitterType",
    "LogLevel",
    "PolicyStatement",
    "ProcessorMode",
    "ProcessorType",
    "StateMachineType",
    # Errors
    "StepGraphError",
    "GraphValidationError",
    "ChainingError",
    # Service integrations
    "LambdaInvoke",
    "LambdaInvocationType",
    "SqsSendMessage",
    "InvokeActivity",
    "EventBridgePutEvents",
    "EventBridgePutEventsEntry",
]
