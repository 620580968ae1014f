"""State types.

``state`` is imported first: the composite states depend on
``stepgraph.core.state_graph``, which itself needs ``State``.
"""

from stepgraph.core.states.state import ErrorHandling, State

from stepgraph.core.states.choice import Choice, ChoiceRule
from stepgraph.core.states.custom_state import CustomState
from stepgraph.core.states.fail import Fail
from stepgraph.core.states.pass_state import Pass
from stepgraph.core.states.succeed import Succeed
from stepgraph.core.states.wait import Wait, WaitTime

# Composite states
from stepgraph.core.states.distributed_map import DistributedMap
from stepgraph.core.states.map import Map
from stepgraph.core.states.map_base import MapBase, ProcessorConfig
from stepgraph.core.states.parallel import Parallel

# Tasks
from stepgraph.core.states.task import StepFunctionsTask, StepFunctionsTaskConfig, Task
from stepgraph.core.states.task_base import TaskRole, TaskStateBase

__all__ = [
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
]
