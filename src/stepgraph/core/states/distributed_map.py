"""Distributed Map: run each item (or batch) as a child execution."""

from __future__ import annotations

from typing import Any

from stepgraph.core.chain import Chainable
from stepgraph.core.logging_config import get_logger
from stepgraph.core.states.distributed.item_batcher import ItemBatcher
from stepgraph.core.states.distributed.item_reader import ItemReader
from stepgraph.core.states.distributed.result_writer import ResultWriter
from stepgraph.core.states.map_base import MapBase, ProcessorConfig
from stepgraph.core.types import PolicyStatement, ProcessorMode, StateMachineType
from stepgraph.core.validation import label_errors

logger = get_logger(__name__)


class DistributedMap(MapBase):
    """Map state in DISTRIBUTED mode.

    The processor always renders with ``Mode: DISTRIBUTED`` and with
    ``map_execution_type`` as the execution type; an execution type passed
    to ``item_processor()`` is ignored with a warning.

    Args:
        id: State id.
        item_reader: Read items from S3 instead of the state input.
        result_writer: Export results to S3.
        item_batcher: Group items into batches.
        map_execution_type: Child workflow type, STANDARD by default.
        tolerated_failure_percentage: Share of failed items (0-100) that
            still counts as success.
        tolerated_failure_percentage_path: Path to that share.
        tolerated_failure_count: Number of failed items tolerated.
        tolerated_failure_count_path: Path to that number.
        label: Name shown for child executions; up to 40 characters, no
            whitespace or special characters.
        **kwargs: MapBase options.
    """

    def __init__(
        self,
        id: str,
        *,
        item_reader: ItemReader | None = None,
        result_writer: ResultWriter | None = None,
        item_batcher: ItemBatcher | None = None,
        map_execution_type: StateMachineType = StateMachineType.STANDARD,
        tolerated_failure_percentage: float | None = None,
        tolerated_failure_percentage_path: str | None = None,
        tolerated_failure_count: int | None = None,
        tolerated_failure_count_path: str | None = None,
        label: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.item_reader = item_reader
        self.result_writer = result_writer
        self.item_batcher = item_batcher
        self.map_execution_type = map_execution_type
        self.tolerated_failure_percentage = tolerated_failure_percentage
        self.tolerated_failure_percentage_path = tolerated_failure_percentage_path
        self.tolerated_failure_count = tolerated_failure_count
        self.tolerated_failure_count_path = tolerated_failure_count_path
        self.label = label
        self.processor_config = ProcessorConfig(ProcessorMode.DISTRIBUTED)

    @staticmethod
    def is_distributed_map(value: object) -> bool:
        return isinstance(value, DistributedMap)

    def item_processor(self, processor: Chainable, config: ProcessorConfig | None = None) -> DistributedMap:
        config = config or ProcessorConfig(ProcessorMode.DISTRIBUTED)
        if config.execution_type is not None:
            logger.warning(
                "Property 'ProcessorConfig.executionType' is ignored, use the 'mapExecutionType' "
                "in the 'DistributedMap' class instead. (state %s)",
                self.state_name,
            )
        super().item_processor(processor, config)
        return self

    def validate_state(self) -> list[str]:
        errors = super().validate_state()

        if self.processor is None:
            errors.append("Distributed Map state must have a non-empty item processor")

        if self.items_path is not None and self.item_reader is not None:
            errors.append("Provide either `itemsPath` or `itemReader`, but not both")

        if self.tolerated_failure_percentage is not None:
            if self.tolerated_failure_percentage_path is not None:
                errors.append(
                    "Provide either `toleratedFailurePercentage` or "
                    "`toleratedFailurePercentagePath`, but not both"
                )
            if not 0 <= self.tolerated_failure_percentage <= 100:
                errors.append("toleratedFailurePercentage must be between 0 and 100")

        if self.tolerated_failure_count is not None and self.tolerated_failure_count_path is not None:
            errors.append(
                "Provide either `toleratedFailureCount` or `toleratedFailureCountPath`, but not both"
            )

        if self.item_reader is not None:
            errors.extend(self.item_reader.validate_item_reader())
        if self.result_writer is not None:
            errors.extend(self.result_writer.validate_result_writer())
        if self.item_batcher is not None:
            errors.extend(self.item_batcher.validate_item_batcher())

        if self.processor_config.mode is ProcessorMode.INLINE:
            errors.append("Processing mode cannot be `INLINE` for a Distributed Map")

        errors.extend(label_errors(self.label))
        return errors

    @property
    def policy_statements(self) -> list[PolicyStatement]:
        statements: list[PolicyStatement] = []
        if self.item_reader is not None:
            statements.extend(self.item_reader.provide_policy_statements())
        if self.result_writer is not None:
            statements.extend(self.result_writer.provide_policy_statements())
        return statements

    def _render_processor_config(self) -> dict[str, Any]:
        return {
            "Mode": ProcessorMode.DISTRIBUTED.value,
            "ExecutionType": self.map_execution_type.value,
        }

    def to_state_json(self) -> dict[str, Any]:
        rendered = super().to_state_json()
        if self.item_reader is not None:
            rendered["ItemReader"] = self.item_reader.render()
        if self.result_writer is not None:
            rendered["ResultWriter"] = self.result_writer.render()
        for key, value in (
            ("ToleratedFailurePercentage", self.tolerated_failure_percentage),
            ("ToleratedFailurePercentagePath", self.tolerated_failure_percentage_path),
            ("ToleratedFailureCount", self.tolerated_failure_count),
            ("ToleratedFailureCountPath", self.tolerated_failure_count_path),
            ("Label", self.label),
        ):
            if value is not None:
                rendered[key] = value
        if self.item_batcher is not None:
            rendered["ItemBatcher"] = self.item_batcher.render()
        return rendered
