"""Shared behaviour of the inline Map and the Distributed Map."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from stepgraph.core.chain import Chainable
from stepgraph.core.fields import is_json_path, render_object
from stepgraph.core.state_graph import StateGraph
from stepgraph.core.states.state import ErrorHandling, State
from stepgraph.core.types import ProcessorMode, ProcessorType, StateType
from stepgraph.core.validation import is_positive_integer


@dataclass
class ProcessorConfig:
    """How a Map runs its item processor.

    Attributes:
        mode: INLINE runs iterations inside the parent execution;
            DISTRIBUTED starts a child execution per item (or batch).
        execution_type: Child workflow type. Required in DISTRIBUTED mode.
    """

    mode: ProcessorMode = ProcessorMode.INLINE
    execution_type: ProcessorType | None = None

    def render(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Mode": self.mode.value}
        if self.mode is ProcessorMode.DISTRIBUTED and self.execution_type is not None:
            rendered["ExecutionType"] = self.execution_type.value
        return rendered


class MapBase(ErrorHandling, State):
    """Run a processor graph once per item of an input array.

    Args:
        id: State id.
        items_path: Path to the array to iterate over.
        item_selector: Payload template for each item.
        max_concurrency: Upper bound on concurrent iterations. A number
            path token reads the bound from the input.
        max_concurrency_path: Path to read the bound from.
        **kwargs: state_name, comment, input_path, output_path,
            result_path, parameters, result_selector.
    """

    def __init__(
        self,
        id: str,
        *,
        items_path: str | None = None,
        item_selector: dict[str, Any] | None = None,
        max_concurrency: int | float | str | None = None,
        max_concurrency_path: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(id, **kwargs)
        self.items_path = items_path
        self.item_selector = item_selector
        self.max_concurrency = max_concurrency
        self.max_concurrency_path = max_concurrency_path

        self.processor: StateGraph | None = None
        self.processor_config = ProcessorConfig()

    def item_processor(self, processor: Chainable, config: ProcessorConfig | None = None) -> MapBase:
        """Define the graph run for every item."""
        self.processor = StateGraph(processor.start_state, f"Map {self.state_name} Item Processor")
        self.processor_config = config or ProcessorConfig()
        return self

    def child_graphs(self) -> list[StateGraph]:
        return [self.processor] if self.processor is not None else []

    def _max_concurrency_is_path(self) -> bool:
        return isinstance(self.max_concurrency, str) and is_json_path(self.max_concurrency)

    def validate_state(self) -> list[str]:
        errors = []
        if self.item_selector is not None and self.parameters is not None:
            errors.append("Map state cannot have both parameters and an item selector")

        if (
            self.max_concurrency is not None
            and not self._max_concurrency_is_path()
            and not is_positive_integer(self.max_concurrency)
        ):
            errors.append("maxConcurrency has to be a positive integer")

        if self.max_concurrency is not None and self.max_concurrency_path is not None:
            errors.append("Provide either `maxConcurrency` or `maxConcurrencyPath`, but not both")

        return errors

    def _render_processor_config(self) -> dict[str, Any]:
        return self.processor_config.render()

    def _render_item_processor(self) -> dict[str, Any]:
        if self.processor is None:
            return {}
        return {
            "ItemProcessor": {
                "ProcessorConfig": self._render_processor_config(),
                **self.processor.to_graph_json(),
            }
        }

    def _render_concurrency(self) -> dict[str, Any]:
        if self._max_concurrency_is_path():
            return {"MaxConcurrencyPath": str(self.max_concurrency)}
        rendered: dict[str, Any] = {}
        if self.max_concurrency is not None:
            rendered["MaxConcurrency"] = self.max_concurrency
        if self.max_concurrency_path is not None:
            rendered["MaxConcurrencyPath"] = self.max_concurrency_path
        return rendered

    def to_state_json(self) -> dict[str, Any]:
        rendered: dict[str, Any] = {"Type": StateType.MAP.value}
        rendered.update(self._render_comment())
        rendered.update(self._render_result_path())
        rendered.update(self._render_next_end())
        rendered.update(self._render_input_output())
        rendered.update(self._render_result_selector())
        rendered.update(self._render_retry_catch())
        rendered.update(self._render_item_processor())
        if self.items_path is not None:
            rendered["ItemsPath"] = self.items_path
        if self.item_selector is not None:
            rendered["ItemSelector"] = render_object(self.item_selector)
        rendered.update(self._render_concurrency())
        return rendered
