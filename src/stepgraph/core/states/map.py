"""Inline Map state."""

from __future__ import annotations

from typing import Any

from stepgraph.core.chain import Chainable
from stepgraph.core.state_graph import StateGraph
from stepgraph.core.states.map_base import MapBase
from stepgraph.core.types import ProcessorMode


class Map(MapBase):
    """Iterate over an array inside the parent execution.

    Define the per-item work with ``item_processor()`` or, for older
    definitions, ``iterator()``. Exactly one of the two must be set.

    Example:
        >>> fan_out = Map("Resize", items_path=JsonPath.string_at("$.images"), max_concurrency=4)
        >>> fan_out.item_processor(Pass("Resize one"))
    """

    def __init__(self, id: str, **kwargs: Any) -> None:
        super().__init__(id, **kwargs)
        self.iteration: StateGraph | None = None

    def iterator(self, iterator: Chainable) -> Map:
        """Define the per-item graph, rendered under the legacy ``Iterator`` key."""
        self.iteration = StateGraph(iterator.start_state, f"Map {self.state_name} Iterator")
        return self

    def child_graphs(self) -> list[StateGraph]:
        graphs = super().child_graphs()
        if self.iteration is not None:
            graphs.append(self.iteration)
        return graphs

    def validate_state(self) -> list[str]:
        errors = super().validate_state()
        if self.iteration is None and self.processor is None:
            errors.append("Map state must either have a non-empty iterator or a non-empty item processor")
        if self.iteration is not None and self.processor is not None:
            errors.append("Map state cannot have both an iterator and an item processor")
        if (
            self.processor_config.mode is ProcessorMode.DISTRIBUTED
            and self.processor_config.execution_type is None
        ):
            errors.append("You must specify an execution type for the distributed Map workflow")
        return errors

    def to_state_json(self) -> dict[str, Any]:
        rendered = super().to_state_json()
        rendered.update(self._render_parameters())
        if self.iteration is not None:
            rendered["Iterator"] = self.iteration.to_graph_json()
        return rendered
