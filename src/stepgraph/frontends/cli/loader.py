"""Load a workflow definition from a Python file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import stepgraph.core as core
from stepgraph.core import Chainable, DefinitionBody, StateGraph, StateMachine, StepGraphError
from stepgraph.core.state_machine import GRAPH_DESCRIPTION

DEFAULT_VARIABLE = "definition"


class DefinitionLoadError(StepGraphError):
    """The file could not be run or does not define a usable definition."""


def load_definition(filepath: str | Path, variable: str = DEFAULT_VARIABLE) -> Any:
    """Run a Python file and return the object bound to ``variable``.

    Every name exported by ``stepgraph.core`` is available to the file
    without importing it.

    Args:
        filepath: Path to the Python file.
        variable: Name of the variable holding the definition: a state,
            chain, fragment or StateMachine.

    Raises:
        DefinitionLoadError: If the file cannot be read or run, the
            variable is missing, or it holds something else.
    """
    path = Path(filepath)
    try:
        code = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DefinitionLoadError(f"Cannot read {path}: {e}") from e

    namespace: dict[str, Any] = {name: getattr(core, name) for name in core.__all__}
    namespace["__name__"] = "__stepgraph_definition__"
    namespace["__file__"] = str(path)

    try:
        exec(compile(code, str(path), "exec"), namespace)
    except Exception as e:
        raise DefinitionLoadError(f"Error while running {path}: {type(e).__name__}: {e}") from e

    if variable not in namespace:
        raise DefinitionLoadError(f"No '{variable}' variable found in {path}")

    value = namespace[variable]
    if not isinstance(value, (StateMachine, Chainable)):
        raise DefinitionLoadError(
            f"'{variable}' must be a state, chain, fragment or StateMachine, got {type(value).__name__}"
        )
    return value


def graph_for(value: StateMachine | Chainable) -> StateGraph | None:
    """The top level graph of a loaded definition; None for a text definition."""
    if isinstance(value, StateMachine):
        return value.graph
    return StateGraph(value.start_state, GRAPH_DESCRIPTION)


def render_definition(value: StateMachine | Chainable, comment: str | None = None) -> str:
    """Definition JSON of a loaded definition.

    A StateMachine renders with its own comment and timeout; ``comment``
    only applies to bare chainables.
    """
    if isinstance(value, StateMachine):
        return value.definition_string
    return DefinitionBody.from_chainable(value).bind(comment=comment)
