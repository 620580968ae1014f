"""Definition commands - render, validate and inspect definition files."""

from __future__ import annotations

import json

import rich_click as click

from stepgraph.core import StepGraphError
from stepgraph.core.logging_config import get_logger
from stepgraph.frontends.cli.loader import (
    DEFAULT_VARIABLE,
    graph_for,
    load_definition,
    render_definition,
)
from stepgraph.frontends.cli.output import (
    error_exit,
    error_print,
    graph_summary,
    output_json,
    print_graph_tree,
)

logger = get_logger(__name__)

var_option = click.option(
    "--var",
    "-v",
    "variable",
    default=DEFAULT_VARIABLE,
    show_default=True,
    help="Variable in FILE holding the definition",
)


@click.command()
@click.argument("file", type=click.Path(dir_okay=False))
@var_option
@click.option("--comment", "-c", default=None, help="Top level Comment (chainables only)")
@click.option("--indent", "-i", default=2, show_default=True, help="JSON indent, 0 for compact output")
def render(file: str, variable: str, comment: str | None, indent: int) -> None:
    """Render a definition file to Amazon States Language JSON.

    FILE is a Python file that assigns a state, chain, fragment or
    StateMachine to a variable (``definition`` by default). stepgraph
    classes are available without importing them.

    **Examples:**

        stepgraph render workflow.py

        stepgraph render workflow.py --var machine --indent 0
    """
    try:
        value = load_definition(file, variable)
        rendered = render_definition(value, comment=comment)
    except StepGraphError as e:
        error_exit(str(e))

    output_json(json.loads(rendered), indent=indent)


@click.command()
@click.argument("file", type=click.Path(dir_okay=False))
@var_option
def validate(file: str, variable: str) -> None:
    """Check a definition file without printing it.

    Reports every problem found and exits with status 1 if there is any.

    **Examples:**

        stepgraph validate workflow.py
    """
    try:
        value = load_definition(file, variable)
    except StepGraphError as e:
        error_exit(str(e))

    graph = graph_for(value)
    if graph is None:
        click.echo("Definition is supplied as text; nothing to validate")
        return

    errors = graph.validate()
    if errors:
        for message in errors:
            error_print(message)
        logger.debug("%s: %d validation errors", file, len(errors))
        raise SystemExit(1)

    states = graph.states
    nested = len(graph.all_graphs()) - 1
    click.echo(f"OK: {len(states)} top level states, {nested} nested graphs")


@click.command()
@click.argument("file", type=click.Path(dir_okay=False))
@var_option
@click.option("--json", "-j", "json_output", is_flag=True, help="Output as JSON")
def inspect(file: str, variable: str, json_output: bool) -> None:
    """Show the states of a definition file as a tree.

    Nested graphs (Parallel branches, Map processors) are shown under the
    state that owns them.

    **Examples:**

        stepgraph inspect workflow.py

        stepgraph inspect workflow.py --json
    """
    try:
        value = load_definition(file, variable)
    except StepGraphError as e:
        error_exit(str(e))

    graph = graph_for(value)
    if graph is None:
        error_exit("Definition is supplied as text; there are no states to inspect")

    if json_output:
        output_json(graph_summary(graph))
    else:
        print_graph_tree(graph)
