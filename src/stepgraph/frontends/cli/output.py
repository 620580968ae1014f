"""Output formatting utilities for CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any, NoReturn

import rich_click as click
from rich.console import Console
from rich.tree import Tree

from stepgraph.core import State, StateGraph


def output_json(data: Any, indent: int | None = 2) -> None:
    """Output data as JSON. ``indent`` of None or 0 prints it on one line."""
    if indent:
        click.echo(json.dumps(data, indent=indent))
    else:
        click.echo(json.dumps(data, separators=(",", ":")))


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def error_print(message: str) -> None:
    """Print error message without exiting."""
    click.echo(f"Error: {message}", err=True)


def _state_label(state: State) -> str:
    label = f"[bold]{state.state_name}[/bold] [dim]({type(state).__name__})[/dim]"
    targets = [target.state_name for target in state.outgoing_transitions()]
    if targets:
        label += f" -> {', '.join(targets)}"
    return label


def build_graph_tree(
    graph: StateGraph, tree: Tree | None = None, seen: set[StateGraph] | None = None
) -> Tree:
    """A rich Tree with one node per state and one subtree per nested graph.

    A nested graph is expanded once; a state that jumps back into a graph
    already shown is listed without repeating its subtree.
    """
    tree = tree if tree is not None else Tree(f"[cyan]{graph}[/cyan]")
    seen = seen if seen is not None else {graph}
    for state in graph.states:
        node = tree.add(_state_label(state))
        for child in state.child_graphs():
            if child in seen:
                node.add(f"[cyan]{child}[/cyan] [dim](shown above)[/dim]")
                continue
            seen.add(child)
            build_graph_tree(child, node.add(f"[cyan]{child}[/cyan]"), seen)
    return tree


def print_graph_tree(graph: StateGraph, console: Console | None = None) -> None:
    """Print the state tree of ``graph``."""
    console = console or Console()
    console.print(build_graph_tree(graph))


def graph_summary(graph: StateGraph, seen: set[StateGraph] | None = None) -> dict[str, Any]:
    """Machine readable description of a graph and its nested graphs.

    A nested graph that was already described is given by its description
    alone.
    """
    seen = seen if seen is not None else {graph}

    def nested(child: StateGraph) -> dict[str, Any]:
        if child in seen:
            return {"description": str(child)}
        seen.add(child)
        return graph_summary(child, seen)

    return {
        "description": str(graph),
        "start_at": graph.start_state.state_name,
        "states": [
            {
                "name": state.state_name,
                "type": type(state).__name__,
                "next": [target.state_name for target in state.outgoing_transitions()],
                "graphs": [nested(child) for child in state.child_graphs()],
            }
            for state in graph.states
        ],
    }
