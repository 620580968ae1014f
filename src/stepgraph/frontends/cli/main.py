"""CLI entry point."""

from __future__ import annotations

import sys


def main() -> None:
    """Main entry point for the CLI."""
    import importlib.util

    if importlib.util.find_spec("rich_click") is None:
        print("CLI dependencies not installed. Run: pip install stepgraph")
        sys.exit(1)

    cli = build_cli()
    cli()


def build_cli():
    """CLI definition."""
    import rich_click as click

    from stepgraph.core.logging_config import configure_logging

    # Configure rich-click styling
    click.rich_click.USE_RICH_MARKUP = True
    click.rich_click.USE_MARKDOWN = True
    click.rich_click.SHOW_ARGUMENTS = True
    click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
    click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
    click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
    click.rich_click.ERRORS_EPILOGUE = ""
    click.rich_click.MAX_WIDTH = 100

    # =========================================================================
    # Root CLI
    # =========================================================================
    @click.group()
    @click.version_option(package_name="stepgraph")
    @click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ...)")
    @click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
    def cli(log_level: str | None, json_logs: bool):
        """stepgraph - Step Functions definitions from Python.

        **Commands:**

            stepgraph render     Print the definition JSON of a file

            stepgraph validate   Report every problem in a definition

            stepgraph inspect    Show the states of a definition as a tree
        """
        configure_logging(level=log_level, format="json" if json_logs else None)

    # =========================================================================
    # Definition commands
    # =========================================================================
    from stepgraph.frontends.cli.workflow import inspect, render, validate

    cli.add_command(render)
    cli.add_command(validate)
    cli.add_command(inspect)

    return cli


if __name__ == "__main__":
    main()
