"""Command line interface: render, validate and inspect definition files."""
