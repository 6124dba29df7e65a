"""datamap command-line interface."""

from datamap.cli.main import cli, main

__all__ = ["cli", "main"]
