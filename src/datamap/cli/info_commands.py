"""Info command: datamap info."""

from __future__ import annotations

import platform
import sys

import click
from rich import box
from rich.markup import escape
from rich.table import Table

from datamap.cli.main import console, load_settings


def _get_version() -> str:
    """Get the datamap package version from metadata."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("datamap")
    except PackageNotFoundError:
        from datamap import __version__

        return __version__


def _get_python_version() -> str:
    """Get the Python version (first line only)."""
    return sys.version.split("\n")[0]


def _get_platform_info() -> str:
    """Get platform system and machine architecture."""
    return f"{platform.system()} {platform.machine()}"


@click.command()
def info():
    """Show version, platform and resolved settings."""
    settings = load_settings()

    table = Table(box=box.ROUNDED, show_header=False, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    table.add_row("Version", _get_version())
    table.add_row("Python", _get_python_version())
    table.add_row("Platform", _get_platform_info())
    table.add_row("Data file", escape(str(settings.data_file)) if settings.data_file else "(bundled sample)")
    table.add_row("Layout", settings.layout_mode.value)
    table.add_row("Log dir", escape(str(settings.log_dir)) if settings.log_dir else "-")
    table.add_row("Verbosity", settings.verbosity_level.name.lower())

    console.print(table)
