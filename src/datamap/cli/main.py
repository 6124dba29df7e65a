"""datamap CLI: main entry point and shared utilities."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from datamap.core.models import SystemType

console = Console()

# Color per system type
TYPE_COLORS = {
    SystemType.APPLICATION: "#3b82f6",
    SystemType.SERVICE: "#10b981",
    SystemType.DATABASE: "#f59e0b",
    SystemType.INTEGRATION: "#8b5cf6",
}


def get_type_style(system_type: SystemType) -> str:
    """Return Rich style string for a system type."""
    return TYPE_COLORS.get(system_type, "dim")


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def data_option(fn):
    """Shared --data option; falls back to DATAMAP_DATA_FILE, then the sample."""
    return click.option(
        "--data",
        "data_file",
        default=None,
        type=click.Path(dir_okay=False, path_type=Path),
        help="System export JSON (default: $DATAMAP_DATA_FILE or bundled sample)",
    )(fn)


def load_settings():
    """Resolve settings, exiting with a message on invalid DATAMAP_* values."""
    from pydantic import ValidationError

    from datamap.config import get_settings

    try:
        return get_settings()
    except ValidationError as e:
        console.print(f"[red]Error:[/red] invalid settings: {escape(str(e))}")
        sys.exit(1)


def load_datamap(ctx: click.Context, data_file: Path | None):
    """Load and normalize the catalog, exiting with a message on bad input."""
    from datamap.catalog import DataMap
    from datamap.core.errors import DataMapError
    from datamap.core.logging import DataMapLogger, Verbosity
    from datamap.sources import get_source

    settings = load_settings()
    source = get_source(data_file or settings.data_file)

    verbosity = settings.verbosity_level
    if ctx.obj and ctx.obj.get("verbose"):
        verbosity = Verbosity.DEBUG
    run_logger = DataMapLogger(verbosity=verbosity, log_dir=settings.log_dir)
    ctx.call_on_close(run_logger.close)

    try:
        datamap = DataMap.from_source(source, run_logger)
    except (FileNotFoundError, ValueError, DataMapError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)
    return datamap, run_logger


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Explore systems, data uses and data flows."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


def cli():
    """Entrypoint that loads .env before running the CLI."""
    from dotenv import load_dotenv

    load_dotenv()
    main()


# Import subcommand modules to register commands
from datamap.cli.graph_commands import graph, show  # noqa: E402
from datamap.cli.info_commands import info  # noqa: E402
from datamap.cli.view_commands import lookups, systems  # noqa: E402

main.add_command(systems)
main.add_command(lookups)
main.add_command(show)
main.add_command(graph)
main.add_command(info)
