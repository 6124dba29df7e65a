"""View commands: datamap systems, datamap lookups."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich import box
from rich.markup import escape
from rich.table import Table

from datamap.cli.main import (
    console,
    data_option,
    get_type_style,
    load_datamap,
    load_settings,
)


@click.command()
@data_option
@click.option(
    "--layout",
    type=click.Choice(["system_type", "data_use"], case_sensitive=False),
    default=None,
    help="Group by system type or data use (default: $DATAMAP_LAYOUT_MODE)",
)
@click.option("--use", "data_use", default=None, help="Keep systems with this data use")
@click.option(
    "--category",
    "categories",
    multiple=True,
    help="Keep systems holding this category (repeatable, all must match)",
)
@click.option(
    "--source-type",
    type=click.Choice(["derived", "provided"], case_sensitive=False),
    default=None,
    help="Keep systems with at least one derived/provided category",
)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def systems(
    ctx: click.Context,
    data_file: Path | None,
    layout: str | None,
    data_use: str | None,
    categories: tuple[str, ...],
    source_type: str | None,
    output_json: bool,
):
    """List systems, filtered and grouped.

    Examples:
      datamap systems --layout data_use
      datamap systems --category location --source-type derived
    """
    from datamap.core.errors import FilterError
    from datamap.core.models import FilterState

    datamap, run_logger = load_datamap(ctx, data_file)

    try:
        filters = FilterState.from_dict({
            "data_use": data_use,
            "data_categories": list(categories),
            "data_source_type": source_type,
            "layout_mode": layout.lower() if layout else load_settings().layout_mode,
        })
    except FilterError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    view = datamap.view(filters, run_logger)
    run_logger.run_finish()

    if output_json:
        payload = view.to_dict()
        payload["systems"] = {s.id: s.to_dict() for s in view.filtered}
        click.echo(json.dumps(payload, indent=2))
        return

    if view.is_empty:
        console.print("[dim]No systems match the current filters.[/dim]")
        return

    for group in view.groups:
        table = Table(
            title=f"{escape(group.group_label)} ({len(group.systems)})",
            box=box.ROUNDED,
            title_justify="left",
        )
        table.add_column("System", style="bold")
        table.add_column("Type")
        table.add_column("Data Uses")
        table.add_column("Categories")

        for system in group.systems:
            style = get_type_style(system.system_type)
            table.add_row(
                escape(system.name),
                f"[{style}]{escape(system.raw_system_type or '-')}[/{style}]",
                escape(", ".join(system.data_uses) or "-"),
                escape(", ".join(system.data_categories) or "-"),
            )
        console.print(table)

    console.print(f"[dim]{len(view.filtered)} of {len(datamap)} systems[/dim]")


@click.command()
@data_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def lookups(ctx: click.Context, data_file: Path | None, output_json: bool):
    """Show every data use and category available for filtering."""
    datamap, run_logger = load_datamap(ctx, data_file)
    run_logger.run_finish()

    if output_json:
        click.echo(json.dumps(datamap.lookups.to_dict(), indent=2))
        return

    table = Table(box=box.ROUNDED, show_header=True)
    table.add_column("Data Uses")
    table.add_column("Categories")
    uses = datamap.all_data_uses
    cats = datamap.all_categories
    for i in range(max(len(uses), len(cats))):
        table.add_row(
            escape(uses[i]) if i < len(uses) else "",
            escape(cats[i]) if i < len(cats) else "",
        )
    console.print(table)
