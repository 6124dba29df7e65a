"""System detail commands: datamap show, datamap graph."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from datamap.cli.main import console, data_option, get_type_style, load_datamap
from datamap.pipeline.grouping import format_data_use


def _unknown_system(system_id: str) -> NoReturn:
    console.print(f"[red]Unknown system:[/red] {escape(system_id)}")
    sys.exit(1)


@click.command()
@click.argument("system_id")
@data_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def show(ctx: click.Context, system_id: str, data_file: Path | None, output_json: bool):
    """Show one system's categories, subjects and declarations.

    SYSTEM_ID is the system's key (fides_key in the export).
    """
    datamap, run_logger = load_datamap(ctx, data_file)
    run_logger.run_finish()

    system = datamap.get(system_id)
    if system is None:
        _unknown_system(system_id)

    if output_json:
        click.echo(json.dumps(system.to_dict(), indent=2))
        return

    style = get_type_style(system.system_type)
    parts = [
        Text(system.description or "No description", style="dim"),
        Text(""),
    ]
    if system.derived_categories:
        parts.append(Text.assemble(("Derived: ", "bold"), ", ".join(system.derived_categories)))
    if system.provided_categories:
        parts.append(Text.assemble(("Provided: ", "bold"), ", ".join(system.provided_categories)))
    if not system.data_categories:
        parts.append(Text("No data categories", style="dim"))
    if system.data_subjects:
        parts.append(Text.assemble(("Subjects: ", "bold"), ", ".join(system.data_subjects)))
    if system.dependencies:
        parts.append(Text.assemble(("Dependencies: ", "bold"), ", ".join(system.dependencies)))

    if system.privacy_declarations:
        parts.append(Text(""))
        parts.append(Text("Privacy Declarations", style="bold underline"))
        for decl in system.privacy_declarations:
            subjects = ", ".join(decl.data_subjects)
            parts.append(Text(f"  {format_data_use(decl.data_use)} · {subjects}"))
            parts.append(Text(f"    {', '.join(decl.data_categories)}", style="dim"))

    title = f"[bold]{escape(system.name)}[/bold] [{style}]{escape(system.raw_system_type)}[/{style}]"
    console.print(
        Panel(
            Group(*parts),
            title=title,
            title_align="left",
        )
    )


@click.command()
@click.argument("system_id")
@data_option
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def graph(ctx: click.Context, system_id: str, data_file: Path | None, output_json: bool):
    """Show what flows into and out of a system.

    SYSTEM_ID is the system's key (fides_key in the export).
    """
    datamap, run_logger = load_datamap(ctx, data_file)
    run_logger.run_finish()

    view = datamap.dependency_view(system_id)
    if view is None:
        _unknown_system(system_id)

    if output_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        return

    selected = view.selected
    style = get_type_style(selected.system_type)
    tree = Tree(
        f"[bold {style}]{escape(selected.name)}[/] [dim]({escape(selected.id)})[/dim]"
    )
    for title, flows in (("Receives data from", view.incoming), ("Sends data to", view.outgoing)):
        if not flows:
            continue
        branch = tree.add(f"[bold]{title}[/bold]")
        for flow in flows:
            style = get_type_style(flow.system.system_type)
            shared = ", ".join(flow.shared_categories) or "no shared categories"
            branch.add(f"[{style}]{escape(flow.system.name)}[/{style}] [dim]{escape(shared)}[/dim]")

    console.print(tree)
    if view.is_isolated:
        console.print("[dim]No connections[/dim]")
