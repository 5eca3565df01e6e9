"""Saved group commands."""

from __future__ import annotations

import sys
from datetime import datetime

import click
from rich.panel import Panel
from rich.table import Table

from ..console import console
from ..groups import SavedGroupStore
from ..models import SavedGroup
from ..paths import create_context_store
from ..paths import create_group_store
from ..paths import create_state_store
from ..utils.error_format import escape_markup


def _require_group(groups: SavedGroupStore, name_or_id: str) -> SavedGroup:
    group = groups.find(name_or_id)
    if group is None:
        console.print(f"[red]Error:[/red] Group '{escape_markup(name_or_id)}' not found")
        sys.exit(1)
    return group


def _format_created(created_at: int) -> str:
    return datetime.fromtimestamp(created_at / 1000).strftime("%Y-%m-%d %H:%M")


@click.group(invoke_without_command=True)
@click.pass_context
def group(ctx: click.Context):
    """Save and restore named snapshots of the context."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@group.command(name="save")
@click.argument("name")
def group_save(name: str):
    """Save the current items as a named group."""
    state = create_state_store()
    items = create_context_store(state).get_items()
    if not items:
        console.print("[yellow]Nothing to save: the context is empty.[/yellow]")
        return
    try:
        saved = create_group_store(state).save(name, items)
    except ValueError as e:
        raise click.BadParameter(str(e)) from None
    console.print(
        f"[green]✓[/green] Saved group '{escape_markup(saved.name)}' "
        f"({len(saved.items)} items, ~{saved.total_tokens} tokens) as {saved.id}"
    )


@group.command(name="list")
def group_list():
    """List saved groups, pinned first."""
    groups = create_group_store().list_groups()
    if not groups:
        console.print("[dim]No saved groups.[/dim]")
        return

    table = Table(title="Saved Groups", show_header=True, header_style="bold cyan")
    table.add_column("", width=2)
    table.add_column("ID", style="green")
    table.add_column("Name")
    table.add_column("Items", justify="right")
    table.add_column("Tokens", justify="right", style="yellow")
    table.add_column("Created", style="dim")

    for saved in groups:
        table.add_row(
            "📌" if saved.pinned else "",
            saved.id,
            escape_markup(saved.name),
            str(len(saved.items)),
            f"~{saved.total_tokens}",
            _format_created(saved.created_at),
        )
    console.print(table)


@group.command(name="show")
@click.argument("name_or_id")
def group_show(name_or_id: str):
    """Show a group's items."""
    saved = _require_group(create_group_store(), name_or_id)
    lines = [
        f"[bold]ID:[/bold] {saved.id}",
        f"[bold]Created:[/bold] {_format_created(saved.created_at)}",
        f"[bold]Pinned:[/bold] {'yes' if saved.pinned else 'no'}",
        f"[bold]Tokens:[/bold] ~{saved.total_tokens}",
        "",
    ]
    for item in saved.items:
        detail = item.content if item.is_file else "Note"
        lines.append(f"• {escape_markup(item.display_label)} [dim]{escape_markup(detail)}[/dim]")
    console.print(Panel("\n".join(lines), title=escape_markup(saved.name), border_style="cyan"))


@group.command(name="load")
@click.argument("name_or_id")
def group_load(name_or_id: str):
    """Replace the current context with a saved group's items."""
    state = create_state_store()
    saved = _require_group(create_group_store(state), name_or_id)
    create_context_store(state).load(saved.items)
    console.print(f"[green]✓[/green] Loaded {len(saved.items)} items from '{escape_markup(saved.name)}'")


@group.command(name="delete")
@click.argument("name_or_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
def group_delete(name_or_id: str, force: bool):
    """Delete a saved group."""
    groups = create_group_store()
    saved = _require_group(groups, name_or_id)

    if not force:
        confirm = console.input(f"Delete group '{escape_markup(saved.name)}'? [y/N]: ")
        if confirm.lower() != "y":
            console.print("[yellow]Cancelled[/yellow]")
            return

    groups.delete(saved.id)
    console.print(f"[green]✓[/green] Deleted group: {escape_markup(saved.name)}")


@group.command(name="pin")
@click.argument("name_or_id")
def group_pin(name_or_id: str):
    """Toggle a group's pinned state."""
    groups = create_group_store()
    saved = groups.toggle_pin(_require_group(groups, name_or_id).id)
    state = "Pinned" if saved and saved.pinned else "Unpinned"
    console.print(f"[green]✓[/green] {state} group: {escape_markup(name_or_id)}")
