"""Commands that capture and arrange context items."""

from __future__ import annotations

import sys

import click
from pydantic import ValidationError
from rich.table import Table

from ..assembler import build_structure_note
from ..console import console
from ..context_store import ContextStore
from ..models import ContextItem
from ..models import LineRange
from ..paths import create_context_store
from ..tree import EmptyPathListError
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message


def _parse_lines(ctx: click.Context, param: click.Parameter, value: str | None) -> LineRange | None:
    """Parse a 1-indexed ``START-END`` (or single ``N``) line span."""
    if value is None:
        return None
    start_text, _, end_text = value.partition("-")
    try:
        start = int(start_text)
        end = int(end_text) if end_text else start
    except ValueError:
        raise click.BadParameter(f"Expected START-END line numbers, got '{value}'") from None
    if start < 1 or end < 1:
        raise click.BadParameter("Line numbers start at 1")
    try:
        return LineRange(start=start - 1, end=end - 1)
    except ValidationError as e:
        raise click.BadParameter(format_error_message(e)) from None


def _render_items(store: ContextStore) -> None:
    items = store.get_items()
    if not items:
        console.print("[dim]No context items. Add files with 'context-hopper add PATH'.[/dim]")
        return

    table = Table(title="Context Items", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="green")
    table.add_column("Type", style="magenta")
    table.add_column("Item")
    table.add_column("Tokens", justify="right", style="yellow")

    for index, item in enumerate(items, start=1):
        label = item.display_label if item.is_file else _preview(item)
        tokens = str(item.tokens) if item.tokens is not None else "?"
        table.add_row(str(index), item.id, item.type.value, escape_markup(label), tokens)

    console.print(table)
    console.print(f"[bold]Total Tokens:[/bold] {store.total_tokens()}")


def _preview(item: ContextItem, width: int = 60) -> str:
    text = " ".join(item.content.split())
    return text if len(text) <= width else text[: width - 3] + "..."


@click.command(name="add")
@click.argument("paths", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option("--lines", "line_range", callback=_parse_lines, metavar="START-END", help="1-indexed line span")
@click.option("--label", help="Display name (default: file name)")
@click.option("--language", "language_id", help="Language hint for comment stripping")
def add_cmd(paths: tuple[str, ...], line_range: LineRange | None, label: str | None, language_id: str | None):
    """Add files (or a line span of a file) to the context."""
    if line_range is not None and len(paths) > 1:
        raise click.UsageError("--lines can only be used with a single file")

    store = create_context_store()
    for path in paths:
        item = store.add_file(path, line_range, label=label, language_id=language_id)
        if item is None:
            console.print(f"[yellow]Already in context:[/yellow] {escape_markup(path)}")
        else:
            console.print(f"[green]✓[/green] Added {escape_markup(item.display_label)} [dim]({item.tokens} tokens)[/dim]")


@click.command(name="note")
@click.argument("text")
def note_cmd(text: str):
    """Add a free-form note to the context."""
    text = text.strip()
    if not text:
        raise click.BadParameter("Note text cannot be empty")
    item = create_context_store().add_note(text)
    console.print(f"[green]✓[/green] Added note {item.id} [dim]({item.tokens} tokens)[/dim]")


@click.command(name="list")
def list_cmd():
    """List context items in export order."""
    _render_items(create_context_store())


@click.command(name="remove")
@click.argument("item_ids", nargs=-1, required=True)
def remove_cmd(item_ids: tuple[str, ...]):
    """Remove items by id."""
    store = create_context_store()
    before = len(store)
    store.remove_many(item_ids)
    console.print(f"[green]✓[/green] Removed {before - len(store)} item(s)")


@click.command(name="reorder")
@click.argument("item_ids", nargs=-1, required=True)
def reorder_cmd(item_ids: tuple[str, ...]):
    """Move the given items to the front, in the given order.

    Items not named keep their relative order after the named ones.
    """
    store = create_context_store()
    store.reorder(list(item_ids))
    _render_items(store)


@click.command(name="clear")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
def clear_cmd(force: bool):
    """Remove every item from the context."""
    store = create_context_store()
    if not force:
        confirm = console.input(f"Remove all {len(store)} items? [y/N]: ")
        if confirm.lower() != "y":
            console.print("[yellow]Cancelled[/yellow]")
            return
    store.clear()
    console.print("[green]✓[/green] Context cleared")


@click.command(name="tokens")
@click.option("--recalculate", "-r", is_flag=True, help="Re-read files and recount with current settings")
def tokens_cmd(recalculate: bool):
    """Show token counts per item and in total."""
    store = create_context_store()
    if recalculate:
        store.recalculate_tokens()
    _render_items(store)


@click.command(name="tree")
@click.option("--root", "explicit_root", help="Directory to show paths under (default: common ancestor)")
@click.option("--save", is_flag=True, help="Add the tree to the context as a note")
def tree_cmd(explicit_root: str | None, save: bool):
    """Show the directory structure of the files in the context."""
    store = create_context_store()
    try:
        note = build_structure_note(store.get_items(), explicit_root)
    except EmptyPathListError:
        console.print("[yellow]No files in context.[/yellow]")
        sys.exit(1)

    console.print(escape_markup(note.content), highlight=False, soft_wrap=True)
    if save:
        store.add(note)
        console.print(f"[green]✓[/green] Added structure note {note.id}")
