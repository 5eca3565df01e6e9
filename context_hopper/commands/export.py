"""Export command: assemble the context and deliver it."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from ..assembler import assemble
from ..clipboard_handler import ClipboardError
from ..clipboard_handler import ClipboardHandler
from ..console import console
from ..console import err_console
from ..file_reader import read_file
from ..paths import create_context_store
from ..utils.error_format import escape_markup
from ..utils.error_format import format_error_message


@click.command(name="export")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the export instead of copying it")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the export to a file")
def export_cmd(to_stdout: bool, output: Path | None):
    """Assemble all items, redact secrets, and copy the result to the clipboard."""
    store = create_context_store()
    items = store.get_items()
    if not items:
        err_console.print("[yellow]Nothing to export.[/yellow]")
        return

    result = assemble(items, store.options, read_file)

    # Status goes to stderr so --stdout output stays clean
    for path in result.failed_paths:
        err_console.print(f"[yellow]Warning:[/yellow] could not read {escape_markup(path)}")

    if to_stdout:
        click.echo(result.text, nl=False)
    elif output is not None:
        try:
            output.write_text(result.text, encoding="utf-8")
        except OSError as e:
            err_console.print(f"[red]Error:[/red] {escape_markup(format_error_message(e))}")
            sys.exit(1)
        err_console.print(f"[green]✓[/green] Wrote {result.item_count} items to {escape_markup(output)}")
    else:
        try:
            ClipboardHandler().copy(result.text)
        except ClipboardError as e:
            err_console.print(f"[red]Error:[/red] {escape_markup(e)}")
            sys.exit(1)
        err_console.print(f"[green]✓[/green] Copied {result.item_count} items to clipboard.")

    if result.redacted_count:
        err_console.print(f"[yellow]Redacted {result.redacted_count} secret(s) from the export.[/yellow]")
