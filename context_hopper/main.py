"""context-hopper CLI - collect files, slices and notes into one AI-ready export."""

import logging

import click

from .commands import add_cmd
from .commands import clear_cmd
from .commands import config
from .commands import export_cmd
from .commands import group
from .commands import list_cmd
from .commands import note_cmd
from .commands import remove_cmd
from .commands import reorder_cmd
from .commands import tokens_cmd
from .commands import tree_cmd
from .console import console
from .logging_setup import init_json_logging
from .paths import get_log_path
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)


@click.group(invoke_without_command=True)
@click.version_option(package_name="context-hopper")
@click.option("--log-level", envvar="CONTEXT_HOPPER_LOG_LEVEL", default=None, help="Log level for the JSONL log file")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """context-hopper - gather code and notes into a single prompt-ready export."""
    try:
        init_json_logging(get_log_path(), log_level)
    except OSError as e:
        console.print(f"[yellow]Warning:[/yellow] file logging disabled: {escape_markup(format_error_message(e))}")

    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()

    logger.debug(f"Running command: {ctx.invoked_subcommand}")


cli.add_command(add_cmd)
cli.add_command(note_cmd)
cli.add_command(list_cmd)
cli.add_command(remove_cmd)
cli.add_command(reorder_cmd)
cli.add_command(clear_cmd)
cli.add_command(tokens_cmd)
cli.add_command(tree_cmd)
cli.add_command(export_cmd)
cli.add_command(group)
cli.add_command(config)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
