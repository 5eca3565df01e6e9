"""Settings commands."""

from __future__ import annotations

import click
import yaml

from ..console import console
from ..paths import create_context_store
from ..paths import create_settings_manager
from ..settings import OPTIMIZATION_KEYS

_BOOL_VALUES = {"true": True, "on": True, "yes": True, "1": True, "false": False, "off": False, "no": False, "0": False}


@click.group(invoke_without_command=True)
@click.pass_context
def config(ctx: click.Context):
    """Show or change settings."""
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@config.command(name="show")
def config_show():
    """Show effective settings merged from all scopes."""
    settings = create_settings_manager()
    options = settings.get_optimization_options()
    effective = {
        "optimization": options.model_dump(),
        "tokens": {"model": settings.get_token_model()},
    }
    console.print(yaml.safe_dump(effective, sort_keys=False).rstrip(), highlight=False)


@config.command(name="set")
@click.argument("key", type=click.Choice([f"optimization.{k}" for k in OPTIMIZATION_KEYS] + ["tokens.model"]))
@click.argument("value")
@click.option(
    "--scope",
    type=click.Choice(["user", "project", "local"]),
    default="project",
    show_default=True,
    help="Settings file to write",
)
def config_set(key: str, value: str, scope: str):
    """Set a setting and refresh cached token counts."""
    settings = create_settings_manager()

    if key == "tokens.model":
        settings.set_token_model(value, scope)
    else:
        if value.lower() not in _BOOL_VALUES:
            raise click.BadParameter(f"Expected true/false, got '{value}'", param_hint="VALUE")
        settings.set_optimization_option(key.split(".", 1)[1], _BOOL_VALUES[value.lower()], scope)

    # Counts depend on both options and tokenizer model
    store = create_context_store(settings=settings)
    store.recalculate_tokens()
    console.print(f"[green]✓[/green] Set {key} = {value} ({scope})")
