"""
Config command group for the Imihigo CLI.

Commands for viewing and initializing tracker configuration.
"""
import json

import click

from imihigo.commands import get_core
from imihigo.exceptions import StorageError


@click.group()
def config():
    """View and initialize tracker configuration.

    Configuration is stored in <data-dir>/config.json.
    """
    pass


@config.command(name="show")
@click.pass_context
def show_config(ctx):
    """Show current configuration."""
    core = get_core(ctx)
    try:
        data = core.storage.load_config()
    except StorageError as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps(data.model_dump(mode="json"), indent=2))


@config.command(name="init")
@click.pass_context
def init_config(ctx):
    """Write config.json with default values (existing values are kept)."""
    core = get_core(ctx)
    try:
        data = core.storage.load_config()
        core.storage.save_config(data)
    except StorageError as e:
        raise click.ClickException(str(e))
    click.echo(f"Configuration written to {core.storage.config_path}")
