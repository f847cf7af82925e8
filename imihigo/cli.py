"""
Command-line interface for the Imihigo performance contract tracker.

Operates on a data directory (default .imihigo/) holding the saved templates.
"""
from pathlib import Path

import click

from imihigo.commands.analytics import analytics
from imihigo.commands.build import build
from imihigo.commands.config import config
from imihigo.commands.export import export
from imihigo.commands.fill import fill
from imihigo.commands.status import status
from imihigo.commands.templates import templates
from imihigo.constants import DEFAULT_DATA_DIR


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DATA_DIR,
    show_default=True,
    envvar="IMIHIGO_DATA_DIR",
    help="Directory holding templates.json and selected-index.json.",
)
@click.pass_context
def cli(ctx, data_dir):
    """Track performance contracts and their quarterly progress."""
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


cli.add_command(status)
cli.add_command(templates)
cli.add_command(build)
cli.add_command(fill)
cli.add_command(analytics)
cli.add_command(export)
cli.add_command(config)


if __name__ == '__main__':
    cli()
