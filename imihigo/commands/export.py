"""
Export command for the Imihigo CLI.

Writes the CSV report of the selected contract.
"""
from pathlib import Path

import click

from imihigo.commands import get_core, require_contract


@click.command(name="export")
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Directory to write imihigo_report_<date>.csv into.",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the CSV instead of writing a file.")
@click.pass_context
def export(ctx, output_dir, to_stdout):
    """Export the selected template as a CSV report."""
    core = get_core(ctx)
    require_contract(core)
    if to_stdout:
        click.echo(core.export_csv())
        return
    output_dir.mkdir(parents=True, exist_ok=True)
    path = core.export_to(output_dir)
    click.echo(f"Report written to {path}")
