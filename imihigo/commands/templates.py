"""
Template commands for the Imihigo CLI.

List saved contracts and choose the one to work on.
"""
import click

from imihigo.commands import get_core


@click.group()
def templates():
    """List and select saved contract templates."""
    pass


@templates.command(name="list")
@click.pass_context
def list_templates(ctx):
    """List saved templates; the selected one is marked with an arrow."""
    core = get_core(ctx)
    selected_index = core.repository.selected_index
    for index, contract in enumerate(core.templates):
        marker = "→" if index == selected_index else " "
        names = ", ".join(p.name for p in contract.pillars) or "(empty)"
        indicator_count = sum(1 for _ in contract.indicators())
        click.echo(f"{marker} [{index}] {names} - {indicator_count} indicators")


@templates.command(name="select")
@click.argument("index")
@click.pass_context
def select_template(ctx, index):
    """Select the template at INDEX, or 'none' to deselect."""
    core = get_core(ctx)
    if index.lower() == "none":
        core.select_template(None)
        click.echo("No template selected.")
        return
    try:
        position = int(index)
    except ValueError:
        raise click.BadParameter(f"'{index}' is not an index or 'none'.", param_hint="INDEX")
    contract = core.select_template(position)
    if contract.is_empty():
        click.echo(f"Template {position} does not exist; no template selected.", err=True)
    else:
        click.echo(f"Selected template {position}: {', '.join(p.name for p in contract.pillars)}")
