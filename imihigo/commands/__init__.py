"""
Command groups for the Imihigo CLI.
"""
import click

from imihigo.core import ImihigoCore
from imihigo.exceptions import ImihigoError


def get_core(ctx: click.Context) -> ImihigoCore:
    """Create the core for the data directory chosen on the command line."""
    data_dir = (ctx.obj or {}).get("data_dir")
    try:
        return ImihigoCore(data_dir)
    except ImihigoError as e:
        raise click.ClickException(str(e))


def require_contract(core: ImihigoCore):
    """Get the selected contract or fail with a hint."""
    contract = core.working_contract
    if contract.is_empty():
        raise click.ClickException(
            "No template selected. Use 'imihigo templates select INDEX' first."
        )
    return contract
