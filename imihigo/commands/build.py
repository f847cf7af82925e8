"""
Build command for the Imihigo CLI.

Authors a new contract template from a JSON outline file.
"""
import json

import click

from imihigo.commands import get_core
from imihigo.exceptions import ImihigoError


@click.command(name="build")
@click.argument("outline", type=click.File("r"))
@click.pass_context
def build(ctx, outline):
    """Create a template from an OUTLINE json file and select it.

    \b
    The outline nests pillars > sectors > outcomes > outputs > indicators:
      {"pillars": [{"name": "...", "sectors": [{"name": "...", "outcomes": [
        {"name": "...", "outputs": [{"name": "...", "indicators": [
          {"name": "...", "baseline": "...", "source_of_data": "...",
           "targets": [250, 250, 250, 250]}]}]}]}]}]}
    """
    try:
        data = json.load(outline)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Outline is not valid JSON: {e}")

    core = get_core(ctx)
    try:
        index = core.build_from_outline(data)
    except ImihigoError as e:
        raise click.ClickException(str(e))

    contract = core.repository.get(index)
    indicator_count = sum(1 for _ in contract.indicators())
    click.echo(f"Created template {index} with {len(contract)} pillars and {indicator_count} indicators.")
