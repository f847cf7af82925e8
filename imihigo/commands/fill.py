"""
Fill commands for the Imihigo CLI.

Enter quarterly figures on the selected contract.
"""
import click

from imihigo.commands import get_core, require_contract
from imihigo.exceptions import ImihigoError
from imihigo.utils import current_quarter

QUARTER = click.IntRange(1, 4)


@click.group()
def fill():
    """Enter achievements and targets on the selected template."""
    pass


def _apply(ctx, indicator_id, update):
    core = get_core(ctx)
    require_contract(core)
    try:
        core.get_indicator(indicator_id)
        updated = update(core)
    except ImihigoError as e:
        raise click.ClickException(str(e))
    return core, updated.get_indicator(indicator_id)


@fill.command(name="achievement")
@click.argument("indicator_id")
@click.argument("quarter", type=QUARTER)
@click.argument("value")
@click.pass_context
def record_achievement(ctx, indicator_id, quarter, value):
    """Record VALUE as the QUARTER achievement of INDICATOR_ID."""
    core, indicator = _apply(
        ctx, indicator_id, lambda core: core.record_achievement(indicator_id, quarter, value)
    )
    progress = core.rollup.round_percentage(core.rollup.progress(indicator))
    click.echo(
        f"{indicator.name}: Q{quarter} achievement {indicator.quarter(quarter).achievement:g} "
        f"(annual progress {progress}%)"
    )


@fill.command(name="target")
@click.argument("indicator_id")
@click.argument("quarter", type=QUARTER)
@click.argument("value")
@click.pass_context
def set_target(ctx, indicator_id, quarter, value):
    """Set VALUE as the QUARTER target of INDICATOR_ID."""
    _, indicator = _apply(
        ctx, indicator_id, lambda core: core.set_quarter_target(indicator_id, quarter, value)
    )
    click.echo(
        f"{indicator.name}: Q{quarter} target {indicator.quarter(quarter).target:g} "
        f"(annual target {indicator.annual_target:g})"
    )


@fill.command(name="show")
@click.argument("indicator_id")
@click.pass_context
def show_indicator(ctx, indicator_id):
    """Show the quarterly figures of INDICATOR_ID."""
    core = get_core(ctx)
    require_contract(core)
    try:
        indicator = core.get_indicator(indicator_id)
    except ImihigoError as e:
        raise click.ClickException(str(e))
    engine = core.rollup
    click.echo(indicator.name)
    click.echo(f"Baseline: {indicator.baseline.text}")
    click.echo(f"Source: {indicator.source_of_data}")
    now = current_quarter()
    for quarter, data in indicator.quarters.items():
        q_progress = engine.round_percentage(engine.quarter_progress(indicator, quarter))
        marker = "  <- current" if quarter == now else ""
        click.echo(f"- Q{quarter}: {data.achievement:g} / {data.target:g} ({q_progress}%){marker}")
    progress = engine.progress(indicator)
    click.echo(
        f"Annual: {indicator.total_achievement():g} / {indicator.annual_target:g} "
        f"({engine.round_percentage(progress)}%, {engine.status(progress).value})"
    )
