"""
Analytics command for the Imihigo CLI.

Level-scoped rollup over all templates (or just the selected one).
"""
import json

import click

from imihigo.commands import get_core
from imihigo.managers.rollup import Level


@click.command(name="analytics")
@click.argument("level", type=click.Choice([level.value for level in Level], case_sensitive=False))
@click.option("--node", "node_id", default=None, help="Id of one node at LEVEL to aggregate.")
@click.option("--selected-only", is_flag=True, help="Only use the selected template.")
@click.option("--list", "list_nodes", is_flag=True, help="List the nodes available at LEVEL.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def analytics(ctx, level, node_id, selected_only, list_nodes, json_output):
    """Aggregate baseline, target and achievement at LEVEL."""
    core = get_core(ctx)
    all_templates = not selected_only

    if list_nodes:
        for node in core.level_choices(level.lower(), all_templates):
            click.echo(f"{node.id}  {node.name}")
        return

    rollup = core.level_rollup(level.lower(), node_id, all_templates)
    engine = core.rollup

    if json_output:
        click.echo(json.dumps({
            "level": rollup.level.value,
            "node": rollup.selected_id,
            "baseline": rollup.baseline,
            "annual_target": rollup.annual_target,
            "annual_achievement": rollup.annual_achievement,
            "progress": engine.round_percentage(rollup.progress),
            "status": rollup.status.value,
            "indicator_count": rollup.indicator_count,
            "quarters": {
                str(q): {
                    "baseline": data.baseline,
                    "target": data.target,
                    "achievement": data.achievement,
                    "progress": engine.round_percentage(data.progress),
                }
                for q, data in rollup.quarters.items()
            },
        }, indent=2))
        return

    scope = f"node {node_id}" if node_id else f"all {rollup.level.value}s"
    click.echo(f"Analytics for {scope} ({rollup.indicator_count} indicators)")
    click.echo(f"Baseline: {rollup.baseline:g}")
    click.echo(f"Annual target: {rollup.annual_target:g}")
    click.echo(f"Annual achievement: {rollup.annual_achievement:g}")
    click.echo(f"Progress: {engine.round_percentage(rollup.progress)}% ({rollup.status.value})")
    for quarter, data in rollup.quarters.items():
        click.echo(
            f"- Q{quarter}: baseline {data.baseline:g}, target {data.target:g}, "
            f"achievement {data.achievement:g}"
        )
