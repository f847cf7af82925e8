"""
Status command for the Imihigo CLI.

Displays a dashboard summary of the selected contract (or all templates).
"""

import json

import click

from imihigo.commands import get_core, require_contract
from imihigo.constants import get_status_header_width
from imihigo.managers.rollup import RollupEngine, Status

STATUS_LABELS = {
    Status.ON_TRACK: "On Track",
    Status.WARNING: "Warning",
    Status.CRITICAL: "Critical",
}


def display_tree(engine: RollupEngine, contract) -> None:
    """Display the hierarchy with progress for every node."""

    def _walk(node, depth):
        summary = engine.summarize(node)
        label = node.name or f"(unnamed {node.kind.value})"
        click.echo(
            f"{'  ' * depth}- {label} ({engine.round_percentage(summary.progress)}%)"
        )
        for child in node.children:
            _walk(child, depth + 1)

    for pillar in contract.pillars:
        _walk(pillar, 0)


def get_status_data(core, engine: RollupEngine, all_templates: bool) -> dict:
    """Get dashboard data in a structured format for JSON output."""
    stats = core.dashboard_stats(all_templates)
    return {
        "overall_progress": engine.round_percentage(stats.summary.progress),
        "achieved": stats.summary.achieved,
        "target": stats.summary.target,
        "status": stats.summary.status.value,
        "indicator_count": stats.summary.indicator_count,
        "status_counts": {k.value: v for k, v in stats.status_counts.items()},
        "on_track_share": engine.round_percentage(stats.on_track_share),
        "pillars": [
            {
                "id": p.id,
                "name": p.name,
                "progress": engine.round_percentage(p.progress),
                "status": p.summary.status.value,
            }
            for p in core.pillar_breakdown(all_templates)
        ],
    }


@click.command(name="status")
@click.option("--all", "all_templates", is_flag=True, help="Aggregate every template, not just the selected one.")
@click.option("--tree", "show_tree", is_flag=True, help="Show progress for every node of the selected contract.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output status in JSON format.")
@click.pass_context
def status(ctx, all_templates, show_tree, json_output):
    """Displays a summary of contract progress."""
    core = get_core(ctx)
    if not all_templates:
        require_contract(core)
    engine = core.rollup
    data = get_status_data(core, engine, all_templates)

    if json_output:
        click.echo(json.dumps(data, indent=2))
        return

    width = get_status_header_width(core.config)
    click.echo("Performance Summary")
    click.echo("=" * width)
    click.echo(
        f"Overall progress: {data['overall_progress']}% "
        f"({STATUS_LABELS[Status(data['status'])]})"
    )
    click.echo(f"Indicators: {data['indicator_count']}")
    for status_key, label in STATUS_LABELS.items():
        click.echo(f"- {label}: {data['status_counts'][status_key.value]}")
    click.echo()
    click.echo("Pillar Breakdown:")
    for pillar in data["pillars"]:
        click.echo(f"- {pillar['name']}: {pillar['progress']}%")

    if show_tree and not all_templates:
        click.echo()
        click.echo("Contract Tree:")
        display_tree(engine, core.working_contract)
    click.echo("=" * width)
