"""
CSV export of a contract.

One row per indicator, flattened with its ancestor names, every field
double-quoted with embedded quotes doubled.
"""

from dataclasses import astuple, dataclass
from datetime import date
from typing import Iterator, List, Optional

from imihigo.constants import (
    EXPORT_FILENAME_TEMPLATE,
    EXPORT_HEADERS,
    EXPORT_PERCENTAGE_PRECISION,
)
from imihigo.managers.rollup import RollupEngine
from imihigo.models.contract import Contract
from imihigo.utils import format_date, format_number


@dataclass(frozen=True)
class ExportRow:
    """Flattened view of one indicator and its ancestors."""

    pillar: str
    sector: str
    outcome: str
    output: str
    indicator: str
    baseline: str
    source_of_data: str
    annual_target: str
    q1_target: str
    q1_achievement: str
    q2_target: str
    q2_achievement: str
    q3_target: str
    q3_achievement: str
    q4_target: str
    q4_achievement: str
    total_achievement: str
    progress: str


def flatten(contract: Contract) -> Iterator[ExportRow]:
    """Yield one ExportRow per indicator in document order."""
    for pillar in contract.pillars:
        for sector in pillar.sectors:
            for outcome in sector.outcomes:
                for output in outcome.outputs:
                    for ind in output.indicators:
                        quarters = [
                            format_number(value)
                            for _, data in ind.quarters.items()
                            for value in (data.target, data.achievement)
                        ]
                        total = ind.total_achievement()
                        progress = RollupEngine.ratio(total, ind.annual_target)
                        yield ExportRow(
                            pillar.name,
                            sector.name,
                            outcome.name,
                            output.name,
                            ind.name,
                            ind.baseline.text,
                            ind.source_of_data,
                            format_number(ind.annual_target),
                            *quarters,
                            format_number(total),
                            f"{progress:.{EXPORT_PERCENTAGE_PRECISION}f}",
                        )


def quote(value: str) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def to_csv(contract: Contract) -> str:
    """Render the header line and one quoted line per indicator, joined by newlines."""
    lines: List[str] = [",".join(EXPORT_HEADERS)]
    for row in flatten(contract):
        lines.append(",".join(quote(value) for value in astuple(row)))
    return "\n".join(lines)


def report_filename(on: Optional[date] = None) -> str:
    """File name for a report generated on a date (today by default)."""
    return EXPORT_FILENAME_TEMPLATE.format(date=format_date(on or date.today()))
