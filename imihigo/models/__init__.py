"""
Data models for the Imihigo tracker.

Import models explicitly from their modules:
    from imihigo.models.base import Pillar, Sector, Outcome, Output, Indicator
    from imihigo.models.contract import Contract
    from imihigo.models.files import TemplatesFile, SelectionFile, ConfigFile
"""

from .base import (
    Baseline,
    Indicator,
    NodeKind,
    Outcome,
    Output,
    Pillar,
    QuarterlyData,
    Quarters,
    Sector,
)
from .contract import Contract, NodeRef

__all__ = [
    "Baseline",
    "Contract",
    "Indicator",
    "NodeKind",
    "NodeRef",
    "Outcome",
    "Output",
    "Pillar",
    "QuarterlyData",
    "Quarters",
    "Sector",
]
