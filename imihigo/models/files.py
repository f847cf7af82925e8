"""
File models for the Imihigo tracker.

Models representing the structure of JSON files in the data directory.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from imihigo.constants import (
    DEFAULT_ON_TRACK_THRESHOLD,
    DEFAULT_PERCENTAGE_ROUND_PRECISION,
    DEFAULT_STATUS_HEADER_WIDTH,
    DEFAULT_WARNING_THRESHOLD,
)

from .base import Pillar


class TemplatesFile(BaseModel):
    """Model for templates.json file.

    Ordered list of contracts, each stored as its list of pillars.
    """

    templates: List[List[Pillar]] = Field(default_factory=list)


class SelectionFile(BaseModel):
    """Model for selected-index.json file.

    Index of the currently selected template, or null for none.
    """

    selected_index: Optional[int] = None


class ConfigFile(BaseModel):
    """Model for config.json file.

    Tracker settings and configuration.
    """

    schema_version: str = "0.1.0"

    # Status classification
    on_track_threshold: float = DEFAULT_ON_TRACK_THRESHOLD
    warning_threshold: float = DEFAULT_WARNING_THRESHOLD

    # Display settings
    status_header_width: int = DEFAULT_STATUS_HEADER_WIDTH
    percentage_round_precision: int = DEFAULT_PERCENTAGE_ROUND_PRECISION
