"""
ImihigoCore - entry point tying the tracker together.

Orchestrates manager classes for all operations.
Uses StorageManager for the data directory and an EventBus so that every
repository change is saved by the AutoSaveListener.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from imihigo.constants import QUARTERS, ConfigManager
from imihigo.exceptions import NotFoundError, ValidationError
from imihigo.managers import (
    AutoSaveListener,
    DashboardStats,
    Level,
    LevelRollup,
    NodeProgress,
    RollupEngine,
    StorageManager,
    TemplateBuilder,
    TemplateRepository,
    export,
    mutator,
)
from imihigo.managers.mutator import INDICATOR_FIELDS
from imihigo.models.base import BaseNode, Indicator
from imihigo.models.contract import Contract


def _entry(value: Any, level: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"Each {level} in the outline must be an object.")
    return value


def _children(parent: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    children = parent.get(key) or []
    if not isinstance(children, list):
        raise ValidationError(f"'{key}' in the outline must be a list.")
    return [_entry(child, key[:-1]) for child in children]


class ImihigoCore:
    """
    Core class for tracker operations.

    Orchestrates manager classes:
    - StorageManager: Persistence to the data directory
    - TemplateRepository: Contracts and the current selection
    - AutoSaveListener: Saves the repository on every change
    - TemplateBuilder: Authoring new contracts
    - mutator: Point updates on the selected contract
    - RollupEngine: Progress figures
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        autosave_enabled: bool = True,
    ):
        """
        Initialize the ImihigoCore with a data directory.

        Args:
            data_dir: Path to the data directory. Defaults to .imihigo/ in current directory.
            autosave_enabled: Whether to save the repository on every change.
        """
        self.storage = StorageManager(data_dir)
        self.config = ConfigManager(data_dir=self.storage.data_dir)

        # Load templates from storage
        self.repository = TemplateRepository(
            self.storage.load_templates(),
            self.storage.load_selected_index(),
        )
        self.rollup = RollupEngine(config=self.config)

        self.autosave_listener = AutoSaveListener(
            self.storage, self.repository, enabled=autosave_enabled
        )
        self.repository.event_bus.subscribe(self.autosave_listener)

    # =========================================================================
    # Templates
    # =========================================================================

    @property
    def templates(self) -> List[Contract]:
        return list(self.repository.templates)

    @property
    def working_contract(self) -> Contract:
        """Selected contract, or an empty one when nothing is selected."""
        return self.repository.working_contract

    def select_template(self, index: Optional[int]) -> Contract:
        """Select a template and return the resulting working contract."""
        self.repository.select(index)
        return self.working_contract

    def new_builder(self) -> TemplateBuilder:
        """Start authoring a contract that is appended to the repository on completion."""
        return TemplateBuilder(self.repository)

    def build_from_outline(self, outline: Dict[str, Any]) -> int:
        """Author a contract from a nested outline and append it.

        The outline mirrors the hierarchy; every level is optional below pillars:
            {"pillars": [{"name": ..., "sectors": [{"name": ..., "outcomes": [
                {"name": ..., "outputs": [{"name": ..., "indicators": [
                    {"name": ..., "baseline": ..., "source_of_data": ...,
                     "targets": [q1, q2, q3, q4]}]}]}]}]}]}

        Returns:
            Index of the new template (which becomes selected).

        Raises:
            ValidationError: If the outline has no pillars or malformed levels.
        """
        pillars = outline.get("pillars") if isinstance(outline, dict) else None
        if not isinstance(pillars, list) or not pillars:
            raise ValidationError("Outline must contain a non-empty 'pillars' list.")

        builder = self.new_builder()
        builder.set_pillar_count(len(pillars))
        builder.confirm_count()
        builder.confirm_names([_entry(p, "pillar").get("name") for p in pillars])

        for p, pillar in enumerate(pillars):
            for s, sector in enumerate(_children(pillar, "sectors")):
                builder.add_sector(p)
                builder.rename_sector(p, s, sector.get("name"))
                for oc, outcome in enumerate(_children(sector, "outcomes")):
                    builder.add_outcome(p, s)
                    builder.rename_outcome(p, s, oc, outcome.get("name"))
                    for op, output in enumerate(_children(outcome, "outputs")):
                        builder.add_output(p, s, oc)
                        builder.rename_output(p, s, oc, op, output.get("name"))
                        for i, ind in enumerate(_children(output, "indicators")):
                            builder.add_indicator(p, s, oc, op)
                            for field in INDICATOR_FIELDS:
                                if field in ind:
                                    builder.update_indicator_field(p, s, oc, op, i, field, ind[field])
                            for quarter, value in zip(QUARTERS, ind.get("targets") or []):
                                builder.set_quarter_target(p, s, oc, op, i, quarter, value)

        builder.complete()
        return builder.completed_index

    def save(self) -> None:
        """Write the full repository to storage."""
        self.storage.save_templates(self.templates)
        self.storage.save_selected_index(self.repository.selected_index)

    # =========================================================================
    # Point updates on the selected contract
    # =========================================================================

    def record_achievement(self, indicator_id: str, quarter: int, value: Any) -> Contract:
        """Enter one quarter's achievement for an indicator of the selected contract."""
        return self.repository.apply(mutator.set_achievement, indicator_id, quarter, value)

    def set_quarter_target(self, indicator_id: str, quarter: int, value: Any) -> Contract:
        return self.repository.apply(mutator.set_quarter_target, indicator_id, quarter, value)

    def rename_node(self, node_id: str, name: str) -> Contract:
        return self.repository.apply(mutator.rename_node, node_id, name)

    def update_indicator_field(self, indicator_id: str, field: str, value: Any) -> Contract:
        return self.repository.apply(mutator.update_indicator_field, indicator_id, field, value)

    def get_node(self, node_id: str) -> Optional[BaseNode]:
        return self.working_contract.get_node(node_id)

    def get_indicator(self, indicator_id: str) -> Indicator:
        """Get an indicator of the selected contract.

        Raises:
            NotFoundError: If the selected contract has no such indicator.
        """
        indicator = self.working_contract.get_indicator(indicator_id)
        if indicator is None:
            raise NotFoundError(f"Indicator '{indicator_id}' not found in the selected template.")
        return indicator

    # =========================================================================
    # Figures
    # =========================================================================

    def _scope(self, all_templates: bool) -> List[Contract]:
        return self.templates if all_templates else [self.working_contract]

    def dashboard_stats(self, all_templates: bool = False) -> DashboardStats:
        """Overall progress and indicator status counts."""
        return self.rollup.dashboard_stats(self._scope(all_templates))

    def pillar_breakdown(self, all_templates: bool = False) -> List[NodeProgress]:
        return self.rollup.pillar_breakdown(self._scope(all_templates))

    def level_rollup(
        self,
        level: Union[Level, str],
        selected_id: Optional[str] = None,
        all_templates: bool = True,
    ) -> LevelRollup:
        """Level-scoped rollup over every template (or only the selected one)."""
        return self.rollup.level_rollup(self._scope(all_templates), level, selected_id)

    def level_choices(self, level: Union[Level, str], all_templates: bool = True) -> List[BaseNode]:
        return self.rollup.nodes_at_level(self._scope(all_templates), level)

    # =========================================================================
    # Export
    # =========================================================================

    def export_csv(self) -> str:
        """CSV report of the selected contract."""
        return export.to_csv(self.working_contract)

    def export_to(self, directory: Optional[Path] = None, filename: Optional[str] = None) -> Optional[Path]:
        """Write the CSV report to a file.

        Returns:
            The written path, or None when no contract is selected.
        """
        contract = self.working_contract
        if contract.is_empty():
            return None
        target = Path(directory or ".") / (filename or export.report_filename())
        target.write_text(export.to_csv(contract), encoding="utf-8")
        return target
