"""
TemplateBuilder - incremental authoring of a new contract.

The builder is a small state machine:

    COUNT  -> confirm_count()  -> NAMES
    NAMES  -> confirm_names()  -> BUILDER
    BUILDER -> complete()      -> COMPLETE

Nodes are addressed by position while authoring. Every add/update rebuilds
only the path to the touched node, so earlier snapshots stay intact.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from imihigo.constants import DEFAULT_PILLAR_NAME_TEMPLATE, UNNAMED_PILLAR
from imihigo.exceptions import IndexOutOfRangeError, InvalidOperationError
from imihigo.managers.mutator import apply_indicator_field, check_indicator_field
from imihigo.managers.repository import TemplateRepository
from imihigo.models.base import (
    HIERARCHY,
    BaseNode,
    Indicator,
    Outcome,
    Output,
    Pillar,
    Sector,
)
from imihigo.models.contract import Contract, rebuild_path
from imihigo.utils import parse_count, validate_quarter


class BuilderState(str, Enum):
    """Authoring phases."""

    COUNT = "count"
    NAMES = "names"
    BUILDER = "builder"
    COMPLETE = "complete"


class TemplateBuilder:
    """
    Builds one contract level by level.

    Handles:
    - Pillar count and names
    - Appending sectors, outcomes, outputs and indicators
    - Naming nodes and filling indicator fields
    - Quarter targets with automatic annual target
    - Handing the finished contract to a TemplateRepository
    """

    def __init__(self, repository: Optional[TemplateRepository] = None) -> None:
        """
        Initialize TemplateBuilder.

        Args:
            repository: Repository that receives the contract on complete().
        """
        self.repository = repository
        self.state = BuilderState.COUNT
        self.pillar_count = 1
        self.completed_index: Optional[int] = None
        self._names: List[str] = [""]
        self._pillars: Tuple[Pillar, ...] = ()

    def _require(self, state: BuilderState) -> None:
        if self.state != state:
            raise InvalidOperationError(
                f"Operation requires builder state '{state.value}' "
                f"(current state: '{self.state.value}')."
            )

    # =========================================================================
    # COUNT
    # =========================================================================

    def set_pillar_count(self, value: Any) -> int:
        """Set the number of pillars; invalid or empty input becomes 1."""
        self._require(BuilderState.COUNT)
        self.pillar_count = parse_count(value)
        return self.pillar_count

    def confirm_count(self) -> List[str]:
        """Move to NAMES, pre-filling "Pillar <k>" for every unnamed pillar."""
        self._require(BuilderState.COUNT)
        self._names = [
            (self._names[k] if k < len(self._names) else "")
            or DEFAULT_PILLAR_NAME_TEMPLATE.format(index=k + 1)
            for k in range(self.pillar_count)
        ]
        self.state = BuilderState.NAMES
        return self.pillar_names

    # =========================================================================
    # NAMES
    # =========================================================================

    @property
    def pillar_names(self) -> List[str]:
        return list(self._names)

    def set_pillar_name(self, position: int, name: Optional[str]) -> None:
        self._require(BuilderState.NAMES)
        if not 0 <= position < len(self._names):
            raise IndexOutOfRangeError(
                f"Pillar index {position} out of range (0..{len(self._names) - 1})."
            )
        self._names[position] = name or ""

    def confirm_names(self, names: Optional[Sequence[Optional[str]]] = None) -> Tuple[Pillar, ...]:
        """Allocate the pillars and move to BUILDER.

        Args:
            names: Optional names overriding the current ones, up to the pillar count.
                Blank names become "Unnamed Pillar".
        """
        self._require(BuilderState.NAMES)
        if names is not None:
            for position, name in enumerate(list(names)[: self.pillar_count]):
                self._names[position] = name or ""
        self._pillars = tuple(Pillar(name=name or UNNAMED_PILLAR) for name in self._names)
        self.state = BuilderState.BUILDER
        return self._pillars

    # =========================================================================
    # BUILDER
    # =========================================================================

    @property
    def pillars(self) -> Tuple[Pillar, ...]:
        return self._pillars

    @property
    def contract(self) -> Contract:
        """Snapshot of the contract as authored so far."""
        return Contract(self._pillars)

    def _node_at(self, positions: Sequence[int]) -> BaseNode:
        """Resolve a position chain, raising IndexOutOfRangeError on the first bad index."""
        children: Tuple[BaseNode, ...] = self._pillars
        node: Optional[BaseNode] = None
        for depth, position in enumerate(positions):
            level = HIERARCHY[depth].value
            if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < len(children):
                raise IndexOutOfRangeError(
                    f"{level.capitalize()} index {position!r} out of range "
                    f"(have {len(children)} {level}s)."
                )
            node = children[position]
            children = node.children
        return node

    def _append(self, positions: Sequence[int], child: BaseNode) -> BaseNode:
        self._require(BuilderState.BUILDER)
        self._node_at(positions)
        self._pillars = rebuild_path(
            self._pillars, tuple(positions), lambda node: node.with_child_appended(child)
        )
        return child

    def _update(self, positions: Sequence[int], transform) -> BaseNode:
        self._require(BuilderState.BUILDER)
        self._node_at(positions)
        self._pillars = rebuild_path(self._pillars, tuple(positions), transform)
        return self._node_at(positions)

    def add_sector(self, pillar_idx: int) -> Sector:
        return self._append((pillar_idx,), Sector())

    def add_outcome(self, pillar_idx: int, sector_idx: int) -> Outcome:
        return self._append((pillar_idx, sector_idx), Outcome())

    def add_output(self, pillar_idx: int, sector_idx: int, outcome_idx: int) -> Output:
        return self._append((pillar_idx, sector_idx, outcome_idx), Output())

    def add_indicator(
        self, pillar_idx: int, sector_idx: int, outcome_idx: int, output_idx: int
    ) -> Indicator:
        return self._append((pillar_idx, sector_idx, outcome_idx, output_idx), Indicator())

    def rename_pillar(self, pillar_idx: int, name: Optional[str]) -> Pillar:
        return self._update((pillar_idx,), lambda node: node.renamed(name))

    def rename_sector(self, pillar_idx: int, sector_idx: int, name: Optional[str]) -> Sector:
        return self._update((pillar_idx, sector_idx), lambda node: node.renamed(name))

    def rename_outcome(
        self, pillar_idx: int, sector_idx: int, outcome_idx: int, name: Optional[str]
    ) -> Outcome:
        return self._update((pillar_idx, sector_idx, outcome_idx), lambda node: node.renamed(name))

    def rename_output(
        self,
        pillar_idx: int,
        sector_idx: int,
        outcome_idx: int,
        output_idx: int,
        name: Optional[str],
    ) -> Output:
        return self._update(
            (pillar_idx, sector_idx, outcome_idx, output_idx), lambda node: node.renamed(name)
        )

    def update_indicator_field(
        self,
        pillar_idx: int,
        sector_idx: int,
        outcome_idx: int,
        output_idx: int,
        indicator_idx: int,
        field: str,
        value: Any,
    ) -> Indicator:
        """Set name, baseline or source_of_data on an indicator.

        Raises:
            ValidationError: If field is not a free-text indicator field.
            IndexOutOfRangeError: If any index is out of range.
        """
        check_indicator_field(field)
        return self._update(
            (pillar_idx, sector_idx, outcome_idx, output_idx, indicator_idx),
            lambda node: apply_indicator_field(node, field, value),
        )

    def set_quarter_target(
        self,
        pillar_idx: int,
        sector_idx: int,
        outcome_idx: int,
        output_idx: int,
        indicator_idx: int,
        quarter: int,
        value: Any,
    ) -> Indicator:
        """Set one quarter's target; the annual target becomes the sum of all four.

        Raises:
            InvalidQuarterError: If quarter is not 1..4.
            IndexOutOfRangeError: If any index is out of range.
        """
        quarter = validate_quarter(quarter)
        return self._update(
            (pillar_idx, sector_idx, outcome_idx, output_idx, indicator_idx),
            lambda node: node.with_quarter_target(quarter, value),
        )

    # =========================================================================
    # Terminal
    # =========================================================================

    def complete(self) -> Contract:
        """Finish authoring and hand the contract to the repository.

        Returns:
            The finished Contract. No further changes are accepted afterwards.
        """
        self._require(BuilderState.BUILDER)
        contract = Contract(self._pillars)
        if self.repository is not None:
            self.completed_index = self.repository.append(contract)
        self.state = BuilderState.COMPLETE
        return contract
