"""
RollupEngine for progress aggregation.

Reduces any (sub)tree - an indicator, any ancestor node, a whole contract or
a portfolio of contracts - to achievement/target sums and a progress
percentage.

Progress is always ratio-of-sums: sum of achievements over sum of targets,
at every level. A zero target yields 0% rather than a division error, and a
baseline that does not read as a number counts as 0, so the engine is total
over incomplete, author-entered data.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Union

from imihigo.constants import (
    QUARTERS,
    ConfigManager,
    get_on_track_threshold,
    get_percentage_round_precision,
    get_warning_threshold,
)
from imihigo.exceptions import ConfigurationError
from imihigo.models.base import BaseNode, Indicator, NodeKind
from imihigo.models.contract import Contract
from imihigo.utils import validate_quarter

Scope = Union[BaseNode, Contract, Iterable[Union[BaseNode, Contract]]]


class Status(str, Enum):
    """Three-way progress classification."""

    ON_TRACK = "ON_TRACK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class Level(str, Enum):
    """Levels selectable for level-scoped rollup."""

    INDICATOR = "indicator"
    OUTPUT = "output"
    OUTCOME = "outcome"

    @property
    def node_kind(self) -> NodeKind:
        return NodeKind(self.value)


@dataclass(frozen=True)
class RollupSummary:
    """Aggregate figures for one scope."""

    achieved: float
    target: float
    progress: float
    status: Status
    indicator_count: int


@dataclass(frozen=True)
class NodeProgress:
    """Progress of one named node, used for per-pillar breakdowns."""

    id: str
    name: str
    kind: NodeKind
    summary: RollupSummary

    @property
    def progress(self) -> float:
        return self.summary.progress


@dataclass(frozen=True)
class QuarterRollup:
    """One quarter of a level-scoped rollup.

    baseline is the aggregate baseline divided evenly over four quarters.
    """

    quarter: int
    baseline: float
    target: float
    achievement: float
    progress: float


@dataclass(frozen=True)
class LevelRollup:
    """Result of a level-scoped rollup."""

    level: Level
    selected_id: Optional[str]
    baseline: float
    annual_target: float
    annual_achievement: float
    progress: float
    status: Status
    indicator_count: int
    quarters: Dict[int, QuarterRollup] = field(default_factory=dict)


@dataclass(frozen=True)
class DashboardStats:
    """Headline figures for a contract or portfolio."""

    summary: RollupSummary
    status_counts: Dict[Status, int]

    @property
    def on_track_share(self) -> float:
        """Percentage of indicators currently on track."""
        count = self.summary.indicator_count
        return self.status_counts[Status.ON_TRACK] / count * 100 if count else 0.0


class RollupEngine:
    """
    Pure reducer over contract trees.

    Handles:
    - Achievement and target sums, annual or per quarter
    - Ratio-of-sums progress and status classification
    - Per-pillar breakdowns and indicator status counts
    - Level-scoped rollup for ad-hoc analytics
    """

    def __init__(
        self,
        on_track_threshold: Optional[float] = None,
        warning_threshold: Optional[float] = None,
        round_precision: Optional[int] = None,
        config: Optional[ConfigManager] = None,
    ) -> None:
        """
        Initialize RollupEngine.

        Args:
            on_track_threshold: Minimum progress for ON_TRACK. Defaults to config value.
            warning_threshold: Minimum progress for WARNING. Defaults to config value.
            round_precision: Decimal places for display rounding. Defaults to config value.
            config: ConfigManager to read defaults from. Defaults to the shared one.

        Raises:
            ConfigurationError: If the warning threshold exceeds the on-track threshold.
        """
        self.on_track_threshold = (
            on_track_threshold if on_track_threshold is not None else get_on_track_threshold(config)
        )
        self.warning_threshold = (
            warning_threshold if warning_threshold is not None else get_warning_threshold(config)
        )
        self._round_precision = (
            round_precision if round_precision is not None else get_percentage_round_precision(config)
        )
        if self.warning_threshold > self.on_track_threshold:
            raise ConfigurationError(
                f"warning_threshold ({self.warning_threshold}) must not exceed "
                f"on_track_threshold ({self.on_track_threshold})."
            )

    # =========================================================================
    # Traversal
    # =========================================================================

    def indicators(self, scope: Scope) -> Iterator[Indicator]:
        """Yield every indicator at or beneath a scope, in document order."""
        if isinstance(scope, Indicator):
            yield scope
        elif isinstance(scope, BaseNode):
            for child in scope.children:
                yield from self.indicators(child)
        elif isinstance(scope, Contract):
            yield from scope.indicators()
        else:
            for item in scope:
                yield from self.indicators(item)

    # =========================================================================
    # Sums and ratios
    # =========================================================================

    def achieved(self, scope: Scope, quarter: Optional[int] = None) -> float:
        """Sum of achievements, over all four quarters or a single one."""
        if quarter is None:
            return sum(ind.total_achievement() for ind in self.indicators(scope))
        quarter = validate_quarter(quarter)
        return sum(ind.quarter(quarter).achievement for ind in self.indicators(scope))

    def target(self, scope: Scope, quarter: Optional[int] = None) -> float:
        """Sum of annual targets, or of one quarter's targets."""
        if quarter is None:
            return sum(ind.annual_target for ind in self.indicators(scope))
        quarter = validate_quarter(quarter)
        return sum(ind.quarter(quarter).target for ind in self.indicators(scope))

    @staticmethod
    def ratio(achieved: float, target: float) -> float:
        """Percentage achieved; 0 when there is no positive target."""
        if target > 0:
            return achieved / target * 100
        return 0.0

    def progress(self, scope: Scope, quarter: Optional[int] = None) -> float:
        return self.ratio(self.achieved(scope, quarter), self.target(scope, quarter))

    def quarter_progress(self, indicator: Indicator, quarter: int) -> float:
        data = indicator.quarter(quarter)
        return self.ratio(data.achievement, data.target)

    def status(self, progress: float) -> Status:
        """Classify a progress percentage."""
        if progress >= self.on_track_threshold:
            return Status.ON_TRACK
        if progress >= self.warning_threshold:
            return Status.WARNING
        return Status.CRITICAL

    def round_percentage(self, value: float) -> float:
        return round(value, self._round_precision)

    # =========================================================================
    # Summaries
    # =========================================================================

    def summarize(self, scope: Scope) -> RollupSummary:
        """Achieved, target, progress, status and indicator count in one pass."""
        achieved = 0.0
        target = 0.0
        count = 0
        for ind in self.indicators(scope):
            achieved += ind.total_achievement()
            target += ind.annual_target
            count += 1
        progress = self.ratio(achieved, target)
        return RollupSummary(
            achieved=achieved,
            target=target,
            progress=progress,
            status=self.status(progress),
            indicator_count=count,
        )

    def status_counts(self, scope: Scope) -> Dict[Status, int]:
        """Count indicators by their own status."""
        counts = {status: 0 for status in Status}
        for ind in self.indicators(scope):
            counts[self.status(self.progress(ind))] += 1
        return counts

    def breakdown(self, parent: Union[BaseNode, Contract]) -> List[NodeProgress]:
        """Progress of each direct child (each pillar, for a contract)."""
        children = parent.pillars if isinstance(parent, Contract) else parent.children
        return [
            NodeProgress(id=child.id, name=child.name, kind=child.kind, summary=self.summarize(child))
            for child in children
        ]

    def pillar_breakdown(self, contracts: Union[Contract, Iterable[Contract]]) -> List[NodeProgress]:
        """Progress of every pillar in a contract or portfolio."""
        result: List[NodeProgress] = []
        for contract in self._contracts(contracts):
            result.extend(self.breakdown(contract))
        return result

    def dashboard_stats(self, scope: Scope) -> DashboardStats:
        return DashboardStats(summary=self.summarize(scope), status_counts=self.status_counts(scope))

    # =========================================================================
    # Level-scoped rollup
    # =========================================================================

    @staticmethod
    def _contracts(contracts: Union[Contract, Iterable[Contract]]) -> List[Contract]:
        if isinstance(contracts, Contract):
            return [contracts]
        return list(contracts)

    def nodes_at_level(
        self, contracts: Union[Contract, Iterable[Contract]], level: Union[Level, str]
    ) -> List[BaseNode]:
        """All nodes of one level across the forest, in document order."""
        kind = Level(level).node_kind
        return [node for contract in self._contracts(contracts) for node in contract.iter_nodes(kind)]

    def level_rollup(
        self,
        contracts: Union[Contract, Iterable[Contract]],
        level: Union[Level, str],
        selected_id: Optional[str] = None,
    ) -> LevelRollup:
        """Aggregate baseline, targets and achievements at one level.

        Args:
            contracts: Contract or forest of contracts in scope.
            level: INDICATOR, OUTPUT or OUTCOME.
            selected_id: Node id within that level. None aggregates every node
                at the level. An id that is not a node of that level yields zeros.

        Returns:
            LevelRollup with annual figures and a per-quarter breakdown.
        """
        level = Level(level)
        nodes = self.nodes_at_level(contracts, level)
        if selected_id is not None:
            nodes = [node for node in nodes if node.id == selected_id]
        indicators = list(self.indicators(nodes))

        baseline = sum(ind.baseline.value for ind in indicators)
        annual_target = self.target(indicators)
        annual_achievement = self.achieved(indicators)
        progress = self.ratio(annual_achievement, annual_target)

        quarters = {}
        for quarter in QUARTERS:
            q_target = self.target(indicators, quarter)
            q_achievement = self.achieved(indicators, quarter)
            quarters[quarter] = QuarterRollup(
                quarter=quarter,
                baseline=baseline / len(QUARTERS),
                target=q_target,
                achievement=q_achievement,
                progress=self.ratio(q_achievement, q_target),
            )

        return LevelRollup(
            level=level,
            selected_id=selected_id,
            baseline=baseline,
            annual_target=annual_target,
            annual_achievement=annual_achievement,
            progress=progress,
            status=self.status(progress),
            indicator_count=len(indicators),
            quarters=quarters,
        )
