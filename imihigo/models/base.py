"""
Node models for the Imihigo contract hierarchy.

Pillar -> Sector -> Outcome -> Output -> Indicator, with four quarterly
target/achievement pairs on every Indicator.

All models are frozen: a change always produces a new node via model_copy,
so untouched siblings are shared by reference between tree versions.
"""

import uuid
from enum import Enum
from typing import Any, ClassVar, Iterator, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_serializer,
    model_validator,
)

from imihigo.constants import QUARTERS
from imihigo.utils import format_number, parse_baseline, parse_number, validate_quarter


def new_id() -> str:
    """Generate a collision-free node identifier."""
    return str(uuid.uuid4())


class NodeKind(str, Enum):
    """The five hierarchy levels, broad to narrow."""

    PILLAR = "pillar"
    SECTOR = "sector"
    OUTCOME = "outcome"
    OUTPUT = "output"
    INDICATOR = "indicator"


HIERARCHY: Tuple[NodeKind, ...] = (
    NodeKind.PILLAR,
    NodeKind.SECTOR,
    NodeKind.OUTCOME,
    NodeKind.OUTPUT,
    NodeKind.INDICATOR,
)


class QuarterlyData(BaseModel):
    """Target and achievement for one fiscal quarter."""

    model_config = ConfigDict(frozen=True)

    target: float = 0.0
    achievement: float = 0.0

    @field_validator("target", "achievement", mode="before")
    @classmethod
    def coerce_figure(cls, v: Any) -> float:
        return parse_number(v)


QUARTER_KEYS = frozenset(
    [str(q) for q in QUARTERS] + [f"q{q}" for q in QUARTERS]
)


class Quarters(BaseModel):
    """
    Exactly four QuarterlyData records keyed 1..4.

    Stored as {"1": {...}, "2": {...}, "3": {...}, "4": {...}}.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    q1: QuarterlyData = Field(default_factory=QuarterlyData, alias="1")
    q2: QuarterlyData = Field(default_factory=QuarterlyData, alias="2")
    q3: QuarterlyData = Field(default_factory=QuarterlyData, alias="3")
    q4: QuarterlyData = Field(default_factory=QuarterlyData, alias="4")

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Accept integer keys and 4-item sequences as well as string keys.

        A mapping may omit quarters, which default to zero figures, but any
        key other than a quarter 1..4 is rejected.
        """
        if isinstance(data, (list, tuple)):
            if len(data) != len(QUARTERS):
                raise ValueError("Quarters require exactly four entries")
            return {str(q): entry for q, entry in zip(QUARTERS, data)}
        if isinstance(data, dict):
            normalized = {str(key): value for key, value in data.items()}
            unknown = [key for key in normalized if key not in QUARTER_KEYS]
            if unknown:
                raise ValueError(f"Unknown quarter keys: {', '.join(unknown)}")
            return normalized
        return data

    def get(self, quarter: int) -> QuarterlyData:
        """Get the record for one quarter (1..4)."""
        return getattr(self, f"q{validate_quarter(quarter)}")

    def replace(self, quarter: int, data: QuarterlyData) -> "Quarters":
        """Return a copy with one quarter's record replaced."""
        return self.model_copy(update={f"q{validate_quarter(quarter)}": data})

    def items(self) -> Iterator[Tuple[int, QuarterlyData]]:
        for quarter in QUARTERS:
            yield quarter, getattr(self, f"q{quarter}")

    def total_target(self) -> float:
        return sum(data.target for _, data in self.items())

    def total_achievement(self) -> float:
        return sum(data.achievement for _, data in self.items())


class Baseline(BaseModel):
    """
    Free-form baseline as a tagged value.

    Keeps the authored text for display and a best-effort numeric reading
    for aggregation. Serializes back to the authored text.
    """

    model_config = ConfigDict(frozen=True)

    text: str = ""
    value: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def from_raw(cls, data: Any) -> Any:
        if data is None:
            return {"text": "", "value": 0.0}
        if isinstance(data, (str, int, float)) and not isinstance(data, bool):
            text = data if isinstance(data, str) else format_number(data)
            return {"text": text, "value": parse_baseline(data)}
        if isinstance(data, dict) and "text" in data:
            return {"text": str(data["text"]), "value": parse_baseline(data["text"])}
        return data

    @model_serializer
    def serialize(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text


class BaseNode(BaseModel):
    """
    Base model for all hierarchy nodes.

    Common fields:
    - id: Unique identifier (uuid4 string for authored nodes)
    - name: Display name (empty names are legal)

    Subclasses set node_kind and children_field; children are tuples so a
    node can never be grown in place.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_kind: ClassVar[NodeKind]
    children_field: ClassVar[Optional[str]] = None

    id: str = Field(default_factory=new_id)
    name: str = ""

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def kind(self) -> NodeKind:
        return self.node_kind

    @property
    def children(self) -> Tuple["BaseNode", ...]:
        """Get child nodes in order (empty for Indicator)."""
        if self.children_field is None:
            return ()
        return getattr(self, self.children_field)

    def with_children(self, children: Tuple["BaseNode", ...]) -> "BaseNode":
        """Return a shallow copy holding a new children tuple.

        Raises:
            ValueError: If this node kind cannot have children.
        """
        if self.children_field is None:
            raise ValueError(f"{type(self).__name__} cannot have children")
        return self.model_copy(update={self.children_field: tuple(children)})

    def with_child_appended(self, child: "BaseNode") -> "BaseNode":
        """Return a shallow copy with one more child at the end."""
        expected = HIERARCHY[HIERARCHY.index(self.node_kind) + 1] if self.children_field else None
        if getattr(child, "node_kind", None) != expected:
            raise ValueError(
                f"{type(self).__name__} can only have {expected.value if expected else 'no'} children"
            )
        return self.with_children(self.children + (child,))

    def renamed(self, name: Optional[str]) -> "BaseNode":
        return self.model_copy(update={"name": "" if name is None else str(name)})


class Indicator(BaseNode):
    """Indicator model - measurable leaf with four quarterly records.

    annual_target is derived from the quarter targets whenever a quarter
    target is edited; achievements never touch it.
    """

    node_kind: ClassVar[NodeKind] = NodeKind.INDICATOR

    baseline: Baseline = Field(default_factory=Baseline)
    source_of_data: str = Field(default="", alias="sourceOfData")
    annual_target: float = Field(default=0.0, alias="annualTarget")
    quarters: Quarters = Field(default_factory=Quarters)

    @field_validator("annual_target", mode="before")
    @classmethod
    def coerce_annual_target(cls, v: Any) -> float:
        return parse_number(v)

    @field_validator("source_of_data", mode="before")
    @classmethod
    def coerce_source(cls, v: Any) -> str:
        return "" if v is None else str(v)

    def quarter(self, quarter: int) -> QuarterlyData:
        return self.quarters.get(quarter)

    def total_achievement(self) -> float:
        return self.quarters.total_achievement()

    def with_achievement(self, quarter: int, value: Any) -> "Indicator":
        """Replace one quarter's achievement; annual_target is left alone."""
        current = self.quarters.get(quarter)
        updated = current.model_copy(update={"achievement": parse_number(value)})
        return self.model_copy(update={"quarters": self.quarters.replace(quarter, updated)})

    def with_quarter_target(self, quarter: int, value: Any) -> "Indicator":
        """Replace one quarter's target and re-derive annual_target."""
        current = self.quarters.get(quarter)
        updated = current.model_copy(update={"target": parse_number(value)})
        quarters = self.quarters.replace(quarter, updated)
        return self.model_copy(
            update={"quarters": quarters, "annual_target": quarters.total_target()}
        )

    def with_baseline(self, raw: Any) -> "Indicator":
        return self.model_copy(update={"baseline": Baseline.model_validate(raw)})

    def with_source_of_data(self, source: Any) -> "Indicator":
        return self.model_copy(update={"source_of_data": "" if source is None else str(source)})


class Output(BaseNode):
    """Output model - groups indicators within an outcome.

    Valid children: Indicator
    """

    node_kind: ClassVar[NodeKind] = NodeKind.OUTPUT
    children_field: ClassVar[Optional[str]] = "indicators"

    indicators: Tuple[Indicator, ...] = ()


class Outcome(BaseNode):
    """Outcome model - groups outputs within a sector.

    Valid children: Output
    """

    node_kind: ClassVar[NodeKind] = NodeKind.OUTCOME
    children_field: ClassVar[Optional[str]] = "outputs"

    outputs: Tuple[Output, ...] = ()


class Sector(BaseNode):
    """Sector model - groups outcomes within a pillar.

    Valid children: Outcome
    """

    node_kind: ClassVar[NodeKind] = NodeKind.SECTOR
    children_field: ClassVar[Optional[str]] = "outcomes"

    outcomes: Tuple[Outcome, ...] = ()


class Pillar(BaseNode):
    """Pillar model - top-level container of a contract.

    Valid children: Sector
    """

    node_kind: ClassVar[NodeKind] = NodeKind.PILLAR
    children_field: ClassVar[Optional[str]] = "sectors"

    sectors: Tuple[Sector, ...] = ()
