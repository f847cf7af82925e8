"""
Contract model for the Imihigo tracker.

A Contract is an immutable value: an ordered tuple of Pillars plus an id
index mapping every node id to its owner (parent id) and position. Lookups
walk the ownership chain instead of scanning the tree, and a point update
rebuilds only the nodes on that chain.

Because the Mutator never changes tree shape, a Contract derived from
another by a point update shares the same index.
"""

from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Tuple,
)

from imihigo.models.base import BaseNode, Indicator, NodeKind, Pillar


class NodeRef(NamedTuple):
    """Ownership entry for one node in the id index."""

    kind: NodeKind
    parent_id: Optional[str]
    position: int


def build_index(pillars: Iterable[Pillar]) -> Dict[str, NodeRef]:
    """Build the id index for a tree of pillars.

    Raises:
        ValueError: If an id occurs more than once.
    """
    index: Dict[str, NodeRef] = {}

    def _traverse(nodes: Iterable[BaseNode], parent_id: Optional[str]) -> None:
        for position, node in enumerate(nodes):
            if node.id in index:
                raise ValueError(f"Duplicate node id: {node.id}")
            index[node.id] = NodeRef(node.kind, parent_id, position)
            _traverse(node.children, node.id)

    _traverse(pillars, None)
    return index


def shared_ids(contract: "Contract", others: Iterable["Contract"]) -> List[str]:
    """Ids of contract that also occur in any of others, in document order."""
    seen = set()
    for other in others:
        seen.update(other.index)
    return [node_id for node_id in contract.index if node_id in seen]


def check_unique_ids(contracts: Iterable["Contract"]) -> None:
    """Check that no node id occurs in more than one contract.

    Raises:
        ValueError: If two contracts share a node id.
    """
    seen: Dict[str, int] = {}
    for position, contract in enumerate(contracts):
        for node_id in contract.index:
            if node_id in seen:
                raise ValueError(
                    f"Node id {node_id} occurs in templates {seen[node_id]} and {position}"
                )
            seen[node_id] = position


def rebuild_path(
    pillars: Tuple[Pillar, ...],
    positions: Tuple[int, ...],
    transform: Callable[[BaseNode], BaseNode],
) -> Tuple[Pillar, ...]:
    """Apply transform to the node at a position chain and rebuild its ancestors.

    Every node on the chain is shallow-copied; every node off the chain is
    reused by reference.

    Args:
        pillars: Root tuple of the tree.
        positions: Child positions from the pillar level down to the target.
        transform: Function returning the replacement for the target node.

    Returns:
        New root tuple.
    """

    def _descend(children: Tuple[BaseNode, ...], chain: Tuple[int, ...]) -> Tuple[BaseNode, ...]:
        position, rest = chain[0], chain[1:]
        node = children[position]
        if rest:
            replacement = node.with_children(_descend(node.children, rest))
        else:
            replacement = transform(node)
        return children[:position] + (replacement,) + children[position + 1:]

    if not positions:
        return pillars
    return _descend(pillars, tuple(positions))


class Contract:
    """
    One complete performance contract (a fiscal year's Pillar hierarchy).

    Immutable from the outside: every change produces a new Contract and
    prior values stay valid.
    """

    __slots__ = ("_pillars", "_index")

    def __init__(
        self,
        pillars: Iterable[Pillar] = (),
        index: Optional[Mapping[str, NodeRef]] = None,
    ) -> None:
        self._pillars: Tuple[Pillar, ...] = tuple(pillars)
        if index is None:
            index = build_index(self._pillars)
        # derived snapshots share one read-only view
        self._index: Mapping[str, NodeRef] = (
            index if isinstance(index, MappingProxyType) else MappingProxyType(dict(index))
        )

    # =========================================================================
    # Serialization
    # =========================================================================

    @classmethod
    def from_json(cls, data: Iterable[Any]) -> "Contract":
        """Build a Contract from its stored JSON shape (a list of pillars).

        Raises:
            pydantic.ValidationError: If a pillar fails validation.
            ValueError: If node ids are not unique.
        """
        return cls(Pillar.model_validate(item) for item in data)

    def to_json(self) -> List[Dict[str, Any]]:
        """Dump to the stored JSON shape (camelCase keys)."""
        return [pillar.model_dump(mode="json", by_alias=True) for pillar in self._pillars]

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def pillars(self) -> Tuple[Pillar, ...]:
        return self._pillars

    @property
    def index(self) -> Mapping[str, NodeRef]:
        return self._index

    def is_empty(self) -> bool:
        return not self._pillars

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self._pillars)

    def __iter__(self) -> Iterator[Pillar]:
        return iter(self._pillars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Contract):
            return NotImplemented
        return self._pillars == other._pillars

    def __hash__(self) -> int:
        return hash(self._pillars)

    def __repr__(self) -> str:
        names = ", ".join(repr(p.name) for p in self._pillars)
        return f"Contract([{names}])"

    def get_ref(self, node_id: str) -> Optional[NodeRef]:
        return self._index.get(node_id)

    def positions_of(self, node_id: str) -> Optional[Tuple[int, ...]]:
        """Get the position chain from the pillar level down to a node.

        Returns:
            Tuple of positions, or None if the id is unknown.
        """
        ref = self._index.get(node_id)
        if ref is None:
            return None
        chain: List[int] = []
        while ref is not None:
            chain.append(ref.position)
            ref = self._index.get(ref.parent_id) if ref.parent_id else None
        return tuple(reversed(chain))

    def ancestors_of(self, node_id: str) -> List[BaseNode]:
        """Get the nodes on the path from the pillar down to (and including) a node."""
        positions = self.positions_of(node_id)
        if positions is None:
            return []
        path: List[BaseNode] = []
        children: Tuple[BaseNode, ...] = self._pillars
        for position in positions:
            node = children[position]
            path.append(node)
            children = node.children
        return path

    def get_node(self, node_id: str) -> Optional[BaseNode]:
        path = self.ancestors_of(node_id)
        return path[-1] if path else None

    def get_indicator(self, indicator_id: str) -> Optional[Indicator]:
        ref = self._index.get(indicator_id)
        if ref is None or ref.kind != NodeKind.INDICATOR:
            return None
        return self.get_node(indicator_id)

    def iter_nodes(self, kind: Optional[NodeKind] = None) -> Iterator[BaseNode]:
        """Iterate nodes depth-first in document order, optionally filtered by kind."""

        def _traverse(nodes: Iterable[BaseNode]) -> Iterator[BaseNode]:
            for node in nodes:
                if kind is None or node.kind == kind:
                    yield node
                yield from _traverse(node.children)

        return _traverse(self._pillars)

    def indicators(self) -> Iterator[Indicator]:
        return self.iter_nodes(NodeKind.INDICATOR)

    # =========================================================================
    # Copy-on-write update
    # =========================================================================

    def replace_node(
        self, node_id: str, transform: Callable[[BaseNode], BaseNode]
    ) -> "Contract":
        """Return a new Contract with one node replaced by transform(node).

        The transform must keep the node's id and children shape; the index
        is shared with the new Contract.

        Returns:
            New Contract, or self when the id is unknown.
        """
        positions = self.positions_of(node_id)
        if positions is None:
            return self

        def _checked(node: BaseNode) -> BaseNode:
            replacement = transform(node)
            if replacement.id != node.id or len(replacement.children) != len(node.children):
                raise ValueError("Point updates must keep node id and shape")
            return replacement

        return Contract(rebuild_path(self._pillars, positions, _checked), self._index)
