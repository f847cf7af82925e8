"""
TemplateRepository - the ordered collection of authored contracts.

The repository is the only shared mutable cell in the tracker. It is updated
by whole-value replacement only: the tuple of contracts is rebuilt on every
change, so a reference to an earlier contract always stays valid.
"""

from typing import Any, Callable, Iterable, Optional, Tuple

from imihigo.exceptions import IndexOutOfRangeError, ValidationError
from imihigo.managers.events import EventBus, EventType, RepositoryEvent
from imihigo.models.contract import Contract, shared_ids

EMPTY_CONTRACT = Contract()


class TemplateRepository:
    """
    Holds completed contracts and a nullable selected index.

    Handles:
    - Appending newly authored contracts (and selecting them)
    - Selecting / deselecting a template
    - Committing an edited contract back by index
    - Tolerating a stale selected index (reads as "no contract selected")
    - Keeping node ids unique across all templates
    """

    def __init__(
        self,
        templates: Iterable[Contract] = (),
        selected_index: Optional[int] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        """
        Initialize TemplateRepository.

        Args:
            templates: Initial contracts in order.
            selected_index: Initially selected index, or None.
            event_bus: Bus to publish change events on. A private bus is created if omitted.
        """
        self._templates: Tuple[Contract, ...] = tuple(templates)
        self._selected_index = selected_index
        self.event_bus = event_bus if event_bus is not None else EventBus()

    @property
    def templates(self) -> Tuple[Contract, ...]:
        return self._templates

    @property
    def selected_index(self) -> Optional[int]:
        """The stored selection, which may be stale."""
        return self._selected_index

    def __len__(self) -> int:
        return len(self._templates)

    def _in_range(self, index: Optional[int]) -> bool:
        return index is not None and 0 <= index < len(self._templates)

    def get(self, index: int) -> Contract:
        """Get a contract by index.

        Raises:
            IndexOutOfRangeError: If index does not reference a template.
        """
        if not self._in_range(index):
            raise IndexOutOfRangeError(
                f"Template index {index} out of range (0..{len(self._templates) - 1})."
            )
        return self._templates[index]

    @property
    def selected(self) -> Optional[Contract]:
        """The selected contract, or None when nothing (valid) is selected."""
        if self._in_range(self._selected_index):
            return self._templates[self._selected_index]
        return None

    @property
    def working_contract(self) -> Contract:
        """The selected contract, or an empty contract when none is selected."""
        selected = self.selected
        return selected if selected is not None else EMPTY_CONTRACT

    def append(self, contract: Contract) -> int:
        """Append a completed contract and select it.

        Returns:
            The new contract's index.

        Raises:
            ValidationError: If the contract reuses a node id of another template.
        """
        self._check_ids(contract, self._templates)
        self._templates = self._templates + (contract,)
        index = len(self._templates) - 1
        self._publish(EventType.TEMPLATES_CHANGED, index)
        self.select(index)
        return index

    def select(self, index: Optional[int]) -> None:
        """Select a template by index, or deselect with None.

        Out-of-range indices are stored as given and read as no selection.
        """
        self._selected_index = index
        self._publish(EventType.SELECTION_CHANGED, index)

    def replace(self, index: int, contract: Contract) -> None:
        """Commit an edited contract back at index.

        Raises:
            IndexOutOfRangeError: If index does not reference a template.
            ValidationError: If the contract reuses a node id of another template.
        """
        self.get(index)
        self._check_ids(contract, self._templates[:index] + self._templates[index + 1:])
        self._templates = self._templates[:index] + (contract,) + self._templates[index + 1:]
        self._publish(EventType.TEMPLATES_CHANGED, index)

    def apply(self, mutation: Callable[..., Contract], *args: Any, **kwargs: Any) -> Contract:
        """Run a mutator function against the selected contract and commit the result.

        Args:
            mutation: Function taking a Contract first and returning a new Contract.

        Returns:
            The resulting working contract (empty when nothing is selected).
        """
        selected = self.selected
        if selected is None:
            return EMPTY_CONTRACT
        updated = mutation(selected, *args, **kwargs)
        if updated is not selected:
            self.replace(self._selected_index, updated)
        return updated

    def _check_ids(self, contract: Contract, others: Iterable[Contract]) -> None:
        duplicates = shared_ids(contract, others)
        if duplicates:
            raise ValidationError(
                f"Node ids already used by another template: {', '.join(duplicates)}"
            )

    def _publish(self, event_type: EventType, index: Optional[int]) -> None:
        self.event_bus.publish(
            RepositoryEvent(
                type=event_type,
                index=index,
                selected_index=self._selected_index,
                template_count=len(self._templates),
            )
        )
