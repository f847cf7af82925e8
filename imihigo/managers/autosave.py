"""
Auto-save listener for template repository changes.

Writes the full template list (and the selection) to storage every time the
repository changes, so the data directory always mirrors the repository.
"""
from typing import List

import click

from imihigo.exceptions import StorageError
from imihigo.managers.events import Event, EventListener, EventType
from imihigo.managers.repository import TemplateRepository
from imihigo.managers.storage_manager import StorageManager


class AutoSaveListener(EventListener):
    """
    Persists the repository after every change.

    - TEMPLATES_CHANGED: rewrite templates.json
    - SELECTION_CHANGED: rewrite (or remove) selected-index.json

    Write failures are reported and never reach the caller.
    """

    def __init__(
        self,
        storage: StorageManager,
        repository: TemplateRepository,
        enabled: bool = True,
    ) -> None:
        """
        Initialize AutoSaveListener.

        Args:
            storage: StorageManager to write through.
            repository: Repository whose current value is saved.
            enabled: Whether saving is enabled.
        """
        self.storage = storage
        self.repository = repository
        self.enabled = enabled

    @property
    def subscribed_events(self) -> List[EventType]:
        """Return list of events this listener handles."""
        return [EventType.TEMPLATES_CHANGED, EventType.SELECTION_CHANGED]

    def handle(self, event: Event) -> None:
        """Save the part of the repository the event refers to.

        Args:
            event: The repository event.
        """
        if not self.enabled:
            return

        try:
            if event.type == EventType.TEMPLATES_CHANGED:
                self.storage.save_templates(list(self.repository.templates))
            elif event.type == EventType.SELECTION_CHANGED:
                self.storage.save_selected_index(self.repository.selected_index)
        except StorageError as e:
            click.echo(f"  ⚠ Failed to save templates: {e}", err=True)
