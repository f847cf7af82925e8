"""
Event system for the Imihigo tracker.

Allows the template repository to notify collaborators (persistence, for
one) of changes without depending on them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

import click


class EventType(str, Enum):
    """Types of events in Imihigo."""
    TEMPLATES_CHANGED = "templates.changed"
    SELECTION_CHANGED = "selection.changed"


@dataclass
class Event:
    """Base event class."""
    type: EventType
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class RepositoryEvent(Event):
    """Event for template repository changes."""
    index: Optional[int] = None
    selected_index: Optional[int] = None
    template_count: int = 0


class EventListener(ABC):
    """Base class for event listeners."""

    @abstractmethod
    def handle(self, event: Event) -> None:
        """Handle an event.

        Args:
            event: The event to handle.
        """
        pass

    @property
    @abstractmethod
    def subscribed_events(self) -> List[EventType]:
        """Return list of event types this listener subscribes to."""
        pass


class EventBus:
    """
    Event bus for publishing and subscribing to events.

    Each repository owns its own bus.
    """

    def __init__(self) -> None:
        self._listeners: Dict[EventType, List[EventListener]] = {}

    def subscribe(self, listener: EventListener) -> None:
        """Subscribe a listener to events.

        Args:
            listener: The listener to subscribe.
        """
        for event_type in listener.subscribed_events:
            self._listeners.setdefault(event_type, [])
            if listener not in self._listeners[event_type]:
                self._listeners[event_type].append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        """Unsubscribe a listener from all events.

        Args:
            listener: The listener to unsubscribe.
        """
        for event_type in self._listeners:
            if listener in self._listeners[event_type]:
                self._listeners[event_type].remove(listener)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribed listeners.

        Args:
            event: The event to publish.
        """
        for listener in list(self._listeners.get(event.type, [])):
            try:
                listener.handle(event)
            except Exception as e:
                # Report but don't stop other listeners
                click.echo(f"  ⚠ Listener {listener.__class__.__name__} failed: {e}", err=True)

    def clear(self) -> None:
        """Clear all listeners (useful for testing)."""
        self._listeners.clear()
