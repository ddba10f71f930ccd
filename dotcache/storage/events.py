"""Event system for tracking changes to cache namespaces."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur."""

    KEY_SET = auto()
    KEY_REMOVED = auto()
    CACHE_CLEARED = auto()
    CACHE_SYNCED = auto()
    SYNC_FAILED = auto()


@dataclass
class Event:
    """An event that occurred on a cache namespace."""

    type: EventType
    timestamp: datetime
    data: dict[str, Any]

    @property
    def namespace(self) -> str | None:
        return self.data.get("namespace")

    @property
    def key(self) -> str | None:
        """Get the key for key-level events."""
        return self.data.get("key")


class EventBus:
    """Simple event bus for publishing and subscribing to events."""

    def __init__(self, history_limit: int = 1000):
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Subscribe to events of a specific type."""
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Unsubscribe from events."""
        if event_type in self._subscribers:
            self._subscribers[event_type].remove(handler)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        for handler in self._subscribers.get(event.type, []):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Handler for {event.type.name} failed")

    def get_history(
        self, event_type: EventType | None = None, limit: int = 100
    ) -> list[Event]:
        """Get event history."""
        history = self._history

        if event_type:
            history = [e for e in history if e.type == event_type]

        return history[-limit:]

    def clear_history(self) -> None:
        self._history.clear()


class EventPublisher:
    """Mixin for classes that publish events."""

    def __init__(self, event_bus: EventBus | None = None):
        self.event_bus = event_bus

    def _publish_event(self, event_type: EventType, **data: Any) -> None:
        """Publish an event if a bus is attached."""
        if self.event_bus is None:
            return
        event = Event(type=event_type, timestamp=datetime.now(), data=data)
        self.event_bus.publish(event)
