"""
Hamlet - Event Bus
In-process publish/subscribe sink for domain events.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable, TypeVar

from shared.events import VillageEvent

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=VillageEvent)
EventHandler = Callable[[VillageEvent], None]


class EventBus:
    """
    Synchronous event sink owned by the SimulationWorld.

    Handlers subscribe to a concrete event class, or to every event with
    subscribe_all(). Handlers run in subscription order inside publish().
    A failing handler is logged and skipped so a subscriber can never halt
    the tick that published the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[VillageEvent], list[EventHandler]] = defaultdict(list)
        self._catch_all: list[EventHandler] = []
        self._published_count = 0

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Register a handler for one event class."""
        self._handlers[event_type].append(handler)  # type: ignore[arg-type]

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Remove a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)  # type: ignore[arg-type]

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register a handler that receives every event."""
        self._catch_all.append(handler)

    def unsubscribe_all(self, handler: EventHandler) -> None:
        if handler in self._catch_all:
            self._catch_all.remove(handler)

    def publish(self, event: VillageEvent) -> None:
        """Deliver an event to its handlers, then to catch-all handlers."""
        self._published_count += 1
        for handler in list(self._handlers.get(type(event), ())) + list(self._catch_all):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed for %s", event.event_type)

    @property
    def published_count(self) -> int:
        return self._published_count

    def handler_count(self, event_type: type[VillageEvent] | None = None) -> int:
        """Number of handlers for a type, or all handlers when None."""
        if event_type is None:
            return sum(len(h) for h in self._handlers.values()) + len(self._catch_all)
        return len(self._handlers.get(event_type, ()))


class EventRecorder:
    """Collects published events; used by tests and reports."""

    def __init__(self, bus: EventBus | None = None) -> None:
        self.events: list[VillageEvent] = []
        if bus is not None:
            bus.subscribe_all(self)

    def __call__(self, event: VillageEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()
