"""
Hamlet - Village Event Logger
Writes one log line per domain event published on the bus.
"""

from __future__ import annotations

import logging
from typing import Callable

from shared.events import (
    DayChanged,
    DestinationUnreachable,
    GoalAssigned,
    GoalAssignmentDeferred,
    GoalCompleted,
    MoodChanged,
    NeedBecameCritical,
    NeedFulfilled,
    NeedFulfillmentFailed,
    PriceChanged,
    ResourceChanged,
    ResourceCritical,
    StateChanged,
    TimeOfDayChanged,
    VillageEvent,
    VillagerInitialized,
    WealthChanged,
    WorkCompleted,
)

from .events import EventBus

logger = logging.getLogger(__name__)

# Events that point at something going wrong
WARNING_EVENTS: tuple[type[VillageEvent], ...] = (
    NeedBecameCritical,
    NeedFulfillmentFailed,
    ResourceCritical,
    DestinationUnreachable,
)

FORMATTERS: dict[type[VillageEvent], Callable[..., str]] = {
    StateChanged: lambda e: (
        f"[State Change] {e.villager_name} ({e.profession}) changed to {e.new_state.value}"
    ),
    NeedFulfilled: lambda e: (
        f"[Need Fulfilled] {e.villager_name}'s {e.need_type.value} fulfilled. New value: {e.new_value:.1f}"
    ),
    NeedBecameCritical: lambda e: (
        f"[Need Critical] {e.villager_name}'s {e.need_type.value} is critical! Value: {e.current_value:.1f}"
    ),
    NeedFulfillmentFailed: lambda e: (
        f"[Need Failed] {e.villager_name} could not fulfill {e.need_type.value}: {e.reason}"
    ),
    MoodChanged: lambda e: (
        f"[Mood] {e.villager_name} is now {e.new_mood.value} (was {e.old_mood.value}, {e.happiness:.1f})"
    ),
    GoalAssigned: lambda e: f"[Goal Assigned] {e.villager_name}: {e.description}",
    GoalCompleted: lambda e: (
        f"[Goal Completed] {e.villager_name}: {e.description} (+{e.happiness_boost:.1f} happiness)"
    ),
    GoalAssignmentDeferred: lambda e: (
        f"[Goal Deferred] {e.villager_name}: retrying in {e.retry_in_seconds:.0f}s ({e.reason})"
    ),
    WorkCompleted: lambda e: (
        f"[Work Completed] {e.villager_name} ({e.profession}) produced "
        f"{e.resources_produced:.1f} {e.resource_type.value}"
    ),
    WealthChanged: lambda e: (
        f"[Wealth Change] {e.villager_name} {'earned' if e.amount >= 0 else 'spent'} "
        f"{abs(e.amount):.1f}. New total: {e.new_total:.1f}"
    ),
    DestinationUnreachable: lambda e: (
        f"[Unreachable] {e.villager_name} gave up on {e.state.value} after {e.waited_seconds:.1f}s"
    ),
    VillagerInitialized: lambda e: f"[Villager] {e.villager_name} joined as {e.profession}",
    ResourceChanged: lambda e: (
        f"[Resource Change] {e.resource_type.value}: {e.amount:+.1f} = {e.new_total:.1f} ({e.source})"
    ),
    ResourceCritical: lambda e: (
        f"[Resource Critical] {e.resource_type.value} is low! Amount: {e.current_amount:.1f}"
    ),
    PriceChanged: lambda e: (
        f"[Price Change] {e.resource_type.value}: {e.old_price:.2f} -> {e.new_price:.2f}"
    ),
    TimeOfDayChanged: lambda e: f"[Time] {e.time_of_day.value} ({int(e.hour):02d}:{e.minute:02d})",
    DayChanged: lambda e: f"[Day] Day {e.new_day} begins",
}


class VillageEventLogger:
    """
    Logs every event on a bus.

    Problems (critical needs, failed fulfillments, shortages, unreachable
    destinations) log at WARNING; everything else at INFO.
    """

    def __init__(self, events: EventBus, log: logging.Logger | None = None) -> None:
        self._events = events
        self._log = log or logger
        self._attached = False
        self.logged_count = 0

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        if not self._attached:
            self._events.subscribe_all(self.handle)
            self._attached = True

    def detach(self) -> None:
        if self._attached:
            self._events.unsubscribe_all(self.handle)
            self._attached = False

    @staticmethod
    def format_event(event: VillageEvent) -> str:
        formatter = FORMATTERS.get(type(event))
        if formatter is None:
            return f"[{event.event_type}] {event.to_dict()}"
        return formatter(event)

    def handle(self, event: VillageEvent) -> None:
        level = logging.WARNING if isinstance(event, WARNING_EVENTS) else logging.INFO
        self._log.log(level, self.format_event(event))
        self.logged_count += 1
