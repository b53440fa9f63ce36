"""
Hamlet - Village Events
Domain event definitions shared by the engine and its subscribers.
"""

from .types import (
    # Enums
    GoalType,
    MoodCategory,
    NeedType,
    ResourceType,
    StateType,
    TimeOfDay,
    # Base
    VillageEvent,
    # Villager events
    DestinationUnreachable,
    GoalAssigned,
    GoalAssignmentDeferred,
    GoalCompleted,
    MoodChanged,
    NeedBecameCritical,
    NeedFulfilled,
    NeedFulfillmentFailed,
    StateChanged,
    VillagerInitialized,
    WealthChanged,
    WorkCompleted,
    # Economy events
    PriceChanged,
    ResourceChanged,
    ResourceCritical,
    # Time events
    DayChanged,
    TimeOfDayChanged,
)

__all__ = [
    "GoalType",
    "MoodCategory",
    "NeedType",
    "ResourceType",
    "StateType",
    "TimeOfDay",
    "VillageEvent",
    "DestinationUnreachable",
    "GoalAssigned",
    "GoalAssignmentDeferred",
    "GoalCompleted",
    "MoodChanged",
    "NeedBecameCritical",
    "NeedFulfilled",
    "NeedFulfillmentFailed",
    "StateChanged",
    "VillagerInitialized",
    "WealthChanged",
    "WorkCompleted",
    "PriceChanged",
    "ResourceChanged",
    "ResourceCritical",
    "DayChanged",
    "TimeOfDayChanged",
]
