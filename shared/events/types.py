"""
Hamlet - Village Event Types
Dataclass definitions for every domain event the engine publishes.

Events are plain values: subscribers (logging, statistics, UI) read them
but never mutate engine state through them.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar


# =============================================================================
# ENUMS
# =============================================================================


class ResourceType(Enum):
    """Village resources tracked by the economy ledger."""

    FOOD = "Food"
    WEALTH = "Wealth"
    GOODS = "Goods"
    STONE = "Stone"
    NONE = "None"  # Never stored or priced


class NeedType(Enum):
    """Physiological needs, in declaration order."""

    HUNGER = "Hunger"
    REST = "Rest"
    SOCIAL = "Social"


class MoodCategory(Enum):
    """Discrete mood derived from happiness."""

    UNHAPPY = "Unhappy"
    CONTENT = "Content"
    HAPPY = "Happy"


class GoalType(Enum):
    """Long-term objectives a villager can pursue."""

    ACCUMULATE_WEALTH = "AccumulateWealth"
    SOCIAL_PROMINENCE = "SocialProminence"
    WORK_MASTERY = "WorkMastery"
    VILLAGE_CONTRIBUTOR = "VillageContributor"


class StateType(Enum):
    """Mutually exclusive activity states."""

    IDLE = "Idle"
    WORKING = "Working"
    SOCIALIZING = "Socializing"
    SLEEPING = "Sleeping"
    RELAX_AT_HOME = "RelaxAtHome"
    NEED_FULFILLMENT = "NeedFulfillment"


class TimeOfDay(Enum):
    """Schedule blocks of the simulated day."""

    MORNING = "Morning"
    NOON = "Noon"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"


# =============================================================================
# BASE
# =============================================================================


@dataclass
class VillageEvent:
    """Base class for all events. Subclasses set ``event_type``."""

    event_type: ClassVar[str] = "event"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.event_type}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        return result


# =============================================================================
# VILLAGER EVENTS
# =============================================================================


@dataclass
class NeedBecameCritical(VillageEvent):
    """A need crossed downward through its critical threshold."""

    event_type: ClassVar[str] = "need_became_critical"

    villager_name: str = ""
    need_type: NeedType = NeedType.HUNGER
    current_value: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class NeedFulfilled(VillageEvent):
    """A need moved from critical back above its threshold."""

    event_type: ClassVar[str] = "need_fulfilled"

    villager_name: str = ""
    need_type: NeedType = NeedType.HUNGER
    new_value: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class NeedFulfillmentFailed(VillageEvent):
    """A resource-backed fulfillment attempt failed."""

    event_type: ClassVar[str] = "need_fulfillment_failed"

    villager_name: str = ""
    need_type: NeedType = NeedType.HUNGER
    required_resource: ResourceType = ResourceType.NONE
    amount_needed: float = 0.0
    reason: str = ""
    timestamp: float = field(default_factory=time.time)


@dataclass
class MoodChanged(VillageEvent):
    """Mood category changed between two ticks."""

    event_type: ClassVar[str] = "mood_changed"

    villager_name: str = ""
    old_mood: MoodCategory = MoodCategory.CONTENT
    new_mood: MoodCategory = MoodCategory.CONTENT
    happiness: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class StateChanged(VillageEvent):
    """The behavior state machine committed a transition."""

    event_type: ClassVar[str] = "state_changed"

    villager_name: str = ""
    profession: str = ""
    old_state: StateType | None = None
    new_state: StateType = StateType.IDLE
    timestamp: float = field(default_factory=time.time)


@dataclass
class GoalAssigned(VillageEvent):
    """A new goal became active."""

    event_type: ClassVar[str] = "goal_assigned"

    villager_name: str = ""
    goal_type: GoalType = GoalType.WORK_MASTERY
    target: float = 0.0
    description: str = ""
    timestamp: float = field(default_factory=time.time)


@dataclass
class GoalCompleted(VillageEvent):
    """A goal reached its target."""

    event_type: ClassVar[str] = "goal_completed"

    villager_name: str = ""
    goal_type: GoalType = GoalType.WORK_MASTERY
    description: str = ""
    happiness_boost: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class GoalAssignmentDeferred(VillageEvent):
    """No goal type was free for a replacement; it will be retried later."""

    event_type: ClassVar[str] = "goal_assignment_deferred"

    villager_name: str = ""
    retry_in_seconds: float = 0.0
    reason: str = ""
    timestamp: float = field(default_factory=time.time)


@dataclass
class WealthChanged(VillageEvent):
    """Personal wealth changed (positive = earned, negative = spent)."""

    event_type: ClassVar[str] = "wealth_changed"

    villager_name: str = ""
    amount: float = 0.0
    new_total: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class WorkCompleted(VillageEvent):
    """A profession finished one work cycle."""

    event_type: ClassVar[str] = "work_completed"

    villager_name: str = ""
    profession: str = ""
    resource_type: ResourceType = ResourceType.NONE
    resources_produced: float = 0.0
    wealth_earned: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class DestinationUnreachable(VillageEvent):
    """A state gave up waiting to arrive somewhere."""

    event_type: ClassVar[str] = "destination_unreachable"

    villager_name: str = ""
    state: StateType = StateType.IDLE
    waited_seconds: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class VillagerInitialized(VillageEvent):
    """A villager joined the simulation."""

    event_type: ClassVar[str] = "villager_initialized"

    villager_name: str = ""
    profession: str = ""
    timestamp: float = field(default_factory=time.time)


# =============================================================================
# ECONOMY EVENTS
# =============================================================================


@dataclass
class ResourceChanged(VillageEvent):
    """Stock of a resource changed."""

    event_type: ClassVar[str] = "resource_changed"

    resource_type: ResourceType = ResourceType.NONE
    amount: float = 0.0
    new_total: float = 0.0
    source: str = ""
    timestamp: float = field(default_factory=time.time)


@dataclass
class ResourceCritical(VillageEvent):
    """Stock is too low, or a consume request could not be met."""

    event_type: ClassVar[str] = "resource_critical"

    resource_type: ResourceType = ResourceType.NONE
    current_amount: float = 0.0
    timestamp: float = field(default_factory=time.time)


@dataclass
class PriceChanged(VillageEvent):
    """A committed price move."""

    event_type: ClassVar[str] = "price_changed"

    resource_type: ResourceType = ResourceType.NONE
    old_price: float = 0.0
    new_price: float = 0.0
    timestamp: float = field(default_factory=time.time)


# =============================================================================
# TIME EVENTS
# =============================================================================


@dataclass
class TimeOfDayChanged(VillageEvent):
    """The clock entered a new schedule block."""

    event_type: ClassVar[str] = "time_of_day_changed"

    time_of_day: TimeOfDay = TimeOfDay.MORNING
    hour: float = 0.0
    minute: int = 0
    timestamp: float = field(default_factory=time.time)


@dataclass
class DayChanged(VillageEvent):
    """A new simulated day started."""

    event_type: ClassVar[str] = "day_changed"

    new_day: int = 1
    timestamp: float = field(default_factory=time.time)
