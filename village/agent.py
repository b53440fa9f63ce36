"""
Hamlet - Villager Agent
One villager: identity, wealth, and the cognitive systems that drive it.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from shared.events import (
    NeedType,
    StateType,
    TimeOfDay,
    VillageEvent,
    VillagerInitialized,
    WealthChanged,
)

from .clock import SimulationClock
from .cognition.behavior import BehaviorStateMachine
from .cognition.goals import GoalSet
from .cognition.mood import MoodModel
from .cognition.needs import Need, NeedsSystem, Personality
from .config import SimulationConfig
from .economy import EconomyLedger
from .locations import LocationFinder, Movement, TimedMovement, VillageLayout
from .profession import Profession, ProfessionData

if TYPE_CHECKING:
    from .events import EventBus

logger = logging.getLogger(__name__)


class Agent:
    """
    A villager.

    Owns exactly one needs system, personality, mood model, goal set and
    behavior state machine. Shared services (ledger, clock, event bus,
    location finder) are injected by the world.

    Each tick runs in a fixed order:
        needs decay -> mood -> goals -> profession -> behavior -> movement
    """

    def __init__(
        self,
        name: str,
        ledger: EconomyLedger,
        clock: SimulationClock,
        events: EventBus | None = None,
        age: int = 30,
        personality: Personality | None = None,
        profession: ProfessionData | None = None,
        personal_wealth: float = 20.0,
        movement: Movement | None = None,
        locator: LocationFinder | None = None,
        rng: random.Random | None = None,
        config: SimulationConfig | None = None,
    ) -> None:
        config = config or SimulationConfig()
        self.name = name
        self.age = age
        self.personal_wealth = max(0.0, personal_wealth)

        self.ledger = ledger
        self.clock = clock
        self.events = events
        self.rng = rng or random.Random()
        self.movement = movement or TimedMovement(config.travel_time_seconds)
        self.locator = locator or VillageLayout(self.rng)

        self.personality = personality or Personality.random(self.rng)
        self.needs = NeedsSystem(self.personality, owner_name=name, events=events)
        self.mood = MoodModel(self.personality, config.mood_weights, owner_name=name, events=events)
        self.goals = GoalSet(self.personality, self.mood, owner_name=name, events=events, rng=self.rng)
        self.profession = Profession(profession, self)
        self.brain = BehaviorStateMachine(
            self,
            rng=self.rng,
            behavior_check_interval=config.behavior_check_interval,
            minimum_state_duration=config.minimum_state_duration,
            movement_timeout=config.movement_timeout,
        )

        self.goals.assign_initial()
        self.brain.transition_to(StateType.IDLE)
        self.publish(VillagerInitialized(villager_name=name, profession=self.profession.name))
        logger.info("%s the %s joins the village (%s)", name, self.profession.name, self.personality.profile())

    def publish(self, event: VillageEvent) -> None:
        if self.events is not None:
            self.events.publish(event)

    # ------------------------------------------------------------------
    # Wealth
    # ------------------------------------------------------------------

    def earn_wealth(self, amount: float) -> None:
        if amount <= 0:
            return
        self.personal_wealth += amount
        self.publish(WealthChanged(villager_name=self.name, amount=amount, new_total=self.personal_wealth))

    def spend_wealth(self, amount: float) -> None:
        if amount <= 0:
            return
        spent = min(amount, self.personal_wealth)
        self.personal_wealth -= spent
        self.publish(WealthChanged(villager_name=self.name, amount=-spent, new_total=self.personal_wealth))

    def refund_wealth(self, amount: float) -> None:
        self.earn_wealth(amount)

    def can_afford_need(self, need: Need) -> bool:
        return need.can_afford(self, self.ledger)

    def can_obtain_need(self, need: Need) -> bool:
        """Affordable and in stock, so a fulfillment attempt can succeed."""
        return self.can_afford_need(need) and need.in_stock(self.ledger)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> StateType | None:
        return self.brain.current_type

    def tick(self, delta_seconds: float) -> None:
        """Advance this villager by real seconds."""
        if delta_seconds <= 0:
            return

        was_critical = {need.need_type for need in self.needs.get_critical_needs()}
        self.needs.update(self.clock.to_sim_hours(delta_seconds))
        newly_critical: list[NeedType] = [
            need.need_type for need in self.needs.get_critical_needs() if need.need_type not in was_critical
        ]

        self.mood.update_happiness(
            delta_seconds,
            needs_satisfaction=self.needs.average_value(),
            personal_wealth=self.personal_wealth,
            employed=self.profession.is_employed,
            goal_satisfaction=self.goals.satisfaction(),
        )
        self.goals.update(delta_seconds, self.personal_wealth, self.brain.current_type)
        self.profession.update(delta_seconds)

        for need_type in newly_critical:
            self.brain.on_need_critical(need_type)
        self.brain.update(delta_seconds)
        self.movement.update(delta_seconds)

    def on_time_of_day_changed(self, time_of_day: TimeOfDay) -> None:
        self.brain.on_time_of_day_changed(time_of_day)

    def get_state(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "profession": self.profession.name,
            "wealth": round(self.personal_wealth, 2),
            "state": self.current_state.value if self.current_state else None,
            "needs": self.needs.summary(),
            "mood": self.mood.summary(),
            "goals": self.goals.summary(),
            "personality": self.personality.get_state(),
        }

    def __str__(self) -> str:
        state = self.current_state.value if self.current_state else "None"
        return f"{self.name} ({self.profession.name}, {state}, {self.mood.category.value})"
