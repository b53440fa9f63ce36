"""
Hamlet - Simulation World
Owns the shared services and drives every villager once per tick.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from shared.events import DayChanged, TimeOfDayChanged

from .agent import Agent
from .clock import SimulationClock
from .cognition.needs import Personality
from .config import SimulationConfig
from .economy import EconomyLedger
from .events import EventBus
from .locations import LocationFinder, TimedMovement, VillageLayout
from .profession import DEFAULT_PROFESSIONS, ProfessionData, ProfessionType

logger = logging.getLogger(__name__)

FIRST_NAMES = ["John", "Mary", "Robert", "Emma", "William", "Olivia", "James", "Sophia", "Thomas", "Isabella"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Jones", "Brown", "Miller", "Davis", "Wilson", "Taylor", "Clark"]

# Spawn distribution; remaining slots become farmers
PROFESSION_DISTRIBUTION: dict[ProfessionType, int] = {
    ProfessionType.FARMER: 8,
    ProfessionType.SHOPKEEPER: 2,
    ProfessionType.PRIEST: 1,
    ProfessionType.CRAFTSMAN: 2,
}


class SimulationWorld:
    """
    The village.

    A world owns exactly one ledger, one event bus and one clock, and
    hands references to each villager at creation. ``tick`` advances the
    clock first, then every villager in spawn order. Day changes record the
    ledger's daily snapshot; time-of-day changes are forwarded to every
    villager after the clock has moved.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        events: EventBus | None = None,
        professions: dict[ProfessionType, ProfessionData] | None = None,
        locator: LocationFinder | None = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.rng = random.Random(self.config.seed)
        self.events = events or EventBus()
        self.professions = professions or DEFAULT_PROFESSIONS

        self.clock = SimulationClock(
            day_length_seconds=self.config.day_length_seconds,
            start_hour=self.config.start_hour,
            events=self.events,
        )
        self.ledger = EconomyLedger(
            events=self.events,
            initial_stock=self.config.initial_stock,
            base_prices=self.config.base_prices,
            soft_floor=self.config.resource_soft_floor,
        )
        self.locator = locator or VillageLayout(self.rng)
        self.agents: list[Agent] = []
        self.tick_count = 0

        self._pending_time_of_day: list[TimeOfDayChanged] = []
        self.events.subscribe(DayChanged, self._on_day_changed)
        self.events.subscribe(TimeOfDayChanged, self._on_time_of_day_changed)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def profession_distribution(self, count: int) -> list[ProfessionType]:
        distribution: list[ProfessionType] = []
        for profession_type, n in PROFESSION_DISTRIBUTION.items():
            distribution.extend([profession_type] * n)
        if len(distribution) < count:
            distribution.extend([ProfessionType.FARMER] * (count - len(distribution)))
        self.rng.shuffle(distribution)
        return distribution[:count]

    def generate_name(self) -> str:
        taken = {agent.name for agent in self.agents}
        name = f"{self.rng.choice(FIRST_NAMES)} {self.rng.choice(LAST_NAMES)}"
        base, suffix = name, 2
        while name in taken:
            name = f"{base} {suffix}"
            suffix += 1
        return name

    def generate_age(self) -> int:
        roll = self.rng.random()
        if roll < 0.4:
            return self.rng.randrange(18, 30)
        if roll < 0.75:
            return self.rng.randrange(30, 50)
        if roll < 0.95:
            return self.rng.randrange(50, 65)
        return self.rng.randrange(65, 90)

    def spawn_villager(
        self,
        profession_type: ProfessionType = ProfessionType.UNEMPLOYED,
        name: str | None = None,
        personality: Personality | None = None,
        personal_wealth: float | None = None,
    ) -> Agent:
        """Create a villager wired to this world's services."""
        wealth = personal_wealth
        if wealth is None:
            wealth = self.rng.uniform(self.config.starting_wealth_min, self.config.starting_wealth_max)

        agent = Agent(
            name=name or self.generate_name(),
            ledger=self.ledger,
            clock=self.clock,
            events=self.events,
            age=self.generate_age(),
            personality=personality or Personality.random(self.rng),
            profession=self.professions.get(profession_type),
            personal_wealth=wealth,
            movement=TimedMovement(self.config.travel_time_seconds),
            locator=self.locator,
            rng=random.Random(self.rng.getrandbits(32)),
            config=self.config,
        )
        self.agents.append(agent)
        return agent

    def populate(self, count: int | None = None) -> list[Agent]:
        """Spawn the initial population."""
        count = self.config.villager_count if count is None else count
        spawned = [self.spawn_villager(p) for p in self.profession_distribution(count)]
        logger.info("Initialized %d villagers in the village", len(spawned))
        return spawned

    def get_agent(self, name: str) -> Agent | None:
        for agent in self.agents:
            if agent.name == name:
                return agent
        return None

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_day_changed(self, event: DayChanged) -> None:
        self.ledger.record_daily_snapshot()

    def _on_time_of_day_changed(self, event: TimeOfDayChanged) -> None:
        self._pending_time_of_day.append(event)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def tick(self, delta_seconds: float) -> None:
        """Advance the clock, then each villager in order."""
        if delta_seconds <= 0:
            return

        self.clock.advance(delta_seconds)

        pending, self._pending_time_of_day = self._pending_time_of_day, []
        for event in pending:
            logger.debug("Time of day: %s", event.time_of_day.value)
            for agent in self.agents:
                agent.on_time_of_day_changed(event.time_of_day)

        for agent in self.agents:
            agent.tick(delta_seconds)
        self.tick_count += 1

    def run(self, duration_seconds: float, step_seconds: float = 0.5) -> int:
        """
        Run for a span of real seconds in fixed steps.

        Returns:
            Number of ticks executed
        """
        if step_seconds <= 0:
            raise ValueError("step_seconds must be positive")

        ticks = 0
        remaining = duration_seconds
        while remaining > 1e-9:
            step = min(step_seconds, remaining)
            self.tick(step)
            remaining -= step
            ticks += 1
        return ticks

    def run_days(self, days: float, step_seconds: float = 0.5) -> int:
        return self.run(days * self.config.day_length_seconds, step_seconds)

    def snapshot(self) -> dict[str, Any]:
        return {
            "clock": self.clock.get_state(),
            "villagers": [agent.get_state() for agent in self.agents],
            "economy": self.ledger.snapshot(),
        }

    def __str__(self) -> str:
        return f"SimulationWorld({len(self.agents)} villagers, {self.clock})"
