"""
Hamlet - Professions
Work schedules and the production cycle that feeds the village economy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from shared.constants import WORK_MASTERY_PER_CYCLE
from shared.events import GoalType, ResourceType, TimeOfDay, WorkCompleted

if TYPE_CHECKING:
    from .agent import Agent

logger = logging.getLogger(__name__)


class ProfessionType(Enum):
    FARMER = "Farmer"
    SHOPKEEPER = "Shopkeeper"
    PRIEST = "Priest"
    CRAFTSMAN = "Craftsman"
    UNEMPLOYED = "Unemployed"


@dataclass
class ProfessionData:
    """Static description of a profession."""

    profession_type: ProfessionType
    work_interval: float = 3.0  # sim hours per work cycle
    primary_resource: ResourceType = ResourceType.NONE
    resource_output: float = 2.0
    wealth_generation: float = 1.0
    working_hours: frozenset[TimeOfDay] = field(
        default_factory=lambda: frozenset({TimeOfDay.MORNING, TimeOfDay.AFTERNOON})
    )
    social_hours: frozenset[TimeOfDay] = field(default_factory=lambda: frozenset({TimeOfDay.EVENING}))
    resting_hours: frozenset[TimeOfDay] = field(default_factory=lambda: frozenset({TimeOfDay.NIGHT}))

    @property
    def name(self) -> str:
        return self.profession_type.value


DEFAULT_PROFESSIONS: dict[ProfessionType, ProfessionData] = {
    ProfessionType.FARMER: ProfessionData(
        ProfessionType.FARMER,
        work_interval=3.0,
        primary_resource=ResourceType.FOOD,
        resource_output=12.0,
        wealth_generation=4.0,
    ),
    ProfessionType.SHOPKEEPER: ProfessionData(
        ProfessionType.SHOPKEEPER,
        work_interval=3.0,
        primary_resource=ResourceType.GOODS,
        resource_output=3.0,
        wealth_generation=6.0,
        working_hours=frozenset({TimeOfDay.MORNING, TimeOfDay.NOON, TimeOfDay.AFTERNOON}),
    ),
    ProfessionType.PRIEST: ProfessionData(
        ProfessionType.PRIEST,
        work_interval=4.0,
        primary_resource=ResourceType.NONE,
        resource_output=0.0,
        wealth_generation=5.0,
        working_hours=frozenset({TimeOfDay.MORNING, TimeOfDay.EVENING}),
        social_hours=frozenset({TimeOfDay.NOON, TimeOfDay.AFTERNOON}),
    ),
    ProfessionType.CRAFTSMAN: ProfessionData(
        ProfessionType.CRAFTSMAN,
        work_interval=3.0,
        primary_resource=ResourceType.STONE,
        resource_output=2.0,
        wealth_generation=5.0,
    ),
    ProfessionType.UNEMPLOYED: ProfessionData(
        ProfessionType.UNEMPLOYED,
        primary_resource=ResourceType.NONE,
        resource_output=0.0,
        wealth_generation=0.0,
        working_hours=frozenset(),
        social_hours=frozenset({TimeOfDay.NOON, TimeOfDay.EVENING}),
    ),
}


class Profession:
    """
    A villager's job.

    While the villager is at work (``handle_work(True)``), a work timer
    accrues simulated hours scaled by mood efficiency. Each completed cycle
    produces the primary resource into the village ledger (food output is
    halved), pays the villager, and advances work-related goals.
    """

    def __init__(self, data: ProfessionData | None, owner: Agent) -> None:
        self.data = data or DEFAULT_PROFESSIONS[ProfessionType.UNEMPLOYED]
        self.owner = owner
        self.is_working = False
        self.work_timer = 0.0
        self.cycles_completed = 0
        self.last_efficiency = 1.0

    @property
    def profession_type(self) -> ProfessionType:
        return self.data.profession_type

    @property
    def name(self) -> str:
        return self.data.name

    @property
    def is_employed(self) -> bool:
        return self.data.profession_type != ProfessionType.UNEMPLOYED

    @property
    def work_progress(self) -> float:
        if self.data.work_interval <= 0:
            return 0.0
        return self.work_timer / self.data.work_interval

    # ------------------------------------------------------------------
    # Schedule
    # ------------------------------------------------------------------

    def is_working_hour(self) -> bool:
        return self.owner.clock.time_of_day in self.data.working_hours

    def is_social_hour(self) -> bool:
        return self.owner.clock.time_of_day in self.data.social_hours

    def is_resting_hour(self) -> bool:
        return self.owner.clock.time_of_day in self.data.resting_hours

    # ------------------------------------------------------------------
    # Work
    # ------------------------------------------------------------------

    def handle_work(self, active: bool) -> None:
        """Start or stop accruing work."""
        self.is_working = active and self.is_employed

    def update(self, delta_seconds: float) -> None:
        if not self.is_working or self.data.work_interval <= 0:
            return

        self.last_efficiency = self.owner.mood.work_efficiency_multiplier()
        self.work_timer += self.owner.clock.to_sim_hours(delta_seconds) * self.last_efficiency

        if self.work_timer >= self.data.work_interval:
            self.perform_work()
            self.work_timer = 0.0

    def perform_work(self) -> None:
        """Complete one work cycle."""
        owner = self.owner
        efficiency = owner.mood.work_efficiency_multiplier()

        output = self.data.resource_output
        if self.data.primary_resource == ResourceType.FOOD:
            output *= 0.5
        output *= efficiency

        if self.data.primary_resource != ResourceType.NONE and output > 0:
            owner.ledger.produce(self.data.primary_resource, output, source=self.name)

        wealth = 0.0
        if self.data.wealth_generation > 0:
            wealth = self.data.wealth_generation * efficiency
            owner.earn_wealth(wealth)

        owner.goals.update_progress(GoalType.WORK_MASTERY, WORK_MASTERY_PER_CYCLE)
        if output > 0:
            owner.goals.update_progress(
                GoalType.VILLAGE_CONTRIBUTOR,
                owner.ledger.value_of(self.data.primary_resource, output),
            )

        self.cycles_completed += 1
        logger.debug("%s finished a %s work cycle (+%.1f %s)", owner.name, self.name, output, self.data.primary_resource.value)
        owner.publish(
            WorkCompleted(
                villager_name=owner.name,
                profession=self.name,
                resource_type=self.data.primary_resource,
                resources_produced=output,
                wealth_earned=wealth,
            )
        )

    def get_state(self) -> dict[str, Any]:
        return {
            "profession": self.name,
            "working": self.is_working,
            "progress": round(self.work_progress, 2),
            "cycles_completed": self.cycles_completed,
        }

    def __str__(self) -> str:
        return f"Profession({self.name}, working={self.is_working})"
