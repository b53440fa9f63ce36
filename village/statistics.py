"""
Hamlet - Village Statistics
Population-wide aggregates and the end-of-run report.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

import numpy as np
from pydantic import BaseModel, Field

from shared.events import (
    GoalCompleted,
    MoodCategory,
    NeedFulfillmentFailed,
    StateChanged,
    StateType,
    WorkCompleted,
)

from .cognition.goals import ALL_GOAL_TYPES
from .economy.ledger import STOCKED_RESOURCES

if TYPE_CHECKING:
    from .world import SimulationWorld

logger = logging.getLogger(__name__)


class ResourceReport(BaseModel):
    """One resource in the economy summary."""

    amount: float
    price: float
    daily_net_change: float
    trend: float


class SimulationReport(BaseModel):
    """Snapshot of the village for printing or JSON export."""

    day: int
    time: str
    population: int
    average_happiness: float
    min_happiness: float
    max_happiness: float
    mood_distribution: dict[str, int] = Field(default_factory=dict)
    state_distribution: dict[str, int] = Field(default_factory=dict)
    profession_distribution: dict[str, int] = Field(default_factory=dict)
    goal_progress: dict[str, float] = Field(default_factory=dict)
    goals_completed: int = 0
    work_cycles: int = 0
    failed_fulfillments: int = 0
    economy: dict[str, ResourceReport] = Field(default_factory=dict)

    def format_text(self) -> str:
        """Human-readable multi-line summary."""
        lines = [
            f"Day {self.day}, {self.time} - {self.population} villagers",
            f"Happiness: avg {self.average_happiness:.1f} "
            f"(min {self.min_happiness:.1f}, max {self.max_happiness:.1f})",
            "Mood: " + ", ".join(f"{k} {v}" for k, v in self.mood_distribution.items()),
            "States: " + ", ".join(f"{k} {v}" for k, v in self.state_distribution.items() if v),
            "Professions: " + ", ".join(f"{k} {v}" for k, v in self.profession_distribution.items()),
            f"Goals completed: {self.goals_completed}, work cycles: {self.work_cycles}, "
            f"failed fulfillments: {self.failed_fulfillments}",
        ]
        for goal_type, progress in self.goal_progress.items():
            lines.append(f"  {goal_type}: {progress:.1f}% average progress")
        for resource, report in self.economy.items():
            lines.append(
                f"  {resource}: {report.amount:.1f} @ {report.price:.2f} "
                f"(net {report.daily_net_change:+.1f}/day, trend {report.trend:+.2f})"
            )
        return "\n".join(lines)


class VillageStatistics:
    """
    Tracks village-wide statistics.

    The state distribution is maintained from StateChanged events so it
    reflects every committed transition; mood and goal figures are read
    from the villagers when a report is built.
    """

    def __init__(self, world: SimulationWorld) -> None:
        self.world = world
        self.current_states: dict[str, StateType] = {}
        self.transitions = 0
        self.goals_completed = 0
        self.work_cycles = 0
        self.failed_fulfillments = 0

        for agent in world.agents:
            if agent.current_state is not None:
                self.current_states[agent.name] = agent.current_state

        world.events.subscribe(StateChanged, self._on_state_changed)
        world.events.subscribe(GoalCompleted, self._on_goal_completed)
        world.events.subscribe(WorkCompleted, self._on_work_completed)
        world.events.subscribe(NeedFulfillmentFailed, self._on_fulfillment_failed)

    def detach(self) -> None:
        events = self.world.events
        events.unsubscribe(StateChanged, self._on_state_changed)
        events.unsubscribe(GoalCompleted, self._on_goal_completed)
        events.unsubscribe(WorkCompleted, self._on_work_completed)
        events.unsubscribe(NeedFulfillmentFailed, self._on_fulfillment_failed)

    def _on_state_changed(self, event: StateChanged) -> None:
        self.current_states[event.villager_name] = event.new_state
        self.transitions += 1

    def _on_goal_completed(self, event: GoalCompleted) -> None:
        self.goals_completed += 1

    def _on_work_completed(self, event: WorkCompleted) -> None:
        self.work_cycles += 1

    def _on_fulfillment_failed(self, event: NeedFulfillmentFailed) -> None:
        self.failed_fulfillments += 1

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def happiness_values(self) -> np.ndarray:
        return np.array([agent.mood.happiness for agent in self.world.agents], dtype=float)

    def average_happiness(self) -> float:
        values = self.happiness_values()
        if values.size == 0:
            return 50.0
        return float(np.mean(values))

    def mood_distribution(self) -> dict[str, int]:
        counts = Counter(agent.mood.category for agent in self.world.agents)
        return {category.value: counts.get(category, 0) for category in MoodCategory}

    def state_distribution(self) -> dict[str, int]:
        counts = Counter(self.current_states.values())
        return {state.value: counts.get(state, 0) for state in StateType}

    def profession_distribution(self) -> dict[str, int]:
        return dict(Counter(agent.profession.name for agent in self.world.agents))

    def goal_progress(self) -> dict[str, float]:
        """Mean progress percentage of active goals, per goal type that has any."""
        by_type: dict[str, list[float]] = {}
        for agent in self.world.agents:
            for goal in agent.goals.active_goals:
                by_type.setdefault(goal.goal_type.value, []).append(goal.progress_percentage)
        return {
            goal_type.value: float(np.mean(by_type[goal_type.value]))
            for goal_type in ALL_GOAL_TYPES
            if goal_type.value in by_type
        }

    def economy_report(self) -> dict[str, ResourceReport]:
        ledger = self.world.ledger
        return {
            resource.value: ResourceReport(
                amount=round(ledger.amount_of(resource), 2),
                price=round(ledger.price_for(resource), 3),
                daily_net_change=round(ledger.daily_net_change(resource), 2),
                trend=round(ledger.trend(resource), 3),
            )
            for resource in STOCKED_RESOURCES
        }

    def build_report(self) -> SimulationReport:
        values = self.happiness_values()
        has_values = values.size > 0
        return SimulationReport(
            day=self.world.clock.day,
            time=self.world.clock.formatted_time(),
            population=len(self.world.agents),
            average_happiness=round(self.average_happiness(), 2),
            min_happiness=round(float(np.min(values)), 2) if has_values else 0.0,
            max_happiness=round(float(np.max(values)), 2) if has_values else 0.0,
            mood_distribution=self.mood_distribution(),
            state_distribution=self.state_distribution(),
            profession_distribution=self.profession_distribution(),
            goal_progress=self.goal_progress(),
            goals_completed=self.goals_completed,
            work_cycles=self.work_cycles,
            failed_fulfillments=self.failed_fulfillments,
            economy=self.economy_report(),
        )
