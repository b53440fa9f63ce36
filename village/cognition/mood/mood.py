"""
Hamlet - Mood Model
Blends needs, wealth, work and goal progress into a smoothed happiness value.
"""

from __future__ import annotations

import logging
import math
from collections import deque
from typing import TYPE_CHECKING, Any

import numpy as np

from shared.constants import (
    EMPLOYED_WORK_SATISFACTION,
    MOOD_HAPPY_ABOVE,
    MOOD_HISTORY_INTERVAL,
    MOOD_HISTORY_LENGTH,
    MOOD_SMOOTHING_RATE,
    MOOD_UNHAPPY_BELOW,
    UNEMPLOYED_WORK_SATISFACTION,
)
from shared.events import MoodCategory, MoodChanged

from ...config import MoodWeights
from ..needs.personality import Personality

if TYPE_CHECKING:
    from ...events import EventBus

logger = logging.getLogger(__name__)


def _lerp(a: float, b: float, t: float) -> float:
    t = max(0.0, min(1.0, t))
    return a + (b - a) * t


def category_for(happiness: float) -> MoodCategory:
    """Discrete mood for a happiness value."""
    if happiness < MOOD_UNHAPPY_BELOW:
        return MoodCategory.UNHAPPY
    if happiness > MOOD_HAPPY_ABOVE:
        return MoodCategory.HAPPY
    return MoodCategory.CONTENT


class MoodModel:
    """
    A villager's happiness, updated once per tick.

    The target happiness is a weighted blend of four satisfaction factors
    (needs, wealth, work, goals), plus any temporary boost and an optimism
    offset, clamped to [0, 100]. Happiness then moves toward the target with a
    first-order low-pass filter so it never snaps.

    The category (Unhappy < 30 <= Content <= 70 < Happy) is derived from
    happiness; a change between ticks publishes MoodChanged.
    """

    def __init__(
        self,
        personality: Personality | None = None,
        weights: MoodWeights | None = None,
        owner_name: str = "",
        events: EventBus | None = None,
        initial_happiness: float = 50.0,
    ) -> None:
        self.personality = personality or Personality()
        self.weights = weights or MoodWeights()
        self.owner_name = owner_name
        self._events = events

        self.happiness = max(0.0, min(100.0, initial_happiness))
        self.temporary_boost = 0.0
        self.boost_remaining_seconds = 0.0
        self.previous_category = category_for(self.happiness)

        # Debug breakdown of the last update
        self.needs_satisfaction = 0.0
        self.wealth_satisfaction = 0.0
        self.work_satisfaction = 0.0
        self.goal_satisfaction = 0.0
        self.target_happiness = self.happiness

        self._history: deque[float] = deque(maxlen=MOOD_HISTORY_LENGTH)
        self._history_timer = 0.0

    @property
    def category(self) -> MoodCategory:
        return category_for(self.happiness)

    @property
    def is_very_unhappy(self) -> bool:
        return self.happiness < MOOD_UNHAPPY_BELOW

    # ------------------------------------------------------------------
    # Satisfaction factors
    # ------------------------------------------------------------------

    @staticmethod
    def wealth_satisfaction_for(personal_wealth: float) -> float:
        """Logarithmic curve, diminishing returns on wealth."""
        return min(100.0, math.log10(max(0.0, personal_wealth) + 1.0) * 20.0)

    def work_satisfaction_for(self, employed: bool) -> float:
        if not employed:
            return UNEMPLOYED_WORK_SATISFACTION

        value = EMPLOYED_WORK_SATISFACTION
        if self.personality.work_ethic > 0.7:
            value += 15.0
        elif self.personality.work_ethic < 0.3:
            value -= 10.0
        return max(0.0, min(100.0, value))

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_happiness(
        self,
        delta_seconds: float,
        needs_satisfaction: float,
        personal_wealth: float,
        employed: bool,
        goal_satisfaction: float,
    ) -> None:
        """
        Recompute the target and move happiness toward it.

        Args:
            delta_seconds: Real seconds since the last tick
            needs_satisfaction: Mean need value (0-100)
            personal_wealth: Villager's wealth
            employed: Whether the villager has a profession
            goal_satisfaction: Mean goal progress percentage (50 with no goals)
        """
        self.needs_satisfaction = needs_satisfaction
        self.wealth_satisfaction = self.wealth_satisfaction_for(personal_wealth)
        self.work_satisfaction = self.work_satisfaction_for(employed)
        self.goal_satisfaction = goal_satisfaction

        w = self.weights
        total_weight = w.total or 1.0
        weighted = (
            self.needs_satisfaction * w.needs
            + self.wealth_satisfaction * w.wealth
            + self.work_satisfaction * w.work
            + self.goal_satisfaction * w.goal
        ) / total_weight

        if self.boost_remaining_seconds > 0:
            weighted += self.temporary_boost
            self.boost_remaining_seconds -= delta_seconds
            if self.boost_remaining_seconds <= 0:
                self.boost_remaining_seconds = 0.0
                self.temporary_boost = 0.0

        # Optimistic villagers are generally happier
        weighted += (self.personality.optimism - 0.5) * 20.0

        self.target_happiness = max(0.0, min(100.0, weighted))
        self.happiness = _lerp(self.happiness, self.target_happiness, delta_seconds * MOOD_SMOOTHING_RATE)

        self._record_history(delta_seconds)
        self._check_category()

    def set_happiness(self, value: float) -> None:
        """Set happiness directly (clamped), publishing any category change."""
        self.happiness = max(0.0, min(100.0, value))
        self._check_category()

    def _check_category(self) -> None:
        current = self.category
        if current != self.previous_category:
            old = self.previous_category
            self.previous_category = current
            logger.debug("%s mood %s -> %s (%.1f)", self.owner_name, old.value, current.value, self.happiness)
            if self._events is not None:
                self._events.publish(
                    MoodChanged(
                        villager_name=self.owner_name,
                        old_mood=old,
                        new_mood=current,
                        happiness=self.happiness,
                    )
                )

    def _record_history(self, delta_seconds: float) -> None:
        self._history_timer += delta_seconds
        if self._history_timer >= MOOD_HISTORY_INTERVAL or not self._history:
            self._history_timer = 0.0
            self._history.append(self.happiness)

    def add_happiness_boost(self, amount: float, duration_seconds: float) -> None:
        """
        Apply a temporary boost to the target happiness.

        A later call replaces any boost still running.
        """
        self.temporary_boost = amount
        self.boost_remaining_seconds = max(0.0, duration_seconds)

    # ------------------------------------------------------------------
    # Effects on other systems
    # ------------------------------------------------------------------

    def work_efficiency_multiplier(self) -> float:
        """Production multiplier used by professions (0.5-1.5)."""
        return _lerp(0.5, 1.5, self.happiness / 100.0)

    def social_interaction_quality(self) -> float:
        return _lerp(0.7, 1.3, self.happiness / 100.0)

    def happiness_trend(self) -> float:
        """Mean change between consecutive history samples."""
        if len(self._history) < 2:
            return 0.0
        return float(np.mean(np.diff(list(self._history))))

    def summary(self) -> dict[str, Any]:
        """Get a summary of current state for logging/debugging."""
        return {
            "happiness": round(self.happiness, 1),
            "mood": self.category.value,
            "target": round(self.target_happiness, 1),
            "boost": round(self.temporary_boost, 1) if self.boost_remaining_seconds > 0 else 0.0,
            "factors": {
                "needs": round(self.needs_satisfaction, 1),
                "wealth": round(self.wealth_satisfaction, 1),
                "work": round(self.work_satisfaction, 1),
                "goals": round(self.goal_satisfaction, 1),
            },
            "trend": round(self.happiness_trend(), 3),
        }

    def __str__(self) -> str:
        return f"MoodModel({self.category.value}, happiness={self.happiness:.1f})"
