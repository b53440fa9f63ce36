"""
Hamlet - Goal Set
Personality-weighted long-term goals with completion rewards.
"""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Any

from shared.constants import (
    GOAL_BOOST_DURATION,
    GOAL_BOOST_MAX,
    GOAL_BOOST_MIN,
    GOAL_CHECK_INTERVAL,
    GOAL_REASSIGN_MAX_DELAY,
    GOAL_REASSIGN_MIN_DELAY,
    MAX_ACTIVE_GOALS,
    NO_GOAL_SATISFACTION,
    SOCIAL_PROGRESS_PER_CHECK,
)
from shared.events import GoalAssigned, GoalAssignmentDeferred, GoalCompleted, GoalType, StateType

from ...errors import NoViableGoalCandidate
from ..needs.personality import Personality
from .goal import Goal

if TYPE_CHECKING:
    from ...events import EventBus
    from ..mood import MoodModel

logger = logging.getLogger(__name__)

ALL_GOAL_TYPES: tuple[GoalType, ...] = (
    GoalType.ACCUMULATE_WEALTH,
    GoalType.SOCIAL_PROMINENCE,
    GoalType.WORK_MASTERY,
    GoalType.VILLAGE_CONTRIBUTOR,
)

# Priority bonus a state earns for each active goal it advances
GOAL_STATE_PREFERENCES: dict[GoalType, dict[StateType, float]] = {
    GoalType.ACCUMULATE_WEALTH: {StateType.WORKING: 2.0},
    GoalType.SOCIAL_PROMINENCE: {StateType.SOCIALIZING: 2.0},
    GoalType.WORK_MASTERY: {StateType.WORKING: 3.0},
    GoalType.VILLAGE_CONTRIBUTOR: {StateType.WORKING: 2.0},
}


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class GoalSet:
    """
    A villager's active and completed goals.

    Villagers start with one goal, or two if ambitious, chosen by how well
    each goal type fits their personality. Completing a goal grants a
    one-shot happiness boost and, after a random delay, a replacement goal
    of a type that is neither active nor just completed.
    """

    def __init__(
        self,
        personality: Personality | None = None,
        mood: MoodModel | None = None,
        owner_name: str = "",
        events: EventBus | None = None,
        rng: random.Random | None = None,
        max_active: int = MAX_ACTIVE_GOALS,
    ) -> None:
        self.personality = personality or Personality()
        self.mood = mood
        self.owner_name = owner_name
        self._events = events
        self._rng = rng or random.Random()
        self.max_active = max_active

        self.active_goals: list[Goal] = []
        self.completed_goals: list[Goal] = []

        self._check_timer = 0.0
        self._pending_assignments: list[float] = []  # Seconds until each replacement
        self._just_completed: set[GoalType] = set()

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def score_goal_types(self) -> dict[GoalType, float]:
        """How well each goal type fits this personality."""
        p = self.personality
        return {
            GoalType.ACCUMULATE_WEALTH: p.optimism * 0.3 + p.work_ethic * 0.7,
            GoalType.SOCIAL_PROMINENCE: p.sociability * 0.8 + p.optimism * 0.2,
            GoalType.WORK_MASTERY: p.work_ethic * 0.8 + p.resilience * 0.2,
            GoalType.VILLAGE_CONTRIBUTOR: p.altruism * 0.6 + p.work_ethic * 0.4,
        }

    def prioritized_goal_types(self) -> list[GoalType]:
        """Goal types sorted best fit first (stable for equal scores)."""
        scores = self.score_goal_types()
        return sorted(ALL_GOAL_TYPES, key=lambda t: scores[t], reverse=True)

    def assign_initial(self) -> list[Goal]:
        """Assign the starting 1-2 goals."""
        goal_count = 2 if self.personality.ambition > 0.5 else 1
        assigned: list[Goal] = []

        for goal_type in self.prioritized_goal_types():
            if len(assigned) >= goal_count:
                break
            if self.has_goal_of_type(goal_type):
                continue
            goal = self.add_goal(goal_type)
            if goal is not None:
                assigned.append(goal)

        logger.info(
            "%s has been assigned %d goals: %s",
            self.owner_name,
            len(assigned),
            ", ".join(str(g) for g in assigned),
        )
        return assigned

    def add_goal(self, goal_type: GoalType) -> Goal | None:
        """
        Create a goal with a randomized, personality-scaled target.

        Returns:
            The new goal, or None if the active list is full
        """
        if len(self.active_goals) >= self.max_active:
            return None

        p = self.personality
        ambition_factor = 1.0 + (p.ambition - 0.5)
        sociability_factor = 1.0 + (p.sociability - 0.5)
        altruism_factor = 1.0 + (p.altruism - 0.5)

        if goal_type == GoalType.ACCUMULATE_WEALTH:
            target = max(50.0, (100.0 + self._rng.uniform(50.0, 150.0)) * ambition_factor)
            description = f"Accumulate {target:.0f} wealth"
        elif goal_type == GoalType.SOCIAL_PROMINENCE:
            base = 10.0 + self._rng.uniform(5.0, 15.0)
            target = max(5.0, base * _lerp(sociability_factor, ambition_factor, 0.3))
            description = f"Interact with {round(target)} different villagers"
        elif goal_type == GoalType.WORK_MASTERY:
            target = 100.0
            description = "Master your profession"
        else:
            base = 200.0 + self._rng.uniform(100.0, 300.0)
            target = max(100.0, base * _lerp(altruism_factor, ambition_factor, 0.4))
            description = f"Contribute {target:.0f} resources value"

        goal = Goal(goal_type=goal_type, target=target, description=description)
        self.active_goals.append(goal)

        if self._events is not None:
            self._events.publish(
                GoalAssigned(
                    villager_name=self.owner_name,
                    goal_type=goal_type,
                    target=target,
                    description=description,
                )
            )
        return goal

    def _replacement_candidates(self) -> list[GoalType]:
        candidates = [
            t for t in ALL_GOAL_TYPES
            if not self.has_goal_of_type(t) and t not in self._just_completed
        ]
        if not candidates:
            raise NoViableGoalCandidate(
                f"{self.owner_name}: every goal type is active or just completed"
            )
        return candidates

    def _assign_replacement(self) -> Goal | None:
        if len(self.active_goals) >= self.max_active:
            return None
        try:
            candidates = self._replacement_candidates()
        except NoViableGoalCandidate as e:
            self._defer_replacement(str(e))
            return None

        if not self._pending_assignments:
            self._just_completed.clear()
        goal_type = self._rng.choice(candidates)
        return self.add_goal(goal_type)

    def _defer_replacement(self, reason: str) -> None:
        """Retry a replacement later, letting recently completed types back in."""
        delay = self._rng.uniform(GOAL_REASSIGN_MIN_DELAY, GOAL_REASSIGN_MAX_DELAY)
        self._just_completed.clear()
        self._pending_assignments.append(delay)
        logger.debug("Deferring goal re-assignment by %.0fs: %s", delay, reason)
        if self._events is not None:
            self._events.publish(
                GoalAssignmentDeferred(
                    villager_name=self.owner_name,
                    retry_in_seconds=delay,
                    reason=reason,
                )
            )

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def update_progress(self, goal_type: GoalType, delta: float) -> None:
        """Add progress to the active goal of a type, completing it if reached."""
        goal = self.get_goal(goal_type)
        if goal is None:
            return

        applied = goal.add_progress(delta)
        if applied > 0.1:
            logger.debug(
                "%s made progress on %s: %.1f/%.1f (+%.1f)",
                self.owner_name,
                goal.description,
                goal.progress,
                goal.target,
                applied,
            )
        self.check_completion(goal)

    def check_completion(self, goal: Goal) -> bool:
        """
        Complete a goal that reached its target.

        Returns:
            True if the goal was completed by this call
        """
        if goal.completed or not goal.is_reached:
            return False

        goal.completed = True
        boost = self._rng.uniform(GOAL_BOOST_MIN, GOAL_BOOST_MAX)
        if self.mood is not None:
            self.mood.add_happiness_boost(boost, GOAL_BOOST_DURATION)

        if goal in self.active_goals:
            self.active_goals.remove(goal)
        self.completed_goals.append(goal)
        self._just_completed.add(goal.goal_type)
        self._pending_assignments.append(
            self._rng.uniform(GOAL_REASSIGN_MIN_DELAY, GOAL_REASSIGN_MAX_DELAY)
        )

        logger.info("%s completed goal: %s (+%.1f happiness)", self.owner_name, goal.description, boost)
        if self._events is not None:
            self._events.publish(
                GoalCompleted(
                    villager_name=self.owner_name,
                    goal_type=goal.goal_type,
                    description=goal.description,
                    happiness_boost=boost,
                )
            )
        return True

    def check_status(self, personal_wealth: float, current_state: StateType | None) -> None:
        """Sample villager progress for goals that track it passively."""
        for goal in list(self.active_goals):
            if goal.goal_type == GoalType.ACCUMULATE_WEALTH:
                goal.set_progress(personal_wealth)
                self.check_completion(goal)
            elif goal.goal_type == GoalType.SOCIAL_PROMINENCE and current_state == StateType.SOCIALIZING:
                self.update_progress(GoalType.SOCIAL_PROMINENCE, SOCIAL_PROGRESS_PER_CHECK)

    def update(
        self,
        delta_seconds: float,
        personal_wealth: float,
        current_state: StateType | None,
    ) -> None:
        """Advance the progress-check and re-assignment timers."""
        self._check_timer += delta_seconds
        if self._check_timer >= GOAL_CHECK_INTERVAL:
            self._check_timer = 0.0
            self.check_status(personal_wealth, current_state)

        if self._pending_assignments:
            self._pending_assignments = [t - delta_seconds for t in self._pending_assignments]
            due = [t for t in self._pending_assignments if t <= 0]
            self._pending_assignments = [t for t in self._pending_assignments if t > 0]
            for _ in due:
                self._assign_replacement()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def goal_preference(self, state_type: StateType) -> float:
        """Priority bonus for a candidate state that advances active goals."""
        return sum(
            GOAL_STATE_PREFERENCES.get(goal.goal_type, {}).get(state_type, 0.0)
            for goal in self.active_goals
        )

    def get_goal(self, goal_type: GoalType) -> Goal | None:
        for goal in self.active_goals:
            if goal.goal_type == goal_type and not goal.completed:
                return goal
        return None

    def has_goal_of_type(self, goal_type: GoalType) -> bool:
        return any(goal.goal_type == goal_type for goal in self.active_goals)

    def satisfaction(self) -> float:
        """Mean progress percentage of active goals (50 with none)."""
        if not self.active_goals:
            return NO_GOAL_SATISFACTION
        return sum(g.progress_percentage for g in self.active_goals) / len(self.active_goals)

    @property
    def pending_assignments(self) -> int:
        return len(self._pending_assignments)

    def summary(self) -> dict[str, Any]:
        return {
            "active": [g.get_state() for g in self.active_goals],
            "completed": len(self.completed_goals),
            "pending_assignments": self.pending_assignments,
        }

    def __str__(self) -> str:
        return f"GoalSet(active={len(self.active_goals)}, completed={len(self.completed_goals)})"
