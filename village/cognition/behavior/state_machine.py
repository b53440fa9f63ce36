"""
Hamlet - Behavior State Machine
Priority-weighted selection of a villager's current activity.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from shared.constants import (
    BEHAVIOR_CHECK_INTERVAL,
    MINIMUM_STATE_DURATION,
    MOVEMENT_TIMEOUT,
)
from shared.events import (
    DestinationUnreachable,
    NeedType,
    StateChanged,
    StateType,
    TimeOfDay,
)

from ...errors import InvalidTransition, UnreachableDestination
from .states import VillagerState, create_state

if TYPE_CHECKING:
    from ...agent import Agent
    from ..needs import Need

logger = logging.getLogger(__name__)

# Fixed iteration order; ties go to the earlier entry
CANDIDATE_ORDER: tuple[StateType, ...] = (
    StateType.WORKING,
    StateType.SLEEPING,
    StateType.SOCIALIZING,
    StateType.RELAX_AT_HOME,
    StateType.IDLE,
)

IMPULSIVE_CHOICES: tuple[StateType, ...] = (
    StateType.SOCIALIZING,
    StateType.IDLE,
    StateType.RELAX_AT_HOME,
)

SLEEP_PRIORITY = 15.0
IDLE_PRIORITY = 1.0

# Flat bonuses applied when the villager is very unhappy
UNHAPPY_BONUSES: dict[StateType, float] = {
    StateType.SOCIALIZING: 5.0,
    StateType.RELAX_AT_HOME: 3.0,
    StateType.IDLE: 2.0,
}


@dataclass
class ScoredState:
    """A candidate state with its score breakdown."""

    state_type: StateType
    base_score: float
    goal_bonus: float = 0.0
    modifier: float = 1.0
    bonus: float = 0.0

    @property
    def total_score(self) -> float:
        return (self.base_score + self.goal_bonus) * self.modifier + self.bonus

    def get_breakdown(self) -> dict[str, float]:
        """Return score breakdown for debugging."""
        return {
            "base_score": self.base_score,
            "goal_bonus": self.goal_bonus,
            "modifier": self.modifier,
            "bonus": self.bonus,
            "total_score": self.total_score,
        }

    def __str__(self) -> str:
        return f"ScoredState({self.state_type.value}, score={self.total_score:.2f})"


class BehaviorStateMachine:
    """
    Owns a villager's current state and decides what comes next.

    Re-assessment (``determine_next_action``) happens when:
    - the periodic behavior check fires (always while idle, otherwise with
      probability impulsivity * 0.3)
    - the time of day changes
    - one of the villager's needs becomes critical
    - a state finishes its activity

    A transition to a different state type is refused until the current
    state has lasted ``minimum_state_duration`` real seconds. A transition
    to the state type already active is a no-op.
    """

    def __init__(
        self,
        agent: Agent,
        rng: random.Random | None = None,
        behavior_check_interval: float = BEHAVIOR_CHECK_INTERVAL,
        minimum_state_duration: float = MINIMUM_STATE_DURATION,
        movement_timeout: float = MOVEMENT_TIMEOUT,
    ) -> None:
        self.agent = agent
        self._rng = rng or random.Random()
        self.behavior_check_interval = behavior_check_interval
        self.minimum_state_duration = minimum_state_duration
        self.movement_timeout = movement_timeout

        self.current_state: VillagerState | None = None
        self.state_age = 0.0  # real seconds in the current state
        self.transition_count = 0
        self.last_scores: list[ScoredState] = []
        self._behavior_timer = 0.0

    @property
    def current_type(self) -> StateType | None:
        return self.current_state.state_type if self.current_state else None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _validate_transition(self, state_type: StateType) -> None:
        if self.current_state is not None and self.current_state.state_type == state_type:
            raise InvalidTransition(f"{self.agent.name} is already {state_type.value}")

    def transition_to(self, state_type: StateType, need: Need | None = None) -> bool:
        """
        Switch to a new state.

        Returns:
            True if the transition was committed
        """
        try:
            self._validate_transition(state_type)
        except InvalidTransition:
            return False

        if self.current_state is not None and self.state_age < self.minimum_state_duration:
            logger.debug(
                "%s: %s -> %s refused, state only %.2fs old",
                self.agent.name,
                self.current_state.name,
                state_type.value,
                self.state_age,
            )
            return False

        new_state = create_state(state_type, self._rng, need)
        old_type = self.current_type

        if self.current_state is not None:
            self.current_state.exit(self.agent)
        self.current_state = new_state
        self.state_age = 0.0
        self.transition_count += 1
        new_state.enter(self.agent)

        logger.debug(
            "%s: %s -> %s",
            self.agent.name,
            old_type.value if old_type else "None",
            new_state.name,
        )
        self.agent.publish(
            StateChanged(
                villager_name=self.agent.name,
                profession=self.agent.profession.name,
                old_state=old_type,
                new_state=state_type,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Decision making
    # ------------------------------------------------------------------

    def is_leisure_time(self) -> bool:
        return self.agent.profession.is_social_hour() or self.agent.clock.time_of_day == TimeOfDay.NOON

    def score_candidates(self) -> list[ScoredState]:
        """
        Base priority for each state viable right now, plus goal bonuses.

        Returned in candidate order.
        """
        agent = self.agent
        p = agent.personality
        very_unhappy = agent.mood.is_very_unhappy
        leisure = self.is_leisure_time()

        base: dict[StateType, float] = {}
        if agent.profession.is_working_hour() and not very_unhappy:
            base[StateType.WORKING] = p.work_ethic * 10.0
        if agent.profession.is_resting_hour():
            base[StateType.SLEEPING] = SLEEP_PRIORITY
        if leisure or very_unhappy:
            base[StateType.SOCIALIZING] = (
                p.sociability * 5.0 + agent.needs.get(NeedType.SOCIAL).urgency() * 3.0
            )
        if leisure:
            base[StateType.RELAX_AT_HOME] = (
                (1.0 - p.sociability) * 5.0 + agent.needs.get(NeedType.REST).urgency() * 3.0
            )
        base[StateType.IDLE] = IDLE_PRIORITY

        return [
            ScoredState(
                state_type=state_type,
                base_score=base[state_type],
                goal_bonus=agent.goals.goal_preference(state_type),
            )
            for state_type in CANDIDATE_ORDER
            if state_type in base
        ]

    def determine_next_action(self) -> bool:
        """
        Pick the next state and transition to it.

        Returns:
            True if a transition was committed
        """
        agent = self.agent

        # Critical needs override everything else, one at a time
        urgent = agent.needs.most_urgent_critical()
        if urgent is not None:
            if not agent.can_obtain_need(urgent) and agent.profession.is_employed:
                logger.debug("%s cannot get %s now, working first", agent.name, urgent.name)
                return self.transition_to(StateType.WORKING)
            return self.transition_to(StateType.NEED_FULFILLMENT, need=urgent)

        candidates = self.score_candidates()
        p = agent.personality

        # Impulsive villagers sometimes just do something else
        if self._rng.random() < p.impulsivity * 0.15:
            impulsive = [c.state_type for c in candidates if c.state_type in IMPULSIVE_CHOICES]
            if impulsive:
                choice = self._rng.choice(impulsive)
                logger.debug("%s acts on impulse: %s", agent.name, choice.value)
                self.last_scores = candidates
                return self.transition_to(choice)

        for candidate in candidates:
            if candidate.state_type == StateType.WORKING and p.work_ethic < 0.4:
                if self._rng.random() < 1.0 - p.work_ethic:
                    candidate.modifier *= 0.1

        if agent.mood.is_very_unhappy:
            for candidate in candidates:
                if candidate.state_type == StateType.WORKING:
                    candidate.modifier *= 0.2
                candidate.bonus += UNHAPPY_BONUSES.get(candidate.state_type, 0.0)

        self.last_scores = candidates
        best = self._select(candidates)
        return self.transition_to(best.state_type if best else StateType.IDLE)

    @staticmethod
    def _select(candidates: list[ScoredState]) -> ScoredState | None:
        best: ScoredState | None = None
        for candidate in candidates:
            if best is None or candidate.total_score > best.total_score:
                best = candidate
        return best

    # ------------------------------------------------------------------
    # Event hooks
    # ------------------------------------------------------------------

    def on_time_of_day_changed(self, time_of_day: TimeOfDay) -> None:
        """Follow the schedule when the time block changes."""
        agent = self.agent
        if self.current_type == StateType.NEED_FULFILLMENT:
            return

        p = agent.personality
        if agent.profession.is_working_hour() and self.current_type != StateType.WORKING:
            if p.work_ethic > 0.3 and self._rng.random() < p.work_ethic * 0.8:
                self.transition_to(StateType.WORKING)
                return

        if agent.profession.is_resting_hour() and self.current_type != StateType.SLEEPING:
            if self._rng.random() < 0.7:
                self.transition_to(StateType.SLEEPING)
                return

        self.determine_next_action()

    def on_need_critical(self, need_type: NeedType) -> None:
        self.determine_next_action()

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, delta_seconds: float) -> None:
        """Run the current state, then the periodic behavior check."""
        if self.current_state is None:
            self.transition_to(StateType.IDLE)

        self.state_age += delta_seconds
        state = self.current_state
        try:
            state.update(self.agent, delta_seconds)
        except UnreachableDestination as e:
            logger.warning("%s couldn't reach %s destination. Idling.", self.agent.name, e.state.value)
            self.agent.publish(
                DestinationUnreachable(
                    villager_name=self.agent.name,
                    state=e.state,
                    waited_seconds=e.waited_seconds,
                )
            )
            if self.current_state is state:
                self.transition_to(StateType.IDLE)

        self._behavior_timer += delta_seconds
        if self._behavior_timer >= self.behavior_check_interval:
            self._behavior_timer = 0.0
            roll = self._rng.random()
            if self.current_type == StateType.IDLE or roll < self.agent.personality.impulsivity * 0.3:
                self.determine_next_action()

    def get_state(self) -> dict[str, Any]:
        return {
            "state": self.current_state.get_state() if self.current_state else None,
            "age": round(self.state_age, 2),
            "transitions": self.transition_count,
            "scores": [c.get_breakdown() | {"state": c.state_type.value} for c in self.last_scores],
        }

    def __str__(self) -> str:
        name = self.current_state.name if self.current_state else "None"
        return f"BehaviorStateMachine({self.agent.name}, state={name})"
