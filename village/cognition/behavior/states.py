"""
Hamlet - Behavior States
The mutually exclusive activities a villager can be in.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from shared.constants import (
    NEED_FULFILLMENT_DURATION,
    RELAX_REST_RATE,
    SLEEP_REST_RATE,
    SOCIAL_RECOVERY_RATE,
    WORKING_URGENCY_INTERRUPT,
)
from shared.events import NeedType, StateType, TimeOfDay

from ...errors import FulfillmentError, UnreachableDestination

if TYPE_CHECKING:
    from ...agent import Agent
    from ...locations import Position
    from ..needs import Need

logger = logging.getLogger(__name__)


class VillagerState(ABC):
    """
    Base class for behavior states.

    A state picks a destination in ``enter``, waits in ``update`` until the
    movement collaborator reports arrival, then runs its activity until it
    completes. States never own the agent: it is passed into every call.

    If the destination is not reached within the movement timeout,
    ``update`` raises UnreachableDestination and the state machine falls
    back to Idle.
    """

    state_type: ClassVar[StateType]
    requires_arrival: ClassVar[bool] = True

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self.arrived = False
        self.travel_seconds = 0.0
        self.elapsed_seconds = 0.0  # real seconds since arrival
        self.elapsed_hours = 0.0  # sim hours since arrival

    @property
    def name(self) -> str:
        return self.state_type.value

    def destination(self, agent: Agent) -> Position | None:
        """Where this state takes the villager (None to stay put)."""
        return None

    def enter(self, agent: Agent) -> None:
        target = self.destination(agent)
        if target is None:
            agent.movement.clear_target()
            self.arrived = True
        else:
            agent.movement.set_target(target)

    def update(self, agent: Agent, delta_seconds: float) -> None:
        if not self.arrived and self.requires_arrival:
            if agent.movement.has_arrived():
                self.arrived = True
                self.on_arrival(agent)
            else:
                self.travel_seconds += delta_seconds
                if self.travel_seconds > agent.brain.movement_timeout:
                    raise UnreachableDestination(self.state_type, self.travel_seconds)
                return

        self.elapsed_seconds += delta_seconds
        self.elapsed_hours += agent.clock.to_sim_hours(delta_seconds)
        self.on_update(agent, delta_seconds)

    def exit(self, agent: Agent) -> None:
        agent.movement.clear_target()

    def on_arrival(self, agent: Agent) -> None:
        """Called once when the destination is reached."""

    @abstractmethod
    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        """Run the activity for one tick after arrival."""

    def get_state(self) -> dict[str, Any]:
        return {
            "state": self.name,
            "arrived": self.arrived,
            "elapsed_hours": round(self.elapsed_hours, 2),
        }

    def __str__(self) -> str:
        return self.name


class IdleState(VillagerState):
    """Wander nearby for a few real seconds, then reconsider."""

    state_type = StateType.IDLE
    requires_arrival = False

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self.duration_seconds = self._rng.uniform(2.0, 5.0)

    def destination(self, agent: Agent) -> Position | None:
        origin = agent.movement.current_position() or agent.locator.home_location_for(agent)
        return agent.locator.random_nearby_position(origin, 5.0)

    def enter(self, agent: Agent) -> None:
        super().enter(agent)
        self.arrived = True

    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        if agent.needs.has_urgent_needs():
            agent.brain.determine_next_action()
            return

        if self.elapsed_seconds >= self.duration_seconds:
            agent.brain.determine_next_action()
            if agent.brain.current_state is self:
                # Still idle: wait another spell before asking again
                self.elapsed_seconds = 0.0
                self.duration_seconds = self._rng.uniform(2.0, 5.0)


class WorkingState(VillagerState):
    """Go to the workplace and work for a few simulated hours."""

    state_type = StateType.WORKING

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self.duration_hours = self._rng.uniform(3.0, 5.0)

    def destination(self, agent: Agent) -> Position | None:
        return agent.locator.workplace_for(agent)

    def on_arrival(self, agent: Agent) -> None:
        agent.profession.handle_work(True)

    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        urgent = agent.needs.most_urgent_critical()
        if (
            urgent is not None
            and urgent.urgency() > WORKING_URGENCY_INTERRUPT
            and agent.can_obtain_need(urgent)
        ):
            agent.brain.transition_to(StateType.NEED_FULFILLMENT, need=urgent)
            return

        if not agent.profession.is_working_hour() or self.elapsed_hours >= self.duration_hours:
            agent.brain.determine_next_action()

    def exit(self, agent: Agent) -> None:
        agent.profession.handle_work(False)
        super().exit(agent)


class SocializingState(VillagerState):
    """Spend time at the leisure spot, recovering the social need."""

    state_type = StateType.SOCIALIZING

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self.duration_hours = self._rng.uniform(1.0, 3.0)

    def destination(self, agent: Agent) -> Position | None:
        return agent.locator.leisure_location_for(agent)

    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        rate = SOCIAL_RECOVERY_RATE * agent.mood.social_interaction_quality()
        agent.needs.get(NeedType.SOCIAL).fulfill_gradually(delta_seconds, rate, agent.clock.time_scale)

        if self.elapsed_hours >= self.duration_hours:
            agent.brain.determine_next_action()


class SleepingState(VillagerState):
    """Sleep at home through the resting hours."""

    state_type = StateType.SLEEPING

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self.duration_hours = self._rng.uniform(6.0, 8.0)

    def destination(self, agent: Agent) -> Position | None:
        return agent.locator.home_location_for(agent)

    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        agent.needs.get(NeedType.REST).fulfill_gradually(delta_seconds, SLEEP_REST_RATE, agent.clock.time_scale)

        if not agent.profession.is_resting_hour() and self.elapsed_hours >= self.duration_hours:
            agent.brain.determine_next_action()


class RelaxAtHomeState(VillagerState):
    """Unwind at home during leisure time."""

    state_type = StateType.RELAX_AT_HOME

    def __init__(self, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self.duration_hours = self._rng.uniform(1.0, 2.0)

    def destination(self, agent: Agent) -> Position | None:
        return agent.locator.home_location_for(agent)

    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        if agent.needs.has_urgent_needs():
            agent.brain.determine_next_action()
            return

        agent.needs.get(NeedType.REST).fulfill_gradually(delta_seconds, RELAX_REST_RATE, agent.clock.time_scale)

        still_leisure = agent.profession.is_social_hour() or agent.clock.time_of_day == TimeOfDay.NOON
        if self.elapsed_hours >= self.duration_hours or not still_leisure:
            agent.brain.determine_next_action()


class NeedFulfillmentState(VillagerState):
    """Go where a need can be met, wait a moment, then fulfill it."""

    state_type = StateType.NEED_FULFILLMENT

    def __init__(self, need: Need, rng: random.Random | None = None) -> None:
        super().__init__(rng)
        self.need = need
        self.duration_seconds = NEED_FULFILLMENT_DURATION
        self.attempted = False
        self.succeeded = False

    @property
    def name(self) -> str:
        return f"{self.state_type.value}({self.need.name})"

    def destination(self, agent: Agent) -> Position | None:
        return agent.locator.need_location_for(agent, self.need)

    def on_update(self, agent: Agent, delta_seconds: float) -> None:
        if self.attempted:
            # Waiting for the dwell guard to let us leave
            self._leave(agent)
            return

        if self.elapsed_seconds < self.duration_seconds:
            return

        self.attempted = True
        try:
            self.need.fulfill(agent, agent.ledger, agent.clock.elapsed_hours)
        except FulfillmentError as e:
            logger.warning("%s failed to fulfill %s: %s. Idling.", agent.name, self.need.name, e)
            agent.brain.transition_to(StateType.IDLE)
            return

        self.succeeded = True
        self._leave(agent)

    def _leave(self, agent: Agent) -> None:
        if self.succeeded:
            agent.brain.determine_next_action()
        if agent.brain.current_state is self:
            agent.brain.transition_to(StateType.IDLE)

    def get_state(self) -> dict[str, Any]:
        state = super().get_state()
        state["need"] = self.need.name
        return state


STATE_CLASSES: dict[StateType, type[VillagerState]] = {
    StateType.IDLE: IdleState,
    StateType.WORKING: WorkingState,
    StateType.SOCIALIZING: SocializingState,
    StateType.SLEEPING: SleepingState,
    StateType.RELAX_AT_HOME: RelaxAtHomeState,
    StateType.NEED_FULFILLMENT: NeedFulfillmentState,
}


def create_state(
    state_type: StateType,
    rng: random.Random | None = None,
    need: Need | None = None,
) -> VillagerState:
    """Instantiate the state class for a StateType."""
    if state_type == StateType.NEED_FULFILLMENT:
        if need is None:
            raise ValueError("NeedFulfillment requires a need")
        return NeedFulfillmentState(need, rng)
    return STATE_CLASSES[state_type](rng)
