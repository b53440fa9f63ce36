"""
Hamlet - Locations and Movement
Interfaces the behavior states use to pick destinations and wait for arrival,
plus headless implementations used by the simulation world.
"""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from shared.events import NeedType

if TYPE_CHECKING:
    from .agent import Agent
    from .cognition.needs import Need

logger = logging.getLogger(__name__)

Position = tuple[float, float]


class Movement(ABC):
    """
    Moves one villager toward a target.

    States only ever set a target, poll has_arrived() and clear the
    target; how the villager gets there is up to the implementation.
    """

    @abstractmethod
    def set_target(self, position: Position) -> None:
        """Start moving toward a position."""

    @abstractmethod
    def has_arrived(self) -> bool:
        """Whether the current target has been reached."""

    @abstractmethod
    def clear_target(self) -> None:
        """Stop moving."""

    def update(self, delta_seconds: float) -> None:
        """Advance movement by real seconds. No-op by default."""

    def current_position(self) -> Position | None:
        """Where the villager is, if the implementation tracks it."""
        return None


class LocationFinder(ABC):
    """Resolves where a villager should go for each activity."""

    @abstractmethod
    def workplace_for(self, agent: Agent) -> Position:
        """Workplace of the agent's profession."""

    @abstractmethod
    def need_location_for(self, agent: Agent, need: Need) -> Position:
        """Where the agent can fulfill a need."""

    @abstractmethod
    def home_location_for(self, agent: Agent) -> Position:
        """The agent's home."""

    @abstractmethod
    def leisure_location_for(self, agent: Agent) -> Position:
        """Where the agent goes to socialize."""

    @abstractmethod
    def random_nearby_position(self, origin: Position, radius: float) -> Position:
        """A random point within radius of origin."""


class TimedMovement(Movement):
    """
    Movement that arrives a fixed number of real seconds after a target is
    set. Setting the current position as the target arrives immediately.
    """

    def __init__(self, travel_time_seconds: float = 2.0, position: Position = (0.0, 0.0)) -> None:
        self.travel_time_seconds = max(0.0, travel_time_seconds)
        self.position: Position = position
        self.target: Position | None = None
        self._remaining = 0.0

    def set_target(self, position: Position) -> None:
        self.target = position
        self._remaining = 0.0 if position == self.position else self.travel_time_seconds
        if self._remaining <= 0:
            self.position = position

    def has_arrived(self) -> bool:
        return self.target is not None and self._remaining <= 0

    def current_position(self) -> Position | None:
        return self.position

    def clear_target(self) -> None:
        self.target = None
        self._remaining = 0.0

    def update(self, delta_seconds: float) -> None:
        if self.target is None or self._remaining <= 0:
            return
        self._remaining -= delta_seconds
        if self._remaining <= 0:
            self._remaining = 0.0
            self.position = self.target

    def __str__(self) -> str:
        return f"TimedMovement(position={self.position}, target={self.target})"


# Building positions on the village map
BUILDINGS: dict[str, Position] = {
    "square": (0.0, 0.0),
    "farm": (-40.0, 25.0),
    "market": (10.0, -5.0),
    "temple": (25.0, 20.0),
    "workshop": (-15.0, -20.0),
    "tavern": (5.0, 15.0),
}

WORKPLACES: dict[str, str] = {
    "Farmer": "farm",
    "Shopkeeper": "market",
    "Priest": "temple",
    "Craftsman": "workshop",
}

NEED_BUILDINGS: dict[NeedType, str] = {
    NeedType.HUNGER: "market",
    NeedType.SOCIAL: "tavern",
}


class VillageLayout(LocationFinder):
    """
    Fixed village map.

    Workplaces are keyed by profession name; homes are laid out on a ring
    around the square in the order villagers are first seen. Unemployed
    villagers "work" at the square.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        buildings: dict[str, Position] | None = None,
        home_ring_radius: float = 60.0,
    ) -> None:
        self._rng = rng or random.Random()
        self.buildings = dict(buildings or BUILDINGS)
        self.home_ring_radius = home_ring_radius
        self._homes: dict[str, Position] = {}

    def building(self, name: str) -> Position:
        return self.buildings.get(name, self.buildings["square"])

    def workplace_for(self, agent: Agent) -> Position:
        return self.building(WORKPLACES.get(agent.profession.name, "square"))

    def need_location_for(self, agent: Agent, need: Need) -> Position:
        if need.need_type == NeedType.REST:
            return self.home_location_for(agent)
        return self.building(NEED_BUILDINGS.get(need.need_type, "square"))

    def home_location_for(self, agent: Agent) -> Position:
        home = self._homes.get(agent.name)
        if home is None:
            # Twelve plots per ring, each ring further out
            index = len(self._homes)
            ring, slot = divmod(index, 12)
            angle = slot * (2 * math.pi / 12)
            radius = self.home_ring_radius + ring * 15.0
            home = (round(radius * math.cos(angle), 2), round(radius * math.sin(angle), 2))
            self._homes[agent.name] = home
        return home

    def leisure_location_for(self, agent: Agent) -> Position:
        return self.building("tavern")

    def random_nearby_position(self, origin: Position, radius: float = 5.0) -> Position:
        angle = self._rng.uniform(0.0, 2 * math.pi)
        distance = self._rng.uniform(0.0, max(0.0, radius))
        return (origin[0] + distance * math.cos(angle), origin[1] + distance * math.sin(angle))
