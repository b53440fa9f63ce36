"""
Hamlet - Simulation Configuration
Tunable simulation parameters with environment variable support.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from shared.constants import (
    BEHAVIOR_CHECK_INTERVAL,
    DAY_LENGTH_SECONDS,
    MINIMUM_STATE_DURATION,
    MOVEMENT_TIMEOUT,
    RESOURCE_SOFT_FLOOR,
    START_HOUR,
)
from shared.events import ResourceType


def _default_initial_stock() -> dict[ResourceType, float]:
    return {
        ResourceType.FOOD: 100.0,
        ResourceType.WEALTH: 100.0,
        ResourceType.GOODS: 50.0,
        ResourceType.STONE: 20.0,
    }


def _default_base_prices() -> dict[ResourceType, float]:
    return {
        ResourceType.FOOD: 1.0,
        ResourceType.WEALTH: 1.0,
        ResourceType.GOODS: 2.0,
        ResourceType.STONE: 3.0,
    }


@dataclass
class MoodWeights:
    """Blend weights for the happiness target."""

    needs: float = 1.0
    wealth: float = 0.3
    work: float = 0.5
    goal: float = 0.7

    @property
    def total(self) -> float:
        return self.needs + self.wealth + self.work + self.goal


@dataclass
class SimulationConfig:
    """Configuration for a village simulation run."""

    # Population
    villager_count: int = 15
    seed: int | None = None
    starting_wealth_min: float = 10.0
    starting_wealth_max: float = 40.0

    # Time
    day_length_seconds: float = DAY_LENGTH_SECONDS
    start_hour: float = START_HOUR

    # Behavior
    behavior_check_interval: float = BEHAVIOR_CHECK_INTERVAL
    minimum_state_duration: float = MINIMUM_STATE_DURATION
    movement_timeout: float = MOVEMENT_TIMEOUT
    travel_time_seconds: float = 2.0  # How long the built-in movement takes to arrive

    # Mood
    mood_weights: MoodWeights = field(default_factory=MoodWeights)

    # Economy
    initial_stock: dict[ResourceType, float] = field(default_factory=_default_initial_stock)
    base_prices: dict[ResourceType, float] = field(default_factory=_default_base_prices)
    resource_soft_floor: float = RESOURCE_SOFT_FLOOR

    @property
    def time_scale(self) -> float:
        """Simulated hours per real second."""
        return 24.0 / self.day_length_seconds

    @classmethod
    def from_env(cls) -> "SimulationConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            HAMLET_VILLAGERS: Number of villagers to spawn
            HAMLET_SEED: Random seed (unset = nondeterministic)
            HAMLET_DAY_LENGTH: Real seconds per simulated day
            HAMLET_START_HOUR: Hour of day the simulation starts at
            HAMLET_BEHAVIOR_INTERVAL: Seconds between behavior reassessments
            HAMLET_MIN_STATE_DURATION: Minimum dwell time in a state (seconds)
            HAMLET_MOVEMENT_TIMEOUT: Seconds before a destination is abandoned
            HAMLET_TRAVEL_TIME: Seconds the built-in movement takes to arrive
            HAMLET_INITIAL_FOOD: Starting food stock
            HAMLET_INITIAL_GOODS: Starting goods stock
            HAMLET_INITIAL_STONE: Starting stone stock
        """
        seed = os.getenv("HAMLET_SEED")
        stock = _default_initial_stock()
        stock[ResourceType.FOOD] = float(os.getenv("HAMLET_INITIAL_FOOD", stock[ResourceType.FOOD]))
        stock[ResourceType.GOODS] = float(os.getenv("HAMLET_INITIAL_GOODS", stock[ResourceType.GOODS]))
        stock[ResourceType.STONE] = float(os.getenv("HAMLET_INITIAL_STONE", stock[ResourceType.STONE]))

        return cls(
            villager_count=int(os.getenv("HAMLET_VILLAGERS", "15")),
            seed=int(seed) if seed else None,
            day_length_seconds=float(os.getenv("HAMLET_DAY_LENGTH", str(DAY_LENGTH_SECONDS))),
            start_hour=float(os.getenv("HAMLET_START_HOUR", str(START_HOUR))),
            behavior_check_interval=float(
                os.getenv("HAMLET_BEHAVIOR_INTERVAL", str(BEHAVIOR_CHECK_INTERVAL))
            ),
            minimum_state_duration=float(
                os.getenv("HAMLET_MIN_STATE_DURATION", str(MINIMUM_STATE_DURATION))
            ),
            movement_timeout=float(os.getenv("HAMLET_MOVEMENT_TIMEOUT", str(MOVEMENT_TIMEOUT))),
            travel_time_seconds=float(os.getenv("HAMLET_TRAVEL_TIME", "2.0")),
            initial_stock=stock,
        )

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation error messages (empty if valid)
        """
        issues = []

        if self.villager_count < 0:
            issues.append("Villager count cannot be negative")

        if self.day_length_seconds <= 0:
            issues.append("Day length must be positive")

        if not 0 <= self.start_hour < 24:
            issues.append("Start hour must be within [0, 24)")

        if self.starting_wealth_min > self.starting_wealth_max:
            issues.append("Starting wealth min exceeds max")

        if self.minimum_state_duration < 0:
            issues.append("Minimum state duration cannot be negative")

        if self.movement_timeout <= 0:
            issues.append("Movement timeout must be positive")

        if ResourceType.NONE in self.initial_stock or ResourceType.NONE in self.base_prices:
            issues.append("ResourceType.NONE cannot be stocked or priced")

        for resource, price in self.base_prices.items():
            if price <= 0:
                issues.append(f"Base price for {resource.value} must be positive")

        for resource, amount in self.initial_stock.items():
            if amount < 0:
                issues.append(f"Initial stock for {resource.value} cannot be negative")

        return issues

    def is_valid(self) -> bool:
        """Check if configuration is valid."""
        return len(self.validate()) == 0

    def __repr__(self) -> str:
        return (
            f"SimulationConfig(villagers={self.villager_count}, seed={self.seed}, "
            f"day_length={self.day_length_seconds}s, start_hour={self.start_hour})"
        )
