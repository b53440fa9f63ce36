# tests/test_village/conftest.py
import random

import pytest

from shared.events import ResourceType
from village.agent import Agent
from village.clock import SimulationClock
from village.cognition.needs import Personality
from village.economy import EconomyLedger
from village.events import EventBus, EventRecorder
from village.locations import TimedMovement, VillageLayout
from village.profession import DEFAULT_PROFESSIONS, ProfessionType


@pytest.fixture
def rng():
    """Seeded random source so runs are repeatable."""
    return random.Random(1234)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    """Records everything published on the bus."""
    return EventRecorder(bus)


@pytest.fixture
def ledger(bus):
    return EconomyLedger(
        events=bus,
        initial_stock={
            ResourceType.FOOD: 100.0,
            ResourceType.WEALTH: 100.0,
            ResourceType.GOODS: 50.0,
            ResourceType.STONE: 20.0,
        },
    )


@pytest.fixture
def clock(bus):
    """Clock at 8 AM (Morning) with a 240 s day, so 1 real second = 0.1 sim hours."""
    return SimulationClock(day_length_seconds=240.0, start_hour=8.0, events=bus)


@pytest.fixture
def make_agent(ledger, clock, bus, rng):
    """Factory for agents wired to the shared fixtures."""

    def _make(
        name="Test Villager",
        profession=ProfessionType.FARMER,
        personality=None,
        wealth=50.0,
        travel_time=0.0,
    ):
        return Agent(
            name=name,
            ledger=ledger,
            clock=clock,
            events=bus,
            personality=personality or Personality(),
            profession=DEFAULT_PROFESSIONS[profession],
            personal_wealth=wealth,
            movement=TimedMovement(travel_time),
            locator=VillageLayout(random.Random(7)),
            rng=random.Random(rng.getrandbits(32)),
        )

    return _make
