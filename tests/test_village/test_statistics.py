"""
Tests for village statistics and the run report.
"""

import json

import pytest

from shared.events import GoalType, NeedFulfillmentFailed, StateType, WorkCompleted
from village.config import SimulationConfig
from village.statistics import SimulationReport, VillageStatistics
from village.world import SimulationWorld


@pytest.fixture
def world():
    world = SimulationWorld(SimulationConfig(seed=21))
    world.populate(6)
    return world


class TestCounters:
    """Tests for event-driven counters."""

    def test_initial_states_seeded_from_villagers(self, world):
        stats = VillageStatistics(world)
        distribution = stats.state_distribution()
        assert distribution["Idle"] == 6
        assert set(distribution) == {s.value for s in StateType}

    def test_state_changes_tracked(self, world):
        stats = VillageStatistics(world)
        agent = world.agents[0]
        agent.brain.state_age = 1.0
        agent.brain.transition_to(StateType.SOCIALIZING)

        assert stats.state_distribution()["Socializing"] == 1
        assert stats.state_distribution()["Idle"] == 5
        assert stats.transitions == 1

    def test_event_counters(self, world):
        stats = VillageStatistics(world)
        world.events.publish(WorkCompleted(villager_name="x"))
        world.events.publish(NeedFulfillmentFailed(villager_name="x"))
        assert stats.work_cycles == 1
        assert stats.failed_fulfillments == 1

    def test_detach(self, world):
        stats = VillageStatistics(world)
        stats.detach()
        world.events.publish(WorkCompleted(villager_name="x"))
        assert stats.work_cycles == 0


class TestAggregates:
    """Tests for population-wide aggregates."""

    def test_average_happiness(self, world):
        for agent, value in zip(world.agents, [10, 20, 30, 40, 50, 60]):
            agent.mood.set_happiness(value)
        stats = VillageStatistics(world)
        assert stats.average_happiness() == pytest.approx(35.0)

    def test_mood_distribution(self, world):
        for agent, value in zip(world.agents, [10, 20, 50, 50, 80, 90]):
            agent.mood.set_happiness(value)
        assert VillageStatistics(world).mood_distribution() == {"Unhappy": 2, "Content": 2, "Happy": 2}

    def test_profession_distribution_sums_to_population(self, world):
        assert sum(VillageStatistics(world).profession_distribution().values()) == 6

    def test_goal_progress(self, world):
        for agent in world.agents:
            agent.goals.active_goals.clear()
        world.agents[0].goals.add_goal(GoalType.WORK_MASTERY).set_progress(40.0)
        world.agents[1].goals.add_goal(GoalType.WORK_MASTERY).set_progress(60.0)

        assert VillageStatistics(world).goal_progress() == {"WorkMastery": pytest.approx(50.0)}

    def test_empty_village(self):
        stats = VillageStatistics(SimulationWorld(SimulationConfig(seed=1)))
        report = stats.build_report()
        assert report.population == 0
        assert report.average_happiness == 50.0
        assert report.min_happiness == 0.0


class TestReport:
    """Tests for the report model."""

    def test_build_report_after_run(self, world):
        stats = VillageStatistics(world)
        world.run(30.0, 0.5)
        report = stats.build_report()

        assert report.population == 6
        assert report.min_happiness <= report.average_happiness <= report.max_happiness
        assert set(report.economy) == {"Food", "Wealth", "Goods", "Stone"}
        assert sum(report.state_distribution.values()) == 6

    def test_json_round_trip(self, world):
        report = VillageStatistics(world).build_report()
        data = json.loads(report.model_dump_json())
        assert data["economy"]["Food"]["amount"] == 100.0
        assert SimulationReport.model_validate(data) == report

    def test_format_text(self, world):
        text = VillageStatistics(world).build_report().format_text()
        assert text.startswith("Day 1, 6:00 AM - 6 villagers")
        assert "Food: 100.0 @ 1.00" in text
