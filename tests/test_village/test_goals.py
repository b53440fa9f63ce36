"""
Unit tests for goals and the goal set.
"""

import random
from unittest.mock import MagicMock

import pytest

from shared.events import GoalAssigned, GoalAssignmentDeferred, GoalCompleted, GoalType, StateType
from village.cognition.goals import ALL_GOAL_TYPES, Goal, GoalSet
from village.cognition.needs import Personality


def make_goal_set(personality=None, mood=None, events=None, seed=11, **kwargs):
    return GoalSet(
        personality=personality or Personality(),
        mood=mood,
        owner_name="Ada",
        events=events,
        rng=random.Random(seed),
        **kwargs,
    )


class TestGoal:
    """Tests for a single goal."""

    def test_progress_clamped_to_target(self):
        goal = Goal(GoalType.WORK_MASTERY, target=100.0, progress=95.0)
        applied = goal.add_progress(10.0)
        assert goal.progress == 100.0
        assert applied == pytest.approx(5.0)
        assert goal.is_reached

    def test_progress_never_negative(self):
        goal = Goal(GoalType.WORK_MASTERY, target=100.0)
        goal.add_progress(-30.0)
        assert goal.progress == 0.0

    def test_percentage(self):
        goal = Goal(GoalType.ACCUMULATE_WEALTH, target=200.0, progress=50.0)
        assert goal.progress_percentage == pytest.approx(25.0)

    def test_target_must_be_positive(self):
        with pytest.raises(ValueError):
            Goal(GoalType.WORK_MASTERY, target=0.0)


class TestCompletion:
    """Tests for completing a goal."""

    def test_completion_scenario(self, bus, recorder):
        """95/100 + 10 clamps to 100, completes, and boosts mood exactly once."""
        mood = MagicMock()
        goals = make_goal_set(mood=mood, events=bus)
        goal = goals.add_goal(GoalType.WORK_MASTERY)
        goal.set_progress(95.0)

        goals.update_progress(GoalType.WORK_MASTERY, 10.0)

        assert goal.progress == 100.0
        assert goal.completed
        mood.add_happiness_boost.assert_called_once()
        amount, duration = mood.add_happiness_boost.call_args.args
        assert 20.0 <= amount <= 30.0
        assert duration == 30.0

        completed = recorder.of_type(GoalCompleted)
        assert len(completed) == 1
        assert completed[0].happiness_boost == amount

    def test_completed_goal_moves_lists(self):
        goals = make_goal_set(mood=MagicMock())
        goals.add_goal(GoalType.WORK_MASTERY)
        goals.update_progress(GoalType.WORK_MASTERY, 100.0)

        assert goals.active_goals == []
        assert [g.goal_type for g in goals.completed_goals] == [GoalType.WORK_MASTERY]
        assert goals.pending_assignments == 1

    def test_further_progress_does_not_boost_again(self):
        mood = MagicMock()
        goals = make_goal_set(mood=mood)
        goal = goals.add_goal(GoalType.WORK_MASTERY)
        goals.update_progress(GoalType.WORK_MASTERY, 100.0)
        goals.update_progress(GoalType.WORK_MASTERY, 100.0)
        assert not goals.check_completion(goal)
        mood.add_happiness_boost.assert_called_once()

    def test_progress_on_missing_goal_is_ignored(self):
        goals = make_goal_set()
        goals.update_progress(GoalType.SOCIAL_PROMINENCE, 50.0)
        assert goals.completed_goals == []


class TestAssignment:
    """Tests for initial and replacement goal assignment."""

    def test_ambitious_villager_gets_two_goals(self):
        goals = make_goal_set(Personality.from_preset("hardworking"))
        goals.assign_initial()
        assert [g.goal_type for g in goals.active_goals] == [
            GoalType.WORK_MASTERY,
            GoalType.ACCUMULATE_WEALTH,
        ]

    def test_unambitious_villager_gets_one_goal(self):
        goals = make_goal_set(Personality())
        goals.assign_initial()
        # Equal scores keep declaration order
        assert [g.goal_type for g in goals.active_goals] == [GoalType.ACCUMULATE_WEALTH]

    def test_goal_assigned_events(self, bus, recorder):
        goals = make_goal_set(Personality.from_preset("hardworking"), events=bus)
        goals.assign_initial()
        assert len(recorder.of_type(GoalAssigned)) == 2

    def test_at_most_two_active(self):
        goals = make_goal_set()
        assert goals.add_goal(GoalType.WORK_MASTERY) is not None
        assert goals.add_goal(GoalType.ACCUMULATE_WEALTH) is not None
        assert goals.add_goal(GoalType.SOCIAL_PROMINENCE) is None
        assert len(goals.active_goals) == 2

    def test_targets(self):
        goals = make_goal_set(max_active=4)
        wealth = goals.add_goal(GoalType.ACCUMULATE_WEALTH)
        social = goals.add_goal(GoalType.SOCIAL_PROMINENCE)
        mastery = goals.add_goal(GoalType.WORK_MASTERY)
        contributor = goals.add_goal(GoalType.VILLAGE_CONTRIBUTOR)

        assert 150.0 <= wealth.target <= 250.0
        assert 15.0 <= social.target <= 25.0
        assert mastery.target == 100.0
        assert 300.0 <= contributor.target <= 500.0

    def test_replacement_excludes_active_and_completed(self):
        for seed in range(10):
            goals = make_goal_set(mood=MagicMock(), seed=seed)
            goals.add_goal(GoalType.WORK_MASTERY)
            goals.add_goal(GoalType.ACCUMULATE_WEALTH)
            goals.update_progress(GoalType.WORK_MASTERY, 100.0)

            goals.update(50.0, 0.0, StateType.IDLE)

            types = [g.goal_type for g in goals.active_goals]
            assert len(types) == 2
            assert types[1] in (GoalType.SOCIAL_PROMINENCE, GoalType.VILLAGE_CONTRIBUTOR)
            assert goals.pending_assignments == 0

    def test_replacement_waits_for_delay(self):
        goals = make_goal_set(mood=MagicMock())
        goals.add_goal(GoalType.WORK_MASTERY)
        goals.update_progress(GoalType.WORK_MASTERY, 100.0)

        goals.update(10.0, 0.0, StateType.IDLE)
        assert goals.active_goals == []
        assert goals.pending_assignments == 1

    def test_no_viable_candidate_retries_later(self, bus, recorder):
        goals = make_goal_set(mood=MagicMock(), events=bus, max_active=4)
        for goal_type in ALL_GOAL_TYPES:
            goals.add_goal(goal_type)
        goals.update_progress(GoalType.WORK_MASTERY, 100.0)

        goals.update(50.0, 0.0, StateType.IDLE)

        assert len(goals.active_goals) == 3
        assert goals.pending_assignments == 1
        deferred = recorder.of_type(GoalAssignmentDeferred)
        assert len(deferred) == 1
        assert deferred[0].villager_name == "Ada"
        assert 15.0 <= deferred[0].retry_in_seconds <= 45.0

        goals.update(50.0, 0.0, StateType.IDLE)

        assert goals.has_goal_of_type(GoalType.WORK_MASTERY)
        assert len(goals.active_goals) == 4
        assert goals.pending_assignments == 0


class TestStatusChecks:
    """Tests for passive progress sampling."""

    def test_wealth_goal_tracks_wealth(self):
        goals = make_goal_set()
        goal = goals.add_goal(GoalType.ACCUMULATE_WEALTH)
        goals.check_status(personal_wealth=100.0, current_state=StateType.WORKING)
        assert goal.progress == 100.0

    def test_wealth_goal_completes(self):
        goals = make_goal_set(mood=MagicMock())
        goals.add_goal(GoalType.ACCUMULATE_WEALTH)
        goals.check_status(personal_wealth=1e6, current_state=None)
        assert goals.completed_goals[0].goal_type == GoalType.ACCUMULATE_WEALTH

    def test_social_goal_only_while_socializing(self):
        goals = make_goal_set()
        goal = goals.add_goal(GoalType.SOCIAL_PROMINENCE)
        goals.check_status(0.0, StateType.WORKING)
        assert goal.progress == 0.0
        goals.check_status(0.0, StateType.SOCIALIZING)
        assert goal.progress == pytest.approx(0.05)

    def test_update_checks_every_five_seconds(self):
        goals = make_goal_set()
        goal = goals.add_goal(GoalType.ACCUMULATE_WEALTH)
        goals.update(4.0, 80.0, None)
        assert goal.progress == 0.0
        goals.update(1.0, 80.0, None)
        assert goal.progress == 80.0


class TestQueries:
    """Tests for goal preference and satisfaction."""

    def test_goal_preference(self):
        goals = make_goal_set(Personality.from_preset("hardworking"))
        goals.assign_initial()
        assert goals.goal_preference(StateType.WORKING) == pytest.approx(5.0)
        assert goals.goal_preference(StateType.SOCIALIZING) == 0.0

    def test_satisfaction_without_goals(self):
        assert make_goal_set().satisfaction() == 50.0

    def test_satisfaction_is_mean_percentage(self):
        goals = make_goal_set()
        goals.add_goal(GoalType.WORK_MASTERY).set_progress(50.0)
        goals.add_goal(GoalType.SOCIAL_PROMINENCE)
        assert goals.satisfaction() == pytest.approx(25.0)
