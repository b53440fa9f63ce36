"""
Unit tests for the mood model.
"""

import random

import pytest

from shared.events import MoodCategory, MoodChanged
from village.cognition.mood import MoodModel, category_for
from village.cognition.needs import Personality
from village.config import MoodWeights


class TestCategory:
    """Tests for the happiness to category mapping."""

    @pytest.mark.parametrize(
        "happiness,expected",
        [
            (0.0, MoodCategory.UNHAPPY),
            (29.9, MoodCategory.UNHAPPY),
            (30.0, MoodCategory.CONTENT),
            (70.0, MoodCategory.CONTENT),
            (70.1, MoodCategory.HAPPY),
            (100.0, MoodCategory.HAPPY),
        ],
    )
    def test_category_boundaries(self, happiness, expected):
        assert category_for(happiness) == expected

    def test_category_tracks_happiness(self):
        mood = MoodModel(initial_happiness=20.0)
        assert mood.category == MoodCategory.UNHAPPY
        assert mood.is_very_unhappy
        mood.set_happiness(55.0)
        assert mood.category == MoodCategory.CONTENT
        assert not mood.is_very_unhappy


class TestMoodChangedEvents:
    """A category change publishes exactly one MoodChanged."""

    def test_crossing_to_happy_scenario(self, bus, recorder):
        """69 -> 71 publishes Content->Happy, a further move to 75 publishes nothing."""
        mood = MoodModel(owner_name="Ada", events=bus, initial_happiness=69.0)

        mood.set_happiness(71.0)
        changes = recorder.of_type(MoodChanged)
        assert len(changes) == 1
        assert changes[0].old_mood == MoodCategory.CONTENT
        assert changes[0].new_mood == MoodCategory.HAPPY
        assert changes[0].villager_name == "Ada"

        mood.set_happiness(75.0)
        assert len(recorder.of_type(MoodChanged)) == 1

    def test_update_crossing_publishes(self, bus, recorder):
        mood = MoodModel(events=bus, initial_happiness=50.0)
        # Target 70.8 reached in one step when delta * rate >= 1
        mood.update_happiness(10.0, 100.0, 99.0, True, 50.0)
        assert mood.happiness == pytest.approx(70.8)
        assert [e.new_mood for e in recorder.of_type(MoodChanged)] == [MoodCategory.HAPPY]

    def test_no_event_without_category_change(self, bus, recorder):
        mood = MoodModel(events=bus, initial_happiness=50.0)
        mood.set_happiness(60.0)
        assert recorder.of_type(MoodChanged) == []


class TestSatisfactionFactors:
    """Tests for the individual satisfaction curves."""

    def test_wealth_curve(self):
        assert MoodModel.wealth_satisfaction_for(0.0) == 0.0
        assert MoodModel.wealth_satisfaction_for(99.0) == pytest.approx(40.0)
        assert MoodModel.wealth_satisfaction_for(1e9) == 100.0
        assert MoodModel.wealth_satisfaction_for(-10.0) == 0.0

    def test_work_satisfaction(self):
        assert MoodModel().work_satisfaction_for(False) == 40.0
        assert MoodModel().work_satisfaction_for(True) == 60.0
        assert MoodModel(Personality(work_ethic=0.8)).work_satisfaction_for(True) == 75.0
        assert MoodModel(Personality(work_ethic=0.2)).work_satisfaction_for(True) == 50.0


class TestUpdate:
    """Tests for the smoothed happiness update."""

    def test_weighted_target(self):
        mood = MoodModel(initial_happiness=50.0)
        mood.update_happiness(1.0, 100.0, 99.0, True, 50.0)
        # (100*1 + 40*0.3 + 60*0.5 + 50*0.7) / 2.5
        assert mood.target_happiness == pytest.approx(70.8)

    def test_lerp_smoothing(self):
        """Happiness moves toward the target by delta * 0.1."""
        mood = MoodModel(initial_happiness=50.0)
        mood.update_happiness(1.0, 100.0, 99.0, True, 50.0)
        assert mood.happiness == pytest.approx(50.0 + (70.8 - 50.0) * 0.1)

    def test_optimism_offset(self):
        gloomy = MoodModel(Personality(optimism=0.0))
        cheerful = MoodModel(Personality(optimism=1.0))
        for mood in (gloomy, cheerful):
            mood.update_happiness(1.0, 50.0, 0.0, False, 50.0)
        assert cheerful.target_happiness - gloomy.target_happiness == pytest.approx(20.0)

    def test_custom_weights(self):
        mood = MoodModel(weights=MoodWeights(needs=1.0, wealth=0.0, work=0.0, goal=0.0))
        mood.update_happiness(1.0, 35.0, 1000.0, True, 100.0)
        assert mood.target_happiness == pytest.approx(35.0)

    def test_happiness_stays_in_bounds(self):
        rng = random.Random(3)
        mood = MoodModel(Personality(optimism=1.0))
        for _ in range(300):
            if rng.random() < 0.1:
                mood.add_happiness_boost(rng.uniform(0, 80), rng.uniform(0, 10))
            mood.update_happiness(
                rng.uniform(0, 20),
                rng.uniform(0, 100),
                rng.uniform(0, 1000),
                rng.random() < 0.5,
                rng.uniform(0, 100),
            )
            assert 0.0 <= mood.happiness <= 100.0
            assert 0.0 <= mood.target_happiness <= 100.0


class TestBoost:
    """Tests for temporary happiness boosts."""

    def test_boost_raises_target_until_expiry(self):
        mood = MoodModel()
        mood.add_happiness_boost(20.0, 5.0)

        for _ in range(5):
            mood.update_happiness(1.0, 50.0, 0.0, False, 50.0)
            boosted = mood.target_happiness
        assert mood.temporary_boost == 0.0

        mood.update_happiness(1.0, 50.0, 0.0, False, 50.0)
        assert boosted - mood.target_happiness == pytest.approx(20.0)

    def test_later_boost_overwrites(self):
        mood = MoodModel()
        mood.add_happiness_boost(25.0, 30.0)
        mood.add_happiness_boost(10.0, 5.0)
        assert mood.temporary_boost == 10.0
        assert mood.boost_remaining_seconds == 5.0


class TestEffects:
    """Tests for mood effects on other systems."""

    @pytest.mark.parametrize("happiness,expected", [(0.0, 0.5), (50.0, 1.0), (100.0, 1.5)])
    def test_work_efficiency(self, happiness, expected):
        mood = MoodModel(initial_happiness=happiness)
        assert mood.work_efficiency_multiplier() == pytest.approx(expected)

    def test_social_quality(self):
        assert MoodModel(initial_happiness=0.0).social_interaction_quality() == pytest.approx(0.7)
        assert MoodModel(initial_happiness=100.0).social_interaction_quality() == pytest.approx(1.3)

    def test_summary(self):
        summary = MoodModel(initial_happiness=42.0).summary()
        assert summary["mood"] == "Content"
        assert set(summary["factors"]) == {"needs", "wealth", "work", "goals"}
