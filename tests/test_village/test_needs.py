"""
Unit tests for the villager needs model.
"""

import random

import pytest

from shared.events import NeedBecameCritical, NeedFulfilled, NeedFulfillmentFailed, NeedType, ResourceType
from village.cognition.needs import DEFAULT_NEEDS, PRESETS, TRAIT_RANGES, Need, NeedsSystem, Personality
from village.economy import EconomyLedger
from village.errors import FulfillmentError, InsufficientSupply, InsufficientWealth


class FakeWallet:
    """Minimal wallet for fulfillment tests."""

    def __init__(self, wealth):
        self.personal_wealth = wealth
        self.spent = []
        self.refunded = []

    def spend_wealth(self, amount):
        self.personal_wealth -= amount
        self.spent.append(amount)

    def refund_wealth(self, amount):
        self.personal_wealth += amount
        self.refunded.append(amount)


def hunger(value=100.0, **kwargs):
    return Need(
        need_type=NeedType.HUNGER,
        current_value=value,
        decay_rate=kwargs.pop("decay_rate", 5.0),
        required_resource=ResourceType.FOOD,
        resource_amount_needed=10.0,
        fulfillment_amount=kwargs.pop("fulfillment_amount", 60.0),
        **kwargs,
    )


class TestNeed:
    """Tests for a single need."""

    def test_value_clamped_on_creation(self):
        """Out-of-range initial values are clamped to [0, 100]."""
        assert Need(NeedType.REST, current_value=150.0).current_value == 100.0
        assert Need(NeedType.REST, current_value=-5.0).current_value == 0.0

    def test_decay_uses_rate_and_multiplier(self):
        """Decay removes rate * hours * multiplier."""
        need = Need(NeedType.REST, current_value=100.0, decay_rate=4.0)
        need.decay(2.0, multiplier=1.5)
        assert need.current_value == pytest.approx(88.0)

    def test_decay_stops_at_zero(self):
        """Huge decay never goes below zero."""
        need = Need(NeedType.REST, current_value=10.0, decay_rate=4.0)
        need.decay(1000.0)
        assert need.current_value == 0.0

    def test_decay_zero_is_noop(self, bus, recorder):
        """decay(0) changes nothing and publishes nothing."""
        need = Need(NeedType.REST, current_value=21.0, decay_rate=4.0, events=bus)
        need.decay(0.0)
        assert need.current_value == 21.0
        assert recorder.events == []

    def test_critical_event_is_edge_triggered(self, bus, recorder):
        """Staying below the threshold does not publish again."""
        need = Need(NeedType.REST, current_value=22.0, decay_rate=1.0, owner_name="Ann", events=bus)
        need.decay(1.0)  # 21, still fine
        need.decay(1.0)  # 20, critical
        need.decay(1.0)  # 19
        need.decay(1.0)  # 18

        events = recorder.of_type(NeedBecameCritical)
        assert len(events) == 1
        assert events[0].villager_name == "Ann"
        assert events[0].need_type == NeedType.REST

    def test_oscillation_emits_one_event_per_crossing(self, bus, recorder):
        """Each downward crossing is critical, each upward crossing is fulfilled."""
        need = Need(NeedType.SOCIAL, current_value=25.0, decay_rate=10.0, events=bus)
        for _ in range(3):
            need.decay(1.0)  # 15, crosses down
            need.fulfill_gradually(1.0, rate_per_hour=10.0)  # 25, crosses up

        assert len(recorder.of_type(NeedBecameCritical)) == 3
        assert len(recorder.of_type(NeedFulfilled)) == 3

    def test_is_critical_at_threshold(self):
        """The threshold itself counts as critical."""
        need = Need(NeedType.REST, current_value=20.0)
        assert need.is_critical()
        need.current_value = 20.5
        assert not need.is_critical()

    def test_urgency(self):
        """Urgency scales with deficit and weight, doubled when critical."""
        need = Need(NeedType.SOCIAL, current_value=50.0, importance_weight=0.8)
        assert need.urgency() == pytest.approx(0.4)

        need.current_value = 10.0
        assert need.urgency() == pytest.approx(0.9 * 0.8 * 2.0)

    def test_fulfill_without_resource(self, ledger):
        """Needs with no resource cost restore their amount for free."""
        need = Need(NeedType.REST, current_value=30.0, fulfillment_amount=50.0)
        wallet = FakeWallet(0.0)
        applied = need.fulfill(wallet, ledger, now_hours=0.0)
        assert applied == pytest.approx(50.0)
        assert need.current_value == pytest.approx(80.0)
        assert wallet.spent == []

    def test_fulfill_buys_resource(self, ledger):
        """A resource-backed need debits wealth and ledger stock."""
        need = hunger(30.0)
        wallet = FakeWallet(50.0)
        need.fulfill(wallet, ledger, now_hours=0.0)

        assert wallet.personal_wealth == pytest.approx(40.0)
        assert ledger.amount_of(ResourceType.FOOD) == pytest.approx(90.0)
        assert need.current_value == pytest.approx(90.0)

    def test_fulfill_clamps_to_max(self, ledger):
        """Fulfillment never pushes the value above 100."""
        need = hunger(80.0)
        applied = need.fulfill(FakeWallet(50.0), ledger, now_hours=0.0)
        assert need.current_value == 100.0
        assert applied == pytest.approx(20.0)

    def test_insufficient_wealth_scenario(self, bus, recorder):
        """Hunger 15 with wealth 5 and food at 1.0: nothing changes."""
        ledger = EconomyLedger(events=bus, initial_stock={ResourceType.FOOD: 100.0})
        need = hunger(15.0, events=bus)
        wallet = FakeWallet(5.0)
        recorder.clear()

        with pytest.raises(InsufficientWealth) as excinfo:
            need.fulfill(wallet, ledger, now_hours=0.0)

        assert excinfo.value.cost == pytest.approx(10.0)
        assert need.current_value == 15.0
        assert wallet.personal_wealth == 5.0
        assert ledger.amount_of(ResourceType.FOOD) == 100.0
        failed = recorder.of_type(NeedFulfillmentFailed)
        assert len(failed) == 1
        assert failed[0].reason == "Insufficient personal wealth"
        assert len(recorder.events) == 1

    def test_insufficient_supply_refunds(self, bus, recorder):
        """An empty village store refunds the purchase."""
        ledger = EconomyLedger(events=bus, initial_stock={ResourceType.FOOD: 5.0})
        need = hunger(15.0, events=bus)
        wallet = FakeWallet(50.0)

        with pytest.raises(InsufficientSupply):
            need.fulfill(wallet, ledger, now_hours=0.0)

        assert wallet.personal_wealth == pytest.approx(50.0)
        assert len(wallet.refunded) == 1
        assert need.current_value == 15.0
        assert ledger.amount_of(ResourceType.FOOD) == 5.0
        assert recorder.of_type(NeedFulfillmentFailed)[-1].reason == "Insufficient village supply"

    def test_in_stock(self, bus):
        """Stock must cover one fulfillment; free needs are always in stock."""
        ledger = EconomyLedger(events=bus, initial_stock={ResourceType.FOOD: 10.0})
        assert hunger(15.0).in_stock(ledger)

        ledger.consume(ResourceType.FOOD, 0.5)
        assert not hunger(15.0).in_stock(ledger)
        assert Need(NeedType.REST).in_stock(ledger)

    def test_fulfillment_errors_share_base(self):
        """Both failure kinds can be caught as FulfillmentError."""
        assert issubclass(InsufficientWealth, FulfillmentError)
        assert issubclass(InsufficientSupply, FulfillmentError)

    def test_diminishing_returns_inside_window(self, ledger):
        """A second fulfillment within 3 sim hours restores strictly less."""
        need = Need(NeedType.REST, current_value=0.0, fulfillment_amount=30.0)
        wallet = FakeWallet(0.0)

        first = need.fulfill(wallet, ledger, now_hours=10.0)
        second = need.fulfill(wallet, ledger, now_hours=11.0)

        assert first == pytest.approx(30.0)
        assert second == pytest.approx(30.0 * 0.7)
        assert second < first
        assert need.fulfillment_streak == 2

    def test_streak_resets_outside_window(self, ledger):
        """After the memory window the full amount applies again."""
        need = Need(NeedType.REST, current_value=0.0, fulfillment_amount=20.0)
        wallet = FakeWallet(0.0)

        need.fulfill(wallet, ledger, now_hours=0.0)
        need.fulfill(wallet, ledger, now_hours=1.0)
        applied = need.fulfill(wallet, ledger, now_hours=10.0)

        assert applied == pytest.approx(20.0)
        assert need.fulfillment_streak == 1

    def test_fulfilled_event_only_on_recovery(self, bus, recorder, ledger):
        """A fulfillment that starts above the threshold publishes nothing."""
        need = Need(NeedType.REST, current_value=50.0, events=bus)
        recorder.clear()
        need.fulfill(FakeWallet(0.0), ledger, now_hours=0.0)
        assert recorder.of_type(NeedFulfilled) == []

        need.current_value = 10.0
        need.fulfill(FakeWallet(0.0), ledger, now_hours=20.0)
        assert len(recorder.of_type(NeedFulfilled)) == 1

    def test_fulfill_gradually(self):
        """Passive recovery adds rate * seconds * time_scale."""
        need = Need(NeedType.REST, current_value=40.0)
        need.fulfill_gradually(10.0, rate_per_hour=15.0, time_scale=0.1)
        assert need.current_value == pytest.approx(55.0)

        need.fulfill_gradually(1000.0, rate_per_hour=15.0, time_scale=0.1)
        assert need.current_value == 100.0

    def test_values_stay_bounded(self, ledger):
        """Random sequences of operations keep the value in [0, 100]."""
        rng = random.Random(99)
        need = Need(NeedType.REST, current_value=50.0, decay_rate=7.0)
        wallet = FakeWallet(0.0)
        for i in range(200):
            op = rng.choice(["decay", "fulfill", "gradual"])
            if op == "decay":
                need.decay(rng.uniform(0, 50))
            elif op == "fulfill":
                need.fulfill(wallet, ledger, now_hours=float(i), base_amount=rng.uniform(0, 500))
            else:
                need.fulfill_gradually(rng.uniform(0, 100), rng.uniform(0, 50), 1.0)
            assert 0.0 <= need.current_value <= 100.0


class TestPersonality:
    """Tests for personality traits."""

    def test_traits_clamped(self):
        p = Personality(sociability=1.5, work_ethic=-0.2)
        assert p.sociability == 1.0
        assert p.work_ethic == 0.0

    def test_immutable(self):
        """Traits cannot change after creation."""
        p = Personality()
        with pytest.raises(Exception):
            p.sociability = 0.9

    def test_random_within_spawn_ranges(self, rng):
        for _ in range(50):
            p = Personality.random(rng)
            for trait, (lo, hi) in TRAIT_RANGES.items():
                assert lo <= getattr(p, trait) <= hi

    def test_decay_modifiers(self):
        """Trait-specific decay multipliers."""
        p = Personality(sociability=0.1, resilience=0.9, impulsivity=0.7)
        assert p.get_need_decay_modifier(NeedType.SOCIAL) == pytest.approx(1.2)
        assert p.get_need_decay_modifier(NeedType.REST) == pytest.approx(0.8)
        assert p.get_need_decay_modifier(NeedType.HUNGER) == pytest.approx(1.06)

    def test_presets(self):
        assert "hardworking" in PRESETS
        p = Personality.from_preset("hardworking")
        assert p.work_ethic == 0.9
        with pytest.raises(ValueError):
            Personality.from_preset("nonexistent")


class TestNeedsSystem:
    """Tests for the per-villager needs collection."""

    def test_default_needs(self):
        system = NeedsSystem()
        assert [n.need_type for n in system.all()] == list(DEFAULT_NEEDS)
        assert system.get(NeedType.SOCIAL).current_value == 85.0
        assert system.get(NeedType.HUNGER).required_resource == ResourceType.FOOD

    def test_update_applies_personality(self):
        """Low sociability makes the social need decay faster."""
        lonely = NeedsSystem(Personality(sociability=0.0))
        social = NeedsSystem(Personality(sociability=1.0))
        lonely.update(2.0)
        social.update(2.0)
        assert lonely.get(NeedType.SOCIAL).current_value < social.get(NeedType.SOCIAL).current_value

    def test_overrides(self):
        system = NeedsSystem(overrides={NeedType.REST: {"initial_value": 10.0}})
        assert system.get(NeedType.REST).current_value == 10.0
        assert system.get(NeedType.REST).decay_rate == DEFAULT_NEEDS[NeedType.REST]["decay_rate"]

    def test_most_urgent_critical_picks_highest_urgency(self):
        system = NeedsSystem()
        system.get(NeedType.HUNGER).current_value = 18.0
        system.get(NeedType.REST).current_value = 5.0
        assert system.most_urgent_critical().need_type == NeedType.REST

    def test_most_urgent_critical_ties_use_declaration_order(self):
        system = NeedsSystem()
        system.get(NeedType.HUNGER).current_value = 10.0
        system.get(NeedType.REST).current_value = 10.0
        assert system.most_urgent_critical().need_type == NeedType.HUNGER

    def test_no_critical_needs(self):
        system = NeedsSystem()
        assert system.most_urgent_critical() is None
        assert not system.has_urgent_needs()

    def test_average_value(self):
        system = NeedsSystem()
        assert system.average_value() == pytest.approx((100.0 + 100.0 + 85.0) / 3)

    def test_summary(self):
        system = NeedsSystem()
        system.get(NeedType.HUNGER).current_value = 10.0
        summary = system.summary()
        assert summary["critical_needs"] == ["Hunger"]
        assert summary["most_urgent"] == "Hunger"
