"""
Hamlet - Need Base Class
Represents a single need (hunger, rest, social) that decays over time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from shared.constants import (
    DEFAULT_GRADUAL_RATE_PER_HOUR,
    NEED_CRITICAL_THRESHOLD,
    NEED_DIMINISHING_FACTOR,
    NEED_MAX,
    NEED_MEMORY_WINDOW_HOURS,
    NEED_MIN,
)
from shared.events import (
    NeedBecameCritical,
    NeedFulfilled,
    NeedFulfillmentFailed,
    NeedType,
    ResourceType,
)

from ...errors import InsufficientSupply, InsufficientWealth

if TYPE_CHECKING:
    from ...economy import EconomyLedger
    from ...events import EventBus

logger = logging.getLogger(__name__)


class Wallet(Protocol):
    """Whoever pays for a resource-backed need."""

    personal_wealth: float

    def spend_wealth(self, amount: float) -> None: ...

    def refund_wealth(self, amount: float) -> None: ...


@dataclass
class Need:
    """
    A single need that decays over time and can be fulfilled.

    Needs range from 0 (desperate) to 100 (satisfied). At or below the
    critical threshold a need is urgent and overrides normal behavior
    selection. Crossing the threshold in either direction publishes exactly
    one event per crossing.
    """

    need_type: NeedType
    current_value: float = 100.0
    decay_rate: float = 1.0  # Points lost per sim hour
    importance_weight: float = 1.0
    critical_threshold: float = NEED_CRITICAL_THRESHOLD
    required_resource: ResourceType = ResourceType.NONE
    resource_amount_needed: float = 0.0
    fulfillment_amount: float = 50.0  # Base amount restored by one fulfillment

    # Diminishing returns tracking
    last_fulfillment_time: float | None = None  # sim hours
    fulfillment_streak: int = 0

    owner_name: str = field(default="", repr=False)
    events: EventBus | None = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.current_value = self._clamp(self.current_value)

    @property
    def name(self) -> str:
        return self.need_type.value

    @staticmethod
    def _clamp(value: float) -> float:
        return max(NEED_MIN, min(NEED_MAX, value))

    def _publish(self, event: Any) -> None:
        if self.events is not None:
            self.events.publish(event)

    def decay(self, delta_hours: float, multiplier: float = 1.0) -> None:
        """
        Decay the need over simulated time.

        Args:
            delta_hours: Simulated hours elapsed
            multiplier: Personality decay multiplier
        """
        if delta_hours <= 0 or self.decay_rate <= 0:
            return

        previous_value = self.current_value
        self.current_value = max(NEED_MIN, previous_value - self.decay_rate * delta_hours * multiplier)

        if not self._is_critical(previous_value) and self.is_critical():
            logger.debug("%s: %s became critical (%.1f)", self.owner_name, self.name, self.current_value)
            self._publish(
                NeedBecameCritical(
                    villager_name=self.owner_name,
                    need_type=self.need_type,
                    current_value=self.current_value,
                )
            )

    def can_afford(self, wallet: Wallet, ledger: EconomyLedger) -> bool:
        """Whether the wallet covers the resource cost at the current price."""
        return wallet.personal_wealth >= self.resource_cost(ledger)

    def in_stock(self, ledger: EconomyLedger) -> bool:
        """Whether the village holds enough of the resource for one fulfillment."""
        if self.required_resource == ResourceType.NONE:
            return True
        return ledger.amount_of(self.required_resource) >= self.resource_amount_needed

    def resource_cost(self, ledger: EconomyLedger) -> float:
        if self.required_resource == ResourceType.NONE:
            return 0.0
        return self.resource_amount_needed * ledger.price_for(self.required_resource)

    def fulfill(
        self,
        wallet: Wallet,
        ledger: EconomyLedger,
        now_hours: float,
        base_amount: float | None = None,
    ) -> float:
        """
        Fulfill the need, buying its resource from the village if required.

        Wealth is debited before the ledger is asked for stock; if the ledger
        then refuses, the debit is refunded.

        Args:
            wallet: Pays the resource cost
            ledger: Village stock to buy from
            now_hours: Current simulated time in hours
            base_amount: Amount to restore before diminishing returns
                         (defaults to fulfillment_amount)

        Returns:
            The amount actually added to the need

        Raises:
            InsufficientWealth: The wallet cannot cover the cost (nothing changes)
            InsufficientSupply: The ledger lacks stock (wealth is refunded)
        """
        amount = self.fulfillment_amount if base_amount is None else base_amount

        if self.required_resource != ResourceType.NONE:
            cost = self.resource_cost(ledger)

            if wallet.personal_wealth < cost:
                logger.warning(
                    "%s cannot afford %.1f %s. Needs %.1f wealth, has %.1f.",
                    self.owner_name,
                    self.resource_amount_needed,
                    self.required_resource.value,
                    cost,
                    wallet.personal_wealth,
                )
                self._publish_failure("Insufficient personal wealth")
                raise InsufficientWealth(self.need_type, cost, wallet.personal_wealth)

            wallet.spend_wealth(cost)

            if not ledger.consume(self.required_resource, self.resource_amount_needed):
                wallet.refund_wealth(cost)
                logger.warning(
                    "%s could afford %s, but village supply is empty!",
                    self.owner_name,
                    self.required_resource.value,
                )
                self._publish_failure("Insufficient village supply")
                raise InsufficientSupply(
                    self.need_type, self.required_resource, self.resource_amount_needed
                )

        # Diminishing returns for frequent fulfillment
        if (
            self.last_fulfillment_time is not None
            and now_hours - self.last_fulfillment_time < NEED_MEMORY_WINDOW_HOURS
        ):
            amount *= NEED_DIMINISHING_FACTOR ** self.fulfillment_streak
            self.fulfillment_streak += 1
        else:
            self.fulfillment_streak = 1
        self.last_fulfillment_time = now_hours

        previous_value = self.current_value
        self.current_value = self._clamp(previous_value + max(0.0, amount))
        self._check_recovered(previous_value)
        return self.current_value - previous_value

    def fulfill_gradually(
        self,
        delta_seconds: float,
        rate_per_hour: float = DEFAULT_GRADUAL_RATE_PER_HOUR,
        time_scale: float = 1.0,
    ) -> None:
        """
        Passive recovery (sleeping, relaxing, socializing).

        No resource cost and no diminishing returns.
        """
        if delta_seconds <= 0 or rate_per_hour <= 0:
            return

        previous_value = self.current_value
        self.current_value = min(NEED_MAX, previous_value + rate_per_hour * delta_seconds * time_scale)
        self._check_recovered(previous_value)

    def _check_recovered(self, previous_value: float) -> None:
        if self._is_critical(previous_value) and not self.is_critical():
            self._publish(
                NeedFulfilled(
                    villager_name=self.owner_name,
                    need_type=self.need_type,
                    new_value=self.current_value,
                )
            )

    def _publish_failure(self, reason: str) -> None:
        self._publish(
            NeedFulfillmentFailed(
                villager_name=self.owner_name,
                need_type=self.need_type,
                required_resource=self.required_resource,
                amount_needed=self.resource_amount_needed,
                reason=reason,
            )
        )

    def _is_critical(self, value: float) -> bool:
        return value <= self.critical_threshold

    def is_critical(self) -> bool:
        """Check if the need is at or below its critical threshold."""
        return self._is_critical(self.current_value)

    def urgency(self) -> float:
        """
        How pressing this need is.

        (1 - value/100) * importance, doubled at or below the critical
        threshold. Used to rank needs against each other.
        """
        urgency = (1.0 - self.current_value / NEED_MAX) * self.importance_weight
        if self.is_critical():
            urgency *= 2.0
        return urgency

    def get_state(self) -> dict[str, Any]:
        """Get current state for reports."""
        return {
            "name": self.name,
            "value": self.current_value,
            "decay_rate": self.decay_rate,
            "critical_threshold": self.critical_threshold,
            "importance_weight": self.importance_weight,
            "required_resource": self.required_resource.value,
            "fulfillment_streak": self.fulfillment_streak,
        }

    def __str__(self) -> str:
        status = "CRITICAL" if self.is_critical() else "ok"
        return f"{self.name}: {self.current_value:.1f}/100 [{status}]"
