"""
Hamlet - Economy Ledger
Shared village stock, supply/demand pricing and daily history.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any

import numpy as np

from shared.constants import (
    HISTORY_CAPACITY,
    PRICE_CEILING_FACTOR,
    PRICE_FLOOR_FACTOR,
    PRICE_HYSTERESIS,
    PRICE_SCARCITY_NUMERATOR,
    PRICE_SCARCITY_OFFSET,
    RESOURCE_SOFT_FLOOR,
)
from shared.events import (
    PriceChanged,
    ResourceChanged,
    ResourceCritical,
    ResourceType,
)

from ..events import EventBus

logger = logging.getLogger(__name__)

STOCKED_RESOURCES: tuple[ResourceType, ...] = (
    ResourceType.FOOD,
    ResourceType.WEALTH,
    ResourceType.GOODS,
    ResourceType.STONE,
)

# Wealth is the unit of account, its price never moves
UNPRICED_RESOURCES: frozenset[ResourceType] = frozenset({ResourceType.WEALTH})

DEFAULT_BASE_PRICES: dict[ResourceType, float] = {
    ResourceType.FOOD: 1.0,
    ResourceType.WEALTH: 1.0,
    ResourceType.GOODS: 2.0,
    ResourceType.STONE: 3.0,
}


class EconomyLedger:
    """
    The one resource shared by every villager.

    Tracks per-resource stock, price and a capped daily history. Prices scale
    inversely with stock:

        price = clamp(base * 100 / (amount + 50), 0.5 * base, 3 * base)

    and are only committed when they move by more than 0.1, so small stock
    changes do not spam PriceChanged events.

    All mutations hold a single lock so a multi-threaded driver still sees
    each consume/produce/reprice as one atomic step.
    """

    def __init__(
        self,
        events: EventBus | None = None,
        initial_stock: dict[ResourceType, float] | None = None,
        base_prices: dict[ResourceType, float] | None = None,
        soft_floor: float = RESOURCE_SOFT_FLOOR,
        history_capacity: int = HISTORY_CAPACITY,
    ) -> None:
        """
        Initialize the ledger.

        Args:
            events: Event sink for resource and price events
            initial_stock: Starting amount per resource (missing = 0)
            base_prices: Base price per resource (missing = 1.0)
            soft_floor: Stock below this raises ResourceCritical after consumption
            history_capacity: Number of daily samples kept per resource
        """
        self._events = events or EventBus()
        self._lock = threading.RLock()
        self.soft_floor = soft_floor

        stock = initial_stock or {}
        prices = {**DEFAULT_BASE_PRICES, **(base_prices or {})}

        self._amounts: dict[ResourceType, float] = {}
        self._base_prices: dict[ResourceType, float] = {}
        self._prices: dict[ResourceType, float] = {}
        self._history: dict[ResourceType, deque[float]] = {}
        self._daily_net_change: dict[ResourceType, float] = {}

        for resource in STOCKED_RESOURCES:
            self._amounts[resource] = max(0.0, stock.get(resource, 0.0))
            self._base_prices[resource] = prices.get(resource, 1.0)
            self._prices[resource] = self._base_prices[resource]
            self._history[resource] = deque(maxlen=history_capacity)
            self._daily_net_change[resource] = 0.0

        self.record_daily_snapshot()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def consume(self, resource: ResourceType, amount: float) -> bool:
        """
        Debit stock for a purchase.

        Returns:
            True if the stock covered the amount, False otherwise (nothing
            is debited and ResourceCritical is published)
        """
        if resource == ResourceType.NONE:
            return True
        if amount <= 0:
            return True

        with self._lock:
            available = self._amounts[resource]
            if available < amount:
                logger.debug("%s supply %.1f cannot cover %.1f", resource.value, available, amount)
                self._events.publish(
                    ResourceCritical(resource_type=resource, current_amount=available)
                )
                return False

            self._amounts[resource] = available - amount
            remaining = self._amounts[resource]

            self._events.publish(
                ResourceChanged(
                    resource_type=resource,
                    amount=-amount,
                    new_total=remaining,
                    source="Consumption",
                )
            )

            if remaining < self.soft_floor:
                self._events.publish(
                    ResourceCritical(resource_type=resource, current_amount=remaining)
                )

            self._update_price(resource)
            return True

    def produce(self, resource: ResourceType, amount: float, source: str = "Production") -> None:
        """Credit stock from production."""
        if resource == ResourceType.NONE or amount <= 0:
            return

        with self._lock:
            self._amounts[resource] += amount
            self._events.publish(
                ResourceChanged(
                    resource_type=resource,
                    amount=amount,
                    new_total=self._amounts[resource],
                    source=source,
                )
            )
            self._update_price(resource)

    def _update_price(self, resource: ResourceType) -> None:
        """Recompute and (if the move is large enough) commit a price."""
        if resource == ResourceType.NONE or resource in UNPRICED_RESOURCES:
            return

        old_price = self._prices[resource]
        new_price = self.compute_price(resource)

        if abs(new_price - old_price) > PRICE_HYSTERESIS:
            self._prices[resource] = new_price
            logger.debug("%s price %.2f -> %.2f", resource.value, old_price, new_price)
            self._events.publish(
                PriceChanged(resource_type=resource, old_price=old_price, new_price=new_price)
            )

    def compute_price(self, resource: ResourceType) -> float:
        """Uncommitted scarcity price for the current stock."""
        base = self._base_prices[resource]
        scarcity = PRICE_SCARCITY_NUMERATOR / (self._amounts[resource] + PRICE_SCARCITY_OFFSET)
        return float(np.clip(base * scarcity, base * PRICE_FLOOR_FACTOR, base * PRICE_CEILING_FACTOR))

    def record_daily_snapshot(self) -> None:
        """Append the current stock of every resource to its history."""
        with self._lock:
            for resource in STOCKED_RESOURCES:
                history = self._history[resource]
                current = self._amounts[resource]
                self._daily_net_change[resource] = current - history[-1] if history else 0.0
                history.append(current)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def price_for(self, resource: ResourceType) -> float:
        """Current committed price (1.0 for unknown or unpriced resources)."""
        return self._prices.get(resource, 1.0)

    def base_price_for(self, resource: ResourceType) -> float:
        return self._base_prices.get(resource, 1.0)

    def amount_of(self, resource: ResourceType) -> float:
        return self._amounts.get(resource, 0.0)

    def value_of(self, resource: ResourceType, amount: float) -> float:
        """Market value of an amount at the current price."""
        return amount * self.price_for(resource)

    def daily_net_change(self, resource: ResourceType) -> float:
        return self._daily_net_change.get(resource, 0.0)

    def history_window(self, resource: ResourceType, count: int = 10) -> list[float]:
        """Most recent ``count`` daily samples, oldest first."""
        history = self._history.get(resource)
        if not history or count <= 0:
            return []
        return list(history)[-count:]

    def trend(self, resource: ResourceType, count: int = 7) -> float:
        """Mean day-over-day change across the recent history window."""
        window = self.history_window(resource, count)
        if len(window) < 2:
            return 0.0
        return float(np.mean(np.diff(window)))

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Current state of every resource for reports and logging."""
        return {
            resource.value: {
                "amount": round(self._amounts[resource], 2),
                "price": round(self._prices[resource], 3),
                "daily_change": round(self._daily_net_change[resource], 2),
                "trend": round(self.trend(resource), 3),
            }
            for resource in STOCKED_RESOURCES
        }

    def __str__(self) -> str:
        parts = [
            f"{r.value}={self._amounts[r]:.1f}@{self._prices[r]:.2f}" for r in STOCKED_RESOURCES
        ]
        return f"EconomyLedger({', '.join(parts)})"
