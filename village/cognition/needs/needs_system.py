"""
Hamlet - Needs System
Manages a villager's needs and picks the most pressing one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from shared.events import NeedType, ResourceType

from .need import Need
from .personality import Personality

if TYPE_CHECKING:
    from ...events import EventBus


# Default need configurations, in declaration order
DEFAULT_NEEDS: dict[NeedType, dict[str, Any]] = {
    NeedType.HUNGER: {
        "decay_rate": 5.0,  # Critical roughly once per day
        "importance_weight": 1.0,
        "required_resource": ResourceType.FOOD,
        "resource_amount_needed": 10.0,
        "fulfillment_amount": 60.0,
        "initial_value": 100.0,
    },
    NeedType.REST: {
        "decay_rate": 4.0,
        "importance_weight": 1.0,
        "required_resource": ResourceType.NONE,
        "resource_amount_needed": 0.0,
        "fulfillment_amount": 50.0,
        "initial_value": 100.0,
    },
    NeedType.SOCIAL: {
        "decay_rate": 3.0,
        "importance_weight": 0.8,
        "required_resource": ResourceType.NONE,
        "resource_amount_needed": 0.0,
        "fulfillment_amount": 40.0,
        "initial_value": 85.0,  # Villagers start a little lonely
    },
}


class NeedsSystem:
    """
    Owns one Need per NeedType for a single villager.

    Each need:
    - Ranges from 0 (desperate) to 100 (satisfied)
    - Decays over simulated time at a rate modified by personality
    - Publishes an event when it crosses its critical threshold
    """

    def __init__(
        self,
        personality: Personality | None = None,
        owner_name: str = "",
        events: EventBus | None = None,
        overrides: dict[NeedType, dict[str, Any]] | None = None,
    ) -> None:
        """
        Initialize the needs system.

        Args:
            personality: Traits that modify decay; balanced if None
            owner_name: Villager name used in events
            events: Event sink shared with the rest of the village
            overrides: Per-need config overrides merged over DEFAULT_NEEDS
        """
        self.personality = personality or Personality()
        self.needs: dict[NeedType, Need] = {}

        for need_type, defaults in DEFAULT_NEEDS.items():
            config = {**defaults, **(overrides or {}).get(need_type, {})}
            self.needs[need_type] = Need(
                need_type=need_type,
                current_value=config["initial_value"],
                decay_rate=config["decay_rate"],
                importance_weight=config["importance_weight"],
                required_resource=config["required_resource"],
                resource_amount_needed=config["resource_amount_needed"],
                fulfillment_amount=config["fulfillment_amount"],
                owner_name=owner_name,
                events=events,
            )

    def update(self, delta_hours: float) -> None:
        """Decay every need by the elapsed simulated hours."""
        for need in self.needs.values():
            need.decay(delta_hours, self.personality.get_need_decay_modifier(need.need_type))

    def get(self, need_type: NeedType) -> Need:
        return self.needs[need_type]

    def all(self) -> list[Need]:
        return list(self.needs.values())

    def get_critical_needs(self) -> list[Need]:
        """Needs at or below their critical threshold, in declaration order."""
        return [need for need in self.needs.values() if need.is_critical()]

    def most_urgent_critical(self) -> Need | None:
        """
        The critical need with the highest urgency.

        Ties keep the earlier need in declaration order.
        """
        best: Need | None = None
        for need in self.get_critical_needs():
            if best is None or need.urgency() > best.urgency():
                best = need
        return best

    def has_urgent_needs(self) -> bool:
        return any(need.is_critical() for need in self.needs.values())

    def average_value(self) -> float:
        """Mean of all need values (50 if there are none)."""
        if not self.needs:
            return 50.0
        return sum(need.current_value for need in self.needs.values()) / len(self.needs)

    def summary(self) -> dict[str, Any]:
        """Get a summary of current state for logging/debugging."""
        most_urgent = self.most_urgent_critical()
        return {
            "average": round(self.average_value(), 1),
            "critical_needs": [n.name for n in self.get_critical_needs()],
            "most_urgent": most_urgent.name if most_urgent else None,
            "needs": {need.name: round(need.current_value, 1) for need in self.needs.values()},
        }

    def __str__(self) -> str:
        lines = [f"NeedsSystem (Average: {self.average_value():.1f})"]
        for need in self.needs.values():
            lines.append(f"  {need}")
        return "\n".join(lines)
