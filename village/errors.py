"""
Hamlet - Engine Errors
Local failure types. None of these are fatal: the engine catches them where
they occur and falls back to a safe default.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shared.events import NeedType, ResourceType, StateType


class SimulationError(Exception):
    """Base class for engine errors."""


class FulfillmentError(SimulationError):
    """A need could not be fulfilled."""

    def __init__(self, need_type: NeedType, message: str) -> None:
        super().__init__(message)
        self.need_type = need_type


class InsufficientWealth(FulfillmentError):
    """The villager cannot afford the resource the need requires."""

    def __init__(self, need_type: NeedType, cost: float, available: float) -> None:
        super().__init__(
            need_type,
            f"{need_type.value} needs {cost:.1f} wealth, has {available:.1f}",
        )
        self.cost = cost
        self.available = available


class InsufficientSupply(FulfillmentError):
    """The village ledger lacks stock of the required resource."""

    def __init__(self, need_type: NeedType, resource: ResourceType, amount: float) -> None:
        super().__init__(
            need_type,
            f"Village supply of {resource.value} cannot cover {amount:.1f}",
        )
        self.resource = resource
        self.amount = amount


class UnreachableDestination(SimulationError):
    """A state timed out before the villager arrived."""

    def __init__(self, state: StateType, waited_seconds: float) -> None:
        super().__init__(f"{state.value} destination not reached after {waited_seconds:.1f}s")
        self.state = state
        self.waited_seconds = waited_seconds


class NoViableGoalCandidate(SimulationError):
    """Every goal type is already active or recently completed."""


class InvalidTransition(SimulationError):
    """A transition into the state that is already active."""
