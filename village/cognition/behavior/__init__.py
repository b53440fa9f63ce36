"""
Hamlet - Behavior Module
Activity states and the state machine that selects between them.
"""

from .state_machine import BehaviorStateMachine, ScoredState, CANDIDATE_ORDER, IMPULSIVE_CHOICES
from .states import (
    VillagerState,
    IdleState,
    WorkingState,
    SocializingState,
    SleepingState,
    RelaxAtHomeState,
    NeedFulfillmentState,
    STATE_CLASSES,
    create_state,
)

__all__ = [
    "BehaviorStateMachine",
    "ScoredState",
    "CANDIDATE_ORDER",
    "IMPULSIVE_CHOICES",
    "VillagerState",
    "IdleState",
    "WorkingState",
    "SocializingState",
    "SleepingState",
    "RelaxAtHomeState",
    "NeedFulfillmentState",
    "STATE_CLASSES",
    "create_state",
]
