"""
Hamlet - Goals Module
Long-term personal objectives that bias behavior and reward completion.
"""

from .goal import Goal
from .goal_set import ALL_GOAL_TYPES, GOAL_STATE_PREFERENCES, GoalSet

__all__ = [
    "Goal",
    "GoalSet",
    "ALL_GOAL_TYPES",
    "GOAL_STATE_PREFERENCES",
]
