"""
Hamlet - Goal Definition
A single long-term objective with tracked progress.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shared.events import GoalType


@dataclass
class Goal:
    """
    A long-term objective.

    Progress accrues toward ``target`` and is clamped there; ``completed``
    flips once and the owning GoalSet then moves the goal to its completed
    list.
    """

    goal_type: GoalType
    target: float
    description: str = ""
    progress: float = 0.0
    completed: bool = False

    def __post_init__(self) -> None:
        if self.target <= 0:
            raise ValueError(f"Goal target must be positive, got {self.target}")
        self.progress = max(0.0, min(self.target, self.progress))

    @property
    def progress_percentage(self) -> float:
        return max(0.0, min(1.0, self.progress / self.target)) * 100.0

    @property
    def is_reached(self) -> bool:
        return self.progress >= self.target

    def add_progress(self, delta: float) -> float:
        """Add progress (clamped to target) and return the applied change."""
        old = self.progress
        self.progress = max(0.0, min(self.target, self.progress + delta))
        return self.progress - old

    def set_progress(self, value: float) -> None:
        self.progress = max(0.0, min(self.target, value))

    def get_state(self) -> dict[str, Any]:
        return {
            "type": self.goal_type.value,
            "description": self.description,
            "progress": round(self.progress, 2),
            "target": round(self.target, 2),
            "percentage": round(self.progress_percentage, 1),
            "completed": self.completed,
        }

    def __str__(self) -> str:
        return f"{self.description} ({self.progress_percentage:.0f}%)"
