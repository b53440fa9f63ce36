"""
Hamlet - Mood Module
Happiness model and discrete mood categories.
"""

from .mood import MoodModel, category_for

__all__ = [
    "MoodModel",
    "category_for",
]
