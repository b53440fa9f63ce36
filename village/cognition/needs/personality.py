"""
Hamlet - Personality Traits
Fixed trait vector that modifies need decay, goal choice and behavior selection.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, fields
from typing import Any

from shared.events import NeedType


# Spawn ranges per trait (min, max)
TRAIT_RANGES: dict[str, tuple[float, float]] = {
    "sociability": (0.3, 0.8),
    "work_ethic": (0.4, 0.9),
    "resilience": (0.3, 0.8),
    "impulsivity": (0.1, 0.7),
    "optimism": (0.3, 0.8),
    "ambition": (0.2, 0.9),
    "altruism": (0.2, 0.8),
}

# Personality presets
PRESETS: dict[str, dict[str, float]] = {
    "hardworking": {
        "sociability": 0.4,
        "work_ethic": 0.9,
        "resilience": 0.7,
        "impulsivity": 0.2,
        "optimism": 0.5,
        "ambition": 0.8,
        "altruism": 0.5,
    },
    "social": {
        "sociability": 0.9,
        "work_ethic": 0.5,
        "resilience": 0.5,
        "impulsivity": 0.5,
        "optimism": 0.7,
        "ambition": 0.4,
        "altruism": 0.6,
    },
    "loner": {
        "sociability": 0.1,
        "work_ethic": 0.6,
        "resilience": 0.6,
        "impulsivity": 0.2,
        "optimism": 0.4,
        "ambition": 0.5,
        "altruism": 0.3,
    },
    "lazy": {
        "sociability": 0.5,
        "work_ethic": 0.2,
        "resilience": 0.3,
        "impulsivity": 0.7,
        "optimism": 0.5,
        "ambition": 0.2,
        "altruism": 0.4,
    },
    "balanced": {
        "sociability": 0.5,
        "work_ethic": 0.5,
        "resilience": 0.5,
        "impulsivity": 0.5,
        "optimism": 0.5,
        "ambition": 0.5,
        "altruism": 0.5,
    },
}


@dataclass(frozen=True)
class Personality:
    """
    Immutable personality traits of a villager.

    Each trait ranges from 0.0 to 1.0:
    - sociability: Desire for company; low sociability makes loneliness set in faster
    - work_ethic: Drive to work; scores Working and shapes work satisfaction
    - resilience: Stamina; low resilience tires faster
    - impulsivity: Tendency to break routine; also speeds up hunger
    - optimism: Baseline happiness offset
    - ambition: Number and size of goals
    - altruism: Preference for contributing to the village
    """

    sociability: float = 0.5
    work_ethic: float = 0.5
    resilience: float = 0.5
    impulsivity: float = 0.5
    optimism: float = 0.5
    ambition: float = 0.5
    altruism: float = 0.5

    def __post_init__(self) -> None:
        """Clamp all traits to valid range."""
        for f in fields(self):
            object.__setattr__(self, f.name, self._clamp(getattr(self, f.name)))

    @staticmethod
    def _clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
        """Clamp value to range."""
        return max(min_val, min(max_val, value))

    def get_trait(self, name: str) -> float:
        """Get a trait value by name."""
        return getattr(self, name, 0.0)

    def get_need_decay_modifier(self, need_type: NeedType) -> float:
        """
        Calculate how personality affects need decay rate.

        Less sociable villagers get lonely faster, less resilient ones tire
        faster and impulsive ones get hungry faster.
        """
        if need_type == NeedType.SOCIAL:
            return 1.0 + (0.5 - self.sociability) * 0.5
        if need_type == NeedType.REST:
            return 1.0 + (0.5 - self.resilience) * 0.5
        if need_type == NeedType.HUNGER:
            return 1.0 + (self.impulsivity - 0.5) * 0.3
        return 1.0

    @classmethod
    def random(cls, rng: random.Random | None = None) -> "Personality":
        """Generate a random personality within the spawn ranges."""
        rng = rng or random.Random()
        return cls(**{name: rng.uniform(lo, hi) for name, (lo, hi) in TRAIT_RANGES.items()})

    @classmethod
    def from_preset(cls, preset_name: str) -> "Personality":
        """Create a personality from a preset name."""
        if preset_name not in PRESETS:
            raise ValueError(f"Unknown preset: {preset_name}. Available: {list(PRESETS.keys())}")
        return cls(**PRESETS[preset_name])

    def get_state(self) -> dict[str, Any]:
        """Trait values keyed by name."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @staticmethod
    def describe_level(value: float) -> str:
        if value < 0.3:
            return "Low"
        if value < 0.7:
            return "Medium"
        return "High"

    def describe(self) -> str:
        """Get a human-readable description of this personality."""
        descriptions = []

        if self.sociability > 0.7:
            descriptions.append("gregarious")
        elif self.sociability < 0.3:
            descriptions.append("solitary")

        if self.work_ethic > 0.7:
            descriptions.append("hardworking")
        elif self.work_ethic < 0.3:
            descriptions.append("work-shy")

        if self.impulsivity > 0.6:
            descriptions.append("impulsive")

        if self.optimism > 0.7:
            descriptions.append("cheerful")
        elif self.optimism < 0.3:
            descriptions.append("gloomy")

        if self.ambition > 0.7:
            descriptions.append("ambitious")

        if self.altruism > 0.7:
            descriptions.append("generous")

        if not descriptions:
            return "balanced personality"

        return ", ".join(descriptions)

    def profile(self) -> str:
        """Multi-line Low/Medium/High trait profile."""
        return "\n".join(
            f"{f.name.replace('_', ' ').title()}: {self.describe_level(getattr(self, f.name))}"
            for f in fields(self)
        )

    def __str__(self) -> str:
        return f"Personality({self.describe()})"
