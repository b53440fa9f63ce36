"""
Hamlet - Needs System Module
Decaying physiological needs that drive autonomous behavior.
"""

from .need import Need, Wallet
from .personality import Personality, PRESETS, TRAIT_RANGES
from .needs_system import NeedsSystem, DEFAULT_NEEDS

__all__ = [
    "Need",
    "Wallet",
    "Personality",
    "NeedsSystem",
    "PRESETS",
    "TRAIT_RANGES",
    "DEFAULT_NEEDS",
]
