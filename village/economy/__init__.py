"""
Hamlet - Economy
Shared village resource ledger with supply/demand pricing.
"""

from .ledger import DEFAULT_BASE_PRICES, STOCKED_RESOURCES, EconomyLedger

__all__ = [
    "EconomyLedger",
    "DEFAULT_BASE_PRICES",
    "STOCKED_RESOURCES",
]
