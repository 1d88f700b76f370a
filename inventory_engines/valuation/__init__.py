"""
Valuation - Weighted-average-cost replay engine.

Pure functions only: the normalizer, the balance accumulator, the price
history tracker and full recompute.  State lives with the caller.
"""

from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation")

from inventory_engines.valuation.accumulator import (
    AccumulatorStep,
    BalanceState,
    apply_movement,
)
from inventory_engines.valuation.chronology import chronological_key, normalize
from inventory_engines.valuation.price_history import track_price
from inventory_engines.valuation.recompute import (
    find_orphaned_movements,
    recompute_all,
    recompute_products,
)

__all__ = [
    "AccumulatorStep",
    "BalanceState",
    "apply_movement",
    "chronological_key",
    "normalize",
    "track_price",
    "find_orphaned_movements",
    "recompute_all",
    "recompute_products",
]
