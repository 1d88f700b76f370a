"""
Module: inventory_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    inventory_services.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain (and sibling engine modules).
    MUST NOT import inventory_services or inventory_config.

Invariants enforced:
    - Purity: engines never call ``datetime.now()``; timestamps and cutoffs
      are explicit parameters.
    - Decimal-only arithmetic; floats are refused at the domain boundary.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from inventory_engines import recompute_all, generate_ledger

    snapshots = recompute_all(products=products, movements=movements)
    rows = generate_ledger(movements=movements, products=products, authors=authors)
"""

from inventory_kernel.logging_config import get_logger

logger = get_logger("engines")

from inventory_engines.alerts import AlertKind, StockAlert, detect_stock_alerts
from inventory_engines.counting import plan_count_adjustment
from inventory_engines.ledger import UNKNOWN_AUTHOR, generate_ledger, ledger_for_product
from inventory_engines.reports import (
    ActivityCounts,
    IdleStockItem,
    MovementSummary,
    ProductValue,
    ValuationSummary,
    find_idle_stock,
    recent_activity,
    summarize_movements,
    summarize_valuation,
)
from inventory_engines.valuation import (
    AccumulatorStep,
    BalanceState,
    apply_movement,
    chronological_key,
    find_orphaned_movements,
    normalize,
    recompute_all,
    recompute_products,
    track_price,
)

__all__ = [
    # Valuation
    "AccumulatorStep",
    "BalanceState",
    "apply_movement",
    "chronological_key",
    "normalize",
    "track_price",
    "recompute_all",
    "recompute_products",
    "find_orphaned_movements",
    # Ledger
    "UNKNOWN_AUTHOR",
    "generate_ledger",
    "ledger_for_product",
    # Alerts
    "AlertKind",
    "StockAlert",
    "detect_stock_alerts",
    # Reports
    "ActivityCounts",
    "IdleStockItem",
    "MovementSummary",
    "ProductValue",
    "ValuationSummary",
    "find_idle_stock",
    "recent_activity",
    "summarize_movements",
    "summarize_valuation",
    # Counting
    "plan_count_adjustment",
]
