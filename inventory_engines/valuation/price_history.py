"""
inventory_engines.valuation.price_history -- Price history tracker.

Responsibility:
    Append ``(movement timestamp, unit_price)`` to a product's price history
    when an incoming movement with a positive price differs from the last
    recorded price (or nothing is recorded yet).

Architecture position:
    Engines -- pure calculation layer, zero I/O.  Runs interleaved with the
    accumulator during recompute.

Invariants enforced:
    - Append-only: existing entries are never changed or re-sorted.
    - Order is processing order, not calendar order.
    - Outgoing movements and zero prices never append.
"""

from __future__ import annotations

from inventory_kernel.domain.movement import Movement
from inventory_kernel.domain.product import PriceHistoryEntry


def track_price(
    history: tuple[PriceHistoryEntry, ...], movement: Movement
) -> tuple[PriceHistoryEntry, ...]:
    """Return ``history`` with ``movement``'s price appended if it changed."""
    if not movement.movement_type.is_incoming or movement.unit_price <= 0:
        return history
    if history and history[-1].price == movement.unit_price:
        return history
    return history + (
        PriceHistoryEntry(date=movement.timestamp, price=movement.unit_price),
    )
