"""
inventory_engines.reports -- Valuation, activity and idle-stock summaries.

Responsibility:
    Aggregate snapshots and ledger rows into the figures the dashboard and
    reports screens show: total stock value and top products, incoming vs.
    outgoing value over a period, recent entry/exit counts, and products
    with stock but no recent movement.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  "Now" and cutoffs are
    always passed in.

Invariants enforced:
    - Stock value of a product is balance_value when balance_qty > 0,
      otherwise zero (quantity x average cost).
    - Movement summaries use the ledger's realized values, so outgoing
      movements are valued at their replayed exit cost.
    - Deterministic ordering: ties in top products break by product id.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from inventory_engines.tracer import traced_engine
from inventory_kernel.domain.ledger import LedgerEntry
from inventory_kernel.domain.movement import Movement, MovementType
from inventory_kernel.domain.product import ProductSnapshot
from inventory_kernel.domain.values import ZERO


@dataclass(frozen=True, slots=True)
class ProductValue:
    product_id: int
    description: str
    value: Decimal


@dataclass(frozen=True, slots=True)
class ValuationSummary:
    total_value: Decimal
    top_products: tuple[ProductValue, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class MovementSummary:
    """Totals over ledger rows within ``[start, end]``."""

    start: datetime
    end: datetime
    incoming_value: Decimal = ZERO
    outgoing_value: Decimal = ZERO
    incoming_count: int = 0
    outgoing_count: int = 0

    @property
    def net_value(self) -> Decimal:
        return self.incoming_value - self.outgoing_value


@dataclass(frozen=True, slots=True)
class ActivityCounts:
    since: datetime
    entries: int
    exits: int


@dataclass(frozen=True, slots=True)
class IdleStockItem:
    snapshot: ProductSnapshot
    last_movement_at: datetime | None


@traced_engine("valuation_summary", "1.0", fingerprint_fields=("top_n",))
def summarize_valuation(
    snapshots: Iterable[ProductSnapshot], top_n: int = 5
) -> ValuationSummary:
    values = [
        ProductValue(
            product_id=s.product_id,
            description=s.product.description,
            value=s.stock_value,
        )
        for s in snapshots
    ]
    total = sum((v.value for v in values), ZERO)
    ranked = sorted(
        (v for v in values if v.value > 0),
        key=lambda v: (-v.value, v.product_id),
    )
    return ValuationSummary(total_value=total, top_products=tuple(ranked[:top_n]))


def summarize_movements(
    entries: Iterable[LedgerEntry], start: datetime, end: datetime
) -> MovementSummary:
    """
    Sum realized values of ledger rows with ``start <= timestamp <= end``.

    Raises:
        ValueError: if ``start`` is after ``end``.
    """
    if start > end:
        raise ValueError(f"start {start.isoformat()} is after end {end.isoformat()}")

    incoming_value = outgoing_value = ZERO
    incoming_count = outgoing_count = 0
    for entry in entries:
        if not (start <= entry.timestamp <= end):
            continue
        if entry.movement_type.is_incoming:
            incoming_value += entry.total_value
            incoming_count += 1
        else:
            outgoing_value += entry.total_value
            outgoing_count += 1

    return MovementSummary(
        start=start,
        end=end,
        incoming_value=incoming_value,
        outgoing_value=outgoing_value,
        incoming_count=incoming_count,
        outgoing_count=outgoing_count,
    )


def recent_activity(movements: Iterable[Movement], since: datetime) -> ActivityCounts:
    """Count Entry and Exit movements strictly after ``since``."""
    entries = exits = 0
    for m in movements:
        if m.timestamp <= since:
            continue
        if m.movement_type is MovementType.ENTRY:
            entries += 1
        elif m.movement_type is MovementType.EXIT:
            exits += 1
    return ActivityCounts(since=since, entries=entries, exits=exits)


def find_idle_stock(
    snapshots: Iterable[ProductSnapshot],
    movements: Iterable[Movement],
    cutoff: datetime,
) -> list[IdleStockItem]:
    """
    Products holding stock whose latest movement is before ``cutoff``.

    Products with a positive balance and no movement at all are idle too.
    """
    last_seen: dict[int, datetime] = {}
    for m in movements:
        seen = last_seen.get(m.product_id)
        if seen is None or m.timestamp > seen:
            last_seen[m.product_id] = m.timestamp

    idle: list[IdleStockItem] = []
    for snap in snapshots:
        if snap.balance_qty <= 0:
            continue
        last = last_seen.get(snap.product_id)
        if last is None or last < cutoff:
            idle.append(IdleStockItem(snapshot=snap, last_movement_at=last))
    return idle
