"""
inventory_engines.counting -- Physical count reconciliation.

Responsibility:
    Compare a physical count with the system balance and propose the
    adjustment movement that makes them agree.  The adjustment is priced at
    the current average cost so that it does not move the average.

Architecture position:
    Engines -- pure calculation layer, zero I/O.  The proposal is a
    MovementDraft; recording it is the mutation handlers' job.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from inventory_kernel.domain.movement import MovementDraft, MovementType
from inventory_kernel.domain.product import ProductSnapshot
from inventory_kernel.domain.values import to_decimal


def plan_count_adjustment(
    snapshot: ProductSnapshot,
    physical_count: Decimal | int | str,
    timestamp: datetime,
    note: str | None = None,
) -> MovementDraft | None:
    """
    Draft the adjustment for a physical count, or None if nothing differs.

    Raises:
        ValueError: if ``physical_count`` is negative.
    """
    counted = to_decimal(physical_count, "physical_count")
    if counted < 0:
        raise ValueError(f"Physical count cannot be negative, got {counted}")

    difference = counted - snapshot.balance_qty
    if difference == 0:
        return None

    if difference > 0:
        movement_type = MovementType.POSITIVE_ADJUSTMENT
    else:
        movement_type = MovementType.NEGATIVE_ADJUSTMENT

    return MovementDraft(
        product_id=snapshot.product_id,
        timestamp=timestamp,
        movement_type=movement_type,
        quantity=abs(difference),
        unit_price=snapshot.average_cost,
        note=note if note is not None else f"Inventory adjustment. Physical count: {counted}.",
    )
