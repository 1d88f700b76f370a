"""
Ledger -- Read-only kardex rows.

A LedgerEntry is a projection of one Movement plus the running balance of
its product *after* that movement was applied.  Rows are produced only by
``inventory_engines.ledger.generate_ledger``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from inventory_kernel.domain.movement import Movement, MovementType


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """
    One kardex row.

    ``total_value`` is authoritative: for incoming movements it equals the
    stored ``quantity * unit_price``; for outgoing movements it is the
    realized cost (quantity x average cost before the movement), which the
    stored movement record does not carry.
    """

    movement: Movement
    total_value: Decimal
    balance_qty: Decimal
    balance_value: Decimal
    average_cost: Decimal
    product_description: str
    author_name: str
    crossed_zero: bool

    @property
    def movement_id(self) -> int:
        return self.movement.movement_id

    @property
    def product_id(self) -> int:
        return self.movement.product_id

    @property
    def timestamp(self) -> datetime:
        return self.movement.timestamp

    @property
    def movement_type(self) -> MovementType:
        return self.movement.movement_type

    @property
    def quantity(self) -> Decimal:
        return self.movement.quantity
