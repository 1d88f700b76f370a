"""
inventory_engines.valuation.accumulator -- Weighted-average-cost state transition.

Responsibility:
    Given a product's current balance and one movement, produce the next
    balance plus zero-crossing metadata.  This is the only place where the
    WAC arithmetic lives; recompute and the ledger both call ``apply_movement``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Incoming movements add ``quantity`` and ``quantity * unit_price``.
      They are the only movements that can change the average cost.
    - Outgoing movements remove ``quantity`` and
      ``quantity * average_cost_before``; the average cost is unchanged.
      An exit that takes the quantity from > 0 to exactly 0 settles the
      value to 0, dropping the residue of the 28-digit average.
    - No clamping: quantity and value may go negative and stay negative.
    - Zero crossing: ``crossed_zero`` is True exactly when the quantity
      goes from > 0 to <= 0.  The previous current_zero_date shifts to
      prior_zero_date and the movement timestamp becomes current_zero_date.

Failure modes:
    - None for valid input.  Input validation (quantity > 0, prices,
      timezone) happens at the mutation boundary before movements are
      stored.  decimal.Overflow propagates for amounts beyond the decimal
      context.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from inventory_kernel.domain.movement import Movement, MovementDirection
from inventory_kernel.domain.values import ZERO


@dataclass(frozen=True, slots=True)
class BalanceState:
    """Running balance of one product."""

    balance_qty: Decimal = ZERO
    balance_value: Decimal = ZERO
    current_zero_date: datetime | None = None
    prior_zero_date: datetime | None = None

    @property
    def average_cost(self) -> Decimal:
        if self.balance_qty > 0:
            return self.balance_value / self.balance_qty
        return ZERO

    @classmethod
    def zero(cls) -> BalanceState:
        return cls()


@dataclass(frozen=True, slots=True)
class AccumulatorStep:
    """
    Result of applying one movement.

    ``movement_value`` is the value the movement moved: the stored
    ``quantity * unit_price`` for incoming movements, the realized exit cost
    for outgoing ones.
    """

    state: BalanceState
    crossed_zero: bool
    movement_value: Decimal


def apply_movement(state: BalanceState, movement: Movement) -> AccumulatorStep:
    """Apply ``movement`` to ``state`` and return the next state."""
    previous_qty = state.balance_qty
    direction = movement.direction

    if direction is MovementDirection.INCOMING:
        movement_value = movement.quantity * movement.unit_price
        new_qty = previous_qty + movement.quantity
        new_value = state.balance_value + movement_value
    elif direction is MovementDirection.OUTGOING:
        movement_value = movement.quantity * state.average_cost
        new_qty = previous_qty - movement.quantity
        new_value = state.balance_value - movement_value
        if new_qty == 0 and previous_qty > 0:
            # Exact exit of the whole stock leaves no value behind.
            new_value = ZERO
    else:  # pragma: no cover - MovementDirection is closed
        raise AssertionError(f"Unhandled movement direction: {direction!r}")

    crossed_zero = previous_qty > 0 and new_qty <= 0
    if crossed_zero:
        prior_zero_date = state.current_zero_date
        current_zero_date = movement.timestamp
    else:
        prior_zero_date = state.prior_zero_date
        current_zero_date = state.current_zero_date

    return AccumulatorStep(
        state=BalanceState(
            balance_qty=new_qty,
            balance_value=new_value,
            current_zero_date=current_zero_date,
            prior_zero_date=prior_zero_date,
        ),
        crossed_zero=crossed_zero,
        movement_value=movement_value,
    )
