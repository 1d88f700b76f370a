"""
inventory_engines.ledger -- Ledger (kardex) view generator.

Responsibility:
    Replay movements across ALL products once, in normalized order, and
    emit one immutable LedgerEntry per movement carrying the running
    balance of its product *after* that movement.  Resolves the product
    description and author name for display.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Uses the same accumulator as recompute, so the two cannot drift.

Invariants enforced:
    - Cross-consistency: for every product, the last ledger row carries
      the balance that recompute_all produces from the same movements.
    - Realized values: outgoing rows carry quantity x average cost before
      the movement as ``total_value``, not the stored placeholder.
    - Orphaned movements (unknown product) produce no row and no error.

Usage:
    from inventory_engines.ledger import generate_ledger

    rows = generate_ledger(movements=movements, products=products, authors=authors)
    for row in rows:
        print(row.timestamp, row.product_description, row.balance_qty)
"""

from __future__ import annotations

from collections.abc import Iterable

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.accumulator import BalanceState, apply_movement
from inventory_engines.valuation.chronology import normalize
from inventory_kernel.domain.directory import Author
from inventory_kernel.domain.ledger import LedgerEntry
from inventory_kernel.domain.movement import Movement
from inventory_kernel.domain.product import Product, ProductSnapshot

UNKNOWN_AUTHOR = "Unknown"


@traced_engine("ledger", "1.0", fingerprint_fields=("movements", "products"))
def generate_ledger(
    movements: Iterable[Movement],
    products: Iterable[Product | ProductSnapshot],
    authors: Iterable[Author] = (),
) -> list[LedgerEntry]:
    """Build the kardex for every product, in replay order."""
    definitions: dict[int, Product] = {}
    for item in products:
        product = item.product if isinstance(item, ProductSnapshot) else item
        definitions[product.product_id] = product
    author_names = {a.author_id: a.name for a in authors}

    states: dict[int, BalanceState] = {}
    rows: list[LedgerEntry] = []

    for movement in normalize(movements):
        product = definitions.get(movement.product_id)
        if product is None:
            continue

        state = states.get(movement.product_id, BalanceState.zero())
        step = apply_movement(state, movement)
        states[movement.product_id] = step.state

        rows.append(
            LedgerEntry(
                movement=movement,
                total_value=step.movement_value,
                balance_qty=step.state.balance_qty,
                balance_value=step.state.balance_value,
                average_cost=step.state.average_cost,
                product_description=product.description,
                author_name=author_names.get(movement.author_id, UNKNOWN_AUTHOR),
                crossed_zero=step.crossed_zero,
            )
        )

    return rows


def ledger_for_product(entries: Iterable[LedgerEntry], product_id: int) -> list[LedgerEntry]:
    """Rows of one product, keeping ledger order."""
    return [e for e in entries if e.product_id == product_id]
