"""
inventory_engines.valuation.recompute -- Full recompute of product balances.

Responsibility:
    Replay a product's whole movement history from the zero state through
    the accumulator and price history tracker, producing one fresh
    ProductSnapshot per product definition.  Used for initial load, after
    every movement mutation, and for the administrative "rebuild
    everything" action.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Composes chronology.normalize, accumulator.apply_movement and
    price_history.track_price.

Invariants enforced:
    - Replace, never merge: every input product starts from the zero state;
      dynamic fields on a snapshot passed in are discarded.
    - Order independence: movements are normalized first, so any
      permutation of the same movement set gives identical output.
    - Idempotence: recompute_all(recompute_all(P, M), M) == recompute_all(P, M).
    - Product independence: each product's replay only reads its own
      movements, so products may be recomputed separately
      (recompute_products) with the same result.

Failure modes:
    - None raised.  Movements whose product is not among the inputs are
      skipped; ``find_orphaned_movements`` lets the caller report them.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

from inventory_engines.tracer import traced_engine
from inventory_engines.valuation.accumulator import BalanceState, apply_movement
from inventory_engines.valuation.chronology import normalize
from inventory_engines.valuation.price_history import track_price
from inventory_kernel.domain.movement import Movement
from inventory_kernel.domain.product import PriceHistoryEntry, Product, ProductSnapshot

ProductLike = Product | ProductSnapshot


def _definition(item: ProductLike) -> Product:
    if isinstance(item, ProductSnapshot):
        return item.product
    return item


@traced_engine("recompute", "1.0", fingerprint_fields=("products", "movements"))
def recompute_all(
    products: Iterable[ProductLike],
    movements: Iterable[Movement],
) -> list[ProductSnapshot]:
    """
    Rebuild every product's snapshot from its complete movement history.

    Returns one snapshot per input product, in input order.
    """
    return _replay([_definition(p) for p in products], movements)


@traced_engine("recompute_products", "1.0", fingerprint_fields=("product_ids",))
def recompute_products(
    products: Iterable[ProductLike],
    movements: Iterable[Movement],
    product_ids: Collection[int],
) -> list[ProductSnapshot]:
    """Rebuild only the products whose id is in ``product_ids``."""
    wanted = set(product_ids)
    selected = [_definition(p) for p in products if _definition(p).product_id in wanted]
    return _replay(selected, movements)


def find_orphaned_movements(
    products: Iterable[ProductLike],
    movements: Iterable[Movement],
) -> list[int]:
    """Ids of movements whose product is not in ``products``, in replay order."""
    known = {_definition(p).product_id for p in products}
    return [m.movement_id for m in normalize(movements) if m.product_id not in known]


def _replay(
    products: list[Product],
    movements: Iterable[Movement],
) -> list[ProductSnapshot]:
    states: dict[int, BalanceState] = {p.product_id: BalanceState.zero() for p in products}
    histories: dict[int, tuple[PriceHistoryEntry, ...]] = {
        p.product_id: () for p in products
    }

    for movement in normalize(movements):
        state = states.get(movement.product_id)
        if state is None:
            continue
        states[movement.product_id] = apply_movement(state, movement).state
        histories[movement.product_id] = track_price(
            histories[movement.product_id], movement
        )

    return [
        ProductSnapshot(
            product=product,
            balance_qty=states[product.product_id].balance_qty,
            balance_value=states[product.product_id].balance_value,
            current_zero_date=states[product.product_id].current_zero_date,
            prior_zero_date=states[product.product_id].prior_zero_date,
            price_history=histories[product.product_id],
        )
        for product in products
    ]
