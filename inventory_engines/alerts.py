"""
inventory_engines.alerts -- Low-stock and negative-balance signals.

Responsibility:
    Turn product snapshots into alerts.  A negative balance is not an
    error anywhere in the kernel; this is where it becomes visible.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - LOW_STOCK when minimum_stock > 0 and balance_qty <= minimum_stock.
    - NEGATIVE_BALANCE when balance_qty < 0.
    - A product may raise both; alerts are ordered by product id, then kind.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from inventory_engines.tracer import traced_engine
from inventory_kernel.domain.product import ProductSnapshot


class AlertKind(str, Enum):
    LOW_STOCK = "low_stock"
    NEGATIVE_BALANCE = "negative_balance"


@dataclass(frozen=True, slots=True)
class StockAlert:
    product_id: int
    description: str
    kind: AlertKind
    balance_qty: Decimal
    minimum_stock: Decimal


_KIND_ORDER = {AlertKind.LOW_STOCK: 0, AlertKind.NEGATIVE_BALANCE: 1}


@traced_engine("alerts", "1.0")
def detect_stock_alerts(snapshots: Iterable[ProductSnapshot]) -> list[StockAlert]:
    alerts: list[StockAlert] = []
    for snap in snapshots:
        minimum = snap.product.minimum_stock
        kinds: list[AlertKind] = []
        if minimum > 0 and snap.balance_qty <= minimum:
            kinds.append(AlertKind.LOW_STOCK)
        if snap.balance_qty < 0:
            kinds.append(AlertKind.NEGATIVE_BALANCE)
        for kind in kinds:
            alerts.append(
                StockAlert(
                    product_id=snap.product_id,
                    description=snap.product.description,
                    kind=kind,
                    balance_qty=snap.balance_qty,
                    minimum_stock=minimum,
                )
            )
    alerts.sort(key=lambda a: (a.product_id, _KIND_ORDER[a.kind]))
    return alerts
