"""
Product -- Static product definitions and engine-owned snapshots.

Responsibility:
    ``Product`` holds the static attributes a user maintains (description,
    unit, category fields, minimum stock).  ``ProductSnapshot`` pairs a
    Product with the dynamic fields that only the valuation engine writes:
    balance quantity, balance value, zero-crossing dates and price history.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - ``average_cost`` is derived, never stored:
      balance_value / balance_qty when balance_qty > 0, else 0.
    - Balances are signed; nothing here clamps them at zero.
    - ``price_history`` is an append-only tuple in processing order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from inventory_kernel.domain.values import ZERO, to_decimal


@dataclass(frozen=True, slots=True)
class Product:
    """Static product attributes."""

    product_id: int
    description: str
    unit: str
    brand: str = ""
    category: str = ""
    application: str = ""
    minimum_stock: Decimal = ZERO
    supplier: str = ""
    location: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "minimum_stock", to_decimal(self.minimum_stock, "minimum_stock")
        )


@dataclass(frozen=True, slots=True)
class PriceHistoryEntry:
    """One recorded purchase price."""

    date: datetime
    price: Decimal


@dataclass(frozen=True, slots=True)
class ProductSnapshot:
    """
    A product together with its replayed balance.

    Snapshots are replaced wholesale by every recompute; they are never
    patched field by field.
    """

    product: Product
    balance_qty: Decimal = ZERO
    balance_value: Decimal = ZERO
    current_zero_date: datetime | None = None
    prior_zero_date: datetime | None = None
    price_history: tuple[PriceHistoryEntry, ...] = field(default_factory=tuple)

    @property
    def product_id(self) -> int:
        return self.product.product_id

    @property
    def average_cost(self) -> Decimal:
        if self.balance_qty > 0:
            return self.balance_value / self.balance_qty
        return ZERO

    @property
    def stock_value(self) -> Decimal:
        """Value on hand: quantity x average cost (zero when not positive)."""
        if self.balance_qty > 0:
            return self.balance_value
        return ZERO

    @property
    def last_price(self) -> Decimal | None:
        if not self.price_history:
            return None
        return self.price_history[-1].price

    @classmethod
    def empty(cls, product: Product) -> ProductSnapshot:
        """Zero state: no balance, no zero dates, empty price history."""
        return cls(product=product)
