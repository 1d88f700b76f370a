"""
Module: inventory_kernel.models.product
Responsibility: ORM persistence for product definitions, their cached
    balance snapshot, and their price history.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - The balance columns and price_history rows are a CACHE of the last
      recompute.  They are overwritten wholesale by the store after every
      recompute and never edited directly.
    - average cost is not a column; it is derived from balance_qty and
      balance_value on read.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base


class ProductModel(Base):
    """Product static attributes plus the cached replay result."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    description: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    brand: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    application: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    minimum_stock: Mapped[Decimal] = mapped_column(nullable=False)
    supplier: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    # Engine-owned snapshot
    balance_qty: Mapped[Decimal] = mapped_column(nullable=False)
    balance_value: Mapped[Decimal] = mapped_column(nullable=False)
    current_zero_date: Mapped[datetime | None] = mapped_column(nullable=True)
    prior_zero_date: Mapped[datetime | None] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"<ProductModel {self.id}: {self.description} qty={self.balance_qty}>"


class PriceHistoryModel(Base):
    """One price history entry; ``position`` preserves processing order."""

    __tablename__ = "price_history"

    __table_args__ = (
        Index("idx_price_history_product_position", "product_id", "position", unique=True),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(nullable=False)
    price: Mapped[Decimal] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<PriceHistoryModel product={self.product_id} #{self.position} {self.price}>"
