"""
Module: inventory_kernel.models.movement
Responsibility: ORM persistence for stock movements.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - total_value is fixed at creation (quantity * unit_price for incoming
      types, 0 for outgoing types) by the domain factory; the column just
      stores it.
    - product_id is deliberately NOT a foreign key: historical movements may
      outlive the product they reference and are skipped during replay.
    - (product_id, occurred_at, id) index matches the replay order.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base


class MovementModel(Base):
    """Persistent stock movement."""

    __tablename__ = "movements"

    __table_args__ = (
        Index("idx_movement_product_replay", "product_id", "occurred_at", "id"),
        Index("idx_movement_occurred_at", "occurred_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    product_id: Mapped[int] = mapped_column(Integer, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(nullable=False)
    movement_type: Mapped[str] = mapped_column(String(30), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(nullable=False)
    total_value: Mapped[Decimal] = mapped_column(nullable=False)
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    document_ref: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<MovementModel {self.id}: {self.movement_type} "
            f"product={self.product_id} qty={self.quantity}>"
        )
