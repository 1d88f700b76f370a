"""
inventory_services.sql_store -- SQLAlchemy-backed inventory store.

Responsibility:
    Implement ``InventoryStore`` over the kernel ORM models, converting
    between ORM rows and frozen domain objects at the boundary.

Architecture position:
    Services -- the only module that touches both ``inventory_kernel.models``
    and the services layer.  The session is injected; the caller owns the
    transaction (see ``inventory_kernel.db.session_scope``).

Invariants enforced:
    - Snapshot writes replace the product's price_history rows wholesale.
    - Writes are flushed, never committed, so a failed mutation rolls back
      together with the caller's transaction.
    - audit_log rows are only ever inserted.

Usage:
    from inventory_kernel.db import session_scope
    from inventory_services.sql_store import SqlInventoryStore

    with session_scope() as session:
        store = SqlInventoryStore(session)
        snapshots = store.list_products()
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from inventory_kernel.domain.directory import (
    AuditAction,
    AuditLogEntry,
    Author,
    AuthorRole,
)
from inventory_kernel.domain.movement import Movement, MovementType
from inventory_kernel.domain.product import PriceHistoryEntry, Product, ProductSnapshot
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models import (
    AuditLogModel,
    AuthorModel,
    MovementModel,
    PriceHistoryModel,
    ProductModel,
)
from inventory_services.store import InventoryStore

logger = get_logger("services.sql_store")


class SqlInventoryStore(InventoryStore):
    """
    Inventory store over an open SQLAlchemy session.

    Contract:
        Receives a Session via constructor injection; never commits it.
    """

    def __init__(self, session: Session):
        self.session = session

    # =========================================================================
    # Products
    # =========================================================================

    def list_products(self) -> list[ProductSnapshot]:
        models = self.session.execute(
            select(ProductModel).order_by(ProductModel.id)
        ).scalars().all()
        history = self._load_price_history()
        return [self._product_to_domain(m, history.get(m.id, ())) for m in models]

    def get_product(self, product_id: int) -> ProductSnapshot | None:
        model = self.session.get(ProductModel, product_id)
        if model is None:
            return None
        history = self._load_price_history(product_id)
        return self._product_to_domain(model, history.get(product_id, ()))

    def next_product_id(self) -> int:
        return self._next_id(ProductModel.id)

    def save_snapshots(self, snapshots: Iterable[ProductSnapshot]) -> None:
        count = 0
        for snap in snapshots:
            self._store_snapshot(snap)
            count += 1
        self.session.flush()
        logger.debug("snapshots_saved", extra={"count": count})

    def _store_snapshot(self, snap: ProductSnapshot) -> None:
        product = snap.product
        model = self.session.get(ProductModel, product.product_id)
        if model is None:
            model = ProductModel(id=product.product_id)
            self.session.add(model)

        model.description = product.description
        model.unit = product.unit
        model.brand = product.brand
        model.category = product.category
        model.application = product.application
        model.minimum_stock = product.minimum_stock
        model.supplier = product.supplier
        model.location = product.location
        model.balance_qty = snap.balance_qty
        model.balance_value = snap.balance_value
        model.current_zero_date = snap.current_zero_date
        model.prior_zero_date = snap.prior_zero_date
        self.session.flush()

        self.session.execute(
            delete(PriceHistoryModel).where(
                PriceHistoryModel.product_id == product.product_id
            )
        )
        for position, entry in enumerate(snap.price_history):
            self.session.add(
                PriceHistoryModel(
                    product_id=product.product_id,
                    position=position,
                    recorded_at=entry.date,
                    price=entry.price,
                )
            )

    def _load_price_history(
        self, product_id: int | None = None
    ) -> dict[int, tuple[PriceHistoryEntry, ...]]:
        stmt = select(PriceHistoryModel).order_by(
            PriceHistoryModel.product_id, PriceHistoryModel.position
        )
        if product_id is not None:
            stmt = stmt.where(PriceHistoryModel.product_id == product_id)

        grouped: dict[int, list[PriceHistoryEntry]] = {}
        for row in self.session.execute(stmt).scalars():
            grouped.setdefault(row.product_id, []).append(
                PriceHistoryEntry(date=row.recorded_at, price=row.price)
            )
        return {k: tuple(v) for k, v in grouped.items()}

    @staticmethod
    def _product_to_domain(
        model: ProductModel, history: tuple[PriceHistoryEntry, ...]
    ) -> ProductSnapshot:
        return ProductSnapshot(
            product=Product(
                product_id=model.id,
                description=model.description,
                unit=model.unit,
                brand=model.brand,
                category=model.category,
                application=model.application,
                minimum_stock=model.minimum_stock,
                supplier=model.supplier,
                location=model.location,
            ),
            balance_qty=model.balance_qty,
            balance_value=model.balance_value,
            current_zero_date=model.current_zero_date,
            prior_zero_date=model.prior_zero_date,
            price_history=history,
        )

    # =========================================================================
    # Movements
    # =========================================================================

    def list_movements(self) -> list[Movement]:
        models = self.session.execute(
            select(MovementModel).order_by(MovementModel.id)
        ).scalars().all()
        return [self._movement_to_domain(m) for m in models]

    def get_movement(self, movement_id: int) -> Movement | None:
        model = self.session.get(MovementModel, movement_id)
        if model is None:
            return None
        return self._movement_to_domain(model)

    def next_movement_id(self) -> int:
        return self._next_id(MovementModel.id)

    def insert_movement(self, movement: Movement) -> None:
        model = MovementModel(id=movement.movement_id)
        self._copy_movement(movement, model)
        self.session.add(model)
        self.session.flush()

    def replace_movement(self, movement: Movement) -> None:
        model = self.session.get(MovementModel, movement.movement_id)
        if model is None:
            raise KeyError(f"Movement {movement.movement_id} not stored")
        self._copy_movement(movement, model)
        self.session.flush()

    def remove_movement(self, movement_id: int) -> None:
        model = self.session.get(MovementModel, movement_id)
        if model is None:
            raise KeyError(f"Movement {movement_id} not stored")
        self.session.delete(model)
        self.session.flush()

    @staticmethod
    def _copy_movement(movement: Movement, model: MovementModel) -> None:
        model.product_id = movement.product_id
        model.occurred_at = movement.timestamp
        model.movement_type = movement.movement_type.value
        model.quantity = movement.quantity
        model.unit_price = movement.unit_price
        model.total_value = movement.total_value
        model.author_id = movement.author_id
        model.note = movement.note
        model.document_ref = movement.document_ref

    @staticmethod
    def _movement_to_domain(model: MovementModel) -> Movement:
        """Convert a MovementModel ORM row to a Movement domain object."""
        return Movement(
            movement_id=model.id,
            product_id=model.product_id,
            timestamp=model.occurred_at,
            movement_type=MovementType(model.movement_type),
            quantity=model.quantity,
            unit_price=model.unit_price,
            total_value=model.total_value,
            author_id=model.author_id,
            note=model.note,
            document_ref=model.document_ref,
        )

    # =========================================================================
    # Authors and audit
    # =========================================================================

    def list_authors(self) -> list[Author]:
        models = self.session.execute(
            select(AuthorModel).order_by(AuthorModel.id)
        ).scalars().all()
        return [
            Author(
                author_id=m.id,
                name=m.name,
                role=AuthorRole(m.role),
                location=m.location,
            )
            for m in models
        ]

    def next_author_id(self) -> int:
        return self._next_id(AuthorModel.id)

    def save_author(self, author: Author) -> None:
        model = self.session.get(AuthorModel, author.author_id)
        if model is None:
            model = AuthorModel(id=author.author_id)
            self.session.add(model)
        model.name = author.name
        model.role = author.role.value
        model.location = author.location
        self.session.flush()

    def append_audit(
        self,
        action: AuditAction,
        actor_id: int | None,
        details: str,
        timestamp: datetime,
    ) -> AuditLogEntry:
        entry_id = self._next_id(AuditLogModel.id)
        self.session.add(
            AuditLogModel(
                id=entry_id,
                actor_id=actor_id,
                action=action.value,
                details=details,
                recorded_at=timestamp,
            )
        )
        self.session.flush()
        return AuditLogEntry(
            entry_id=entry_id,
            actor_id=actor_id,
            action=action,
            details=details,
            timestamp=timestamp,
        )

    def list_audit(self) -> list[AuditLogEntry]:
        models = self.session.execute(
            select(AuditLogModel).order_by(AuditLogModel.id)
        ).scalars().all()
        return [
            AuditLogEntry(
                entry_id=m.id,
                actor_id=m.actor_id,
                action=AuditAction(m.action),
                details=m.details,
                timestamp=m.recorded_at,
            )
            for m in models
        ]

    def _next_id(self, column) -> int:
        current = self.session.execute(select(func.max(column))).scalar()
        return (current or 0) + 1
