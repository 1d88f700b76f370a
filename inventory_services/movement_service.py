"""
inventory_services.movement_service -- Movement mutation handlers.

Responsibility:
    Validate and apply add / update / delete of stock movements, then run a
    full recompute of every affected product and store the new snapshots.
    Also records physical counts as adjustment movements and exposes the
    forced global rebuild.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Composes ``recompute_products`` / ``recompute_all`` (pure engine) with an
    injected ``InventoryStore`` and ``Clock``.

Invariants enforced:
    - Every insert, edit or delete triggers a FULL recompute of the affected
      product (both products when an edit moves a movement between them).
      There is no incremental shortcut.
    - quantity > 0 on every movement.
    - Entry and Return carry unit_price > 0; no movement carries a negative
      unit_price.
    - The stored total_value is always re-derived through ``Movement.create``.

Failure modes:
    - InvalidQuantityError, MissingUnitPriceError, InvalidUnitPriceError,
      InvalidTimestampError on bad input; nothing is written.
    - Errors raised while replaying (for example decimal.Overflow) surface
      before the store is touched: snapshots are computed from the projected
      movement set first and written only when the replay succeeds.
    - ProductNotFoundError when the target product does not exist.
    - MovementNotFoundError on update/delete of an unknown id.

Audit relevance:
    Each successful mutation appends one AuditLogEntry and logs a structured
    record bound to actor_id / product_id / movement_id.  Movements whose
    product no longer exists are reported as a ``recompute_orphaned_movements``
    warning on every recompute.

Usage:
    store = InMemoryInventoryStore()
    service = MovementService(store, clock)
    movement = service.add_movement(
        MovementDraft(product_id=1, timestamp=ts, movement_type=MovementType.ENTRY,
                      quantity=Decimal("10"), unit_price=Decimal("5.00")),
        actor_id=1,
    )
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from inventory_engines.counting import plan_count_adjustment
from inventory_engines.valuation import (
    find_orphaned_movements,
    recompute_all,
    recompute_products,
)
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.directory import AuditAction
from inventory_kernel.domain.movement import Movement, MovementDraft, MovementType
from inventory_kernel.domain.product import ProductSnapshot
from inventory_kernel.domain.values import ZERO
from inventory_kernel.exceptions import (
    InvalidQuantityError,
    InvalidTimestampError,
    InvalidUnitPriceError,
    InventoryKernelError,
    MissingUnitPriceError,
    MovementNotFoundError,
    ProductNotFoundError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_services.store import InventoryStore

logger = get_logger("services.movement")


class MovementService:
    """
    Applies movement mutations and keeps product snapshots in sync.

    Contract:
        Receives an InventoryStore and a Clock via constructor injection.
    Guarantees:
        - After any successful call, every affected product's stored
          snapshot equals a full replay of its movement history.
        - Rejected input leaves the store untouched.
    Non-goals:
        - Does not serialize concurrent writers; callers run one writer per
          product.
    """

    def __init__(self, store: InventoryStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_movement(self, draft: MovementDraft, actor_id: int) -> Movement:
        """Validate, store and replay a new movement."""
        with LogContext.bind(actor_id=actor_id, product_id=draft.product_id):
            snapshot = self._validate(
                draft.product_id,
                draft.movement_type,
                draft.quantity,
                draft.unit_price,
                draft.timestamp,
            )

            movement = Movement.from_draft(
                draft, movement_id=self.store.next_movement_id(), author_id=actor_id
            )
            snapshots = self._replay(
                {movement.product_id}, [*self.store.list_movements(), movement]
            )
            self.store.insert_movement(movement)
            self.store.save_snapshots(snapshots)

            self._audit(
                AuditAction.MOVEMENT_RECORDED,
                actor_id,
                f"{movement.movement_type.value} of {movement.quantity} "
                f"{snapshot.product.unit} for product {snapshot.product.description}",
            )
            logger.info(
                "movement_recorded",
                extra={
                    "movement_id": movement.movement_id,
                    "movement_type": movement.movement_type.value,
                    "quantity": movement.quantity,
                    "unit_price": movement.unit_price,
                },
            )
            return movement

    def update_movement(self, movement: Movement, actor_id: int) -> Movement:
        """
        Replace a stored movement and replay the affected product(s).

        ``total_value`` is re-derived from the new quantity and price; the
        value on the passed object is ignored.  ``actor_id`` is the editor;
        ``movement.author_id`` stays the movement's author.
        """
        with LogContext.bind(
            actor_id=actor_id,
            product_id=movement.product_id,
            movement_id=movement.movement_id,
        ):
            existing = self.store.get_movement(movement.movement_id)
            if existing is None:
                raise self._reject(MovementNotFoundError(movement.movement_id))

            self._validate(
                movement.product_id,
                movement.movement_type,
                movement.quantity,
                movement.unit_price,
                movement.timestamp,
            )

            updated = Movement.create(
                movement_id=movement.movement_id,
                product_id=movement.product_id,
                timestamp=movement.timestamp,
                movement_type=movement.movement_type,
                quantity=movement.quantity,
                unit_price=movement.unit_price,
                author_id=movement.author_id,
                note=movement.note,
                document_ref=movement.document_ref,
            )
            snapshots = self._replay(
                {existing.product_id, updated.product_id},
                [
                    updated if m.movement_id == updated.movement_id else m
                    for m in self.store.list_movements()
                ],
            )
            self.store.replace_movement(updated)
            self.store.save_snapshots(snapshots)

            self._audit(
                AuditAction.MOVEMENT_UPDATED,
                actor_id,
                f"Movement {updated.movement_id} updated",
            )
            logger.info(
                "movement_updated",
                extra={
                    "previous_product_id": existing.product_id,
                    "movement_type": updated.movement_type.value,
                    "quantity": updated.quantity,
                    "unit_price": updated.unit_price,
                },
            )
            return updated

    def delete_movement(self, movement_id: int, actor_id: int | None = None) -> None:
        """Remove a movement and replay its product."""
        with LogContext.bind(actor_id=actor_id, movement_id=movement_id):
            existing = self.store.get_movement(movement_id)
            if existing is None:
                raise self._reject(MovementNotFoundError(movement_id))

            snapshots = self._replay(
                {existing.product_id},
                [m for m in self.store.list_movements() if m.movement_id != movement_id],
            )
            self.store.remove_movement(movement_id)
            self.store.save_snapshots(snapshots)

            self._audit(
                AuditAction.MOVEMENT_DELETED,
                actor_id,
                f"Movement {movement_id} deleted from product {existing.product_id}",
            )
            logger.info(
                "movement_deleted",
                extra={"product_id": existing.product_id},
            )

    def recompute_all(self, actor_id: int | None = None) -> list[ProductSnapshot]:
        """Forced rebuild of every product from the full movement history."""
        with LogContext.bind(actor_id=actor_id):
            products = self.store.list_products()
            movements = self.store.list_movements()
            self._warn_orphans(products, movements)

            snapshots = recompute_all(products=products, movements=movements)
            self.store.save_snapshots(snapshots)

            if actor_id is not None:
                self._audit(
                    AuditAction.GLOBAL_RECOMPUTE,
                    actor_id,
                    f"Recomputed {len(snapshots)} products from {len(movements)} movements",
                )
            logger.info(
                "recompute_completed",
                extra={"product_count": len(snapshots), "movement_count": len(movements)},
            )
            return snapshots

    def record_physical_count(
        self,
        product_id: int,
        physical_count: Decimal | int | str,
        actor_id: int,
        timestamp: datetime | None = None,
    ) -> Movement | None:
        """
        Reconcile a product with a physical count.

        Records a positive or negative adjustment at the current average
        cost for the difference.  Returns None when the count matches.
        """
        with LogContext.bind(actor_id=actor_id, product_id=product_id):
            snapshot = self.store.get_product(product_id)
            if snapshot is None:
                raise self._reject(ProductNotFoundError(product_id))

            draft = plan_count_adjustment(
                snapshot, physical_count, timestamp or self.clock.now()
            )
            if draft is None:
                logger.info(
                    "physical_count_matched",
                    extra={"balance_qty": snapshot.balance_qty},
                )
                return None
            return self.add_movement(draft, actor_id)

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _validate(
        self,
        product_id: int,
        movement_type: MovementType,
        quantity: Decimal,
        unit_price: Decimal,
        timestamp: datetime,
    ) -> ProductSnapshot:
        if timestamp.tzinfo is None or timestamp.utcoffset() is None:
            raise self._reject(InvalidTimestampError(timestamp))
        if quantity <= 0:
            raise self._reject(InvalidQuantityError(quantity))
        if unit_price < 0:
            raise self._reject(InvalidUnitPriceError(unit_price))
        if movement_type.requires_unit_price and unit_price <= ZERO:
            raise self._reject(MissingUnitPriceError(movement_type.value, unit_price))

        snapshot = self.store.get_product(product_id)
        if snapshot is None:
            raise self._reject(ProductNotFoundError(product_id))
        return snapshot

    def _replay(
        self, product_ids: set[int], movements: list[Movement]
    ) -> list[ProductSnapshot]:
        """Snapshots for ``product_ids`` over a projected movement set; writes nothing."""
        products = self.store.list_products()
        self._warn_orphans(products, movements)
        return recompute_products(
            products=products, movements=movements, product_ids=product_ids
        )

    @staticmethod
    def _warn_orphans(
        products: list[ProductSnapshot], movements: list[Movement]
    ) -> None:
        orphans = find_orphaned_movements(products, movements)
        if orphans:
            logger.warning(
                "recompute_orphaned_movements",
                extra={"movement_ids": orphans, "count": len(orphans)},
            )

    def _audit(self, action: AuditAction, actor_id: int | None, details: str) -> None:
        self.store.append_audit(action, actor_id, details, self.clock.now())

    @staticmethod
    def _reject(exc: InventoryKernelError) -> InventoryKernelError:
        fields = {
            k: v for k, v in vars(exc).items() if not k.startswith("_")
        }
        logger.warning("movement_rejected", extra={"error_code": exc.code, **fields})
        return exc
