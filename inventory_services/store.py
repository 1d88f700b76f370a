"""
inventory_services.store -- Caller-owned inventory stores.

Responsibility:
    Define the storage interface the mutation handlers write through, and an
    explicit in-memory implementation.  The engine itself holds no state;
    whoever owns a store owns the data.

Architecture position:
    Services -- stateful collaborators around the pure engines.
    ``inventory_services.sql_store`` provides the SQLAlchemy-backed variant.

Invariants enforced:
    - Ids are assigned as max(existing) + 1, starting at 1, so movement ids
      follow insertion order (the replay tie-break relies on this).
    - The audit log is append-only; entries are never edited or removed.
    - Snapshots are replaced wholesale, never patched.

Non-goals:
    - No locking.  Callers serialize writes per product (single writer).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from inventory_kernel.domain.directory import AuditAction, AuditLogEntry, Author
from inventory_kernel.domain.movement import Movement
from inventory_kernel.domain.product import ProductSnapshot


class InventoryStore(ABC):
    """
    Storage interface used by the inventory services.

    Contract:
        Products are stored as ProductSnapshots (static attributes plus the
        last recompute result).  Movements, authors and audit entries are
        stored as kernel domain objects.
    """

    # Products

    @abstractmethod
    def list_products(self) -> list[ProductSnapshot]:
        """All products ordered by id."""

    @abstractmethod
    def get_product(self, product_id: int) -> ProductSnapshot | None: ...

    @abstractmethod
    def next_product_id(self) -> int: ...

    @abstractmethod
    def save_snapshots(self, snapshots: Iterable[ProductSnapshot]) -> None:
        """Insert or replace each snapshot."""

    # Movements

    @abstractmethod
    def list_movements(self) -> list[Movement]:
        """All movements ordered by id."""

    @abstractmethod
    def get_movement(self, movement_id: int) -> Movement | None: ...

    @abstractmethod
    def next_movement_id(self) -> int: ...

    @abstractmethod
    def insert_movement(self, movement: Movement) -> None: ...

    @abstractmethod
    def replace_movement(self, movement: Movement) -> None: ...

    @abstractmethod
    def remove_movement(self, movement_id: int) -> None: ...

    # Authors

    @abstractmethod
    def list_authors(self) -> list[Author]: ...

    @abstractmethod
    def next_author_id(self) -> int: ...

    @abstractmethod
    def save_author(self, author: Author) -> None: ...

    # Audit

    @abstractmethod
    def append_audit(
        self,
        action: AuditAction,
        actor_id: int | None,
        details: str,
        timestamp: datetime,
    ) -> AuditLogEntry: ...

    @abstractmethod
    def list_audit(self) -> list[AuditLogEntry]:
        """Audit entries, oldest first."""


def _next_id(ids: Iterable[int]) -> int:
    return max(ids, default=0) + 1


class InMemoryInventoryStore(InventoryStore):
    """
    Explicit in-memory store.

    Pass one instance around by reference; every service built on it sees
    the same collections.
    """

    def __init__(
        self,
        products: Iterable[ProductSnapshot] = (),
        movements: Iterable[Movement] = (),
        authors: Iterable[Author] = (),
    ):
        self._products: dict[int, ProductSnapshot] = {
            p.product_id: p for p in products
        }
        self._movements: dict[int, Movement] = {m.movement_id: m for m in movements}
        self._authors: dict[int, Author] = {a.author_id: a for a in authors}
        self._audit: list[AuditLogEntry] = []

    def list_products(self) -> list[ProductSnapshot]:
        return [self._products[k] for k in sorted(self._products)]

    def get_product(self, product_id: int) -> ProductSnapshot | None:
        return self._products.get(product_id)

    def next_product_id(self) -> int:
        return _next_id(self._products)

    def save_snapshots(self, snapshots: Iterable[ProductSnapshot]) -> None:
        for snap in snapshots:
            self._products[snap.product_id] = snap

    def list_movements(self) -> list[Movement]:
        return [self._movements[k] for k in sorted(self._movements)]

    def get_movement(self, movement_id: int) -> Movement | None:
        return self._movements.get(movement_id)

    def next_movement_id(self) -> int:
        return _next_id(self._movements)

    def insert_movement(self, movement: Movement) -> None:
        if movement.movement_id in self._movements:
            raise KeyError(f"Movement {movement.movement_id} already stored")
        self._movements[movement.movement_id] = movement

    def replace_movement(self, movement: Movement) -> None:
        if movement.movement_id not in self._movements:
            raise KeyError(f"Movement {movement.movement_id} not stored")
        self._movements[movement.movement_id] = movement

    def remove_movement(self, movement_id: int) -> None:
        del self._movements[movement_id]

    def list_authors(self) -> list[Author]:
        return [self._authors[k] for k in sorted(self._authors)]

    def next_author_id(self) -> int:
        return _next_id(self._authors)

    def save_author(self, author: Author) -> None:
        self._authors[author.author_id] = author

    def append_audit(
        self,
        action: AuditAction,
        actor_id: int | None,
        details: str,
        timestamp: datetime,
    ) -> AuditLogEntry:
        entry = AuditLogEntry(
            entry_id=len(self._audit) + 1,
            actor_id=actor_id,
            action=action,
            details=details,
            timestamp=timestamp,
        )
        self._audit.append(entry)
        return entry

    def list_audit(self) -> list[AuditLogEntry]:
        return list(self._audit)
