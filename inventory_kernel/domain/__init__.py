"""Pure domain types for the inventory kernel."""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.directory import (
    AuditAction,
    AuditLogEntry,
    Author,
    AuthorRole,
)
from inventory_kernel.domain.ledger import LedgerEntry
from inventory_kernel.domain.movement import (
    Movement,
    MovementDirection,
    MovementDraft,
    MovementType,
)
from inventory_kernel.domain.product import PriceHistoryEntry, Product, ProductSnapshot
from inventory_kernel.domain.values import ZERO, round_money, to_decimal

__all__ = [
    "AuditAction",
    "AuditLogEntry",
    "Author",
    "AuthorRole",
    "Clock",
    "DeterministicClock",
    "LedgerEntry",
    "Movement",
    "MovementDirection",
    "MovementDraft",
    "MovementType",
    "PriceHistoryEntry",
    "Product",
    "ProductSnapshot",
    "SystemClock",
    "ZERO",
    "round_money",
    "to_decimal",
]
