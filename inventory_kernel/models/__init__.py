"""ORM models for the inventory kernel."""

from inventory_kernel.models.directory import AuditLogModel, AuthorModel
from inventory_kernel.models.movement import MovementModel
from inventory_kernel.models.product import PriceHistoryModel, ProductModel

__all__ = [
    "AuditLogModel",
    "AuthorModel",
    "MovementModel",
    "PriceHistoryModel",
    "ProductModel",
]
