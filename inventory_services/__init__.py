"""
Inventory services -- stores and orchestration around the pure engines.

    store              InventoryStore interface and InMemoryInventoryStore
    sql_store          SqlInventoryStore over the kernel ORM models
    movement_service   movement mutation handlers and physical counts
    catalog_service    product and author registration
    query_service      ledger, alerts and report queries
"""

from inventory_services.catalog_service import CatalogService, ProductDefinition
from inventory_services.movement_service import MovementService
from inventory_services.query_service import InventoryQueryService
from inventory_services.sql_store import SqlInventoryStore
from inventory_services.store import InMemoryInventoryStore, InventoryStore

__all__ = [
    "CatalogService",
    "InMemoryInventoryStore",
    "InventoryQueryService",
    "InventoryStore",
    "MovementService",
    "ProductDefinition",
    "SqlInventoryStore",
]
