"""
inventory_services.catalog_service -- Product and author registration.

Responsibility:
    Validate new product definitions, assign ids and store their zero-state
    snapshot; register the authors that movements are attributed to.

Architecture position:
    Services -- stateful orchestration over kernel + store.

Invariants enforced:
    - description and unit are non-blank; minimum_stock >= 0.
    - A newly registered product's snapshot is produced by replay, so any
      movements already stored under the new id are picked up at once.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from inventory_engines.valuation import recompute_products
from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.directory import AuditAction, Author, AuthorRole
from inventory_kernel.domain.product import Product, ProductSnapshot
from inventory_kernel.domain.values import ZERO, to_decimal
from inventory_kernel.exceptions import InvalidProductDefinitionError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_services.store import InventoryStore

logger = get_logger("services.catalog")


@dataclass(frozen=True, slots=True)
class ProductDefinition:
    """Static attributes of a product that has no id yet."""

    description: str
    unit: str
    brand: str = ""
    category: str = ""
    application: str = ""
    minimum_stock: Decimal = ZERO
    supplier: str = ""
    location: str = ""

    def to_product(self, product_id: int) -> Product:
        return Product(
            product_id=product_id,
            description=self.description.strip(),
            unit=self.unit.strip(),
            brand=self.brand,
            category=self.category,
            application=self.application,
            minimum_stock=to_decimal(self.minimum_stock, "minimum_stock"),
            supplier=self.supplier,
            location=self.location,
        )


class CatalogService:
    """
    Registers products and authors.

    Contract:
        Receives an InventoryStore and a Clock via constructor injection.
    """

    def __init__(self, store: InventoryStore, clock: Clock | None = None):
        self.store = store
        self.clock = clock or SystemClock()

    def register_product(
        self, definition: ProductDefinition, actor_id: int | None = None
    ) -> ProductSnapshot:
        """
        Validate and store a new product.

        Raises:
            InvalidProductDefinitionError: blank description or unit, or a
                negative minimum stock.
        """
        with LogContext.bind(actor_id=actor_id):
            self._validate(definition)

            product = definition.to_product(self.store.next_product_id())
            snapshots = recompute_products(
                products=[product],
                movements=self.store.list_movements(),
                product_ids={product.product_id},
            )
            self.store.save_snapshots(snapshots)

            self.store.append_audit(
                AuditAction.PRODUCT_REGISTERED,
                actor_id,
                f"Product {product.description} registered",
                self.clock.now(),
            )
            logger.info(
                "product_registered",
                extra={
                    "product_id": product.product_id,
                    "description": product.description,
                    "unit": product.unit,
                },
            )
            return snapshots[0]

    def register_author(
        self,
        name: str,
        role: AuthorRole = AuthorRole.STAFF,
        location: str = "",
    ) -> Author:
        if not name or not name.strip():
            raise ValueError("Author name cannot be blank")

        author = Author(
            author_id=self.store.next_author_id(),
            name=name.strip(),
            role=AuthorRole(role),
            location=location,
        )
        self.store.save_author(author)
        logger.info(
            "author_registered",
            extra={"author_id": author.author_id, "role": author.role.value},
        )
        return author

    @staticmethod
    def _validate(definition: ProductDefinition) -> None:
        for field in ("description", "unit"):
            value = getattr(definition, field)
            if not value or not value.strip():
                exc = InvalidProductDefinitionError(field, "cannot be blank")
                logger.warning(
                    "product_rejected",
                    extra={"error_code": exc.code, "field": field},
                )
                raise exc

        minimum = to_decimal(definition.minimum_stock, "minimum_stock")
        if minimum < 0:
            exc = InvalidProductDefinitionError(
                "minimum_stock", f"cannot be negative, got {minimum}"
            )
            logger.warning(
                "product_rejected",
                extra={"error_code": exc.code, "field": "minimum_stock"},
            )
            raise exc
