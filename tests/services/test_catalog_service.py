"""Tests for product and author registration."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from inventory_kernel.domain.directory import AuditAction, AuthorRole
from inventory_kernel.domain.movement import Movement, MovementType
from inventory_kernel.domain.product import ProductSnapshot
from inventory_kernel.exceptions import InvalidProductDefinitionError
from inventory_services.catalog_service import CatalogService, ProductDefinition


@pytest.fixture
def catalog(store, deterministic_clock):
    return CatalogService(store, deterministic_clock)


class TestRegisterProduct:
    def test_assigns_ids_and_zero_state(self, catalog, store):
        first = catalog.register_product(ProductDefinition("Drill bit 6mm", "UN"), actor_id=1)
        second = catalog.register_product(
            ProductDefinition("Cable", "M", minimum_stock=Decimal("50")), actor_id=1
        )

        assert (first.product_id, second.product_id) == (1, 2)
        assert first == ProductSnapshot.empty(first.product)
        assert store.get_product(2).product.minimum_stock == Decimal("50")

    def test_strips_description_and_unit(self, catalog):
        snap = catalog.register_product(ProductDefinition("  Glue ", " KG "))
        assert snap.product.description == "Glue"
        assert snap.product.unit == "KG"

    @pytest.mark.parametrize(
        "definition, field",
        [
            (ProductDefinition("", "UN"), "description"),
            (ProductDefinition("   ", "UN"), "description"),
            (ProductDefinition("Glue", ""), "unit"),
            (ProductDefinition("Glue", "KG", minimum_stock=Decimal("-1")), "minimum_stock"),
        ],
    )
    def test_invalid_definitions(self, catalog, store, definition, field):
        with pytest.raises(InvalidProductDefinitionError) as exc_info:
            catalog.register_product(definition)

        assert exc_info.value.field == field
        assert store.list_products() == []

    def test_existing_movements_for_new_id_replayed(self, catalog, store):
        """Movements stored under an id before the product exists are picked up."""
        store.insert_movement(
            Movement.create(
                1, 1, datetime(2025, 1, 1, tzinfo=UTC), MovementType.ENTRY, "2", "4", author_id=1
            )
        )
        snap = catalog.register_product(ProductDefinition("Legacy item", "UN"))

        assert snap.balance_qty == Decimal("2")
        assert snap.balance_value == Decimal("8")

    def test_audited_and_logged(self, catalog, store, captured_logs):
        catalog.register_product(ProductDefinition("Glue", "KG"), actor_id=3)

        entry = store.list_audit()[-1]
        assert entry.action is AuditAction.PRODUCT_REGISTERED
        assert entry.actor_id == 3
        assert any(r["message"] == "product_registered" for r in captured_logs())


class TestRegisterAuthor:
    def test_register(self, catalog, store):
        author = catalog.register_author("Dana", AuthorRole.ADMIN, "HQ")

        assert author.author_id == 1
        assert store.list_authors() == [author]

    def test_role_from_value(self, catalog):
        assert catalog.register_author("Lee", "supervisor").role is AuthorRole.SUPERVISOR

    def test_blank_name_rejected(self, catalog):
        with pytest.raises(ValueError):
            catalog.register_author("  ")
