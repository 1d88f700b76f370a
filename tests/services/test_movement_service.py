"""
Tests for the movement mutation handlers.

Every test runs against both the in-memory and the SQLite store.

Covers:
- Validation at the mutation boundary (nothing is written on rejection)
- Full recompute of the affected product(s) after add / update / delete
- Audit entries and structured log records
- Physical counts and the forced global recompute
"""

import decimal
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from inventory_kernel.domain.directory import AuditAction
from inventory_kernel.domain.movement import Movement, MovementDraft, MovementType
from inventory_kernel.exceptions import (
    InvalidQuantityError,
    InvalidTimestampError,
    InvalidUnitPriceError,
    MissingUnitPriceError,
    MovementNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from inventory_services.catalog_service import CatalogService, ProductDefinition
from inventory_services.movement_service import MovementService

T0 = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)
ACTOR = 1
EDITOR = 2


def _draft(movement_type, quantity, unit_price="0", product_id=1, hours=0):
    return MovementDraft(
        product_id=product_id,
        timestamp=T0 + timedelta(hours=hours),
        movement_type=movement_type,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
    )


@pytest.fixture
def catalog(store, deterministic_clock):
    return CatalogService(store, deterministic_clock)


@pytest.fixture
def service(store, deterministic_clock):
    return MovementService(store, deterministic_clock)


@pytest.fixture
def product(catalog):
    return catalog.register_product(
        ProductDefinition(description="Hex bolt M8", unit="UN"), actor_id=ACTOR
    )


class TestAddMovement:
    def test_assigns_sequential_ids(self, service, product):
        first = service.add_movement(_draft(MovementType.ENTRY, "10", "250"), ACTOR)
        second = service.add_movement(_draft(MovementType.EXIT, "5", hours=1), ACTOR)

        assert (first.movement_id, second.movement_id) == (1, 2)
        assert second.author_id == ACTOR

    def test_snapshot_recomputed(self, service, store, product):
        service.add_movement(_draft(MovementType.ENTRY, "10", "250"), ACTOR)
        service.add_movement(_draft(MovementType.EXIT, "5", hours=1), ACTOR)
        service.add_movement(_draft(MovementType.ENTRY, "20", "300", hours=2), ACTOR)

        snap = store.get_product(product.product_id)
        assert snap.balance_qty == Decimal("25")
        assert snap.balance_value == Decimal("7250")
        assert snap.average_cost == Decimal("290")
        assert [h.price for h in snap.price_history] == [Decimal("250"), Decimal("300")]

    def test_back_dated_insert_replays_history(self, service, store, product):
        service.add_movement(_draft(MovementType.ENTRY, "10", "10", hours=1), ACTOR)
        service.add_movement(_draft(MovementType.EXIT, "10", hours=5), ACTOR)
        assert store.get_product(1).current_zero_date == T0 + timedelta(hours=5)

        service.add_movement(_draft(MovementType.ENTRY, "10", "20", hours=2), ACTOR)

        snap = store.get_product(1)
        assert snap.balance_qty == Decimal("10")
        assert snap.balance_value == Decimal("150")
        assert snap.current_zero_date is None

    def test_stored_total_value_derived(self, service, store, product):
        m = service.add_movement(_draft(MovementType.ENTRY, "3", "2.50"), ACTOR)
        assert store.get_movement(m.movement_id).total_value == Decimal("7.50")

    def test_audit_entry_appended(self, service, store, product, deterministic_clock):
        service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)

        last = store.list_audit()[-1]
        assert last.action is AuditAction.MOVEMENT_RECORDED
        assert last.actor_id == ACTOR
        assert last.timestamp == deterministic_clock.now()
        assert "Hex bolt M8" in last.details

    def test_logs_with_context(self, service, product, captured_logs):
        service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)

        [record] = [r for r in captured_logs() if r["message"] == "movement_recorded"]
        assert record["actor_id"] == str(ACTOR)
        assert record["product_id"] == str(product.product_id)
        assert record["movement_type"] == "entry"


class TestValidation:
    @pytest.mark.parametrize("quantity", ["0", "-1"])
    def test_non_positive_quantity(self, service, store, product, quantity):
        with pytest.raises(InvalidQuantityError) as exc_info:
            service.add_movement(_draft(MovementType.ENTRY, quantity, "1"), ACTOR)

        assert exc_info.value.quantity == Decimal(quantity)
        assert store.list_movements() == []

    @pytest.mark.parametrize("movement_type", [MovementType.ENTRY, MovementType.RETURN])
    def test_entry_and_return_require_price(self, service, product, movement_type):
        with pytest.raises(MissingUnitPriceError):
            service.add_movement(_draft(movement_type, "1", "0"), ACTOR)

    def test_positive_adjustment_allows_zero_price(self, service, product):
        m = service.add_movement(_draft(MovementType.POSITIVE_ADJUSTMENT, "2", "0"), ACTOR)
        assert m.total_value == 0

    def test_exit_needs_no_price(self, service, store, product):
        service.add_movement(_draft(MovementType.EXIT, "5"), ACTOR)
        assert store.get_product(1).balance_qty == Decimal("-5")

    def test_negative_price_rejected(self, service, product):
        with pytest.raises(InvalidUnitPriceError):
            service.add_movement(_draft(MovementType.EXIT, "1", "-1"), ACTOR)

    def test_unknown_product(self, service, store):
        with pytest.raises(ProductNotFoundError) as exc_info:
            service.add_movement(_draft(MovementType.ENTRY, "1", "1", product_id=99), ACTOR)

        assert exc_info.value.product_id == 99
        assert store.list_movements() == []

    def test_validation_errors_share_base(self, service, product):
        with pytest.raises(ValidationError):
            service.add_movement(_draft(MovementType.ENTRY, "0", "1"), ACTOR)

    def test_rejection_logged(self, service, product, captured_logs):
        with pytest.raises(InvalidQuantityError):
            service.add_movement(_draft(MovementType.ENTRY, "0", "1"), ACTOR)

        [record] = [r for r in captured_logs() if r["message"] == "movement_rejected"]
        assert record["level"] == "WARNING"
        assert record["error_code"] == "INVALID_QUANTITY"

    def test_naive_timestamp_rejected(self, service, store, product):
        draft = replace(_draft(MovementType.ENTRY, "1", "1"), timestamp=datetime(2025, 1, 1))

        with pytest.raises(InvalidTimestampError) as exc_info:
            service.add_movement(draft, ACTOR)

        assert exc_info.value.code == "INVALID_TIMESTAMP"
        assert store.list_movements() == []
        assert store.get_product(1).balance_qty == 0

    def test_naive_timestamp_rejected_on_update(self, service, store, product):
        entry = service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)

        with pytest.raises(InvalidTimestampError):
            service.update_movement(
                replace(entry, timestamp=entry.timestamp.replace(tzinfo=None)), ACTOR
            )

        assert store.get_movement(entry.movement_id) == entry

    def test_naive_count_timestamp_rejected(self, service, store, product):
        with pytest.raises(InvalidTimestampError):
            service.record_physical_count(1, "3", ACTOR, timestamp=datetime(2025, 1, 1))

        assert store.list_movements() == []


class TestUpdateMovement:
    def test_update_recomputes(self, service, store, product):
        entry = service.add_movement(_draft(MovementType.ENTRY, "10", "10"), ACTOR)
        service.add_movement(_draft(MovementType.EXIT, "4", hours=1), ACTOR)

        updated = service.update_movement(replace(entry, unit_price=Decimal("20")), ACTOR)

        assert updated.total_value == Decimal("200")
        snap = store.get_product(1)
        assert snap.balance_qty == Decimal("6")
        assert snap.balance_value == Decimal("120")
        assert [h.price for h in snap.price_history] == [Decimal("20")]

    def test_total_value_rederived(self, service, store, product):
        entry = service.add_movement(_draft(MovementType.ENTRY, "2", "5"), ACTOR)
        service.update_movement(replace(entry, total_value=Decimal("12345")), ACTOR)
        assert store.get_movement(entry.movement_id).total_value == Decimal("10")

    def test_moving_to_another_product_recomputes_both(
        self, service, catalog, store, product
    ):
        other = catalog.register_product(ProductDefinition("Washer", "UN"), ACTOR)
        entry = service.add_movement(_draft(MovementType.ENTRY, "3", "2"), ACTOR)

        service.update_movement(replace(entry, product_id=other.product_id), ACTOR)

        assert store.get_product(product.product_id).balance_qty == 0
        assert store.get_product(other.product_id).balance_qty == Decimal("3")

    def test_unknown_movement(self, service, product):
        entry = service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)
        with pytest.raises(MovementNotFoundError):
            service.update_movement(replace(entry, movement_id=404), ACTOR)

    def test_invalid_update_leaves_store_untouched(self, service, store, product):
        entry = service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)
        with pytest.raises(InvalidQuantityError):
            service.update_movement(replace(entry, quantity=Decimal("0")), ACTOR)

        assert store.get_movement(entry.movement_id) == entry

    def test_audited(self, service, store, product):
        entry = service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)
        service.update_movement(replace(entry, quantity=Decimal("2")), ACTOR)
        assert store.list_audit()[-1].action is AuditAction.MOVEMENT_UPDATED

    def test_audited_under_editor(self, service, store, product, captured_logs):
        entry = service.add_movement(_draft(MovementType.ENTRY, "1", "1"), ACTOR)

        updated = service.update_movement(replace(entry, quantity=Decimal("2")), EDITOR)

        last = store.list_audit()[-1]
        assert last.action is AuditAction.MOVEMENT_UPDATED
        assert last.actor_id == EDITOR
        assert updated.author_id == ACTOR
        assert store.get_movement(entry.movement_id).author_id == ACTOR
        [record] = [r for r in captured_logs() if r["message"] == "movement_updated"]
        assert record["actor_id"] == str(EDITOR)


class TestDeleteMovement:
    def test_delete_recomputes(self, service, store, product):
        service.add_movement(_draft(MovementType.ENTRY, "10", "1"), ACTOR)
        exit_ = service.add_movement(_draft(MovementType.EXIT, "10", hours=1), ACTOR)
        assert store.get_product(1).current_zero_date is not None

        service.delete_movement(exit_.movement_id, actor_id=ACTOR)

        snap = store.get_product(1)
        assert snap.balance_qty == Decimal("10")
        assert snap.current_zero_date is None
        assert store.get_movement(exit_.movement_id) is None
        assert store.list_audit()[-1].action is AuditAction.MOVEMENT_DELETED

    def test_unknown_movement(self, service):
        with pytest.raises(MovementNotFoundError) as exc_info:
            service.delete_movement(8)
        assert exc_info.value.movement_id == 8


class TestRecomputeAll:
    def test_rebuilds_every_product(self, service, catalog, store, product):
        catalog.register_product(ProductDefinition("Nut", "UN"), ACTOR)
        service.add_movement(_draft(MovementType.ENTRY, "2", "3", product_id=2), ACTOR)

        snaps = service.recompute_all(actor_id=ACTOR)

        assert [s.product_id for s in snaps] == [1, 2]
        assert snaps[1].balance_value == Decimal("6")
        assert store.list_audit()[-1].action is AuditAction.GLOBAL_RECOMPUTE

    def test_without_actor_not_audited(self, service, store, product):
        before = len(store.list_audit())
        service.recompute_all()
        assert len(store.list_audit()) == before

    def test_idempotent(self, service, product):
        service.add_movement(_draft(MovementType.ENTRY, "3", "7"), ACTOR)
        assert service.recompute_all() == service.recompute_all()


class TestRecordPhysicalCount:
    def test_shortage_records_negative_adjustment(self, service, store, product):
        service.add_movement(_draft(MovementType.ENTRY, "10", "5"), ACTOR)

        m = service.record_physical_count(1, "7", ACTOR, timestamp=T0 + timedelta(hours=1))

        assert m.movement_type is MovementType.NEGATIVE_ADJUSTMENT
        assert m.quantity == Decimal("3")
        snap = store.get_product(1)
        assert snap.balance_qty == Decimal("7")
        assert snap.average_cost == Decimal("5")

    def test_surplus_records_positive_adjustment(self, service, store, product):
        service.add_movement(_draft(MovementType.ENTRY, "4", "2"), ACTOR)

        m = service.record_physical_count(1, 6, ACTOR, timestamp=T0 + timedelta(hours=1))

        assert m.movement_type is MovementType.POSITIVE_ADJUSTMENT
        assert m.unit_price == Decimal("2")
        assert store.get_product(1).average_cost == Decimal("2")

    def test_match_records_nothing(self, service, store, product):
        service.add_movement(_draft(MovementType.ENTRY, "4", "2"), ACTOR)
        assert service.record_physical_count(1, "4", ACTOR) is None
        assert len(store.list_movements()) == 1

    def test_defaults_to_clock_time(self, service, product, deterministic_clock):
        m = service.record_physical_count(1, "2", ACTOR)
        assert m.timestamp == deterministic_clock.now()

    def test_unknown_product(self, service):
        with pytest.raises(ProductNotFoundError):
            service.record_physical_count(5, "1", ACTOR)


class TestOrphanWarning:
    def test_orphans_logged_on_recompute(self, store, deterministic_clock, captured_logs):
        store.insert_movement(
            Movement.create(1, 404, T0, MovementType.ENTRY, "1", "1", author_id=ACTOR)
        )
        MovementService(store, deterministic_clock).recompute_all()

        [record] = [
            r for r in captured_logs() if r["message"] == "recompute_orphaned_movements"
        ]
        assert record["movement_ids"] == [1]


class TestFailedReplayLeavesStoreUntouched:
    """A mutation whose replay raises writes neither the movement nor snapshots."""

    @pytest.fixture
    def memory_service(self, memory_store, deterministic_clock):
        CatalogService(memory_store, deterministic_clock).register_product(
            ProductDefinition(description="Hex bolt M8", unit="UN"), actor_id=ACTOR
        )
        return MovementService(memory_store, deterministic_clock)

    def test_count_against_naive_history(self, memory_service, memory_store):
        legacy = Movement.create(
            1, 1, datetime(2025, 1, 1), MovementType.ENTRY, "10", "5", author_id=ACTOR
        )
        memory_store.insert_movement(legacy)
        memory_service.recompute_all()
        before = memory_store.get_product(1)

        with pytest.raises(TypeError):
            memory_service.record_physical_count(1, "7", ACTOR)

        assert memory_store.list_movements() == [legacy]
        assert memory_store.get_product(1) == before
        assert memory_store.get_product(1).balance_qty == Decimal("10")

    def test_overflowing_balance(self, memory_service, memory_store):
        huge = "9E+999999"
        first = memory_service.add_movement(_draft(MovementType.ENTRY, huge, "1"), ACTOR)
        before = memory_store.get_product(1)
        audit_count = len(memory_store.list_audit())

        with pytest.raises(decimal.Overflow):
            memory_service.add_movement(_draft(MovementType.ENTRY, huge, "1", hours=1), ACTOR)

        assert memory_store.list_movements() == [first]
        assert memory_store.get_product(1) == before
        assert len(memory_store.list_audit()) == audit_count
