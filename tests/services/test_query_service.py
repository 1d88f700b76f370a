"""Tests for the read-side inventory queries."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from inventory_config.schema import InventoryConfig, ReportingDef
from inventory_engines.alerts import AlertKind
from inventory_kernel.domain.movement import MovementDraft, MovementType
from inventory_kernel.exceptions import ProductNotFoundError
from inventory_services.catalog_service import CatalogService, ProductDefinition
from inventory_services.movement_service import MovementService
from inventory_services.query_service import InventoryQueryService, months_before

T0 = datetime(2025, 1, 10, 9, 0, tzinfo=UTC)


@pytest.fixture
def config():
    return InventoryConfig(
        config_id="test",
        version=1,
        currency="BRL",
        reporting=ReportingDef(top_products=2, recent_window_days=7, idle_months=3),
    )


@pytest.fixture
def populated(store, deterministic_clock):
    """Two products: bolts (moved often) and washers (one old entry)."""
    catalog = CatalogService(store, deterministic_clock)
    catalog.register_author("Dana")
    catalog.register_product(
        ProductDefinition("Bolt", "UN", minimum_stock=Decimal("10")), actor_id=1
    )
    catalog.register_product(ProductDefinition("Washer", "UN"), actor_id=1)

    service = MovementService(store, deterministic_clock)

    def add(movement_type, qty, price="0", product_id=1, days=0):
        service.add_movement(
            MovementDraft(
                product_id=product_id,
                timestamp=T0 + timedelta(days=days),
                movement_type=movement_type,
                quantity=Decimal(qty),
                unit_price=Decimal(price),
            ),
            actor_id=1,
        )

    add(MovementType.ENTRY, "100", "2", product_id=2, days=0)
    add(MovementType.ENTRY, "20", "5", days=100)
    add(MovementType.EXIT, "12", days=101)
    add(MovementType.ENTRY, "2", "8", days=102)
    return store


@pytest.fixture
def queries(populated, config):
    return InventoryQueryService(populated, config)


class TestLedger:
    def test_all_rows(self, queries):
        rows = queries.ledger()
        assert [r.product_description for r in rows] == ["Washer", "Bolt", "Bolt", "Bolt"]
        assert all(r.author_name == "Dana" for r in rows)

    def test_single_product(self, queries):
        rows = queries.ledger(product_id=1)
        assert [r.balance_qty for r in rows] == [Decimal("20"), Decimal("8"), Decimal("10")]
        assert rows[1].total_value == Decimal("60")

    def test_last_row_matches_snapshot(self, queries, populated):
        last = queries.ledger(product_id=1)[-1]
        snap = populated.get_product(1)
        assert (last.balance_qty, last.balance_value) == (snap.balance_qty, snap.balance_value)


class TestAlerts:
    def test_low_stock(self, queries):
        [alert] = queries.alerts()
        assert alert.product_id == 1
        assert alert.kind is AlertKind.LOW_STOCK


class TestValuation:
    def test_total_and_top(self, queries):
        summary = queries.valuation()

        # washers 100 x 2, bolts 8 x 5 + 2 x 8
        assert summary.total_value == Decimal("256")
        assert [p.product_id for p in summary.top_products] == [2, 1]


class TestMovementSummary:
    def test_window(self, queries):
        summary = queries.movement_summary(
            T0 + timedelta(days=100), T0 + timedelta(days=101)
        )
        assert summary.incoming_value == Decimal("100")
        assert summary.outgoing_value == Decimal("60")


class TestRecentActivity:
    def test_uses_configured_window(self, queries):
        counts = queries.recent_activity(T0 + timedelta(days=105))
        assert counts.since == T0 + timedelta(days=98)
        assert (counts.entries, counts.exits) == (2, 1)


class TestIdleStock:
    def test_configured_months(self, queries):
        idle = queries.idle_stock(T0 + timedelta(days=102))
        assert [i.snapshot.product_id for i in idle] == [2]

    def test_override_months(self, queries):
        assert queries.idle_stock(T0 + timedelta(days=102), months=12) == []


class TestPriceHistory:
    def test_history(self, queries):
        assert [h.price for h in queries.price_history(1)] == [Decimal("5"), Decimal("8")]

    def test_unknown_product(self, queries):
        with pytest.raises(ProductNotFoundError):
            queries.price_history(9)


class TestMonthsBefore:
    def test_simple(self):
        assert months_before(T0, 3) == datetime(2024, 10, 10, 9, 0, tzinfo=UTC)

    def test_clamps_to_month_end(self):
        moment = datetime(2025, 3, 31, tzinfo=UTC)
        assert months_before(moment, 1) == datetime(2025, 2, 28, tzinfo=UTC)

    def test_zero_months(self):
        assert months_before(T0, 0) == T0
