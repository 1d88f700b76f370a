#!/usr/bin/env python3
"""
Inventory valuation demo on the REAL stack.

Loads the active YAML config, configures structured logging and the
database from it, registers a few products, records a realistic month of
movements through MovementService, then prints the kardex, stock alerts
and valuation summary.

Usage:
    python3 scripts/demo_inventory.py
    python3 scripts/demo_inventory.py --config path/to/set.yaml
    python3 scripts/demo_inventory.py --memory     # skip the database
"""

import argparse
import logging
import sys
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

MONTH_START = datetime(2025, 9, 1, 8, 0, tzinfo=UTC)
W = 96


def hline(char: str = "=") -> str:
    return char * W


def banner(title: str) -> None:
    print()
    print(hline())
    print(f"  {title}")
    print(hline())


def seed(store, clock) -> None:
    from inventory_kernel.domain.movement import MovementDraft, MovementType
    from inventory_services import CatalogService, MovementService, ProductDefinition

    catalog = CatalogService(store, clock)
    movements = MovementService(store, clock)

    clerk = catalog.register_author("Warehouse clerk")
    catalog.register_product(
        ProductDefinition("Hex bolt M8", "UN", category="Fasteners",
                          minimum_stock=Decimal("50")),
        actor_id=clerk.author_id,
    )
    catalog.register_product(
        ProductDefinition("Copper wire 2.5mm", "M", category="Electrical",
                          minimum_stock=Decimal("100")),
        actor_id=clerk.author_id,
    )

    plan = [
        (1, MovementType.ENTRY, "200", "0.45", 0),
        (2, MovementType.ENTRY, "500", "2.90", 1),
        (1, MovementType.EXIT, "120", "0", 3),
        (2, MovementType.EXIT, "350", "0", 5),
        (1, MovementType.ENTRY, "100", "0.52", 8),
        (2, MovementType.RETURN, "20", "2.90", 9),
        (1, MovementType.EXIT, "130", "0", 12),
        (2, MovementType.ENTRY, "300", "3.10", 15),
    ]
    for product_id, movement_type, qty, price, day in plan:
        movements.add_movement(
            MovementDraft(
                product_id=product_id,
                timestamp=MONTH_START + timedelta(days=day),
                movement_type=movement_type,
                quantity=Decimal(qty),
                unit_price=Decimal(price),
            ),
            actor_id=clerk.author_id,
        )

    movements.record_physical_count(
        1, "45", clerk.author_id, timestamp=MONTH_START + timedelta(days=20)
    )


def report(store, config) -> None:
    from inventory_kernel.domain.values import round_money
    from inventory_services import InventoryQueryService

    queries = InventoryQueryService(store, config)
    places = config.reporting.money_places

    banner("KARDEX")
    print(f"  {'date':<12}{'product':<20}{'type':<22}{'qty':>8}"
          f"{'value':>12}{'balance':>10}{'avg cost':>12}")
    for row in queries.ledger():
        print(
            f"  {row.timestamp:%Y-%m-%d}  "
            f"{row.product_description[:18]:<20}"
            f"{row.movement_type.value:<22}"
            f"{row.quantity:>8}"
            f"{round_money(row.total_value, places):>12}"
            f"{row.balance_qty:>10}"
            f"{round_money(row.average_cost, places):>12}"
            + ("  <- zero" if row.crossed_zero else "")
        )

    banner("ALERTS")
    alerts = queries.alerts()
    if not alerts:
        print("  none")
    for alert in alerts:
        print(f"  {alert.kind.value:<18}{alert.description:<24}"
              f"balance={alert.balance_qty} minimum={alert.minimum_stock}")

    banner(f"VALUATION ({config.currency})")
    summary = queries.valuation()
    print(f"  total stock value: {round_money(summary.total_value, places)}")
    for rank, item in enumerate(summary.top_products, start=1):
        print(f"  {rank}. {item.description:<24}{round_money(item.value, places):>12}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Inventory valuation demo")
    parser.add_argument("--config", default=None, help="YAML configuration set")
    parser.add_argument("--memory", action="store_true",
                        help="Use the in-memory store instead of the database")
    args = parser.parse_args()

    from inventory_config import get_active_config
    from inventory_kernel.db import create_tables, init_engine_from_url, session_scope
    from inventory_kernel.domain.clock import DeterministicClock
    from inventory_kernel.logging_config import configure_logging
    from inventory_services import InMemoryInventoryStore, SqlInventoryStore

    config = get_active_config(args.config)
    configure_logging(level=getattr(logging, config.logging.level))
    clock = DeterministicClock(MONTH_START + timedelta(days=30))

    if args.memory:
        store = InMemoryInventoryStore()
        seed(store, clock)
        report(store, config)
        return 0

    init_engine_from_url(config.database.url, echo=config.database.echo)
    create_tables()
    with session_scope() as session:
        store = SqlInventoryStore(session)
        seed(store, clock)
        report(store, config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
