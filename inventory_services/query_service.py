"""
inventory_services.query_service -- Read-side queries over a store.

Responsibility:
    Feed the ledger, dashboard and report views: kardex rows, stock alerts,
    valuation totals, movement summaries, recent activity, idle stock and
    price history.  Every figure is computed by a pure engine from the
    store's current contents; nothing here writes.

Architecture position:
    Services -- read-only orchestration over engines + store.
    Report parameters (top-N size, activity window, idle threshold) come from
    ``InventoryConfig.reporting``.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta

from inventory_config.schema import InventoryConfig
from inventory_engines.alerts import StockAlert, detect_stock_alerts
from inventory_engines.ledger import generate_ledger, ledger_for_product
from inventory_engines.reports import (
    ActivityCounts,
    IdleStockItem,
    MovementSummary,
    ValuationSummary,
    find_idle_stock,
    recent_activity,
    summarize_movements,
    summarize_valuation,
)
from inventory_kernel.domain.ledger import LedgerEntry
from inventory_kernel.domain.product import PriceHistoryEntry
from inventory_kernel.exceptions import ProductNotFoundError
from inventory_kernel.logging_config import get_logger
from inventory_services.store import InventoryStore

logger = get_logger("services.query")


def months_before(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` earlier, clamped to the month's last day."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class InventoryQueryService:
    """
    Read-only inventory queries.

    Contract:
        Receives an InventoryStore and an InventoryConfig via constructor
        injection.  Methods taking ``as_of`` never read the wall clock.
    """

    def __init__(self, store: InventoryStore, config: InventoryConfig):
        self.store = store
        self.config = config

    def ledger(self, product_id: int | None = None) -> list[LedgerEntry]:
        """Kardex rows for all products, or for one product."""
        rows = generate_ledger(
            movements=self.store.list_movements(),
            products=self.store.list_products(),
            authors=self.store.list_authors(),
        )
        if product_id is None:
            return rows
        return ledger_for_product(rows, product_id)

    def alerts(self) -> list[StockAlert]:
        alerts = detect_stock_alerts(self.store.list_products())
        if alerts:
            logger.info("stock_alerts_detected", extra={"count": len(alerts)})
        return alerts

    def valuation(self) -> ValuationSummary:
        return summarize_valuation(
            self.store.list_products(), top_n=self.config.reporting.top_products
        )

    def movement_summary(self, start: datetime, end: datetime) -> MovementSummary:
        return summarize_movements(self.ledger(), start, end)

    def recent_activity(self, as_of: datetime) -> ActivityCounts:
        """Entry and exit counts over the configured window ending at ``as_of``."""
        since = as_of - timedelta(days=self.config.reporting.recent_window_days)
        return recent_activity(self.store.list_movements(), since)

    def idle_stock(
        self, as_of: datetime, months: int | None = None
    ) -> list[IdleStockItem]:
        """Products with stock and no movement in the last ``months`` months."""
        window = self.config.reporting.idle_months if months is None else months
        cutoff = months_before(as_of, window)
        return find_idle_stock(
            self.store.list_products(), self.store.list_movements(), cutoff
        )

    def price_history(self, product_id: int) -> tuple[PriceHistoryEntry, ...]:
        snapshot = self.store.get_product(product_id)
        if snapshot is None:
            raise ProductNotFoundError(product_id)
        return snapshot.price_history
