"""
Pytest fixtures for the inventory test suite.

Provides:
- Structured logging configured once per session, LogContext cleared per test
- ``captured_logs`` for asserting on emitted JSON records
- A deterministic clock
- Builders for products and movements
- In-memory and SQLite-backed stores
"""

import json
import logging
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session

from inventory_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.domain.movement import Movement, MovementType
from inventory_kernel.domain.product import Product
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from inventory_services.sql_store import SqlInventoryStore
from inventory_services.store import InMemoryInventoryStore

BASE_TIME = datetime(2025, 1, 1, 8, 0, tzinfo=UTC)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, movement_service):
            movement_service.add_movement(draft, actor_id=1)
            logs = captured_logs()
            assert any(r["message"] == "movement_recorded" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and builders
# =============================================================================


@pytest.fixture
def deterministic_clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock()


@pytest.fixture
def make_product():
    """Build a Product with sensible defaults."""

    def _make(product_id: int = 1, **overrides) -> Product:
        fields = {
            "product_id": product_id,
            "description": f"Product {product_id}",
            "unit": "UN",
        }
        fields.update(overrides)
        return Product(**fields)

    return _make


@pytest.fixture
def make_movement():
    """
    Build Movements with ids in call order and timestamps one hour apart.

    Pass ``at`` (hours after BASE_TIME) or ``timestamp`` to pin the time.
    """
    counter = {"id": 0}

    def _make(
        movement_type: MovementType,
        quantity,
        unit_price="0",
        product_id: int = 1,
        at: float | None = None,
        timestamp: datetime | None = None,
        movement_id: int | None = None,
        author_id: int = 1,
    ) -> Movement:
        counter["id"] += 1
        mid = movement_id if movement_id is not None else counter["id"]
        if timestamp is None:
            hours = at if at is not None else counter["id"]
            timestamp = BASE_TIME + timedelta(hours=hours)
        return Movement.create(
            movement_id=mid,
            product_id=product_id,
            timestamp=timestamp,
            movement_type=movement_type,
            quantity=Decimal(str(quantity)),
            unit_price=Decimal(str(unit_price)),
            author_id=author_id,
        )

    return _make


# =============================================================================
# Store fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryInventoryStore:
    return InMemoryInventoryStore()


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Session on a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        drop_tables()
        reset_engine()


@pytest.fixture
def sql_store(session) -> SqlInventoryStore:
    return SqlInventoryStore(session)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Run a test once per store implementation."""
    if request.param == "memory":
        return InMemoryInventoryStore()
    return request.getfixturevalue("sql_store")
