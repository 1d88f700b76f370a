"""
Module: inventory_kernel.db.base
Responsibility: Declarative base class for all SQLAlchemy ORM models and the
    column types that keep Decimal and datetime values exact across backends.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, domain/ or outer layers.

Invariants enforced:
    - Exact decimals: DecimalString stores Decimal values as their canonical
      string, so a quantity or amount read back compares equal to the one
      written on every backend (SQLite has no native decimal type).
    - Timezone-aware timestamps: UTCDateTime returns aware datetimes even on
      backends that drop tzinfo; naive values read back are treated as UTC.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import BigInteger, DateTime, String
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class DecimalString(TypeDecorator):
    """
    Decimal stored as a string for exact, cross-database round trips.

    Guarantees:
        - process_bind_param: Decimal -> str on INSERT/UPDATE.
        - process_result_value: str -> Decimal on SELECT.
        - cache_ok=True enables SQLAlchemy statement caching.
    """

    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return Decimal(value)
        return None


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime; naive values read back are tagged as UTC."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Base(DeclarativeBase):
    """
    Declarative base for all inventory models.

    Guarantees:
        - Decimal maps to DecimalString -- exact storage.
        - datetime maps to UTCDateTime -- always timezone-aware on read.
        - int maps to BigInteger.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: DecimalString(),
        datetime: UTCDateTime(),
        int: BigInteger,
    }
