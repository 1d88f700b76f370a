"""
InventoryConfig schema.

Typed, frozen view of a YAML configuration set.  The loader parses YAML
fragments into these types; ``get_active_config()`` validates and returns
them.  Defaults here match ``sets/default.yaml``.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReportingDef:
    """Dashboard and report parameters."""

    top_products: int = 5
    recent_window_days: int = 30
    idle_months: int = 6
    money_places: int = 2


@dataclass(frozen=True)
class DatabaseDef:
    """Persistent store connection."""

    url: str = "sqlite://"
    echo: bool = False


@dataclass(frozen=True)
class LoggingDef:
    level: str = "INFO"


@dataclass(frozen=True)
class InventoryConfig:
    """The runtime configuration artifact."""

    config_id: str
    version: int
    currency: str
    reporting: ReportingDef = field(default_factory=ReportingDef)
    database: DatabaseDef = field(default_factory=DatabaseDef)
    logging: LoggingDef = field(default_factory=LoggingDef)
    checksum: str = ""
