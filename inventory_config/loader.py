"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed, frozen
``inventory_config.schema`` dataclasses.  Runtime callers go through
``inventory_config.get_active_config()``, not this module.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Wrong value types  -> ``ValueError``.

Audit relevance
---------------
``compute_checksum`` gives every loaded configuration a deterministic
identity that is logged with ``INVENTORY_CONFIG_TRACE``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import DatabaseDef, InventoryConfig, LoggingDef, ReportingDef


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return data


def _int(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def parse_reporting(data: dict[str, Any] | None) -> ReportingDef:
    data = data or {}
    defaults = ReportingDef()
    return ReportingDef(
        top_products=_int(data, "top_products", defaults.top_products),
        recent_window_days=_int(data, "recent_window_days", defaults.recent_window_days),
        idle_months=_int(data, "idle_months", defaults.idle_months),
        money_places=_int(data, "money_places", defaults.money_places),
    )


def parse_database(data: dict[str, Any] | None) -> DatabaseDef:
    data = data or {}
    defaults = DatabaseDef()
    return DatabaseDef(
        url=str(data.get("url", defaults.url)),
        echo=bool(data.get("echo", defaults.echo)),
    )


def parse_logging(data: dict[str, Any] | None) -> LoggingDef:
    data = data or {}
    return LoggingDef(level=str(data.get("level", LoggingDef().level)).upper())


def parse_config(data: dict[str, Any]) -> InventoryConfig:
    """
    Parse an ``InventoryConfig`` from a dict.

    Preconditions:
        - ``data`` contains ``config_id``, ``version`` and ``currency``.
    Raises:
        KeyError: if a required key is missing.
    """
    config = InventoryConfig(
        config_id=str(data["config_id"]),
        version=int(data["version"]),
        currency=str(data["currency"]).upper(),
        reporting=parse_reporting(data.get("reporting")),
        database=parse_database(data.get("database")),
        logging=parse_logging(data.get("logging")),
    )
    return replace(config, checksum=compute_checksum(config))


def compute_checksum(config: InventoryConfig) -> str:
    """Deterministic SHA-256 of the configuration content (checksum excluded)."""
    payload = {
        "config_id": config.config_id,
        "version": config.version,
        "currency": config.currency,
        "reporting": vars(config.reporting),
        "database": vars(config.database),
        "logging": vars(config.logging),
    }
    canonical = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def load_config_file(path: Path) -> InventoryConfig:
    return parse_config(load_yaml_file(path))
