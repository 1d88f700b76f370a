"""
inventory_config -- single public entrypoint for inventory configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Services receive the returned
    ``InventoryConfig`` by injection; they never read YAML themselves.

Architecture position:
    Configuration -- YAML-driven settings.  Sits above ``inventory_kernel``
    and beside ``inventory_services``.  The kernel and engines MUST NEVER
    import from ``inventory_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``ValueError`` -- structural validation failures (all listed).
    - ``KeyError`` -- a required key is missing.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``INVENTORY_CONFIG_TRACE`` log entry with the config id, version and
    checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from inventory_config.loader import load_config_file
from inventory_config.schema import DatabaseDef, InventoryConfig, LoggingDef, ReportingDef
from inventory_config.validator import ValidationResult, validate_configuration

_logger = logging.getLogger("inventory_kernel.config")

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | str | None = None) -> InventoryConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: YAML file to load.  Defaults to ``inventory_config/sets/default.yaml``.

    Returns:
        A validated, frozen InventoryConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If validation fails.
    """
    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_FILE
    config = load_config_file(config_path)

    validation = validate_configuration(config)
    if not validation.is_valid:
        raise ValueError(
            "Configuration validation failed:\n"
            + "\n".join(f"  - {e}" for e in validation.errors)
        )

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "currency": config.currency,
            "source": str(config_path),
        },
    )
    return config


__all__ = [
    "DatabaseDef",
    "InventoryConfig",
    "LoggingDef",
    "ReportingDef",
    "ValidationResult",
    "get_active_config",
    "validate_configuration",
]
