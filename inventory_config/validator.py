"""
Configuration validator.

Structural checks on a parsed ``InventoryConfig``.  Returns every problem
at once instead of stopping at the first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from inventory_config.schema import InventoryConfig

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_configuration(config: InventoryConfig) -> ValidationResult:
    errors: list[str] = []

    if not config.config_id.strip():
        errors.append("config_id must not be blank")
    if config.version < 1:
        errors.append(f"version must be >= 1, got {config.version}")
    if len(config.currency) != 3 or not config.currency.isalpha():
        errors.append(f"currency must be a 3-letter code, got {config.currency!r}")

    reporting = config.reporting
    for name in ("top_products", "recent_window_days", "idle_months"):
        value = getattr(reporting, name)
        if value < 1:
            errors.append(f"reporting.{name} must be >= 1, got {value}")
    if reporting.money_places < 0:
        errors.append(f"reporting.money_places must be >= 0, got {reporting.money_places}")

    if not config.database.url.strip():
        errors.append("database.url must not be blank")

    if config.logging.level not in _LOG_LEVELS:
        errors.append(f"logging.level is not a known level: {config.logging.level!r}")

    return ValidationResult(errors=tuple(errors))
