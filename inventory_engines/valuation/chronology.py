"""
inventory_engines.valuation.chronology -- Chronological normalizer.

Responsibility:
    Put movements into replay order: ascending timestamp, ties broken by
    movement id.  Movement ids are assigned in insertion order, so the
    secondary key is the insertion sequence.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Total order: (timestamp, movement_id) never ties for distinct
      movements, so the replay order does not depend on input order.
    - The input collection is never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from inventory_kernel.domain.movement import Movement


def chronological_key(movement: Movement) -> tuple[datetime, int]:
    """Sort key used for every replay."""
    return (movement.timestamp, movement.movement_id)


def normalize(movements: Iterable[Movement]) -> list[Movement]:
    """Return a new list of ``movements`` in replay order."""
    return sorted(movements, key=chronological_key)
