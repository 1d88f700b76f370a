"""
Movement -- Stock movement value objects.

Responsibility:
    Define the closed set of movement types with their flow direction, the
    immutable ``Movement`` record, and the ``MovementDraft`` accepted by the
    mutation handlers before an id and author are assigned.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Closed variant: every MovementType maps to exactly one
      MovementDirection (INCOMING or OUTGOING).  Engines branch on the
      direction, never on type strings.
    - Derived total: ``Movement.create`` fixes ``total_value`` at creation as
      ``quantity * unit_price`` for incoming types and ``0`` for outgoing
      types.  The outgoing placeholder is NOT the realized cost; the ledger
      computes that at replay time.
    - All numbers are Decimal (see domain.values.to_decimal).

Failure modes:
    - TypeError / ValueError from ``to_decimal`` on float or malformed input.
    - Range checks (quantity > 0, price rules) are NOT done here; they
      belong to the mutation handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from inventory_kernel.domain.values import ZERO, to_decimal


class MovementDirection(str, Enum):
    """Which way a movement moves stock and value."""

    INCOMING = "incoming"  # adds quantity and quantity * unit_price
    OUTGOING = "outgoing"  # removes quantity at the pre-movement average cost


class MovementType(str, Enum):
    """Stock movement types."""

    ENTRY = "entry"
    EXIT = "exit"
    RETURN = "return"
    POSITIVE_ADJUSTMENT = "positive_adjustment"
    NEGATIVE_ADJUSTMENT = "negative_adjustment"

    @property
    def direction(self) -> MovementDirection:
        return _DIRECTIONS[self]

    @property
    def is_incoming(self) -> bool:
        return self.direction is MovementDirection.INCOMING

    @property
    def is_outgoing(self) -> bool:
        return self.direction is MovementDirection.OUTGOING

    @property
    def requires_unit_price(self) -> bool:
        """Entry and Return must carry a positive unit price.

        Positive adjustments are booked at the current average cost, which
        is legitimately zero for an empty product.
        """
        return self in (MovementType.ENTRY, MovementType.RETURN)


_DIRECTIONS: dict[MovementType, MovementDirection] = {
    MovementType.ENTRY: MovementDirection.INCOMING,
    MovementType.RETURN: MovementDirection.INCOMING,
    MovementType.POSITIVE_ADJUSTMENT: MovementDirection.INCOMING,
    MovementType.EXIT: MovementDirection.OUTGOING,
    MovementType.NEGATIVE_ADJUSTMENT: MovementDirection.OUTGOING,
}


def stored_total_value(
    movement_type: MovementType, quantity: Decimal, unit_price: Decimal
) -> Decimal:
    """Total value fixed on the movement record at creation time."""
    if movement_type.is_incoming:
        return quantity * unit_price
    return ZERO


@dataclass(frozen=True, slots=True)
class MovementDraft:
    """
    Movement as submitted by a caller, before id and author are assigned.

    ``unit_price`` is only meaningful for incoming types; outgoing drafts may
    leave it at zero.
    """

    product_id: int
    timestamp: datetime
    movement_type: MovementType
    quantity: Decimal
    unit_price: Decimal = ZERO
    note: str = ""
    document_ref: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "movement_type", MovementType(self.movement_type))
        object.__setattr__(self, "quantity", to_decimal(self.quantity, "quantity"))
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, "unit_price"))


@dataclass(frozen=True, slots=True)
class Movement:
    """
    Immutable stock movement.

    Use ``Movement.create`` (or ``from_draft``) so that ``total_value`` is
    derived consistently.
    """

    movement_id: int
    product_id: int
    timestamp: datetime
    movement_type: MovementType
    quantity: Decimal
    unit_price: Decimal
    total_value: Decimal
    author_id: int
    note: str = ""
    document_ref: str | None = None

    @property
    def direction(self) -> MovementDirection:
        return self.movement_type.direction

    @classmethod
    def create(
        cls,
        movement_id: int,
        product_id: int,
        timestamp: datetime,
        movement_type: MovementType | str,
        quantity: Decimal | int | str,
        unit_price: Decimal | int | str,
        author_id: int,
        note: str = "",
        document_ref: str | None = None,
    ) -> Movement:
        """Factory that coerces numbers and derives ``total_value``."""
        movement_type = MovementType(movement_type)
        quantity = to_decimal(quantity, "quantity")
        unit_price = to_decimal(unit_price, "unit_price")
        return cls(
            movement_id=movement_id,
            product_id=product_id,
            timestamp=timestamp,
            movement_type=movement_type,
            quantity=quantity,
            unit_price=unit_price,
            total_value=stored_total_value(movement_type, quantity, unit_price),
            author_id=author_id,
            note=note,
            document_ref=document_ref,
        )

    @classmethod
    def from_draft(
        cls, draft: MovementDraft, movement_id: int, author_id: int
    ) -> Movement:
        return cls.create(
            movement_id=movement_id,
            product_id=draft.product_id,
            timestamp=draft.timestamp,
            movement_type=draft.movement_type,
            quantity=draft.quantity,
            unit_price=draft.unit_price,
            author_id=author_id,
            note=draft.note,
            document_ref=draft.document_ref,
        )
