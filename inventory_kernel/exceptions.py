"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the mutation handlers need to tell a rejected movement apart from
a missing product or a missing movement without parsing message strings:

    try:
        service.add_movement(draft, actor_id=user.id)
    except MissingUnitPriceError as e:
        form.flag(e.field, e.code)
    except ProductNotFoundError as e:
        notify(f"Product {e.product_id} does not exist")

Every exception:
  1. Is a TYPED class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (not just a message string)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidQuantityError
    |   +-- MissingUnitPriceError
    |   +-- InvalidUnitPriceError
    |   +-- InvalidTimestampError
    |   +-- InvalidProductDefinitionError
    |
    +-- ReferentialError
    |   +-- ProductNotFoundError
    |
    +-- NotFoundError
        +-- MovementNotFoundError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                        | When Raised
-------------|-----------------------------|-------------------------------------
Validation   | INVALID_QUANTITY            | Movement quantity <= 0
             | MISSING_UNIT_PRICE          | Entry/Return without a positive price
             | INVALID_UNIT_PRICE          | Negative unit price
             | INVALID_TIMESTAMP           | Movement timestamp without a timezone
             | INVALID_PRODUCT_DEFINITION  | Blank description/unit, negative min
-------------|-----------------------------|-------------------------------------
Referential  | PRODUCT_NOT_FOUND           | Movement references unknown product
-------------|-----------------------------|-------------------------------------
Not found    | MOVEMENT_NOT_FOUND          | Update/delete of unknown movement id

===============================================================================
WHAT IS NOT AN ERROR
===============================================================================

A negative balance is a business signal, not a fault. The accumulator keeps
it as-is and the alerts engine reports it (AlertKind.NEGATIVE_BALANCE).

Movements that reference a product missing from the directory are skipped
during bulk replay (recompute and ledger). Historical data may reference a
deleted product; only ``add_movement``/``update_movement`` raise
ProductNotFoundError.
"""

from datetime import datetime
from decimal import Decimal


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Validation exceptions


class ValidationError(InventoryKernelError):
    """Base exception for rejected input at the mutation boundary."""

    code: str = "VALIDATION_ERROR"


class InvalidQuantityError(ValidationError):
    """Movement quantity must be strictly positive."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, quantity: Decimal):
        self.field = "quantity"
        self.quantity = quantity
        super().__init__(f"Movement quantity must be positive, got {quantity}")


class MissingUnitPriceError(ValidationError):
    """Entry and Return movements require a positive unit price."""

    code: str = "MISSING_UNIT_PRICE"

    def __init__(self, movement_type: str, unit_price: Decimal):
        self.field = "unit_price"
        self.movement_type = movement_type
        self.unit_price = unit_price
        super().__init__(
            f"Movement type {movement_type} requires a positive unit price, "
            f"got {unit_price}"
        )


class InvalidUnitPriceError(ValidationError):
    """Unit price can never be negative."""

    code: str = "INVALID_UNIT_PRICE"

    def __init__(self, unit_price: Decimal):
        self.field = "unit_price"
        self.unit_price = unit_price
        super().__init__(f"Unit price cannot be negative, got {unit_price}")


class InvalidTimestampError(ValidationError):
    """Movement timestamps must be timezone-aware."""

    code: str = "INVALID_TIMESTAMP"

    def __init__(self, timestamp: datetime):
        self.field = "timestamp"
        self.timestamp = timestamp
        super().__init__(f"Movement timestamp must carry a timezone, got {timestamp}")


class InvalidProductDefinitionError(ValidationError):
    """Product static attributes failed validation."""

    code: str = "INVALID_PRODUCT_DEFINITION"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid product definition ({field}): {reason}")


# Referential exceptions


class ReferentialError(InventoryKernelError):
    """Base exception for references to entities that do not exist."""

    code: str = "REFERENTIAL_ERROR"


class ProductNotFoundError(ReferentialError):
    """Movement references a product that is not in the directory."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


# Not-found exceptions


class NotFoundError(InventoryKernelError):
    """Base exception for lookups of records that do not exist."""

    code: str = "NOT_FOUND"


class MovementNotFoundError(NotFoundError):
    """Movement with the given id does not exist."""

    code: str = "MOVEMENT_NOT_FOUND"

    def __init__(self, movement_id: int):
        self.movement_id = movement_id
        super().__init__(f"Movement not found: {movement_id}")
