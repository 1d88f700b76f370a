"""
Values -- Decimal coercion and rounding for quantities and amounts.

Responsibility:
    Single place where raw numeric input becomes ``Decimal``.  Every
    quantity, unit price and monetary amount in the kernel and engines is a
    ``Decimal``; floats are refused at this boundary.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - No floats: ``to_decimal`` raises TypeError for float input.
    - No implicit rounding: engines keep full Decimal precision; rounding is
      applied only by callers through ``round_money``.

Failure modes:
    - TypeError for float or non-numeric types.
    - ValueError for strings that are not numbers (or NaN/Infinity).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")

DEFAULT_MONEY_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """
    Coerce ``value`` to ``Decimal``.

    Preconditions:
        value is a Decimal, int or numeric string.  bool is not accepted.

    Raises:
        TypeError: for floats and any other type.
        ValueError: for unparseable strings or non-finite values.
    """
    if isinstance(value, bool):
        raise TypeError(f"{field} must be numeric, got bool")
    if isinstance(value, float):
        raise TypeError(
            f"{field} must not be a float (use Decimal or str), got {value!r}"
        )
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation as e:
            raise ValueError(f"{field} is not a number: {value!r}") from e
    else:
        raise TypeError(f"{field} must be Decimal, int or str, got {type(value).__name__}")

    if not result.is_finite():
        raise ValueError(f"{field} must be finite, got {value!r}")
    return result


def round_money(
    value: Decimal,
    decimal_places: int = DEFAULT_MONEY_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value for display.

    The engine never calls this; balances keep full precision so that
    replaying the same movements is exact.
    """
    quantize_str = "1" if decimal_places == 0 else "0." + "0" * decimal_places
    return value.quantize(Decimal(quantize_str), rounding=rounding)
