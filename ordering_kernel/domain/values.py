"""
Values -- Decimal amount and quantity helpers.

Responsibility:
    Single place that turns caller input into ``Decimal`` and rounds monetary
    amounts. Order totals, shipping costs, stock quantities and packaging
    coefficients all flow through here so that no float ever reaches the
    ledger.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Failure modes:
    - ValueError when input cannot be represented as a finite Decimal.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
ONE = Decimal("1")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """
    Convert ``value`` to Decimal.

    Floats go through ``str()`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.

    Raises:
        ValueError: if the value is not numeric or not finite.
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Cannot convert boolean {value!r} to Decimal")
    elif isinstance(value, float):
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(value)
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"Cannot convert {value!r} to Decimal") from exc
    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round a monetary amount half-up to cents."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def coefficient_or_one(coefficient: Decimal | None) -> Decimal:
    """Packaging coefficient with the catalog default applied (unset or zero -> 1)."""
    if coefficient is None or coefficient == ZERO:
        return ONE
    return coefficient
