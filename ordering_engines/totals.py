"""
Module: ordering_engines.totals
Responsibility:
    Compute an order's pre-tax and tax-inclusive totals from its lines and
    shipping cost.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - subtotal_ht = sum(price_ht * quantity)
    - total_ht = subtotal_ht + shipping_cost
    - total_ttc = total_ht * (1 + vat_rate)
    - Every returned amount is rounded half-up to cents; the VAT multiplier
      is applied to the rounded total_ht.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ordering_engines.tracer import traced_engine
from ordering_kernel.domain.values import ONE, ZERO, round_money


@dataclass(frozen=True)
class OrderTotals:
    subtotal_ht: Decimal
    shipping_cost: Decimal
    total_ht: Decimal
    total_ttc: Decimal


def line_subtotal(lines: Iterable[tuple[Decimal, Decimal]]) -> Decimal:
    """Sum of ``price_ht * quantity`` over ``(price_ht, quantity)`` pairs, unrounded."""
    return sum((price * qty for price, qty in lines), ZERO)


@traced_engine("order_totals", "1.0", fingerprint_fields=("shipping_cost", "vat_rate"))
def compute_order_totals(
    lines: Iterable[tuple[Decimal, Decimal]],
    *,
    shipping_cost: Decimal,
    vat_rate: Decimal,
) -> OrderTotals:
    """
    Totals for ``(price_ht, quantity)`` lines plus shipping.

    Raises:
        ValueError: if ``vat_rate`` or ``shipping_cost`` is negative.
    """
    if vat_rate < ZERO:
        raise ValueError(f"vat_rate cannot be negative (got {vat_rate})")
    if shipping_cost < ZERO:
        raise ValueError(f"shipping_cost cannot be negative (got {shipping_cost})")

    subtotal = round_money(line_subtotal(lines))
    total_ht = round_money(subtotal + shipping_cost)
    total_ttc = round_money(total_ht * (ONE + vat_rate))
    return OrderTotals(
        subtotal_ht=subtotal,
        shipping_cost=round_money(shipping_cost),
        total_ht=total_ht,
        total_ttc=total_ttc,
    )
