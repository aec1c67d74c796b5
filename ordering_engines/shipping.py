"""
Module: ordering_engines.shipping
Responsibility:
    Select the shipping cost for an order subtotal from a supplier's tiered
    schedule.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Tiers are evaluated in ascending ``min_amount`` order.
    - A tier matches when ``min_amount <= amount < max_amount``; an absent
      ``max_amount`` is unbounded above.
    - No matching tier falls back to the tier with the highest
      ``min_amount``; an empty schedule costs 0.

Usage:
    tiers = (
        ShippingTierSpec(Decimal("0"), Decimal("50"), Decimal("15")),
        ShippingTierSpec(Decimal("50"), Decimal("100"), Decimal("10")),
        ShippingTierSpec(Decimal("100"), None, Decimal("0")),
    )
    select_shipping_cost(tiers, amount=Decimal("50.00"))  # Decimal("10")
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from ordering_engines.tracer import traced_engine
from ordering_kernel.domain.values import ZERO


@dataclass(frozen=True)
class ShippingTierSpec:
    """One band of a tier schedule: [min_amount, max_amount) -> shipping_cost."""

    min_amount: Decimal
    max_amount: Decimal | None
    shipping_cost: Decimal

    def contains(self, amount: Decimal) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount < self.max_amount


def sort_tiers(tiers: Sequence[ShippingTierSpec]) -> list[ShippingTierSpec]:
    return sorted(tiers, key=lambda t: t.min_amount)


@traced_engine("shipping", "1.0", fingerprint_fields=("amount",))
def select_shipping_cost(
    tiers: Sequence[ShippingTierSpec],
    *,
    amount: Decimal,
) -> Decimal:
    """
    Shipping cost for ``amount`` under ``tiers``.

    Postconditions:
        Returns the cost of the first ascending tier containing ``amount``,
        else the cost of the highest tier, else ``Decimal("0")``.
    """
    ordered = sort_tiers(tiers)
    if not ordered:
        return ZERO
    for tier in ordered:
        if tier.contains(amount):
            return tier.shipping_cost
    return ordered[-1].shipping_cost
