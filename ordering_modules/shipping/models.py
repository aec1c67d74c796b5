"""
Shipping Domain Models (``ordering_modules.shipping.models``).

Frozen value objects for supplier shipping schedules.  A schedule is a set
of half-open amount bands ``[min_amount, max_amount)`` each carrying a flat
shipping cost; ``max_amount=None`` is unbounded above.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ordering_engines.shipping import ShippingTierSpec


@dataclass(frozen=True)
class ShippingTier:
    """One band of a supplier's schedule."""
    min_amount: Decimal
    max_amount: Decimal | None
    shipping_cost: Decimal

    def to_spec(self) -> ShippingTierSpec:
        return ShippingTierSpec(
            min_amount=self.min_amount,
            max_amount=self.max_amount,
            shipping_cost=self.shipping_cost,
        )


@dataclass(frozen=True)
class SupplierShipping:
    """A supplier's complete shipping schedule."""
    supplier_id: str
    supplier_name: str
    tiers: tuple[ShippingTier, ...]
    created_at: datetime
    updated_at: datetime

    @property
    def tier_specs(self) -> tuple[ShippingTierSpec, ...]:
        return tuple(t.to_spec() for t in self.tiers)
