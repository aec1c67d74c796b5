"""
Shipping Module (``ordering_modules.shipping``).

Supplier shipping schedules and the calculator that prices an order
subtotal against them.  Tier selection itself is the pure
``ordering_engines.shipping`` engine.
"""

from ordering_modules.shipping.models import ShippingTier, SupplierShipping
from ordering_modules.shipping.service import (
    ShippingCostCalculator,
    ShippingScheduleRegistry,
)

__all__ = [
    "ShippingTier",
    "SupplierShipping",
    "ShippingCostCalculator",
    "ShippingScheduleRegistry",
]
