"""
Module: ordering_engines
Responsibility:
    Pure calculation engines of the ordering core: shipping tier selection,
    order totals, and stock alert evaluation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ordering_kernel.domain (and sibling engine modules).
    MUST NOT import ordering_services or ordering_modules.

Invariants enforced:
    - Purity: engines never read the clock.  Timestamps are passed in.
    - Decimal-only arithmetic.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from ordering_engines.shipping import ShippingTierSpec, select_shipping_cost
    from ordering_engines.totals import compute_order_totals
    from ordering_engines.alerts import AlertSeverity, evaluate_alert_severity
"""

from ordering_engines.alerts import AlertSeverity, evaluate_alert_severity
from ordering_engines.shipping import ShippingTierSpec, select_shipping_cost
from ordering_engines.totals import OrderTotals, compute_order_totals

__all__ = [
    "AlertSeverity",
    "evaluate_alert_severity",
    "ShippingTierSpec",
    "select_shipping_cost",
    "OrderTotals",
    "compute_order_totals",
]
