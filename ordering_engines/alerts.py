"""
Module: ordering_engines.alerts
Responsibility:
    Decide whether a stock level warrants an alert and at which severity.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - stock <= threshold raises an alert; above the threshold there is none.
    - Severity is CRITICAL iff stock == 0, LOW otherwise.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from ordering_kernel.domain.values import ZERO


class AlertSeverity(str, Enum):
    """Stock alert severity."""
    LOW = "low"
    CRITICAL = "critical"


def evaluate_alert_severity(
    current_stock: Decimal,
    alert_threshold: Decimal,
) -> AlertSeverity | None:
    """Severity for ``current_stock`` against ``alert_threshold``, or None when no alert applies."""
    if current_stock > alert_threshold:
        return None
    if current_stock == ZERO:
        return AlertSeverity.CRITICAL
    return AlertSeverity.LOW
