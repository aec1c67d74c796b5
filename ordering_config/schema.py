"""
Configuration schema (``ordering_config.schema``).

Responsibility
--------------
Frozen dataclasses describing one configuration set of the ordering core:
tax and currency settings, ledger defaults, order workflow policy, supplier
shipping schedules and client references.

Architecture position
---------------------
**Config layer** -- pure data.  No I/O; no dependency on kernel or modules.

Invariants enforced
-------------------
* ``vat_rate`` is in [0, 1).
* ``default_alert_threshold`` is non-negative.
* ``status_transition_policy`` is ``strict`` or ``permissive``.
* ``max_shipping_tiers`` is positive.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

VALID_TRANSITION_POLICIES = frozenset({"strict", "permissive"})


@dataclass(frozen=True)
class ShippingTierDef:
    min_amount: Decimal
    max_amount: Decimal | None
    shipping_cost: Decimal


@dataclass(frozen=True)
class ShippingScheduleDef:
    supplier_id: str
    supplier_name: str
    tiers: tuple[ShippingTierDef, ...]


@dataclass(frozen=True)
class SupplierReferenceDef:
    client_id: str
    supplier_id: str
    client_reference: str
    preferred_delivery_days: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlatformConfig:
    """One assembled configuration set."""

    config_id: str
    version: int
    currency: str
    vat_rate: Decimal
    default_alert_threshold: Decimal
    status_transition_policy: str
    max_shipping_tiers: int
    transaction_actor: str
    database_url: str | None
    shipping_schedules: tuple[ShippingScheduleDef, ...] = ()
    supplier_references: tuple[SupplierReferenceDef, ...] = ()
    checksum: str = ""

    def __post_init__(self) -> None:
        if not (Decimal("0") <= self.vat_rate < Decimal("1")):
            raise ValueError(f"vat_rate must be in [0, 1), got {self.vat_rate}")
        if self.default_alert_threshold < 0:
            raise ValueError("default_alert_threshold cannot be negative")
        if self.status_transition_policy not in VALID_TRANSITION_POLICIES:
            raise ValueError(
                f"status_transition_policy must be one of "
                f"{sorted(VALID_TRANSITION_POLICIES)}, got '{self.status_transition_policy}'"
            )
        if self.max_shipping_tiers <= 0:
            raise ValueError("max_shipping_tiers must be positive")
