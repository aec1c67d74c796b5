"""
Shipping Module Service (``ordering_modules.shipping.service``).

Responsibility
--------------
``ShippingScheduleRegistry`` owns the supplier schedules (create, update,
delete, lookup) and validates them.  Every change is written through the
``StateStore`` seam so schedules survive a reload.
``ShippingCostCalculator`` prices an order subtotal for a supplier by
delegating tier selection to ``ordering_engines.shipping.select_shipping_cost``.

Invariants
----------
- A schedule has between one and ``max_tiers`` tiers.
- Every tier has non-negative amounts and ``max_amount > min_amount``
  when ``max_amount`` is set.
- A supplier without a schedule ships for free.
- The store mirrors the registry: a saved schedule is persisted under its
  supplier id and a deleted one is removed.

Failure Modes
-------------
- ``InvalidShippingScheduleError`` on a malformed schedule.
- ``KeyError``-free lookups: unknown suppliers return ``None`` / cost 0.
- Store failures are logged by the quiet helpers; the in-memory registry
  stays authoritative.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ordering_engines.shipping import select_shipping_cost
from ordering_kernel.domain.clock import Clock, SystemClock
from ordering_kernel.domain.values import ZERO
from ordering_kernel.exceptions import InvalidShippingScheduleError
from ordering_kernel.logging_config import get_logger
from ordering_kernel.services.state_store import (
    SHIPPING_SCHEDULES,
    StateStore,
    delete_quietly,
    persist_quietly,
)
from ordering_modules.shipping.models import ShippingTier, SupplierShipping

logger = get_logger("modules.shipping.service")

DEFAULT_MAX_TIERS = 4


class ShippingScheduleRegistry:
    """Registry of supplier shipping schedules, optionally backed by a store."""

    def __init__(
        self,
        clock: Clock | None = None,
        max_tiers: int = DEFAULT_MAX_TIERS,
        store: StateStore | None = None,
    ):
        if max_tiers <= 0:
            raise ValueError("max_tiers must be positive")
        self._clock = clock or SystemClock()
        self._max_tiers = max_tiers
        self._schedules: dict[str, SupplierShipping] = {}
        self._store = store
        if store is not None:
            for schedule in store.load_all(SHIPPING_SCHEDULES):
                self._schedules[schedule.supplier_id] = schedule

    @property
    def max_tiers(self) -> int:
        return self._max_tiers

    def _validate(self, supplier_id: str, tiers: tuple[ShippingTier, ...]) -> None:
        if not supplier_id:
            raise InvalidShippingScheduleError(supplier_id, "supplier_id is required")
        if not tiers:
            raise InvalidShippingScheduleError(supplier_id, "at least one tier is required")
        if len(tiers) > self._max_tiers:
            raise InvalidShippingScheduleError(
                supplier_id,
                f"{len(tiers)} tiers exceeds the maximum of {self._max_tiers}",
            )
        for tier in tiers:
            if tier.min_amount < ZERO or tier.shipping_cost < ZERO:
                raise InvalidShippingScheduleError(
                    supplier_id, "tier amounts and costs cannot be negative",
                )
            if tier.max_amount is not None and tier.max_amount <= tier.min_amount:
                raise InvalidShippingScheduleError(
                    supplier_id,
                    f"max_amount {tier.max_amount} must exceed min_amount {tier.min_amount}",
                )

    def create_schedule(
        self,
        supplier_id: str,
        supplier_name: str,
        tiers: Iterable[ShippingTier],
    ) -> SupplierShipping:
        """Create or replace a supplier's schedule."""
        tiers = tuple(sorted(tiers, key=lambda t: t.min_amount))
        self._validate(supplier_id, tiers)
        now = self._clock.now()
        existing = self._schedules.get(supplier_id)
        schedule = SupplierShipping(
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            tiers=tiers,
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )
        self._schedules[supplier_id] = schedule
        persist_quietly(self._store, SHIPPING_SCHEDULES, supplier_id, schedule)
        logger.info(
            "shipping_schedule_saved",
            extra={"supplier_id": supplier_id, "tier_count": len(tiers)},
        )
        return schedule

    def update_schedule(
        self,
        supplier_id: str,
        tiers: Iterable[ShippingTier],
        supplier_name: str | None = None,
    ) -> SupplierShipping:
        """Replace the tiers of an existing schedule."""
        existing = self._schedules.get(supplier_id)
        if existing is None:
            raise InvalidShippingScheduleError(supplier_id, "no schedule to update")
        return self.create_schedule(
            supplier_id, supplier_name or existing.supplier_name, tiers,
        )

    def delete_schedule(self, supplier_id: str) -> bool:
        removed = self._schedules.pop(supplier_id, None) is not None
        if removed:
            delete_quietly(self._store, SHIPPING_SCHEDULES, supplier_id)
            logger.info("shipping_schedule_deleted", extra={"supplier_id": supplier_id})
        return removed

    def get_schedule(self, supplier_id: str) -> SupplierShipping | None:
        return self._schedules.get(supplier_id)

    def all_schedules(self) -> tuple[SupplierShipping, ...]:
        return tuple(self._schedules.values())


class ShippingCostCalculator:
    """Prices a subtotal against the registry's schedule for a supplier."""

    def __init__(self, registry: ShippingScheduleRegistry):
        self._registry = registry

    def cost(self, supplier_id: str, amount: Decimal) -> Decimal:
        schedule = self._registry.get_schedule(supplier_id)
        if schedule is None:
            return ZERO
        return select_shipping_cost(schedule.tier_specs, amount=amount)
