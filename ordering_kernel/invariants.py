"""
Kernel Invariants Contract.

These invariants are structural law for the ordering core. No configuration
value may switch them off.

This module exists solely to declare them explicitly. Enforcement is
distributed across OrderService, InventoryLedger, ReceptionSyncBridge and
ProductUpdateService, and is checked by the test suite.
"""

from enum import Enum, unique


@unique
class OrderingInvariant(str, Enum):
    """Non-configurable invariants enforced by the ordering core."""

    NON_NEGATIVE_STOCK = "non_negative_stock"
    """current_stock >= 0 for every ledger entry. Stock-outs larger than the
    available stock are rejected, never clamped."""

    APPEND_ONLY_TRANSACTIONS = "append_only_transactions"
    """Inventory transactions are never edited or removed. Every successful
    ledger mutation appends exactly one."""

    SINGLE_LIVE_ALERT = "single_live_alert"
    """At most one live alert per product; recomputation drops the previous
    one before raising a new one."""

    IDEMPOTENT_RECEPTION = "idempotent_reception"
    """An order line is received at most once. A second reception is a
    no-op with no notification and no stock-in."""

    TOTALS_RECONCILE = "totals_reconcile"
    """total_ht == subtotal + shipping tier cost and
    total_ttc == total_ht * (1 + vat_rate), both rounded to cents."""

    BATCH_COUNTERS_CONSISTENT = "batch_counters_consistent"
    """An import batch's counters equal the tally of its requests' statuses."""

    ONE_DIRECTIONAL_SYNC = "one_directional_sync"
    """Orders reach inventory only through notifications; inventory never
    imports or calls into the order module."""


ALL_ORDERING_INVARIANTS: frozenset[OrderingInvariant] = frozenset(OrderingInvariant)

# The kernel package may not import from these packages.
# Enforced by tests/architecture/test_import_boundaries.py.
FORBIDDEN_KERNEL_IMPORTS: tuple[str, ...] = (
    "ordering_engines",
    "ordering_modules",
    "ordering_services",
    "ordering_config",
)

# The inventory module may not import the order module (and vice versa).
FORBIDDEN_INVENTORY_IMPORTS: tuple[str, ...] = ("ordering_modules.orders",)
FORBIDDEN_ORDERS_IMPORTS: tuple[str, ...] = ("ordering_modules.inventory",)
