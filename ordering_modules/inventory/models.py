"""
Inventory Domain Models (``ordering_modules.inventory.models``).

Responsibility
--------------
Frozen value objects for the stock ledger: per-product ledger entries,
the append-only transaction log, stock alerts, stock-error reports and the
result object every ledger mutation returns.

Architecture
------------
Layer: **Modules** -- pure domain data structures.  All dataclasses are
``frozen=True``; ``InventoryLedger`` replaces entries as a whole.

Invariants
----------
- ``InventoryItem.current_stock`` is never negative.
- ``InventoryTransaction.quantity`` is the absolute movement size; the
  direction is carried by ``type`` and by ``stock_before``/``stock_after``.
- An alert is live until ``cleared_at`` is set.  At most one live alert
  exists per product.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ordering_engines.alerts import AlertSeverity
from ordering_kernel.domain.catalog import ProductCategory
from ordering_kernel.logging_config import get_logger

logger = get_logger("modules.inventory.models")


class TransactionType(str, Enum):
    """Direction of a ledger movement."""
    IN = "in"
    OUT = "out"
    ADJUSTMENT = "adjustment"


class StockErrorType(str, Enum):
    """Why stock was written off outside normal consumption."""
    EXPIRED = "expired"
    DAMAGED = "damaged"
    UNPACKING_ISSUE = "unpacking_issue"
    QUALITY_ISSUE = "quality_issue"
    OTHER = "other"


class StockMovementStatus(str, Enum):
    """Outcome of a ledger mutation."""
    APPLIED = "applied"
    PRODUCT_NOT_FOUND = "product_not_found"
    INSUFFICIENT_STOCK = "insufficient_stock"


@dataclass(frozen=True)
class InventoryItem:
    """
    Ledger entry for one product.

    The catalog fields are a snapshot taken when the entry was created and
    are not refreshed afterwards.
    """
    product_id: str
    product_name: str
    product_reference: str
    supplier_name: str
    unit: str
    category: ProductCategory
    current_stock: Decimal
    alert_threshold: Decimal
    last_updated: datetime
    is_organic: bool = False
    is_egalim: bool = False
    other_labels: str | None = None
    average_consumption: Decimal = Decimal("0")

    def __post_init__(self):
        if self.current_stock < 0:
            raise ValueError(
                f"current_stock cannot be negative for {self.product_id} "
                f"(got {self.current_stock})"
            )

    @property
    def is_below_threshold(self) -> bool:
        return self.current_stock <= self.alert_threshold


@dataclass(frozen=True)
class InventoryTransaction:
    """One append-only entry of the stock log."""
    id: UUID
    product_id: str
    product_name: str
    type: TransactionType
    quantity: Decimal
    reason: str
    created_at: datetime
    created_by: str
    stock_before: Decimal
    stock_after: Decimal
    order_id: UUID | None = None

    @property
    def signed_delta(self) -> Decimal:
        return self.stock_after - self.stock_before


@dataclass(frozen=True)
class InventoryAlert:
    """Low-stock alert raised by the ledger."""
    id: UUID
    product_id: str
    product_name: str
    current_stock: Decimal
    alert_threshold: Decimal
    severity: AlertSeverity
    created_at: datetime
    acknowledged: bool = False
    cleared_at: datetime | None = None

    @property
    def is_live(self) -> bool:
        return self.cleared_at is None


@dataclass(frozen=True)
class StockErrorReport:
    """Write-off of damaged, expired or otherwise unusable stock."""
    id: UUID
    product_id: str
    product_name: str
    product_reference: str
    error_type: StockErrorType
    quantity: Decimal
    unit: str
    description: str
    reported_at: datetime
    reported_by: str
    supplier_name: str
    estimated_value: Decimal


@dataclass(frozen=True)
class StockMovementResult:
    """
    Result of a ledger mutation.

    Failures carry the machine-readable ``error_code`` of the typed
    exception that caused them and leave ``transaction`` unset.
    """
    status: StockMovementStatus
    product_id: str
    item: InventoryItem | None = None
    transaction: InventoryTransaction | None = None
    alert: InventoryAlert | None = None
    error_code: str | None = None
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == StockMovementStatus.APPLIED


@dataclass(frozen=True)
class ReconciliationReport:
    """Replay of a product's transaction log against its ledger entry."""
    product_id: str
    ledger_stock: Decimal
    replayed_stock: Decimal
    transaction_count: int

    @property
    def drift(self) -> Decimal:
        return self.ledger_stock - self.replayed_stock

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0
