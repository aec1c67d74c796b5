"""
Inventory Module (``ordering_modules.inventory``).

Responsibility
--------------
Per-product stock ledger with alert thresholds and an append-only
transaction log, plus dated consumption and stock-error write-offs.

Architecture
------------
Layer: **Modules**.  Imports ``ordering_kernel`` and ``ordering_engines``.
MUST NOT import ``ordering_modules.orders``: receptions arrive through
``ordering_services.reception_sync``.

Invariants
----------
- Stock is never negative.
- Every successful movement appends exactly one transaction.
- At most one live alert per product.
"""

from ordering_modules.inventory.config import InventoryConfig
from ordering_modules.inventory.consumption import StockConsumptionService
from ordering_modules.inventory.models import (
    InventoryAlert,
    InventoryItem,
    InventoryTransaction,
    ReconciliationReport,
    StockErrorReport,
    StockErrorType,
    StockMovementResult,
    StockMovementStatus,
    TransactionType,
)
from ordering_modules.inventory.service import InventoryLedger

__all__ = [
    "InventoryConfig",
    "StockConsumptionService",
    "InventoryAlert",
    "InventoryItem",
    "InventoryTransaction",
    "ReconciliationReport",
    "StockErrorReport",
    "StockErrorType",
    "StockMovementResult",
    "StockMovementStatus",
    "TransactionType",
    "InventoryLedger",
]
