"""
Inventory helpers -- pure functions used by the ledger service.

No I/O, no state.  Timestamps and identifiers are passed in.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from ordering_engines.alerts import evaluate_alert_severity
from ordering_kernel.domain.catalog import CatalogProduct
from ordering_kernel.domain.values import ZERO
from ordering_modules.inventory.models import (
    InventoryAlert,
    InventoryItem,
    InventoryTransaction,
    TransactionType,
)


def create_item_from_catalog(
    product: CatalogProduct,
    alert_threshold: Decimal,
    now: datetime,
    initial_stock: Decimal = ZERO,
) -> InventoryItem:
    """New ledger entry holding a snapshot of ``product``."""
    return InventoryItem(
        product_id=product.id,
        product_name=product.name,
        product_reference=product.reference,
        supplier_name=product.supplier_name,
        unit=product.stock_unit,
        category=product.category,
        current_stock=initial_stock,
        alert_threshold=alert_threshold,
        last_updated=now,
        is_organic=product.is_organic,
        is_egalim=product.is_egalim,
        other_labels=product.other_labels,
    )


def build_alert(item: InventoryItem, alert_id: UUID, now: datetime) -> InventoryAlert | None:
    """Alert for ``item``'s current level, or None when stock is above the threshold."""
    severity = evaluate_alert_severity(item.current_stock, item.alert_threshold)
    if severity is None:
        return None
    return InventoryAlert(
        id=alert_id,
        product_id=item.product_id,
        product_name=item.product_name,
        current_stock=item.current_stock,
        alert_threshold=item.alert_threshold,
        severity=severity,
        created_at=now,
    )


def replay_stock(transactions: Iterable[InventoryTransaction]) -> Decimal:
    """
    Stock level implied by a product's transaction log.

    Adjustments set the level to their ``stock_after``; movements apply
    their absolute quantity in their direction.
    """
    stock = ZERO
    for txn in transactions:
        if txn.type == TransactionType.ADJUSTMENT:
            stock = txn.stock_after
        elif txn.type == TransactionType.IN:
            stock += txn.quantity
        else:
            stock -= txn.quantity
    return stock
