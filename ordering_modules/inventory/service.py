"""
Inventory Module Service (``ordering_modules.inventory.service``).

Responsibility
--------------
``InventoryLedger`` keeps one stock entry per product, appends a
transaction for every successful movement and keeps at most one live
low-stock alert per product.  Entries are created on demand from the
catalog snapshot.

Architecture
------------
Layer: **Modules** -- stateful orchestration.  Holds entries, transactions
and alerts in memory and writes each committed value through the optional
``StateStore``.  Severity evaluation is the pure
``ordering_engines.alerts`` engine.  The ledger never imports the order
module; order receptions reach it through ``ReceptionSyncBridge``.

Invariants
----------
- ``current_stock >= 0`` for every entry.  A stock-out larger than the
  current stock is refused, not clamped.
- Every successful mutation appends exactly one transaction; failed
  mutations append nothing and change nothing.
- After every successful mutation the product's live alerts are cleared
  and at most one new alert is raised.

Failure Modes
-------------
- Movement failures (unknown product, insufficient stock) are returned as
  a failed ``StockMovementResult`` carrying the exception's ``code``.
- ``ValidationError`` -- non-positive movement quantity, negative target
  stock or threshold.
- ``ProductNotFoundError`` -- ``set_alert_threshold`` on an unknown product.
- ``AlertNotFoundError`` -- ``acknowledge_alert`` on an unknown alert.

Usage::

    ledger = InventoryLedger(catalog, clock=clock)
    ledger.add_stock("p-1", Decimal("20"), "Initial count")
    result = ledger.remove_stock("p-1", Decimal("16"), "Service du midi")
    result.alert.severity  # AlertSeverity.LOW
"""

from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Iterable
from uuid import UUID, uuid4

from ordering_kernel.domain.catalog import CatalogAdapter, CatalogProduct
from ordering_kernel.domain.clock import Clock, SystemClock
from ordering_kernel.domain.values import ZERO
from ordering_kernel.exceptions import (
    AlertNotFoundError,
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)
from ordering_kernel.logging_config import LogContext, get_logger
from ordering_kernel.services.state_store import (
    INVENTORY_ALERTS,
    INVENTORY_ITEMS,
    INVENTORY_TRANSACTIONS,
    StateStore,
    persist_quietly,
)
from ordering_modules.inventory.config import InventoryConfig
from ordering_modules.inventory.helpers import (
    build_alert,
    create_item_from_catalog,
    replay_stock,
)
from ordering_modules.inventory.models import (
    InventoryAlert,
    InventoryItem,
    InventoryTransaction,
    ReconciliationReport,
    StockMovementResult,
    StockMovementStatus,
    TransactionType,
)

logger = get_logger("modules.inventory.service")

_FAILURE_STATUS = {
    ProductNotFoundError.code: StockMovementStatus.PRODUCT_NOT_FOUND,
    InsufficientStockError.code: StockMovementStatus.INSUFFICIENT_STOCK,
}


class InventoryLedger:
    """
    Per-product stock ledger.

    Contract
    --------
    Movement methods (``add_stock``, ``remove_stock``, ``adjust_stock``)
    never raise for business failures; they return a ``StockMovementResult``
    so callers on the reception path can log and carry on.

    Non-goals
    ---------
    - Consumption forecasting (``average_consumption`` stays at 0).
    - Refreshing catalog snapshot fields on existing entries.
    """

    def __init__(
        self,
        catalog: CatalogAdapter,
        clock: Clock | None = None,
        config: InventoryConfig | None = None,
        store: StateStore | None = None,
    ):
        self._catalog = catalog
        self._clock = clock or SystemClock()
        self._config = config or InventoryConfig.with_defaults()
        self._store = store
        self._items: dict[str, InventoryItem] = {}
        self._transactions: list[InventoryTransaction] = []
        self._alerts: dict[UUID, InventoryAlert] = {}
        if store is not None:
            self._load(store)

    def _load(self, store: StateStore) -> None:
        for item in store.load_all(INVENTORY_ITEMS):
            self._items[item.product_id] = item
        self._transactions.extend(store.load_all(INVENTORY_TRANSACTIONS))
        for alert in store.load_all(INVENTORY_ALERTS):
            self._alerts[alert.id] = alert
        logger.info(
            "inventory_loaded",
            extra={
                "item_count": len(self._items),
                "transaction_count": len(self._transactions),
                "alert_count": len(self._alerts),
            },
        )

    # -------------------------------------------------------------------------
    # Movements
    # -------------------------------------------------------------------------

    def add_stock(
        self,
        product_id: str,
        quantity: Decimal,
        reason: str,
        order_id: UUID | None = None,
    ) -> StockMovementResult:
        """
        Stock in ``quantity`` of ``product_id``.

        A product with no entry gets one from the catalog, seeded at
        ``quantity``.
        """
        _require_positive(quantity)
        with LogContext.bind(product_id=product_id):
            try:
                item = self._items.get(product_id)
                if item is None:
                    product = self._catalog_product(product_id)
                    before = ZERO
                    updated = create_item_from_catalog(
                        product,
                        self._config.default_alert_threshold,
                        self._clock.now(),
                        initial_stock=quantity,
                    )
                    logger.info(
                        "inventory_item_created",
                        extra={"initial_stock": quantity, "unit": updated.unit},
                    )
                else:
                    before = item.current_stock
                    updated = replace(
                        item,
                        current_stock=item.current_stock + quantity,
                        last_updated=self._clock.now(),
                    )
            except ProductNotFoundError as exc:
                return self._failed(product_id, exc, "add_stock")
            return self._apply(
                updated, before, TransactionType.IN, quantity, reason, order_id,
            )

    def remove_stock(
        self,
        product_id: str,
        quantity: Decimal,
        reason: str,
    ) -> StockMovementResult:
        """Stock out ``quantity``; refused when the entry is missing or too low."""
        _require_positive(quantity)
        with LogContext.bind(product_id=product_id):
            try:
                item = self._items.get(product_id)
                if item is None:
                    raise ProductNotFoundError(product_id)
                if item.current_stock < quantity:
                    raise InsufficientStockError(
                        product_id, str(quantity), str(item.current_stock),
                    )
            except (ProductNotFoundError, InsufficientStockError) as exc:
                return self._failed(product_id, exc, "remove_stock")
            updated = replace(
                item,
                current_stock=item.current_stock - quantity,
                last_updated=self._clock.now(),
            )
            return self._apply(
                updated, item.current_stock, TransactionType.OUT, quantity, reason,
            )

    def adjust_stock(
        self,
        product_id: str,
        new_quantity: Decimal,
        reason: str,
    ) -> StockMovementResult:
        """
        Set the stock of ``product_id`` to ``new_quantity``.

        Records an ``adjustment`` transaction of ``|new_quantity - current|``.
        A product with no entry gets one from the catalog first.
        """
        if new_quantity < ZERO:
            raise ValidationError("new_quantity", "cannot be negative")
        with LogContext.bind(product_id=product_id):
            try:
                item = self._items.get(product_id)
                if item is None:
                    product = self._catalog_product(product_id)
                    item = create_item_from_catalog(
                        product,
                        self._config.default_alert_threshold,
                        self._clock.now(),
                    )
                    logger.info("inventory_item_created", extra={"initial_stock": ZERO})
            except ProductNotFoundError as exc:
                return self._failed(product_id, exc, "adjust_stock")
            updated = replace(
                item, current_stock=new_quantity, last_updated=self._clock.now(),
            )
            return self._apply(
                updated,
                item.current_stock,
                TransactionType.ADJUSTMENT,
                abs(new_quantity - item.current_stock),
                reason,
            )

    # -------------------------------------------------------------------------
    # Thresholds and alerts
    # -------------------------------------------------------------------------

    def set_alert_threshold(self, product_id: str, threshold: Decimal) -> InventoryItem:
        """Change the threshold; alerts are re-evaluated at the next movement only."""
        if threshold < ZERO:
            raise ValidationError("alert_threshold", "cannot be negative")
        item = self._items.get(product_id)
        if item is None:
            raise ProductNotFoundError(product_id)
        updated = replace(item, alert_threshold=threshold)
        self._items[product_id] = updated
        persist_quietly(self._store, INVENTORY_ITEMS, product_id, updated)
        logger.info(
            "alert_threshold_updated",
            extra={
                "product_id": product_id,
                "from_threshold": item.alert_threshold,
                "to_threshold": threshold,
            },
        )
        return updated

    def acknowledge_alert(self, alert_id: UUID) -> InventoryAlert:
        alert = self._alerts.get(alert_id)
        if alert is None:
            raise AlertNotFoundError(str(alert_id))
        if alert.acknowledged:
            return alert
        updated = replace(alert, acknowledged=True)
        self._alerts[alert_id] = updated
        persist_quietly(self._store, INVENTORY_ALERTS, alert_id, updated)
        logger.info(
            "inventory_alert_acknowledged",
            extra={"alert_id": str(alert_id), "product_id": alert.product_id},
        )
        return updated

    def active_alerts(self) -> list[InventoryAlert]:
        """Live alerts nobody has acknowledged yet, oldest first."""
        return [a for a in self._alerts.values() if a.is_live and not a.acknowledged]

    def alert_history(self, product_id: str | None = None) -> list[InventoryAlert]:
        """Every alert ever raised, oldest first."""
        return [
            a for a in self._alerts.values()
            if product_id is None or a.product_id == product_id
        ]

    # -------------------------------------------------------------------------
    # Catalog sync and reconciliation
    # -------------------------------------------------------------------------

    def sync_catalog(
        self,
        products: Iterable[CatalogProduct] | None = None,
    ) -> list[InventoryItem]:
        """
        Create empty entries for catalog products the ledger does not know.

        No transaction is recorded and no alert is raised; existing entries
        are left untouched.
        """
        if products is None:
            products = self._catalog.all_products()
        now = self._clock.now()
        created: list[InventoryItem] = []
        for product in products:
            if product.id in self._items:
                continue
            item = create_item_from_catalog(
                product, self._config.default_alert_threshold, now,
            )
            self._items[product.id] = item
            persist_quietly(self._store, INVENTORY_ITEMS, product.id, item)
            created.append(item)
        logger.info("inventory_catalog_synced", extra={"created_count": len(created)})
        return created

    def reconcile(self, product_id: str) -> ReconciliationReport:
        """Replay the transaction log of ``product_id`` and compare to the ledger."""
        transactions = self.history(product_id)
        report = ReconciliationReport(
            product_id=product_id,
            ledger_stock=self.current_stock(product_id),
            replayed_stock=replay_stock(transactions),
            transaction_count=len(transactions),
        )
        if not report.is_consistent:
            logger.warning(
                "inventory_drift_detected",
                extra={
                    "product_id": product_id,
                    "ledger_stock": report.ledger_stock,
                    "replayed_stock": report.replayed_stock,
                },
            )
        return report

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def history(self, product_id: str | None = None) -> list[InventoryTransaction]:
        """Transactions oldest-first, optionally for one product."""
        return [
            t for t in self._transactions
            if product_id is None or t.product_id == product_id
        ]

    def current_stock(self, product_id: str) -> Decimal:
        item = self._items.get(product_id)
        return item.current_stock if item else ZERO

    def get_item(self, product_id: str) -> InventoryItem | None:
        return self._items.get(product_id)

    def all_items(self) -> list[InventoryItem]:
        return list(self._items.values())

    def find_catalog_product(self, product_id: str) -> CatalogProduct | None:
        return self._catalog.find_product(product_id)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _catalog_product(self, product_id: str) -> CatalogProduct:
        product = self._catalog.find_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _apply(
        self,
        updated: InventoryItem,
        stock_before: Decimal,
        txn_type: TransactionType,
        quantity: Decimal,
        reason: str,
        order_id: UUID | None = None,
    ) -> StockMovementResult:
        now = self._clock.now()
        transaction = InventoryTransaction(
            id=uuid4(),
            product_id=updated.product_id,
            product_name=updated.product_name,
            type=txn_type,
            quantity=quantity,
            reason=reason,
            created_at=now,
            created_by=self._config.transaction_actor,
            stock_before=stock_before,
            stock_after=updated.current_stock,
            order_id=order_id,
        )

        cleared = [
            replace(a, cleared_at=now)
            for a in self._alerts.values()
            if a.product_id == updated.product_id and a.is_live
        ]
        alert = build_alert(updated, uuid4(), now)

        self._items[updated.product_id] = updated
        self._transactions.append(transaction)
        for old in cleared:
            self._alerts[old.id] = old
        if alert is not None:
            self._alerts[alert.id] = alert

        persist_quietly(self._store, INVENTORY_ITEMS, updated.product_id, updated)
        persist_quietly(self._store, INVENTORY_TRANSACTIONS, transaction.id, transaction)
        for old in cleared:
            persist_quietly(self._store, INVENTORY_ALERTS, old.id, old)
        if alert is not None:
            persist_quietly(self._store, INVENTORY_ALERTS, alert.id, alert)

        logger.info(
            "stock_movement_applied",
            extra={
                "transaction_type": txn_type.value,
                "quantity": quantity,
                "stock_before": stock_before,
                "stock_after": updated.current_stock,
                "reason": reason,
                "order_id": str(order_id) if order_id else None,
            },
        )
        if alert is not None:
            logger.warning(
                "inventory_alert_raised",
                extra={
                    "alert_id": str(alert.id),
                    "severity": alert.severity.value,
                    "current_stock": alert.current_stock,
                    "alert_threshold": alert.alert_threshold,
                },
            )
        return StockMovementResult(
            status=StockMovementStatus.APPLIED,
            product_id=updated.product_id,
            item=updated,
            transaction=transaction,
            alert=alert,
        )

    def _failed(self, product_id: str, exc, operation: str) -> StockMovementResult:
        logger.warning(
            "stock_movement_refused",
            extra={"operation": operation, "error_code": exc.code, "detail": str(exc)},
        )
        return StockMovementResult(
            status=_FAILURE_STATUS[exc.code],
            product_id=product_id,
            item=self._items.get(product_id),
            error_code=exc.code,
            message=str(exc),
        )


def _require_positive(quantity: Decimal) -> None:
    if quantity <= ZERO:
        raise ValidationError("quantity", "must be positive")
