"""
Ordering platform (``ordering_services.platform``).

Responsibility:
    Composition root and command/query surface of the ordering core.
    Builds every module service exactly once from a ``PlatformConfig``,
    wires the notification bus and the reception bridge, and validates
    command input at the boundary before delegating.

Architecture position:
    Services -- top of the stack.  The only place where module services
    are constructed; a presentation layer talks to this class only.

Invariants enforced:
    - Boundary validation: quantities and received prices must be positive
      decimals, thresholds and target stock non-negative, reasons non-blank.
      Converted values are what the services receive.  Violations raise
      ``ValidationError`` before any service is called.
    - Reception stock-in: the bridge is attached before the first command,
      so every reception reaches the ledger.

Failure modes:
    - ``ValidationError`` for malformed input.
    - Typed errors from the module services propagate unchanged.

Usage:
    platform = OrderingPlatform.from_config(get_active_config(), catalog)
    orders = platform.create_orders_from_cart(cart, client)
    platform.receive_all_items(orders[0].id)
    platform.current_stock("p-1")
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence
from uuid import UUID

from ordering_config import PlatformConfig
from ordering_kernel.domain.catalog import CatalogAdapter
from ordering_kernel.domain.clock import Clock, SystemClock
from ordering_kernel.domain.values import ZERO, to_decimal
from ordering_kernel.exceptions import ValidationError
from ordering_kernel.logging_config import get_logger
from ordering_kernel.services.notification_bus import NotificationBus
from ordering_kernel.services.state_store import InMemoryStateStore, StateStore
from ordering_modules.inventory.config import InventoryConfig
from ordering_modules.inventory.consumption import StockConsumptionService
from ordering_modules.inventory.models import (
    InventoryAlert,
    InventoryItem,
    InventoryTransaction,
    StockErrorReport,
    StockErrorType,
    StockMovementResult,
)
from ordering_modules.inventory.service import InventoryLedger
from ordering_modules.orders.config import OrdersConfig
from ordering_modules.orders.models import (
    CartLine,
    ClientInfo,
    Order,
    OrderStatus,
    ReceptionData,
)
from ordering_modules.orders.references import (
    InMemorySupplierReferences,
    SupplierReference,
    SupplierReferenceLookup,
)
from ordering_modules.orders.service import OrderService
from ordering_modules.product_updates.models import ImportBatch, ProductUpdateRequest
from ordering_modules.product_updates.service import ProductUpdateService
from ordering_modules.shipping.models import ShippingTier, SupplierShipping
from ordering_modules.shipping.service import (
    ShippingCostCalculator,
    ShippingScheduleRegistry,
)
from ordering_services.persistence import SqlStateStore
from ordering_services.reception_sync import ReceptionSyncBridge

logger = get_logger("services.platform")


def _positive(field: str, value: Any) -> Decimal:
    amount = _decimal(field, value)
    if amount <= ZERO:
        raise ValidationError(field, f"must be positive (got {amount})")
    return amount


def _non_negative(field: str, value: Any) -> Decimal:
    amount = _decimal(field, value)
    if amount < ZERO:
        raise ValidationError(field, f"cannot be negative (got {amount})")
    return amount


def _decimal(field: str, value: Any) -> Decimal:
    try:
        return to_decimal(value)
    except (ValueError, TypeError) as exc:
        raise ValidationError(field, str(exc)) from exc


def _text(field: str, value: str | None) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(field, "is required")
    return str(value).strip()


class OrderingPlatform:
    """
    Central wiring of the ordering core.

    All services are available as properties for callers that need the
    full module API; the methods below are the supported command and query
    surface.
    """

    def __init__(
        self,
        catalog: CatalogAdapter,
        clock: Clock | None = None,
        orders_config: OrdersConfig | None = None,
        inventory_config: InventoryConfig | None = None,
        shipping_registry: ShippingScheduleRegistry | None = None,
        references: SupplierReferenceLookup | None = None,
        store: StateStore | None = None,
    ):
        self._catalog = catalog
        self._clock = clock or SystemClock()
        self._store = store if store is not None else InMemoryStateStore()
        self._bus = NotificationBus()
        self._shipping_registry = shipping_registry or ShippingScheduleRegistry(
            self._clock, store=self._store,
        )
        self._shipping = ShippingCostCalculator(self._shipping_registry)
        self._orders = OrderService(
            catalog,
            self._shipping,
            self._bus,
            clock=self._clock,
            config=orders_config,
            references=references,
            store=self._store,
        )
        self._ledger = InventoryLedger(
            catalog, clock=self._clock, config=inventory_config, store=self._store,
        )
        self._consumption = StockConsumptionService(
            self._ledger, clock=self._clock, store=self._store,
        )
        self._product_updates = ProductUpdateService(
            catalog, self._bus, clock=self._clock, store=self._store,
        )
        self._reception_sync = ReceptionSyncBridge(self._ledger, catalog, self._bus)
        self._reception_sync.attach()
        logger.info(
            "ordering_platform_initialized",
            extra={
                "store": type(self._store).__name__,
                "shipping_schedule_count": len(self._shipping_registry.all_schedules()),
            },
        )

    @classmethod
    def from_config(
        cls,
        config: PlatformConfig,
        catalog: CatalogAdapter,
        clock: Clock | None = None,
        store: StateStore | None = None,
    ) -> OrderingPlatform:
        """
        Build a platform from a configuration set.

        Without an explicit ``store``, a configured ``database_url`` selects
        the SQLAlchemy store and its absence the in-memory one.

        Configured shipping schedules seed the registry only for suppliers
        the store has no schedule for, so edits made through the platform
        survive a rebuild.
        """
        clock = clock or SystemClock()
        if store is None and config.database_url:
            store = SqlStateStore(config.database_url)
        elif store is None:
            store = InMemoryStateStore()
        registry = ShippingScheduleRegistry(
            clock, max_tiers=config.max_shipping_tiers, store=store,
        )
        for schedule in config.shipping_schedules:
            if registry.get_schedule(schedule.supplier_id) is not None:
                continue
            registry.create_schedule(
                schedule.supplier_id,
                schedule.supplier_name,
                [
                    ShippingTier(t.min_amount, t.max_amount, t.shipping_cost)
                    for t in schedule.tiers
                ],
            )
        references = InMemorySupplierReferences(
            SupplierReference(
                client_id=r.client_id,
                supplier_id=r.supplier_id,
                client_reference=r.client_reference,
                preferred_delivery_days=r.preferred_delivery_days,
            )
            for r in config.supplier_references
        )
        return cls(
            catalog,
            clock=clock,
            orders_config=OrdersConfig(
                vat_rate=config.vat_rate,
                status_transition_policy=config.status_transition_policy,
            ),
            inventory_config=InventoryConfig(
                default_alert_threshold=config.default_alert_threshold,
                transaction_actor=config.transaction_actor,
            ),
            shipping_registry=registry,
            references=references,
            store=store,
        )

    # -------------------------------------------------------------------------
    # Services
    # -------------------------------------------------------------------------

    @property
    def bus(self) -> NotificationBus:
        return self._bus

    @property
    def orders(self) -> OrderService:
        return self._orders

    @property
    def inventory(self) -> InventoryLedger:
        return self._ledger

    @property
    def consumption(self) -> StockConsumptionService:
        return self._consumption

    @property
    def product_updates(self) -> ProductUpdateService:
        return self._product_updates

    @property
    def shipping_schedules(self) -> ShippingScheduleRegistry:
        return self._shipping_registry

    # -------------------------------------------------------------------------
    # Order commands
    # -------------------------------------------------------------------------

    def create_orders_from_cart(
        self,
        cart_by_supplier: Mapping[str, Sequence[CartLine]],
        client: ClientInfo,
        send_email: bool = False,
        delivery_dates: Mapping[str, date] | None = None,
        delivery_comments: Mapping[str, str] | None = None,
    ) -> list[Order]:
        return self._orders.create_orders(
            self._validated_cart(cart_by_supplier),
            client,
            send_email=send_email,
            delivery_dates=delivery_dates,
            delivery_comments=delivery_comments,
        )

    def create_single_supplier_order(
        self,
        supplier_id: str,
        cart_by_supplier: Mapping[str, Sequence[CartLine]],
        client: ClientInfo,
        send_email: bool = False,
        delivery_date: date | None = None,
        delivery_comment: str | None = None,
    ) -> Order | None:
        return self._orders.create_single_supplier_order(
            supplier_id,
            self._validated_cart(cart_by_supplier),
            client,
            send_email=send_email,
            delivery_date=delivery_date,
            delivery_comment=delivery_comment,
        )

    def update_order_status(self, order_id: UUID, status: OrderStatus | str) -> Order:
        try:
            status = OrderStatus(status)
        except ValueError as exc:
            raise ValidationError("status", str(exc)) from exc
        return self._orders.update_status(order_id, status)

    def receive_item(
        self,
        order_id: UUID,
        product_id: str,
        reception: ReceptionData | None = None,
    ) -> Order:
        if reception is not None:
            quantity = reception.received_quantity
            price = reception.received_price
            reception = replace(
                reception,
                received_quantity=(
                    None if quantity is None else _positive("received_quantity", quantity)
                ),
                received_price=None if price is None else _positive("received_price", price),
            )
        return self._orders.receive_item(order_id, product_id, reception)

    def receive_all_items(self, order_id: UUID) -> Order:
        return self._orders.receive_all_items(order_id)

    # -------------------------------------------------------------------------
    # Inventory commands
    # -------------------------------------------------------------------------

    def add_stock(
        self,
        product_id: str,
        quantity: Any,
        reason: str,
        order_id: UUID | None = None,
    ) -> StockMovementResult:
        return self._ledger.add_stock(
            product_id, _positive("quantity", quantity), _text("reason", reason), order_id,
        )

    def remove_stock(self, product_id: str, quantity: Any, reason: str) -> StockMovementResult:
        return self._ledger.remove_stock(
            product_id, _positive("quantity", quantity), _text("reason", reason),
        )

    def adjust_stock(self, product_id: str, new_quantity: Any, reason: str) -> StockMovementResult:
        return self._ledger.adjust_stock(
            product_id, _non_negative("new_quantity", new_quantity), _text("reason", reason),
        )

    def set_alert_threshold(self, product_id: str, threshold: Any) -> InventoryItem:
        return self._ledger.set_alert_threshold(
            product_id, _non_negative("alert_threshold", threshold),
        )

    def acknowledge_alert(self, alert_id: UUID) -> InventoryAlert:
        return self._ledger.acknowledge_alert(alert_id)

    def consume_stock(
        self,
        product_id: str,
        quantity: Any,
        reason: str,
        consumed_on: date | None = None,
    ) -> StockMovementResult:
        return self._consumption.consume_stock(
            product_id, _positive("quantity", quantity), _text("reason", reason), consumed_on,
        )

    def report_stock_error(
        self,
        product_id: str,
        error_type: StockErrorType | str,
        quantity: Any,
        description: str,
        reported_by: str = "system",
    ) -> tuple[StockMovementResult, StockErrorReport | None]:
        try:
            error_type = StockErrorType(error_type)
        except ValueError as exc:
            raise ValidationError("error_type", str(exc)) from exc
        return self._consumption.report_stock_error(
            product_id,
            error_type,
            _positive("quantity", quantity),
            _text("description", description),
            reported_by,
        )

    # -------------------------------------------------------------------------
    # Product update commands
    # -------------------------------------------------------------------------

    def create_import_batch(self, file_name: str, supplier_id: str, supplier_name: str) -> UUID:
        return self._product_updates.create_import_batch(
            _text("file_name", file_name), _text("supplier_id", supplier_id), supplier_name,
        )

    def submit_update_request(
        self,
        product_id: str,
        proposed_data: Mapping[str, Any],
        import_batch_id: UUID | None = None,
    ) -> ProductUpdateRequest:
        if not proposed_data:
            raise ValidationError("proposed_data", "is empty")
        return self._product_updates.submit_update_request(
            product_id, proposed_data, import_batch_id,
        )

    def approve_update(self, request_id: UUID, reviewed_by: str | None = None) -> ProductUpdateRequest:
        return self._product_updates.approve_update(request_id, reviewed_by)

    def reject_update(
        self,
        request_id: UUID,
        reason: str,
        reviewed_by: str | None = None,
    ) -> ProductUpdateRequest:
        return self._product_updates.reject_update(
            request_id, _text("rejection_reason", reason), reviewed_by,
        )

    # -------------------------------------------------------------------------
    # Shipping schedule commands
    # -------------------------------------------------------------------------

    def create_shipping_schedule(
        self,
        supplier_id: str,
        supplier_name: str,
        tiers: Iterable[ShippingTier],
    ) -> SupplierShipping:
        return self._shipping_registry.create_schedule(supplier_id, supplier_name, tiers)

    def update_shipping_schedule(
        self,
        supplier_id: str,
        tiers: Iterable[ShippingTier],
        supplier_name: str | None = None,
    ) -> SupplierShipping:
        return self._shipping_registry.update_schedule(supplier_id, tiers, supplier_name)

    def delete_shipping_schedule(self, supplier_id: str) -> bool:
        return self._shipping_registry.delete_schedule(supplier_id)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_order(self, order_id: UUID) -> Order | None:
        return self._orders.get_order(order_id)

    def orders_by_client(self, client_id: str) -> list[Order]:
        return self._orders.orders_by_client(client_id)

    def orders_by_supplier(self, supplier_id: str) -> list[Order]:
        return self._orders.orders_by_supplier(supplier_id)

    def current_stock(self, product_id: str) -> Decimal:
        return self._ledger.current_stock(product_id)

    def active_alerts(self) -> list[InventoryAlert]:
        return self._ledger.active_alerts()

    def transaction_history(self, product_id: str | None = None) -> list[InventoryTransaction]:
        return self._ledger.history(product_id)

    def pending_update_requests(self) -> list[ProductUpdateRequest]:
        return self._product_updates.pending_requests()

    def requests_by_supplier(self, supplier_id: str) -> list[ProductUpdateRequest]:
        return self._product_updates.requests_by_supplier(supplier_id)

    def get_batch(self, batch_id: UUID) -> ImportBatch | None:
        return self._product_updates.get_batch(batch_id)

    def shipping_cost(self, supplier_id: str, amount: Any) -> Decimal:
        return self._shipping.cost(supplier_id, _non_negative("amount", amount))

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _validated_cart(
        cart_by_supplier: Mapping[str, Sequence[CartLine]],
    ) -> dict[str, list[CartLine]]:
        return {
            supplier_id: [
                CartLine(
                    product_id=_text("product_id", line.product_id),
                    quantity=_positive("quantity", line.quantity),
                )
                for line in lines
            ]
            for supplier_id, lines in cart_by_supplier.items()
        }
