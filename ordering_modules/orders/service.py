"""
Orders Module Service (``ordering_modules.orders.service``).

Responsibility
--------------
Owns the order aggregate: checkout (one order per supplier), status
transitions, line and whole-order reception, and dispute queries.  Prices
come from the catalog, shipping from ``ShippingCostCalculator``, totals from
``ordering_engines.totals``.

Architecture
------------
Layer: **Modules** -- stateful orchestration.  Holds the orders in memory,
writes each committed order through the optional ``StateStore`` and
publishes reception notifications on the ``NotificationBus``.  This module
never touches inventory: stock follows receptions only through
``OrderLineReceived`` / ``OrderDelivered``.

Invariants
----------
- New order values are fully computed before any is committed; an unknown
  product aborts checkout with nothing stored.
- A line is received at most once.  A second reception returns the order
  unchanged and publishes nothing.
- ``total_ht == subtotal_ht + shipping_cost`` and
  ``total_ttc == total_ht * (1 + vat_rate)``, rounded to cents.
- Notifications are published after the new order value is committed.

Failure Modes
-------------
- ``ProductNotFoundError`` -- cart line for a product missing from the catalog.
- ``OrderNotFoundError`` / ``OrderLineNotFoundError`` -- unknown order or line.
- ``OrderNotReceivableError`` -- reception on a cancelled order.
- ``InvalidStatusTransitionError`` -- transition absent from ORDER_WORKFLOW,
  or ``received`` requested with lines still pending, under the strict
  policy.

Usage::

    service = OrderService(catalog, calculator, bus, clock=clock)
    orders = service.create_orders(
        {"supplier-1": [CartLine("p-1", Decimal("5"))]},
        ClientInfo("client-1", "Restaurant du Port"),
    )
    service.receive_all_items(orders[0].id)
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence
from uuid import UUID, uuid4

from ordering_engines.totals import compute_order_totals, line_subtotal
from ordering_kernel.domain.catalog import CatalogAdapter
from ordering_kernel.domain.clock import Clock, SystemClock
from ordering_kernel.domain.values import ZERO, round_money
from ordering_kernel.exceptions import (
    EmptySupplierGroupError,
    InvalidStatusTransitionError,
    OrderLineNotFoundError,
    OrderNotFoundError,
    OrderNotReceivableError,
    ProductNotFoundError,
    ValidationError,
)
from ordering_kernel.logging_config import LogContext, get_logger
from ordering_kernel.services.notification_bus import NotificationBus
from ordering_kernel.services.state_store import ORDERS, StateStore, persist_quietly
from ordering_modules.orders.config import OrdersConfig
from ordering_modules.orders.events import OrderDelivered, OrderLineReceived
from ordering_modules.orders.models import (
    CartLine,
    ClientInfo,
    Order,
    OrderItem,
    OrderStatus,
    ReceptionData,
)
from ordering_modules.orders.references import SupplierReferenceLookup
from ordering_modules.orders.workflows import ALL_LINES_RECEIVED, ORDER_WORKFLOW
from ordering_modules.shipping.service import ShippingCostCalculator

logger = get_logger("modules.orders.service")


class OrderService:
    """
    Order aggregate service.

    Contract
    --------
    Single logical writer.  Every public mutation computes the new order
    value first and then replaces the stored value in one step, so callers
    never observe a partial update.

    Non-goals
    ---------
    - Stock movements (see ``ordering_services.reception_sync``).
    - Order documents and e-mails; ``email_sent`` only records the intent.
    """

    def __init__(
        self,
        catalog: CatalogAdapter,
        shipping: ShippingCostCalculator,
        bus: NotificationBus,
        clock: Clock | None = None,
        config: OrdersConfig | None = None,
        references: SupplierReferenceLookup | None = None,
        store: StateStore | None = None,
    ):
        self._catalog = catalog
        self._shipping = shipping
        self._bus = bus
        self._clock = clock or SystemClock()
        self._config = config or OrdersConfig.with_defaults()
        self._references = references
        self._store = store
        self._orders: dict[UUID, Order] = {}
        if store is not None:
            for order in store.load_all(ORDERS):
                self._orders[order.id] = order
            logger.info("orders_loaded", extra={"order_count": len(self._orders)})

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def create_orders(
        self,
        cart_by_supplier: Mapping[str, Sequence[CartLine]],
        client: ClientInfo,
        send_email: bool = False,
        delivery_dates: Mapping[str, date] | None = None,
        delivery_comments: Mapping[str, str] | None = None,
    ) -> list[Order]:
        """
        Split a cart into one order per supplier.

        Supplier groups with no lines are skipped.  Returns the new orders
        in the cart's supplier order.
        """
        delivery_dates = delivery_dates or {}
        delivery_comments = delivery_comments or {}
        new_orders: list[Order] = []
        for supplier_id, lines in cart_by_supplier.items():
            try:
                order = self._build_order(
                    supplier_id,
                    lines,
                    client,
                    send_email,
                    delivery_dates.get(supplier_id),
                    delivery_comments.get(supplier_id),
                )
            except EmptySupplierGroupError as exc:
                logger.info(
                    "supplier_group_skipped",
                    extra={"supplier_id": supplier_id, "reason": exc.code},
                )
                continue
            new_orders.append(order)

        for order in new_orders:
            self._commit(order)
        logger.info(
            "orders_created",
            extra={
                "client_id": client.id,
                "order_count": len(new_orders),
                "email_requested": send_email,
            },
        )
        return new_orders

    def create_single_supplier_order(
        self,
        supplier_id: str,
        cart_by_supplier: Mapping[str, Sequence[CartLine]],
        client: ClientInfo,
        send_email: bool = False,
        delivery_date: date | None = None,
        delivery_comment: str | None = None,
    ) -> Order | None:
        """Check out one supplier's group of the cart; None if that group is empty."""
        orders = self.create_orders(
            {supplier_id: cart_by_supplier.get(supplier_id, ())},
            client,
            send_email=send_email,
            delivery_dates={supplier_id: delivery_date} if delivery_date else None,
            delivery_comments={supplier_id: delivery_comment} if delivery_comment else None,
        )
        return orders[0] if orders else None

    def _build_order(
        self,
        supplier_id: str,
        lines: Sequence[CartLine],
        client: ClientInfo,
        send_email: bool,
        delivery_date: date | None,
        delivery_comment: str | None,
    ) -> Order:
        if not lines:
            raise EmptySupplierGroupError(supplier_id)

        items: list[OrderItem] = []
        supplier_name = supplier_id
        for line in lines:
            if line.quantity <= ZERO:
                raise ValidationError("quantity", f"must be positive for {line.product_id}")
            product = self._catalog.find_product(line.product_id)
            if product is None:
                raise ProductNotFoundError(line.product_id)
            supplier_name = product.supplier_name or supplier_name
            items.append(
                OrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line.quantity,
                    price_ht=product.price_ht,
                    packaging_unit=product.packaging_unit,
                )
            )

        subtotal = round_money(line_subtotal((i.price_ht, i.quantity) for i in items))
        shipping_cost = self._shipping.cost(supplier_id, subtotal)
        totals = compute_order_totals(
            [(i.price_ht, i.quantity) for i in items],
            shipping_cost=shipping_cost,
            vat_rate=self._config.vat_rate,
        )
        now = self._clock.now()
        return Order(
            id=uuid4(),
            client_id=client.id,
            client_name=client.name,
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            items=tuple(items),
            status=OrderStatus.ORDERED,
            created_at=now,
            updated_at=now,
            subtotal_ht=totals.subtotal_ht,
            shipping_cost=totals.shipping_cost,
            total_ht=totals.total_ht,
            total_ttc=totals.total_ttc,
            client_reference=self._client_reference(client.id, supplier_id),
            email_sent=send_email,
            delivery_date=delivery_date,
            delivery_comment=delivery_comment,
        )

    def _client_reference(self, client_id: str, supplier_id: str) -> str | None:
        if self._references is None:
            return None
        try:
            reference = self._references.find_reference(client_id, supplier_id)
        except Exception:
            logger.warning(
                "client_reference_lookup_failed",
                exc_info=True,
                extra={"client_id": client_id, "supplier_id": supplier_id},
            )
            return None
        return reference.client_reference if reference else None

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def update_status(self, order_id: UUID, status: OrderStatus) -> Order:
        """
        Move an order to ``status``.

        Setting the current status again is a no-op.  Under the strict
        policy only ORDER_WORKFLOW transitions are accepted, and a guarded
        transition fires only when its guard holds: ``received`` requires
        every line to be received.
        """
        order = self._require(order_id)
        status = OrderStatus(status)
        if order.status == status:
            return order
        if self._config.is_strict:
            transition = ORDER_WORKFLOW.find_transition(order.status.value, status.value)
            if transition is None or (
                transition.guard is ALL_LINES_RECEIVED and not order.all_received
            ):
                raise InvalidStatusTransitionError(
                    ORDER_WORKFLOW.name, str(order_id), order.status.value, status.value,
                )
        updated = replace(order, status=status, updated_at=self._clock.now())
        self._commit(updated)
        logger.info(
            "order_status_updated",
            extra={
                "order_id": str(order_id),
                "from_status": order.status.value,
                "to_status": status.value,
            },
        )
        return updated

    # -------------------------------------------------------------------------
    # Reception
    # -------------------------------------------------------------------------

    def receive_item(
        self,
        order_id: UUID,
        product_id: str,
        reception: ReceptionData | None = None,
    ) -> Order:
        """
        Record reception of one line.

        Publishes ``OrderLineReceived``; if this reception completes the
        order, moves it to ``received`` and publishes ``OrderDelivered``
        with an empty unreceived set.
        """
        with LogContext.bind(order_id=str(order_id), product_id=product_id):
            order = self._require(order_id)
            if order.status == OrderStatus.CANCELLED:
                raise OrderNotReceivableError(str(order_id), order.status.value)
            item = order.item_for(product_id)
            if item is None:
                raise OrderLineNotFoundError(str(order_id), product_id)
            if item.received:
                logger.info("order_line_already_received")
                return order

            received_item = item.mark_received(reception)
            items = tuple(
                received_item if i.product_id == product_id else i for i in order.items
            )
            completes = all(i.received for i in items)
            status = order.status
            if completes and status == OrderStatus.ORDERED:
                status = OrderStatus.RECEIVED
            updated = replace(
                order, items=items, status=status, updated_at=self._clock.now(),
            )
            self._commit(updated)
            logger.info(
                "order_line_received",
                extra={
                    "received_quantity": received_item.received_quantity,
                    "received_price": received_item.received_price,
                    "has_variance": received_item.has_variance,
                    "disputed": received_item.is_disputed,
                },
            )

            self._bus.publish(OrderLineReceived(order=updated, item=received_item))
            if completes:
                logger.info("order_delivered", extra={"pending_line_count": 0})
                self._bus.publish(OrderDelivered(order=updated, unreceived_items=()))
            return updated

    def receive_all_items(self, order_id: UUID) -> Order:
        """
        Receive every pending line at its ordered quantity and price.

        Publishes exactly one ``OrderDelivered`` carrying the lines that were
        pending before the call.  Nothing pending means no change and no
        notification.
        """
        with LogContext.bind(order_id=str(order_id)):
            order = self._require(order_id)
            if order.status == OrderStatus.CANCELLED:
                raise OrderNotReceivableError(str(order_id), order.status.value)
            pending = order.unreceived_items
            if not pending:
                logger.info("order_already_fully_received")
                return order

            items = tuple(
                i if i.received else i.mark_received() for i in order.items
            )
            status = (
                OrderStatus.RECEIVED if order.status == OrderStatus.ORDERED else order.status
            )
            updated = replace(
                order, items=items, status=status, updated_at=self._clock.now(),
            )
            self._commit(updated)
            logger.info("order_delivered", extra={"pending_line_count": len(pending)})
            self._bus.publish(OrderDelivered(order=updated, unreceived_items=pending))
            return updated

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_order(self, order_id: UUID) -> Order | None:
        return self._orders.get(order_id)

    def all_orders(self) -> list[Order]:
        return list(self._orders.values())

    def orders_by_client(self, client_id: str) -> list[Order]:
        return [o for o in self._orders.values() if o.client_id == client_id]

    def orders_by_supplier(self, supplier_id: str) -> list[Order]:
        return [o for o in self._orders.values() if o.supplier_id == supplier_id]

    def disputed_items(self, order_id: UUID | None = None) -> list[tuple[Order, OrderItem]]:
        """Disputed lines, optionally restricted to one order."""
        if order_id is not None:
            orders = [self._require(order_id)]
        else:
            orders = list(self._orders.values())
        return [(o, item) for o in orders for item in o.disputed_items]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, order_id: UUID) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderNotFoundError(str(order_id))
        return order

    def _commit(self, order: Order) -> None:
        self._orders[order.id] = order
        persist_quietly(self._store, ORDERS, order.id, order)
