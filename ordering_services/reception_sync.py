"""
Reception sync bridge (``ordering_services.reception_sync``).

Responsibility:
    Keeps the inventory ledger in step with order receptions.  Subscribes
    to ``OrderLineReceived`` and ``OrderDelivered`` and stocks in the
    received quantities, converted to stock units with the catalog's
    packaging coefficient.

Architecture position:
    Services.  The only component that sees both the order notifications
    and the ledger.  Data flows one way: the bridge never calls back into
    the order module, and the ledger never learns about orders beyond the
    ``order_id`` recorded on a transaction.

Invariants enforced:
    - Stock-in for a delivered order covers exactly the lines that were
      pending before the delivery; an empty set stocks nothing.
    - A line received at a price other than the ordered one records both
      prices in the transaction reason.
    - A refused stock-in is logged as a warning and never raised into the
      reception path.

Failure modes:
    - None raised.  ``reception_stock_in_failed`` warnings carry the ledger's
      error code.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from ordering_kernel.domain.catalog import CatalogAdapter
from ordering_kernel.domain.values import ONE, ZERO, round_money
from ordering_kernel.logging_config import LogContext, get_logger
from ordering_kernel.services.notification_bus import NotificationBus
from ordering_modules.inventory.service import InventoryLedger
from ordering_modules.orders.events import OrderDelivered, OrderLineReceived
from ordering_modules.orders.models import OrderItem

logger = get_logger("services.reception_sync")


def reception_reason(order_id: UUID, item: OrderItem | None = None) -> str:
    """
    ``"Order reception #1a2b3"``: the last five characters of the order id.

    When ``item`` was received at a price other than the ordered one, both
    prices are appended: ``"Order reception #1a2b3 - applied price 17.50 HT
    (ordered 18.00 HT)"``.
    """
    reason = f"Order reception #{str(order_id)[-5:]}"
    if item is None or item.received_price is None or item.received_price == item.price_ht:
        return reason
    return (
        f"{reason} - applied price {round_money(item.received_price)} HT"
        f" (ordered {round_money(item.price_ht)} HT)"
    )


class ReceptionSyncBridge:
    """Notification subscriber that turns receptions into ledger stock-ins."""

    def __init__(
        self,
        ledger: InventoryLedger,
        catalog: CatalogAdapter,
        bus: NotificationBus,
    ):
        self._ledger = ledger
        self._catalog = catalog
        self._bus = bus
        self._attached = False

    def attach(self) -> None:
        if self._attached:
            return
        self._bus.subscribe(OrderLineReceived, self.on_line_received)
        self._bus.subscribe(OrderDelivered, self.on_order_delivered)
        self._attached = True

    def detach(self) -> None:
        self._bus.unsubscribe(OrderLineReceived, self.on_line_received)
        self._bus.unsubscribe(OrderDelivered, self.on_order_delivered)
        self._attached = False

    def on_line_received(self, event: OrderLineReceived) -> None:
        item = event.item
        quantity = item.received_quantity if item.received_quantity is not None else item.quantity
        self._stock_in(event.order.id, item, quantity)

    def on_order_delivered(self, event: OrderDelivered) -> None:
        if not event.unreceived_items:
            return
        with LogContext.bind(order_id=str(event.order.id)):
            logger.info(
                "delivery_stock_in_started",
                extra={"line_count": len(event.unreceived_items)},
            )
            for item in event.unreceived_items:
                self._stock_in(event.order.id, item, item.quantity)

    def _coefficient(self, product_id: str) -> Decimal:
        product = self._catalog.find_product(product_id)
        return product.effective_coefficient if product else ONE

    def _stock_in(self, order_id: UUID, item: OrderItem, quantity: Decimal) -> None:
        stock_quantity = quantity * self._coefficient(item.product_id)
        if stock_quantity <= ZERO:
            logger.info(
                "reception_stock_in_skipped",
                extra={"order_id": str(order_id), "product_id": item.product_id},
            )
            return
        result = self._ledger.add_stock(
            item.product_id, stock_quantity, reception_reason(order_id, item), order_id,
        )
        if not result.is_success:
            logger.warning(
                "reception_stock_in_failed",
                extra={
                    "order_id": str(order_id),
                    "product_id": item.product_id,
                    "error_code": result.error_code,
                },
            )
