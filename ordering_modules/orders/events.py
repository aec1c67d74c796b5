"""
Order notifications (``ordering_modules.orders.events``).

Published on the ``NotificationBus`` by ``OrderService`` after the new
order value has been committed.  Subscribers (the reception bridge) react
to them; they never call back into the order module.
"""

from __future__ import annotations

from dataclasses import dataclass

from ordering_modules.orders.models import Order, OrderItem


@dataclass(frozen=True)
class OrderLineReceived:
    """A single line was received for the first time."""
    order: Order
    item: OrderItem


@dataclass(frozen=True)
class OrderDelivered:
    """
    An order became fully received.

    ``unreceived_items`` holds the lines that were still pending just before
    the delivery, as they were ordered; it is empty when the last line was
    received individually.
    """
    order: Order
    unreceived_items: tuple[OrderItem, ...]
