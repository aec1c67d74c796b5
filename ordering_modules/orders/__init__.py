"""
Orders Module (``ordering_modules.orders``).

Responsibility
--------------
The order aggregate: checkout of a multi-supplier cart into one order per
supplier, the ordered/received/cancelled lifecycle, line reception with
quantity and price variance, and disputes.

Architecture
------------
Layer: **Modules**.  Imports ``ordering_kernel``, ``ordering_engines`` and
the shipping module.  MUST NOT import ``ordering_modules.inventory``; stock
follows receptions through the notifications in ``events``.
"""

from ordering_modules.orders.config import OrdersConfig
from ordering_modules.orders.events import OrderDelivered, OrderLineReceived
from ordering_modules.orders.models import (
    CartLine,
    ClientInfo,
    LitigeSouhait,
    LitigeStatus,
    Order,
    OrderItem,
    OrderStatus,
    ReceptionData,
)
from ordering_modules.orders.references import (
    InMemorySupplierReferences,
    SupplierReference,
    SupplierReferenceLookup,
)
from ordering_modules.orders.service import OrderService
from ordering_modules.orders.workflows import ORDER_WORKFLOW

__all__ = [
    "OrdersConfig",
    "OrderDelivered",
    "OrderLineReceived",
    "CartLine",
    "ClientInfo",
    "LitigeSouhait",
    "LitigeStatus",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ReceptionData",
    "InMemorySupplierReferences",
    "SupplierReference",
    "SupplierReferenceLookup",
    "OrderService",
    "ORDER_WORKFLOW",
]
