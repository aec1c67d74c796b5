"""
Order Domain Models (``ordering_modules.orders.models``).

Responsibility
--------------
Frozen value objects for the order aggregate: the cart lines and client
that go into checkout, the per-supplier ``Order`` with its ``OrderItem``
lines, and the ``ReceptionData`` a client records when goods arrive.

Architecture
------------
Layer: **Modules** -- pure domain data structures.  All dataclasses are
``frozen=True``; ``OrderService`` replaces an order as a whole on every
mutation.

Invariants
----------
- ``OrderItem.received`` never goes back to False.
- When ``litige_status`` is NONE, ``litige_souhait`` and ``litige_comment``
  are None.
- All amounts and quantities are ``Decimal``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from ordering_kernel.domain.values import round_money


class OrderStatus(str, Enum):
    """Order lifecycle states."""
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class LitigeStatus(str, Enum):
    """Whether a dispute was opened on a received line."""
    NONE = "none"
    CREATE_LITIGE = "create_litige"


class LitigeSouhait(str, Enum):
    """Resolution the client asks for on a disputed line."""
    REMBOURSEMENT = "remboursement"
    RETOUR_FOURNISSEUR = "retour_fournisseur"
    AUTRE = "autre"


@dataclass(frozen=True)
class ClientInfo:
    """The ordering client."""
    id: str
    name: str


@dataclass(frozen=True)
class CartLine:
    """One product and quantity in a client's cart."""
    product_id: str
    quantity: Decimal


@dataclass(frozen=True)
class ReceptionData:
    """
    What the client recorded when receiving a line.

    Unset quantities and prices default to the ordered values.  Dispute
    fields are only taken from here; reception never infers a dispute.
    """
    received_quantity: Decimal | None = None
    received_price: Decimal | None = None
    litige_status: LitigeStatus = LitigeStatus.NONE
    litige_souhait: LitigeSouhait | None = None
    litige_comment: str | None = None


@dataclass(frozen=True)
class OrderItem:
    """A line of an order."""
    product_id: str
    product_name: str
    quantity: Decimal
    price_ht: Decimal
    packaging_unit: str | None = None
    received: bool = False
    received_quantity: Decimal | None = None
    received_price: Decimal | None = None
    litige_status: LitigeStatus = LitigeStatus.NONE
    litige_souhait: LitigeSouhait | None = None
    litige_comment: str | None = None

    @property
    def line_total(self) -> Decimal:
        return round_money(self.price_ht * self.quantity)

    @property
    def has_variance(self) -> bool:
        """True when the received quantity or price differs from the ordered one."""
        if not self.received:
            return False
        return (
            (self.received_quantity is not None and self.received_quantity != self.quantity)
            or (self.received_price is not None and self.received_price != self.price_ht)
        )

    @property
    def is_disputed(self) -> bool:
        return self.litige_status == LitigeStatus.CREATE_LITIGE

    def mark_received(self, reception: ReceptionData | None = None) -> OrderItem:
        """Return the received version of this line."""
        reception = reception or ReceptionData()
        disputed = reception.litige_status == LitigeStatus.CREATE_LITIGE
        return replace(
            self,
            received=True,
            received_quantity=(
                reception.received_quantity
                if reception.received_quantity is not None
                else self.quantity
            ),
            received_price=(
                reception.received_price
                if reception.received_price is not None
                else self.price_ht
            ),
            litige_status=reception.litige_status,
            litige_souhait=reception.litige_souhait if disputed else None,
            litige_comment=reception.litige_comment if disputed else None,
        )


@dataclass(frozen=True)
class Order:
    """A client's order to one supplier."""
    id: UUID
    client_id: str
    client_name: str
    supplier_id: str
    supplier_name: str
    items: tuple[OrderItem, ...]
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    subtotal_ht: Decimal
    shipping_cost: Decimal
    total_ht: Decimal
    total_ttc: Decimal
    client_reference: str | None = None
    email_sent: bool = False
    delivery_date: date | None = None
    delivery_comment: str | None = None

    def item_for(self, product_id: str) -> OrderItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    @property
    def unreceived_items(self) -> tuple[OrderItem, ...]:
        return tuple(i for i in self.items if not i.received)

    @property
    def all_received(self) -> bool:
        return all(i.received for i in self.items)

    @property
    def disputed_items(self) -> tuple[OrderItem, ...]:
        return tuple(i for i in self.items if i.is_disputed)
