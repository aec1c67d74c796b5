"""
Client references (``ordering_modules.orders.references``).

A client may hold an account reference with a supplier (their customer
number on the supplier's side).  Orders carry it so the supplier can match
them.  The lookup is optional: no lookup, no match, or a failing lookup all
mean "no reference".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, runtime_checkable


@dataclass(frozen=True)
class SupplierReference:
    client_id: str
    supplier_id: str
    client_reference: str
    preferred_delivery_days: tuple[str, ...] = ()


@runtime_checkable
class SupplierReferenceLookup(Protocol):
    def find_reference(self, client_id: str, supplier_id: str) -> SupplierReference | None:
        ...


class InMemorySupplierReferences:
    """Dictionary-backed ``SupplierReferenceLookup``."""

    def __init__(self, references: Iterable[SupplierReference] = ()):
        self._references: dict[tuple[str, str], SupplierReference] = {
            (r.client_id, r.supplier_id): r for r in references
        }

    def find_reference(self, client_id: str, supplier_id: str) -> SupplierReference | None:
        return self._references.get((client_id, supplier_id))

    def put(self, reference: SupplierReference) -> None:
        self._references[(reference.client_id, reference.supplier_id)] = reference
