"""
Catalog adapter (``ordering_kernel.domain.catalog``).

Responsibility
--------------
The product catalog is owned outside the ordering core.  This module
defines the read-only view the core consumes: a frozen ``CatalogProduct``
record and the ``CatalogAdapter`` protocol used by orders (line prices),
inventory (entry snapshots, packaging coefficient) and product updates
(original data).

``InMemoryCatalog`` is the reference adapter used by tests and by
embedders that already hold the catalog in memory.

Architecture position
---------------------
Kernel > Domain -- pure value objects and a protocol.  No I/O.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Protocol, runtime_checkable

from ordering_kernel.domain.values import coefficient_or_one


class ProductCategory(str, Enum):
    """Catalog family."""
    FOOD = "food"
    NON_FOOD = "non-food"


@dataclass(frozen=True)
class CatalogProduct:
    """
    Read-only catalog record.

    ``price_ht`` is the pre-tax price per packaging unit.  ``packaging_coefficient``
    converts one packaging unit into stock units (unset means 1).
    """
    id: str
    name: str
    reference: str
    price_ht: Decimal
    supplier_id: str
    supplier_name: str
    category: ProductCategory = ProductCategory.FOOD
    packaging_unit: str = "unit"
    packaging_coefficient: Decimal | None = None
    negotiation_unit: str | None = None
    is_organic: bool = False
    is_egalim: bool = False
    other_labels: str | None = None
    vat_rate: Decimal | None = None
    available: bool = True

    @property
    def stock_unit(self) -> str:
        """Unit the ledger counts in: negotiation unit when set, else packaging unit."""
        return self.negotiation_unit or self.packaging_unit

    @property
    def effective_coefficient(self) -> Decimal:
        return coefficient_or_one(self.packaging_coefficient)

    def snapshot(self) -> dict[str, Any]:
        """JSON-friendly copy of the record, used as an update request's original data."""
        data = asdict(self)
        data["category"] = self.category.value
        for key in ("price_ht", "packaging_coefficient", "vat_rate"):
            if data[key] is not None:
                data[key] = str(data[key])
        return data


@runtime_checkable
class CatalogAdapter(Protocol):
    """Read-only product lookup consumed by the ordering core."""

    def find_product(self, product_id: str) -> CatalogProduct | None:
        ...

    def all_products(self) -> tuple[CatalogProduct, ...]:
        ...


class InMemoryCatalog:
    """Dictionary-backed ``CatalogAdapter``."""

    def __init__(self, products: Iterable[CatalogProduct] = ()):
        self._products: dict[str, CatalogProduct] = {p.id: p for p in products}

    def find_product(self, product_id: str) -> CatalogProduct | None:
        return self._products.get(product_id)

    def all_products(self) -> tuple[CatalogProduct, ...]:
        return tuple(self._products.values())

    def put(self, product: CatalogProduct) -> None:
        """Insert or replace a record. Owner-side operation, not used by the core."""
        self._products[product.id] = product
