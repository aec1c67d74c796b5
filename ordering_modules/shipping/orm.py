"""
Module: ordering_modules.shipping.orm
Responsibility: SQLAlchemy ORM persistence model for supplier shipping
    schedules.  The tiers of a schedule are stored as one JSON list with
    amounts as decimal strings.

Architecture position: Modules > Shipping > ORM.  Inherits from Base
    (ordering_kernel.db.base).

Invariants enforced:
    - One shipping_schedules row per supplier (unique supplier_id).
    - Tier amounts round-trip as Decimal, never float.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from ordering_kernel.db.base import Base, SequencedMixin, ensure_utc


def _tier_rows(tiers) -> list[dict[str, Any]]:
    return [
        {
            "min_amount": str(tier.min_amount),
            "max_amount": None if tier.max_amount is None else str(tier.max_amount),
            "shipping_cost": str(tier.shipping_cost),
        }
        for tier in tiers
    ]


class ShippingScheduleModel(SequencedMixin, Base):
    """
    ORM model for a supplier's shipping schedule.

    Maps to: ordering_modules.shipping.models.SupplierShipping.
    """

    __tablename__ = "shipping_schedules"
    __store_key__ = "supplier_id"

    supplier_id: Mapped[str] = mapped_column(String(100), unique=True)
    supplier_name: Mapped[str] = mapped_column(String(255))
    tiers: Mapped[list[dict[str, Any]]] = mapped_column(JSON)
    created_at: Mapped[datetime] = mapped_column()
    updated_at: Mapped[datetime] = mapped_column()

    def to_dto(self):
        from ordering_modules.shipping.models import ShippingTier, SupplierShipping
        return SupplierShipping(
            supplier_id=self.supplier_id,
            supplier_name=self.supplier_name,
            tiers=tuple(
                ShippingTier(
                    min_amount=Decimal(row["min_amount"]),
                    max_amount=(
                        None if row["max_amount"] is None else Decimal(row["max_amount"])
                    ),
                    shipping_cost=Decimal(row["shipping_cost"]),
                )
                for row in self.tiers
            ),
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
        )

    @classmethod
    def from_dto(cls, dto) -> "ShippingScheduleModel":
        return cls(
            supplier_id=dto.supplier_id,
            supplier_name=dto.supplier_name,
            tiers=_tier_rows(dto.tiers),
            created_at=dto.created_at,
            updated_at=dto.updated_at,
        )
