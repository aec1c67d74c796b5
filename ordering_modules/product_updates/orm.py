"""
Module: ordering_modules.product_updates.orm
Responsibility: SQLAlchemy ORM persistence models for update requests and
    import batches.  Original and proposed product data are stored as JSON.

Architecture position: Modules > ProductUpdates > ORM.  Inherits from Base
    (ordering_kernel.db.base).

Invariants enforced:
    - Enum fields stored as String(50).
    - Batch counters stored alongside the status they determine.
"""

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ordering_kernel.db.base import Base, SequencedMixin, ensure_utc


def _jsonable(data: dict[str, Any]) -> dict[str, Any]:
    """Decimals and dates become strings, as in the catalog snapshot."""
    return json.loads(json.dumps(data, default=str))


class ProductUpdateRequestModel(SequencedMixin, Base):
    """
    ORM model for an update request.

    Maps to: ordering_modules.product_updates.models.ProductUpdateRequest.
    """

    __tablename__ = "product_update_requests"
    __store_key__ = "id"

    __table_args__ = (
        Index("idx_update_request_status", "status"),
        Index("idx_update_request_supplier", "supplier_id"),
        Index("idx_update_request_batch", "import_batch_id"),
    )

    original_product_id: Mapped[str] = mapped_column(String(100))
    supplier_id: Mapped[str] = mapped_column(String(100))
    supplier_name: Mapped[str] = mapped_column(String(255))
    original_data: Mapped[dict[str, Any]] = mapped_column(JSON)
    proposed_data: Mapped[dict[str, Any]] = mapped_column(JSON)
    update_type: Mapped[str] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(50), default="pending")
    created_at: Mapped[datetime] = mapped_column()
    updated_at: Mapped[datetime] = mapped_column()
    reviewed_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    import_batch_id: Mapped[UUID | None] = mapped_column(nullable=True)

    def to_dto(self):
        from ordering_modules.product_updates.models import (
            ProductUpdateRequest,
            UpdateRequestStatus,
            UpdateType,
        )
        return ProductUpdateRequest(
            id=self.id,
            original_product_id=self.original_product_id,
            supplier_id=self.supplier_id,
            supplier_name=self.supplier_name,
            original_data=dict(self.original_data),
            proposed_data=dict(self.proposed_data),
            update_type=UpdateType(self.update_type),
            status=UpdateRequestStatus(self.status),
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
            reviewed_by=self.reviewed_by,
            reviewed_at=ensure_utc(self.reviewed_at),
            rejection_reason=self.rejection_reason,
            import_batch_id=self.import_batch_id,
        )

    @classmethod
    def from_dto(cls, dto) -> "ProductUpdateRequestModel":
        return cls(
            id=dto.id,
            original_product_id=dto.original_product_id,
            supplier_id=dto.supplier_id,
            supplier_name=dto.supplier_name,
            original_data=_jsonable(dto.original_data),
            proposed_data=_jsonable(dto.proposed_data),
            update_type=dto.update_type.value,
            status=dto.status.value,
            created_at=dto.created_at,
            updated_at=dto.updated_at,
            reviewed_by=dto.reviewed_by,
            reviewed_at=dto.reviewed_at,
            rejection_reason=dto.rejection_reason,
            import_batch_id=dto.import_batch_id,
        )


class ImportBatchModel(SequencedMixin, Base):
    """
    ORM model for an import batch.

    Maps to: ordering_modules.product_updates.models.ImportBatch.
    """

    __tablename__ = "product_import_batches"
    __store_key__ = "id"

    supplier_id: Mapped[str] = mapped_column(String(100))
    supplier_name: Mapped[str] = mapped_column(String(255))
    file_name: Mapped[str] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column()
    total_updates: Mapped[int] = mapped_column(Integer, default=0)
    pending_updates: Mapped[int] = mapped_column(Integer, default=0)
    approved_updates: Mapped[int] = mapped_column(Integer, default=0)
    rejected_updates: Mapped[int] = mapped_column(Integer, default=0)
    status: Mapped[str] = mapped_column(String(50), default="pending")

    def to_dto(self):
        from ordering_modules.product_updates.models import ImportBatch, ImportBatchStatus
        return ImportBatch(
            id=self.id,
            supplier_id=self.supplier_id,
            supplier_name=self.supplier_name,
            file_name=self.file_name,
            created_at=ensure_utc(self.created_at),
            total_updates=self.total_updates,
            pending_updates=self.pending_updates,
            approved_updates=self.approved_updates,
            rejected_updates=self.rejected_updates,
            status=ImportBatchStatus(self.status),
        )

    @classmethod
    def from_dto(cls, dto) -> "ImportBatchModel":
        return cls(
            id=dto.id,
            supplier_id=dto.supplier_id,
            supplier_name=dto.supplier_name,
            file_name=dto.file_name,
            created_at=dto.created_at,
            total_updates=dto.total_updates,
            pending_updates=dto.pending_updates,
            approved_updates=dto.approved_updates,
            rejected_updates=dto.rejected_updates,
            status=dto.status.value,
        )
