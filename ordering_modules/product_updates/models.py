"""
Product Update Domain Models (``ordering_modules.product_updates.models``).

Frozen value objects for supplier-proposed catalog changes: individual
update requests and the import batches that group requests coming from one
supplier file.  Counters on a batch always equal the tally of its
requests' statuses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


class UpdateType(str, Enum):
    IMPORT = "import"
    MANUAL = "manual"


class UpdateRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ImportBatchStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_APPROVED = "partially_approved"
    COMPLETED = "completed"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ProductUpdateRequest:
    """A proposed change to one catalog product, awaiting review."""
    id: UUID
    original_product_id: str
    supplier_id: str
    supplier_name: str
    original_data: dict[str, Any]
    proposed_data: dict[str, Any]
    update_type: UpdateType
    status: UpdateRequestStatus
    created_at: datetime
    updated_at: datetime
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    rejection_reason: str | None = None
    import_batch_id: UUID | None = None

    @property
    def changed_fields(self) -> dict[str, tuple[Any, Any]]:
        """``{field: (original, proposed)}`` for every proposed value that differs."""
        return {
            key: (self.original_data.get(key), value)
            for key, value in self.proposed_data.items()
            if self.original_data.get(key) != value
        }


@dataclass(frozen=True)
class ImportBatch:
    """Requests imported together from one supplier file."""
    id: UUID
    supplier_id: str
    supplier_name: str
    file_name: str
    created_at: datetime
    total_updates: int = 0
    pending_updates: int = 0
    approved_updates: int = 0
    rejected_updates: int = 0
    status: ImportBatchStatus = ImportBatchStatus.PENDING

    @property
    def counters(self) -> tuple[int, int, int]:
        """``(pending, approved, rejected)``."""
        return (self.pending_updates, self.approved_updates, self.rejected_updates)
