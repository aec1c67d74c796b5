"""
Product Updates Module (``ordering_modules.product_updates``).

Supplier-proposed catalog changes, grouped in import batches, reviewed
through the PRODUCT_UPDATE_WORKFLOW approval state machine.  Independent of
orders and inventory.
"""

from ordering_modules.product_updates.events import ProductUpdateApproved
from ordering_modules.product_updates.models import (
    ImportBatch,
    ImportBatchStatus,
    ProductUpdateRequest,
    UpdateRequestStatus,
    UpdateType,
)
from ordering_modules.product_updates.service import ProductUpdateService
from ordering_modules.product_updates.workflows import PRODUCT_UPDATE_WORKFLOW

__all__ = [
    "ProductUpdateApproved",
    "ImportBatch",
    "ImportBatchStatus",
    "ProductUpdateRequest",
    "UpdateRequestStatus",
    "UpdateType",
    "ProductUpdateService",
    "PRODUCT_UPDATE_WORKFLOW",
]
