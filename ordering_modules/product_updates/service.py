"""
Product Update Module Service (``ordering_modules.product_updates.service``).

Responsibility
--------------
Collects supplier-proposed catalog changes as update requests (optionally
grouped in import batches) and runs them through the approval workflow.
Approved changes are announced with ``ProductUpdateApproved``; applying
them to the catalog is the catalog owner's job.

Invariants
----------
- Only ``pending`` requests can be reviewed (PRODUCT_UPDATE_WORKFLOW).
- A rejection carries a non-empty reason.
- A request and its batch counters change together: both new values are
  computed before either is committed.

Failure Modes
-------------
- ``ProductNotFoundError`` -- submission for a product missing from the catalog.
- ``ImportBatchNotFoundError`` / ``UpdateRequestNotFoundError`` -- unknown ids.
- ``InvalidStatusTransitionError`` -- review of a non-pending request.
- ``ValidationError`` -- blank rejection reason.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping
from uuid import UUID, uuid4

from ordering_kernel.domain.catalog import CatalogAdapter
from ordering_kernel.domain.clock import Clock, SystemClock
from ordering_kernel.exceptions import (
    ImportBatchNotFoundError,
    InvalidStatusTransitionError,
    ProductNotFoundError,
    UpdateRequestNotFoundError,
    ValidationError,
)
from ordering_kernel.logging_config import LogContext, get_logger
from ordering_kernel.services.notification_bus import NotificationBus
from ordering_kernel.services.state_store import (
    IMPORT_BATCHES,
    UPDATE_REQUESTS,
    StateStore,
    persist_quietly,
)
from ordering_modules.product_updates.events import ProductUpdateApproved
from ordering_modules.product_updates.helpers import record_review, record_submission
from ordering_modules.product_updates.models import (
    ImportBatch,
    ImportBatchStatus,
    ProductUpdateRequest,
    UpdateRequestStatus,
    UpdateType,
)
from ordering_modules.product_updates.workflows import PRODUCT_UPDATE_WORKFLOW

logger = get_logger("modules.product_updates.service")


class ProductUpdateService:
    """Update request intake and review."""

    def __init__(
        self,
        catalog: CatalogAdapter,
        bus: NotificationBus,
        clock: Clock | None = None,
        store: StateStore | None = None,
    ):
        self._catalog = catalog
        self._bus = bus
        self._clock = clock or SystemClock()
        self._store = store
        self._requests: dict[UUID, ProductUpdateRequest] = {}
        self._batches: dict[UUID, ImportBatch] = {}
        if store is not None:
            for request in store.load_all(UPDATE_REQUESTS):
                self._requests[request.id] = request
            for batch in store.load_all(IMPORT_BATCHES):
                self._batches[batch.id] = batch

    # -------------------------------------------------------------------------
    # Intake
    # -------------------------------------------------------------------------

    def create_import_batch(
        self,
        file_name: str,
        supplier_id: str,
        supplier_name: str,
    ) -> UUID:
        batch = ImportBatch(
            id=uuid4(),
            supplier_id=supplier_id,
            supplier_name=supplier_name,
            file_name=file_name,
            created_at=self._clock.now(),
        )
        self._commit_batch(batch)
        logger.info(
            "import_batch_created",
            extra={
                "batch_id": str(batch.id),
                "supplier_id": supplier_id,
                "file_name": file_name,
            },
        )
        return batch.id

    def submit_update_request(
        self,
        product_id: str,
        proposed_data: Mapping[str, Any],
        import_batch_id: UUID | None = None,
    ) -> ProductUpdateRequest:
        """
        Queue a proposed change for review.

        The current catalog record is snapshotted as ``original_data``.
        Requests submitted with a batch are ``import`` updates, others
        ``manual``.
        """
        product = self._catalog.find_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        batch = None
        if import_batch_id is not None:
            batch = self._batches.get(import_batch_id)
            if batch is None:
                raise ImportBatchNotFoundError(str(import_batch_id))

        now = self._clock.now()
        request = ProductUpdateRequest(
            id=uuid4(),
            original_product_id=product_id,
            supplier_id=product.supplier_id,
            supplier_name=product.supplier_name,
            original_data=product.snapshot(),
            proposed_data=dict(proposed_data),
            update_type=UpdateType.IMPORT if batch else UpdateType.MANUAL,
            status=UpdateRequestStatus.PENDING,
            created_at=now,
            updated_at=now,
            import_batch_id=import_batch_id,
        )
        self._commit_request(request)
        if batch is not None:
            self._commit_batch(record_submission(batch))
        logger.info(
            "update_request_submitted",
            extra={
                "request_id": str(request.id),
                "product_id": product_id,
                "update_type": request.update_type.value,
                "changed_fields": sorted(request.changed_fields),
            },
        )
        return request

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    def approve_update(
        self,
        request_id: UUID,
        reviewed_by: str | None = None,
    ) -> ProductUpdateRequest:
        """Approve a pending request and announce it to the catalog owner."""
        request = self._review(request_id, UpdateRequestStatus.APPROVED, reviewed_by)
        self._bus.publish(ProductUpdateApproved(request=request))
        return request

    def reject_update(
        self,
        request_id: UUID,
        reason: str,
        reviewed_by: str | None = None,
    ) -> ProductUpdateRequest:
        if not reason or not reason.strip():
            raise ValidationError("rejection_reason", "is required")
        return self._review(
            request_id, UpdateRequestStatus.REJECTED, reviewed_by, reason.strip(),
        )

    def _review(
        self,
        request_id: UUID,
        outcome: UpdateRequestStatus,
        reviewed_by: str | None,
        rejection_reason: str | None = None,
    ) -> ProductUpdateRequest:
        request = self._requests.get(request_id)
        if request is None:
            raise UpdateRequestNotFoundError(str(request_id))
        if PRODUCT_UPDATE_WORKFLOW.find_transition(
            request.status.value, outcome.value,
        ) is None:
            raise InvalidStatusTransitionError(
                PRODUCT_UPDATE_WORKFLOW.name,
                str(request_id),
                request.status.value,
                outcome.value,
            )

        now = self._clock.now()
        reviewed = replace(
            request,
            status=outcome,
            updated_at=now,
            reviewed_by=reviewed_by,
            reviewed_at=now,
            rejection_reason=rejection_reason,
        )
        batch = None
        if request.import_batch_id is not None:
            current = self._batches.get(request.import_batch_id)
            if current is None:
                raise ImportBatchNotFoundError(str(request.import_batch_id))
            batch = record_review(current, outcome)

        self._commit_request(reviewed)
        if batch is not None:
            self._commit_batch(batch)

        batch_id = str(batch.id) if batch else None
        with LogContext.bind(batch_id=batch_id):
            logger.info(
                "update_request_reviewed",
                extra={
                    "request_id": str(request_id),
                    "outcome": outcome.value,
                    "reviewed_by": reviewed_by,
                    "batch_status": batch.status.value if batch else None,
                },
            )
        return reviewed

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_request(self, request_id: UUID) -> ProductUpdateRequest | None:
        return self._requests.get(request_id)

    def pending_requests(self) -> list[ProductUpdateRequest]:
        return [
            r for r in self._requests.values()
            if r.status == UpdateRequestStatus.PENDING
        ]

    def requests_by_supplier(self, supplier_id: str) -> list[ProductUpdateRequest]:
        return [r for r in self._requests.values() if r.supplier_id == supplier_id]

    def requests_in_batch(self, batch_id: UUID) -> list[ProductUpdateRequest]:
        return [r for r in self._requests.values() if r.import_batch_id == batch_id]

    def get_batch(self, batch_id: UUID) -> ImportBatch | None:
        return self._batches.get(batch_id)

    def all_batches(self) -> list[ImportBatch]:
        return list(self._batches.values())

    def open_batches(self) -> list[ImportBatch]:
        return [
            b for b in self._batches.values()
            if b.status in (ImportBatchStatus.PENDING, ImportBatchStatus.PARTIALLY_APPROVED)
        ]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _commit_request(self, request: ProductUpdateRequest) -> None:
        self._requests[request.id] = request
        persist_quietly(self._store, UPDATE_REQUESTS, request.id, request)

    def _commit_batch(self, batch: ImportBatch) -> None:
        self._batches[batch.id] = batch
        persist_quietly(self._store, IMPORT_BATCHES, batch.id, batch)
