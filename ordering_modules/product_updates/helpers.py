"""Pure batch bookkeeping for the product update workflow."""

from __future__ import annotations

from dataclasses import replace

from ordering_modules.product_updates.models import (
    ImportBatch,
    ImportBatchStatus,
    UpdateRequestStatus,
)


def batch_status(pending: int, approved: int) -> ImportBatchStatus:
    """
    Status implied by a batch's counters.

    While requests are pending the batch is ``partially_approved`` once
    anything was approved; when none are pending it is ``completed`` if
    anything was approved and ``rejected`` otherwise.
    """
    if pending > 0:
        return (
            ImportBatchStatus.PARTIALLY_APPROVED if approved > 0
            else ImportBatchStatus.PENDING
        )
    return ImportBatchStatus.COMPLETED if approved > 0 else ImportBatchStatus.REJECTED


def record_submission(batch: ImportBatch) -> ImportBatch:
    total = batch.total_updates + 1
    pending = batch.pending_updates + 1
    return replace(
        batch,
        total_updates=total,
        pending_updates=pending,
        status=batch_status(pending, batch.approved_updates),
    )


def record_review(batch: ImportBatch, outcome: UpdateRequestStatus) -> ImportBatch:
    """Move one request of ``batch`` from pending to ``outcome``."""
    pending = batch.pending_updates - 1
    approved = batch.approved_updates + (outcome == UpdateRequestStatus.APPROVED)
    rejected = batch.rejected_updates + (outcome == UpdateRequestStatus.REJECTED)
    return replace(
        batch,
        pending_updates=pending,
        approved_updates=approved,
        rejected_updates=rejected,
        status=batch_status(pending, approved),
    )
