"""
Stock consumption and write-offs (``ordering_modules.inventory.consumption``).

Responsibility
--------------
Kitchen-side stock-outs on top of ``InventoryLedger``: dated consumption
and stock-error reports (expired, damaged, ...) that write off stock and
keep a valued record of the loss.

Invariants
----------
- A stock-error report is recorded only when its stock-out succeeded.
- ``estimated_value`` is the catalog price per unit times the quantity
  (0 when the product is no longer in the catalog).

Failure Modes
-------------
- ``ValidationError`` -- blank reason or description, non-positive quantity.
- Ledger refusals come back as failed ``StockMovementResult``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import uuid4

from ordering_kernel.domain.clock import Clock, SystemClock
from ordering_kernel.domain.values import ZERO, round_money
from ordering_kernel.exceptions import ValidationError
from ordering_kernel.logging_config import get_logger
from ordering_kernel.services.state_store import STOCK_ERRORS, StateStore, persist_quietly
from ordering_modules.inventory.models import (
    StockErrorReport,
    StockErrorType,
    StockMovementResult,
)
from ordering_modules.inventory.service import InventoryLedger

logger = get_logger("modules.inventory.consumption")

STOCK_ERROR_LABELS: dict[StockErrorType, str] = {
    StockErrorType.EXPIRED: "Expired product",
    StockErrorType.DAMAGED: "Damaged product",
    StockErrorType.UNPACKING_ISSUE: "Unpacking issue",
    StockErrorType.QUALITY_ISSUE: "Quality issue",
    StockErrorType.OTHER: "Other",
}


def dated_reason(reason: str, consumed_on: date) -> str:
    """``"Lunch service (14/03/2024)"``."""
    return f"{reason.strip()} ({consumed_on.strftime('%d/%m/%Y')})"


class StockConsumptionService:
    """Consumption and stock-error reporting over an ``InventoryLedger``."""

    def __init__(
        self,
        ledger: InventoryLedger,
        clock: Clock | None = None,
        store: StateStore | None = None,
    ):
        self._ledger = ledger
        self._clock = clock or SystemClock()
        self._store = store
        self._reports: list[StockErrorReport] = []
        if store is not None:
            self._reports.extend(store.load_all(STOCK_ERRORS))

    def consume_stock(
        self,
        product_id: str,
        quantity: Decimal,
        reason: str,
        consumed_on: date | None = None,
    ) -> StockMovementResult:
        """Remove consumed stock, stamping the reason with the consumption date."""
        if not reason or not reason.strip():
            raise ValidationError("reason", "is required")
        consumed_on = consumed_on or self._clock.today()
        return self._ledger.remove_stock(
            product_id, quantity, dated_reason(reason, consumed_on),
        )

    def report_stock_error(
        self,
        product_id: str,
        error_type: StockErrorType,
        quantity: Decimal,
        description: str,
        reported_by: str = "system",
    ) -> tuple[StockMovementResult, StockErrorReport | None]:
        """
        Write off ``quantity`` of unusable stock and record the report.

        Returns:
            The ledger result and the report, or None as the report when the
            ledger refused the stock-out.
        """
        if not description or not description.strip():
            raise ValidationError("description", "is required")
        error_type = StockErrorType(error_type)

        result = self._ledger.remove_stock(
            product_id, quantity, f"Stock error: {STOCK_ERROR_LABELS[error_type]}",
        )
        if not result.is_success:
            logger.warning(
                "stock_error_not_recorded",
                extra={"product_id": product_id, "error_code": result.error_code},
            )
            return result, None

        item = result.item
        product = self._ledger.find_catalog_product(product_id)
        unit_price = product.price_ht if product else ZERO
        report = StockErrorReport(
            id=uuid4(),
            product_id=item.product_id,
            product_name=item.product_name,
            product_reference=item.product_reference,
            error_type=error_type,
            quantity=quantity,
            unit=item.unit,
            description=description.strip(),
            reported_at=self._clock.now(),
            reported_by=reported_by,
            supplier_name=item.supplier_name,
            estimated_value=round_money(unit_price * quantity),
        )
        self._reports.append(report)
        persist_quietly(self._store, STOCK_ERRORS, report.id, report)
        logger.info(
            "stock_error_reported",
            extra={
                "product_id": product_id,
                "error_type": error_type.value,
                "quantity": quantity,
                "estimated_value": report.estimated_value,
            },
        )
        return result, report

    def stock_errors(self, product_id: str | None = None) -> list[StockErrorReport]:
        return [
            r for r in self._reports
            if product_id is None or r.product_id == product_id
        ]
