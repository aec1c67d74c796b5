"""
Tests for kitchen consumption and stock-error write-offs.

Validates:
- Consumption reasons are stamped with the consumption date
- Stock-error reports are recorded only when the stock-out succeeded
- Estimated value is catalog price times quantity, rounded to cents
"""

from datetime import date
from decimal import Decimal

import pytest

from ordering_kernel.exceptions import ValidationError
from ordering_kernel.services.state_store import STOCK_ERRORS, InMemoryStateStore
from ordering_modules.inventory.consumption import (
    StockConsumptionService,
    dated_reason,
)
from ordering_modules.inventory.models import StockErrorType, StockMovementStatus


@pytest.fixture
def consumption(ledger, deterministic_clock):
    ledger.add_stock("p-tomato", Decimal("20"), "Initial count")
    return StockConsumptionService(ledger, clock=deterministic_clock)


class TestConsumeStock:
    def test_reason_carries_clock_date(self, consumption, ledger):
        result = consumption.consume_stock("p-tomato", Decimal("3"), "Lunch service")

        assert result.is_success
        assert result.transaction.reason == "Lunch service (01/01/2024)"
        assert ledger.current_stock("p-tomato") == Decimal("17")

    def test_explicit_date(self, consumption):
        result = consumption.consume_stock(
            "p-tomato", Decimal("1"), "  Dinner  ", consumed_on=date(2024, 3, 14),
        )
        assert result.transaction.reason == "Dinner (14/03/2024)"

    def test_blank_reason_rejected(self, consumption):
        with pytest.raises(ValidationError):
            consumption.consume_stock("p-tomato", Decimal("1"), "   ")

    def test_over_consumption_refused(self, consumption, ledger):
        result = consumption.consume_stock("p-tomato", Decimal("50"), "Banquet")

        assert result.status == StockMovementStatus.INSUFFICIENT_STOCK
        assert ledger.current_stock("p-tomato") == Decimal("20")


class TestReportStockError:
    def test_report_recorded_with_value(self, consumption, ledger):
        result, report = consumption.report_stock_error(
            "p-tomato", StockErrorType.DAMAGED, Decimal("3"), "Crushed crate",
            reported_by="chef-1",
        )

        assert result.is_success
        assert result.transaction.reason == "Stock error: Damaged product"
        assert ledger.current_stock("p-tomato") == Decimal("17")
        assert report.estimated_value == Decimal("7.50")
        assert report.unit == "kg"
        assert report.supplier_name == "Ferme Bio Dubois"
        assert report.reported_by == "chef-1"
        assert consumption.stock_errors("p-tomato") == [report]

    def test_error_type_accepts_value(self, consumption):
        _, report = consumption.report_stock_error(
            "p-tomato", "expired", Decimal("1"), "Past date",
        )
        assert report.error_type == StockErrorType.EXPIRED

    def test_refused_stock_out_records_nothing(self, consumption, ledger, captured_logs):
        result, report = consumption.report_stock_error(
            "p-tomato", StockErrorType.EXPIRED, Decimal("30"), "Whole delivery",
        )

        assert report is None
        assert result.error_code == "INSUFFICIENT_STOCK"
        assert consumption.stock_errors() == []
        assert ledger.current_stock("p-tomato") == Decimal("20")
        assert any(r["message"] == "stock_error_not_recorded" for r in captured_logs())

    def test_blank_description_rejected(self, consumption):
        with pytest.raises(ValidationError):
            consumption.report_stock_error(
                "p-tomato", StockErrorType.OTHER, Decimal("1"), "",
            )

    def test_reports_reload_from_store(self, ledger, deterministic_clock):
        store = InMemoryStateStore()
        ledger.add_stock("p-tomato", Decimal("5"), "Initial count")
        first = StockConsumptionService(ledger, clock=deterministic_clock, store=store)
        _, report = first.report_stock_error(
            "p-tomato", StockErrorType.QUALITY_ISSUE, Decimal("1"), "Soft",
        )

        reloaded = StockConsumptionService(ledger, clock=deterministic_clock, store=store)

        assert store.count(STOCK_ERRORS) == 1
        assert reloaded.stock_errors() == [report]


def test_dated_reason_format():
    assert dated_reason("Lunch", date(2024, 12, 5)) == "Lunch (05/12/2024)"
