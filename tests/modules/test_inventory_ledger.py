"""
Tests for the Inventory ledger.

Validates:
- Stock-in: entry creation from the catalog snapshot, increments
- Stock-out: refusals leave state untouched, no transaction recorded
- Adjustments: absolute delta, auto-creation for catalog products
- Alerts: single live alert per product, severity, acknowledgement, history
- Thresholds, catalog sync, reconciliation
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from ordering_engines.alerts import AlertSeverity
from ordering_kernel.exceptions import (
    AlertNotFoundError,
    ProductNotFoundError,
    ValidationError,
)
from ordering_modules.inventory.config import InventoryConfig
from ordering_modules.inventory.models import StockMovementStatus, TransactionType
from ordering_modules.inventory.service import InventoryLedger


class TestAddStock:
    def test_creates_entry_from_catalog(self, ledger):
        result = ledger.add_stock("p-tomato", Decimal("12"), "Initial count")

        assert result.is_success
        item = ledger.get_item("p-tomato")
        assert item.current_stock == Decimal("12")
        assert item.product_name == "Tomates grappe"
        assert item.product_reference == "TOM-001"
        assert item.unit == "kg"
        assert item.alert_threshold == Decimal("5")
        assert item.is_organic and item.is_egalim

    def test_unit_prefers_negotiation_unit(self, ledger):
        ledger.add_stock("p-flour", Decimal("25"), "Initial count")
        assert ledger.get_item("p-flour").unit == "kg"

    def test_increments_existing_entry(self, ledger):
        ledger.add_stock("p-tomato", Decimal("12"), "Initial count")
        result = ledger.add_stock("p-tomato", Decimal("3"), "Top-up")

        assert ledger.current_stock("p-tomato") == Decimal("15")
        txn = result.transaction
        assert txn.type == TransactionType.IN
        assert txn.quantity == Decimal("3")
        assert (txn.stock_before, txn.stock_after) == (Decimal("12"), Decimal("15"))

    def test_records_order_and_actor(self, ledger):
        order_id = uuid4()
        result = ledger.add_stock("p-tomato", Decimal("1"), "Order reception #12345", order_id)

        assert result.transaction.order_id == order_id
        assert result.transaction.created_by == "system"

    def test_unknown_everywhere_is_failure(self, ledger):
        result = ledger.add_stock("p-ghost", Decimal("1"), "Initial count")

        assert not result.is_success
        assert result.status == StockMovementStatus.PRODUCT_NOT_FOUND
        assert result.error_code == "PRODUCT_NOT_FOUND"
        assert ledger.history() == []
        assert ledger.get_item("p-ghost") is None

    def test_non_positive_quantity_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.add_stock("p-tomato", Decimal("0"), "Nothing")


class TestRemoveStock:
    def test_reference_alert_sequence(self, ledger):
        """20 in, 16 out -> 4 (low alert), 4 out -> 0 (critical alert)."""
        ledger.add_stock("p-tomato", Decimal("20"), "Initial count")

        first = ledger.remove_stock("p-tomato", Decimal("16"), "Lunch service")
        assert ledger.current_stock("p-tomato") == Decimal("4")
        assert first.alert.severity == AlertSeverity.LOW
        assert [a.severity for a in ledger.active_alerts()] == [AlertSeverity.LOW]

        second = ledger.remove_stock("p-tomato", Decimal("4"), "Dinner service")
        assert ledger.current_stock("p-tomato") == Decimal("0")
        assert second.alert.severity == AlertSeverity.CRITICAL
        assert [a.severity for a in ledger.active_alerts()] == [AlertSeverity.CRITICAL]

    def test_insufficient_stock_leaves_state_unchanged(self, ledger):
        ledger.add_stock("p-tomato", Decimal("3"), "Initial count")
        before_item = ledger.get_item("p-tomato")
        before_history = ledger.history()

        result = ledger.remove_stock("p-tomato", Decimal("5"), "Too much")

        assert result.status == StockMovementStatus.INSUFFICIENT_STOCK
        assert result.error_code == "INSUFFICIENT_STOCK"
        assert result.transaction is None
        assert ledger.get_item("p-tomato") == before_item
        assert ledger.history() == before_history

    def test_missing_entry(self, ledger, captured_logs):
        result = ledger.remove_stock("p-tomato", Decimal("1"), "Lunch")

        assert result.status == StockMovementStatus.PRODUCT_NOT_FOUND
        refused = [r for r in captured_logs() if r["message"] == "stock_movement_refused"]
        assert refused[0]["error_code"] == "PRODUCT_NOT_FOUND"
        assert refused[0]["product_id"] == "p-tomato"

    def test_exact_stock_allowed(self, ledger):
        ledger.add_stock("p-tomato", Decimal("2"), "Initial count")
        assert ledger.remove_stock("p-tomato", Decimal("2"), "All of it").is_success


class TestAdjustStock:
    def test_records_absolute_delta(self, ledger):
        ledger.add_stock("p-tomato", Decimal("10"), "Initial count")

        result = ledger.adjust_stock("p-tomato", Decimal("7"), "Inventory count")

        txn = result.transaction
        assert txn.type == TransactionType.ADJUSTMENT
        assert txn.quantity == Decimal("3")
        assert txn.signed_delta == Decimal("-3")
        assert ledger.current_stock("p-tomato") == Decimal("7")

    def test_zero_delta_still_recorded(self, ledger):
        ledger.add_stock("p-tomato", Decimal("10"), "Initial count")

        result = ledger.adjust_stock("p-tomato", Decimal("10"), "Recount")

        assert result.transaction.quantity == Decimal("0")
        assert len(ledger.history("p-tomato")) == 2

    def test_creates_entry_for_catalog_product(self, ledger):
        result = ledger.adjust_stock("p-soap", Decimal("4"), "First count")

        assert result.is_success
        assert result.transaction.stock_before == Decimal("0")
        assert ledger.current_stock("p-soap") == Decimal("4")

    def test_unknown_product_failure(self, ledger):
        result = ledger.adjust_stock("p-ghost", Decimal("4"), "First count")

        assert result.status == StockMovementStatus.PRODUCT_NOT_FOUND
        assert ledger.history() == []

    def test_negative_target_rejected(self, ledger):
        with pytest.raises(ValidationError):
            ledger.adjust_stock("p-tomato", Decimal("-1"), "Oops")


class TestAlerts:
    def test_recovery_clears_live_alert(self, ledger):
        ledger.add_stock("p-tomato", Decimal("3"), "Initial count")
        assert len(ledger.active_alerts()) == 1

        result = ledger.add_stock("p-tomato", Decimal("10"), "Delivery")

        assert result.alert is None
        assert ledger.active_alerts() == []
        history = ledger.alert_history("p-tomato")
        assert len(history) == 1
        assert history[0].cleared_at is not None

    def test_one_live_alert_per_product(self, ledger):
        ledger.add_stock("p-tomato", Decimal("5"), "Initial count")
        ledger.remove_stock("p-tomato", Decimal("1"), "Lunch")
        ledger.remove_stock("p-tomato", Decimal("1"), "Dinner")

        live = [a for a in ledger.alert_history("p-tomato") if a.is_live]
        assert len(live) == 1
        assert live[0].current_stock == Decimal("3")
        assert len(ledger.alert_history("p-tomato")) == 3

    def test_alert_raised_is_logged(self, ledger, captured_logs):
        ledger.add_stock("p-tomato", Decimal("1"), "Initial count")

        raised = [r for r in captured_logs() if r["message"] == "inventory_alert_raised"]
        assert raised[0]["level"] == "WARNING"
        assert raised[0]["severity"] == "low"

    def test_acknowledge(self, ledger):
        result = ledger.add_stock("p-tomato", Decimal("1"), "Initial count")

        acknowledged = ledger.acknowledge_alert(result.alert.id)

        assert acknowledged.acknowledged is True
        assert ledger.active_alerts() == []
        assert ledger.alert_history()[0].acknowledged is True

    def test_acknowledge_unknown(self, ledger):
        with pytest.raises(AlertNotFoundError):
            ledger.acknowledge_alert(uuid4())


class TestThresholds:
    def test_set_threshold_does_not_recompute(self, ledger):
        ledger.add_stock("p-tomato", Decimal("8"), "Initial count")

        item = ledger.set_alert_threshold("p-tomato", Decimal("10"))

        assert item.alert_threshold == Decimal("10")
        assert ledger.active_alerts() == []

        ledger.remove_stock("p-tomato", Decimal("1"), "Lunch")
        assert len(ledger.active_alerts()) == 1

    def test_unknown_product(self, ledger):
        with pytest.raises(ProductNotFoundError):
            ledger.set_alert_threshold("p-tomato", Decimal("3"))

    def test_negative_threshold(self, ledger):
        ledger.add_stock("p-tomato", Decimal("8"), "Initial count")
        with pytest.raises(ValidationError):
            ledger.set_alert_threshold("p-tomato", Decimal("-1"))

    def test_configured_default_threshold(self, catalog, deterministic_clock):
        ledger = InventoryLedger(
            catalog,
            clock=deterministic_clock,
            config=InventoryConfig(default_alert_threshold=Decimal("0")),
        )

        result = ledger.add_stock("p-tomato", Decimal("1"), "Initial count")

        assert result.alert is None


class TestCatalogSyncAndReconcile:
    def test_sync_creates_missing_entries_only(self, ledger):
        ledger.add_stock("p-tomato", Decimal("8"), "Initial count")

        created = ledger.sync_catalog()

        assert sorted(i.product_id for i in created) == ["p-flour", "p-soap"]
        assert ledger.current_stock("p-tomato") == Decimal("8")
        assert ledger.current_stock("p-soap") == Decimal("0")
        assert len(ledger.history()) == 1
        assert ledger.active_alerts() == []

    def test_reconcile_consistent(self, ledger):
        ledger.add_stock("p-tomato", Decimal("8"), "Initial count")
        ledger.remove_stock("p-tomato", Decimal("3"), "Lunch")
        ledger.adjust_stock("p-tomato", Decimal("9"), "Recount")
        ledger.add_stock("p-tomato", Decimal("1"), "Gift")

        report = ledger.reconcile("p-tomato")

        assert report.is_consistent
        assert report.replayed_stock == Decimal("10")
        assert report.transaction_count == 4


class TestQueries:
    def test_history_oldest_first_and_filtered(self, ledger):
        ledger.add_stock("p-tomato", Decimal("8"), "First")
        ledger.add_stock("p-soap", Decimal("2"), "Second")
        ledger.remove_stock("p-tomato", Decimal("1"), "Third")

        assert [t.reason for t in ledger.history()] == ["First", "Second", "Third"]
        assert [t.reason for t in ledger.history("p-tomato")] == ["First", "Third"]

    def test_current_stock_of_unknown_is_zero(self, ledger):
        assert ledger.current_stock("p-ghost") == Decimal("0")
