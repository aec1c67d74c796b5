"""
Tests for the OrderingPlatform composition root.

Validates:
- Construction from the bundled configuration set
- Boundary validation of every command family, with converted values
  reaching the services
- Shipping schedules persisted through the state store
- The end-to-end flow: checkout, reception, stock-in, consumption, alerts
- Product update review through the platform surface
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from ordering_engines.alerts import AlertSeverity
from ordering_kernel.exceptions import (
    InvalidShippingScheduleError,
    InvalidStatusTransitionError,
    ValidationError,
)
from ordering_kernel.services.state_store import (
    ORDERS,
    SHIPPING_SCHEDULES,
    InMemoryStateStore,
)
from ordering_modules.orders.models import CartLine, OrderStatus, ReceptionData
from ordering_modules.product_updates.models import ImportBatchStatus
from ordering_modules.shipping.models import ShippingTier
from ordering_services.platform import OrderingPlatform
from tests.conftest import SUPPLIER_FARM, SUPPLIER_HYGIENE


CART = {
    SUPPLIER_FARM: [
        CartLine("p-tomato", Decimal("20")),
        CartLine("p-flour", Decimal("2")),
    ],
}


class TestConstruction:
    def test_shipping_schedule_seeded_from_config(self, platform):
        assert platform.shipping_cost(SUPPLIER_FARM, "75") == Decimal("10")
        assert platform.shipping_cost(SUPPLIER_FARM, "250") == Decimal("0")
        assert platform.shipping_cost(SUPPLIER_HYGIENE, "10") == Decimal("0")

    def test_defaults_to_in_memory_store(self, catalog):
        platform = OrderingPlatform(catalog)

        assert platform.shipping_schedules.all_schedules() == ()
        assert platform.current_stock("p-tomato") == Decimal("0")

    def test_initialization_logged(self, platform_config, catalog, captured_logs):
        OrderingPlatform.from_config(platform_config, catalog)

        (record,) = [
            r for r in captured_logs() if r["message"] == "ordering_platform_initialized"
        ]
        assert record["store"] == "InMemoryStateStore"
        assert record["shipping_schedule_count"] == 1


class TestBoundaryValidation:
    def test_non_positive_cart_quantity(self, platform, client, state_store):
        with pytest.raises(ValidationError):
            platform.create_orders_from_cart(
                {SUPPLIER_FARM: [CartLine("p-tomato", Decimal("0"))]}, client,
            )
        assert state_store.count(ORDERS) == 0

    def test_blank_product_id(self, platform, client):
        with pytest.raises(ValidationError):
            platform.create_orders_from_cart(
                {SUPPLIER_FARM: [CartLine(" ", Decimal("1"))]}, client,
            )

    @pytest.mark.parametrize("quantity", ["0", "-2", "abc", None])
    def test_stock_quantities(self, platform, quantity):
        with pytest.raises(ValidationError):
            platform.add_stock("p-tomato", quantity, "Initial count")

    def test_blank_reason(self, platform):
        with pytest.raises(ValidationError):
            platform.remove_stock("p-tomato", "1", "  ")

    def test_negative_threshold(self, platform):
        platform.add_stock("p-tomato", "10", "Initial count")
        with pytest.raises(ValidationError):
            platform.set_alert_threshold("p-tomato", "-1")

    def test_unknown_status(self, platform, client):
        order = platform.create_orders_from_cart(CART, client)[0]
        with pytest.raises(ValidationError):
            platform.update_order_status(order.id, "shipped")

    def test_negative_received_quantity(self, platform, client):
        order = platform.create_orders_from_cart(CART, client)[0]
        with pytest.raises(ValidationError):
            platform.receive_item(
                order.id, "p-tomato", ReceptionData(received_quantity=Decimal("-1")),
            )
        assert platform.get_order(order.id).unreceived_items == order.items

    @pytest.mark.parametrize("field", ["received_quantity", "received_price"])
    @pytest.mark.parametrize("value", [Decimal("0"), "0", 0.0])
    def test_zero_received_values(self, platform, client, field, value):
        order = platform.create_orders_from_cart(CART, client)[0]
        with pytest.raises(ValidationError):
            platform.receive_item(order.id, "p-tomato", ReceptionData(**{field: value}))
        assert platform.get_order(order.id).unreceived_items == order.items
        assert platform.current_stock("p-tomato") == Decimal("0")

    @pytest.mark.parametrize(
        "raw, expected", [(12.5, Decimal("12.5")), ("12", Decimal("12"))],
    )
    def test_received_quantity_converted_before_stock_in(
        self, platform, client, raw, expected,
    ):
        order = platform.create_orders_from_cart(CART, client)[0]

        received = platform.receive_item(
            order.id, "p-tomato", ReceptionData(received_quantity=raw),
        )

        item = received.item_for("p-tomato")
        assert isinstance(item.received_quantity, Decimal)
        assert item.received_quantity == expected
        assert platform.current_stock("p-tomato") == expected
        assert len(platform.transaction_history("p-tomato")) == 1

    def test_received_price_converted(self, platform, client):
        order = platform.create_orders_from_cart(CART, client)[0]

        received = platform.receive_item(
            order.id,
            "p-flour",
            ReceptionData(received_quantity="1", received_price=17.5),
        )

        item = received.item_for("p-flour")
        assert item.received_price == Decimal("17.5")
        assert isinstance(item.received_price, Decimal)
        assert platform.current_stock("p-flour") == Decimal("25")

    def test_unknown_error_type(self, platform):
        with pytest.raises(ValidationError):
            platform.report_stock_error("p-tomato", "stolen", "1", "Gone")

    def test_empty_proposal(self, platform):
        with pytest.raises(ValidationError):
            platform.submit_update_request("p-tomato", {})

    def test_blank_rejection_reason(self, platform):
        request = platform.submit_update_request("p-tomato", {"price_ht": "3"})
        with pytest.raises(ValidationError):
            platform.reject_update(request.id, "")


class TestEndToEnd:
    def test_checkout_reception_and_consumption(self, platform, client):
        (order,) = platform.create_orders_from_cart(CART, client)
        assert order.subtotal_ht == Decimal("86.00")
        assert order.shipping_cost == Decimal("10.00")
        assert order.total_ttc == Decimal("115.20")

        platform.receive_item(
            order.id, "p-tomato", ReceptionData(received_quantity=Decimal("20")),
        )
        received = platform.receive_all_items(order.id)

        assert received.status == OrderStatus.RECEIVED
        assert platform.current_stock("p-tomato") == Decimal("20")
        assert platform.current_stock("p-flour") == Decimal("50")

        low = platform.consume_stock("p-tomato", "16", "Lunch service")
        assert low.alert.severity == AlertSeverity.LOW
        critical = platform.remove_stock("p-tomato", "4", "Dinner service")
        assert critical.alert.severity == AlertSeverity.CRITICAL
        assert [a.id for a in platform.active_alerts()] == [critical.alert.id]

        platform.acknowledge_alert(critical.alert.id)
        assert platform.active_alerts() == []
        assert len(platform.transaction_history("p-tomato")) == 3

    def test_manual_received_status_needs_every_line(self, platform, client):
        (order,) = platform.create_orders_from_cart(CART, client)

        with pytest.raises(InvalidStatusTransitionError):
            platform.update_order_status(order.id, OrderStatus.RECEIVED)

        assert platform.get_order(order.id).status == OrderStatus.ORDERED
        assert platform.current_stock("p-tomato") == Decimal("0")

    def test_orders_indexed_by_client_and_supplier(self, platform, client):
        (order,) = platform.create_orders_from_cart(CART, client)

        assert platform.orders_by_client(client.id) == [order]
        assert platform.orders_by_supplier(SUPPLIER_FARM) == [order]
        assert platform.orders_by_supplier(SUPPLIER_HYGIENE) == []

    def test_single_supplier_order(self, platform, client):
        cart = {**CART, SUPPLIER_HYGIENE: [CartLine("p-soap", Decimal("1"))]}

        order = platform.create_single_supplier_order(SUPPLIER_HYGIENE, cart, client)

        assert order.supplier_id == SUPPLIER_HYGIENE
        assert platform.orders_by_supplier(SUPPLIER_FARM) == []

    def test_stock_error_report(self, platform):
        platform.add_stock("p-soap", "10", "Initial count")

        result, report = platform.report_stock_error("p-soap", "damaged", "2", "Leaking")

        assert result.is_success
        assert report.estimated_value == Decimal("24.00")
        assert platform.current_stock("p-soap") == Decimal("8")

    def test_product_update_batch(self, platform):
        batch_id = platform.create_import_batch("prices.csv", SUPPLIER_FARM, "Ferme Bio Dubois")
        first = platform.submit_update_request("p-tomato", {"price_ht": "2.80"}, batch_id)
        second = platform.submit_update_request("p-flour", {"price_ht": "19.00"}, batch_id)

        platform.approve_update(first.id, reviewed_by="buyer-1")
        platform.reject_update(second.id, "Too expensive")

        batch = platform.get_batch(batch_id)
        assert batch.counters == (0, 1, 1)
        assert batch.status == ImportBatchStatus.COMPLETED
        assert platform.pending_update_requests() == []
        assert len(platform.requests_by_supplier(SUPPLIER_FARM)) == 2


class TestShippingSchedules:
    def test_schedule_lifecycle(self, platform):
        platform.create_shipping_schedule(
            SUPPLIER_HYGIENE,
            "Hygiène Pro",
            [ShippingTier(Decimal("0"), None, Decimal("8"))],
        )
        assert platform.shipping_cost(SUPPLIER_HYGIENE, "30") == Decimal("8")

        platform.update_shipping_schedule(
            SUPPLIER_HYGIENE,
            [
                ShippingTier(Decimal("0"), Decimal("100"), Decimal("8")),
                ShippingTier(Decimal("100"), None, Decimal("0")),
            ],
        )
        assert platform.shipping_cost(SUPPLIER_HYGIENE, "150") == Decimal("0")

        assert platform.delete_shipping_schedule(SUPPLIER_HYGIENE) is True
        assert platform.shipping_cost(SUPPLIER_HYGIENE, "30") == Decimal("0")

    def test_schedule_edits_survive_rebuild(
        self, platform, platform_config, catalog, deterministic_clock, state_store,
    ):
        platform.update_shipping_schedule(
            SUPPLIER_FARM, [ShippingTier(Decimal("0"), None, Decimal("7"))],
        )
        platform.create_shipping_schedule(
            SUPPLIER_HYGIENE, "Hygiène Pro", [ShippingTier(Decimal("0"), None, Decimal("8"))],
        )

        rebuilt = OrderingPlatform.from_config(
            platform_config, catalog, clock=deterministic_clock, store=state_store,
        )

        assert rebuilt.shipping_cost(SUPPLIER_FARM, "250") == Decimal("7")
        assert rebuilt.shipping_cost(SUPPLIER_HYGIENE, "30") == Decimal("8")

    def test_deleted_schedule_leaves_store(self, platform, state_store):
        platform.create_shipping_schedule(
            SUPPLIER_HYGIENE, "Hygiène Pro", [ShippingTier(Decimal("0"), None, Decimal("8"))],
        )
        platform.delete_shipping_schedule(SUPPLIER_HYGIENE)

        stored = [s.supplier_id for s in state_store.load_all(SHIPPING_SCHEDULES)]
        assert stored == [SUPPLIER_FARM]

    def test_configured_tier_limit(self, platform):
        tiers = [
            ShippingTier(Decimal(n * 10), Decimal(n * 10 + 10), Decimal("1"))
            for n in range(5)
        ]
        with pytest.raises(InvalidShippingScheduleError):
            platform.create_shipping_schedule(SUPPLIER_HYGIENE, "Hygiène Pro", tiers)


def test_separate_platforms_share_nothing(platform_config, catalog, deterministic_clock):
    first = OrderingPlatform.from_config(
        platform_config, catalog, clock=deterministic_clock, store=InMemoryStateStore(),
    )
    second = OrderingPlatform.from_config(
        platform_config, catalog, clock=deterministic_clock, store=InMemoryStateStore(),
    )

    first.add_stock("p-tomato", "5", "Initial count")

    assert second.current_stock("p-tomato") == Decimal("0")
    assert second.get_order(uuid4()) is None
