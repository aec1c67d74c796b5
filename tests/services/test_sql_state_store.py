"""
Tests for the SQLAlchemy state store.

Uses in-memory SQLite.  Validates:
- save/load_all per collection, including nested order lines
- Upsert semantics: a second save replaces the row and keeps its position
- Shipping schedules stored with decimal tiers and removed on delete
- A platform rebuilt on the same store resumes where the first one stopped
"""

from decimal import Decimal

import pytest

from ordering_kernel.services.state_store import (
    INVENTORY_ITEMS,
    ORDERS,
    SHIPPING_SCHEDULES,
    UPDATE_REQUESTS,
    persist_quietly,
)
from ordering_modules.orders.models import CartLine, OrderStatus, ReceptionData
from ordering_modules.shipping.models import ShippingTier
from ordering_services.persistence import SqlStateStore
from ordering_services.platform import OrderingPlatform
from tests.conftest import SUPPLIER_FARM, SUPPLIER_HYGIENE


@pytest.fixture
def sql_store():
    return SqlStateStore("sqlite://")


@pytest.fixture
def sql_platform(platform_config, catalog, deterministic_clock, sql_store):
    return OrderingPlatform.from_config(
        platform_config, catalog, clock=deterministic_clock, store=sql_store,
    )


def _checkout(platform, client):
    return platform.create_orders_from_cart(
        {
            SUPPLIER_FARM: [
                CartLine("p-tomato", Decimal("20")),
                CartLine("p-flour", Decimal("2")),
            ],
        },
        client,
    )[0]


class TestSaveAndLoad:
    def test_order_round_trip(self, sql_platform, sql_store, client):
        order = _checkout(sql_platform, client)

        loaded = sql_store.load_all(ORDERS)

        assert loaded == [order]
        assert [i.product_id for i in loaded[0].items] == ["p-tomato", "p-flour"]

    def test_resave_replaces_row_in_place(self, sql_platform, sql_store, client):
        first = _checkout(sql_platform, client)
        second = _checkout(sql_platform, client)

        sql_platform.receive_item(
            first.id, "p-tomato", ReceptionData(received_quantity=Decimal("18")),
        )

        loaded = sql_store.load_all(ORDERS)
        assert [o.id for o in loaded] == [first.id, second.id]
        assert loaded[0].item_for("p-tomato").received_quantity == Decimal("18")

    def test_string_keyed_collection(self, sql_platform, sql_store):
        sql_platform.add_stock("p-tomato", "12", "Initial count")
        sql_platform.add_stock("p-tomato", "3", "Top-up")

        items = sql_store.load_all(INVENTORY_ITEMS)

        assert len(items) == 1
        assert items[0].current_stock == Decimal("15")

    def test_json_payload_round_trip(self, sql_platform, sql_store):
        request = sql_platform.submit_update_request(
            "p-tomato", {"price_ht": "2.80", "available": False},
        )

        loaded = sql_store.load_all(UPDATE_REQUESTS)

        assert loaded[0].proposed_data == {"price_ht": "2.80", "available": False}
        assert loaded[0].original_data == request.original_data

    def test_shipping_schedule_round_trip(self, sql_platform, sql_store):
        saved = sql_platform.create_shipping_schedule(
            SUPPLIER_HYGIENE,
            "Hygiène Pro",
            [
                ShippingTier(Decimal("0"), Decimal("99.50"), Decimal("8.90")),
                ShippingTier(Decimal("99.50"), None, Decimal("0")),
            ],
        )

        loaded = {s.supplier_id: s for s in sql_store.load_all(SHIPPING_SCHEDULES)}

        assert set(loaded) == {SUPPLIER_FARM, SUPPLIER_HYGIENE}
        assert loaded[SUPPLIER_HYGIENE] == saved
        assert loaded[SUPPLIER_HYGIENE].tiers[1].max_amount is None

    def test_delete_removes_row(self, sql_platform, sql_store):
        sql_platform.delete_shipping_schedule(SUPPLIER_FARM)
        sql_store.delete(SHIPPING_SCHEDULES, "missing")

        assert sql_store.load_all(SHIPPING_SCHEDULES) == []

    def test_unknown_collection_is_logged_not_raised(self, sql_store, captured_logs):
        assert persist_quietly(sql_store, "unknown", "k", object()) is False
        assert any(r["message"] == "state_store_write_failed" for r in captured_logs())


class TestPlatformReload:
    def test_rebuilt_platform_resumes(
        self, platform_config, catalog, deterministic_clock, sql_store, sql_platform, client,
    ):
        order = _checkout(sql_platform, client)
        sql_platform.receive_all_items(order.id)
        low = sql_platform.consume_stock("p-tomato", "16", "Lunch service")
        batch_id = sql_platform.create_import_batch("prices.csv", SUPPLIER_FARM, "Ferme Bio Dubois")
        sql_platform.submit_update_request("p-flour", {"name": "Farine T65"}, batch_id)

        rebuilt = OrderingPlatform.from_config(
            platform_config, catalog, clock=deterministic_clock, store=sql_store,
        )

        assert rebuilt.get_order(order.id).status == OrderStatus.RECEIVED
        assert rebuilt.current_stock("p-tomato") == Decimal("4")
        assert rebuilt.current_stock("p-flour") == Decimal("50")
        assert len(rebuilt.transaction_history()) == 3
        assert [a.id for a in rebuilt.active_alerts()] == [low.alert.id]
        assert rebuilt.get_batch(batch_id).counters == (1, 0, 0)
        assert len(rebuilt.pending_update_requests()) == 1
        assert rebuilt.inventory.reconcile("p-tomato").is_consistent

    def test_shipping_schedules_reload(
        self, platform_config, catalog, deterministic_clock, sql_store, sql_platform,
    ):
        sql_platform.update_shipping_schedule(
            SUPPLIER_FARM,
            [
                ShippingTier(Decimal("0"), Decimal("80"), Decimal("12")),
                ShippingTier(Decimal("80"), None, Decimal("0")),
            ],
        )
        sql_platform.create_shipping_schedule(
            SUPPLIER_HYGIENE, "Hygiène Pro", [ShippingTier(Decimal("0"), None, Decimal("8"))],
        )

        rebuilt = OrderingPlatform.from_config(
            platform_config, catalog, clock=deterministic_clock, store=sql_store,
        )

        assert rebuilt.shipping_cost(SUPPLIER_FARM, "50") == Decimal("12")
        assert rebuilt.shipping_cost(SUPPLIER_FARM, "90") == Decimal("0")
        assert rebuilt.shipping_cost(SUPPLIER_HYGIENE, "30") == Decimal("8")
        assert len(rebuilt.shipping_schedules.all_schedules()) == 2

    def test_deleted_schedule_not_resurrected_for_unseeded_supplier(
        self, platform_config, catalog, deterministic_clock, sql_store, sql_platform,
    ):
        sql_platform.create_shipping_schedule(
            SUPPLIER_HYGIENE, "Hygiène Pro", [ShippingTier(Decimal("0"), None, Decimal("8"))],
        )
        sql_platform.delete_shipping_schedule(SUPPLIER_HYGIENE)

        rebuilt = OrderingPlatform.from_config(
            platform_config, catalog, clock=deterministic_clock, store=sql_store,
        )

        assert rebuilt.shipping_schedules.get_schedule(SUPPLIER_HYGIENE) is None
        assert rebuilt.shipping_cost(SUPPLIER_HYGIENE, "30") == Decimal("0")
