"""
Pytest fixtures for the ordering core test suite.

Provides:
- Structured logging configured once per session, with a JSON capture fixture
- A deterministic clock
- A small in-memory catalog spanning two suppliers
- Module services wired the way OrderingPlatform wires them
- An OrderingPlatform built from the bundled default configuration set

Persistence tests use in-memory SQLite (see tests/services/test_sql_state_store.py).
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from ordering_config import get_active_config
from ordering_kernel.db.engine import reset_engine
from ordering_kernel.domain.catalog import CatalogProduct, InMemoryCatalog, ProductCategory
from ordering_kernel.domain.clock import DeterministicClock
from ordering_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ordering_kernel.services.notification_bus import NotificationBus
from ordering_kernel.services.state_store import InMemoryStateStore
from ordering_modules.inventory.service import InventoryLedger
from ordering_modules.orders.models import ClientInfo
from ordering_modules.orders.service import OrderService
from ordering_modules.shipping.models import ShippingTier
from ordering_modules.shipping.service import (
    ShippingCostCalculator,
    ShippingScheduleRegistry,
)
from ordering_services.platform import OrderingPlatform

SUPPLIER_FARM = "supplier-1"
SUPPLIER_HYGIENE = "supplier-2"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ordering_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, ledger):
            ledger.remove_stock("p-1", Decimal("1"), "Lunch")
            logs = captured_logs()
            assert any(r["message"] == "stock_movement_refused" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ordering_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


@pytest.fixture(autouse=True)
def _reset_engine():
    """Dispose any engine a persistence test initialized."""
    yield
    reset_engine()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def deterministic_clock():
    return DeterministicClock()


@pytest.fixture
def tomato():
    return CatalogProduct(
        id="p-tomato",
        name="Tomates grappe",
        reference="TOM-001",
        price_ht=Decimal("2.50"),
        supplier_id=SUPPLIER_FARM,
        supplier_name="Ferme Bio Dubois",
        packaging_unit="kg",
        is_organic=True,
        is_egalim=True,
    )


@pytest.fixture
def flour():
    """Sold by the sack, stocked by the kilogram."""
    return CatalogProduct(
        id="p-flour",
        name="Farine T55",
        reference="FAR-025",
        price_ht=Decimal("18.00"),
        supplier_id=SUPPLIER_FARM,
        supplier_name="Ferme Bio Dubois",
        packaging_unit="sack",
        packaging_coefficient=Decimal("25"),
        negotiation_unit="kg",
    )


@pytest.fixture
def soap():
    return CatalogProduct(
        id="p-soap",
        name="Savon liquide 5L",
        reference="SAV-005",
        price_ht=Decimal("12.00"),
        supplier_id=SUPPLIER_HYGIENE,
        supplier_name="Hygiène Pro",
        category=ProductCategory.NON_FOOD,
        packaging_unit="bidon",
    )


@pytest.fixture
def catalog(tomato, flour, soap):
    return InMemoryCatalog([tomato, flour, soap])


@pytest.fixture
def client():
    return ClientInfo(id="client-1", name="Restaurant du Port")


# =============================================================================
# Service fixtures
# =============================================================================


@pytest.fixture
def bus():
    return NotificationBus()


@pytest.fixture
def shipping_registry(deterministic_clock):
    registry = ShippingScheduleRegistry(deterministic_clock)
    registry.create_schedule(
        SUPPLIER_FARM,
        "Ferme Bio Dubois",
        [
            ShippingTier(Decimal("0"), Decimal("50"), Decimal("15")),
            ShippingTier(Decimal("50"), Decimal("100"), Decimal("10")),
            ShippingTier(Decimal("100"), Decimal("200"), Decimal("5")),
            ShippingTier(Decimal("200"), None, Decimal("0")),
        ],
    )
    return registry


@pytest.fixture
def order_service(catalog, shipping_registry, bus, deterministic_clock):
    return OrderService(
        catalog,
        ShippingCostCalculator(shipping_registry),
        bus,
        clock=deterministic_clock,
    )


@pytest.fixture
def ledger(catalog, deterministic_clock):
    return InventoryLedger(catalog, clock=deterministic_clock)


@pytest.fixture
def state_store():
    return InMemoryStateStore()


@pytest.fixture
def platform_config():
    return get_active_config()


@pytest.fixture
def platform(platform_config, catalog, deterministic_clock, state_store):
    return OrderingPlatform.from_config(
        platform_config, catalog, clock=deterministic_clock, store=state_store,
    )
