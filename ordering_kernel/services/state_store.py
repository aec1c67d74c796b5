"""
State store seam (``ordering_kernel.services.state_store``).

Responsibility:
    Keyed, collection-oriented storage interface the module services write
    through after every successful mutation, and read from once when they
    are constructed.  ``InMemoryStateStore`` is the default backend; the
    SQLAlchemy backend lives in ``ordering_services.persistence``.

Architecture position:
    Kernel > Services.  Modules depend on the ``StateStore`` protocol only.

Invariants enforced:
    - ``save`` is an upsert keyed by ``(collection, key)``.
    - ``load_all`` returns a collection in first-save order.
    - ``delete`` of an absent key is a no-op.
    - ``persist_quietly`` never raises: persistence is fire-and-forget and a
      failed write leaves in-memory state authoritative.

Failure modes:
    - Backend exceptions are logged as ``state_store_write_failed`` with
      traceback by ``persist_quietly`` (``state_store_delete_failed`` by
      ``delete_quietly``).
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ordering_kernel.logging_config import get_logger

logger = get_logger("services.state_store")

ORDERS = "orders"
INVENTORY_ITEMS = "inventory_items"
INVENTORY_TRANSACTIONS = "inventory_transactions"
INVENTORY_ALERTS = "inventory_alerts"
STOCK_ERRORS = "stock_errors"
UPDATE_REQUESTS = "update_requests"
IMPORT_BATCHES = "import_batches"
SHIPPING_SCHEDULES = "shipping_schedules"

ALL_COLLECTIONS: tuple[str, ...] = (
    ORDERS,
    INVENTORY_ITEMS,
    INVENTORY_TRANSACTIONS,
    INVENTORY_ALERTS,
    STOCK_ERRORS,
    UPDATE_REQUESTS,
    IMPORT_BATCHES,
    SHIPPING_SCHEDULES,
)


@runtime_checkable
class StateStore(Protocol):
    """Keyed collection storage."""

    def save(self, collection: str, key: str, entity: Any) -> None:
        ...

    def load_all(self, collection: str) -> list[Any]:
        ...

    def delete(self, collection: str, key: str) -> None:
        ...


class InMemoryStateStore:
    """Dictionary-backed ``StateStore``; insertion order is first-save order."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Any]] = {}

    def save(self, collection: str, key: str, entity: Any) -> None:
        self._collections.setdefault(collection, {})[key] = entity

    def load_all(self, collection: str) -> list[Any]:
        return list(self._collections.get(collection, {}).values())

    def delete(self, collection: str, key: str) -> None:
        self._collections.get(collection, {}).pop(key, None)

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))


def persist_quietly(store: StateStore | None, collection: str, key: Any, entity: Any) -> bool:
    """
    Write ``entity`` to ``store`` after an in-memory mutation has committed.

    Returns:
        True if the write succeeded (or there is no store), False otherwise.
    """
    if store is None:
        return True
    try:
        store.save(collection, str(key), entity)
    except Exception:
        logger.error(
            "state_store_write_failed",
            exc_info=True,
            extra={"collection": collection, "key": str(key)},
        )
        return False
    return True


def delete_quietly(store: StateStore | None, collection: str, key: Any) -> bool:
    """Remove ``key`` from ``store``; same contract as ``persist_quietly``."""
    if store is None:
        return True
    try:
        store.delete(collection, str(key))
    except Exception:
        logger.error(
            "state_store_delete_failed",
            exc_info=True,
            extra={"collection": collection, "key": str(key)},
        )
        return False
    return True
