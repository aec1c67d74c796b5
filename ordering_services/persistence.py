"""
Persistence service (``ordering_services.persistence``).

Responsibility:
    SQLAlchemy implementation of the kernel ``StateStore`` seam.  Each
    collection maps to one module ORM model; entities are converted with the
    model's ``from_dto`` / ``to_dto``.

Architecture position:
    Services.  Imports every module's ``orm`` so that ``Base.metadata`` is
    complete before ``create_tables()`` runs.

Invariants enforced:
    - ``save`` replaces the stored row of an entity and keeps its original
      ``sequence``, so ``load_all`` returns first-save order.
    - ``delete`` of a missing key is a no-op.
    - Each ``save`` and ``delete`` runs in its own ``session_scope`` transaction.

Failure modes:
    - ``KeyError`` for an unknown collection.
    - SQLAlchemy errors propagate to the caller; module services write
      through ``persist_quietly``, which logs and swallows them.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func, select

from ordering_kernel.db.engine import (
    create_tables,
    get_engine,
    init_engine_from_url,
    session_scope,
)
from ordering_kernel.logging_config import get_logger
from ordering_kernel.services.state_store import (
    IMPORT_BATCHES,
    INVENTORY_ALERTS,
    INVENTORY_ITEMS,
    INVENTORY_TRANSACTIONS,
    ORDERS,
    SHIPPING_SCHEDULES,
    STOCK_ERRORS,
    UPDATE_REQUESTS,
)
from ordering_modules.inventory.orm import (
    InventoryAlertModel,
    InventoryItemModel,
    InventoryTransactionModel,
    StockErrorReportModel,
)
from ordering_modules.orders.orm import OrderModel
from ordering_modules.product_updates.orm import (
    ImportBatchModel,
    ProductUpdateRequestModel,
)
from ordering_modules.shipping.orm import ShippingScheduleModel

logger = get_logger("services.persistence")

COLLECTION_MODELS: dict[str, type] = {
    ORDERS: OrderModel,
    INVENTORY_ITEMS: InventoryItemModel,
    INVENTORY_TRANSACTIONS: InventoryTransactionModel,
    INVENTORY_ALERTS: InventoryAlertModel,
    STOCK_ERRORS: StockErrorReportModel,
    UPDATE_REQUESTS: ProductUpdateRequestModel,
    IMPORT_BATCHES: ImportBatchModel,
    SHIPPING_SCHEDULES: ShippingScheduleModel,
}


class SqlStateStore:
    """``StateStore`` backed by the engine configured in ``ordering_kernel.db.engine``."""

    def __init__(self, database_url: str | None = None, echo: bool = False):
        if database_url is not None:
            init_engine_from_url(database_url, echo=echo)
        else:
            get_engine()
        create_tables()

    def save(self, collection: str, key: str, entity: Any) -> None:
        model_cls = COLLECTION_MODELS[collection]
        key_column = getattr(model_cls, model_cls.__store_key__)
        lookup = _key_value(model_cls, key)
        with session_scope() as session:
            existing = session.execute(
                select(model_cls).where(key_column == lookup)
            ).scalar_one_or_none()
            if existing is not None:
                sequence = existing.sequence
                session.delete(existing)
                session.flush()
            else:
                sequence = (
                    session.execute(select(func.max(model_cls.sequence))).scalar() or 0
                ) + 1
            row = model_cls.from_dto(entity)
            row.sequence = sequence
            session.add(row)
        logger.debug(
            "state_saved",
            extra={"collection": collection, "key": key, "sequence": sequence},
        )

    def load_all(self, collection: str) -> list[Any]:
        model_cls = COLLECTION_MODELS[collection]
        with session_scope() as session:
            rows = session.execute(
                select(model_cls).order_by(model_cls.sequence)
            ).scalars().all()
            entities = [row.to_dto() for row in rows]
        logger.debug(
            "state_loaded",
            extra={"collection": collection, "count": len(entities)},
        )
        return entities

    def delete(self, collection: str, key: str) -> None:
        model_cls = COLLECTION_MODELS[collection]
        key_column = getattr(model_cls, model_cls.__store_key__)
        with session_scope() as session:
            existing = session.execute(
                select(model_cls).where(key_column == _key_value(model_cls, key))
            ).scalar_one_or_none()
            if existing is not None:
                session.delete(existing)
        logger.debug(
            "state_deleted",
            extra={"collection": collection, "key": key, "found": existing is not None},
        )


def _key_value(model_cls: type, key: Any) -> Any:
    if model_cls.__store_key__ == "id":
        return key if isinstance(key, UUID) else UUID(str(key))
    return key
