"""
Module: ordering_modules.inventory.orm
Responsibility: SQLAlchemy ORM persistence models for the inventory module.
    Maps the frozen ledger DTOs (entries, transactions, alerts, stock-error
    reports) to relational tables.

Architecture position: Modules > Inventory > ORM.  Inherits from Base
    (ordering_kernel.db.base).  Product identifiers are catalog-owned String
    columns; ``order_id`` is a UUID with NO foreign key so the inventory
    tables never depend on the orders tables.

Invariants enforced:
    - All stock quantities and values use Decimal (Numeric(38,9)), never float.
    - Enum fields stored as String(50).
    - One inventory_items row per product (unique product_id).

Failure modes:
    - IntegrityError on duplicate product_id or transaction id.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ordering_kernel.db.base import Base, SequencedMixin, ensure_utc


class InventoryItemModel(SequencedMixin, Base):
    """
    ORM model for a product's ledger entry.

    Maps to: ordering_modules.inventory.models.InventoryItem (frozen dataclass).
    """

    __tablename__ = "inventory_items"
    __store_key__ = "product_id"

    product_id: Mapped[str] = mapped_column(String(100), unique=True)
    product_name: Mapped[str] = mapped_column(String(255))
    product_reference: Mapped[str] = mapped_column(String(100))
    supplier_name: Mapped[str] = mapped_column(String(255))
    unit: Mapped[str] = mapped_column(String(50))
    category: Mapped[str] = mapped_column(String(50))
    current_stock: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    alert_threshold: Mapped[Decimal] = mapped_column(default=Decimal("5"))
    last_updated: Mapped[datetime] = mapped_column()
    is_organic: Mapped[bool] = mapped_column(Boolean, default=False)
    is_egalim: Mapped[bool] = mapped_column(Boolean, default=False)
    other_labels: Mapped[str | None] = mapped_column(String(255), nullable=True)
    average_consumption: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    def to_dto(self):
        from ordering_kernel.domain.catalog import ProductCategory
        from ordering_modules.inventory.models import InventoryItem
        return InventoryItem(
            product_id=self.product_id,
            product_name=self.product_name,
            product_reference=self.product_reference,
            supplier_name=self.supplier_name,
            unit=self.unit,
            category=ProductCategory(self.category),
            current_stock=self.current_stock,
            alert_threshold=self.alert_threshold,
            last_updated=ensure_utc(self.last_updated),
            is_organic=self.is_organic,
            is_egalim=self.is_egalim,
            other_labels=self.other_labels,
            average_consumption=self.average_consumption,
        )

    @classmethod
    def from_dto(cls, dto) -> "InventoryItemModel":
        return cls(
            product_id=dto.product_id,
            product_name=dto.product_name,
            product_reference=dto.product_reference,
            supplier_name=dto.supplier_name,
            unit=dto.unit,
            category=dto.category.value,
            current_stock=dto.current_stock,
            alert_threshold=dto.alert_threshold,
            last_updated=dto.last_updated,
            is_organic=dto.is_organic,
            is_egalim=dto.is_egalim,
            other_labels=dto.other_labels,
            average_consumption=dto.average_consumption,
        )


class InventoryTransactionModel(SequencedMixin, Base):
    """
    ORM model for one stock log entry.  Rows are written once, never updated.

    Maps to: ordering_modules.inventory.models.InventoryTransaction.
    """

    __tablename__ = "inventory_transactions"
    __store_key__ = "id"

    __table_args__ = (
        Index("idx_inv_txn_product", "product_id"),
        Index("idx_inv_txn_order", "order_id"),
    )

    product_id: Mapped[str] = mapped_column(String(100))
    product_name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(50))
    quantity: Mapped[Decimal] = mapped_column()
    reason: Mapped[str] = mapped_column(Text)
    order_id: Mapped[UUID | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column()
    created_by: Mapped[str] = mapped_column(String(100))
    stock_before: Mapped[Decimal] = mapped_column()
    stock_after: Mapped[Decimal] = mapped_column()

    def to_dto(self):
        from ordering_modules.inventory.models import InventoryTransaction, TransactionType
        return InventoryTransaction(
            id=self.id,
            product_id=self.product_id,
            product_name=self.product_name,
            type=TransactionType(self.type),
            quantity=self.quantity,
            reason=self.reason,
            created_at=ensure_utc(self.created_at),
            created_by=self.created_by,
            stock_before=self.stock_before,
            stock_after=self.stock_after,
            order_id=self.order_id,
        )

    @classmethod
    def from_dto(cls, dto) -> "InventoryTransactionModel":
        return cls(
            id=dto.id,
            product_id=dto.product_id,
            product_name=dto.product_name,
            type=dto.type.value,
            quantity=dto.quantity,
            reason=dto.reason,
            order_id=dto.order_id,
            created_at=dto.created_at,
            created_by=dto.created_by,
            stock_before=dto.stock_before,
            stock_after=dto.stock_after,
        )


class InventoryAlertModel(SequencedMixin, Base):
    """
    ORM model for a stock alert.

    Maps to: ordering_modules.inventory.models.InventoryAlert.
    """

    __tablename__ = "inventory_alerts"
    __store_key__ = "id"

    __table_args__ = (
        Index("idx_inv_alert_product", "product_id"),
    )

    product_id: Mapped[str] = mapped_column(String(100))
    product_name: Mapped[str] = mapped_column(String(255))
    current_stock: Mapped[Decimal] = mapped_column()
    alert_threshold: Mapped[Decimal] = mapped_column()
    severity: Mapped[str] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column()
    acknowledged: Mapped[bool] = mapped_column(Boolean, default=False)
    cleared_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self):
        from ordering_engines.alerts import AlertSeverity
        from ordering_modules.inventory.models import InventoryAlert
        return InventoryAlert(
            id=self.id,
            product_id=self.product_id,
            product_name=self.product_name,
            current_stock=self.current_stock,
            alert_threshold=self.alert_threshold,
            severity=AlertSeverity(self.severity),
            created_at=ensure_utc(self.created_at),
            acknowledged=self.acknowledged,
            cleared_at=ensure_utc(self.cleared_at),
        )

    @classmethod
    def from_dto(cls, dto) -> "InventoryAlertModel":
        return cls(
            id=dto.id,
            product_id=dto.product_id,
            product_name=dto.product_name,
            current_stock=dto.current_stock,
            alert_threshold=dto.alert_threshold,
            severity=dto.severity.value,
            created_at=dto.created_at,
            acknowledged=dto.acknowledged,
            cleared_at=dto.cleared_at,
        )


class StockErrorReportModel(SequencedMixin, Base):
    """
    ORM model for a stock write-off report.

    Maps to: ordering_modules.inventory.models.StockErrorReport.
    """

    __tablename__ = "stock_error_reports"
    __store_key__ = "id"

    __table_args__ = (
        Index("idx_stock_error_product", "product_id"),
        Index("idx_stock_error_type", "error_type"),
    )

    product_id: Mapped[str] = mapped_column(String(100))
    product_name: Mapped[str] = mapped_column(String(255))
    product_reference: Mapped[str] = mapped_column(String(100))
    error_type: Mapped[str] = mapped_column(String(50))
    quantity: Mapped[Decimal] = mapped_column()
    unit: Mapped[str] = mapped_column(String(50))
    description: Mapped[str] = mapped_column(Text)
    reported_at: Mapped[datetime] = mapped_column()
    reported_by: Mapped[str] = mapped_column(String(100))
    supplier_name: Mapped[str] = mapped_column(String(255))
    estimated_value: Mapped[Decimal] = mapped_column(default=Decimal("0"))

    def to_dto(self):
        from ordering_modules.inventory.models import StockErrorReport, StockErrorType
        return StockErrorReport(
            id=self.id,
            product_id=self.product_id,
            product_name=self.product_name,
            product_reference=self.product_reference,
            error_type=StockErrorType(self.error_type),
            quantity=self.quantity,
            unit=self.unit,
            description=self.description,
            reported_at=ensure_utc(self.reported_at),
            reported_by=self.reported_by,
            supplier_name=self.supplier_name,
            estimated_value=self.estimated_value,
        )

    @classmethod
    def from_dto(cls, dto) -> "StockErrorReportModel":
        return cls(
            id=dto.id,
            product_id=dto.product_id,
            product_name=dto.product_name,
            product_reference=dto.product_reference,
            error_type=dto.error_type.value,
            quantity=dto.quantity,
            unit=dto.unit,
            description=dto.description,
            reported_at=dto.reported_at,
            reported_by=dto.reported_by,
            supplier_name=dto.supplier_name,
            estimated_value=dto.estimated_value,
        )
