"""
Module: ordering_modules.orders.orm
Responsibility: SQLAlchemy ORM persistence models for the orders module.
    Maps the frozen ``Order`` / ``OrderItem`` DTOs to an ``orders`` table and
    an ``order_items`` child table.

Architecture position: Modules > Orders > ORM.  Inherits from Base
    (ordering_kernel.db.base).  Catalog-owned identifiers (product, supplier,
    client) are plain String columns with no foreign key.

Invariants enforced:
    - All amounts and quantities use Decimal (Numeric(38,9)), never float.
    - Enum fields stored as String(50).
    - Line order is preserved through ``position``.

Failure modes:
    - IntegrityError on duplicate order id.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordering_kernel.db.base import Base, SequencedMixin, UUIDString, ensure_utc


class OrderModel(SequencedMixin, Base):
    """
    ORM model for an order to one supplier.

    Maps to: ordering_modules.orders.models.Order (frozen dataclass).
    """

    __tablename__ = "orders"
    __store_key__ = "id"

    __table_args__ = (
        Index("idx_order_client", "client_id"),
        Index("idx_order_supplier", "supplier_id"),
        Index("idx_order_status", "status"),
    )

    client_id: Mapped[str] = mapped_column(String(100))
    client_name: Mapped[str] = mapped_column(String(255))
    client_reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    supplier_id: Mapped[str] = mapped_column(String(100))
    supplier_name: Mapped[str] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(50), default="ordered")
    created_at: Mapped[datetime] = mapped_column()
    updated_at: Mapped[datetime] = mapped_column()
    subtotal_ht: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    shipping_cost: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total_ht: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total_ttc: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    email_sent: Mapped[bool] = mapped_column(Boolean, default=False)
    delivery_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    delivery_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    items: Mapped[list["OrderItemModel"]] = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItemModel.position",
    )

    def to_dto(self):
        """Convert ORM model to frozen Order DTO."""
        from ordering_modules.orders.models import Order, OrderStatus
        return Order(
            id=self.id,
            client_id=self.client_id,
            client_name=self.client_name,
            supplier_id=self.supplier_id,
            supplier_name=self.supplier_name,
            items=tuple(i.to_dto() for i in self.items),
            status=OrderStatus(self.status),
            created_at=ensure_utc(self.created_at),
            updated_at=ensure_utc(self.updated_at),
            subtotal_ht=self.subtotal_ht,
            shipping_cost=self.shipping_cost,
            total_ht=self.total_ht,
            total_ttc=self.total_ttc,
            client_reference=self.client_reference,
            email_sent=self.email_sent,
            delivery_date=self.delivery_date,
            delivery_comment=self.delivery_comment,
        )

    @classmethod
    def from_dto(cls, dto) -> "OrderModel":
        """Create ORM model from frozen Order DTO."""
        return cls(
            id=dto.id,
            client_id=dto.client_id,
            client_name=dto.client_name,
            client_reference=dto.client_reference,
            supplier_id=dto.supplier_id,
            supplier_name=dto.supplier_name,
            status=dto.status.value,
            created_at=dto.created_at,
            updated_at=dto.updated_at,
            subtotal_ht=dto.subtotal_ht,
            shipping_cost=dto.shipping_cost,
            total_ht=dto.total_ht,
            total_ttc=dto.total_ttc,
            email_sent=dto.email_sent,
            delivery_date=dto.delivery_date,
            delivery_comment=dto.delivery_comment,
            items=[
                OrderItemModel.from_dto(item, position)
                for position, item in enumerate(dto.items)
            ],
        )

    def __repr__(self) -> str:
        return f"<OrderModel {self.id} {self.supplier_id} [{self.status}]>"


class OrderItemModel(Base):
    """
    ORM model for one order line.

    Maps to: ordering_modules.orders.models.OrderItem (frozen dataclass).
    """

    __tablename__ = "order_items"

    __table_args__ = (
        Index("idx_order_item_order", "order_id"),
        Index("idx_order_item_product", "product_id"),
    )

    order_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("orders.id"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer)
    product_id: Mapped[str] = mapped_column(String(100))
    product_name: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[Decimal] = mapped_column()
    price_ht: Mapped[Decimal] = mapped_column()
    packaging_unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    received: Mapped[bool] = mapped_column(Boolean, default=False)
    received_quantity: Mapped[Decimal | None] = mapped_column(nullable=True)
    received_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    litige_status: Mapped[str] = mapped_column(String(50), default="none")
    litige_souhait: Mapped[str | None] = mapped_column(String(50), nullable=True)
    litige_comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    order: Mapped["OrderModel"] = relationship(
        "OrderModel",
        back_populates="items",
    )

    def to_dto(self):
        from ordering_modules.orders.models import LitigeSouhait, LitigeStatus, OrderItem
        return OrderItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            price_ht=self.price_ht,
            packaging_unit=self.packaging_unit,
            received=self.received,
            received_quantity=self.received_quantity,
            received_price=self.received_price,
            litige_status=LitigeStatus(self.litige_status),
            litige_souhait=LitigeSouhait(self.litige_souhait) if self.litige_souhait else None,
            litige_comment=self.litige_comment,
        )

    @classmethod
    def from_dto(cls, dto, position: int) -> "OrderItemModel":
        return cls(
            position=position,
            product_id=dto.product_id,
            product_name=dto.product_name,
            quantity=dto.quantity,
            price_ht=dto.price_ht,
            packaging_unit=dto.packaging_unit,
            received=dto.received,
            received_quantity=dto.received_quantity,
            received_price=dto.received_price,
            litige_status=dto.litige_status.value,
            litige_souhait=dto.litige_souhait.value if dto.litige_souhait else None,
            litige_comment=dto.litige_comment,
        )
