"""
Module: ordering_kernel.db.base
Responsibility: Declarative base for all SQLAlchemy ORM models.  Provides
    the UUID primary key convention and the type annotation map for
    consistent column types.
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel.  ALL orm.py files import from here.  This module MUST NOT import
    from services/, modules, or outer layers.

Invariants enforced:
    - UUID primary keys stored as String(36) for SQLite/PostgreSQL portability.
    - Decimal maps to Numeric(38, 9).  NEVER use float for amounts or stock.
    - datetime maps to DateTime(timezone=True).
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Converts between Python UUID objects and their 36-character string form.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Guarantees:
        - id is always a uuid4-generated UUID stored as String(36).
        - Decimal maps to Numeric(38, 9).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )


def ensure_utc(value: datetime | None) -> datetime | None:
    """Re-attach UTC to timestamps read back from backends that drop tzinfo (SQLite)."""
    if value is None or value.tzinfo is not None:
        return value
    from datetime import timezone

    return value.replace(tzinfo=timezone.utc)


class SequencedMixin:
    """
    Insertion-order column for stores that must reload collections in the
    order entities were first saved.

    ``sequence`` is assigned once, on first insert, and preserved when the
    row is replaced by a newer version of the same entity.
    """

    sequence: Mapped[int] = mapped_column(Integer, index=True)
