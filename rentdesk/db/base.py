# rentdesk/db/base.py

"""
Database Base Class, Timestamp Mixin and column helpers
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Type

from sqlalchemy import DateTime, Enum as SQLEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp; every DateTime column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_code(prefix: str) -> str:
    """Human-readable unique reference, e.g. MAINT-20260117-4F0C2A9B1D."""
    return f"{prefix}-{utcnow():%Y%m%d}-{uuid.uuid4().hex[:10].upper()}"


def str_enum(enum_cls: Type[Enum]) -> SQLEnum:
    """Enum column storing the member values ("in-progress") rather than names."""
    return SQLEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=32,
        validate_strings=True,
    )


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models - SINGLE SOURCE OF TRUTH."""
    pass


class TimestampMixin:
    """Mixin for automatic created_at/updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
