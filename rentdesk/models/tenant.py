"""
Tenant Model - Property Management
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, JSON, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from rentdesk.db.base import Base, TimestampMixin, str_enum


class TenantStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    PAST = "past"
    EVICTED = "evicted"


class ContactMethod(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    TEXT = "text"
    APP = "app"


class Tenant(Base, TimestampMixin):
    """
    Tenant model for property management
    Linked to User via user_id and to Property via property_id.

    payment_history is the tenant's ledger: one entry per Payment, keyed by
    the payment's id and kept in step by the ledger service.
    """
    __tablename__ = "tenants"
    __table_args__ = (
        # At most one active tenancy per property
        Index(
            "uq_tenants_active_property",
            "property_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True, index=True
    )

    # Lease details
    lease_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    lease_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    monthly_rent: Mapped[float] = mapped_column(Float, nullable=False)
    security_deposit: Mapped[float] = mapped_column(Float, nullable=False)
    deposit_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Screening
    emergency_contact: Mapped[dict] = mapped_column(JSON, nullable=False)
    employment: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    references: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    vehicles: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    pets: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    background: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Embedded logs
    payment_history: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    documents: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Status
    status: Mapped[TenantStatus] = mapped_column(
        str_enum(TenantStatus), default=TenantStatus.ACTIVE, nullable=False, index=True
    )
    move_in_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    move_out_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    move_in_condition: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    move_out_condition: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Account
    balance: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    auto_pay_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    preferred_contact_method: Mapped[ContactMethod] = mapped_column(
        str_enum(ContactMethod), default=ContactMethod.EMAIL, nullable=False
    )

    # Relationships
    user = relationship("User")
    property = relationship("Property", back_populates="tenants")
    payments = relationship("Payment", back_populates="tenant")
