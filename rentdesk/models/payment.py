"""
Payment Models
Rent and fee charges raised against a tenancy
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from rentdesk.db.base import Base, TimestampMixin, str_enum


class PaymentStatus(str, Enum):
    """Payment status enum"""
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    LATE = "late"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentType(str, Enum):
    """Payment type enum"""
    RENT = "rent"
    DEPOSIT = "deposit"
    LATE_FEE = "late-fee"
    MAINTENANCE = "maintenance"
    UTILITY = "utility"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """Payment method enum"""
    CASH = "cash"
    CHECK = "check"
    CREDIT_CARD = "credit-card"
    DEBIT_CARD = "debit-card"
    ACH = "ach"
    WIRE = "wire"
    ONLINE = "online"
    OTHER = "other"


class ReminderMethod(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    APP = "app"


class Payment(Base, TimestampMixin):
    """Payment record"""
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    payment_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True, index=True
    )
    tenant_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("tenants.id"), nullable=False, index=True)

    # Payment details
    payment_type: Mapped[PaymentType] = mapped_column(str_enum(PaymentType), nullable=False, index=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[PaymentStatus] = mapped_column(
        str_enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True
    )
    method: Mapped[Optional[PaymentMethod]] = mapped_column(str_enum(PaymentMethod), nullable=True)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    processing_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    late_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    description: Mapped[str] = mapped_column(String(500), nullable=False)

    # Sub-documents
    invoice: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    receipt: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    bank_details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    card_details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    recurring: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    split_payment: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Append-only logs
    reminders: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    disputes: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    created_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    updated_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    # Relationships
    property = relationship("Property", back_populates="payments")
    tenant = relationship("Tenant", back_populates="payments")
    created_by = relationship("User", foreign_keys=[created_by_id])
    updated_by = relationship("User", foreign_keys=[updated_by_id])
