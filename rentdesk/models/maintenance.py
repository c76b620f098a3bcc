from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from rentdesk.db.base import Base, TimestampMixin, str_enum


class MaintenanceStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ON_HOLD = "on-hold"


class MaintenancePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class MaintenanceCategory(str, Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HVAC = "hvac"
    APPLIANCE = "appliance"
    STRUCTURAL = "structural"
    LANDSCAPING = "landscaping"
    PEST = "pest"
    OTHER = "other"


class RecurrenceFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class MaintenanceRequest(Base, TimestampMixin):
    __tablename__ = "maintenance_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    ticket_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True, index=True
    )
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True
    )
    reported_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    assigned_to_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    category: Mapped[MaintenanceCategory] = mapped_column(str_enum(MaintenanceCategory), nullable=False, index=True)
    priority: Mapped[MaintenancePriority] = mapped_column(
        str_enum(MaintenancePriority), default=MaintenancePriority.MEDIUM, nullable=False, index=True
    )
    status: Mapped[MaintenanceStatus] = mapped_column(
        str_enum(MaintenanceStatus), default=MaintenanceStatus.PENDING, nullable=False, index=True
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    images: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    scheduled_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    completed_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    estimated_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    actual_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    vendor: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Append-only logs
    notes: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    timeline: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    materials: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    labor_hours: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    recurring_schedule: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    satisfaction: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Relationships
    property = relationship("Property", back_populates="maintenance_requests")
    tenant = relationship("Tenant")
    reported_by = relationship("User", foreign_keys=[reported_by_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
