"""
Property Model - rentable listings with embedded lease snapshot
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from geoalchemy2 import Geography
from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from rentdesk.db.base import Base, TimestampMixin, str_enum
from rentdesk.models.user import User, user_properties


class PropertyType(str, Enum):
    SINGLE_FAMILY = "single-family"
    MULTI_FAMILY = "multi-family"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    COMMERCIAL = "commercial"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    PENDING = "pending"


UTILITY_KEYS = ("water", "electricity", "gas", "internet", "trash", "sewer")


def default_utilities() -> dict:
    return {key: False for key in UTILITY_KEYS}


def default_metrics() -> dict:
    return {"occupancy_rate": 0, "total_revenue": 0, "total_expenses": 0, "net_income": 0}


# PostGIS geography point on PostgreSQL; EWKT text on SQLite, where the
# nearby search works from latitude/longitude instead
GeoPoint = String(100).with_variant(
    Geography(geometry_type="POINT", srid=4326, spatial_index=False), "postgresql"
)


class Property(Base, TimestampMixin):
    """
    Property listing

    Address, details and financials are flat columns so the public listing
    can filter on them; the API regroups them into blocks. `lease` is a
    snapshot of the current tenancy and is only written by the tenancy
    service, together with `status`.
    """
    __tablename__ = "properties"
    __table_args__ = (
        Index("idx_properties_location", "location", postgresql_using="gist"),
        Index("ix_properties_lat_lng", "latitude", "longitude"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    property_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    property_type: Mapped[PropertyType] = mapped_column(str_enum(PropertyType), nullable=False, index=True)
    status: Mapped[PropertyStatus] = mapped_column(
        str_enum(PropertyStatus), default=PropertyStatus.AVAILABLE, nullable=False, index=True
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)

    # Address
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    country: Mapped[str] = mapped_column(String(100), default="USA", nullable=False)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # Written together with latitude/longitude by the property service
    location: Mapped[Optional[str]] = mapped_column(GeoPoint, nullable=True)

    # People
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    manager_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)

    # Presentation
    features: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    amenities: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    images: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    floor_plan: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    virtual_tour: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Details
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    bathrooms: Mapped[float] = mapped_column(Float, nullable=False)
    square_feet: Mapped[int] = mapped_column(Integer, nullable=False)
    year_built: Mapped[int] = mapped_column(Integer, nullable=False)
    lot_size: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    parking_spaces: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    furnished: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    pets_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    smoking_allowed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Financials
    purchase_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    current_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    monthly_rent: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    security_deposit: Mapped[float] = mapped_column(Float, nullable=False)
    application_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    pet_deposit: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    utilities: Mapped[dict] = mapped_column(JSON, default=default_utilities, nullable=False)
    property_tax: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    insurance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    hoa: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    management_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Current tenancy snapshot: tenant, start_date, end_date, rent_amount, payment_day, terms, documents
    lease: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Maintenance schedule
    last_inspection: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    next_inspection: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    maintenance_schedule: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Caller supplied, never recomputed
    metrics: Mapped[dict] = mapped_column(JSON, default=default_metrics, nullable=False)

    # Relationships
    owner: Mapped[User] = relationship("User", foreign_keys=[owner_id])
    manager: Mapped[Optional[User]] = relationship("User", foreign_keys=[manager_id])
    members: Mapped[List[User]] = relationship(
        "User", secondary=user_properties, back_populates="properties"
    )
    tenants = relationship("Tenant", back_populates="property")
    payments = relationship("Payment", back_populates="property")
    maintenance_requests = relationship(
        "MaintenanceRequest", back_populates="property", order_by="MaintenanceRequest.created_at"
    )
    documents = relationship("Document", back_populates="property", order_by="Document.created_at")
