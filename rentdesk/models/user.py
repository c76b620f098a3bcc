"""
User Model - accounts for every portal role
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Table, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from rentdesk.db.base import Base, TimestampMixin, str_enum


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    TENANT = "tenant"
    MAINTENANCE = "maintenance"
    OWNER = "owner"


# Owned / assigned / rented properties per user
user_properties = Table(
    "user_properties",
    Base.metadata,
    Column("user_id", Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("property_id", Uuid, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base, TimestampMixin):
    """
    User account

    Email is stored lowercase so lookups are case-insensitive.
    Accounts are deactivated (is_active=False), never deleted.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(str_enum(UserRole), default=UserRole.TENANT, nullable=False, index=True)

    # Profile
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    avatar_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    address: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)  # street, city, state, zip_code, country

    # Account
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    properties: Mapped[List["Property"]] = relationship(  # noqa: F821
        "Property",
        secondary=user_properties,
        back_populates="members",
        lazy="selectin",
    )

    @property
    def property_ids(self) -> List[uuid.UUID]:
        return [p.id for p in self.properties]
