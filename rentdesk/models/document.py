"""
Document Model
Uploaded files with versioning, access grants, signatures and an audit log
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
import uuid

from rentdesk.db.base import Base, TimestampMixin, str_enum


class DocumentType(str, Enum):
    LEASE = "lease"
    APPLICATION = "application"
    INSPECTION = "inspection"
    INSURANCE = "insurance"
    TAX = "tax"
    CONTRACT = "contract"
    INVOICE = "invoice"
    RECEIPT = "receipt"
    REPORT = "report"
    OTHER = "other"


class DocumentCategory(str, Enum):
    LEGAL = "legal"
    FINANCIAL = "financial"
    MAINTENANCE = "maintenance"
    TENANT = "tenant"
    PROPERTY = "property"
    ADMINISTRATIVE = "administrative"


class DocumentPermission(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"


class AuditAction(str, Enum):
    UPLOADED = "uploaded"
    VIEWED = "viewed"
    DOWNLOADED = "downloaded"
    EDITED = "edited"
    DELETED = "deleted"
    SHARED = "shared"


class Document(Base, TimestampMixin):
    """Stored document metadata. The audit column is append-only."""
    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    document_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    document_type: Mapped[DocumentType] = mapped_column(str_enum(DocumentType), nullable=False, index=True)
    category: Mapped[DocumentCategory] = mapped_column(str_enum(DocumentCategory), nullable=False, index=True)

    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="SET NULL"), nullable=True, index=True
    )
    tenant_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("tenants.id", ondelete="SET NULL"), nullable=True, index=True
    )
    uploaded_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)

    # File
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Versioning
    version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    previous_versions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    expiry_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    reminder_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_confidential: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    access_control: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    signatures: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    audit: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    archived_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    property = relationship("Property", back_populates="documents")
    tenant = relationship("Tenant")
    uploaded_by = relationship("User")
