from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from rentdesk.models.document import DocumentCategory, DocumentPermission, DocumentType
from rentdesk.schemas.common import NaiveDatetime, UpdateSchema
from rentdesk.schemas.user import UserSummary


class AccessGrant(BaseModel):
    user_id: UUID
    permission: DocumentPermission = DocumentPermission.VIEW
    access_count: int = Field(0, ge=0)


class DocumentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    document_type: DocumentType
    category: DocumentCategory
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    file_url: str = Field(..., min_length=1, max_length=1000)
    file_size: int = Field(..., ge=0)
    mime_type: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    tags: List[str] = []
    expiry_date: Optional[NaiveDatetime] = None
    reminder_date: Optional[NaiveDatetime] = None
    is_confidential: bool = False
    access_control: List[AccessGrant] = []


class DocumentUpdate(UpdateSchema):
    """
    Allow-listed document edit.
    Code, uploader, links, version history, signatures and audit are not writable.
    """
    not_nullable = (
        "name", "document_type", "category", "file_url", "file_size",
        "mime_type", "tags", "is_confidential", "access_control", "is_archived",
    )

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    document_type: Optional[DocumentType] = None
    category: Optional[DocumentCategory] = None
    file_url: Optional[str] = Field(None, min_length=1, max_length=1000)
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    expiry_date: Optional[NaiveDatetime] = None
    reminder_date: Optional[NaiveDatetime] = None
    is_confidential: Optional[bool] = None
    access_control: Optional[List[AccessGrant]] = None
    is_archived: Optional[bool] = None


class SignatureCreate(BaseModel):
    signature: str = Field(..., min_length=1)
    ip_address: Optional[str] = None


class DocumentResponse(BaseModel):
    id: UUID
    document_code: str
    name: str
    document_type: DocumentType
    category: DocumentCategory
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    uploaded_by: Optional[UserSummary] = None
    file_url: str
    file_size: int
    mime_type: str
    description: Optional[str] = None
    tags: list
    version: int
    previous_versions: list
    expiry_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    is_confidential: bool
    access_control: list
    signatures: list
    audit: list
    is_archived: bool
    archived_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
