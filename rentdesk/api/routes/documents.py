"""
Document Endpoints
Metadata, versioning, access grants, signatures and the audit trail
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging
import uuid

from rentdesk.core.config import settings
from rentdesk.core.deps import get_current_user, require_role
from rentdesk.database import get_db
from rentdesk.db.base import generate_code, utcnow
from rentdesk.models.document import AuditAction, Document, DocumentCategory, DocumentPermission, DocumentType
from rentdesk.models.property import Property
from rentdesk.models.tenant import Tenant
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.document import DocumentCreate, DocumentResponse, DocumentUpdate, SignatureCreate

router = APIRouter()
logger = logging.getLogger(__name__)

_JSON_FIELDS = ("access_control",)
_EDIT_GRANTS = {DocumentPermission.EDIT.value, DocumentPermission.DELETE.value}


def _get_document_or_404(db: Session, document_id: UUID) -> Document:
    document = db.get(Document, document_id)
    if not document:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


def _audit_entry(action: AuditAction, user: User, details: Optional[str] = None) -> dict:
    entry = {"action": action.value, "user": str(user.id), "timestamp": utcnow().isoformat()}
    if details:
        entry["details"] = details
    return entry


def _can_edit(document: Document, user: User) -> bool:
    if user.role in (UserRole.ADMIN, UserRole.MANAGER):
        return True
    if document.uploaded_by_id == user.id:
        return True
    return any(
        grant.get("user_id") == str(user.id) and grant.get("permission") in _EDIT_GRANTS
        for grant in document.access_control or []
    )


@router.get("/")
def list_documents(
    document_type: Optional[DocumentType] = Query(None, alias="type"),
    category: Optional[DocumentCategory] = None,
    property_id: Optional[UUID] = None,
    tenant_id: Optional[UUID] = None,
    include_archived: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Document)

    if not include_archived:
        query = query.filter(Document.is_archived.is_(False))
    if document_type:
        query = query.filter(Document.document_type == document_type)
    if category:
        query = query.filter(Document.category == category)
    if property_id:
        query = query.filter(Document.property_id == property_id)
    if tenant_id:
        query = query.filter(Document.tenant_id == tenant_id)

    documents = query.order_by(Document.created_at.desc()).offset(skip).limit(limit).all()
    return {
        "success": True,
        "count": len(documents),
        "documents": [DocumentResponse.model_validate(d) for d in documents],
    }


@router.get("/{document_id}")
def get_document(
    document_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    document = _get_document_or_404(db, document_id)
    return {"success": True, "document": DocumentResponse.model_validate(document)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_document(
    document_in: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Register an uploaded file; the audit trail starts with an 'uploaded' entry"""
    if document_in.property_id is not None and db.get(Property, document_in.property_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    if document_in.tenant_id is not None and db.get(Tenant, document_in.tenant_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    payload = document_in.model_dump(mode="json")
    document = Document(
        id=uuid.uuid4(),
        document_code=generate_code("DOC"),
        name=document_in.name,
        document_type=document_in.document_type,
        category=document_in.category,
        property_id=document_in.property_id,
        tenant_id=document_in.tenant_id,
        uploaded_by_id=current_user.id,
        file_url=document_in.file_url,
        file_size=document_in.file_size,
        mime_type=document_in.mime_type,
        description=document_in.description,
        tags=document_in.tags,
        version=1,
        previous_versions=[],
        expiry_date=document_in.expiry_date,
        reminder_date=document_in.reminder_date,
        is_confidential=document_in.is_confidential,
        access_control=payload["access_control"],
        signatures=[],
        audit=[_audit_entry(AuditAction.UPLOADED, current_user)],
        is_archived=False,
    )
    db.add(document)
    db.commit()
    db.refresh(document)

    logger.info(f"[DOCUMENT] {document.document_code} uploaded by {current_user.email}")
    return {
        "success": True,
        "message": "Document uploaded successfully",
        "document": DocumentResponse.model_validate(document),
    }


@router.put("/{document_id}")
def update_document(
    document_id: UUID,
    document_in: DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Allow-listed edit; a new file_url becomes a new version"""
    document = _get_document_or_404(db, document_id)
    if not _can_edit(document, current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to edit this document")

    changes = document_in.changes()
    json_payload = document_in.model_dump(mode="json", exclude_unset=True)

    new_url = changes.pop("file_url", None)
    if new_url is not None and new_url != document.file_url:
        document.previous_versions = [
            *(document.previous_versions or []),
            {
                "version": document.version,
                "url": document.file_url,
                "uploaded_date": document.updated_at.isoformat(),
                "uploaded_by": str(document.uploaded_by_id),
            },
        ]
        document.file_url = new_url
        document.version += 1

    archive = changes.pop("is_archived", None)
    if archive is not None and archive != document.is_archived:
        document.is_archived = archive
        document.archived_date = utcnow() if archive else None

    for field, value in changes.items():
        if field in _JSON_FIELDS:
            value = json_payload[field]
        setattr(document, field, value)

    document.audit = [
        *(document.audit or []),
        _audit_entry(AuditAction.EDITED, current_user, ", ".join(sorted(document_in.model_fields_set))),
    ]
    db.commit()
    db.refresh(document)

    return {
        "success": True,
        "message": "Document updated successfully",
        "document": DocumentResponse.model_validate(document),
    }


@router.post("/{document_id}/signatures", status_code=status.HTTP_201_CREATED)
def sign_document(
    document_id: UUID,
    signature_in: SignatureCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    document = _get_document_or_404(db, document_id)

    ip_address = signature_in.ip_address or (request.client.host if request.client else None)
    document.signatures = [
        *(document.signatures or []),
        {
            "user": str(current_user.id),
            "signed_date": utcnow().isoformat(),
            "ip_address": ip_address,
            "signature": signature_in.signature,
        },
    ]
    document.audit = [
        *(document.audit or []),
        _audit_entry(AuditAction.EDITED, current_user, "signed"),
    ]
    db.commit()
    db.refresh(document)

    return {
        "success": True,
        "message": "Document signed successfully",
        "document": DocumentResponse.model_validate(document),
    }


@router.delete("/{document_id}")
def delete_document(
    document_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN, UserRole.MANAGER)),
):
    document = _get_document_or_404(db, document_id)
    code = document.document_code
    db.delete(document)
    db.commit()

    logger.info(f"[DOCUMENT] {code} deleted by {current_user.email}")
    return {"success": True, "message": "Document deleted successfully"}
