"""
Tenant Endpoints
Tenancy CRUD, move-out and tenant document records
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging

from rentdesk.core.config import settings
from rentdesk.core.deps import STAFF_ROLES, get_current_user, require_role
from rentdesk.database import get_db
from rentdesk.db.base import utcnow
from rentdesk.models.tenant import Tenant, TenantStatus
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.tenant import MoveOutRequest, TenantCreate, TenantDocumentCreate, TenantResponse, TenantUpdate
from rentdesk.services import tenancy_service

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_tenant_or_404(db: Session, tenant_id: UUID) -> Tenant:
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    return tenant


def _ensure_visible(tenant: Tenant, current_user: User) -> None:
    # Tenant accounts only see their own tenancy records
    if current_user.role == UserRole.TENANT and tenant.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


# ==================== TENANT CRUD ====================

@router.get("/")
def list_tenants(
    status_filter: Optional[TenantStatus] = Query(None, alias="status"),
    property_id: Optional[UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Tenant)

    if current_user.role == UserRole.TENANT:
        query = query.filter(Tenant.user_id == current_user.id)
    if status_filter:
        query = query.filter(Tenant.status == status_filter)
    if property_id:
        query = query.filter(Tenant.property_id == property_id)

    tenants = query.order_by(Tenant.created_at.desc()).offset(skip).limit(limit).all()
    return {
        "success": True,
        "count": len(tenants),
        "tenants": [TenantResponse.model_validate(t) for t in tenants],
    }


@router.get("/{tenant_id}")
def get_tenant(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tenant = _get_tenant_or_404(db, tenant_id)
    _ensure_visible(tenant, current_user)
    return {"success": True, "tenant": TenantResponse.model_validate(tenant)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_tenant(
    tenant_in: TenantCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    """Create a tenancy; the property's lease and status follow in the same transaction"""
    logger.info(f"[TENANCY] {current_user.email} creating tenancy user={tenant_in.user_id} property={tenant_in.property_id}")
    tenant = tenancy_service.create_tenancy(db, tenant_in)
    return {
        "success": True,
        "message": "Tenant created successfully",
        "tenant": TenantResponse.model_validate(tenant),
    }


@router.put("/{tenant_id}")
def update_tenant(
    tenant_id: UUID,
    tenant_in: TenantUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    tenant = _get_tenant_or_404(db, tenant_id)
    tenant = tenancy_service.update_tenancy(db, tenant, tenant_in)
    return {
        "success": True,
        "message": "Tenant updated successfully",
        "tenant": TenantResponse.model_validate(tenant),
    }


@router.post("/{tenant_id}/move-out")
def move_out_tenant(
    tenant_id: UUID,
    move_out_in: MoveOutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    tenant = _get_tenant_or_404(db, tenant_id)
    tenant = tenancy_service.move_out(db, tenant, move_out_in)
    return {
        "success": True,
        "message": "Tenant moved out successfully",
        "tenant": TenantResponse.model_validate(tenant),
    }


# ==================== TENANT DOCUMENTS ====================

@router.get("/{tenant_id}/documents")
def list_tenant_documents(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tenant = _get_tenant_or_404(db, tenant_id)
    _ensure_visible(tenant, current_user)
    return {"success": True, "count": len(tenant.documents), "documents": tenant.documents}


@router.post("/{tenant_id}/documents", status_code=status.HTTP_201_CREATED)
def add_tenant_document(
    tenant_id: UUID,
    document_in: TenantDocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tenant = _get_tenant_or_404(db, tenant_id)
    _ensure_visible(tenant, current_user)

    record = {**document_in.model_dump(), "upload_date": utcnow().isoformat()}
    tenant.documents = [*(tenant.documents or []), record]
    db.commit()
    db.refresh(tenant)

    return {"success": True, "message": "Document added successfully", "document": record}
