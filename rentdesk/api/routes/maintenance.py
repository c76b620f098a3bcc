"""
Maintenance Endpoints
Ticket intake, status workflow, notes and analytics
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging
import uuid

from rentdesk.core.config import settings
from rentdesk.core.deps import get_current_user, require_role
from rentdesk.database import get_db
from rentdesk.db.base import generate_code, utcnow
from rentdesk.models.maintenance import (
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceRequest,
    MaintenanceStatus,
)
from rentdesk.models.property import Property
from rentdesk.models.tenant import Tenant
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.maintenance import MaintenanceCreate, MaintenanceResponse, MaintenanceUpdate, NoteCreate
from rentdesk.services.analytics_service import maintenance_summary
from rentdesk.services.lifecycle import ensure_transition

router = APIRouter()
logger = logging.getLogger(__name__)

# JSON sub-documents written from the update payload
_JSON_FIELDS = ("vendor", "materials", "recurring_schedule", "satisfaction")


def _get_ticket_or_404(db: Session, request_id: UUID) -> MaintenanceRequest:
    ticket = db.get(MaintenanceRequest, request_id)
    if not ticket:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Maintenance request not found")
    return ticket


def _timeline_entry(ticket_status: MaintenanceStatus, user: User, comment: str) -> dict:
    return {
        "status": ticket_status.value,
        "timestamp": utcnow().isoformat(),
        "user": str(user.id),
        "comment": comment,
    }


@router.get("/analytics/summary")
def get_maintenance_analytics(
    property_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"success": True, "summary": maintenance_summary(db, property_id)}


@router.get("/")
def list_requests(
    status_filter: Optional[MaintenanceStatus] = Query(None, alias="status"),
    priority: Optional[MaintenancePriority] = None,
    category: Optional[MaintenanceCategory] = None,
    property_id: Optional[UUID] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(MaintenanceRequest)

    if current_user.role == UserRole.TENANT:
        query = query.filter(MaintenanceRequest.reported_by_id == current_user.id)
    if status_filter:
        query = query.filter(MaintenanceRequest.status == status_filter)
    if priority:
        query = query.filter(MaintenanceRequest.priority == priority)
    if category:
        query = query.filter(MaintenanceRequest.category == category)
    if property_id:
        query = query.filter(MaintenanceRequest.property_id == property_id)

    tickets = query.order_by(MaintenanceRequest.created_at.desc()).offset(skip).limit(limit).all()
    return {
        "success": True,
        "count": len(tickets),
        "requests": [MaintenanceResponse.model_validate(t) for t in tickets],
    }


@router.get("/{request_id}")
def get_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ticket = _get_ticket_or_404(db, request_id)
    if current_user.role == UserRole.TENANT and ticket.reported_by_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return {"success": True, "request": MaintenanceResponse.model_validate(ticket)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_request(
    request_in: MaintenanceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Open a ticket; the timeline starts with a single pending entry"""
    if db.get(Property, request_in.property_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    if request_in.tenant_id is not None and db.get(Tenant, request_in.tenant_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    if request_in.assigned_to_id is not None and db.get(User, request_in.assigned_to_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignee not found")

    payload = request_in.model_dump(mode="json")
    ticket = MaintenanceRequest(
        id=uuid.uuid4(),
        ticket_id=generate_code("MAINT"),
        property_id=request_in.property_id,
        tenant_id=request_in.tenant_id,
        reported_by_id=current_user.id,
        assigned_to_id=request_in.assigned_to_id,
        category=request_in.category,
        priority=request_in.priority,
        status=MaintenanceStatus.PENDING,
        title=request_in.title,
        description=request_in.description,
        location=request_in.location,
        images=request_in.images,
        scheduled_date=request_in.scheduled_date,
        estimated_cost=request_in.estimated_cost,
        vendor=payload["vendor"],
        recurring_schedule=payload["recurring_schedule"],
        notes=[],
        materials=[],
        timeline=[_timeline_entry(MaintenanceStatus.PENDING, current_user, "Request created")],
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)

    logger.info(f"[MAINTENANCE] {ticket.ticket_id} opened by {current_user.email} ({ticket.priority.value})")
    return {
        "success": True,
        "message": "Maintenance request created successfully",
        "request": MaintenanceResponse.model_validate(ticket),
    }


@router.put("/{request_id}")
def update_request(
    request_id: UUID,
    request_in: MaintenanceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.ADMIN, UserRole.MANAGER, UserRole.MAINTENANCE)),
):
    """Allow-listed edit; a status change appends exactly one timeline entry"""
    ticket = _get_ticket_or_404(db, request_id)

    changes = request_in.changes()
    new_status = changes.pop("status", None)
    comment = changes.pop("comment", None)

    status_changed = new_status is not None and ensure_transition(ticket.status, new_status)

    if "assigned_to_id" in changes and changes["assigned_to_id"] is not None:
        if db.get(User, changes["assigned_to_id"]) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignee not found")

    json_payload = request_in.model_dump(mode="json", exclude_unset=True)
    for field, value in changes.items():
        if field in _JSON_FIELDS:
            value = json_payload[field]
        setattr(ticket, field, value)

    if status_changed:
        ticket.status = new_status
        if new_status == MaintenanceStatus.COMPLETED:
            ticket.completed_date = utcnow()
        ticket.timeline = [
            *(ticket.timeline or []),
            _timeline_entry(new_status, current_user, comment or f"Status changed to {new_status.value}"),
        ]
        logger.info(f"[MAINTENANCE] {ticket.ticket_id} -> {new_status.value} by {current_user.email}")

    db.commit()
    db.refresh(ticket)

    return {
        "success": True,
        "message": "Maintenance request updated successfully",
        "request": MaintenanceResponse.model_validate(ticket),
    }


@router.post("/{request_id}/notes", status_code=status.HTTP_201_CREATED)
def add_note(
    request_id: UUID,
    note_in: NoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ticket = _get_ticket_or_404(db, request_id)
    if current_user.role == UserRole.TENANT and ticket.reported_by_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    note = {
        "author": str(current_user.id),
        "content": note_in.content,
        "timestamp": utcnow().isoformat(),
    }
    ticket.notes = [*(ticket.notes or []), note]
    db.commit()
    db.refresh(ticket)

    return {
        "success": True,
        "message": "Note added successfully",
        "request": MaintenanceResponse.model_validate(ticket),
    }
