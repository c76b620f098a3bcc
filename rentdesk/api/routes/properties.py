"""
Property Endpoints
Public listing and search, owner/manager CRUD, proximity search
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging
import uuid

from rentdesk.core.config import settings
from rentdesk.core.deps import STAFF_ROLES, require_role
from rentdesk.database import get_db
from rentdesk.db.base import generate_code
from rentdesk.models.property import Property, PropertyStatus, PropertyType
from rentdesk.models.user import User
from rentdesk.schemas.property import PropertyCreate, PropertyUpdate
from rentdesk.services.property_service import (
    apply_property_payload,
    ensure_can_manage,
    find_nearby,
    property_to_out,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_property_or_404(db: Session, property_id: UUID) -> Property:
    prop = db.get(Property, property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return prop


def _check_manager(db: Session, manager_id: Optional[UUID]) -> None:
    if manager_id is not None and db.get(User, manager_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Manager not found")


# ==================== PUBLIC ====================

@router.get("/")
def list_properties(
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    property_type: Optional[PropertyType] = Query(None, alias="type"),
    city: Optional[str] = None,
    bedrooms: Optional[int] = Query(None, ge=0),
    bathrooms: Optional[float] = Query(None, ge=0),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Public property listing with filters, newest first"""
    query = db.query(Property)

    if status_filter:
        query = query.filter(Property.status == status_filter)
    if property_type:
        query = query.filter(Property.property_type == property_type)
    if city:
        query = query.filter(Property.city.ilike(f"%{city.strip()}%"))
    if bedrooms is not None:
        query = query.filter(Property.bedrooms == bedrooms)
    if bathrooms is not None:
        query = query.filter(Property.bathrooms == bathrooms)
    if min_price is not None:
        query = query.filter(Property.monthly_rent >= min_price)
    if max_price is not None:
        query = query.filter(Property.monthly_rent <= max_price)

    properties = query.order_by(Property.created_at.desc()).offset(skip).limit(limit).all()

    return {
        "success": True,
        "count": len(properties),
        "properties": [property_to_out(p) for p in properties],
    }


@router.get("/nearby/{property_id}")
def nearby_properties(
    property_id: UUID,
    radius: Optional[float] = Query(None, gt=0, description="Search radius in meters"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Other properties around this one, nearest first"""
    origin = _get_property_or_404(db, property_id)
    matches = find_nearby(db, origin, radius_meters=radius, limit=limit)

    return {
        "success": True,
        "count": len(matches),
        "properties": [
            {**property_to_out(prop), "distance_meters": round(distance, 1)}
            for prop, distance in matches
        ],
    }


@router.get("/{property_id}")
def get_property(property_id: UUID, db: Session = Depends(get_db)):
    prop = _get_property_or_404(db, property_id)
    return {"success": True, "property": property_to_out(prop)}


# ==================== MANAGEMENT ====================

@router.post("/", status_code=status.HTTP_201_CREATED)
def create_property(
    property_in: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    """Create a property owned by the caller"""
    if property_in.status == PropertyStatus.OCCUPIED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A property can only become occupied through a tenancy",
        )
    _check_manager(db, property_in.manager_id)

    prop = Property(
        id=uuid.uuid4(),
        property_code=generate_code("PROP"),
        owner_id=current_user.id,
    )
    apply_property_payload(prop, property_in.model_dump())

    db.add(prop)
    if prop not in current_user.properties:
        current_user.properties.append(prop)
    db.commit()
    db.refresh(prop)

    logger.info(f"[PROPERTY] {current_user.email} created {prop.property_code}")
    return {
        "success": True,
        "message": "Property created successfully",
        "property": property_to_out(prop),
    }


@router.put("/{property_id}")
def update_property(
    property_id: UUID,
    property_in: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    """Allow-listed partial update; owners and managers may only edit their own"""
    prop = _get_property_or_404(db, property_id)
    ensure_can_manage(prop, current_user)

    changes = property_in.changes()
    new_status = changes.get("status")
    if new_status is not None and new_status != prop.status:
        if prop.lease:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Status is managed by the current tenancy; update the tenant instead",
            )
        if new_status == PropertyStatus.OCCUPIED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A property can only become occupied through a tenancy",
            )
    if "manager_id" in changes:
        _check_manager(db, changes["manager_id"])

    apply_property_payload(prop, changes)
    db.commit()
    db.refresh(prop)

    return {
        "success": True,
        "message": "Property updated successfully",
        "property": property_to_out(prop),
    }


@router.delete("/{property_id}")
def delete_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    """Delete a property; tenants, tickets, payments and documents keep their rows"""
    prop = _get_property_or_404(db, property_id)
    ensure_can_manage(prop, current_user)

    code = prop.property_code
    db.delete(prop)
    db.commit()

    logger.info(f"[PROPERTY] {current_user.email} deleted {code}")
    return {"success": True, "message": "Property deleted successfully"}
