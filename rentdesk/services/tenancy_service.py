"""
Tenancy Service
Keeps tenant status, the property's lease snapshot and property status in step.

Every function here stages all of its writes on the session and commits
once; on any failure the session is rolled back and the error re-raised.
"""
from typing import Optional
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rentdesk.db.base import utcnow
from rentdesk.models.property import Property, PropertyStatus
from rentdesk.models.tenant import Tenant, TenantStatus
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.tenant import MoveOutRequest, TenantCreate, TenantUpdate
from rentdesk.services.lifecycle import ensure_transition

logger = logging.getLogger(__name__)

# Tenant states that hold the property's lease snapshot
_HOLDING_STATES = {
    TenantStatus.ACTIVE: PropertyStatus.OCCUPIED,
    TenantStatus.PENDING: PropertyStatus.PENDING,
}


def lease_snapshot(tenant: Tenant) -> dict:
    """The lease block stored on the property for its current tenancy"""
    return {
        "tenant": str(tenant.id),
        "start_date": tenant.lease_start.isoformat(),
        "end_date": tenant.lease_end.isoformat(),
        "rent_amount": tenant.monthly_rent,
        "payment_day": 1,
        "terms": "",
        "documents": [],
    }


def _holds_lease(prop: Property, tenant: Tenant) -> bool:
    return bool(prop.lease) and prop.lease.get("tenant") == str(tenant.id)


def _other_active_tenant(db: Session, property_id: uuid.UUID, exclude_id: Optional[uuid.UUID] = None) -> Optional[Tenant]:
    query = db.query(Tenant).filter(
        Tenant.property_id == property_id,
        Tenant.status == TenantStatus.ACTIVE,
    )
    if exclude_id is not None:
        query = query.filter(Tenant.id != exclude_id)
    return query.first()


def _lock_property(db: Session, property_id: uuid.UUID) -> Optional[Property]:
    """Load the property FOR UPDATE so occupancy checks on it are serialized"""
    return db.query(Property).filter(Property.id == property_id).with_for_update().one_or_none()


def _already_occupied() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Property already has an active tenant",
    )


def _occupy(prop: Property, tenant: Tenant) -> None:
    prop.lease = lease_snapshot(tenant)
    prop.status = _HOLDING_STATES[tenant.status]


def _release(prop: Property, tenant: Tenant) -> None:
    # Only clear the snapshot if it belongs to this tenancy
    if _holds_lease(prop, tenant):
        prop.lease = None
        prop.status = PropertyStatus.AVAILABLE


def create_tenancy(db: Session, tenant_in: TenantCreate) -> Tenant:
    """
    Create a tenant and attach it to its property.

    Raises:
        404 unknown user or property
        400 the property already has an active tenant
    """
    user = db.get(User, tenant_in.user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    prop = _lock_property(db, tenant_in.property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    if _other_active_tenant(db, prop.id):
        raise _already_occupied()

    payload = tenant_in.model_dump(mode="json")
    try:
        tenant = Tenant(
            id=uuid.uuid4(),
            user_id=user.id,
            property_id=prop.id,
            lease_start=tenant_in.lease_start,
            lease_end=tenant_in.lease_end,
            monthly_rent=tenant_in.monthly_rent,
            security_deposit=tenant_in.security_deposit,
            deposit_paid=tenant_in.deposit_paid,
            emergency_contact=payload["emergency_contact"],
            employment=payload["employment"],
            references=payload["references"],
            vehicles=payload["vehicles"],
            pets=payload["pets"],
            background=payload["background"],
            payment_history=[],
            documents=[],
            notes=tenant_in.notes,
            status=tenant_in.status,
            move_in_date=tenant_in.move_in_date,
            move_in_condition=tenant_in.move_in_condition,
            auto_pay_enabled=tenant_in.auto_pay_enabled,
            preferred_contact_method=tenant_in.preferred_contact_method,
        )
        db.add(tenant)

        _occupy(prop, tenant)

        if user.role == UserRole.TENANT and prop not in user.properties:
            user.properties.append(prop)

        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"[TENANCY] Concurrent tenancy on property {tenant_in.property_id} rejected")
        raise _already_occupied()
    except Exception:
        db.rollback()
        raise

    db.refresh(tenant)
    logger.info(f"[TENANCY] Tenant {tenant.id} ({tenant.status.value}) created on property {prop.property_code}")
    return tenant


def update_tenancy(db: Session, tenant: Tenant, tenant_in: TenantUpdate) -> Tenant:
    """
    Apply an allow-listed edit, routing status changes through the tenant lifecycle.

    Raises:
        400 illegal status move, lease end not after start, or another
            active tenant already holds the property
    """
    changes = tenant_in.changes()
    new_status = changes.pop("status", None)

    lease_start = changes.get("lease_start", tenant.lease_start)
    lease_end = changes.get("lease_end", tenant.lease_end)
    if lease_end <= lease_start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="lease_end must be after lease_start",
        )

    status_changed = new_status is not None and ensure_transition(tenant.status, new_status)
    prop = tenant.property

    if status_changed and new_status == TenantStatus.ACTIVE and prop is not None:
        _lock_property(db, prop.id)
        if _other_active_tenant(db, prop.id, exclude_id=tenant.id):
            raise _already_occupied()

    # JSON sub-documents are stored as plain JSON
    json_payload = tenant_in.model_dump(mode="json", exclude_unset=True)
    try:
        for field, value in changes.items():
            if field in ("emergency_contact", "employment", "references", "vehicles", "pets", "background"):
                value = json_payload[field]
            setattr(tenant, field, value)

        if status_changed:
            previous = tenant.status
            tenant.status = new_status
            if prop is not None:
                if new_status in _HOLDING_STATES:
                    _occupy(prop, tenant)
                else:
                    _release(prop, tenant)
            if previous == TenantStatus.ACTIVE and tenant.move_out_date is None:
                tenant.move_out_date = utcnow()
            if new_status == TenantStatus.ACTIVE and tenant.move_in_date is None:
                tenant.move_in_date = utcnow()
            logger.info(f"[TENANCY] Tenant {tenant.id}: {previous.value} -> {new_status.value}")
        elif prop is not None and _holds_lease(prop, tenant) and (
            {"lease_start", "lease_end", "monthly_rent"} & changes.keys()
        ):
            # Lease terms changed on the current tenancy
            prop.lease = lease_snapshot(tenant)

        db.commit()
    except IntegrityError:
        db.rollback()
        raise _already_occupied()
    except Exception:
        db.rollback()
        raise

    db.refresh(tenant)
    return tenant


def move_out(db: Session, tenant: Tenant, move_out_in: MoveOutRequest) -> Tenant:
    """
    End an active tenancy: tenant becomes past, the property is freed.

    Raises:
        400 the tenant is not active
    """
    if tenant.status != TenantStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only active tenants can move out",
        )

    ensure_transition(tenant.status, TenantStatus.PAST)

    try:
        tenant.status = TenantStatus.PAST
        tenant.move_out_date = move_out_in.move_out_date or utcnow()
        if move_out_in.move_out_condition is not None:
            tenant.move_out_condition = move_out_in.move_out_condition

        if tenant.property is not None:
            _release(tenant.property, tenant)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(tenant)
    logger.info(f"[TENANCY] Tenant {tenant.id} moved out")
    return tenant
