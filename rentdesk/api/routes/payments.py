"""
Payment Endpoints
Charges, settlement, reminders, disputes and revenue analytics
"""
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import logging

from rentdesk.core.config import settings
from rentdesk.core.deps import STAFF_ROLES, get_current_user, require_role
from rentdesk.database import get_db
from rentdesk.db.base import utcnow
from rentdesk.models.payment import Payment, PaymentStatus, PaymentType
from rentdesk.models.tenant import Tenant
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.common import to_naive_utc
from rentdesk.schemas.payment import (
    DisputeCreate,
    PaymentCreate,
    PaymentResponse,
    PaymentUpdate,
    PayRequest,
    ReminderCreate,
)
from rentdesk.services import payment_service
from rentdesk.services.analytics_service import payment_summary

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_payment_or_404(db: Session, payment_id: UUID) -> Payment:
    payment = db.get(Payment, payment_id)
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


def _ensure_own_payment(payment: Payment, current_user: User) -> None:
    # Tenant accounts only act on payments of their own tenancies
    if current_user.role == UserRole.TENANT:
        if payment.tenant is None or payment.tenant.user_id != current_user.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")


@router.get("/analytics/summary")
def get_payment_analytics(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    year = year or utcnow().year
    return {"success": True, "summary": payment_summary(db, year, month)}


@router.get("/")
def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    payment_type: Optional[PaymentType] = Query(None, alias="type"),
    property_id: Optional[UUID] = None,
    tenant_id: Optional[UUID] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Payment)

    if current_user.role == UserRole.TENANT:
        own_tenancies = db.query(Tenant.id).filter(Tenant.user_id == current_user.id)
        query = query.filter(Payment.tenant_id.in_(own_tenancies))
    if status_filter:
        query = query.filter(Payment.status == status_filter)
    if payment_type:
        query = query.filter(Payment.payment_type == payment_type)
    if property_id:
        query = query.filter(Payment.property_id == property_id)
    if tenant_id:
        query = query.filter(Payment.tenant_id == tenant_id)
    if start_date:
        query = query.filter(Payment.due_date >= to_naive_utc(start_date))
    if end_date:
        query = query.filter(Payment.due_date <= to_naive_utc(end_date))

    payments = query.order_by(Payment.due_date.desc()).offset(skip).limit(limit).all()
    return {
        "success": True,
        "count": len(payments),
        "payments": [PaymentResponse.model_validate(p) for p in payments],
    }


@router.get("/{payment_id}")
def get_payment(
    payment_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = _get_payment_or_404(db, payment_id)
    _ensure_own_payment(payment, current_user)
    return {"success": True, "payment": PaymentResponse.model_validate(payment)}


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_payment(
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    """Record a charge; the tenant's ledger gets a matching pending entry"""
    payment = payment_service.create_payment(db, payment_in, current_user)
    return {
        "success": True,
        "message": "Payment created successfully",
        "payment": PaymentResponse.model_validate(payment),
    }


@router.post("/{payment_id}/pay")
def pay(
    payment_id: UUID,
    pay_in: PayRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = _get_payment_or_404(db, payment_id)
    _ensure_own_payment(payment, current_user)
    payment = payment_service.pay_payment(db, payment, pay_in, current_user)
    return {
        "success": True,
        "message": "Payment processed successfully",
        "payment": PaymentResponse.model_validate(payment),
    }


@router.put("/{payment_id}")
def update_payment(
    payment_id: UUID,
    payment_in: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    payment = _get_payment_or_404(db, payment_id)
    payment = payment_service.update_payment(db, payment, payment_in, current_user)
    return {
        "success": True,
        "message": "Payment updated successfully",
        "payment": PaymentResponse.model_validate(payment),
    }


@router.post("/{payment_id}/reminder")
def send_reminder(
    payment_id: UUID,
    reminder_in: Optional[ReminderCreate] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(*STAFF_ROLES)),
):
    payment = _get_payment_or_404(db, payment_id)
    method = (reminder_in or ReminderCreate()).method
    payment = payment_service.add_reminder(db, payment, method)
    return {
        "success": True,
        "message": "Reminder sent successfully",
        "payment": PaymentResponse.model_validate(payment),
    }


@router.post("/{payment_id}/disputes", status_code=status.HTTP_201_CREATED)
def open_dispute(
    payment_id: UUID,
    dispute_in: DisputeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = _get_payment_or_404(db, payment_id)
    _ensure_own_payment(payment, current_user)
    payment = payment_service.add_dispute(db, payment, dispute_in.reason)
    logger.info(f"[LEDGER] Dispute opened on {payment.payment_code} by {current_user.email}")
    return {
        "success": True,
        "message": "Dispute opened successfully",
        "payment": PaymentResponse.model_validate(payment),
    }
