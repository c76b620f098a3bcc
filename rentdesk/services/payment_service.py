"""
Payment Service
Payment writes and the tenant ledger (Tenant.payment_history).

Each ledger entry carries the id of the payment it mirrors, so a payment
always finds its own entry regardless of amounts or dates.
"""
from typing import List
import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from rentdesk.db.base import generate_code, utcnow
from rentdesk.models.payment import Payment, PaymentStatus
from rentdesk.models.property import Property
from rentdesk.models.tenant import Tenant
from rentdesk.models.user import User
from rentdesk.schemas.payment import PaymentCreate, PaymentUpdate, PayRequest
from rentdesk.services.lifecycle import ensure_transition

logger = logging.getLogger(__name__)

# Payment fields mirrored into the ledger entry
_MIRRORED = ("amount", "due_date", "status")


# ==================== LEDGER ====================

def ledger_entry(payment: Payment) -> dict:
    return {
        "payment_id": str(payment.id),
        "date": payment.due_date.isoformat(),
        "amount": payment.amount,
        "type": payment.payment_type.value,
        "status": payment.status.value,
        "payment_method": payment.method.value if payment.method else "",
        "transaction_id": payment.transaction_id or "",
    }


def sync_ledger_entry(tenant: Tenant, payment: Payment) -> None:
    """
    Rewrite the tenant's ledger entry for `payment` from the payment's
    current state, re-creating it if it has gone missing.
    """
    history: List[dict] = [dict(entry) for entry in (tenant.payment_history or [])]
    fresh = ledger_entry(payment)

    for index, entry in enumerate(history):
        if entry.get("payment_id") == fresh["payment_id"]:
            history[index] = {**entry, **fresh}
            break
    else:
        logger.warning(f"[LEDGER] No ledger entry for payment {payment.payment_code}; re-creating it")
        history.append(fresh)

    # New list object so the JSON column is flagged dirty
    tenant.payment_history = history


# ==================== PAYMENT WRITES ====================

def create_payment(db: Session, payment_in: PaymentCreate, current_user: User) -> Payment:
    """
    Record a charge and append its pending ledger entry in one transaction.

    Raises:
        404 unknown property or tenant
    """
    prop = db.get(Property, payment_in.property_id)
    if not prop:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    tenant = db.get(Tenant, payment_in.tenant_id)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    payload = payment_in.model_dump(mode="json")
    try:
        payment = Payment(
            id=uuid.uuid4(),
            payment_code=generate_code("PAY"),
            property_id=prop.id,
            tenant_id=tenant.id,
            payment_type=payment_in.payment_type,
            amount=payment_in.amount,
            due_date=payment_in.due_date,
            status=PaymentStatus.PENDING,
            method=payment_in.method,
            processing_fee=payment_in.processing_fee,
            late_fee=payment_in.late_fee,
            description=payment_in.description,
            invoice=payload["invoice"],
            bank_details=payload["bank_details"],
            card_details=payload["card_details"],
            recurring=payload["recurring"],
            split_payment=payload["split_payment"],
            notes=payment_in.notes,
            reminders=[],
            disputes=[],
            created_by_id=current_user.id,
        )
        db.add(payment)

        tenant.payment_history = [*(tenant.payment_history or []), ledger_entry(payment)]

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info(f"[LEDGER] Payment {payment.payment_code} created for tenant {tenant.id}")
    return payment


def pay_payment(db: Session, payment: Payment, pay_in: PayRequest, current_user: User) -> Payment:
    """
    Mark a payment paid and its ledger entry with it.

    Raises:
        400 already paid, or the current status cannot move to paid
    """
    if payment.status == PaymentStatus.PAID:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment already paid")

    ensure_transition(payment.status, PaymentStatus.PAID)

    try:
        payment.status = PaymentStatus.PAID
        payment.paid_date = utcnow()
        payment.method = pay_in.method
        payment.transaction_id = pay_in.transaction_id or f"TXN-{uuid.uuid4().hex[:12].upper()}"
        payment.updated_by_id = current_user.id

        if payment.tenant is not None:
            sync_ledger_entry(payment.tenant, payment)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    logger.info(f"[LEDGER] Payment {payment.payment_code} paid via {payment.method.value}")
    return payment


def update_payment(db: Session, payment: Payment, payment_in: PaymentUpdate, current_user: User) -> Payment:
    """
    Apply an allow-listed edit.

    Raises:
        400 the payment is paid and the edit is not a refund, or the
            status move is not allowed
    """
    changes = payment_in.changes()
    new_status = changes.pop("status", None)

    if payment.status == PaymentStatus.PAID and new_status != PaymentStatus.REFUNDED:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot modify paid payment")

    status_changed = new_status is not None and ensure_transition(payment.status, new_status)

    json_payload = payment_in.model_dump(mode="json", exclude_unset=True)
    try:
        for field, value in changes.items():
            if field in ("invoice", "receipt", "bank_details", "card_details", "recurring", "split_payment"):
                value = json_payload[field]
            setattr(payment, field, value)

        if status_changed:
            payment.status = new_status
            if new_status == PaymentStatus.PAID and payment.paid_date is None:
                payment.paid_date = utcnow()

        payment.updated_by_id = current_user.id

        if payment.tenant is not None and (status_changed or set(_MIRRORED) & changes.keys()):
            sync_ledger_entry(payment.tenant, payment)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(payment)
    return payment


def add_reminder(db: Session, payment: Payment, method) -> Payment:
    payment.reminders = [
        *(payment.reminders or []),
        {"sent_date": utcnow().isoformat(), "method": method.value, "status": "sent"},
    ]
    db.commit()
    db.refresh(payment)
    logger.info(f"[LEDGER] Reminder sent for {payment.payment_code} via {method.value}")
    return payment


def add_dispute(db: Session, payment: Payment, reason: str) -> Payment:
    payment.disputes = [
        *(payment.disputes or []),
        {"date": utcnow().isoformat(), "reason": reason, "status": "open"},
    ]
    db.commit()
    db.refresh(payment)
    return payment
