"""
Analytics Service
Summary figures for maintenance tickets and payments
"""
from datetime import MAXYEAR, datetime
from typing import Optional, Tuple
import uuid

from sqlalchemy import and_, extract, func
from sqlalchemy.orm import Session

from rentdesk.db.base import utcnow
from rentdesk.models.maintenance import MaintenancePriority, MaintenanceRequest, MaintenanceStatus
from rentdesk.models.payment import Payment, PaymentStatus, PaymentType


# ==================== MAINTENANCE ====================

def maintenance_summary(db: Session, property_id: Optional[uuid.UUID] = None) -> dict:
    """Counts by status and priority, category breakdown, average completion hours"""
    base = db.query(MaintenanceRequest)
    if property_id:
        base = base.filter(MaintenanceRequest.property_id == property_id)

    by_status = dict(
        base.with_entities(MaintenanceRequest.status, func.count(MaintenanceRequest.id))
        .group_by(MaintenanceRequest.status)
        .all()
    )
    by_priority = dict(
        base.with_entities(MaintenanceRequest.priority, func.count(MaintenanceRequest.id))
        .group_by(MaintenanceRequest.priority)
        .all()
    )
    categories = (
        base.with_entities(MaintenanceRequest.category, func.count(MaintenanceRequest.id))
        .group_by(MaintenanceRequest.category)
        .all()
    )

    completed = base.filter(
        MaintenanceRequest.status == MaintenanceStatus.COMPLETED,
        MaintenanceRequest.completed_date.isnot(None),
    ).with_entities(MaintenanceRequest.created_at, MaintenanceRequest.completed_date).all()

    average_hours = 0.0
    if completed:
        total_seconds = sum((done - created).total_seconds() for created, done in completed)
        average_hours = round(total_seconds / len(completed) / 3600, 2)

    return {
        "total": sum(by_status.values()),
        "by_status": {s.value: by_status.get(s, 0) for s in MaintenanceStatus},
        "by_priority": {p.value: by_priority.get(p, 0) for p in MaintenancePriority},
        "emergency": by_priority.get(MaintenancePriority.EMERGENCY, 0),
        "high_priority": by_priority.get(MaintenancePriority.HIGH, 0),
        "category_breakdown": [
            {"category": category.value, "count": count} for category, count in categories
        ],
        "average_completion_hours": average_hours,
    }


# ==================== PAYMENTS ====================

def _month_after(year: int, month: int) -> datetime:
    if month < 12:
        return datetime(year, month + 1, 1)
    # No January after the last representable year
    return datetime(year + 1, 1, 1) if year < MAXYEAR else datetime.max


def analytics_range(year: int, month: Optional[int] = None) -> Tuple[datetime, datetime]:
    """[first day of the month, first day of the next month) or the whole year"""
    if month is None:
        return datetime(year, 1, 1), _month_after(year, 12)
    return datetime(year, month, 1), _month_after(year, month)


def payment_summary(db: Session, year: int, month: Optional[int] = None) -> dict:
    start, end = analytics_range(year, month)
    paid_in_range = and_(
        Payment.status == PaymentStatus.PAID,
        Payment.paid_date >= start,
        Payment.paid_date < end,
    )

    total_revenue = db.query(func.sum(Payment.amount))\
        .filter(paid_in_range, Payment.payment_type.in_([PaymentType.RENT, PaymentType.DEPOSIT]))\
        .scalar() or 0

    pending_total, pending_count = db.query(func.sum(Payment.amount), func.count(Payment.id))\
        .filter(
            Payment.status.in_([PaymentStatus.PENDING, PaymentStatus.LATE]),
            Payment.due_date <= utcnow(),
        ).one()

    by_type = db.query(Payment.payment_type, func.sum(Payment.amount), func.count(Payment.id))\
        .filter(paid_in_range)\
        .group_by(Payment.payment_type)\
        .all()

    paid_year = extract("year", Payment.paid_date)
    paid_month = extract("month", Payment.paid_date)
    monthly = db.query(paid_year, paid_month, func.sum(Payment.amount), func.count(Payment.id))\
        .filter(paid_in_range)\
        .group_by(paid_year, paid_month)\
        .order_by(paid_year, paid_month)\
        .all()

    return {
        "period": {"start": start, "end": end},
        "total_revenue": float(total_revenue),
        "pending_payments": {"total": float(pending_total or 0), "count": pending_count},
        "payments_by_type": [
            {"type": payment_type.value, "total": float(total), "count": count}
            for payment_type, total, count in by_type
        ],
        "monthly_revenue": [
            {"year": int(y), "month": int(m), "total": float(total), "count": count}
            for y, m, total, count in monthly
        ],
    }
