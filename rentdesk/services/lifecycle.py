"""
Status lifecycles for tickets, payments and tenancies.

Each lifecycle is an explicit transition table. Writing the current status
again is a no-op; any move not listed in the table is rejected with a 400.
"""
from enum import Enum
from typing import Dict, FrozenSet, Type
import logging

from fastapi import HTTPException, status

from rentdesk.models.maintenance import MaintenanceStatus
from rentdesk.models.payment import PaymentStatus
from rentdesk.models.tenant import TenantStatus

logger = logging.getLogger(__name__)


MAINTENANCE_TRANSITIONS: Dict[MaintenanceStatus, FrozenSet[MaintenanceStatus]] = {
    MaintenanceStatus.PENDING: frozenset({
        MaintenanceStatus.IN_PROGRESS,
        MaintenanceStatus.ON_HOLD,
        MaintenanceStatus.CANCELLED,
        MaintenanceStatus.COMPLETED,
    }),
    MaintenanceStatus.IN_PROGRESS: frozenset({
        MaintenanceStatus.COMPLETED,
        MaintenanceStatus.ON_HOLD,
        MaintenanceStatus.CANCELLED,
    }),
    MaintenanceStatus.ON_HOLD: frozenset({
        MaintenanceStatus.PENDING,
        MaintenanceStatus.IN_PROGRESS,
        MaintenanceStatus.CANCELLED,
    }),
    MaintenanceStatus.CANCELLED: frozenset({MaintenanceStatus.PENDING}),
    MaintenanceStatus.COMPLETED: frozenset(),
}

PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.PAID,
        PaymentStatus.PARTIAL,
        PaymentStatus.LATE,
        PaymentStatus.FAILED,
    }),
    PaymentStatus.PARTIAL: frozenset({PaymentStatus.PAID, PaymentStatus.LATE, PaymentStatus.FAILED}),
    PaymentStatus.LATE: frozenset({PaymentStatus.PAID, PaymentStatus.PARTIAL, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.REFUNDED: frozenset(),
}

TENANT_TRANSITIONS: Dict[TenantStatus, FrozenSet[TenantStatus]] = {
    TenantStatus.PENDING: frozenset({TenantStatus.ACTIVE, TenantStatus.PAST}),
    TenantStatus.ACTIVE: frozenset({TenantStatus.PAST, TenantStatus.EVICTED}),
    TenantStatus.PAST: frozenset(),
    TenantStatus.EVICTED: frozenset(),
}

_TABLES: Dict[Type[Enum], Dict] = {
    MaintenanceStatus: MAINTENANCE_TRANSITIONS,
    PaymentStatus: PAYMENT_TRANSITIONS,
    TenantStatus: TENANT_TRANSITIONS,
}


def can_transition(current: Enum, target: Enum) -> bool:
    """True when `target` is reachable from `current` in one step."""
    table = _TABLES[type(current)]
    return target in table.get(current, frozenset())


def is_terminal(current: Enum) -> bool:
    return not _TABLES[type(current)].get(current)


def ensure_transition(current: Enum, target: Enum) -> bool:
    """
    Validate a status write.

    Returns:
        False when `target` equals `current` (nothing to do), True when the
        move is allowed.

    Raises:
        HTTPException 400 when the move is not in the transition table.
    """
    if current == target:
        return False

    if not can_transition(current, target):
        logger.info(f"[LIFECYCLE] Rejected {type(current).__name__} {current.value} -> {target.value}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid status transition: {current.value} -> {target.value}",
        )

    return True
