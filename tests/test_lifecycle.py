import pytest
from fastapi import HTTPException

from rentdesk.models.maintenance import MaintenanceStatus
from rentdesk.models.payment import PaymentStatus
from rentdesk.models.tenant import TenantStatus
from rentdesk.services.lifecycle import can_transition, ensure_transition, is_terminal


@pytest.mark.parametrize("current, target", [
    (MaintenanceStatus.PENDING, MaintenanceStatus.IN_PROGRESS),
    (MaintenanceStatus.ON_HOLD, MaintenanceStatus.PENDING),
    (PaymentStatus.PENDING, PaymentStatus.PAID),
    (PaymentStatus.PAID, PaymentStatus.REFUNDED),
    (TenantStatus.PENDING, TenantStatus.ACTIVE),
    (TenantStatus.ACTIVE, TenantStatus.EVICTED),
])
def test_allowed(current, target):
    assert can_transition(current, target)
    assert ensure_transition(current, target) is True


@pytest.mark.parametrize("current, target", [
    (MaintenanceStatus.COMPLETED, MaintenanceStatus.PENDING),
    (PaymentStatus.PENDING, PaymentStatus.REFUNDED),
    (PaymentStatus.REFUNDED, PaymentStatus.PAID),
    (TenantStatus.PAST, TenantStatus.ACTIVE),
])
def test_rejected(current, target):
    assert not can_transition(current, target)
    with pytest.raises(HTTPException) as exc:
        ensure_transition(current, target)
    assert exc.value.status_code == 400


def test_same_status_is_noop():
    assert ensure_transition(PaymentStatus.LATE, PaymentStatus.LATE) is False


def test_terminal_states():
    assert is_terminal(MaintenanceStatus.COMPLETED)
    assert is_terminal(PaymentStatus.REFUNDED)
    assert is_terminal(TenantStatus.EVICTED)
    assert not is_terminal(TenantStatus.ACTIVE)
