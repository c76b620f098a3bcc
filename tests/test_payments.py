import pytest

from conftest import API, auth_headers
from rentdesk.db.base import utcnow
from rentdesk.models.payment import Payment, PaymentStatus
from rentdesk.models.tenant import Tenant
from rentdesk.models.user import UserRole
from rentdesk.schemas.payment import PayRequest
from rentdesk.services import payment_service


@pytest.fixture()
def tenancy(tenant_user, create_property, create_tenant):
    prop = create_property()
    tenant = create_tenant(tenant_user.id, prop["id"])
    return prop, tenant


@pytest.fixture()
def create_payment(client, manager_headers, tenancy):
    prop, tenant = tenancy

    def _create(**overrides):
        payload = {
            "property_id": prop["id"],
            "tenant_id": tenant["id"],
            "payment_type": "rent",
            "amount": 1200,
            "due_date": "2026-02-01T00:00:00",
            "description": "February rent",
        }
        payload.update(overrides)
        response = client.post(f"{API}/payments/", json=payload, headers=manager_headers)
        assert response.status_code == 201, response.text
        return response.json()["payment"]

    return _create


def _ledger(client, tenant_id, headers):
    return client.get(f"{API}/tenants/{tenant_id}", headers=headers).json()["tenant"]["payment_history"]


def test_create_payment_appends_ledger_entry(client, manager_headers, tenancy, create_payment):
    _, tenant = tenancy
    payment = create_payment()

    assert payment["payment_code"].startswith("PAY-")
    assert payment["status"] == "pending"

    ledger = _ledger(client, tenant["id"], manager_headers)
    assert len(ledger) == 1
    assert ledger[0]["payment_id"] == payment["id"]
    assert ledger[0]["status"] == "pending"
    assert ledger[0]["amount"] == 1200


def test_create_payment_unknown_tenant(client, manager_headers, tenancy):
    prop, _ = tenancy
    response = client.post(f"{API}/payments/", json={
        "property_id": prop["id"],
        "tenant_id": "00000000-0000-0000-0000-000000000000",
        "payment_type": "rent",
        "amount": 1200,
        "due_date": "2026-02-01T00:00:00",
        "description": "February rent",
    }, headers=manager_headers)
    assert response.status_code == 404


def test_create_payment_requires_staff(client, tenant_headers, tenancy):
    prop, tenant = tenancy
    response = client.post(f"{API}/payments/", json={
        "property_id": prop["id"],
        "tenant_id": tenant["id"],
        "payment_type": "rent",
        "amount": 1200,
        "due_date": "2026-02-01T00:00:00",
        "description": "February rent",
    }, headers=tenant_headers)
    assert response.status_code == 403


def test_pay(client, tenant_headers, manager_headers, tenancy, create_payment):
    _, tenant = tenancy
    payment = create_payment()

    response = client.post(
        f"{API}/payments/{payment['id']}/pay", json={"method": "credit-card"}, headers=tenant_headers
    )
    assert response.status_code == 200
    paid = response.json()["payment"]
    assert paid["status"] == "paid"
    assert paid["paid_date"] is not None
    assert paid["transaction_id"].startswith("TXN-")

    ledger = _ledger(client, tenant["id"], manager_headers)
    assert ledger[0]["status"] == "paid"
    assert ledger[0]["payment_method"] == "credit-card"
    assert ledger[0]["transaction_id"] == paid["transaction_id"]

    response = client.post(
        f"{API}/payments/{payment['id']}/pay", json={"method": "cash"}, headers=tenant_headers
    )
    assert response.status_code == 400


def test_ledger_keyed_by_payment(client, tenant_headers, manager_headers, tenancy, create_payment):
    _, tenant = tenancy
    first = create_payment()
    second = create_payment()

    client.post(f"{API}/payments/{second['id']}/pay", json={"method": "ach"}, headers=tenant_headers)

    ledger = {entry["payment_id"]: entry for entry in _ledger(client, tenant["id"], manager_headers)}
    assert ledger[first["id"]]["status"] == "pending"
    assert ledger[second["id"]]["status"] == "paid"


def test_ledger_entry_recreated_when_missing(client, db, tenant_headers, manager_headers, tenancy, create_payment):
    _, tenant = tenancy
    payment = create_payment()

    record = db.query(Tenant).one()
    record.payment_history = []
    db.commit()

    client.post(f"{API}/payments/{payment['id']}/pay", json={"method": "cash"}, headers=tenant_headers)

    ledger = _ledger(client, tenant["id"], manager_headers)
    assert len(ledger) == 1
    assert ledger[0]["payment_id"] == payment["id"]
    assert ledger[0]["status"] == "paid"


def test_other_tenant_cannot_pay(client, make_user, create_payment):
    payment = create_payment()
    stranger = auth_headers(make_user(UserRole.TENANT))
    response = client.post(f"{API}/payments/{payment['id']}/pay", json={"method": "cash"}, headers=stranger)
    assert response.status_code == 403


def test_update_payment_mirrors_ledger(client, manager_headers, tenancy, create_payment):
    _, tenant = tenancy
    payment = create_payment()

    response = client.put(
        f"{API}/payments/{payment['id']}",
        json={"amount": 1250, "due_date": "2026-02-03T00:00:00"},
        headers=manager_headers,
    )
    assert response.status_code == 200
    assert response.json()["payment"]["amount"] == 1250

    ledger = _ledger(client, tenant["id"], manager_headers)
    assert ledger[0]["amount"] == 1250
    assert ledger[0]["date"].startswith("2026-02-03")


def test_paid_payment_is_frozen_except_refund(client, manager_headers, tenant_headers, tenancy, create_payment):
    _, tenant = tenancy
    payment = create_payment()
    client.post(f"{API}/payments/{payment['id']}/pay", json={"method": "cash"}, headers=tenant_headers)
    url = f"{API}/payments/{payment['id']}"

    assert client.put(url, json={"amount": 10}, headers=manager_headers).status_code == 400

    response = client.put(url, json={"status": "refunded"}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["payment"]["status"] == "refunded"
    assert _ledger(client, tenant["id"], manager_headers)[0]["status"] == "refunded"


def test_invalid_status_transition(client, manager_headers, create_payment):
    payment = create_payment()
    response = client.put(f"{API}/payments/{payment['id']}", json={"status": "refunded"}, headers=manager_headers)
    assert response.status_code == 400


def test_update_rejects_protected_fields(client, manager_headers, create_payment):
    payment = create_payment()
    url = f"{API}/payments/{payment['id']}"
    assert client.put(url, json={"payment_code": "PAY-X"}, headers=manager_headers).status_code == 422
    assert client.put(url, json={"amount": None}, headers=manager_headers).status_code == 422


def test_reminder_and_dispute(client, manager_headers, tenant_headers, create_payment):
    payment = create_payment()

    response = client.post(f"{API}/payments/{payment['id']}/reminder", headers=manager_headers)
    assert response.status_code == 200
    reminders = response.json()["payment"]["reminders"]
    assert reminders[0]["method"] == "email"
    assert reminders[0]["status"] == "sent"

    response = client.post(
        f"{API}/payments/{payment['id']}/reminder", json={"method": "sms"}, headers=manager_headers
    )
    assert response.json()["payment"]["reminders"][-1]["method"] == "sms"

    response = client.post(
        f"{API}/payments/{payment['id']}/disputes", json={"reason": "Already paid in cash"}, headers=tenant_headers
    )
    assert response.status_code == 201
    assert response.json()["payment"]["disputes"][0]["status"] == "open"


def test_list_payments(client, manager_headers, tenant_headers, make_user, create_payment):
    create_payment(due_date="2026-01-01T00:00:00")
    create_payment(due_date="2026-03-01T00:00:00", payment_type="utility")

    response = client.get(f"{API}/payments/", headers=manager_headers)
    dues = [p["due_date"] for p in response.json()["payments"]]
    assert dues == sorted(dues, reverse=True)

    response = client.get(f"{API}/payments/", params={"type": "utility"}, headers=manager_headers)
    assert response.json()["count"] == 1

    response = client.get(
        f"{API}/payments/", params={"start_date": "2026-02-01T00:00:00Z"}, headers=manager_headers
    )
    assert response.json()["count"] == 1

    assert client.get(f"{API}/payments/", headers=tenant_headers).json()["count"] == 2

    stranger = auth_headers(make_user(UserRole.TENANT))
    assert client.get(f"{API}/payments/", headers=stranger).json()["count"] == 0


def test_analytics(client, manager_headers, tenant_headers, create_payment):
    rent = create_payment()
    fee = create_payment(payment_type="late-fee", amount=50)
    create_payment(amount=999, due_date="2020-01-01T00:00:00")  # stays pending, past due

    client.post(f"{API}/payments/{rent['id']}/pay", json={"method": "ach"}, headers=tenant_headers)
    client.post(f"{API}/payments/{fee['id']}/pay", json={"method": "ach"}, headers=tenant_headers)

    now = utcnow()
    response = client.get(
        f"{API}/payments/analytics/summary",
        params={"year": now.year, "month": now.month},
        headers=manager_headers,
    )
    assert response.status_code == 200
    summary = response.json()["summary"]
    # Late fees are not revenue
    assert summary["total_revenue"] == 1200
    assert summary["pending_payments"] == {"total": 999, "count": 1}
    by_type = {row["type"]: row["total"] for row in summary["payments_by_type"]}
    assert by_type == {"rent": 1200, "late-fee": 50}
    assert summary["monthly_revenue"][0]["month"] == now.month


def test_analytics_requires_staff(client, tenant_headers):
    response = client.get(f"{API}/payments/analytics/summary", headers=tenant_headers)
    assert response.status_code == 403


def test_analytics_last_representable_year(client, manager_headers):
    response = client.get(f"{API}/payments/analytics/summary", params={"year": 9999}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["summary"]["period"]["start"] == "9999-01-01T00:00:00"

    response = client.get(
        f"{API}/payments/analytics/summary", params={"year": 9999, "month": 12}, headers=manager_headers
    )
    assert response.status_code == 200
    assert response.json()["summary"]["total_revenue"] == 0


def test_failed_pay_leaves_payment_and_ledger_untouched(db, monkeypatch, tenant_user, create_payment):
    create_payment()
    real_sync = payment_service.sync_ledger_entry

    def sync_then_fail(tenant, payment):
        real_sync(tenant, payment)
        raise RuntimeError("connection lost")

    monkeypatch.setattr(payment_service, "sync_ledger_entry", sync_then_fail)

    payment = db.query(Payment).one()
    with pytest.raises(RuntimeError):
        payment_service.pay_payment(db, payment, PayRequest(method="cash"), tenant_user)

    payment = db.query(Payment).one()
    assert payment.status == PaymentStatus.PENDING
    assert payment.paid_date is None
    assert payment.transaction_id is None
    ledger = db.query(Tenant).one().payment_history
    assert [entry["status"] for entry in ledger] == ["pending"]
