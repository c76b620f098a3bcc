from uuid import UUID

import pytest

from conftest import API, auth_headers, tenant_payload
from rentdesk.models.property import Property, PropertyStatus
from rentdesk.models.tenant import Tenant, TenantStatus
from rentdesk.models.user import UserRole
from rentdesk.schemas.tenant import TenantCreate
from rentdesk.services import tenancy_service


def _property(client, prop_id):
    return client.get(f"{API}/properties/{prop_id}").json()["property"]


def test_create_tenant_occupies_property(client, tenant_user, create_property, create_tenant):
    prop = create_property()
    tenant = create_tenant(tenant_user.id, prop["id"])

    assert tenant["status"] == "active"
    assert tenant["user"]["id"] == str(tenant_user.id)
    assert tenant["property"]["id"] == prop["id"]

    prop = _property(client, prop["id"])
    assert prop["status"] == "occupied"
    assert prop["lease"]["tenant"] == tenant["id"]
    assert prop["lease"]["rent_amount"] == 1200


def test_pending_tenant_marks_property_pending(client, tenant_user, create_property, create_tenant):
    prop = create_property()
    create_tenant(tenant_user.id, prop["id"], status="pending")
    assert _property(client, prop["id"])["status"] == "pending"


def test_tenant_user_gets_property_membership(client, tenant_user, tenant_headers, create_property, create_tenant):
    prop = create_property()
    create_tenant(tenant_user.id, prop["id"])
    me = client.get(f"{API}/auth/me", headers=tenant_headers).json()["user"]
    assert prop["id"] in me["property_ids"]


def test_second_active_tenant_rejected(client, manager_headers, make_user, create_property, create_tenant):
    prop = create_property()
    create_tenant(make_user(UserRole.TENANT).id, prop["id"])

    response = client.post(
        f"{API}/tenants/",
        json=tenant_payload(make_user(UserRole.TENANT).id, prop["id"]),
        headers=manager_headers,
    )
    assert response.status_code == 400


def test_create_tenant_unknown_references(client, manager_headers, tenant_user, create_property):
    prop = create_property()
    missing = "00000000-0000-0000-0000-000000000000"

    response = client.post(f"{API}/tenants/", json=tenant_payload(missing, prop["id"]), headers=manager_headers)
    assert response.status_code == 404

    response = client.post(f"{API}/tenants/", json=tenant_payload(tenant_user.id, missing), headers=manager_headers)
    assert response.status_code == 404


def test_create_tenant_lease_dates(client, manager_headers, tenant_user, create_property):
    prop = create_property()
    response = client.post(
        f"{API}/tenants/",
        json=tenant_payload(tenant_user.id, prop["id"], lease_end="2025-06-01T00:00:00"),
        headers=manager_headers,
    )
    assert response.status_code == 422


def test_tenant_role_sees_only_own(client, make_user, create_property, create_tenant):
    mine = make_user(UserRole.TENANT)
    theirs = make_user(UserRole.TENANT)
    own = create_tenant(mine.id, create_property()["id"])
    other = create_tenant(theirs.id, create_property(name="Other")["id"])

    headers = auth_headers(mine)
    response = client.get(f"{API}/tenants/", headers=headers)
    assert [t["id"] for t in response.json()["tenants"]] == [own["id"]]

    assert client.get(f"{API}/tenants/{other['id']}", headers=headers).status_code == 403
    assert client.get(f"{API}/tenants/{own['id']}", headers=headers).status_code == 200


def test_update_tenant_rent_refreshes_lease(client, manager_headers, tenant_user, create_property, create_tenant):
    prop = create_property()
    tenant = create_tenant(tenant_user.id, prop["id"])

    response = client.put(f"{API}/tenants/{tenant['id']}", json={"monthly_rent": 1300}, headers=manager_headers)
    assert response.status_code == 200
    assert _property(client, prop["id"])["lease"]["rent_amount"] == 1300


def test_update_tenant_rejects_bad_lease_dates(client, manager_headers, tenant_user, create_property, create_tenant):
    tenant = create_tenant(tenant_user.id, create_property()["id"])
    response = client.put(
        f"{API}/tenants/{tenant['id']}", json={"lease_end": "2025-01-01T00:00:00"}, headers=manager_headers
    )
    assert response.status_code == 400


def test_update_tenant_rejects_protected_fields(client, manager_headers, tenant_user, create_property, create_tenant):
    tenant = create_tenant(tenant_user.id, create_property()["id"])
    url = f"{API}/tenants/{tenant['id']}"
    assert client.put(url, json={"payment_history": []}, headers=manager_headers).status_code == 422
    assert client.put(url, json={"property_id": tenant["id"]}, headers=manager_headers).status_code == 422


def test_status_transitions(client, manager_headers, tenant_user, create_property, create_tenant):
    prop = create_property()
    tenant = create_tenant(tenant_user.id, prop["id"], status="pending")
    url = f"{API}/tenants/{tenant['id']}"

    response = client.put(url, json={"status": "active"}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["tenant"]["move_in_date"] is not None
    assert _property(client, prop["id"])["status"] == "occupied"

    response = client.put(url, json={"status": "evicted"}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["tenant"]["move_out_date"] is not None
    prop = _property(client, prop["id"])
    assert prop["status"] == "available"
    assert prop["lease"] is None

    response = client.put(url, json={"status": "active"}, headers=manager_headers)
    assert response.status_code == 400


def test_activate_blocked_by_other_active_tenant(client, manager_headers, make_user, create_property, create_tenant):
    prop = create_property()
    waiting = create_tenant(make_user(UserRole.TENANT).id, prop["id"], status="pending")
    create_tenant(make_user(UserRole.TENANT).id, prop["id"])

    response = client.put(f"{API}/tenants/{waiting['id']}", json={"status": "active"}, headers=manager_headers)
    assert response.status_code == 400


def test_move_out(client, manager_headers, tenant_user, make_user, create_property, create_tenant):
    prop = create_property()
    tenant = create_tenant(tenant_user.id, prop["id"])

    response = client.post(
        f"{API}/tenants/{tenant['id']}/move-out",
        json={"move_out_condition": "Good"},
        headers=manager_headers,
    )
    assert response.status_code == 200
    moved = response.json()["tenant"]
    assert moved["status"] == "past"
    assert moved["move_out_date"] is not None
    assert moved["move_out_condition"] == "Good"

    prop = _property(client, prop["id"])
    assert prop["status"] == "available"
    assert prop["lease"] is None

    response = client.post(f"{API}/tenants/{tenant['id']}/move-out", json={}, headers=manager_headers)
    assert response.status_code == 400

    # A past tenant no longer blocks the property
    successor = create_tenant(make_user(UserRole.TENANT).id, prop["id"], lease_start="2027-01-01T00:00:00",
                              lease_end="2027-12-31T00:00:00")
    assert successor["status"] == "active"
    prop = _property(client, prop["id"])
    assert prop["status"] == "occupied"
    assert prop["lease"]["tenant"] == successor["id"]


def test_tenant_documents(client, tenant_user, tenant_headers, create_property, create_tenant):
    tenant = create_tenant(tenant_user.id, create_property()["id"])
    url = f"{API}/tenants/{tenant['id']}/documents"

    response = client.post(url, json={
        "type": "id",
        "name": "Driver license",
        "url": "https://files.example.com/dl.pdf",
    }, headers=tenant_headers)
    assert response.status_code == 201
    assert response.json()["document"]["upload_date"]

    response = client.get(url, headers=tenant_headers)
    assert response.json()["count"] == 1
    assert response.json()["documents"][0]["name"] == "Driver license"


def test_active_tenancy_unique_per_property(client, db, monkeypatch, manager_headers, make_user, create_property, create_tenant):
    prop = create_property()
    first = create_tenant(make_user(UserRole.TENANT).id, prop["id"])

    # Both requests passed the occupancy check before either committed
    monkeypatch.setattr(tenancy_service, "_other_active_tenant", lambda *args, **kwargs: None)

    response = client.post(
        f"{API}/tenants/",
        json=tenant_payload(make_user(UserRole.TENANT).id, prop["id"]),
        headers=manager_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Property already has an active tenant"

    active = db.query(Tenant).filter(Tenant.status == TenantStatus.ACTIVE).all()
    assert [str(t.id) for t in active] == [first["id"]]
    assert _property(client, prop["id"])["lease"]["tenant"] == first["id"]


def test_activation_unique_per_property(client, monkeypatch, manager_headers, make_user, create_property, create_tenant):
    prop = create_property()
    waiting = create_tenant(make_user(UserRole.TENANT).id, prop["id"], status="pending")
    create_tenant(make_user(UserRole.TENANT).id, prop["id"])

    monkeypatch.setattr(tenancy_service, "_other_active_tenant", lambda *args, **kwargs: None)

    response = client.put(f"{API}/tenants/{waiting['id']}", json={"status": "active"}, headers=manager_headers)
    assert response.status_code == 400
    assert client.get(f"{API}/tenants/{waiting['id']}", headers=manager_headers).json()["tenant"]["status"] == "pending"


def test_failed_create_leaves_nothing_behind(db, monkeypatch, tenant_user, create_property):
    prop = create_property()
    real_occupy = tenancy_service._occupy

    def occupy_then_fail(prop, tenant):
        real_occupy(prop, tenant)
        raise RuntimeError("connection lost")

    monkeypatch.setattr(tenancy_service, "_occupy", occupy_then_fail)

    with pytest.raises(RuntimeError):
        tenancy_service.create_tenancy(db, TenantCreate(**tenant_payload(tenant_user.id, prop["id"])))

    assert db.query(Tenant).count() == 0
    stored = db.get(Property, UUID(prop["id"]))
    assert stored.status == PropertyStatus.AVAILABLE
    assert stored.lease is None
    assert tenant_user.property_ids == []
