from conftest import API, auth_headers
from rentdesk.models.user import UserRole


def test_list_users_requires_staff(client, tenant_headers):
    assert client.get(f"{API}/users/", headers=tenant_headers).status_code == 403


def test_list_users_filters(client, admin_headers, make_user):
    make_user(UserRole.MAINTENANCE, email="fixit@example.com")
    make_user(UserRole.TENANT, email="renter@example.com")

    response = client.get(f"{API}/users/", params={"role": "maintenance"}, headers=admin_headers)
    assert response.status_code == 200
    emails = [u["email"] for u in response.json()["users"]]
    assert emails == ["fixit@example.com"]

    response = client.get(f"{API}/users/", params={"search": "RENTER"}, headers=admin_headers)
    assert [u["email"] for u in response.json()["users"]] == ["renter@example.com"]


def test_deactivate_and_activate(client, admin_headers, tenant_user):
    response = client.put(f"{API}/users/{tenant_user.id}/deactivate", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["user"]["is_active"] is False

    # Deactivated accounts lose access immediately
    assert client.get(f"{API}/auth/me", headers=auth_headers(tenant_user)).status_code == 401

    response = client.put(f"{API}/users/{tenant_user.id}/activate", headers=admin_headers)
    assert response.json()["user"]["is_active"] is True


def test_cannot_deactivate_self(client, admin, admin_headers):
    response = client.put(f"{API}/users/{admin.id}/deactivate", headers=admin_headers)
    assert response.status_code == 400


def test_manager_cannot_deactivate(client, manager_headers, tenant_user):
    response = client.put(f"{API}/users/{tenant_user.id}/deactivate", headers=manager_headers)
    assert response.status_code == 403
