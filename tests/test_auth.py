from datetime import timedelta

from conftest import API, auth_headers
from rentdesk.core.security import create_access_token
from rentdesk.models.user import UserRole
from rentdesk.services import auth_service


def signup_payload(**overrides):
    payload = {
        "email": "Jane.Doe@Example.com",
        "password": "TestPassword123",
        "first_name": "Jane",
        "last_name": "Doe",
        "phone": "555-0101",
    }
    payload.update(overrides)
    return payload


def test_signup(client):
    response = client.post(f"{API}/auth/signup", json=signup_payload())
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["email"] == "jane.doe@example.com"
    assert body["user"]["role"] == "tenant"
    assert "hashed_password" not in body["user"]


def test_signup_duplicate_email_is_case_insensitive(client):
    client.post(f"{API}/auth/signup", json=signup_payload())
    response = client.post(f"{API}/auth/signup", json=signup_payload(email="JANE.DOE@example.com"))
    assert response.status_code == 409


def test_signup_duplicate_email_race(client, monkeypatch):
    client.post(f"{API}/auth/signup", json=signup_payload())

    # The second request checked for the address before the first one committed
    monkeypatch.setattr(auth_service, "get_user_by_email", lambda db, email: None)
    response = client.post(f"{API}/auth/signup", json=signup_payload())
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already registered"


def test_signup_rejects_admin_role(client):
    response = client.post(f"{API}/auth/signup", json=signup_payload(role="admin"))
    assert response.status_code == 403


def test_signup_validation_error(client):
    response = client.post(f"{API}/auth/signup", json=signup_payload(password="short"))
    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["errors"]


def test_signin(client):
    client.post(f"{API}/auth/signup", json=signup_payload())
    response = client.post(f"{API}/auth/signin", json={
        "email": "jane.doe@example.com",
        "password": "TestPassword123",
    })
    assert response.status_code == 200
    assert response.json()["user"]["last_login"] is not None


def test_signin_invalid(client):
    response = client.post(f"{API}/auth/signin", json={
        "email": "nonexistent@example.com",
        "password": "wrong-password",
    })
    assert response.status_code == 401


def test_signin_deactivated(client, db, make_user):
    user = make_user(UserRole.TENANT, email="gone@example.com")
    user.is_active = False
    db.commit()

    response = client.post(f"{API}/auth/signin", json={
        "email": "gone@example.com",
        "password": "password123",
    })
    assert response.status_code == 403


def test_me_requires_token(client):
    assert client.get(f"{API}/auth/me").status_code == 401


def test_me_and_current_user(client, tenant_user, tenant_headers):
    for path in ("/auth/me", "/auth/current-user"):
        response = client.get(f"{API}{path}", headers=tenant_headers)
        assert response.status_code == 200
        assert response.json()["user"]["id"] == str(tenant_user.id)


def test_expired_token(client, tenant_user):
    token = create_access_token({"sub": str(tenant_user.id)}, expires_delta=timedelta(minutes=-5))
    response = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Token expired"


def test_garbage_token(client):
    response = client.get(f"{API}/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_deactivated_user_token_rejected(client, db, tenant_user, tenant_headers):
    tenant_user.is_active = False
    db.commit()
    response = client.get(f"{API}/auth/me", headers=tenant_headers)
    assert response.status_code == 401


def test_update_profile(client, tenant_headers):
    response = client.put(f"{API}/auth/me", json={"first_name": "Janet"}, headers=tenant_headers)
    assert response.status_code == 200
    assert response.json()["user"]["first_name"] == "Janet"


def test_update_profile_rejects_role(client, tenant_headers):
    response = client.put(f"{API}/auth/me", json={"role": "admin"}, headers=tenant_headers)
    assert response.status_code == 422


def test_update_profile_rejects_null_name(client, tenant_headers):
    response = client.put(f"{API}/auth/me", json={"first_name": None}, headers=tenant_headers)
    assert response.status_code == 422


def test_change_password(client, tenant_user, tenant_headers):
    response = client.put(f"{API}/auth/change-password", json={
        "current_password": "wrong-password",
        "new_password": "new-password-1",
    }, headers=tenant_headers)
    assert response.status_code == 401

    response = client.put(f"{API}/auth/change-password", json={
        "current_password": "password123",
        "new_password": "new-password-1",
    }, headers=tenant_headers)
    assert response.status_code == 200

    response = client.post(f"{API}/auth/signin", json={
        "email": tenant_user.email,
        "password": "new-password-1",
    })
    assert response.status_code == 200


def test_refresh_and_signout(client, tenant_user):
    headers = auth_headers(tenant_user)
    response = client.post(f"{API}/auth/refresh-token", headers=headers)
    assert response.status_code == 200
    assert response.json()["access_token"]

    assert client.post(f"{API}/auth/signout", headers=headers).status_code == 200
