import os

# Must be set before rentdesk is imported: settings are read once
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["TESTING"] = "true"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import rentdesk.models  # noqa: F401
from rentdesk.database import get_db
from rentdesk.db.base import Base
from rentdesk.main import app
from rentdesk.models.user import UserRole
from rentdesk.services import auth_service

API = "/api/v1"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(role=UserRole.TENANT, email=None, password="password123"):
        counter["n"] += 1
        return auth_service.create_user(
            db,
            email=email or f"{role.value}{counter['n']}@example.com",
            password=password,
            first_name=role.value.title(),
            last_name=f"User{counter['n']}",
            phone="555-0100",
            role=role,
        )

    return _make


def auth_headers(user):
    return {"Authorization": f"Bearer {auth_service.generate_token(user)}"}


@pytest.fixture()
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture()
def manager(make_user):
    return make_user(UserRole.MANAGER)


@pytest.fixture()
def tenant_user(make_user):
    return make_user(UserRole.TENANT)


@pytest.fixture()
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture()
def manager_headers(manager):
    return auth_headers(manager)


@pytest.fixture()
def tenant_headers(tenant_user):
    return auth_headers(tenant_user)


def property_payload(**overrides):
    payload = {
        "name": "Maple Court 4B",
        "property_type": "apartment",
        "description": "Two bedroom apartment near the park",
        "address": {
            "street": "12 Maple Court",
            "city": "Springfield",
            "state": "IL",
            "zip_code": "62701",
            "coordinates": {"lat": 39.7817, "lng": -89.6501},
        },
        "details": {
            "bedrooms": 2,
            "bathrooms": 1.5,
            "square_feet": 950,
            "year_built": 1998,
        },
        "financials": {
            "monthly_rent": 1200,
            "security_deposit": 1200,
        },
    }
    payload.update(overrides)
    return payload


def tenant_payload(user_id, property_id, **overrides):
    payload = {
        "user_id": str(user_id),
        "property_id": str(property_id),
        "lease_start": "2026-01-01T00:00:00",
        "lease_end": "2026-12-31T00:00:00",
        "monthly_rent": 1200,
        "security_deposit": 1200,
        "emergency_contact": {
            "name": "Pat Doe",
            "relationship": "sibling",
            "phone": "555-0199",
        },
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def create_property(client, manager_headers):
    def _create(headers=None, **overrides):
        response = client.post(
            f"{API}/properties/",
            json=property_payload(**overrides),
            headers=headers or manager_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["property"]

    return _create


@pytest.fixture()
def create_tenant(client, manager_headers):
    def _create(user_id, property_id, headers=None, **overrides):
        response = client.post(
            f"{API}/tenants/",
            json=tenant_payload(user_id, property_id, **overrides),
            headers=headers or manager_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["tenant"]

    return _create
