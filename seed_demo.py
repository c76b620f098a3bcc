#!/usr/bin/env python3
"""
Load demo data: one account per role, four properties, two tenancies
with their rent ledger.

    python seed_demo.py            # refuses to touch a database that has users
    python seed_demo.py --reset    # drops every table first
"""
import sys
import uuid
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

from rentdesk.database import SessionLocal, engine, init_db  # noqa: E402
from rentdesk.db.base import Base, generate_code  # noqa: E402
from rentdesk.models.property import Property  # noqa: E402
from rentdesk.models.user import User, UserRole  # noqa: E402
from rentdesk.schemas.payment import PaymentCreate, PayRequest  # noqa: E402
from rentdesk.schemas.property import PropertyCreate  # noqa: E402
from rentdesk.schemas.tenant import TenantCreate  # noqa: E402
from rentdesk.services import auth_service, payment_service, tenancy_service  # noqa: E402
from rentdesk.services.property_service import apply_property_payload  # noqa: E402

PASSWORD = "password123"

ACCOUNTS = {
    "admin": ("admin@rentdesk.dev", "John", "Admin", UserRole.ADMIN),
    "manager": ("manager@rentdesk.dev", "Sarah", "Manager", UserRole.MANAGER),
    "owner": ("owner@rentdesk.dev", "Michael", "Owner", UserRole.OWNER),
    "tenant1": ("tenant1@rentdesk.dev", "Emily", "Johnson", UserRole.TENANT),
    "tenant2": ("tenant2@rentdesk.dev", "David", "Williams", UserRole.TENANT),
    "maintenance": ("maintenance@rentdesk.dev", "Robert", "Fix", UserRole.MAINTENANCE),
}

PROPERTIES = [
    {
        "name": "Sunset Apartments",
        "property_type": "apartment",
        "description": "Modern apartment complex in Manhattan with city views",
        "address": {
            "street": "123 Sunset Blvd", "city": "New York", "state": "NY", "zip_code": "10001",
            "coordinates": {"lat": 40.7128, "lng": -74.006},
        },
        "details": {"bedrooms": 2, "bathrooms": 2, "square_feet": 1200, "year_built": 2015},
        "financials": {"monthly_rent": 3500, "security_deposit": 7000},
        "amenities": ["gym", "rooftop", "doorman"],
    },
    {
        "name": "Oak Street House",
        "property_type": "single-family",
        "description": "Family house with a large backyard close to downtown Austin",
        "address": {
            "street": "456 Oak St", "city": "Austin", "state": "TX", "zip_code": "73301",
            "coordinates": {"lat": 30.2672, "lng": -97.7431},
        },
        "details": {"bedrooms": 3, "bathrooms": 2.5, "square_feet": 2100, "year_built": 2005,
                    "pets_allowed": True},
        "financials": {"monthly_rent": 2400, "security_deposit": 2400},
    },
    {
        "name": "Downtown Condo",
        "property_type": "condo",
        "description": "One bedroom condo in the Loop, walking distance to transit",
        "address": {
            "street": "789 State St", "city": "Chicago", "state": "IL", "zip_code": "60601",
            "coordinates": {"lat": 41.8781, "lng": -87.6298},
        },
        "details": {"bedrooms": 1, "bathrooms": 1, "square_feet": 800, "year_built": 2018},
        "financials": {"monthly_rent": 1900, "security_deposit": 1900},
    },
    {
        "name": "Pine Valley Townhouse",
        "property_type": "townhouse",
        "description": "Townhouse under renovation, back on the market next season",
        "address": {
            "street": "321 Pine Valley Rd", "city": "Denver", "state": "CO", "zip_code": "80202",
            "coordinates": {"lat": 39.7392, "lng": -104.9903},
        },
        "details": {"bedrooms": 3, "bathrooms": 2, "square_feet": 1650, "year_built": 1999},
        "financials": {"monthly_rent": 2200, "security_deposit": 2200},
        "status": "maintenance",
    },
]


def reset_schema():
    print("Dropping all tables...")
    Base.metadata.drop_all(bind=engine)


def seed(db):
    users = {}
    for key, (email, first_name, last_name, role) in ACCOUNTS.items():
        users[key] = auth_service.create_user(
            db, email=email, password=PASSWORD, first_name=first_name,
            last_name=last_name, phone="555-0100", role=role,
        )
    print(f"Created {len(users)} users")

    owner, manager = users["owner"], users["manager"]
    properties = []
    for payload in PROPERTIES:
        property_in = PropertyCreate(**payload, manager_id=manager.id)
        prop = Property(id=uuid.uuid4(), property_code=generate_code("PROP"), owner_id=owner.id)
        apply_property_payload(prop, property_in.model_dump())
        db.add(prop)
        owner.properties.append(prop)
        properties.append(prop)
    db.commit()
    print(f"Created {len(properties)} properties")

    sunset, oak = properties[0], properties[1]
    tenancies = [
        tenancy_service.create_tenancy(db, TenantCreate(
            user_id=users["tenant1"].id, property_id=sunset.id,
            lease_start=datetime(2026, 1, 1), lease_end=datetime(2026, 12, 31),
            monthly_rent=3500, security_deposit=7000, deposit_paid=True,
            emergency_contact={"name": "Laura Johnson", "relationship": "mother", "phone": "555-401-0001"},
        )),
        tenancy_service.create_tenancy(db, TenantCreate(
            user_id=users["tenant2"].id, property_id=oak.id,
            lease_start=datetime(2026, 3, 1), lease_end=datetime(2027, 2, 28),
            monthly_rent=2400, security_deposit=2400, status="pending",
            emergency_contact={"name": "Patricia Williams", "relationship": "sister", "phone": "555-501-0001"},
        )),
    ]
    print(f"Created {len(tenancies)} tenants")

    active = tenancies[0]
    payments = []
    for month in (1, 2, 3):
        payments.append(payment_service.create_payment(db, PaymentCreate(
            property_id=sunset.id, tenant_id=active.id, payment_type="rent",
            amount=3500, due_date=datetime(2026, month, 1),
            description=f"Rent {datetime(2026, month, 1):%B %Y}",
        ), manager))
    for payment in payments[:2]:
        payment_service.pay_payment(db, payment, PayRequest(method="ach"), users["tenant1"])
    print(f"Created {len(payments)} payments")


def main():
    if "--reset" in sys.argv:
        reset_schema()
    if not init_db():
        print("❌ Could not create the schema, check DATABASE_URL")
        return 1

    db = SessionLocal()
    try:
        if db.query(User).count():
            print("⚠️ Database already has users; run with --reset to start over.")
            return 1
        seed(db)
    finally:
        db.close()

    print(f"\nLogin credentials (password for all: {PASSWORD}):")
    for email, _, _, role in ACCOUNTS.values():
        print(f" - {role.value:<12} {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
