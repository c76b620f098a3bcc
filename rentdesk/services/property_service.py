"""
Property Service
Maps the nested property payloads onto the flat columns, renders the
nested representation back, and answers proximity queries.
"""
from math import cos, radians
from typing import Any, List, Optional, Tuple
import logging

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from rentdesk.core.config import settings
from rentdesk.models.property import Property, default_metrics, default_utilities
from rentdesk.models.user import User, UserRole
from rentdesk.schemas.user import UserSummary

logger = logging.getLogger(__name__)

# Length of one degree of latitude on the mean-radius sphere (6371008.8 m)
METERS_PER_DEGREE = 111_195.08

_ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "country")
_DETAIL_FIELDS = (
    "bedrooms", "bathrooms", "square_feet", "year_built", "lot_size",
    "parking_spaces", "furnished", "pets_allowed", "smoking_allowed",
)
_FINANCIAL_FIELDS = (
    "purchase_price", "current_value", "monthly_rent", "security_deposit",
    "application_fee", "pet_deposit", "property_tax", "insurance", "hoa",
    "management_fee",
)
_TOP_LEVEL_FIELDS = (
    "name", "property_type", "description", "manager_id", "status", "features",
    "amenities", "images", "floor_plan", "virtual_tour", "notes", "tags",
)


def apply_property_payload(prop: Property, data: dict) -> None:
    """
    Write a (possibly partial) nested payload onto a Property.

    `data` is a model_dump of PropertyCreate or PropertyUpdate; only the keys
    present are touched, nested blocks are merged rather than replaced.
    """
    for field in _TOP_LEVEL_FIELDS:
        if field in data:
            setattr(prop, field, data[field])

    address = data.get("address") or {}
    for field in _ADDRESS_FIELDS:
        if field in address:
            setattr(prop, field, address[field])
    if "coordinates" in address:
        coords = address["coordinates"]
        prop.latitude = coords["lat"] if coords else None
        prop.longitude = coords["lng"] if coords else None
        prop.location = point_ewkt(prop.latitude, prop.longitude) if coords else None

    details = data.get("details") or {}
    for field in _DETAIL_FIELDS:
        if field in details:
            setattr(prop, field, details[field])

    financials = data.get("financials") or {}
    for field in _FINANCIAL_FIELDS:
        if field in financials:
            setattr(prop, field, financials[field])
    if financials.get("utilities"):
        # Reassign so the JSON column is flagged dirty
        prop.utilities = {**(prop.utilities or default_utilities()), **financials["utilities"]}

    maintenance = data.get("maintenance") or {}
    if "last_inspection" in maintenance:
        prop.last_inspection = maintenance["last_inspection"]
    if "next_inspection" in maintenance:
        prop.next_inspection = maintenance["next_inspection"]
    if maintenance.get("schedule") is not None:
        prop.maintenance_schedule = maintenance["schedule"]

    if data.get("metrics"):
        prop.metrics = {**(prop.metrics or default_metrics()), **data["metrics"]}


def _user_summary(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return UserSummary.model_validate(user).model_dump()


def property_to_out(prop: Property) -> dict:
    """Nested representation returned by every property endpoint"""
    coordinates = None
    if prop.latitude is not None and prop.longitude is not None:
        coordinates = {"lat": prop.latitude, "lng": prop.longitude}

    return {
        "id": prop.id,
        "property_code": prop.property_code,
        "name": prop.name,
        "property_type": prop.property_type,
        "status": prop.status,
        "description": prop.description,
        "address": {
            "street": prop.street,
            "city": prop.city,
            "state": prop.state,
            "zip_code": prop.zip_code,
            "country": prop.country,
            "coordinates": coordinates,
        },
        "owner": _user_summary(prop.owner),
        "manager": _user_summary(prop.manager),
        "features": prop.features,
        "amenities": prop.amenities,
        "images": prop.images,
        "floor_plan": prop.floor_plan,
        "virtual_tour": prop.virtual_tour,
        "details": {field: getattr(prop, field) for field in _DETAIL_FIELDS},
        "financials": {
            **{field: getattr(prop, field) for field in _FINANCIAL_FIELDS},
            "utilities": prop.utilities,
        },
        "lease": prop.lease,
        "maintenance": {
            "last_inspection": prop.last_inspection,
            "next_inspection": prop.next_inspection,
            "schedule": prop.maintenance_schedule,
            "history": [ticket.ticket_id for ticket in prop.maintenance_requests],
        },
        "documents": [doc.id for doc in prop.documents],
        "notes": prop.notes,
        "tags": prop.tags,
        "metrics": prop.metrics,
        "created_at": prop.created_at,
        "updated_at": prop.updated_at,
    }


def ensure_can_manage(prop: Property, user: User) -> None:
    """Admins manage every property; managers and owners only the ones they own."""
    if user.role != UserRole.ADMIN and prop.owner_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to modify this property",
        )


# ==================== PROXIMITY ====================

def point_ewkt(lat: float, lng: float) -> str:
    """Extended WKT for a WGS84 point; PostGIS takes longitude first"""
    return f"SRID=4326;POINT({lng} {lat})"


def nearby_clauses(dialect_name: str, origin: Property, radius: float) -> Tuple[list, Any]:
    """
    Filters and a distance expression for properties around `origin`.

    On PostgreSQL this is PostGIS geography math on `location`
    (ST_DWithin can use the GiST index). Elsewhere the distance is the
    equirectangular approximation over latitude/longitude, returned squared
    so it needs no SQL math functions, behind a bounding box on the
    (latitude, longitude) index.
    """
    if dialect_name == "postgresql":
        here = func.ST_GeogFromText(point_ewkt(origin.latitude, origin.longitude))
        filters = [func.ST_DWithin(Property.location, here, radius)]
        return filters, func.ST_Distance(Property.location, here)

    lng_scale = max(cos(radians(origin.latitude)), 1e-6)
    lat_span = radius / METERS_PER_DEGREE
    lng_span = lat_span / lng_scale

    dy = (Property.latitude - origin.latitude) * METERS_PER_DEGREE
    dx = (Property.longitude - origin.longitude) * (METERS_PER_DEGREE * lng_scale)
    distance_squared = dx * dx + dy * dy

    filters = [
        Property.latitude.between(origin.latitude - lat_span, origin.latitude + lat_span),
        Property.longitude.between(origin.longitude - lng_span, origin.longitude + lng_span),
        distance_squared <= radius * radius,
    ]
    return filters, distance_squared


def find_nearby(
    db: Session,
    origin: Property,
    radius_meters: Optional[float] = None,
    limit: Optional[int] = None,
) -> List[Tuple[Property, float]]:
    """
    Other properties within `radius_meters` of `origin`, nearest first.

    Raises:
        HTTPException 400 when the origin has no coordinates.
    """
    if origin.latitude is None or origin.longitude is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Property has no coordinates",
        )

    radius = radius_meters if radius_meters is not None else settings.NEARBY_RADIUS_METERS
    limit = limit if limit is not None else settings.NEARBY_LIMIT

    dialect_name = db.get_bind().dialect.name
    filters, distance = nearby_clauses(dialect_name, origin, radius)

    rows = db.query(Property, distance.label("distance"))\
        .filter(Property.id != origin.id, Property.location.isnot(None), *filters)\
        .order_by(distance)\
        .limit(limit)\
        .all()
    logger.debug(f"[NEARBY] {origin.id}: {len(rows)} within {radius:.0f}m ({dialect_name})")

    if dialect_name == "postgresql":
        return [(prop, float(meters)) for prop, meters in rows]
    return [(prop, float(squared) ** 0.5) for prop, squared in rows]
