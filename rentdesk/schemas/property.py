from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Optional

from rentdesk.models.property import PropertyStatus, PropertyType
from rentdesk.schemas.common import NaiveDatetime, UpdateSchema


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class PropertyAddress(BaseModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = "USA"
    coordinates: Optional[Coordinates] = None


class PropertyDetails(BaseModel):
    bedrooms: int = Field(..., ge=0)
    bathrooms: float = Field(..., ge=0)
    square_feet: int = Field(..., ge=0)
    year_built: int = Field(..., ge=1600, le=2100)
    lot_size: Optional[float] = Field(None, ge=0)
    parking_spaces: Optional[int] = Field(None, ge=0)
    furnished: bool = False
    pets_allowed: bool = False
    smoking_allowed: bool = False


class Utilities(BaseModel):
    water: bool = False
    electricity: bool = False
    gas: bool = False
    internet: bool = False
    trash: bool = False
    sewer: bool = False


class PropertyFinancials(BaseModel):
    purchase_price: Optional[float] = Field(None, ge=0)
    current_value: Optional[float] = Field(None, ge=0)
    monthly_rent: float = Field(..., ge=0)
    security_deposit: float = Field(..., ge=0)
    application_fee: Optional[float] = Field(None, ge=0)
    pet_deposit: Optional[float] = Field(None, ge=0)
    utilities: Utilities = Utilities()
    property_tax: Optional[float] = Field(None, ge=0)
    insurance: Optional[float] = Field(None, ge=0)
    hoa: Optional[float] = Field(None, ge=0)
    management_fee: Optional[float] = Field(None, ge=0)


class MaintenanceSchedule(BaseModel):
    last_inspection: Optional[NaiveDatetime] = None
    next_inspection: Optional[NaiveDatetime] = None
    schedule: dict = {}


class PropertyMetrics(BaseModel):
    occupancy_rate: float = 0
    total_revenue: float = 0
    total_expenses: float = 0
    net_income: float = 0


class PropertyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    property_type: PropertyType
    description: str = Field(..., min_length=1)
    address: PropertyAddress
    manager_id: Optional[UUID] = None
    status: PropertyStatus = PropertyStatus.AVAILABLE
    features: List[str] = []
    amenities: List[str] = []
    images: List[str] = []
    floor_plan: Optional[str] = None
    virtual_tour: Optional[str] = None
    details: PropertyDetails
    financials: PropertyFinancials
    maintenance: Optional[MaintenanceSchedule] = None
    notes: Optional[str] = None
    tags: List[str] = []
    metrics: Optional[PropertyMetrics] = None


# ==================== Partial update blocks ====================

class PropertyAddressUpdate(UpdateSchema):
    not_nullable = ("street", "city", "state", "zip_code", "country")

    street: Optional[str] = Field(None, min_length=1)
    city: Optional[str] = Field(None, min_length=1)
    state: Optional[str] = Field(None, min_length=1)
    zip_code: Optional[str] = Field(None, min_length=1)
    country: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class PropertyDetailsUpdate(UpdateSchema):
    not_nullable = (
        "bedrooms", "bathrooms", "square_feet", "year_built",
        "furnished", "pets_allowed", "smoking_allowed",
    )

    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[float] = Field(None, ge=0)
    square_feet: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = Field(None, ge=1600, le=2100)
    lot_size: Optional[float] = Field(None, ge=0)
    parking_spaces: Optional[int] = Field(None, ge=0)
    furnished: Optional[bool] = None
    pets_allowed: Optional[bool] = None
    smoking_allowed: Optional[bool] = None


class UtilitiesUpdate(UpdateSchema):
    not_nullable = ("water", "electricity", "gas", "internet", "trash", "sewer")

    water: Optional[bool] = None
    electricity: Optional[bool] = None
    gas: Optional[bool] = None
    internet: Optional[bool] = None
    trash: Optional[bool] = None
    sewer: Optional[bool] = None


class PropertyFinancialsUpdate(UpdateSchema):
    not_nullable = ("monthly_rent", "security_deposit", "utilities")

    purchase_price: Optional[float] = Field(None, ge=0)
    current_value: Optional[float] = Field(None, ge=0)
    monthly_rent: Optional[float] = Field(None, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    application_fee: Optional[float] = Field(None, ge=0)
    pet_deposit: Optional[float] = Field(None, ge=0)
    utilities: Optional[UtilitiesUpdate] = None
    property_tax: Optional[float] = Field(None, ge=0)
    insurance: Optional[float] = Field(None, ge=0)
    hoa: Optional[float] = Field(None, ge=0)
    management_fee: Optional[float] = Field(None, ge=0)


class MaintenanceScheduleUpdate(UpdateSchema):
    not_nullable = ("schedule",)

    last_inspection: Optional[NaiveDatetime] = None
    next_inspection: Optional[NaiveDatetime] = None
    schedule: Optional[dict] = None


class PropertyMetricsUpdate(UpdateSchema):
    not_nullable = ("occupancy_rate", "total_revenue", "total_expenses", "net_income")

    occupancy_rate: Optional[float] = None
    total_revenue: Optional[float] = None
    total_expenses: Optional[float] = None
    net_income: Optional[float] = None


class PropertyUpdate(UpdateSchema):
    """
    Allow-listed property edit.
    property_code, owner and the lease snapshot are not writable here.
    """
    not_nullable = (
        "name", "property_type", "description", "status",
        "features", "amenities", "images", "tags", "metrics",
    )

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    property_type: Optional[PropertyType] = None
    description: Optional[str] = Field(None, min_length=1)
    address: Optional[PropertyAddressUpdate] = None
    manager_id: Optional[UUID] = None
    status: Optional[PropertyStatus] = None
    features: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    floor_plan: Optional[str] = None
    virtual_tour: Optional[str] = None
    details: Optional[PropertyDetailsUpdate] = None
    financials: Optional[PropertyFinancialsUpdate] = None
    maintenance: Optional[MaintenanceScheduleUpdate] = None
    notes: Optional[str] = None
    tags: Optional[List[str]] = None
    metrics: Optional[PropertyMetricsUpdate] = None


class PropertySummary(BaseModel):
    """Embedded property reference on tenants, tickets and payments"""
    id: UUID
    property_code: str
    name: str
    status: PropertyStatus
    street: str
    city: str
    state: str

    class Config:
        from_attributes = True
