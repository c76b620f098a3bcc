from pydantic import BaseModel, EmailStr, Field, model_validator
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from rentdesk.models.tenant import ContactMethod, TenantStatus
from rentdesk.schemas.common import NaiveDatetime, UpdateSchema
from rentdesk.schemas.property import PropertySummary
from rentdesk.schemas.user import UserSummary


class EmergencyContact(BaseModel):
    name: str = Field(..., min_length=1)
    relationship: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None


class Employment(BaseModel):
    employer: Optional[str] = None
    position: Optional[str] = None
    salary: Optional[float] = Field(None, ge=0)
    start_date: Optional[NaiveDatetime] = None
    supervisor_name: Optional[str] = None
    supervisor_phone: Optional[str] = None


class Reference(BaseModel):
    name: str
    relationship: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None


class Vehicle(BaseModel):
    make: str
    model: str
    year: Optional[int] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None


class Pet(BaseModel):
    type: str
    breed: Optional[str] = None
    name: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)


class Background(BaseModel):
    credit_score: Optional[int] = Field(None, ge=300, le=850)
    criminal_record: bool = False
    eviction_history: bool = False
    bankruptcy: bool = False
    verification_date: Optional[NaiveDatetime] = None


class TenantCreate(BaseModel):
    user_id: UUID
    property_id: UUID
    lease_start: NaiveDatetime
    lease_end: NaiveDatetime
    monthly_rent: float = Field(..., ge=0)
    security_deposit: float = Field(..., ge=0)
    deposit_paid: bool = False
    emergency_contact: EmergencyContact
    employment: Optional[Employment] = None
    references: List[Reference] = []
    vehicles: List[Vehicle] = []
    pets: List[Pet] = []
    background: Optional[Background] = None
    notes: Optional[str] = None
    status: TenantStatus = TenantStatus.ACTIVE
    move_in_date: Optional[NaiveDatetime] = None
    move_in_condition: Optional[str] = None
    auto_pay_enabled: bool = False
    preferred_contact_method: ContactMethod = ContactMethod.EMAIL

    @model_validator(mode="after")
    def check_lease(self):
        if self.lease_end <= self.lease_start:
            raise ValueError("lease_end must be after lease_start")
        if self.status not in (TenantStatus.ACTIVE, TenantStatus.PENDING):
            raise ValueError("a new tenancy must be active or pending")
        return self


class TenantUpdate(UpdateSchema):
    """
    Allow-listed tenant edit.
    user, property, payment history and documents are not writable here.
    """
    not_nullable = (
        "lease_start", "lease_end", "monthly_rent", "security_deposit", "deposit_paid",
        "emergency_contact", "references", "vehicles", "pets", "status",
        "balance", "auto_pay_enabled", "preferred_contact_method",
    )

    lease_start: Optional[NaiveDatetime] = None
    lease_end: Optional[NaiveDatetime] = None
    monthly_rent: Optional[float] = Field(None, ge=0)
    security_deposit: Optional[float] = Field(None, ge=0)
    deposit_paid: Optional[bool] = None
    emergency_contact: Optional[EmergencyContact] = None
    employment: Optional[Employment] = None
    references: Optional[List[Reference]] = None
    vehicles: Optional[List[Vehicle]] = None
    pets: Optional[List[Pet]] = None
    background: Optional[Background] = None
    notes: Optional[str] = None
    status: Optional[TenantStatus] = None
    move_in_date: Optional[NaiveDatetime] = None
    move_out_date: Optional[NaiveDatetime] = None
    move_in_condition: Optional[str] = None
    move_out_condition: Optional[str] = None
    balance: Optional[float] = None
    auto_pay_enabled: Optional[bool] = None
    preferred_contact_method: Optional[ContactMethod] = None


class MoveOutRequest(BaseModel):
    move_out_date: Optional[NaiveDatetime] = None
    move_out_condition: Optional[str] = None


class TenantDocumentCreate(BaseModel):
    type: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class TenantResponse(BaseModel):
    id: UUID
    user_id: UUID
    property_id: Optional[UUID] = None
    user: Optional[UserSummary] = None
    property: Optional[PropertySummary] = None
    lease_start: datetime
    lease_end: datetime
    monthly_rent: float
    security_deposit: float
    deposit_paid: bool
    emergency_contact: dict
    employment: Optional[dict] = None
    references: list
    vehicles: list
    pets: list
    background: Optional[dict] = None
    payment_history: list
    documents: list
    notes: Optional[str] = None
    status: TenantStatus
    move_in_date: Optional[datetime] = None
    move_out_date: Optional[datetime] = None
    move_in_condition: Optional[str] = None
    move_out_condition: Optional[str] = None
    balance: float
    auto_pay_enabled: bool
    preferred_contact_method: ContactMethod
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
