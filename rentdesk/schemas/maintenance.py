"""
Maintenance request schemas
"""
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from rentdesk.models.maintenance import (
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceStatus,
    RecurrenceFrequency,
)
from rentdesk.schemas.common import NaiveDatetime, UpdateSchema
from rentdesk.schemas.property import PropertySummary
from rentdesk.schemas.user import UserSummary


class Vendor(BaseModel):
    name: str
    contact: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class MaterialItem(BaseModel):
    item: str
    quantity: float = Field(1, ge=0)
    cost: float = Field(0, ge=0)


class RecurringSchedule(BaseModel):
    frequency: RecurrenceFrequency
    next_date: Optional[NaiveDatetime] = None


class Satisfaction(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    feedback: Optional[str] = None
    date: Optional[NaiveDatetime] = None


class MaintenanceCreate(BaseModel):
    property_id: UUID
    tenant_id: Optional[UUID] = None
    category: MaintenanceCategory
    priority: MaintenancePriority = MaintenancePriority.MEDIUM
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=255)
    images: List[str] = []
    scheduled_date: Optional[NaiveDatetime] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    assigned_to_id: Optional[UUID] = None
    vendor: Optional[Vendor] = None
    recurring_schedule: Optional[RecurringSchedule] = None


class MaintenanceUpdate(UpdateSchema):
    """
    Allow-listed ticket edit.
    ticket_id, reporter, property, tenant, timeline and notes are not writable.
    `comment` is only used for the timeline entry of a status change.
    """
    not_nullable = (
        "category", "priority", "status", "title", "description",
        "location", "images", "materials",
    )

    category: Optional[MaintenanceCategory] = None
    priority: Optional[MaintenancePriority] = None
    status: Optional[MaintenanceStatus] = None
    comment: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    images: Optional[List[str]] = None
    scheduled_date: Optional[NaiveDatetime] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    assigned_to_id: Optional[UUID] = None
    vendor: Optional[Vendor] = None
    materials: Optional[List[MaterialItem]] = None
    labor_hours: Optional[float] = Field(None, ge=0)
    recurring_schedule: Optional[RecurringSchedule] = None
    satisfaction: Optional[Satisfaction] = None


class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1)


class MaintenanceResponse(BaseModel):
    id: UUID
    ticket_id: str
    property_id: Optional[UUID] = None
    tenant_id: Optional[UUID] = None
    property: Optional[PropertySummary] = None
    reported_by: Optional[UserSummary] = None
    assigned_to: Optional[UserSummary] = None
    category: MaintenanceCategory
    priority: MaintenancePriority
    status: MaintenanceStatus
    title: str
    description: str
    location: str
    images: list
    scheduled_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    vendor: Optional[dict] = None
    notes: list
    timeline: list
    materials: list
    labor_hours: Optional[float] = None
    recurring_schedule: Optional[dict] = None
    satisfaction: Optional[dict] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
