from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import List, Optional

from rentdesk.models.payment import PaymentMethod, PaymentStatus, PaymentType, ReminderMethod
from rentdesk.schemas.common import NaiveDatetime, UpdateSchema
from rentdesk.schemas.property import PropertySummary


class InvoiceItem(BaseModel):
    description: str
    amount: float = Field(..., ge=0)


class Invoice(BaseModel):
    number: Optional[str] = None
    issued_date: Optional[NaiveDatetime] = None
    items: List[InvoiceItem] = []


class Receipt(BaseModel):
    number: Optional[str] = None
    url: Optional[str] = None
    issued_date: Optional[NaiveDatetime] = None


class BankDetails(BaseModel):
    bank_name: Optional[str] = None
    account_last4: Optional[str] = Field(None, pattern=r"^\d{4}$")
    routing_number: Optional[str] = None


class CardDetails(BaseModel):
    brand: Optional[str] = None
    last4: Optional[str] = Field(None, pattern=r"^\d{4}$")
    expiry_month: Optional[int] = Field(None, ge=1, le=12)
    expiry_year: Optional[int] = None


class Recurring(BaseModel):
    enabled: bool = False
    frequency: Optional[str] = None
    next_date: Optional[NaiveDatetime] = None
    end_date: Optional[NaiveDatetime] = None


class SplitPart(BaseModel):
    tenant_id: Optional[UUID] = None
    amount: float = Field(..., ge=0)


class SplitPayment(BaseModel):
    enabled: bool = False
    parts: List[SplitPart] = []


class PaymentCreate(BaseModel):
    property_id: UUID
    tenant_id: UUID
    payment_type: PaymentType
    amount: float = Field(..., ge=0)
    due_date: NaiveDatetime
    description: str = Field(..., min_length=1, max_length=500)
    method: Optional[PaymentMethod] = None
    processing_fee: Optional[float] = Field(None, ge=0)
    late_fee: Optional[float] = Field(None, ge=0)
    invoice: Optional[Invoice] = None
    bank_details: Optional[BankDetails] = None
    card_details: Optional[CardDetails] = None
    recurring: Optional[Recurring] = None
    split_payment: Optional[SplitPayment] = None
    notes: Optional[str] = None


class PayRequest(BaseModel):
    method: PaymentMethod
    transaction_id: Optional[str] = None


class PaymentUpdate(UpdateSchema):
    """
    Allow-listed payment edit.
    payment_code, tenant, property and the append-only logs are not writable.
    """
    not_nullable = ("payment_type", "amount", "due_date", "status", "description")

    payment_type: Optional[PaymentType] = None
    amount: Optional[float] = Field(None, ge=0)
    due_date: Optional[NaiveDatetime] = None
    paid_date: Optional[NaiveDatetime] = None
    status: Optional[PaymentStatus] = None
    method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = None
    processing_fee: Optional[float] = Field(None, ge=0)
    late_fee: Optional[float] = Field(None, ge=0)
    description: Optional[str] = Field(None, min_length=1, max_length=500)
    invoice: Optional[Invoice] = None
    receipt: Optional[Receipt] = None
    bank_details: Optional[BankDetails] = None
    card_details: Optional[CardDetails] = None
    recurring: Optional[Recurring] = None
    split_payment: Optional[SplitPayment] = None
    notes: Optional[str] = None


class ReminderCreate(BaseModel):
    method: ReminderMethod = ReminderMethod.EMAIL


class DisputeCreate(BaseModel):
    reason: str = Field(..., min_length=1)


class PaymentResponse(BaseModel):
    id: UUID
    payment_code: str
    property_id: Optional[UUID] = None
    tenant_id: UUID
    property: Optional[PropertySummary] = None
    payment_type: PaymentType
    amount: float
    due_date: datetime
    paid_date: Optional[datetime] = None
    status: PaymentStatus
    method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = None
    processing_fee: Optional[float] = None
    late_fee: Optional[float] = None
    description: str
    invoice: Optional[dict] = None
    receipt: Optional[dict] = None
    bank_details: Optional[dict] = None
    card_details: Optional[dict] = None
    recurring: Optional[dict] = None
    split_payment: Optional[dict] = None
    notes: Optional[str] = None
    reminders: list
    disputes: list
    created_by_id: UUID
    updated_by_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
